# models/notification.py

from extensions import db
from datetime import datetime
from sqlalchemy import CheckConstraint

class Notification(db.Model):
    __tablename__ = 'notifications'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    type = db.Column(db.String(20), nullable=False)
    title = db.Column(db.String, nullable=True)
    message = db.Column(db.Text, nullable=False)
    read = db.Column(db.Boolean, nullable=False, default=False)
    # 'metadata' is reserved by declarative models
    payload = db.Column(db.JSON, nullable=False, default=dict)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("type IN ('application', 'team_invite', 'hackathon', 'admin')", name="check_notification_type"),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'title': self.title,
            'message': self.message,
            'read': self.read,
            'payload': self.payload,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
