from extensions import db
from sqlalchemy import CheckConstraint

class OrganizerMember(db.Model):
    __tablename__ = 'organizer_team'
    id = db.Column(db.Integer, primary_key=True)
    hackathon_id = db.Column(db.Integer, db.ForeignKey('hackathons.id', ondelete='CASCADE'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    role = db.Column(db.String(20), nullable=False, default='reviewer')
    accepted = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    user = db.relationship('User')

    __table_args__ = (
        db.UniqueConstraint('hackathon_id', 'user_id', name='unique_organizer_member'),
        CheckConstraint("role IN ('admin', 'reviewer', 'volunteer')", name="check_organizer_role"),
    )
