# models/application.py

from extensions import db
from datetime import datetime
from sqlalchemy import CheckConstraint

APPLICATION_STATUSES = ('draft', 'submitted', 'accepted', 'rejected', 'waitlisted')

class Application(db.Model):
    __tablename__ = 'applications'

    id = db.Column(db.Integer, primary_key=True)
    hackathon_id = db.Column(db.Integer, db.ForeignKey('hackathons.id', ondelete='CASCADE'), nullable=False)
    team_id = db.Column(db.Integer, db.ForeignKey('teams.id', ondelete='SET NULL'), nullable=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='draft')
    abstract = db.Column(db.Text, nullable=True)
    presentation_url = db.Column(db.String, nullable=True)

    # HACK-XXXX-XXXXXX, encoded into the team's check-in QR code
    team_code = db.Column(db.String(16), nullable=True, unique=True)
    checked_in = db.Column(db.Boolean, nullable=False, default=False)
    check_in_time = db.Column(db.DateTime, nullable=True)

    submitted_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    team = db.relationship('Team', backref=db.backref('applications', lazy=True))
    user = db.relationship('User')

    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'submitted', 'accepted', 'rejected', 'waitlisted')",
            name="check_application_status"
        ),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'hackathon_id': self.hackathon_id,
            'team_id': self.team_id,
            'team_name': self.team.team_name if self.team else None,
            'user_id': self.user_id,
            'status': self.status,
            'abstract': self.abstract,
            'presentation_url': self.presentation_url,
            'team_code': self.team_code,
            'checked_in': self.checked_in,
            'check_in_time': self.check_in_time.isoformat() if self.check_in_time else None,
            'submitted_at': self.submitted_at.isoformat() if self.submitted_at else None,
        }
