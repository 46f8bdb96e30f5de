# models/hackathon.py

from extensions import db
from datetime import datetime
from sqlalchemy import CheckConstraint

class Hackathon(db.Model):
    __tablename__ = 'hackathons'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String, nullable=False)
    tagline = db.Column(db.String, nullable=True)
    description = db.Column(db.Text, nullable=True)
    mode = db.Column(db.String(20), nullable=False, default='online')
    location = db.Column(db.String, nullable=True)
    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)
    application_deadline = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(20), nullable=False, default='draft')
    min_team_size = db.Column(db.Integer, nullable=False, default=1)
    max_team_size = db.Column(db.Integer, nullable=False, default=4)
    is_gallery_public = db.Column(db.Boolean, nullable=False, default=False)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    creator = db.relationship('User')

    # Cascade on the ORM side, deleting a hackathon removes everything it owns
    rubrics = db.relationship('Rubric', backref='hackathon', lazy=True,
                              order_by='Rubric.sort_order', cascade="all, delete-orphan")
    teams = db.relationship('Team', backref='hackathon', lazy=True, cascade="all, delete-orphan")
    judges = db.relationship('Judge', backref='hackathon', lazy=True, cascade="all, delete-orphan")
    applications = db.relationship('Application', backref='hackathon', lazy=True, cascade="all, delete-orphan")
    organizer_team = db.relationship('OrganizerMember', backref='hackathon', lazy=True, cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("mode IN ('online', 'offline', 'hybrid')", name="check_hackathon_mode"),
        CheckConstraint("status IN ('draft', 'live', 'ended')", name="check_hackathon_status"),
        CheckConstraint("min_team_size >= 1 AND max_team_size >= min_team_size", name="check_team_size"),
    )

    def is_organizer(self, user_id):
        """Creator of the hackathon or an accepted member of its organizer team."""
        if user_id is None:
            return False
        if self.created_by == user_id:
            return True
        return any(m.user_id == user_id and m.accepted for m in self.organizer_team)

    def organizer_ids(self):
        ids = [self.created_by] if self.created_by else []
        for member in self.organizer_team:
            if member.accepted and member.user_id and member.user_id not in ids:
                ids.append(member.user_id)
        return ids

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'tagline': self.tagline,
            'description': self.description,
            'mode': self.mode,
            'location': self.location,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
            'application_deadline': self.application_deadline.isoformat() if self.application_deadline else None,
            'status': self.status,
            'min_team_size': self.min_team_size,
            'max_team_size': self.max_team_size,
            'is_gallery_public': self.is_gallery_public,
            'created_by': self.created_by,
        }
