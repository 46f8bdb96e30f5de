# models/team.py

from extensions import db
from datetime import datetime
from sqlalchemy import CheckConstraint, UniqueConstraint

class Team(db.Model):
    __tablename__ = 'teams'

    id = db.Column(db.Integer, primary_key=True)
    hackathon_id = db.Column(db.Integer, db.ForeignKey('hackathons.id', ondelete='CASCADE'), nullable=False)
    team_name = db.Column(db.String, nullable=False)
    # External code printed on badges and QR codes
    team_unique_id = db.Column(db.String(8), unique=True, nullable=True, index=True)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    members = db.relationship('TeamMember', backref='team', lazy=True, cascade="all, delete-orphan")

    # A team owns zero or one project
    project = db.relationship('Project', backref='team', uselist=False)

    def accepted_members(self):
        return [m for m in self.members if m.join_status == 'accepted']

    def leader(self):
        for m in self.members:
            if m.role == 'leader':
                return m
        return None

    def to_dict(self):
        return {
            'id': self.id,
            'hackathon_id': self.hackathon_id,
            'team_name': self.team_name,
            'team_unique_id': self.team_unique_id,
            'created_by': self.created_by,
        }


class TeamMember(db.Model):
    __tablename__ = 'team_members'

    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(db.Integer, db.ForeignKey('teams.id', ondelete='CASCADE'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    role = db.Column(db.String(20), nullable=False, default='member')
    join_status = db.Column(db.String(20), nullable=False, default='accepted')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    user = db.relationship('User', back_populates='team_memberships')

    __table_args__ = (
        UniqueConstraint('team_id', 'user_id', name='unique_team_member'),
        CheckConstraint("role IN ('leader', 'member')", name="check_team_role"),
        CheckConstraint("join_status IN ('pending', 'accepted', 'rejected')", name="check_join_status"),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'name': self.user.display_name if self.user else None,
            'role': self.role,
            'join_status': self.join_status,
        }
