# models/judge.py

from extensions import db
from datetime import datetime
from sqlalchemy import CheckConstraint

class Judge(db.Model):
    __tablename__ = 'judges'
    id = db.Column(db.Integer, primary_key=True)
    hackathon_id = db.Column(db.Integer, db.ForeignKey('hackathons.id', ondelete='CASCADE'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    added_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    user = db.relationship('User', foreign_keys=[user_id])
    assignments = db.relationship('JudgeAssignment', backref='judge', lazy=True, cascade="all, delete-orphan")

    __table_args__ = (
        db.UniqueConstraint('hackathon_id', 'user_id', name='unique_judge_hackathon'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'hackathon_id': self.hackathon_id,
            'user_id': self.user_id,
            'name': self.user.display_name if self.user else None,
        }


class JudgeAssignment(db.Model):
    __tablename__ = 'judge_team_assignments'
    id = db.Column(db.Integer, primary_key=True)
    judge_id = db.Column(db.Integer, db.ForeignKey('judges.id', ondelete='CASCADE'), nullable=False)
    team_id = db.Column(db.Integer, db.ForeignKey('teams.id', ondelete='CASCADE'), nullable=False)
    hackathon_id = db.Column(db.Integer, db.ForeignKey('hackathons.id', ondelete='CASCADE'), nullable=False)
    round_number = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    team = db.relationship('Team')

    __table_args__ = (
        db.UniqueConstraint('judge_id', 'team_id', 'round_number', name='unique_judge_team_round'),
        CheckConstraint("round_number IN (1, 2)", name="check_assignment_round"),
    )
