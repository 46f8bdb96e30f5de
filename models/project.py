# models/project.py

from extensions import db
from datetime import datetime

class Project(db.Model):
    __tablename__ = 'projects'

    id = db.Column(db.Integer, primary_key=True)
    hackathon_id = db.Column(db.Integer, db.ForeignKey('hackathons.id', ondelete='CASCADE'), nullable=False)
    team_id = db.Column(db.Integer, db.ForeignKey('teams.id', ondelete='SET NULL'), nullable=True, unique=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    title = db.Column(db.String, nullable=False)
    description = db.Column(db.Text, nullable=True)
    repo_url = db.Column(db.String, nullable=True)
    demo_url = db.Column(db.String, nullable=True)
    video_url = db.Column(db.String, nullable=True)
    submitted = db.Column(db.Boolean, nullable=False, default=False)
    winner_position = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    hackathon = db.relationship('Hackathon', backref=db.backref('projects', lazy=True, cascade="all, delete-orphan"))

    def to_dict(self):
        return {
            'id': self.id,
            'hackathon_id': self.hackathon_id,
            'team_id': self.team_id,
            'title': self.title,
            'description': self.description,
            'repo_url': self.repo_url,
            'demo_url': self.demo_url,
            'video_url': self.video_url,
            'submitted': self.submitted,
            'winner_position': self.winner_position,
        }
