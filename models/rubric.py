# models/rubric.py

from extensions import db
from sqlalchemy import CheckConstraint

class Rubric(db.Model):
    __tablename__ = 'judging_rubrics'
    id = db.Column(db.Integer, primary_key=True)
    hackathon_id = db.Column(db.Integer, db.ForeignKey('hackathons.id', ondelete='CASCADE'), nullable=False)
    name = db.Column(db.String, nullable=False)
    description = db.Column(db.Text, nullable=True)
    max_score = db.Column(db.Integer, nullable=False, default=10)
    weight = db.Column(db.Float, nullable=False, default=1.0)
    sort_order = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("max_score > 0", name="check_rubric_max_score"),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'max_score': self.max_score,
            'weight': self.weight,
            'sort_order': self.sort_order,
        }
