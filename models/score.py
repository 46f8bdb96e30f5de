from extensions import db
from sqlalchemy import CheckConstraint

class JudgeScore(db.Model):
    __tablename__ = 'judge_scores'
    id = db.Column(db.Integer, primary_key=True)
    judge_id = db.Column(db.Integer, db.ForeignKey('judges.id', ondelete='CASCADE'), nullable=False)
    team_id = db.Column(db.Integer, db.ForeignKey('teams.id', ondelete='CASCADE'), nullable=False)
    hackathon_id = db.Column(db.Integer, db.ForeignKey('hackathons.id', ondelete='CASCADE'), nullable=False)
    rubric_id = db.Column(db.Integer, db.ForeignKey('judging_rubrics.id', ondelete='CASCADE'), nullable=False)
    round_number = db.Column(db.Integer, nullable=False, default=1)
    score = db.Column(db.Integer, nullable=False, default=0)
    submitted = db.Column(db.Boolean, nullable=False, default=False)
    scored_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    judge = db.relationship('Judge')
    rubric = db.relationship('Rubric')

    __table_args__ = (
        db.UniqueConstraint('judge_id', 'team_id', 'rubric_id', 'round_number', name='unique_judge_score'),
        CheckConstraint("score >= 0", name="check_score"),
        CheckConstraint("round_number IN (1, 2)", name="check_score_round"),
    )
