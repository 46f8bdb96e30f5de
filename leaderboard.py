# leaderboard.py
# Ranking of teams by the raw sum of all judge scores.

from sqlalchemy import func
from sqlalchemy.orm import joinedload

from extensions import db
from models import Team, JudgeScore
from cache import get_cache

BADGES = {1: 'champion', 2: 'silver', 3: 'bronze'}


def _score_sums(hackathon_id):
    rows = db.session.query(JudgeScore.team_id, func.sum(JudgeScore.score)).filter(
        JudgeScore.hackathon_id == hackathon_id
    ).group_by(JudgeScore.team_id).all()
    return {team_id: int(total or 0) for team_id, total in rows}


def build_leaderboard(hackathon_id):
    """Teams of a hackathon ranked by the unweighted sum of every score row.

    Scores are summed across judges, rubrics and rounds. Teams without scores
    rank with 0. Equal totals keep team creation order.
    """
    def load():
        totals = _score_sums(hackathon_id)
        teams = Team.query.options(joinedload(Team.project)).filter_by(
            hackathon_id=hackathon_id
        ).order_by(Team.id).all()

        ranked = sorted(
            ({
                'team_id': team.id,
                'team_name': team.team_name,
                'team_unique_id': team.team_unique_id,
                'project_title': team.project.title if team.project else None,
                'total_score': totals.get(team.id, 0),
            } for team in teams),
            key=lambda row: row['total_score'],
            reverse=True,
        )
        for position, row in enumerate(ranked, start=1):
            row['position'] = position
            row['badge'] = BADGES.get(position)
        return ranked

    return get_cache().get_or_load(('leaderboard', hackathon_id), load)


def team_total_score(team_id):
    def load():
        total = db.session.query(func.sum(JudgeScore.score)).filter(
            JudgeScore.team_id == team_id
        ).scalar()
        return int(total or 0)

    return get_cache().get_or_load(('team-total', team_id), load)
