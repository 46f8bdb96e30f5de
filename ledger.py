# ledger.py
# Judging workflow: score and feedback ledgers, completion check, weighted preview.

import logging
from datetime import datetime

from flask import current_app
from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from extensions import db
from models import Judge, JudgeAssignment, JudgeScore, JudgeFeedback, Rubric, Application
from errors import (InvalidRound, ScoreOutOfRange, IncompleteEvaluation, NotAssigned,
                    LedgerWriteError, ValidationError, NotFound)
from signals import evaluation_submitted
from cache import get_cache

logger = logging.getLogger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    'postgresql': postgresql.insert,
    'sqlite': sqlite.insert,
}


def _upsert(model, key, values):
    """Insert a row or overwrite it in place, keyed by the model's natural unique key.

    ``key`` holds the unique-constraint columns, ``values`` the columns to
    write. Runs as a single statement where the dialect supports it.
    """
    dialect = db.session.get_bind().dialect.name
    insert = _UPSERT_INSERTS.get(dialect)

    if insert is None:
        existing = model.query.filter_by(**key).first()
        if existing:
            for column, value in values.items():
                setattr(existing, column, value)
        else:
            db.session.add(model(**key, **values))
        db.session.flush()
        return

    stmt = insert(model.__table__).values(**key, **values)
    stmt = stmt.on_conflict_do_update(
        index_elements=list(key),
        set_={column: stmt.excluded[column] for column in values},
    )
    db.session.execute(stmt)


def _check_round(round_number):
    # True == 1, so bools would pass the membership test
    if isinstance(round_number, bool) or round_number not in current_app.config['JUDGING_ROUNDS']:
        raise InvalidRound(f'Round must be one of {current_app.config["JUDGING_ROUNDS"]}, got {round_number!r}.')


def _check_value(rubric, value):
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f'Score for "{rubric.name}" must be a whole number.')
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Score for "{rubric.name}" must be a whole number.')
    if number < 0 or number > rubric.max_score:
        raise ScoreOutOfRange(f'Score for "{rubric.name}" must be between 0 and {rubric.max_score}, got {number}.')
    return number


# --- Lookups ---

def get_judge(hackathon_id, user_id):
    return Judge.query.filter_by(hackathon_id=hackathon_id, user_id=user_id).first()


def get_rubrics(hackathon_id):
    return Rubric.query.filter_by(hackathon_id=hackathon_id).order_by(Rubric.sort_order, Rubric.id).all()


def is_assigned(judge, team_id, round_number):
    return JudgeAssignment.query.filter_by(
        judge_id=judge.id, team_id=team_id, round_number=round_number
    ).first() is not None


# --- Score ledger ---

def upsert_score(judge, team_id, rubric, round_number, value, submitted=True):
    _check_round(round_number)
    if rubric.hackathon_id != judge.hackathon_id:
        raise ValidationError(f'Rubric "{rubric.name}" does not belong to this hackathon.')
    score = _check_value(rubric, value)

    _upsert(
        JudgeScore,
        key={'judge_id': judge.id, 'team_id': team_id, 'rubric_id': rubric.id, 'round_number': round_number},
        values={'hackathon_id': judge.hackathon_id, 'score': score, 'submitted': submitted,
                'scored_at': datetime.utcnow()},
    )
    return score


def upsert_scores(judge, team_id, round_number, values, submitted=True):
    """Write one score per rubric in ``values`` ({rubric_id: value}).

    Writes run one after another and the first failure stops the loop. Nothing
    is committed here; the caller owns the transaction.
    """
    _check_round(round_number)
    rubrics = {r.id: r for r in get_rubrics(judge.hackathon_id)}

    written = {}
    for rubric_id, value in values.items():
        rubric = rubrics.get(int(rubric_id))
        if rubric is None:
            raise NotFound(f'Rubric {rubric_id} not found for this hackathon.')
        written[rubric.id] = upsert_score(judge, team_id, rubric, round_number, value, submitted=submitted)

    db.session.flush()
    # Rows written by plain INSERT statements bypass the identity map
    db.session.expire_all()
    invalidate_judge(judge, round_number)
    return written


def submitted_score_count(judge_id, team_id, round_number):
    return db.session.query(func.count(JudgeScore.id)).filter(
        JudgeScore.judge_id == judge_id,
        JudgeScore.team_id == team_id,
        JudgeScore.round_number == round_number,
        JudgeScore.submitted.is_(True),
    ).scalar()


def is_team_evaluated(judge_id, team_id, round_number, rubric_count):
    """True when the submitted score count equals the rubric count. Never true with zero rubrics."""
    count = submitted_score_count(judge_id, team_id, round_number)
    return count > 0 and count == rubric_count


def judge_scores(judge, round_number):
    """{team_id: {rubric_id: {'score': int, 'submitted': bool}}} for one judge and round."""
    def load():
        result = {}
        rows = JudgeScore.query.filter_by(
            judge_id=judge.id, hackathon_id=judge.hackathon_id, round_number=round_number
        ).all()
        for row in rows:
            result.setdefault(row.team_id, {})[row.rubric_id] = {
                'score': row.score,
                'submitted': row.submitted,
            }
        return result

    return get_cache().get_or_load(('judge-scores', judge.hackathon_id, judge.id, round_number), load)


# --- Feedback ledger ---

def upsert_feedback(judge, team_id, round_number, text):
    """Store stripped feedback text. Blank text means no feedback and is skipped."""
    _check_round(round_number)
    text = (text or '').strip()
    if not text:
        return None

    _upsert(
        JudgeFeedback,
        key={'judge_id': judge.id, 'team_id': team_id, 'round_number': round_number},
        values={'hackathon_id': judge.hackathon_id, 'feedback_text': text, 'updated_at': datetime.utcnow()},
    )
    db.session.flush()
    db.session.expire_all()
    invalidate_judge(judge, round_number)
    return text


def judge_feedback(judge, round_number):
    def load():
        rows = JudgeFeedback.query.filter_by(
            judge_id=judge.id, hackathon_id=judge.hackathon_id, round_number=round_number
        ).all()
        return {row.team_id: row.feedback_text for row in rows}

    return get_cache().get_or_load(('judge-feedback', judge.hackathon_id, judge.id, round_number), load)


def invalidate_judge(judge, round_number):
    """Drop cached results that depend on one judge's scores for one round."""
    cache = get_cache()
    cache.invalidate('judge-scores', judge.hackathon_id, judge.id, round_number)
    cache.invalidate('judge-feedback', judge.hackathon_id, judge.id, round_number)
    cache.invalidate('leaderboard', judge.hackathon_id)
    cache.invalidate('team-total')


# --- Workflow ---

def submit_evaluation(judge, team_id, round_number, values, feedback=''):
    """Record a judge's full evaluation of one team for one round.

    Every rubric of the hackathon must be scored. Scores and feedback are
    committed together; on a database error the session is rolled back and
    LedgerWriteError is raised. Resubmitting overwrites the previous values.
    """
    _check_round(round_number)
    if not is_assigned(judge, team_id, round_number):
        raise NotAssigned(f'You are not assigned to this team for round {round_number}.')

    rubrics = get_rubrics(judge.hackathon_id)
    values = {int(k): v for k, v in values.items()}
    if not rubrics:
        raise IncompleteEvaluation('No judging criteria are configured for this hackathon.')
    missing = [r.name for r in rubrics if values.get(r.id) is None]
    if missing:
        raise IncompleteEvaluation('Score all criteria to submit. Missing: ' + ', '.join(missing))

    try:
        written = upsert_scores(judge, team_id, round_number, values)
        upsert_feedback(judge, team_id, round_number, feedback)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        invalidate_judge(judge, round_number)
        logger.warning('Evaluation of team %s by judge %s failed: %s', team_id, judge.id, e)
        raise LedgerWriteError(f'Failed to submit: {e}')
    except Exception:
        db.session.rollback()
        invalidate_judge(judge, round_number)
        raise

    logger.info('Judge %s submitted round %s evaluation for team %s', judge.id, round_number, team_id)
    evaluation_submitted.send(
        current_app._get_current_object(),
        hackathon_id=judge.hackathon_id, judge_id=judge.id, team_id=team_id, round_number=round_number,
    )
    return {
        'team_id': team_id,
        'round_number': round_number,
        'scores': written,
        'weighted_total': weighted_total(rubrics, written),
        'evaluated': is_team_evaluated(judge.id, team_id, round_number, len(rubrics)),
    }


def prefill(judge, team_id, round_number):
    """Values to open the evaluation form with: stored score per rubric (0 if none) and feedback text."""
    _check_round(round_number)
    team_scores = judge_scores(judge, round_number).get(team_id, {})
    scores = {}
    for rubric in get_rubrics(judge.hackathon_id):
        existing = team_scores.get(rubric.id)
        scores[rubric.id] = existing['score'] if existing else 0
    return {
        'scores': scores,
        'feedback': judge_feedback(judge, round_number).get(team_id, ''),
    }


def evaluation_board(judge, round_number):
    """Teams assigned to the judge for a round with their evaluated / feedback flags."""
    _check_round(round_number)
    assignments = JudgeAssignment.query.options(joinedload(JudgeAssignment.team)).filter_by(
        judge_id=judge.id, hackathon_id=judge.hackathon_id, round_number=round_number
    ).order_by(JudgeAssignment.id).all()
    if not assignments:
        return []

    rubric_count = len(get_rubrics(judge.hackathon_id))
    scores = judge_scores(judge, round_number)
    feedback = judge_feedback(judge, round_number)

    team_ids = [a.team_id for a in assignments]
    abstracts = {}
    for app_row in Application.query.filter(
        Application.hackathon_id == judge.hackathon_id,
        Application.team_id.in_(team_ids)
    ):
        abstracts[app_row.team_id] = app_row.abstract or ''

    board = []
    for assignment in assignments:
        team = assignment.team
        submitted = sum(1 for s in scores.get(team.id, {}).values() if s['submitted'])
        board.append({
            'team_id': team.id,
            'team_name': team.team_name,
            'team_unique_id': team.team_unique_id,
            'abstract': abstracts.get(team.id, ''),
            'evaluated': submitted > 0 and submitted == rubric_count,
            'has_feedback': team.id in feedback,
        })
    return board


def weighted_total(rubrics, values):
    """Live preview total: sum of value * weight over the rubrics. Not persisted."""
    total = 0.0
    for rubric in rubrics:
        total += (values.get(rubric.id) or 0) * rubric.weight
    return total
