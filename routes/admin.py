# routes/admin.py
# Organizer endpoints: hackathon setup, judging configuration, application review, check-in

from functools import wraps
from datetime import datetime
from collections import defaultdict

from flask import Blueprint, request, jsonify, g, current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from extensions import db
from models import (User, Hackathon, OrganizerMember, Team, Application, Rubric,
                    Judge, JudgeAssignment, JudgeScore)
from errors import PermissionDenied, ValidationError, NotFound
from routes.auth import request_data
from routes.main import login_required
import checkin
import participation
from leaderboard import build_leaderboard


admin_bp = Blueprint('admin', __name__, url_prefix='/admin')

HACKATHON_FIELDS = ('title', 'tagline', 'description', 'mode', 'location')
DATE_FIELDS = ('start_date', 'end_date', 'application_deadline')


def organizer_required(f):
    @wraps(f)
    @login_required
    def decorated_function(hackathon_id, *args, **kwargs):
        hackathon = db.get_or_404(Hackathon, hackathon_id)
        if g.user.role != 'admin' and not hackathon.is_organizer(g.user.id):
            raise PermissionDenied('You do not have access to this hackathon.')
        g.hackathon = hackathon
        return f(hackathon_id, *args, **kwargs)
    return decorated_function


def parse_date(value, field):
    if not value:
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise ValidationError(f'Invalid date for {field}. Use YYYY-MM-DD.')


def cast_field(data, field, cast, default=None):
    value = data.get(field)
    if value is None or value == '':
        return default
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid value for {field}: {value!r}')


def commit_or_raise(message):
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ValidationError(message)


# --- Hackathons ---

@admin_bp.route('/hackathons', methods=['GET', 'POST'])
@login_required
def manage_hackathons():
    if g.user.role not in ('organizer', 'admin'):
        raise PermissionDenied('Only organizers can manage hackathons.')

    if request.method == 'POST':
        data = request_data()
        if not (data.get('title') or '').strip():
            raise ValidationError('Title is required.')

        hackathon = Hackathon(created_by=g.user.id)
        for field in HACKATHON_FIELDS:
            if data.get(field) is not None:
                setattr(hackathon, field, data[field])
        for field in DATE_FIELDS:
            setattr(hackathon, field, parse_date(data.get(field), field))
        if hackathon.start_date and hackathon.end_date and hackathon.start_date > hackathon.end_date:
            raise ValidationError('Start date cannot be after end date.')
        for field in ('min_team_size', 'max_team_size'):
            size = cast_field(data, field, int)
            if size is not None:
                setattr(hackathon, field, size)

        db.session.add(hackathon)
        commit_or_raise('Invalid hackathon settings.')
        current_app.logger.info('Hackathon "%s" created by user %s', hackathon.title, g.user.id)
        return jsonify({'hackathon': hackathon.to_dict()}), 201

    if g.user.role == 'admin':
        hackathons = Hackathon.query.order_by(Hackathon.created_at.desc()).all()
    else:
        hackathons = [h for h in Hackathon.query.order_by(Hackathon.created_at.desc()) if h.is_organizer(g.user.id)]
    return jsonify({'hackathons': [h.to_dict() for h in hackathons]})


@admin_bp.route('/hackathons/<int:hackathon_id>/status', methods=['POST'])
@organizer_required
def change_status(hackathon_id):
    hackathon = participation.change_hackathon_status(g.hackathon, request_data().get('status'))
    return jsonify({'hackathon': hackathon.to_dict()})


@admin_bp.route('/hackathons/<int:hackathon_id>/gallery', methods=['POST'])
@organizer_required
def toggle_gallery(hackathon_id):
    g.hackathon.is_gallery_public = bool(request_data().get('public'))
    db.session.commit()
    return jsonify({'hackathon': g.hackathon.to_dict()})


@admin_bp.route('/hackathons/<int:hackathon_id>/organizers', methods=['POST'])
@organizer_required
def add_organizer(hackathon_id):
    data = request_data()
    user = User.query.filter_by(code=data.get('code')).first()
    if not user:
        raise NotFound('User not found.')

    member = OrganizerMember(
        hackathon_id=hackathon_id,
        user_id=user.id,
        role=data.get('role') or 'reviewer',
        accepted=True,
    )
    db.session.add(member)
    commit_or_raise('This user is already on the organizer team.')
    return jsonify({'organizer': {'id': member.id, 'user_id': user.id, 'role': member.role}}), 201


@admin_bp.route('/hackathons/<int:hackathon_id>/stats')
@organizer_required
def hackathon_stats(hackathon_id):
    return jsonify(participation.hackathon_stats(hackathon_id))


# --- Rubrics ---

@admin_bp.route('/hackathons/<int:hackathon_id>/rubrics', methods=['GET', 'POST'])
@organizer_required
def manage_rubrics(hackathon_id):
    if request.method == 'POST':
        data = request_data()
        name = (data.get('name') or '').strip()
        if not name:
            raise ValidationError('Name is required.')

        # New rubrics go to the end of the list
        max_order = db.session.query(func.max(Rubric.sort_order)).filter_by(hackathon_id=hackathon_id).scalar()
        rubric = Rubric(
            hackathon_id=hackathon_id,
            name=name,
            description=data.get('description'),
            max_score=cast_field(data, 'max_score', int, default=10),
            weight=cast_field(data, 'weight', float, default=1.0),
            sort_order=(max_order or 0) + 1,
        )
        db.session.add(rubric)
        commit_or_raise('Invalid rubric.')
        return jsonify({'rubric': rubric.to_dict()}), 201

    rubrics = Rubric.query.filter_by(hackathon_id=hackathon_id).order_by(Rubric.sort_order).all()
    return jsonify({'rubrics': [r.to_dict() for r in rubrics]})


@admin_bp.route('/hackathons/<int:hackathon_id>/rubrics/<int:rubric_id>', methods=['POST', 'DELETE'])
@organizer_required
def edit_rubric(hackathon_id, rubric_id):
    rubric = Rubric.query.filter_by(id=rubric_id, hackathon_id=hackathon_id).first_or_404()

    if request.method == 'DELETE':
        if JudgeScore.query.filter_by(rubric_id=rubric.id).first():
            raise ValidationError(f'Cannot delete rubric "{rubric.name}": judges have already scored it.')
        name = rubric.name
        db.session.delete(rubric)
        db.session.commit()
        return jsonify({'message': f'Rubric "{name}" deleted.'})

    data = request_data()
    for field, cast in (('name', str), ('description', str), ('max_score', int),
                        ('weight', float), ('sort_order', int)):
        value = cast_field(data, field, cast)
        if value is not None:
            setattr(rubric, field, value)
    commit_or_raise('Invalid rubric.')
    return jsonify({'rubric': rubric.to_dict()})


# --- Judges and assignments ---

@admin_bp.route('/hackathons/<int:hackathon_id>/judges', methods=['GET', 'POST'])
@organizer_required
def manage_judges(hackathon_id):
    if request.method == 'POST':
        user = User.query.filter_by(code=request_data().get('code')).first()
        if not user:
            raise NotFound('User not found.')
        judge = Judge(hackathon_id=hackathon_id, user_id=user.id, added_by=g.user.id)
        db.session.add(judge)
        commit_or_raise('This user is already a judge for this hackathon.')
        return jsonify({'judge': judge.to_dict()}), 201

    judges = Judge.query.filter_by(hackathon_id=hackathon_id).order_by(Judge.id).all()
    return jsonify({'judges': [j.to_dict() for j in judges]})


@admin_bp.route('/hackathons/<int:hackathon_id>/assignments', methods=['GET', 'POST'])
@organizer_required
def manage_assignments(hackathon_id):
    if request.method == 'POST':
        data = request_data()
        judge = Judge.query.filter_by(id=data.get('judge_id'), hackathon_id=hackathon_id).first()
        team = Team.query.filter_by(id=data.get('team_id'), hackathon_id=hackathon_id).first()
        if not judge or not team:
            raise NotFound('Judge or team not found in this hackathon.')
        round_number = cast_field(data, 'round_number', int, default=1)
        if round_number not in current_app.config['JUDGING_ROUNDS']:
            raise ValidationError(f'Invalid round: {round_number}')

        assignment = JudgeAssignment(judge_id=judge.id, team_id=team.id,
                                     hackathon_id=hackathon_id, round_number=round_number)
        db.session.add(assignment)
        commit_or_raise('This judge is already assigned to this team for that round.')
        return jsonify({'assignment': {'id': assignment.id, 'judge_id': judge.id,
                                       'team_id': team.id, 'round_number': round_number}}), 201

    assignments = JudgeAssignment.query.filter_by(hackathon_id=hackathon_id).order_by(JudgeAssignment.id).all()
    return jsonify({'assignments': [
        {'id': a.id, 'judge_id': a.judge_id, 'team_id': a.team_id, 'round_number': a.round_number}
        for a in assignments
    ]})


@admin_bp.route('/hackathons/<int:hackathon_id>/assignments/<int:assignment_id>', methods=['DELETE'])
@organizer_required
def delete_assignment(hackathon_id, assignment_id):
    assignment = JudgeAssignment.query.filter_by(id=assignment_id, hackathon_id=hackathon_id).first_or_404()
    db.session.delete(assignment)
    db.session.commit()
    return jsonify({'message': 'Judge removed from team.'})


@admin_bp.route('/hackathons/<int:hackathon_id>/results')
@organizer_required
def results_view(hackathon_id):
    """Leaderboard plus every judge's per-rubric scores, per round."""
    rubrics = Rubric.query.filter_by(hackathon_id=hackathon_id).order_by(Rubric.sort_order).all()
    all_scores = JudgeScore.query.filter_by(hackathon_id=hackathon_id).all()

    evaluations = defaultdict(lambda: defaultdict(dict))
    for s in all_scores:
        evaluations[s.team_id][(s.judge_id, s.round_number)][s.rubric_id] = s.score

    results = []
    for row in build_leaderboard(hackathon_id):
        judge_evaluations = []
        for (judge_id, round_number), scores in sorted(evaluations[row['team_id']].items()):
            judge_evaluations.append({
                'judge_id': judge_id,
                'round_number': round_number,
                'scores_by_rubric': {r.id: scores.get(r.id) for r in rubrics},
                'total': sum(scores.values()),
            })
        results.append(dict(row, judge_evaluations=judge_evaluations))

    return jsonify({'rubrics': [r.to_dict() for r in rubrics], 'results': results})


# --- Applications ---

@admin_bp.route('/hackathons/<int:hackathon_id>/applications')
@organizer_required
def list_applications(hackathon_id):
    status = request.args.get('status')
    if status == 'all':
        status = None
    return jsonify({'applications': participation.list_applications(hackathon_id, status)})


@admin_bp.route('/hackathons/<int:hackathon_id>/applications/<int:application_id>/status', methods=['POST'])
@organizer_required
def review_application(hackathon_id, application_id):
    application = Application.query.filter_by(id=application_id, hackathon_id=hackathon_id).first_or_404()
    participation.review_application(application, request_data().get('status'))
    return jsonify({'message': 'The application status has been changed.',
                    'application': application.to_dict()})


# --- Check-in ---

@admin_bp.route('/hackathons/<int:hackathon_id>/scan', methods=['POST'])
@organizer_required
def scan(hackathon_id):
    return jsonify(checkin.lookup_team(hackathon_id, request_data().get('code')))


@admin_bp.route('/hackathons/<int:hackathon_id>/applications/<int:application_id>/check-in', methods=['POST'])
@organizer_required
def check_in(hackathon_id, application_id):
    application = Application.query.filter_by(id=application_id, hackathon_id=hackathon_id).first_or_404()
    checkin.check_in(application)
    team_name = application.team.team_name if application.team else 'Solo'
    return jsonify({'message': f'{team_name} has been marked as present.',
                    'application': application.to_dict()})


@admin_bp.route('/hackathons/<int:hackathon_id>/check-ins')
@organizer_required
def checked_in(hackathon_id):
    return jsonify({'teams': checkin.checked_in_teams(hackathon_id)})
