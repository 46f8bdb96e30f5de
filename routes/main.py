# routes/main.py
# Participant and judge endpoints

from functools import wraps
from flask import Blueprint, session, request, jsonify, g
from sqlalchemy.orm import joinedload

from extensions import db
from models import User, Hackathon, Team, Notification
from errors import Unauthorized, PermissionDenied, ValidationError, NotFound
from routes.auth import request_data
import ledger
import participation
from leaderboard import build_leaderboard
from notifications import list_notifications, mark_read


main_bp = Blueprint('main', __name__)


def login_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            raise Unauthorized('You need to log in to access this page.')
        user = db.session.get(User, session['user_id'])
        if not user:
            session.clear()
            raise Unauthorized('Your session has expired. Please log in again.')
        g.user = user
        return f(*args, **kwargs)
    return decorated_function


def round_arg(data=None):
    value = (data or {}).get('round_number', request.args.get('round', 1))
    # int() would turn True or 1.7 into round 1
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f'Invalid round: {value!r}')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid round: {value!r}')


def score_values(raw):
    """{"<rubric_id>": value} from the client, keyed by int rubric id."""
    if not isinstance(raw, dict):
        raise ValidationError('Scores must be an object of rubric id to value.')
    values = {}
    for rubric_id, value in raw.items():
        try:
            values[int(rubric_id)] = value
        except (TypeError, ValueError):
            raise ValidationError(f'Invalid rubric id: {rubric_id!r}')
    return values


def judge_for(hackathon_id):
    judge = ledger.get_judge(hackathon_id, g.user.id)
    if not judge:
        raise PermissionDenied('You are not a judge for this hackathon.')
    return judge


# --- Hackathons ---

@main_bp.route('/hackathons')
def list_hackathons():
    hackathons = Hackathon.query.filter(Hackathon.status != 'draft').order_by(
        Hackathon.start_date.desc(), Hackathon.id.desc()
    ).all()
    return jsonify({'hackathons': [h.to_dict() for h in hackathons]})


@main_bp.route('/hackathons/<int:hackathon_id>')
@login_required
def hackathon_detail(hackathon_id):
    hackathon = db.get_or_404(Hackathon, hackathon_id)
    if hackathon.status == 'draft' and not hackathon.is_organizer(g.user.id):
        raise NotFound('Hackathon not found.')

    team = participation.user_team(hackathon.id, g.user.id)
    return jsonify({
        'hackathon': hackathon.to_dict(),
        'rubrics': [r.to_dict() for r in hackathon.rubrics],
        'my_team': team.to_dict() if team else None,
        'is_judge': ledger.get_judge(hackathon.id, g.user.id) is not None,
        'is_organizer': hackathon.is_organizer(g.user.id),
    })


@main_bp.route('/hackathons/<int:hackathon_id>/leaderboard')
def leaderboard(hackathon_id):
    hackathon = db.get_or_404(Hackathon, hackathon_id)
    return jsonify({
        'hackathon': {'id': hackathon.id, 'title': hackathon.title},
        'leaderboard': build_leaderboard(hackathon.id),
    })


@main_bp.route('/hackathons/<int:hackathon_id>/gallery')
def project_gallery(hackathon_id):
    hackathon = db.get_or_404(Hackathon, hackathon_id)
    if not hackathon.is_gallery_public and not hackathon.is_organizer(session.get('user_id')):
        raise PermissionDenied('The project gallery is not public yet.')
    return jsonify({'projects': [p.to_dict() for p in participation.gallery(hackathon)]})


# --- Teams, applications, projects ---

@main_bp.route('/hackathons/<int:hackathon_id>/teams', methods=['POST'])
@login_required
def create_team(hackathon_id):
    hackathon = db.get_or_404(Hackathon, hackathon_id)
    team = participation.create_team(hackathon, g.user, request_data().get('team_name'))
    return jsonify({'team': team.to_dict()}), 201


@main_bp.route('/hackathons/<int:hackathon_id>/teams/join', methods=['POST'])
@login_required
def join_team(hackathon_id):
    hackathon = db.get_or_404(Hackathon, hackathon_id)
    member = participation.join_team(hackathon, g.user, request_data().get('team_unique_id'))
    return jsonify({'member': member.to_dict()}), 201


@main_bp.route('/teams/<int:team_id>')
@login_required
def team_detail(team_id):
    team = Team.query.options(joinedload(Team.members)).filter_by(id=team_id).first_or_404()
    return jsonify({
        'team': team.to_dict(),
        'members': [m.to_dict() for m in team.members],
        'project': team.project.to_dict() if team.project else None,
    })


@main_bp.route('/teams/<int:team_id>/requests/<int:member_id>', methods=['POST'])
@login_required
def answer_join_request(team_id, member_id):
    team = db.get_or_404(Team, team_id)
    accept = bool(request_data().get('accept'))
    member = participation.respond_to_join_request(team, member_id, g.user, accept)
    return jsonify({'member': member.to_dict()})


@main_bp.route('/hackathons/<int:hackathon_id>/apply', methods=['POST'])
@login_required
def apply(hackathon_id):
    hackathon = db.get_or_404(Hackathon, hackathon_id)
    team = participation.user_team(hackathon.id, g.user.id)
    if not team:
        raise ValidationError('Create or join a team before applying.')

    data = request_data()
    application = participation.submit_application(
        hackathon, g.user, team,
        abstract=data.get('abstract'),
        presentation_url=data.get('presentation_url'),
    )
    return jsonify({'application': application.to_dict()}), 201


@main_bp.route('/teams/<int:team_id>/project', methods=['POST'])
@login_required
def save_project(team_id):
    team = db.get_or_404(Team, team_id)
    data = request_data()
    project = participation.save_project(team, g.user, data, submit=bool(data.get('submit')))
    return jsonify({'project': project.to_dict()})


# --- Notifications ---

@main_bp.route('/notifications')
@login_required
def notifications():
    unread_only = request.args.get('unread') == '1'
    return jsonify({'notifications': [n.to_dict() for n in list_notifications(g.user.id, unread_only)]})


@main_bp.route('/notifications/<int:notification_id>/read', methods=['POST'])
@login_required
def read_notification(notification_id):
    notification = db.get_or_404(Notification, notification_id)
    if notification.user_id != g.user.id:
        raise PermissionDenied('Access denied.')
    return jsonify({'notification': mark_read(notification).to_dict()})


# --- Jury panel ---

@main_bp.route('/hackathons/<int:hackathon_id>/jury')
@login_required
def jury_board(hackathon_id):
    judge = judge_for(hackathon_id)
    round_number = round_arg()
    return jsonify({
        'round_number': round_number,
        'rubrics': [r.to_dict() for r in ledger.get_rubrics(hackathon_id)],
        'teams': ledger.evaluation_board(judge, round_number),
    })


@main_bp.route('/hackathons/<int:hackathon_id>/jury/teams/<int:team_id>', methods=['GET', 'POST'])
@login_required
def judging_page(hackathon_id, team_id):
    judge = judge_for(hackathon_id)

    if request.method == 'POST':
        data = request_data()
        result = ledger.submit_evaluation(
            judge, team_id, round_arg(data),
            score_values(data.get('scores') or {}),
            feedback=data.get('feedback') or '',
        )
        return jsonify({'message': 'Evaluation submitted! Your scores and feedback have been recorded.', **result})

    round_number = round_arg()
    if not ledger.is_assigned(judge, team_id, round_number):
        raise PermissionDenied(f'You are not assigned to this team for round {round_number}.')

    rubrics = ledger.get_rubrics(hackathon_id)
    form = ledger.prefill(judge, team_id, round_number)
    return jsonify({
        'round_number': round_number,
        'rubrics': [r.to_dict() for r in rubrics],
        'scores': form['scores'],
        'feedback': form['feedback'],
        'weighted_total': ledger.weighted_total(rubrics, form['scores']),
    })


@main_bp.route('/hackathons/<int:hackathon_id>/jury/preview', methods=['POST'])
@login_required
def weighted_preview(hackathon_id):
    judge_for(hackathon_id)
    values = score_values(request_data().get('scores') or {})
    try:
        values = {rubric_id: float(value) for rubric_id, value in values.items()}
    except (TypeError, ValueError):
        raise ValidationError('Scores must be numbers.')
    rubrics = ledger.get_rubrics(hackathon_id)
    return jsonify({'weighted_total': ledger.weighted_total(rubrics, values)})
