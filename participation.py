# participation.py
# Participant side of a hackathon: teams, applications, projects, and the
# organizer decision on applications.

import logging
from datetime import datetime, date

from flask import current_app
from sqlalchemy.exc import IntegrityError

from extensions import db
from models import Team, TeamMember, Application, Project
from errors import ValidationError, PermissionDenied, NotFound
from signals import application_changed
from cache import get_cache
from checkin import generate_team_code, generate_team_unique_id
from notifications import notify_organizers_of_application, notify_application_status

logger = logging.getLogger(__name__)

REVIEW_STATUSES = ('accepted', 'rejected', 'waitlisted')

# Allowed hackathon status transitions
HACKATHON_TRANSITIONS = {
    'draft': ('live',),
    'live': ('ended',),
    'ended': (),
}


def user_team(hackathon_id, user_id):
    """The team the user belongs to (accepted or pending) in a hackathon, if any."""
    member = TeamMember.query.join(Team).filter(
        Team.hackathon_id == hackathon_id,
        TeamMember.user_id == user_id,
        TeamMember.join_status.in_(('accepted', 'pending')),
    ).first()
    return member.team if member else None


def _require_accepted_member(team, user_id):
    for member in team.members:
        if member.user_id == user_id and member.join_status == 'accepted':
            return member
    raise PermissionDenied('You are not a member of this team.')


def _invalidate_board(hackathon_id):
    get_cache().invalidate('leaderboard', hackathon_id)
    get_cache().invalidate('stats', hackathon_id)


# --- Hackathon lifecycle ---

def change_hackathon_status(hackathon, status):
    if status not in HACKATHON_TRANSITIONS.get(hackathon.status, ()):
        raise ValidationError(f'Cannot change hackathon status from {hackathon.status} to {status}.')
    hackathon.status = status
    db.session.commit()
    logger.info('Hackathon %s is now %s', hackathon.id, status)
    return hackathon


# --- Teams ---

def create_team(hackathon, user, team_name):
    team_name = (team_name or '').strip()
    if not team_name:
        raise ValidationError('Team name is required.')
    if hackathon.status == 'ended':
        raise ValidationError('This hackathon has ended.')
    if user_team(hackathon.id, user.id):
        raise ValidationError('You are already in a team for this hackathon.')

    team = Team(
        hackathon_id=hackathon.id,
        team_name=team_name,
        team_unique_id=generate_team_unique_id(),
        created_by=user.id,
    )
    team.members.append(TeamMember(user_id=user.id, role='leader', join_status='accepted'))
    db.session.add(team)
    db.session.commit()

    _invalidate_board(hackathon.id)
    logger.info('Team "%s" (%s) created in hackathon %s', team.team_name, team.team_unique_id, hackathon.id)
    return team


def join_team(hackathon, user, team_unique_id):
    """Request to join a team by its code. The leader accepts or rejects the request."""
    team = Team.query.filter_by(hackathon_id=hackathon.id, team_unique_id=(team_unique_id or '').strip().upper()).first()
    if not team:
        raise NotFound('Team not found in this hackathon.')
    if user_team(hackathon.id, user.id):
        raise ValidationError('You are already in a team for this hackathon.')
    if len(team.accepted_members()) >= hackathon.max_team_size:
        raise ValidationError(f'Team "{team.team_name}" is full.')

    member = TeamMember(team_id=team.id, user_id=user.id, role='member', join_status='pending')
    db.session.add(member)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ValidationError('You have already asked to join this team.')
    return member


def respond_to_join_request(team, member_id, leader, accept):
    leader_member = team.leader()
    if not leader_member or leader_member.user_id != leader.id:
        raise PermissionDenied('Only the team leader can answer join requests.')

    member = TeamMember.query.filter_by(id=member_id, team_id=team.id).first()
    if not member or member.join_status != 'pending':
        raise NotFound('Join request not found.')

    if accept:
        if len(team.accepted_members()) >= team.hackathon.max_team_size:
            raise ValidationError(f'Team "{team.team_name}" is full.')
        member.join_status = 'accepted'
    else:
        member.join_status = 'rejected'
    db.session.commit()
    # The checked-in list shows accepted member names
    get_cache().invalidate('checked-in', team.hackathon_id)
    return member


# --- Applications ---

def submit_application(hackathon, user, team, abstract=None, presentation_url=None):
    """Submit (or finish a draft of) the team's application and notify the organizers."""
    if hackathon.status != 'live':
        raise ValidationError('Applications are only open while the hackathon is live.')
    if hackathon.application_deadline and date.today() > hackathon.application_deadline:
        raise ValidationError('The application deadline has passed.')
    if team.hackathon_id != hackathon.id:
        raise ValidationError('Team does not belong to this hackathon.')
    _require_accepted_member(team, user.id)

    size = len(team.accepted_members())
    if size < hackathon.min_team_size:
        raise ValidationError(f'Teams need at least {hackathon.min_team_size} members to apply.')

    application = Application.query.filter_by(hackathon_id=hackathon.id, team_id=team.id).first()
    if application and application.status != 'draft':
        raise ValidationError('This team has already applied.')
    if not application:
        application = Application(hackathon_id=hackathon.id, team_id=team.id, user_id=user.id)
        db.session.add(application)

    application.abstract = abstract
    application.presentation_url = presentation_url
    application.status = 'submitted'
    application.submitted_at = datetime.utcnow()
    application.team_code = generate_team_code()
    db.session.flush()

    notify_organizers_of_application(application)
    db.session.commit()

    logger.info('Team "%s" applied to hackathon %s', team.team_name, hackathon.id)
    application_changed.send(
        current_app._get_current_object(),
        hackathon_id=hackathon.id, application_id=application.id, status=application.status,
    )
    return application


def review_application(application, status):
    """Organizer decision on an application; the applicant gets a notification."""
    if status not in REVIEW_STATUSES:
        raise ValidationError(f'Unknown application status: {status}')
    if application.status == 'draft':
        raise ValidationError('Draft applications cannot be reviewed.')

    application.status = status
    notify_application_status(application)
    db.session.commit()

    logger.info('Application %s marked %s', application.id, status)
    application_changed.send(
        current_app._get_current_object(),
        hackathon_id=application.hackathon_id, application_id=application.id, status=status,
    )
    return application


def list_applications(hackathon_id, status=None):
    def load():
        query = Application.query.filter_by(hackathon_id=hackathon_id)
        if status:
            query = query.filter_by(status=status)
        return [a.to_dict() for a in query.order_by(Application.created_at.desc(), Application.id.desc())]

    return get_cache().get_or_load(('applications', hackathon_id, status), load)


def hackathon_stats(hackathon_id):
    def load():
        applications = Application.query.filter_by(hackathon_id=hackathon_id)
        return {
            'total_applications': applications.count(),
            'accepted_applications': applications.filter_by(status='accepted').count(),
            'total_teams': Team.query.filter_by(hackathon_id=hackathon_id).count(),
            'total_projects': Project.query.filter_by(hackathon_id=hackathon_id, submitted=True).count(),
        }

    return get_cache().get_or_load(('stats', hackathon_id), load)


# --- Projects ---

PROJECT_FIELDS = ('title', 'description', 'repo_url', 'demo_url', 'video_url')


def save_project(team, user, data, submit=False):
    """Create or update the team's project. ``submit`` makes it visible to judges and the gallery."""
    _require_accepted_member(team, user.id)

    project = team.project
    if project is None:
        project = Project(hackathon_id=team.hackathon_id, team_id=team.id, user_id=user.id)
        db.session.add(project)

    for field in PROJECT_FIELDS:
        if field in data:
            setattr(project, field, data[field])
    if not (project.title or '').strip():
        db.session.rollback()
        raise ValidationError('Project title is required.')
    if submit:
        project.submitted = True

    db.session.commit()
    _invalidate_board(team.hackathon_id)
    return project


def gallery(hackathon):
    return Project.query.filter_by(hackathon_id=hackathon.id, submitted=True).order_by(
        Project.created_at.desc(), Project.id.desc()
    ).all()
