# checkin.py
# Venue check-in: QR payload parsing, team lookup, marking teams present.

import json
import logging
import re
import secrets
import string
from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from extensions import db
from models import Application, Team, TeamMember, Project
from errors import InvalidScan, TeamNotFound, ValidationError, LedgerWriteError
from signals import team_checked_in
from cache import get_cache
from leaderboard import team_total_score

logger = logging.getLogger(__name__)

TEAM_CODE_RE = re.compile(r'^HACK-[A-Z0-9]{4}-[A-Z0-9]{6}$', re.IGNORECASE)

_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_team_code():
    """HACK-XXXX-XXXXXX, unique across applications."""
    while True:
        code = 'HACK-{}-{}'.format(
            ''.join(secrets.choice(_CODE_ALPHABET) for _ in range(4)),
            ''.join(secrets.choice(_CODE_ALPHABET) for _ in range(6)),
        )
        if not Application.query.filter_by(team_code=code).first():
            return code


def generate_team_unique_id():
    """8 uppercase hex characters, unique across teams.

    All-digit values are skipped so a typed code never reads as a team id.
    """
    while True:
        unique_id = secrets.token_hex(4).upper()
        if unique_id.isdigit():
            continue
        if not Team.query.filter_by(team_unique_id=unique_id).first():
            return unique_id


def parse_scan(text):
    """Classify a scanned or typed code.

    Returns ``(kind, value)`` where kind is ``'team_code'``, ``'team_id'`` or
    ``'team_unique_id'``. JSON payloads may carry any of those keys.
    """
    text = (text or '').strip()
    if not text:
        raise InvalidScan('Scanned code is empty.')

    if text.startswith('{'):
        try:
            payload = json.loads(text)
        except ValueError:
            raise InvalidScan('QR payload is not valid JSON.')
        if not isinstance(payload, dict):
            raise InvalidScan('QR payload must be a JSON object.')
        if payload.get('team_code'):
            code = str(payload['team_code']).strip()
            if not TEAM_CODE_RE.match(code):
                raise InvalidScan(f'Malformed team code: {code}')
            return 'team_code', code.upper()
        if payload.get('team_id') not in (None, ''):
            try:
                return 'team_id', int(payload['team_id'])
            except (TypeError, ValueError):
                raise InvalidScan(f'Malformed team id: {payload["team_id"]}')
        if payload.get('team_unique_id'):
            return 'team_unique_id', str(payload['team_unique_id']).strip().upper()
        raise InvalidScan('QR payload does not identify a team.')

    if TEAM_CODE_RE.match(text):
        return 'team_code', text.upper()
    if text.isdigit():
        return 'team_id', int(text)
    return 'team_unique_id', text.upper()


def _find_team(hackathon_id, scanned):
    kind, value = parse_scan(scanned)

    if kind == 'team_code':
        application = Application.query.filter_by(hackathon_id=hackathon_id, team_code=value).first()
        if not application:
            raise TeamNotFound(f'No team found for QR code: {value}')
        if not application.team:
            raise TeamNotFound('Team data missing for this application.')
        return application.team, application

    query = Team.query.filter_by(hackathon_id=hackathon_id)
    if kind == 'team_id':
        team = query.filter_by(id=value).first()
    else:
        team = query.filter_by(team_unique_id=value).first()
    if not team:
        raise TeamNotFound('Team not found in this hackathon.')

    application = Application.query.filter_by(
        hackathon_id=hackathon_id, team_id=team.id
    ).order_by(Application.id).first()
    return team, application


def lookup_team(hackathon_id, scanned):
    team, application = _find_team(hackathon_id, scanned)
    members = TeamMember.query.options(joinedload(TeamMember.user)).filter_by(team_id=team.id).all()
    project = Project.query.filter_by(team_id=team.id).first()

    return {
        'team': team.to_dict(),
        'members': [m.to_dict() for m in members],
        'application': application.to_dict() if application else None,
        'project': project.to_dict() if project else None,
        'total_score': team_total_score(team.id),
    }


def check_in(application):
    """Mark an accepted application's team as present. Checking in twice keeps the first time."""
    if application.status != 'accepted':
        raise ValidationError('Only accepted teams can be checked in.')
    if application.checked_in:
        return application

    application.checked_in = True
    application.check_in_time = datetime.utcnow()
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise LedgerWriteError(f'Check-in failed: {e}')

    team_name = application.team.team_name if application.team else 'Solo'
    logger.info('Team "%s" checked in to hackathon %s', team_name, application.hackathon_id)
    team_checked_in.send(
        current_app._get_current_object(),
        hackathon_id=application.hackathon_id, application_id=application.id, team_id=application.team_id,
    )
    return application


def checked_in_teams(hackathon_id):
    def load():
        applications = Application.query.options(
            joinedload(Application.team).joinedload(Team.members).joinedload(TeamMember.user),
            joinedload(Application.user),
        ).filter_by(
            hackathon_id=hackathon_id, status='accepted', checked_in=True
        ).order_by(Application.check_in_time).all()

        result = []
        for app_row in applications:
            team = app_row.team
            result.append({
                'application_id': app_row.id,
                'team_id': team.id if team else None,
                'team_name': team.team_name if team else 'Solo',
                'team_unique_id': team.team_unique_id if team else 'N/A',
                'leader_name': app_row.user.display_name if app_row.user else 'Unknown',
                'check_in_time': app_row.check_in_time.isoformat() if app_row.check_in_time else None,
                'members': [m.user.display_name for m in team.accepted_members()] if team else [],
            })
        return result

    return get_cache().get_or_load(('checked-in', hackathon_id), load)
