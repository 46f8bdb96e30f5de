# notifications.py
# In-app notifications for organizers and applicants.

import logging

from extensions import db
from models import Notification

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    'accepted': ('Application accepted 🎉', 'Your application for {title} has been accepted.'),
    'rejected': ('Application update', 'Your application for {title} was not accepted this time.'),
    'waitlisted': ('You are on the waitlist', 'Your application for {title} has been waitlisted.'),
}


def notify_organizers_of_application(application):
    """One notification per organizer (creator plus accepted organizer team).

    Added to the session only; the caller commits.
    """
    hackathon = application.hackathon
    team_name = application.team.team_name if application.team else 'Solo'
    has_presentation = bool(application.presentation_url)

    if has_presentation:
        message = f'Team "{team_name}" has submitted an application with a presentation for {hackathon.title}'
    else:
        message = f'Team "{team_name}" has submitted an application for {hackathon.title}'

    created = []
    for user_id in hackathon.organizer_ids():
        notification = Notification(
            user_id=user_id,
            type='application',
            title='New Application Received 📝',
            message=message,
            payload={
                'hackathon_id': hackathon.id,
                'application_id': application.id,
                'team_name': team_name,
                'has_presentation': has_presentation,
            },
        )
        db.session.add(notification)
        created.append(notification)

    logger.info('Queued %d organizer notifications for application %s', len(created), application.id)
    return created


def notify_application_status(application):
    """Tell the applicant about an accept / reject / waitlist decision."""
    if application.status not in STATUS_MESSAGES:
        return None

    title, template = STATUS_MESSAGES[application.status]
    notification = Notification(
        user_id=application.user_id,
        type='application',
        title=title,
        message=template.format(title=application.hackathon.title),
        payload={
            'hackathon_id': application.hackathon_id,
            'application_id': application.id,
            'status': application.status,
        },
    )
    db.session.add(notification)
    return notification


def list_notifications(user_id, unread_only=False):
    query = Notification.query.filter_by(user_id=user_id)
    if unread_only:
        query = query.filter_by(read=False)
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()


def mark_read(notification):
    notification.read = True
    db.session.commit()
    return notification
