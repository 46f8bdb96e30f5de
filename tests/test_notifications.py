# tests/test_notifications.py

from extensions import db
from models import Application, OrganizerMember
from notifications import notify_organizers_of_application, list_notifications, mark_read


def make_application(seed, presentation_url=None):
    application = Application(hackathon_id=seed.hackathon.id, team_id=seed.team_a.id,
                              user_id=seed.alice.id, status='submitted', presentation_url=presentation_url)
    db.session.add(application)
    db.session.commit()
    return application


def test_every_accepted_organizer_is_notified(seed):
    db.session.add_all([
        OrganizerMember(hackathon_id=seed.hackathon.id, user_id=seed.dave.id, role='reviewer', accepted=True),
        OrganizerMember(hackathon_id=seed.hackathon.id, user_id=seed.judy.id, role='volunteer', accepted=False),
    ])
    db.session.commit()

    created = notify_organizers_of_application(make_application(seed))
    db.session.commit()

    assert sorted(n.user_id for n in created) == sorted([seed.organizer.id, seed.dave.id])
    assert created[0].title == 'New Application Received 📝'
    assert created[0].payload['has_presentation'] is False
    assert 'with a presentation' not in created[0].message


def test_list_and_mark_read(seed):
    notify_organizers_of_application(make_application(seed, 'https://slides.example'))
    db.session.commit()

    notes = list_notifications(seed.organizer.id)
    assert len(notes) == 1
    assert list_notifications(seed.organizer.id, unread_only=True) == notes

    mark_read(notes[0])
    assert list_notifications(seed.organizer.id, unread_only=True) == []
    assert list_notifications(seed.alice.id) == []
