# tests/test_checkin.py

import pytest

from extensions import db
from models import Application
import checkin
from errors import InvalidScan, TeamNotFound, ValidationError


@pytest.mark.parametrize('text, expected', [
    ('HACK-AB12-CD34EF', ('team_code', 'HACK-AB12-CD34EF')),
    ('  hack-ab12-cd34ef ', ('team_code', 'HACK-AB12-CD34EF')),
    ('42', ('team_id', 42)),
    ('AAAA1111', ('team_unique_id', 'AAAA1111')),
    ('aaaa1111', ('team_unique_id', 'AAAA1111')),
    ('{"team_unique_id": "bbbb2222"}', ('team_unique_id', 'BBBB2222')),
    ('{"team_code": "hack-ab12-cd34ef"}', ('team_code', 'HACK-AB12-CD34EF')),
    ('{"team_id": "7"}', ('team_id', 7)),
    ('{"team_unique_id": "12345678"}', ('team_unique_id', '12345678')),
])
def test_parse_scan(text, expected):
    assert checkin.parse_scan(text) == expected


@pytest.mark.parametrize('text', [
    '',
    '   ',
    None,
    '{not json',
    '{"team_code": "HACK-1"}',
    '{"team_id": "abc"}',
    '{"something": 1}',
])
def test_parse_scan_rejects(text):
    with pytest.raises(InvalidScan):
        checkin.parse_scan(text)


def test_generated_codes_have_the_right_shape(app):
    code = checkin.generate_team_code()
    assert checkin.TEAM_CODE_RE.match(code)
    assert code == code.upper()

    unique_id = checkin.generate_team_unique_id()
    assert len(unique_id) == 8
    assert not unique_id.isdigit()


@pytest.fixture
def accepted_application(seed):
    application = Application(hackathon_id=seed.hackathon.id, team_id=seed.team_a.id, user_id=seed.alice.id,
                               status='accepted', abstract='Carbon tracking', team_code='HACK-AB12-CD34EF')
    db.session.add(application)
    db.session.commit()
    return application


def test_lookup_by_team_code(seed, accepted_application):
    found = checkin.lookup_team(seed.hackathon.id, 'hack-ab12-cd34ef')

    assert found['team']['team_name'] == 'Team A'
    assert found['application']['id'] == accepted_application.id
    assert sorted(m['name'] for m in found['members']) == ['Alice', 'Bob']
    assert found['project'] is None
    assert found['total_score'] == 0


@pytest.mark.parametrize('scanned', ['AAAA1111', 'aaaa1111', ' aaaa1111 ', '{"team_unique_id": "aaaa1111"}'])
def test_lookup_by_unique_id(seed, accepted_application, scanned):
    assert checkin.lookup_team(seed.hackathon.id, scanned)['team']['id'] == seed.team_a.id


def test_lookup_by_team_id(seed):
    found = checkin.lookup_team(seed.hackathon.id, str(seed.team_b.id))
    assert found['team']['team_name'] == 'Team B'
    assert found['application'] is None


def test_lookup_unknown_team(seed):
    with pytest.raises(TeamNotFound):
        checkin.lookup_team(seed.hackathon.id, 'HACK-ZZZZ-ZZZZZZ')
    with pytest.raises(TeamNotFound):
        checkin.lookup_team(seed.hackathon.id, 'ZZZZ9999')


def test_check_in_is_idempotent(seed, accepted_application):
    checkin.check_in(accepted_application)
    first_time = accepted_application.check_in_time
    assert accepted_application.checked_in
    assert first_time is not None

    checkin.check_in(accepted_application)
    assert accepted_application.check_in_time == first_time


def test_only_accepted_teams_check_in(seed, accepted_application):
    accepted_application.status = 'submitted'
    db.session.commit()

    with pytest.raises(ValidationError):
        checkin.check_in(accepted_application)
    assert not accepted_application.checked_in


def test_checked_in_teams(seed, accepted_application):
    assert checkin.checked_in_teams(seed.hackathon.id) == []

    checkin.check_in(accepted_application)

    teams = checkin.checked_in_teams(seed.hackathon.id)
    assert len(teams) == 1
    assert teams[0]['team_name'] == 'Team A'
    assert teams[0]['leader_name'] == 'Alice'
    assert sorted(teams[0]['members']) == ['Alice', 'Bob']
