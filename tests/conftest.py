# tests/conftest.py

from types import SimpleNamespace

import pytest

from app import create_app
from config import TestConfig
from extensions import db
from models import (User, Hackathon, Team, TeamMember, Rubric, Judge, JudgeAssignment)


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def seed(app):
    """A live hackathon with two rubrics, two teams and two judges.

    Innovation: max 10, weight 2. Execution: max 10, weight 1.
    Judge "dredd" is assigned to both teams in round 1, judge "judy" to team A in round 2.
    """
    organizer = User(code='000001', nickname='Olga', role='organizer')
    alice = User(code='100001', nickname='Alice')
    bob = User(code='100002', nickname='Bob')
    carol = User(code='100003', nickname='Carol')
    dave = User(code='100004', nickname='Dave')
    dredd = User(code='200001', nickname='Dredd')
    judy = User(code='200002', nickname='Judy')
    db.session.add_all([organizer, alice, bob, carol, dave, dredd, judy])
    db.session.commit()

    hackathon = Hackathon(title='Hack Week', status='live', mode='online',
                          created_by=organizer.id, min_team_size=1, max_team_size=3)
    db.session.add(hackathon)
    db.session.commit()

    innovation = Rubric(hackathon_id=hackathon.id, name='Innovation', max_score=10, weight=2.0, sort_order=1)
    execution = Rubric(hackathon_id=hackathon.id, name='Execution', max_score=10, weight=1.0, sort_order=2)

    team_a = Team(hackathon_id=hackathon.id, team_name='Team A', team_unique_id='AAAA1111', created_by=alice.id)
    team_a.members.append(TeamMember(user_id=alice.id, role='leader'))
    team_a.members.append(TeamMember(user_id=bob.id, role='member'))
    team_b = Team(hackathon_id=hackathon.id, team_name='Team B', team_unique_id='BBBB2222', created_by=carol.id)
    team_b.members.append(TeamMember(user_id=carol.id, role='leader'))

    judge = Judge(hackathon_id=hackathon.id, user_id=dredd.id, added_by=organizer.id)
    judge2 = Judge(hackathon_id=hackathon.id, user_id=judy.id, added_by=organizer.id)
    db.session.add_all([innovation, execution, team_a, team_b, judge, judge2])
    db.session.commit()

    db.session.add_all([
        JudgeAssignment(judge_id=judge.id, team_id=team_a.id, hackathon_id=hackathon.id, round_number=1),
        JudgeAssignment(judge_id=judge.id, team_id=team_b.id, hackathon_id=hackathon.id, round_number=1),
        JudgeAssignment(judge_id=judge2.id, team_id=team_a.id, hackathon_id=hackathon.id, round_number=2),
    ])
    db.session.commit()

    return SimpleNamespace(
        organizer=organizer, alice=alice, bob=bob, carol=carol, dave=dave,
        dredd=dredd, judy=judy, hackathon=hackathon,
        innovation=innovation, execution=execution,
        team_a=team_a, team_b=team_b, judge=judge, judge2=judge2,
    )


@pytest.fixture
def login(client):
    def do_login(user):
        response = client.post('/login', json={'code': user.code})
        assert response.status_code == 200
        return response
    return do_login
