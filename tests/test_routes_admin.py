# tests/test_routes_admin.py

from extensions import db
from models import Application, JudgeScore


def test_admin_needs_organizer(client, seed, login):
    login(seed.alice)
    assert client.get(f'/admin/hackathons/{seed.hackathon.id}/rubrics').status_code == 403
    assert client.get('/admin/hackathons').status_code == 403


def test_create_hackathon(client, seed, login):
    login(seed.organizer)
    response = client.post('/admin/hackathons', json={
        'title': 'Spring Jam', 'mode': 'offline', 'location': 'Hall 3',
        'start_date': '2027-03-01', 'end_date': '2027-03-02', 'max_team_size': '5',
    })
    assert response.status_code == 201
    hackathon = response.get_json()['hackathon']
    assert hackathon['status'] == 'draft'
    assert hackathon['max_team_size'] == 5

    titles = [h['title'] for h in client.get('/admin/hackathons').get_json()['hackathons']]
    assert sorted(titles) == ['Hack Week', 'Spring Jam']


def test_create_hackathon_validation(client, seed, login):
    login(seed.organizer)
    assert client.post('/admin/hackathons', json={'title': ''}).status_code == 400
    assert client.post('/admin/hackathons', json={'title': 'X', 'start_date': 'tomorrow'}).status_code == 400
    assert client.post('/admin/hackathons', json={
        'title': 'X', 'start_date': '2027-03-02', 'end_date': '2027-03-01',
    }).status_code == 400


def test_status_change(client, seed, login):
    login(seed.organizer)
    url = f'/admin/hackathons/{seed.hackathon.id}/status'
    assert client.post(url, json={'status': 'ended'}).get_json()['hackathon']['status'] == 'ended'
    assert client.post(url, json={'status': 'live'}).status_code == 400


def test_rubric_management(client, seed, login):
    login(seed.organizer)
    url = f'/admin/hackathons/{seed.hackathon.id}/rubrics'

    created = client.post(url, json={'name': 'Design', 'max_score': 5, 'weight': 0.5})
    assert created.status_code == 201
    rubric = created.get_json()['rubric']
    assert rubric['sort_order'] == 3

    edited = client.post(f'{url}/{rubric["id"]}', json={'weight': '1.5'})
    assert edited.get_json()['rubric']['weight'] == 1.5

    assert client.post(url, json={'name': 'Bad', 'max_score': 'ten'}).status_code == 400
    assert client.post(url, json={'name': 'Bad', 'max_score': 0}).status_code == 400

    assert client.delete(f'{url}/{rubric["id"]}').status_code == 200
    names = [r['name'] for r in client.get(url).get_json()['rubrics']]
    assert names == ['Innovation', 'Execution']


def test_scored_rubric_cannot_be_deleted(client, seed, login):
    db.session.add(JudgeScore(judge_id=seed.judge.id, team_id=seed.team_a.id, hackathon_id=seed.hackathon.id,
                              rubric_id=seed.innovation.id, round_number=1, score=5))
    db.session.commit()

    login(seed.organizer)
    response = client.delete(f'/admin/hackathons/{seed.hackathon.id}/rubrics/{seed.innovation.id}')
    assert response.status_code == 400
    assert 'already scored' in response.get_json()['error']


def test_judges_and_assignments(client, seed, login):
    login(seed.organizer)
    hid = seed.hackathon.id

    judge = client.post(f'/admin/hackathons/{hid}/judges', json={'code': '100004'})
    assert judge.status_code == 201
    judge_id = judge.get_json()['judge']['id']
    assert client.post(f'/admin/hackathons/{hid}/judges', json={'code': '100004'}).status_code == 400

    assignment = client.post(f'/admin/hackathons/{hid}/assignments',
                             json={'judge_id': judge_id, 'team_id': seed.team_b.id, 'round_number': 2})
    assert assignment.status_code == 201
    assignment_id = assignment.get_json()['assignment']['id']

    duplicate = client.post(f'/admin/hackathons/{hid}/assignments',
                            json={'judge_id': judge_id, 'team_id': seed.team_b.id, 'round_number': 2})
    assert duplicate.status_code == 400
    assert client.post(f'/admin/hackathons/{hid}/assignments',
                       json={'judge_id': judge_id, 'team_id': seed.team_b.id, 'round_number': 3}).status_code == 400

    assert len(client.get(f'/admin/hackathons/{hid}/assignments').get_json()['assignments']) == 4
    assert client.delete(f'/admin/hackathons/{hid}/assignments/{assignment_id}').status_code == 200
    assert len(client.get(f'/admin/hackathons/{hid}/assignments').get_json()['assignments']) == 3


def test_results_breakdown(client, seed, login):
    login(seed.dredd)
    client.post(f'/hackathons/{seed.hackathon.id}/jury/teams/{seed.team_a.id}', json={
        'round_number': 1,
        'scores': {str(seed.innovation.id): 8, str(seed.execution.id): 5},
    })

    login(seed.organizer)
    data = client.get(f'/admin/hackathons/{seed.hackathon.id}/results').get_json()
    top = data['results'][0]
    assert top['team_name'] == 'Team A'
    assert top['total_score'] == 13
    evaluation = top['judge_evaluations'][0]
    assert evaluation['judge_id'] == seed.judge.id
    assert evaluation['total'] == 13
    assert data['results'][1]['judge_evaluations'] == []


def test_application_review_and_check_in(client, seed, login):
    login(seed.alice)
    application = client.post(f'/hackathons/{seed.hackathon.id}/apply', json={'abstract': 'x'}).get_json()['application']

    login(seed.organizer)
    hid = seed.hackathon.id
    listed = client.get(f'/admin/hackathons/{hid}/applications?status=submitted').get_json()['applications']
    assert [a['id'] for a in listed] == [application['id']]

    too_early = client.post(f'/admin/hackathons/{hid}/applications/{application["id"]}/check-in')
    assert too_early.status_code == 400

    reviewed = client.post(f'/admin/hackathons/{hid}/applications/{application["id"]}/status',
                           json={'status': 'accepted'})
    assert reviewed.get_json()['application']['status'] == 'accepted'

    scanned = client.post(f'/admin/hackathons/{hid}/scan', json={'code': application['team_code']}).get_json()
    assert scanned['team']['team_name'] == 'Team A'
    assert scanned['application']['checked_in'] is False

    checked = client.post(f'/admin/hackathons/{hid}/applications/{application["id"]}/check-in')
    assert checked.get_json()['message'] == 'Team A has been marked as present.'

    teams = client.get(f'/admin/hackathons/{hid}/check-ins').get_json()['teams']
    assert [t['team_name'] for t in teams] == ['Team A']

    stats = client.get(f'/admin/hackathons/{hid}/stats').get_json()
    assert stats['accepted_applications'] == 1
    assert db.session.get(Application, application['id']).checked_in


def test_scan_errors(client, seed, login):
    login(seed.organizer)
    url = f'/admin/hackathons/{seed.hackathon.id}/scan'
    assert client.post(url, json={'code': ''}).status_code == 400
    assert client.post(url, json={'code': 'HACK-ZZZZ-ZZZZZZ'}).status_code == 404


def test_organizer_team_member_gets_access(client, seed, login):
    login(seed.organizer)
    added = client.post(f'/admin/hackathons/{seed.hackathon.id}/organizers', json={'code': '100004'})
    assert added.status_code == 201

    login(seed.dave)
    assert client.get(f'/admin/hackathons/{seed.hackathon.id}/stats').status_code == 200
