from datetime import date
from app import create_app
from extensions import db
from models import (User, Hackathon, Team, TeamMember, Application, Project, Rubric,
                    Judge, JudgeAssignment, JudgeScore, JudgeFeedback, Notification, OrganizerMember)

# An application instance gives us the app context
app = create_app()

with app.app_context():
    db.create_all()

    # --- 1. CLEANUP ---
    print("Removing old data...")
    # Children first
    for model in (JudgeFeedback, JudgeScore, JudgeAssignment, Judge, Rubric, Notification,
                  Project, Application, TeamMember, Team, OrganizerMember, Hackathon, User):
        db.session.query(model).delete()
    db.session.commit()

    # --- 2. DEMO DATA ---
    print("Adding demo data...")

    try:
        organizer = User(code='000001', nickname='Olga', role='organizer')
        alice = User(code='100001', nickname='Alice', role='user')
        bob = User(code='100002', nickname='Bob', role='user')
        carol = User(code='100003', nickname='Carol', role='user')
        judge_user1 = User(code='200001', nickname='Judge Dredd', role='user')
        judge_user2 = User(code='200002', nickname='Judge Judy', role='user')
        db.session.add_all([organizer, alice, bob, carol, judge_user1, judge_user2])
        db.session.commit()

        hackathon = Hackathon(
            title='Hack the Planet 2026', tagline='48 hours of building',
            mode='hybrid', status='live', created_by=organizer.id,
            start_date=date(2026, 11, 14), end_date=date(2026, 11, 15),
            application_deadline=date(2026, 11, 1), max_team_size=4,
        )
        db.session.add(hackathon)
        db.session.commit()

        innovation = Rubric(hackathon_id=hackathon.id, name='Innovation', max_score=10, weight=2.0, sort_order=1)
        execution = Rubric(hackathon_id=hackathon.id, name='Execution', max_score=10, weight=1.0, sort_order=2)
        design = Rubric(hackathon_id=hackathon.id, name='Design', max_score=10, weight=1.0, sort_order=3)
        db.session.add_all([innovation, execution, design])

        team_a = Team(hackathon_id=hackathon.id, team_name='Null Pointers', team_unique_id='A1B2C3D4', created_by=alice.id)
        team_a.members.append(TeamMember(user_id=alice.id, role='leader'))
        team_a.members.append(TeamMember(user_id=bob.id, role='member'))
        team_b = Team(hackathon_id=hackathon.id, team_name='Segfault Squad', team_unique_id='E5F6A7B8', created_by=carol.id)
        team_b.members.append(TeamMember(user_id=carol.id, role='leader'))
        db.session.add_all([team_a, team_b])
        db.session.commit()

        db.session.add_all([
            Application(hackathon_id=hackathon.id, team_id=team_a.id, user_id=alice.id, status='accepted',
                        abstract='Carbon tracking for cloud builds', team_code='HACK-NULL-PTR001'),
            Application(hackathon_id=hackathon.id, team_id=team_b.id, user_id=carol.id, status='submitted',
                        abstract='Crash-report triage bot', team_code='HACK-SEGF-AULT02'),
            Project(hackathon_id=hackathon.id, team_id=team_a.id, user_id=alice.id,
                    title='GreenCI', submitted=True),
        ])

        judge1 = Judge(hackathon_id=hackathon.id, user_id=judge_user1.id, added_by=organizer.id)
        judge2 = Judge(hackathon_id=hackathon.id, user_id=judge_user2.id, added_by=organizer.id)
        db.session.add_all([judge1, judge2])
        db.session.commit()

        db.session.add_all([
            JudgeAssignment(judge_id=judge1.id, team_id=team_a.id, hackathon_id=hackathon.id, round_number=1),
            JudgeAssignment(judge_id=judge1.id, team_id=team_b.id, hackathon_id=hackathon.id, round_number=1),
            JudgeAssignment(judge_id=judge2.id, team_id=team_a.id, hackathon_id=hackathon.id, round_number=2),
        ])

        # Sample evaluation
        db.session.add(JudgeScore(judge_id=judge1.id, team_id=team_a.id, hackathon_id=hackathon.id,
                                  rubric_id=innovation.id, round_number=1, score=8, submitted=True))
        db.session.commit()

        print("Demo data added.")
    except Exception as e:
        db.session.rollback()
        print(f"Failed to add demo data: {e}")
