# models/__init__.py
# Model registry, imported by create_app() so Flask-Migrate sees every table

from .user import User
from .hackathon import Hackathon
from .organizer_member import OrganizerMember
from .team import Team, TeamMember
from .application import Application, APPLICATION_STATUSES
from .project import Project
from .rubric import Rubric
from .judge import Judge, JudgeAssignment
from .score import JudgeScore
from .feedback import JudgeFeedback
from .notification import Notification
