# signals.py
# Change feed. Writers send, the query cache listens and invalidates.

from blinker import Namespace

_signals = Namespace()

# kwargs: hackathon_id, judge_id, team_id, round_number
evaluation_submitted = _signals.signal('evaluation-submitted')

# kwargs: hackathon_id, application_id, status
application_changed = _signals.signal('application-changed')

# kwargs: hackathon_id, application_id, team_id
team_checked_in = _signals.signal('team-checked-in')
