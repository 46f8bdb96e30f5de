# cache.py

import threading

from flask import current_app

from signals import evaluation_submitted, application_changed, team_checked_in


class QueryCache:
    """Read-through cache of query results keyed by tuples of query parameters.

    Keys start with a query name, e.g. ``('leaderboard', hackathon_id)`` or
    ``('judge-scores', hackathon_id, judge_id, round_number)``, so a whole
    family of results can be dropped with :meth:`invalidate`.

    Shared by every request thread of the app; the store is only touched
    under the lock. Loaders run outside it.
    """

    def __init__(self):
        self._store = {}
        self._lock = threading.RLock()
        # Bumped by every invalidate; a load that raced one is not stored
        self._generation = 0
        self.hits = 0
        self.misses = 0

    def get_or_load(self, key, loader):
        with self._lock:
            if key in self._store:
                self.hits += 1
                return self._store[key]
            self.misses += 1
            generation = self._generation
        value = loader()
        with self._lock:
            if generation == self._generation:
                self._store[key] = value
        return value

    def invalidate(self, *prefix):
        with self._lock:
            self._generation += 1
            if not prefix:
                self._store.clear()
                return
            n = len(prefix)
            for key in [k for k in list(self._store) if k[:n] == prefix]:
                del self._store[key]

    def __contains__(self, key):
        with self._lock:
            return key in self._store

    def __len__(self):
        with self._lock:
            return len(self._store)

    # --- Invalidation hooks, connected to the change feed ---

    def on_evaluation_submitted(self, sender, hackathon_id=None, judge_id=None, round_number=None, **extra):
        self.invalidate('judge-scores', hackathon_id, judge_id, round_number)
        self.invalidate('judge-feedback', hackathon_id, judge_id, round_number)
        self.invalidate('leaderboard', hackathon_id)
        self.invalidate('team-total')

    def on_application_changed(self, sender, hackathon_id=None, **extra):
        self.invalidate('applications', hackathon_id)
        self.invalidate('stats', hackathon_id)

    def on_team_checked_in(self, sender, hackathon_id=None, **extra):
        self.invalidate('checked-in', hackathon_id)
        self.invalidate('applications', hackathon_id)

    def connect(self, app):
        # weak=False: the bound methods must live as long as the app
        evaluation_submitted.connect(self.on_evaluation_submitted, sender=app, weak=False)
        application_changed.connect(self.on_application_changed, sender=app, weak=False)
        team_checked_in.connect(self.on_team_checked_in, sender=app, weak=False)


def init_cache(app):
    cache = QueryCache()
    cache.connect(app)
    app.extensions['query_cache'] = cache
    return cache


def get_cache():
    return current_app.extensions['query_cache']
