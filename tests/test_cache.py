# tests/test_cache.py

import threading

from cache import QueryCache, get_cache
from signals import evaluation_submitted, application_changed, team_checked_in


def test_get_or_load_reads_through_once():
    cache = QueryCache()
    calls = []

    def loader():
        calls.append(1)
        return [1, 2, 3]

    assert cache.get_or_load(('leaderboard', 1), loader) == [1, 2, 3]
    assert cache.get_or_load(('leaderboard', 1), loader) == [1, 2, 3]
    assert len(calls) == 1
    assert (cache.hits, cache.misses) == (1, 1)


def test_invalidate_by_prefix():
    cache = QueryCache()
    cache.get_or_load(('judge-scores', 1, 7, 1), dict)
    cache.get_or_load(('judge-scores', 1, 7, 2), dict)
    cache.get_or_load(('judge-scores', 2, 7, 1), dict)
    cache.get_or_load(('leaderboard', 1), list)

    cache.invalidate('judge-scores', 1)

    assert ('judge-scores', 1, 7, 1) not in cache
    assert ('judge-scores', 1, 7, 2) not in cache
    assert ('judge-scores', 2, 7, 1) in cache
    assert ('leaderboard', 1) in cache

    cache.invalidate()
    assert len(cache) == 0


def test_signals_drop_dependent_entries(app):
    cache = get_cache()
    for key in (('judge-scores', 1, 5, 1), ('judge-feedback', 1, 5, 1), ('leaderboard', 1),
                ('team-total', 3), ('applications', 1, None), ('stats', 1), ('checked-in', 1),
                ('leaderboard', 2)):
        cache.get_or_load(key, list)

    evaluation_submitted.send(app, hackathon_id=1, judge_id=5, team_id=3, round_number=1)
    assert ('judge-scores', 1, 5, 1) not in cache
    assert ('judge-feedback', 1, 5, 1) not in cache
    assert ('leaderboard', 1) not in cache
    assert ('team-total', 3) not in cache
    assert ('leaderboard', 2) in cache

    application_changed.send(app, hackathon_id=1, application_id=9, status='accepted')
    assert ('applications', 1, None) not in cache
    assert ('stats', 1) not in cache

    team_checked_in.send(app, hackathon_id=1, application_id=9, team_id=3)
    assert ('checked-in', 1) not in cache


def test_signals_from_other_apps_are_ignored(app):
    cache = get_cache()
    cache.get_or_load(('leaderboard', 1), list)

    evaluation_submitted.send(object(), hackathon_id=1, judge_id=5, round_number=1)

    assert ('leaderboard', 1) in cache


def test_concurrent_loads_and_invalidations():
    cache = QueryCache()
    errors = []
    done = threading.Event()

    def writer():
        try:
            i = 0
            while not done.is_set():
                cache.get_or_load(('leaderboard', i), list)
                cache.invalidate('leaderboard', i - 200)
                i += 1
        except Exception as e:
            errors.append(e)

    def invalidator():
        try:
            for _ in range(3000):
                cache.invalidate('leaderboard', -1)
                len(cache)
                ('leaderboard', 0) in cache
        except Exception as e:
            errors.append(e)
        finally:
            done.set()

    threads = [threading.Thread(target=writer), threading.Thread(target=invalidator)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert errors == []


def test_load_racing_an_invalidation_is_not_stored():
    cache = QueryCache()

    def loader():
        # Scores change while the leaderboard is being computed
        cache.invalidate('leaderboard', 1)
        return ['stale']

    assert cache.get_or_load(('leaderboard', 1), loader) == ['stale']
    assert ('leaderboard', 1) not in cache
    assert cache.get_or_load(('leaderboard', 1), list) == []
