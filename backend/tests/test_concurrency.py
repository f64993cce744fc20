import threading

import pytest

from scoreboard.schemas import MatchCreate
from scoreboard.services.matches import ledger, locks, state_machine as sm
from helpers import match_payload


def test_scope_registry_is_per_match_and_released(flask_app):
    with locks.match_scope(1):
        with locks.match_scope(2):
            assert set(locks._match_locks) == {1, 2}
            assert locks._match_locks[1] is not locks._match_locks[2]
    assert locks._match_locks == {}


def test_scope_releases_entry_when_body_raises(flask_app):
    with pytest.raises(RuntimeError):
        with locks.match_scope(7):
            raise RuntimeError('boom')
    assert 7 not in locks._match_locks


def test_scope_serializes_threads_on_same_match(file_app):
    inside = threading.Event()
    release = threading.Event()
    order = []

    def _holder():
        with file_app.app_context():
            with locks.match_scope(1):
                inside.set()
                release.wait(5)
                order.append('holder')

    def _waiter():
        with file_app.app_context():
            with locks.match_scope(1):
                order.append('waiter')

    holder = threading.Thread(target=_holder)
    holder.start()
    assert inside.wait(5)
    waiter = threading.Thread(target=_waiter)
    waiter.start()
    waiter.join(0.2)
    assert order == []
    release.set()
    holder.join()
    waiter.join()
    assert order == ['holder', 'waiter']
    assert locks._match_locks == {}


def test_unknown_match_lookups_do_not_grow_registry(client):
    before = len(locks._match_locks)
    for match_id in range(1000, 1200):
        assert client.get(f'/api/matches/{match_id}').status_code == 404
        res = client.post(f'/api/matches/{match_id}/scores', json={'competitor_color': 'red', 'score_type': 'punch'})
        assert res.status_code == 404
    assert len(locks._match_locks) == before


def test_concurrent_scores_are_not_lost(file_app):
    with file_app.app_context():
        match_id = sm.create_match(MatchCreate(**match_payload())).id
        sm.start_match(match_id)

    workers, per_worker = 6, 5
    errors = []

    def _worker(color):
        try:
            with file_app.app_context():
                for _ in range(per_worker):
                    sm.record_score(match_id, color, 'body_kick')
                    sm.record_penalty(match_id, color, 'grab')
        except Exception as exc:  # surfaced through the errors list
            errors.append(exc)

    threads = [threading.Thread(target=_worker, args=('red' if i % 2 else 'blue',)) for i in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    with file_app.app_context():
        detail = sm.get_match_detail(match_id)
        # each side: 3 workers x 5 body kicks x 2 points, plus 15 opponent penalties
        assert detail['match']['red_total_score'] == 3 * per_worker * 2 + 3 * per_worker
        assert detail['match']['blue_total_score'] == 3 * per_worker * 2 + 3 * per_worker
        assert len(detail['score_entries']) == workers * per_worker
        assert len(detail['penalty_entries']) == workers * per_worker
        assert detail['current_round_data']['red_penalties'] == 3 * per_worker
        assert ledger.find_total_mismatches() == []
        assert locks._match_locks == {}
