import threading
from contextlib import contextmanager
from typing import Dict

from scoreboard import db


class _MatchLock:
    __slots__ = ('lock', 'holders')

    def __init__(self):
        self.lock = threading.Lock()
        # threads holding or waiting on `lock`
        self.holders = 0


_registry_lock = threading.Lock()
_match_locks: Dict[int, _MatchLock] = {}


def _checkout(match_id: int) -> _MatchLock:
    with _registry_lock:
        entry = _match_locks.get(match_id)
        if entry is None:
            entry = _match_locks[match_id] = _MatchLock()
        entry.holders += 1
        return entry


def _checkin(match_id: int, entry: _MatchLock) -> None:
    with _registry_lock:
        entry.holders -= 1
        if entry.holders == 0:
            del _match_locks[match_id]


@contextmanager
def match_scope(match_id: int):
    """Exclusive access to one match within this process.

    An entry lives in the registry only while some thread is inside or
    waiting on the scope, so lookups of unknown ids leave nothing behind.
    Writers also take a row lock on the match (see repository.get_match),
    which covers deployments running several worker processes.
    """
    entry = _checkout(match_id)
    try:
        with entry.lock:
            # Anything this session cached before the lock was taken may be stale
            db.session.expire_all()
            yield
    finally:
        _checkin(match_id, entry)
