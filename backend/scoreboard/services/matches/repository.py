"""Persistence gateway: plain CRUD over the match tables.

Nothing here commits on its own; the state machine decides when a command's
writes become visible by calling ``commit`` once at the end.
"""

from scoreboard import db
from scoreboard.models import Match, Round, ScoreEvent, PenaltyEvent


def get_match(match_id: int, for_update: bool = False):
    query = db.select(Match).filter_by(id=match_id)
    if for_update:
        # Row lock on PostgreSQL; SQLite silently omits FOR UPDATE
        query = query.with_for_update()
    return db.session.execute(query).scalar_one_or_none()


def list_matches(limit: int = 0):
    query = db.select(Match).order_by(Match.created_at.desc(), Match.id.desc())
    if limit:
        query = query.limit(limit)
    return db.session.execute(query).scalars().all()


def insert_match(**fields) -> Match:
    match = Match(**fields)
    db.session.add(match)
    db.session.flush()
    return match


def update_match(match: Match) -> Match:
    db.session.add(match)
    db.session.flush()
    return match


def get_rounds_for_match(match_id: int):
    query = db.select(Round).filter_by(match_id=match_id).order_by(Round.round_number)
    return db.session.execute(query).scalars().all()


def get_current_round(match_id: int, round_number: int):
    query = db.select(Round).filter_by(match_id=match_id, round_number=round_number)
    return db.session.execute(query).scalar_one_or_none()


def insert_round(match: Match, round_number: int, started_at=None) -> Round:
    rnd = Round(match=match, round_number=round_number, started_at=started_at)
    db.session.add(rnd)
    db.session.flush()
    return rnd


def update_round(rnd: Round) -> Round:
    db.session.add(rnd)
    db.session.flush()
    return rnd


def insert_score_event(match: Match, rnd: Round, color: str, score_type: str, points: int, timestamp) -> ScoreEvent:
    event = ScoreEvent(
        match=match,
        round=rnd,
        competitor_color=color,
        score_type=score_type,
        points=points,
        timestamp=timestamp,
    )
    db.session.add(event)
    db.session.flush()
    return event


def insert_penalty_event(match: Match, rnd: Round, color: str, penalty_type: str, timestamp) -> PenaltyEvent:
    event = PenaltyEvent(
        match=match,
        round=rnd,
        competitor_color=color,
        penalty_type=penalty_type,
        timestamp=timestamp,
    )
    db.session.add(event)
    db.session.flush()
    return event


def list_score_events(match_id: int):
    query = db.select(ScoreEvent).filter_by(match_id=match_id).order_by(ScoreEvent.timestamp, ScoreEvent.id)
    return db.session.execute(query).scalars().all()


def list_penalty_events(match_id: int):
    query = db.select(PenaltyEvent).filter_by(match_id=match_id).order_by(PenaltyEvent.timestamp, PenaltyEvent.id)
    return db.session.execute(query).scalars().all()


def commit() -> None:
    db.session.commit()


def rollback() -> None:
    db.session.rollback()
