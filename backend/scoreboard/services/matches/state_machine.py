"""Match lifecycle: upcoming -> ongoing <-> paused -> completed.

Every command runs under the match's exclusive scope and commits exactly
once. Validation happens before anything is written, and any failure rolls
the session back, so a rejected command leaves no trace.
"""

import math
from contextlib import contextmanager

from flask import current_app

from scoreboard.enums import CompetitorColor, MatchStatus
from scoreboard.errors import InvalidState, InvalidTransition, NotFound, ScoringError
from scoreboard.models import utcnow
from scoreboard.schemas import MatchCreate, MatchPatch
from . import ledger, repository
from .locks import match_scope
from .views import build_match_detail

MIN_ROUNDS, MAX_ROUNDS = 1, 5
MIN_ROUND_MINUTES, MAX_ROUND_MINUTES = 1, 10


def _checked_total_rounds(value) -> int:
    if not MIN_ROUNDS <= value <= MAX_ROUNDS:
        raise InvalidState(
            f'total_rounds must be between {MIN_ROUNDS} and {MAX_ROUNDS}, got {value}',
            code='total_rounds_out_of_range',
        )
    return int(value)


def _checked_round_minutes(value) -> int:
    if not MIN_ROUND_MINUTES <= value <= MAX_ROUND_MINUTES:
        raise InvalidState(
            f'round_duration_minutes must be between {MIN_ROUND_MINUTES} and {MAX_ROUND_MINUTES}, got {value}',
            code='round_duration_out_of_range',
        )
    # Stored as whole minutes, halves round up
    return int(math.floor(value + 0.5))


def _require_status(match, expected, message):
    if match.status != expected:
        raise InvalidTransition(f'{message} (status is {match.status})')


def _current_round(match):
    rnd = repository.get_current_round(match.id, match.current_round)
    if rnd is None:
        raise NotFound(f'Current round not found for match {match.id}', code='current_round_not_found')
    return rnd


@contextmanager
def _transaction(match_id, action):
    """Load the match row-locked, run the command body, then commit once."""
    try:
        match = repository.get_match(match_id, for_update=True)
        if match is None:
            raise NotFound(f'Match with id {match_id} not found')
        yield match
        repository.commit()
    except ScoringError as exc:
        repository.rollback()
        current_app.logger.warning(f"[rejected] match={match_id} action={action} code={exc.code} reason={exc.message}")
        raise
    except Exception:
        repository.rollback()
        raise


def create_match(payload: MatchCreate):
    cfg = current_app.config
    total_rounds = payload.total_rounds if payload.total_rounds is not None else cfg.get('DEFAULT_TOTAL_ROUNDS', 3)
    minutes = payload.round_duration_minutes
    if minutes is None:
        minutes = cfg.get('DEFAULT_ROUND_DURATION_MINUTES', 2)
    try:
        match = repository.insert_match(
            weight_category=payload.weight_category,
            red_competitor_name=payload.red_competitor_name,
            red_competitor_country=payload.red_competitor_country,
            blue_competitor_name=payload.blue_competitor_name,
            blue_competitor_country=payload.blue_competitor_country,
            total_rounds=_checked_total_rounds(total_rounds),
            round_duration_minutes=_checked_round_minutes(minutes),
        )
        repository.commit()
    except ScoringError as exc:
        repository.rollback()
        current_app.logger.warning(f"[rejected] match=new action=create code={exc.code} reason={exc.message}")
        raise
    except Exception:
        repository.rollback()
        raise
    current_app.logger.info(
        f"[create] match={match.id} rounds={match.total_rounds} minutes={match.round_duration_minutes}"
    )
    return match


def list_matches():
    return repository.list_matches(limit=current_app.config.get('MATCH_LIST_LIMIT', 0))


def get_match_detail(match_id: int) -> dict:
    with match_scope(match_id):
        match = repository.get_match(match_id)
        if match is None:
            raise NotFound(f'Match with id {match_id} not found')
        return build_match_detail(match)


def update_match(match_id: int, patch: MatchPatch):
    fields = patch.present_fields()
    with match_scope(match_id):
        with _transaction(match_id, 'update') as match:
            if 'total_rounds' in fields:
                total_rounds = _checked_total_rounds(fields['total_rounds'])
                if match.status == MatchStatus.COMPLETED and total_rounds != match.total_rounds:
                    raise InvalidTransition('Cannot change total_rounds of a completed match')
                if total_rounds < match.current_round:
                    raise InvalidState(
                        f'total_rounds cannot drop below the current round ({match.current_round})',
                        code='total_rounds_below_current',
                    )
                fields['total_rounds'] = total_rounds
            if 'round_duration_minutes' in fields:
                fields['round_duration_minutes'] = _checked_round_minutes(fields['round_duration_minutes'])
            for name, value in fields.items():
                setattr(match, name, value)
            match.touch()
            repository.update_match(match)
        current_app.logger.info(f"[update] match={match_id} fields={sorted(fields)}")
        return match


def start_match(match_id: int):
    with match_scope(match_id):
        with _transaction(match_id, 'start') as match:
            _require_status(match, MatchStatus.UPCOMING, 'Match cannot be started - it is not upcoming')
            now = utcnow()
            match.status = MatchStatus.ONGOING.value
            match.current_round = 1
            match.touch(now)
            repository.update_match(match)
            repository.insert_round(match, 1, started_at=now)
        current_app.logger.info(f"[start] match={match_id} round=1")
        return match


def pause_match(match_id: int):
    with match_scope(match_id):
        with _transaction(match_id, 'pause') as match:
            _require_status(match, MatchStatus.ONGOING, 'Can only pause ongoing matches')
            match.status = MatchStatus.PAUSED.value
            match.touch()
            repository.update_match(match)
        current_app.logger.info(f"[pause] match={match_id}")
        return match


def resume_match(match_id: int):
    with match_scope(match_id):
        with _transaction(match_id, 'resume') as match:
            _require_status(match, MatchStatus.PAUSED, 'Match is not paused')
            match.status = MatchStatus.ONGOING.value
            match.touch()
            repository.update_match(match)
        current_app.logger.info(f"[resume] match={match_id}")
        return match


def record_score(match_id: int, color, technique) -> dict:
    with match_scope(match_id):
        with _transaction(match_id, 'score') as match:
            _require_status(match, MatchStatus.ONGOING, 'Match is not ongoing')
            rnd = _current_round(match)
            event = ledger.apply_score(match, rnd, color, technique)
            current_app.logger.info(
                f"[score] match={match_id} round={rnd.round_number} color={event.competitor_color} "
                f"type={event.score_type} points={event.points}"
            )
        return build_match_detail(match)


def record_penalty(match_id: int, color, penalty_kind) -> dict:
    with match_scope(match_id):
        with _transaction(match_id, 'penalty') as match:
            _require_status(match, MatchStatus.ONGOING, 'Cannot add penalty to a match that is not ongoing')
            rnd = _current_round(match)
            event = ledger.apply_penalty(match, rnd, color, penalty_kind)
            current_app.logger.info(
                f"[penalty] match={match_id} round={rnd.round_number} offender={event.competitor_color} "
                f"type={event.penalty_type} count={rnd.penalties_for(event.competitor_color)}"
            )
        return build_match_detail(match)


def end_round(match_id: int) -> dict:
    with match_scope(match_id):
        with _transaction(match_id, 'end_round') as match:
            _require_status(match, MatchStatus.ONGOING, 'Match is not currently ongoing')
            rnd = _current_round(match)
            now = utcnow()
            ledger.finalize_round(rnd, now)
            current_app.logger.info(
                f"[end_round] match={match_id} round={rnd.round_number} winner={rnd.winner_color} "
                f"score={rnd.red_score}-{rnd.blue_score} duration={rnd.duration_seconds}s"
            )
            if match.current_round >= match.total_rounds:
                match.status = MatchStatus.COMPLETED.value
                # Decided on total points, not on rounds won
                if match.red_total_score > match.blue_total_score:
                    match.winner_color = CompetitorColor.RED.value
                elif match.blue_total_score > match.red_total_score:
                    match.winner_color = CompetitorColor.BLUE.value
                else:
                    match.winner_color = None
                current_app.logger.info(
                    f"[complete] match={match_id} winner={match.winner_color} "
                    f"red={match.red_total_score} blue={match.blue_total_score}"
                )
            else:
                match.current_round += 1
                # The next round's timer waits for an explicit start_round
                repository.insert_round(match, match.current_round)
                current_app.logger.info(f"[next_round] match={match_id} advance to round {match.current_round}")
            match.touch(now)
            repository.update_match(match)
        return build_match_detail(match)


def start_round(match_id: int) -> dict:
    with match_scope(match_id):
        with _transaction(match_id, 'start_round') as match:
            _require_status(match, MatchStatus.ONGOING, 'Match is not currently ongoing')
            rnd = _current_round(match)
            if rnd.has_ended:
                raise InvalidState(f'Round {rnd.round_number} has already ended', code='round_ended')
            if rnd.started_at is not None:
                raise InvalidState(f'Round {rnd.round_number} has already started', code='round_started')
            now = utcnow()
            rnd.started_at = now
            repository.update_round(rnd)
            match.touch(now)
            repository.update_match(match)
            current_app.logger.info(f"[start_round] match={match_id} round={rnd.round_number}")
        return build_match_detail(match)
