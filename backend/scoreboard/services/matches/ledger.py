import math
from typing import Dict

from scoreboard.enums import CompetitorColor, MatchStatus, PenaltyKind, Technique
from scoreboard.errors import InvalidState
from scoreboard.models import Match, Round, utcnow
from . import repository
from .rules import DISQUALIFYING_PENALTIES, PENALTY_POINTS, opponent, point_value


def _ensure_open(match: Match, rnd: Round) -> None:
    if rnd.has_ended:
        raise InvalidState(f'Round {rnd.round_number} has already ended', code='round_ended')
    if match.status != MatchStatus.ONGOING:
        raise InvalidState(f'Match {match.id} is not ongoing', code='match_not_ongoing')


def apply_score(match: Match, rnd: Round, color, technique, now=None):
    """Award a technique to ``color`` in the round and on the match total.

    Returns the appended ScoreEvent; the points stored on it are the value
    at the time of the award.
    """
    _ensure_open(match, rnd)
    color = CompetitorColor(color)
    now = now or utcnow()
    points = point_value(technique)

    setattr(rnd, f'{color}_score', rnd.score_for(color) + points)
    setattr(match, f'{color}_total_score', match.total_for(color) + points)
    match.touch(now)
    repository.update_round(rnd)
    repository.update_match(match)
    return repository.insert_score_event(match, rnd, color.value, Technique(technique).value, points, now)


def apply_penalty(match: Match, rnd: Round, offending_color, penalty_kind, now=None):
    """Charge a penalty to the offender; the opponent gains one point."""
    _ensure_open(match, rnd)
    offender = CompetitorColor(offending_color)
    kind = PenaltyKind(penalty_kind)
    beneficiary = opponent(offender)
    now = now or utcnow()

    setattr(rnd, f'{offender}_penalties', rnd.penalties_for(offender) + 1)
    setattr(rnd, f'{beneficiary}_score', rnd.score_for(beneficiary) + PENALTY_POINTS)
    setattr(match, f'{beneficiary}_total_score', match.total_for(beneficiary) + PENALTY_POINTS)
    match.touch(now)
    repository.update_round(rnd)
    repository.update_match(match)
    return repository.insert_penalty_event(match, rnd, offender.value, kind.value, now)


def round_winner(rnd: Round):
    # Red is checked first: if both sides ever reach the threshold, blue takes the round.
    if rnd.red_penalties >= DISQUALIFYING_PENALTIES:
        return CompetitorColor.BLUE.value
    if rnd.blue_penalties >= DISQUALIFYING_PENALTIES:
        return CompetitorColor.RED.value
    if rnd.red_score > rnd.blue_score:
        return CompetitorColor.RED.value
    if rnd.blue_score > rnd.red_score:
        return CompetitorColor.BLUE.value
    return None


def finalize_round(rnd: Round, now=None) -> Round:
    if rnd.has_ended:
        raise InvalidState(f'Round {rnd.round_number} has already ended', code='round_ended')
    now = now or utcnow()
    rnd.winner_color = round_winner(rnd)
    rnd.ended_at = now
    if rnd.started_at:
        rnd.duration_seconds = max(0, math.floor((now - rnd.started_at).total_seconds()))
    else:
        rnd.duration_seconds = 0
    return repository.update_round(rnd)


def totals_from_events(score_events, penalty_events) -> Dict[str, int]:
    """Rebuild match totals from the event log alone."""
    totals = {CompetitorColor.RED.value: 0, CompetitorColor.BLUE.value: 0}
    for event in score_events:
        totals[event.competitor_color] += event.points
    for event in penalty_events:
        totals[opponent(event.competitor_color).value] += PENALTY_POINTS
    return totals


def totals_from_rounds(rounds) -> Dict[str, int]:
    return {
        CompetitorColor.RED.value: sum(r.red_score for r in rounds),
        CompetitorColor.BLUE.value: sum(r.blue_score for r in rounds),
    }


def find_total_mismatches():
    """List matches whose stored totals disagree with their rounds or event log."""
    mismatches = []
    for match in repository.list_matches():
        stored = {
            CompetitorColor.RED.value: match.red_total_score,
            CompetitorColor.BLUE.value: match.blue_total_score,
        }
        from_events = totals_from_events(
            repository.list_score_events(match.id),
            repository.list_penalty_events(match.id),
        )
        from_rounds = totals_from_rounds(repository.get_rounds_for_match(match.id))
        if stored != from_events or stored != from_rounds:
            mismatches.append({
                'match_id': match.id,
                'stored': stored,
                'events': from_events,
                'rounds': from_rounds,
            })
    return mismatches
