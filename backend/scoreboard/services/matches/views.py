from scoreboard.enums import MatchStatus
from scoreboard.models import Match
from . import repository


def build_match_detail(match: Match) -> dict:
    """Assemble the read view for a match: rounds ascending, logs chronological."""
    rounds = repository.get_rounds_for_match(match.id)
    current = None
    if match.status != MatchStatus.COMPLETED:
        current = next((r for r in rounds if r.round_number == match.current_round), None)
    return {
        'match': match.to_dict(),
        'rounds': [r.to_dict() for r in rounds],
        'current_round_data': current.to_dict() if current else None,
        'score_entries': [e.to_dict() for e in repository.list_score_events(match.id)],
        'penalty_entries': [e.to_dict() for e in repository.list_penalty_events(match.id)],
    }
