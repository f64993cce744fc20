from scoreboard.enums import CompetitorColor, Technique

TECHNIQUE_POINTS = {
    Technique.PUNCH: 1,
    Technique.BODY_KICK: 2,
    Technique.HEAD_KICK: 3,
    Technique.TURNING_BODY_KICK: 4,
    Technique.TURNING_HEAD_KICK: 5,
}

# Every penalty is worth one point to the opponent, whatever its kind.
PENALTY_POINTS = 1
# Penalties in a single round that lose the round for the offender.
DISQUALIFYING_PENALTIES = 5


def point_value(technique) -> int:
    return TECHNIQUE_POINTS[Technique(technique)]


def opponent(color) -> CompetitorColor:
    return CompetitorColor.BLUE if CompetitorColor(color) is CompetitorColor.RED else CompetitorColor.RED
