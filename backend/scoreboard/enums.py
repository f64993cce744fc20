from enum import StrEnum

class MatchStatus(StrEnum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    PAUSED = "paused"
    COMPLETED = "completed"

class CompetitorColor(StrEnum):
    RED = "red"
    BLUE = "blue"

class Technique(StrEnum):
    PUNCH = "punch"
    BODY_KICK = "body_kick"
    HEAD_KICK = "head_kick"
    TURNING_BODY_KICK = "turning_body_kick"
    TURNING_HEAD_KICK = "turning_head_kick"

class PenaltyKind(StrEnum):
    GRAB = "grab"
    FALL_DOWN = "fall_down"
    OUT_OF_BOUNDS = "out_of_bounds"
