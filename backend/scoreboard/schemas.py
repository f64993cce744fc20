from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from scoreboard.enums import CompetitorColor, Technique, PenaltyKind

# Range checks on total_rounds / round_duration_minutes live in the state
# machine so they surface as InvalidState like every other rule violation.
# String limits mirror the column sizes in models.Match.
NAME_MAX = 128
SHORT_MAX = 64

class MatchCreate(BaseModel):
    model_config = ConfigDict(extra='ignore')

    weight_category: str = Field(min_length=1, max_length=SHORT_MAX)
    red_competitor_name: str = Field(min_length=1, max_length=NAME_MAX)
    red_competitor_country: str = Field(min_length=1, max_length=SHORT_MAX)
    blue_competitor_name: str = Field(min_length=1, max_length=NAME_MAX)
    blue_competitor_country: str = Field(min_length=1, max_length=SHORT_MAX)
    total_rounds: Optional[int] = None
    round_duration_minutes: Optional[float] = None

class MatchPatch(BaseModel):
    """Every field is optional; only fields present in the request are applied."""
    model_config = ConfigDict(extra='ignore')

    weight_category: Optional[str] = Field(None, min_length=1, max_length=SHORT_MAX)
    red_competitor_name: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX)
    red_competitor_country: Optional[str] = Field(None, min_length=1, max_length=SHORT_MAX)
    blue_competitor_name: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX)
    blue_competitor_country: Optional[str] = Field(None, min_length=1, max_length=SHORT_MAX)
    total_rounds: Optional[int] = None
    round_duration_minutes: Optional[float] = None

    def present_fields(self):
        return self.model_dump(exclude_unset=True, exclude_none=True)

class ScoreInput(BaseModel):
    competitor_color: CompetitorColor
    score_type: Technique

class PenaltyInput(BaseModel):
    competitor_color: CompetitorColor
    penalty_type: PenaltyKind
