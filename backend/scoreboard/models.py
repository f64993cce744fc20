from datetime import datetime, timezone
from scoreboard import db
from scoreboard.enums import MatchStatus


def utcnow():
    """Naive UTC timestamp; SQLite drops tzinfo so every stored value stays naive."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value):
    return value.isoformat() if value else None


class Match(db.Model):
    __tablename__ = 'matches'
    id = db.Column(db.Integer, primary_key=True)
    weight_category = db.Column(db.String(64), nullable=False)
    red_competitor_name = db.Column(db.String(128), nullable=False)
    red_competitor_country = db.Column(db.String(64), nullable=False)
    blue_competitor_name = db.Column(db.String(128), nullable=False)
    blue_competitor_country = db.Column(db.String(64), nullable=False)
    status = db.Column(db.String(16), nullable=False, default=MatchStatus.UPCOMING.value) # upcoming, ongoing, paused, completed
    current_round = db.Column(db.Integer, nullable=False, default=1)
    total_rounds = db.Column(db.Integer, nullable=False, default=3)
    round_duration_minutes = db.Column(db.Integer, nullable=False, default=2)
    red_total_score = db.Column(db.Integer, nullable=False, default=0)
    blue_total_score = db.Column(db.Integer, nullable=False, default=0)
    winner_color = db.Column(db.String(8), nullable=True) # only set once completed
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    rounds = db.relationship(
        'Round', back_populates='match', order_by='Round.round_number',
        cascade='all, delete-orphan',
    )
    score_events = db.relationship('ScoreEvent', back_populates='match', cascade='all, delete-orphan')
    penalty_events = db.relationship('PenaltyEvent', back_populates='match', cascade='all, delete-orphan')

    def __init__(self, **kwargs):
        kwargs.setdefault('status', MatchStatus.UPCOMING.value)
        kwargs.setdefault('current_round', 1)
        kwargs.setdefault('red_total_score', 0)
        kwargs.setdefault('blue_total_score', 0)
        super(Match, self).__init__(**kwargs)

    def total_for(self, color):
        return getattr(self, f'{color}_total_score')

    def touch(self, now=None):
        self.updated_at = now or utcnow()

    def to_dict(self):
        return {
            'id': self.id,
            'weight_category': self.weight_category,
            'red_competitor_name': self.red_competitor_name,
            'red_competitor_country': self.red_competitor_country,
            'blue_competitor_name': self.blue_competitor_name,
            'blue_competitor_country': self.blue_competitor_country,
            'status': self.status,
            'current_round': self.current_round,
            'total_rounds': self.total_rounds,
            'round_duration_minutes': self.round_duration_minutes,
            'red_total_score': self.red_total_score,
            'blue_total_score': self.blue_total_score,
            'winner_color': self.winner_color,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class Round(db.Model):
    __tablename__ = 'rounds'
    __table_args__ = (
        db.UniqueConstraint('match_id', 'round_number', name='uq_rounds_match_round_number'),
    )
    id = db.Column(db.Integer, primary_key=True)
    match_id = db.Column(db.Integer, db.ForeignKey('matches.id'), nullable=False, index=True)
    round_number = db.Column(db.Integer, nullable=False)
    red_score = db.Column(db.Integer, nullable=False, default=0)
    blue_score = db.Column(db.Integer, nullable=False, default=0)
    red_penalties = db.Column(db.Integer, nullable=False, default=0)
    blue_penalties = db.Column(db.Integer, nullable=False, default=0)
    winner_color = db.Column(db.String(8), nullable=True)
    started_at = db.Column(db.DateTime, nullable=True)
    ended_at = db.Column(db.DateTime, nullable=True)
    duration_seconds = db.Column(db.Integer, nullable=True)

    match = db.relationship('Match', back_populates='rounds')

    def __init__(self, **kwargs):
        for counter in ('red_score', 'blue_score', 'red_penalties', 'blue_penalties'):
            kwargs.setdefault(counter, 0)
        super(Round, self).__init__(**kwargs)

    @property
    def has_ended(self):
        return self.ended_at is not None

    def score_for(self, color):
        return getattr(self, f'{color}_score')

    def penalties_for(self, color):
        return getattr(self, f'{color}_penalties')

    def to_dict(self):
        return {
            'id': self.id,
            'match_id': self.match_id,
            'round_number': self.round_number,
            'red_score': self.red_score,
            'blue_score': self.blue_score,
            'red_penalties': self.red_penalties,
            'blue_penalties': self.blue_penalties,
            'winner_color': self.winner_color,
            'started_at': _iso(self.started_at),
            'ended_at': _iso(self.ended_at),
            'duration_seconds': self.duration_seconds,
        }


class ScoreEvent(db.Model):
    __tablename__ = 'score_events'
    id = db.Column(db.Integer, primary_key=True)
    match_id = db.Column(db.Integer, db.ForeignKey('matches.id'), nullable=False, index=True)
    round_id = db.Column(db.Integer, db.ForeignKey('rounds.id'), nullable=False, index=True)
    competitor_color = db.Column(db.String(8), nullable=False)
    score_type = db.Column(db.String(32), nullable=False)
    points = db.Column(db.Integer, nullable=False)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow)

    match = db.relationship('Match', back_populates='score_events')
    round = db.relationship('Round')

    def to_dict(self):
        return {
            'id': self.id,
            'match_id': self.match_id,
            'round_id': self.round_id,
            'competitor_color': self.competitor_color,
            'score_type': self.score_type,
            'points': self.points,
            'timestamp': _iso(self.timestamp),
        }


class PenaltyEvent(db.Model):
    __tablename__ = 'penalty_events'
    id = db.Column(db.Integer, primary_key=True)
    match_id = db.Column(db.Integer, db.ForeignKey('matches.id'), nullable=False, index=True)
    round_id = db.Column(db.Integer, db.ForeignKey('rounds.id'), nullable=False, index=True)
    competitor_color = db.Column(db.String(8), nullable=False) # the offender
    penalty_type = db.Column(db.String(32), nullable=False)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow)

    match = db.relationship('Match', back_populates='penalty_events')
    round = db.relationship('Round')

    def to_dict(self):
        return {
            'id': self.id,
            'match_id': self.match_id,
            'round_id': self.round_id,
            'competitor_color': self.competitor_color,
            'penalty_type': self.penalty_type,
            'timestamp': _iso(self.timestamp),
        }
