"""Heuristic bot signal shapes.

Each of the four analyses is independently optional: ``None`` means the bot
did not run, failed, or abstained. Consumers branch on presence before
reading any nested field.
"""

from dataclasses import dataclass, field

# Pace projections
PACE_HOT = "HOT"
PACE_MODERATE = "MODERATE"
PACE_SLOW = "SLOW"
PACE_PROJECTIONS = (PACE_HOT, PACE_MODERATE, PACE_SLOW)

# Vulnerable favorite confidence
CONFIDENCE_HIGH = "HIGH"
CONFIDENCE_MEDIUM = "MEDIUM"
CONFIDENCE_LOW = "LOW"
BOT_CONFIDENCE_LEVELS = (CONFIDENCE_HIGH, CONFIDENCE_MEDIUM, CONFIDENCE_LOW)

# Field spread classifications
FIELD_TIGHT = "TIGHT"
FIELD_SEPARATED = "SEPARATED"
FIELD_COMPETITIVE = "COMPETITIVE"
FIELD_MIXED = "MIXED"
FIELD_DOMINANT = "DOMINANT"
FIELD_WIDE_OPEN = "WIDE_OPEN"
FIELD_TYPES = (
    FIELD_TIGHT, FIELD_SEPARATED, FIELD_COMPETITIVE,
    FIELD_MIXED, FIELD_DOMINANT, FIELD_WIDE_OPEN,
)

SPREAD_NARROW = "NARROW"
SPREAD_MEDIUM = "MEDIUM"
SPREAD_WIDE = "WIDE"
SPREAD_LEVELS = (SPREAD_NARROW, SPREAD_MEDIUM, SPREAD_WIDE)


@dataclass
class TripTroubleHorse:
    """A horse the trip-trouble bot flagged."""

    program_number: int
    horse_name: str
    issue: str
    masked_ability: bool


@dataclass
class TripTroubleAnalysis:
    horses_with_trip_trouble: list[TripTroubleHorse] = field(default_factory=list)

    def for_horse(self, program_number: int) -> TripTroubleHorse | None:
        for h in self.horses_with_trip_trouble:
            if h.program_number == program_number:
                return h
        return None


@dataclass
class PaceScenarioAnalysis:
    pace_projection: str                # HOT | MODERATE | SLOW
    advantaged_styles: list[str] = field(default_factory=list)
    disadvantaged_styles: list[str] = field(default_factory=list)
    lone_speed_exception: bool = False
    speed_duel_likely: bool = False


@dataclass
class VulnerableFavoriteAnalysis:
    is_vulnerable: bool
    reasons: list[str] = field(default_factory=list)   # one entry per distinct flag
    confidence: str = CONFIDENCE_LOW                    # HIGH | MEDIUM | LOW


@dataclass
class FieldSpreadAnalysis:
    field_type: str                     # TIGHT | SEPARATED | COMPETITIVE | MIXED | DOMINANT | WIDE_OPEN
    top_tier_count: int = 0
    recommended_spread: str = SPREAD_MEDIUM


@dataclass
class MultiBotRawResults:
    """The four bot outputs for one race; any subset may be None."""

    trip_trouble: TripTroubleAnalysis | None = None
    pace_scenario: PaceScenarioAnalysis | None = None
    vulnerable_favorite: VulnerableFavoriteAnalysis | None = None
    field_spread: FieldSpreadAnalysis | None = None

    @property
    def success_count(self) -> int:
        return sum(
            1 for s in (
                self.trip_trouble, self.pace_scenario,
                self.vulnerable_favorite, self.field_spread,
            )
            if s is not None
        )


# Alias used by callers that think in terms of race signals
RaceSignals = MultiBotRawResults
