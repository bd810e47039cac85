"""Input models for race cards, scoring and bot signals."""

from trackside.models.race import (
    HorseEntry,
    HorseScore,
    ParsedRace,
    RaceHeader,
    RaceScoringResult,
    parse_morning_line,
)
from trackside.models.signals import (
    FieldSpreadAnalysis,
    MultiBotRawResults,
    PaceScenarioAnalysis,
    RaceSignals,
    TripTroubleAnalysis,
    TripTroubleHorse,
    VulnerableFavoriteAnalysis,
)

__all__ = [
    "HorseEntry",
    "HorseScore",
    "ParsedRace",
    "RaceHeader",
    "RaceScoringResult",
    "parse_morning_line",
    "FieldSpreadAnalysis",
    "MultiBotRawResults",
    "PaceScenarioAnalysis",
    "RaceSignals",
    "TripTroubleAnalysis",
    "TripTroubleHorse",
    "VulnerableFavoriteAnalysis",
]
