"""Race card and algorithm scoring inputs.

These are produced upstream (DRF parser and scoring engine) and consumed
read-only by the combiner. ``from_dict`` loaders accept either camelCase
(as exported by the scoring service) or snake_case keys and never raise on
bad values: counts are clamped, unparsable odds become ``None``.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from trackside.models.coerce import as_bool, as_float, as_int, as_str_list, first_of


_ML_FRACTION = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*[-/]\s*(\d+(?:\.\d+)?)\s*$")
_ML_PLAIN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*$")


def parse_morning_line(odds: Any) -> float | None:
    """Convert a morning-line string to decimal odds-against.

    "5-2" -> 2.5, "9/5" -> 1.8, "3" -> 3.0, "EVEN" -> 1.0.
    Returns None for anything unparsable.
    """
    if odds is None or isinstance(odds, bool):
        return None
    if isinstance(odds, (int, float)):
        return float(odds) if odds >= 0 else None

    text = str(odds).strip().upper()
    if text in ("EVEN", "EVN", "EVENS"):
        return 1.0

    m = _ML_FRACTION.match(text)
    if m:
        num, den = float(m.group(1)), float(m.group(2))
        if den <= 0:
            return None
        return round(num / den, 2)

    m = _ML_PLAIN.match(text)
    if m:
        return float(m.group(1))
    return None


@dataclass
class RaceHeader:
    """Race-level header from the parsed card."""

    race_number: int
    track_code: str = ""
    track_name: str = ""
    surface: str = ""
    distance: str = ""
    distance_furlongs: float | None = None
    classification: str = ""
    purse: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "RaceHeader":
        furlongs = first_of(data, "distanceFurlongs", "distance_furlongs")
        return cls(
            race_number=as_int(first_of(data, "raceNumber", "race_number", default=0)),
            track_code=str(first_of(data, "trackCode", "track_code", default="")),
            track_name=str(first_of(data, "trackName", "track_name", default="")),
            surface=str(first_of(data, "surface", default="")),
            distance=str(first_of(data, "distance", default="")),
            distance_furlongs=as_float(furlongs) if furlongs is not None else None,
            classification=str(first_of(data, "classification", default="")),
            purse=max(0.0, as_float(first_of(data, "purse", default=0))),
        )


@dataclass
class HorseEntry:
    """A single runner on the parsed card."""

    program_number: int
    horse_name: str
    post_position: int = 0
    morning_line_odds: str = ""
    running_style: str = ""     # E | E/P | P | S (C for deep closers)
    is_scratched: bool = False

    @property
    def morning_line_decimal(self) -> float | None:
        return parse_morning_line(self.morning_line_odds)

    @classmethod
    def from_dict(cls, data: dict) -> "HorseEntry":
        return cls(
            program_number=as_int(first_of(data, "programNumber", "program_number", default=0)),
            horse_name=str(first_of(data, "horseName", "horse_name", default="")),
            post_position=as_int(first_of(data, "postPosition", "post_position", default=0)),
            morning_line_odds=str(first_of(data, "morningLineOdds", "morning_line_odds", default="")),
            running_style=str(first_of(data, "runningStyle", "running_style", default="")),
            is_scratched=as_bool(first_of(data, "isScratched", "is_scratched", default=False)),
        )


@dataclass
class ParsedRace:
    """Parsed race card: header plus horses in program order."""

    header: RaceHeader
    horses: list[HorseEntry] = field(default_factory=list)

    def horse(self, program_number: int) -> HorseEntry | None:
        for h in self.horses:
            if h.program_number == program_number:
                return h
        return None

    @classmethod
    def from_dict(cls, data: dict) -> "ParsedRace":
        horses_raw = data.get("horses") or []
        return cls(
            header=RaceHeader.from_dict(data.get("header") or {}),
            horses=[HorseEntry.from_dict(h) for h in horses_raw if isinstance(h, dict)],
        )


@dataclass
class HorseScore:
    """Algorithm output for one horse. ``rank`` is ground truth."""

    program_number: int
    horse_name: str
    rank: int
    final_score: float
    confidence_tier: str = "low"    # high | medium | low
    positive_factors: list[str] = field(default_factory=list)
    negative_factors: list[str] = field(default_factory=list)
    is_scratched: bool = False
    morning_line_odds: str = ""
    morning_line_decimal: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "HorseScore":
        ml_odds = str(first_of(data, "morningLineOdds", "morning_line_odds", default=""))
        ml_decimal = first_of(data, "morningLineDecimal", "morning_line_decimal")
        if ml_decimal is not None:
            ml_decimal = parse_morning_line(ml_decimal)
        if ml_decimal is None:
            ml_decimal = parse_morning_line(ml_odds)
        return cls(
            program_number=as_int(first_of(data, "programNumber", "program_number", default=0)),
            horse_name=str(first_of(data, "horseName", "horse_name", default="")),
            rank=as_int(first_of(data, "rank", default=0)),
            final_score=as_float(first_of(data, "finalScore", "final_score", "score", default=0)),
            confidence_tier=str(first_of(data, "confidenceTier", "confidence_tier", default="low")).lower(),
            positive_factors=as_str_list(first_of(data, "positiveFactors", "positive_factors")),
            negative_factors=as_str_list(first_of(data, "negativeFactors", "negative_factors")),
            is_scratched=as_bool(first_of(data, "isScratched", "is_scratched", default=False)),
            morning_line_odds=ml_odds,
            morning_line_decimal=ml_decimal,
        )


@dataclass
class RaceScoringResult:
    """Scoring engine output for a race."""

    scores: list[HorseScore] = field(default_factory=list)
    race_analysis: dict = field(default_factory=dict)

    def ranked(self) -> list[HorseScore]:
        """Non-scratched scores in algorithm rank order."""
        active = [s for s in self.scores if not s.is_scratched and s.rank > 0]
        return sorted(active, key=lambda s: s.rank)

    @classmethod
    def from_dict(cls, data: dict) -> "RaceScoringResult":
        scores_raw = data.get("scores") or []
        analysis = first_of(data, "raceAnalysis", "race_analysis", default={})
        return cls(
            scores=[HorseScore.from_dict(s) for s in scores_raw if isinstance(s, dict)],
            race_analysis=analysis if isinstance(analysis, dict) else {},
        )
