"""Per-horse insights and the race confidence score.

Insights are display-only. ``projected_finish`` is always the algorithm
rank; labels and one-liners describe a horse, they never move it.
"""

import logging
import math
from dataclasses import dataclass

from trackside.combiner.normalizer import (
    WIDE_OPEN,
    HorseSignal,
    has_vulnerability_penalty,
)
from trackside.combiner.templates import TEMPLATE_PASS
from trackside.combiner.value_horse import ValueHorseIdentification
from trackside.models.race import HorseScore, RaceScoringResult
from trackside.models.signals import PaceScenarioAnalysis, VulnerableFavoriteAnalysis

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────
# Value labels
# ──────────────────────────────────────────────

LABEL_BEST_BET = "BEST BET"
LABEL_PRIME_VALUE = "PRIME VALUE"
LABEL_SOLID_PLAY = "SOLID PLAY"
LABEL_FAIR_PRICE = "FAIR PRICE"
LABEL_WATCH_ONLY = "WATCH ONLY"
LABEL_SKIP = "SKIP"
LABEL_NO_CHANCE = "NO CHANCE"
LABEL_NO_VALUE = "NO VALUE"

CONTENDER_COUNT = 4

# ──────────────────────────────────────────────
# Confidence score
# ──────────────────────────────────────────────

CONFIDENCE_BASE = 65
AGREEMENT_FULL_BONUS = 20      # 4/4 positive signals
AGREEMENT_PARTIAL_BONUS = 10   # 3/4
MARGIN_BONUSES = [(20, 15), (15, 10), (10, 5)]   # (min gap rank1-rank2, bonus)
CLEAN_FAVORITE_BONUS = 10
WIDE_OPEN_PENALTY = 15
VULNERABLE_PENALTY = 15
FLAG_PENALTY = 5               # per trip/pace flag on ranks 2-4
FLAG_PENALTY_CAP = 15          # separately for trip and pace

TIER_HIGH = "HIGH"
TIER_MEDIUM = "MEDIUM"
TIER_LOW = "LOW"
TIER_MINIMAL = "MINIMAL"

TIER_HIGH_MIN = 80
TIER_MEDIUM_MIN = 60


@dataclass
class HorseInsight:
    program_number: int
    horse_name: str
    projected_finish: int
    value_label: str
    one_liner: str
    key_strength: str | None = None
    key_weakness: str | None = None
    is_contender: bool = False
    avoid_flag: bool = False


def _is_bottom_third(rank: int, field_size: int) -> bool:
    return rank > math.ceil(field_size * 2 / 3)


def _has_edge(s: HorseSignal) -> bool:
    return s.trip_trouble_flagged or s.is_lone_speed or s.pace_advantage_flagged


def _key_strength(
    s: HorseSignal,
    score: HorseScore | None,
    pace_scenario: PaceScenarioAnalysis | None,
) -> str | None:
    if s.is_lone_speed:
        return "Lone speed - clear tactical advantage"
    if s.pace_advantage_flagged and s.pace_edge_reason:
        return s.pace_edge_reason
    if s.trip_trouble_flagged:
        return "Trip trouble masked true ability"
    if pace_scenario is not None and s.running_style and s.running_style in pace_scenario.advantaged_styles:
        return f"Pace projection favors {s.running_style} runners"
    if score is not None and score.positive_factors:
        return score.positive_factors[0]
    return None


def _key_weakness(
    s: HorseSignal,
    score: HorseScore | None,
    favorite_flags: list[str],
    pace_scenario: PaceScenarioAnalysis | None,
) -> str | None:
    if s.algorithm_rank == 1 and favorite_flags:
        return favorite_flags[0]
    if pace_scenario is not None and s.running_style and s.running_style in pace_scenario.disadvantaged_styles:
        return f"Pace projection works against {s.running_style} runners"
    if score is not None and score.negative_factors:
        return score.negative_factors[0]
    return None


def _one_liner(s: HorseSignal, score: HorseScore | None, is_value: bool, value_angle: str | None) -> str:
    if is_value and value_angle:
        return f"Value angle: {value_angle}"
    if s.is_lone_speed:
        return "Lone speed - should wire field if clean break"
    if s.trip_trouble_flagged:
        return "Trip trouble masked true ability in last start"
    if s.pace_advantage_flagged:
        return s.pace_edge_reason or "Pace sets up for this running style"
    if score is not None and score.positive_factors:
        return score.positive_factors[0]
    if score is not None and score.negative_factors:
        return f"Concern: {score.negative_factors[0]}"
    return f"Ranked #{s.algorithm_rank} by algorithm"


def compose_insights(
    ranked_signals: list[HorseSignal],
    scoring: RaceScoringResult,
    template: str,
    value_horse: ValueHorseIdentification | None,
    favorite_flagged: bool = False,
    vulnerable_favorite: VulnerableFavoriteAnalysis | None = None,
    pace_scenario: PaceScenarioAnalysis | None = None,
) -> list[HorseInsight]:
    """Build one HorseInsight per ranked horse, in algorithm rank order.

    Args:
        ranked_signals: Aggregated signals, rank order.
        scoring: Scoring result (positive/negative factors).
        template: Selected template; only logged here.
        value_horse: Value-horse identification, if any.
        favorite_flagged: True when the favorite is VULNERABLE for display.
        vulnerable_favorite: Raw vulnerable-favorite analysis for flag text.
        pace_scenario: Pace analysis for style-based strength/weakness text.
    """
    scores = {s.program_number: s for s in scoring.scores}
    n = len(ranked_signals)
    contenders = min(CONTENDER_COUNT, n)
    favorite_flags = list(vulnerable_favorite.reasons) if (favorite_flagged and vulnerable_favorite) else []
    value_pn = value_horse.program_number if value_horse is not None and value_horse.identified else None

    insights: list[HorseInsight] = []
    for s in ranked_signals:
        score = scores.get(s.program_number)
        rank = s.algorithm_rank
        bottom = _is_bottom_third(rank, n)
        negatives = len(score.negative_factors) if score is not None else 0
        strength = _key_strength(s, score, pace_scenario)
        weakness = _key_weakness(s, score, favorite_flags, pace_scenario)
        is_value = s.program_number == value_pn

        if rank == 1 and favorite_flagged:
            label = LABEL_FAIR_PRICE
        elif is_value:
            label = LABEL_PRIME_VALUE
        elif bottom:
            label = LABEL_NO_CHANCE if negatives >= 3 else LABEL_SKIP
        elif rank == 1:
            if _has_edge(s):
                label = LABEL_BEST_BET
            elif weakness:
                label = LABEL_SOLID_PLAY
            else:
                label = LABEL_PRIME_VALUE
        elif rank <= 3:
            label = LABEL_PRIME_VALUE if _has_edge(s) else LABEL_SOLID_PLAY
        elif rank <= 5:
            label = LABEL_WATCH_ONLY
        else:
            label = LABEL_NO_VALUE

        insights.append(HorseInsight(
            program_number=s.program_number,
            horse_name=s.horse_name,
            projected_finish=rank,
            value_label=label,
            one_liner=_one_liner(s, score, is_value, value_horse.angle if is_value else None),
            key_strength=strength,
            key_weakness=weakness,
            is_contender=rank <= contenders,
            avoid_flag=bottom and negatives >= 2,
        ))

    logger.debug(f"Composed {len(insights)} insights under template {template}")
    return insights


def calculate_confidence_score(
    race_type: str,
    vulnerable_favorite: VulnerableFavoriteAnalysis | None,
    signals: list[HorseSignal],
) -> int:
    """Score 0-100 for how much the signals agree with the algorithm's top pick.

    Args:
        race_type: CHALK, COMPETITIVE or WIDE_OPEN.
        vulnerable_favorite: Raw analysis, or None.
        signals: Aggregated signals in algorithm rank order.
    """
    ranked = sorted(signals, key=lambda s: s.algorithm_rank)
    if not ranked:
        return 0

    top = ranked[0]
    chasers = [s for s in ranked if 2 <= s.algorithm_rank <= 4]
    is_vulnerable = vulnerable_favorite is not None and vulnerable_favorite.is_vulnerable
    wide_open = race_type == WIDE_OPEN

    score = CONFIDENCE_BASE

    positives = sum([
        not top.trip_trouble_flagged,
        top.pace_advantage_flagged,
        not is_vulnerable,
        not wide_open,
    ])
    if positives == 4:
        score += AGREEMENT_FULL_BONUS
    elif positives == 3:
        score += AGREEMENT_PARTIAL_BONUS

    if len(ranked) >= 2:
        gap = top.algorithm_score - ranked[1].algorithm_score
        for min_gap, bonus in MARGIN_BONUSES:
            if gap >= min_gap:
                score += bonus
                break

    trip_flags = sum(1 for s in chasers if s.trip_trouble_flagged)
    pace_flags = sum(1 for s in chasers if s.pace_advantage_flagged)

    if (not is_vulnerable and not wide_open and not top.trip_trouble_flagged
            and trip_flags == 0 and pace_flags == 0):
        score += CLEAN_FAVORITE_BONUS

    if wide_open:
        score -= WIDE_OPEN_PENALTY
    if has_vulnerability_penalty(vulnerable_favorite):
        score -= VULNERABLE_PENALTY
    score -= min(trip_flags * FLAG_PENALTY, FLAG_PENALTY_CAP)
    score -= min(pace_flags * FLAG_PENALTY, FLAG_PENALTY_CAP)

    return max(0, min(100, score))


def confidence_tier(score: int, template: str) -> str:
    """Map a confidence score to a tier; PASS is always MINIMAL."""
    if template == TEMPLATE_PASS:
        return TIER_MINIMAL
    if score >= TIER_HIGH_MIN:
        return TIER_HIGH
    if score >= TIER_MEDIUM_MIN:
        return TIER_MEDIUM
    return TIER_LOW
