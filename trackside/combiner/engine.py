"""Signal combination entry point.

Takes the parsed race, the algorithm scoring and whatever subset of the
four bot signals came back, and produces a CombinedResult: template, exacta
and trifecta tickets, per-horse insights, narrative and confidence.

The algorithm ranking is never reordered. Signals only decide which ranks
go on a ticket and how each horse is described.
"""

import logging
import time
from dataclasses import dataclass, field

from trackside.combiner.insights import (
    TIER_HIGH,
    TIER_MEDIUM,
    TIER_MINIMAL,
    HorseInsight,
    calculate_confidence_score,
    compose_insights,
    confidence_tier,
)
from trackside.combiner.narrative import compose_narrative
from trackside.combiner.normalizer import (
    COMPETITIVE,
    SOLID,
    VULNERABLE,
    aggregate_signals,
    derive_race_type,
    determine_favorite_status,
    gate_favorite_status,
)
from trackside.combiner.templates import (
    REASON_KEY_SCRATCHED,
    REASON_PASS,
    TEMPLATE_A,
    TEMPLATE_B,
    TEMPLATE_PASS,
    select_template,
)
from trackside.combiner.tickets import (
    BET_EXACTA,
    BET_TRIFECTA,
    TicketStructure,
    build_exacta_ticket,
    build_trifecta_ticket,
    render_ticket,
)
from trackside.combiner.value_horse import ValueHorseIdentification, identify_value_horse
from trackside.config import settings
from trackside.models.race import ParsedRace, RaceScoringResult
from trackside.models.signals import (
    CONFIDENCE_HIGH,
    FIELD_SEPARATED,
    FIELD_TIGHT,
    PACE_HOT,
    MultiBotRawResults,
)

logger = logging.getLogger(__name__)

CHAOTIC_TOP_TIER_MIN = 5

# template -> algorithm ranks the ticket cannot be built without
REQUIRED_RANKS = {TEMPLATE_A: (1,), TEMPLATE_B: (1, 2)}


@dataclass
class TicketConstruction:
    template: str
    template_reason: str
    race_type: str
    favorite_status: str
    favorite_flags: list[str] = field(default_factory=list)
    value_horse: ValueHorseIdentification = field(default_factory=ValueHorseIdentification)
    algorithm_top4: list[int] = field(default_factory=list)    # program numbers, rank order
    exacta: TicketStructure = field(default_factory=lambda: TicketStructure(bet_type=BET_EXACTA))
    trifecta: TicketStructure = field(default_factory=lambda: TicketStructure(bet_type=BET_TRIFECTA))
    confidence_score: int = 0
    total_cost: float = 0.0


@dataclass
class CombinedResult:
    """Final per-race recommendation."""

    race_id: str
    race_number: int
    race_narrative: str
    confidence: str                     # HIGH | MEDIUM | LOW | MINIMAL
    bettable_race: bool
    horse_insights: list[HorseInsight] = field(default_factory=list)
    top_pick: int | None = None
    value_play: int | None = None
    avoid_list: list[int] = field(default_factory=list)
    vulnerable_favorite: bool = False
    likely_upset: bool = False
    chaotic_race: bool = False
    bot_success_count: int = 0
    ticket_construction: TicketConstruction | None = None
    processing_time_ms: int = 0


def _race_id(race: ParsedRace) -> str:
    h = race.header
    return f"{h.track_code or 'UNK'}-R{h.race_number}"


def create_empty_result(
    race: ParsedRace,
    raw: MultiBotRawResults | None = None,
    processing_time_ms: int = 0,
) -> CombinedResult:
    """Conservative result for a race with no rankable horses."""
    return CombinedResult(
        race_id=_race_id(race),
        race_number=race.header.race_number,
        race_narrative="TEMPLATE PASS - MINIMAL TIER. No ranked horses - nothing to CONFIRM",
        confidence=TIER_MINIMAL,
        bettable_race=False,
        bot_success_count=raw.success_count if raw is not None else 0,
        ticket_construction=TicketConstruction(
            template=TEMPLATE_PASS,
            template_reason=REASON_PASS,
            race_type=COMPETITIVE,
            favorite_status=SOLID,
        ),
        processing_time_ms=processing_time_ms,
    )


def combine_signals(
    raw: MultiBotRawResults | None,
    race: ParsedRace,
    scoring: RaceScoringResult,
    exacta_unit: float | None = None,
    trifecta_unit: float | None = None,
    processing_time_ms: int = 0,
) -> CombinedResult:
    """Combine algorithm ranking and bot signals into a race recommendation.

    Args:
        raw: Bot outputs; None or any None field means that bot did not run.
        race: Parsed race card.
        scoring: Algorithm scoring (rank is ground truth).
        exacta_unit: $ per exacta combination (default from settings).
        trifecta_unit: $ per trifecta combination (default from settings).
        processing_time_ms: Upstream bot time to fold into the result.

    Returns:
        CombinedResult. Degraded input resolves to a conservative PASS.
    """
    start = time.monotonic()
    raw = raw or MultiBotRawResults()
    exacta_unit = exacta_unit if exacta_unit and exacta_unit > 0 else settings.exacta_unit
    trifecta_unit = trifecta_unit if trifecta_unit and trifecta_unit > 0 else settings.trifecta_unit

    signals = aggregate_signals(race, scoring, raw)
    if not signals:
        logger.info(f"{_race_id(race)}: no ranked horses, returning empty result")
        return create_empty_result(race, raw, processing_time_ms)

    # ── Normalize ──
    race_type = derive_race_type(raw.field_spread, signals, settings.wide_open_score_band)
    display_status, favorite_flags = determine_favorite_status(raw.vulnerable_favorite)
    favorite_status = gate_favorite_status(display_status, raw.vulnerable_favorite)

    # ── Value horse + template ──
    value_horse = identify_value_horse(
        raw.trip_trouble, raw.pace_scenario, signals,
        min_odds=settings.value_min_odds,
        min_rank=settings.value_min_rank,
    )
    template, template_reason = select_template(
        race_type, favorite_status, raw.vulnerable_favorite, value_horse,
    )

    # ── Tickets ──
    ranks = [s.algorithm_rank for s in signals]
    missing = [r for r in REQUIRED_RANKS.get(template, ()) if r not in ranks]
    if missing:
        logger.info(f"{_race_id(race)}: template {template} needs scratched rank {missing}, passing")
        template, template_reason = TEMPLATE_PASS, REASON_KEY_SCRATCHED

    top4 = [r for r in ranks if r <= 4]
    top5 = [r for r in ranks if r <= 5]
    exacta = build_exacta_ticket(template, top4, exacta_unit)
    trifecta = build_trifecta_ticket(template, top4, top5, trifecta_unit)
    rank_to_program = {s.algorithm_rank: s.program_number for s in signals}

    # ── Confidence + insights ──
    score = calculate_confidence_score(race_type, raw.vulnerable_favorite, signals)
    tier = confidence_tier(score, template)
    insights = compose_insights(
        signals, scoring, template, value_horse,
        favorite_flagged=display_status == VULNERABLE,
        vulnerable_favorite=raw.vulnerable_favorite,
        pace_scenario=raw.pace_scenario,
    )
    narrative = compose_narrative(
        template, signals, value_horse,
        favorite_flags=favorite_flags,
        template_reason=template_reason,
    )

    # Best-ranked runner still in the race; under B rank 2 goes on top
    top_pick = signals[0].program_number
    if template == TEMPLATE_B:
        top_pick = rank_to_program[2]

    spread = raw.field_spread
    pace = raw.pace_scenario
    vf = raw.vulnerable_favorite
    likely_upset = (
        display_status == VULNERABLE
        and vf is not None and vf.confidence == CONFIDENCE_HIGH
        and not (spread is not None and spread.field_type == FIELD_SEPARATED)
    )
    chaotic_race = (
        (spread is not None and spread.field_type == FIELD_TIGHT
         and spread.top_tier_count >= CHAOTIC_TOP_TIER_MIN)
        or (pace is not None and pace.speed_duel_likely and pace.pace_projection == PACE_HOT)
    )

    construction = TicketConstruction(
        template=template,
        template_reason=template_reason,
        race_type=race_type,
        favorite_status=favorite_status,
        favorite_flags=favorite_flags,
        value_horse=value_horse,
        algorithm_top4=[rank_to_program[r] for r in top4],
        exacta=exacta,
        trifecta=trifecta,
        confidence_score=score,
        total_cost=round(exacta.estimated_cost + trifecta.estimated_cost, 2),
    )

    elapsed_ms = processing_time_ms + int((time.monotonic() - start) * 1000)
    logger.info(
        f"{_race_id(race)}: template {template} ({race_type}, favorite {favorite_status}), "
        f"confidence {score} {tier}, exacta {render_ticket(exacta, rank_to_program)}, "
        f"trifecta {render_ticket(trifecta, rank_to_program)}, cost ${construction.total_cost:.2f}"
    )

    return CombinedResult(
        race_id=_race_id(race),
        race_number=race.header.race_number,
        race_narrative=narrative,
        confidence=tier,
        bettable_race=(
            template != TEMPLATE_PASS
            and tier in (TIER_HIGH, TIER_MEDIUM)
            and construction.total_cost > 0
        ),
        horse_insights=insights,
        top_pick=top_pick,
        value_play=value_horse.program_number if value_horse.identified else None,
        avoid_list=[i.program_number for i in insights if i.avoid_flag],
        vulnerable_favorite=display_status == VULNERABLE,
        likely_upset=likely_upset,
        chaotic_race=chaotic_race,
        bot_success_count=raw.success_count,
        ticket_construction=construction,
        processing_time_ms=elapsed_ms,
    )


# ──────────────────────────────────────────────
# Display
# ──────────────────────────────────────────────

def format_combined_result(result: CombinedResult) -> str:
    """Plain-text summary of a combined result for logs and the CLI."""
    tc = result.ticket_construction
    lines = [f"Race {result.race_number} ({result.race_id})"]
    if tc is not None:
        lines.append(
            f"  Template {tc.template} | {tc.race_type} | favorite {tc.favorite_status} "
            f"| confidence {tc.confidence_score} ({result.confidence})"
        )
        lines.append(f"  {tc.template_reason}")
        rank_to_program = {i.projected_finish: i.program_number for i in result.horse_insights}
        for ticket in (tc.exacta, tc.trifecta):
            if ticket.is_empty:
                lines.append(f"  {ticket.bet_type}: no bet")
            else:
                lines.append(
                    f"  {ticket.bet_type}: {render_ticket(ticket, rank_to_program)} "
                    f"- {ticket.combinations} combos x ${ticket.unit_stake:.2f} = ${ticket.estimated_cost:.2f}"
                )
    lines.append(f"  Top pick: #{result.top_pick}" if result.top_pick is not None else "  Top pick: none")
    if result.value_play is not None:
        lines.append(f"  Value play: #{result.value_play}")
    lines.append(f"  Bettable: {'yes' if result.bettable_race else 'no'}")

    for i in result.horse_insights:
        flag = " [AVOID]" if i.avoid_flag else ""
        lines.append(f"    {i.projected_finish}. #{i.program_number} {i.horse_name} - {i.value_label}{flag}: {i.one_liner}")

    lines.append(f"  {result.race_narrative}")
    return "\n".join(lines)
