"""Signal combination and exotic ticket construction."""

from trackside.combiner.engine import (
    CombinedResult,
    TicketConstruction,
    combine_signals,
    create_empty_result,
    format_combined_result,
)
from trackside.combiner.insights import (
    HorseInsight,
    calculate_confidence_score,
    compose_insights,
    confidence_tier,
)
from trackside.combiner.narrative import compose_narrative
from trackside.combiner.normalizer import (
    CHALK,
    COMPETITIVE,
    SOLID,
    VULNERABLE,
    WIDE_OPEN,
    HorseSignal,
    aggregate_signals,
    derive_race_type,
    determine_favorite_status,
    find_lone_speed_horse,
    gate_favorite_status,
)
from trackside.combiner.templates import (
    TEMPLATE_A,
    TEMPLATE_B,
    TEMPLATE_C,
    TEMPLATE_PASS,
    select_template,
)
from trackside.combiner.tickets import (
    TicketStructure,
    build_exacta_ticket,
    build_trifecta_ticket,
    calculate_exacta_combinations,
    calculate_trifecta_combinations,
    render_ticket,
)
from trackside.combiner.value_horse import ValueHorseIdentification, identify_value_horse

__all__ = [
    "CombinedResult",
    "TicketConstruction",
    "combine_signals",
    "create_empty_result",
    "format_combined_result",
    "HorseInsight",
    "calculate_confidence_score",
    "compose_insights",
    "confidence_tier",
    "compose_narrative",
    "CHALK",
    "COMPETITIVE",
    "SOLID",
    "VULNERABLE",
    "WIDE_OPEN",
    "HorseSignal",
    "aggregate_signals",
    "derive_race_type",
    "determine_favorite_status",
    "find_lone_speed_horse",
    "gate_favorite_status",
    "TEMPLATE_A",
    "TEMPLATE_B",
    "TEMPLATE_C",
    "TEMPLATE_PASS",
    "select_template",
    "TicketStructure",
    "build_exacta_ticket",
    "build_trifecta_ticket",
    "calculate_exacta_combinations",
    "calculate_trifecta_combinations",
    "render_ticket",
    "ValueHorseIdentification",
    "identify_value_horse",
]
