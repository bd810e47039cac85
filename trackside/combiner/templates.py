"""Wagering template selection.

Precedence table, first match wins:

    1. WIDE_OPEN race              -> C    (box the contenders)
    2. Vulnerable favorite         -> B    (demote the favorite to place)
    3. Solid favorite + value horse -> A   (key the favorite over the value)
    4. Everything else             -> PASS (no edge, no bet)
"""

import logging

from trackside.combiner.normalizer import SOLID, VULNERABLE, WIDE_OPEN
from trackside.combiner.value_horse import ValueHorseIdentification
from trackside.models.signals import (
    CONFIDENCE_HIGH,
    CONFIDENCE_MEDIUM,
    VulnerableFavoriteAnalysis,
)

logger = logging.getLogger(__name__)

TEMPLATE_A = "A"
TEMPLATE_B = "B"
TEMPLATE_C = "C"
TEMPLATE_PASS = "PASS"
TEMPLATES = (TEMPLATE_A, TEMPLATE_B, TEMPLATE_C, TEMPLATE_PASS)

REASON_WIDE_OPEN = "Wide open field - box the contenders."
REASON_PASS = "Solid favorite, no identified value horse - no betting edge."
REASON_KEY_SCRATCHED = "Keyed horse is scratched - no ticket to build."


def select_template(
    race_type: str,
    favorite_status: str,
    vulnerable_favorite: VulnerableFavoriteAnalysis | None,
    value_horse: ValueHorseIdentification | None,
) -> tuple[str, str]:
    """Pick exactly one template and the reason text for it."""
    if race_type == WIDE_OPEN:
        template, reason = TEMPLATE_C, REASON_WIDE_OPEN

    elif (favorite_status == VULNERABLE
            and vulnerable_favorite is not None
            and vulnerable_favorite.confidence in (CONFIDENCE_HIGH, CONFIDENCE_MEDIUM)):
        flags = "; ".join(vulnerable_favorite.reasons) or "flagged by analysis"
        template = TEMPLATE_B
        reason = f"Vulnerable favorite ({vulnerable_favorite.confidence}): {flags}"

    elif favorite_status == SOLID and value_horse is not None and value_horse.identified:
        name = f" {value_horse.horse_name}" if value_horse.horse_name else ""
        template = TEMPLATE_A
        reason = f"Solid favorite with value horse #{value_horse.program_number}{name}: {value_horse.angle}"

    else:
        template, reason = TEMPLATE_PASS, REASON_PASS

    logger.debug(f"Template {template}: race_type={race_type} favorite={favorite_status}")
    return template, reason
