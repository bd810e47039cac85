"""Template-keyed race narrative.

Downstream report generators match on the marker strings, so every marker
lives in NARRATIVE_MARKERS and nowhere else.
"""

from trackside.combiner.normalizer import HorseSignal
from trackside.combiner.templates import TEMPLATE_A, TEMPLATE_B, TEMPLATE_C, TEMPLATE_PASS
from trackside.combiner.value_horse import ValueHorseIdentification

# template -> (headline, marker lines); {fav}/{second}/{value}/{box} are program numbers
NARRATIVE_MARKERS: dict[str, tuple[str, list[str]]] = {
    TEMPLATE_A: (
        "TEMPLATE A - Solid Favorite",
        ["CONFIRM #{fav} on top", "Key #{fav} over #{underneath}", "Value: #{value}"],
    ),
    TEMPLATE_B: (
        "TEMPLATE B - Vulnerable Favorite",
        ["Demote #{fav} to place", "Key #{second} on top with #{underneath_b}"],
    ),
    TEMPLATE_C: (
        "TEMPLATE C - Wide Open",
        ["Box #{box}"],
    ),
    TEMPLATE_PASS: (
        "TEMPLATE PASS - MINIMAL TIER",
        ["CONFIRM #{fav} as the algorithm top pick", "No betting edge - pass or minimum stake"],
    ),
}


def _join(program_numbers: list[int]) -> str:
    return ",".join(str(pn) for pn in program_numbers) or "-"


def compose_narrative(
    template: str,
    ranked_signals: list[HorseSignal],
    value_horse: ValueHorseIdentification | None = None,
    favorite_flags: list[str] | None = None,
    template_reason: str = "",
) -> str:
    """Render the narrative for a race from the marker table."""
    headline, lines = NARRATIVE_MARKERS.get(template, NARRATIVE_MARKERS[TEMPLATE_PASS])
    by_rank = {s.algorithm_rank: s.program_number for s in ranked_signals}
    top5 = [by_rank[r] for r in range(1, 6) if r in by_rank]
    running = [by_rank[r] for r in sorted(by_rank)]
    fav = running[0] if running else "-"
    second = running[1] if len(running) > 1 else "-"

    values = {
        "fav": fav,
        "second": second,
        "underneath": _join(top5[1:4]),
        "underneath_b": _join([pn for pn in top5[:4] if pn != second]),
        "box": _join(top5 if template == TEMPLATE_C else top5[:4]),
        "value": (
            value_horse.program_number
            if value_horse is not None and value_horse.identified else "-"
        ),
    }

    parts = [headline] + [line.format(**values) for line in lines]
    if template == TEMPLATE_B and favorite_flags:
        parts.append(f"Flags: {'; '.join(favorite_flags)}")
    if template_reason:
        parts.append(template_reason)
    return ". ".join(parts)
