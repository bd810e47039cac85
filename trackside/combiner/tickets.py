"""Exacta and trifecta ticket construction.

Positions on a ticket are algorithm ranks, not program numbers; conversion
happens only in ``render_ticket``. No rank outside the top 5 ever appears.

Combination counts are exact:
    exacta   = |W| x |P| - |W n P|
    trifecta = #{(w, p, s) : w in W, p in P, s in S, all distinct}
"""

import logging
from dataclasses import dataclass, field

from trackside.combiner.templates import TEMPLATE_A, TEMPLATE_B, TEMPLATE_C

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────
# Constants
# ──────────────────────────────────────────────

BET_EXACTA = "EXACTA"
BET_TRIFECTA = "TRIFECTA"

EXACTA_UNIT = 2.0     # $ per combination
TRIFECTA_UNIT = 1.0

MAX_TICKET_RANK = 5

# template -> (win, place) in algorithm ranks
EXACTA_LAYOUT: dict[str, tuple[list[int], list[int]]] = {
    TEMPLATE_A: ([1], [2, 3, 4]),
    TEMPLATE_B: ([2, 3, 4], [1, 2, 3, 4]),
    TEMPLATE_C: ([1, 2, 3, 4], [1, 2, 3, 4]),
}

# template -> (win, place, show) in algorithm ranks
TRIFECTA_LAYOUT: dict[str, tuple[list[int], list[int], list[int]]] = {
    TEMPLATE_A: ([1], [2, 3, 4], [2, 3, 4]),
    TEMPLATE_B: ([2, 3, 4], [1, 2, 3, 4], [1, 2, 3, 4]),
    TEMPLATE_C: ([1, 2, 3, 4, 5], [1, 2, 3, 4, 5], [1, 2, 3, 4, 5]),
}


@dataclass
class TicketStructure:
    bet_type: str
    win_position: list[int] = field(default_factory=list)
    place_position: list[int] = field(default_factory=list)
    show_position: list[int] = field(default_factory=list)   # trifecta only
    combinations: int = 0
    unit_stake: float = 0.0
    estimated_cost: float = 0.0

    @property
    def is_empty(self) -> bool:
        return self.combinations == 0


# ──────────────────────────────────────────────
# Combinatorics
# ──────────────────────────────────────────────

def calculate_exacta_combinations(win: list[int], place: list[int]) -> int:
    """Ordered (win, place) pairs with distinct horses."""
    w, p = set(win), set(place)
    return len(w) * len(p) - len(w & p)


def calculate_trifecta_combinations(win: list[int], place: list[int], show: list[int]) -> int:
    """Ordered (win, place, show) triples with three distinct horses."""
    count = 0
    for a in set(win):
        for b in set(place):
            if b == a:
                continue
            for c in set(show):
                if c != a and c != b:
                    count += 1
    return count


# ──────────────────────────────────────────────
# Builders
# ──────────────────────────────────────────────

def _present(ranks: list[int], available: set[int]) -> list[int]:
    return [r for r in ranks if r in available and r <= MAX_TICKET_RANK]


def build_exacta_ticket(
    template: str,
    algorithm_top4: list[int],
    unit_stake: float = EXACTA_UNIT,
) -> TicketStructure:
    """Build the exacta for a template.

    Args:
        template: A, B, C or PASS.
        algorithm_top4: Algorithm ranks present in the field (1..4).
        unit_stake: Dollars per combination.
    """
    layout = EXACTA_LAYOUT.get(template)
    available = set(algorithm_top4)
    if layout is None or len(available) < 2:
        return TicketStructure(bet_type=BET_EXACTA, unit_stake=unit_stake)

    win = _present(layout[0], available)
    place = _present(layout[1], available)
    combos = calculate_exacta_combinations(win, place)
    if combos == 0:
        return TicketStructure(bet_type=BET_EXACTA, unit_stake=unit_stake)

    return TicketStructure(
        bet_type=BET_EXACTA,
        win_position=win,
        place_position=place,
        combinations=combos,
        unit_stake=unit_stake,
        estimated_cost=round(combos * unit_stake, 2),
    )


def build_trifecta_ticket(
    template: str,
    algorithm_top4: list[int],
    algorithm_top5: list[int],
    unit_stake: float = TRIFECTA_UNIT,
) -> TicketStructure:
    """Build the trifecta for a template.

    Template C boxes the top 5; A and B only ever use the top 4.
    """
    layout = TRIFECTA_LAYOUT.get(template)
    available = set(algorithm_top5 if template == TEMPLATE_C else algorithm_top4)
    if layout is None or len(available) < 3:
        return TicketStructure(bet_type=BET_TRIFECTA, unit_stake=unit_stake)

    win = _present(layout[0], available)
    place = _present(layout[1], available)
    show = _present(layout[2], available)
    combos = calculate_trifecta_combinations(win, place, show)
    if combos == 0:
        return TicketStructure(bet_type=BET_TRIFECTA, unit_stake=unit_stake)

    return TicketStructure(
        bet_type=BET_TRIFECTA,
        win_position=win,
        place_position=place,
        show_position=show,
        combinations=combos,
        unit_stake=unit_stake,
        estimated_cost=round(combos * unit_stake, 2),
    )


def render_ticket(ticket: TicketStructure, rank_to_program: dict[int, int]) -> str:
    """Render a ticket's positions as program numbers, e.g. "2,3,4 / 1,2,3,4"."""
    if ticket.is_empty:
        return "NO BET"

    def _leg(ranks: list[int]) -> str:
        return ",".join(str(rank_to_program.get(r, r)) for r in ranks)

    legs = [ticket.win_position, ticket.place_position]
    if ticket.bet_type == BET_TRIFECTA:
        legs.append(ticket.show_position)
    return " / ".join(_leg(leg) for leg in legs)
