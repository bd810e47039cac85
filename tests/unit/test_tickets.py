"""Tests for exacta/trifecta construction and combinatorics."""

import pytest

from trackside.combiner.templates import TEMPLATE_A, TEMPLATE_B, TEMPLATE_C, TEMPLATE_PASS
from trackside.combiner.tickets import (
    BET_EXACTA,
    BET_TRIFECTA,
    build_exacta_ticket,
    build_trifecta_ticket,
    calculate_exacta_combinations,
    calculate_trifecta_combinations,
    render_ticket,
)


TOP4 = [1, 2, 3, 4]
TOP5 = [1, 2, 3, 4, 5]


# ──────────────────────────────────────────────
# Combinatorics
# ──────────────────────────────────────────────

class TestExactaCombinations:
    def test_key_over_three(self):
        assert calculate_exacta_combinations([1], [2, 3, 4]) == 3

    def test_box_of_four(self):
        assert calculate_exacta_combinations([1, 2, 3, 4], [1, 2, 3, 4]) == 12

    def test_demote_favorite(self):
        assert calculate_exacta_combinations([2, 3, 4], [1, 2, 3, 4]) == 9

    def test_empty(self):
        assert calculate_exacta_combinations([], [1, 2]) == 0

    def test_same_single_horse(self):
        assert calculate_exacta_combinations([1], [1]) == 0


class TestTrifectaCombinations:
    def test_key_over_three(self):
        assert calculate_trifecta_combinations([1], [2, 3, 4], [2, 3, 4]) == 6

    def test_box_of_five(self):
        assert calculate_trifecta_combinations(TOP5, TOP5, TOP5) == 60

    def test_demote_favorite(self):
        assert calculate_trifecta_combinations([2, 3, 4], TOP4, TOP4) == 18

    @pytest.mark.parametrize("n", [3, 4, 5, 6])
    def test_box_formula(self, n):
        horses = list(range(1, n + 1))
        assert calculate_trifecta_combinations(horses, horses, horses) == n * (n - 1) * (n - 2)

    def test_two_horses_no_triple(self):
        assert calculate_trifecta_combinations([1, 2], [1, 2], [1, 2]) == 0


# ──────────────────────────────────────────────
# Builders
# ──────────────────────────────────────────────

class TestBuildExacta:
    def test_template_a(self):
        t = build_exacta_ticket(TEMPLATE_A, TOP4)
        assert t.bet_type == BET_EXACTA
        assert (t.win_position, t.place_position) == ([1], [2, 3, 4])
        assert t.combinations == 3
        assert t.estimated_cost == 6.0

    def test_template_b(self):
        t = build_exacta_ticket(TEMPLATE_B, TOP4)
        assert (t.win_position, t.place_position) == ([2, 3, 4], [1, 2, 3, 4])
        assert t.combinations == 9
        assert t.estimated_cost == 18.0

    def test_template_c(self):
        t = build_exacta_ticket(TEMPLATE_C, TOP4)
        assert t.combinations == 12
        assert t.estimated_cost == 24.0

    def test_pass_empty(self):
        t = build_exacta_ticket(TEMPLATE_PASS, TOP4)
        assert t.combinations == 0
        assert t.estimated_cost == 0
        assert t.win_position == [] and t.place_position == []

    def test_custom_unit(self):
        assert build_exacta_ticket(TEMPLATE_B, TOP4, unit_stake=1.0).estimated_cost == 9.0

    def test_short_field_filters_positions(self):
        t = build_exacta_ticket(TEMPLATE_A, [1, 2, 3])
        assert t.place_position == [2, 3]
        assert t.combinations == 2

    def test_single_horse_empty(self):
        assert build_exacta_ticket(TEMPLATE_C, [1]).combinations == 0


class TestBuildTrifecta:
    def test_template_a(self):
        t = build_trifecta_ticket(TEMPLATE_A, TOP4, TOP5)
        assert t.bet_type == BET_TRIFECTA
        assert t.show_position == [2, 3, 4]
        assert t.combinations == 6
        assert t.estimated_cost == 6.0

    def test_template_b(self):
        t = build_trifecta_ticket(TEMPLATE_B, TOP4, TOP5)
        assert t.combinations == 18
        assert t.estimated_cost == 18.0

    def test_template_c_uses_top5(self):
        t = build_trifecta_ticket(TEMPLATE_C, TOP4, TOP5)
        assert t.win_position == TOP5
        assert t.combinations == 60
        assert t.estimated_cost == 60.0

    def test_template_c_four_horse_field(self):
        t = build_trifecta_ticket(TEMPLATE_C, TOP4, TOP4)
        assert t.combinations == 24

    def test_pass_empty(self):
        t = build_trifecta_ticket(TEMPLATE_PASS, TOP4, TOP5)
        assert t.combinations == 0
        assert t.estimated_cost == 0

    def test_two_horse_field_empty(self):
        assert build_trifecta_ticket(TEMPLATE_B, [1, 2], [1, 2]).combinations == 0

    def test_never_beyond_rank_five(self):
        t = build_trifecta_ticket(TEMPLATE_C, TOP4, [1, 2, 3, 4, 5, 6])
        assert max(t.win_position + t.place_position + t.show_position) == 5


class TestRenderTicket:
    def test_program_numbers(self):
        t = build_exacta_ticket(TEMPLATE_B, TOP4)
        assert render_ticket(t, {1: 7, 2: 3, 3: 1, 4: 9}) == "3,1,9 / 7,3,1,9"

    def test_trifecta_three_legs(self):
        t = build_trifecta_ticket(TEMPLATE_A, TOP4, TOP5)
        assert render_ticket(t, {1: 1, 2: 2, 3: 3, 4: 4}) == "1 / 2,3,4 / 2,3,4"

    def test_empty(self):
        assert render_ticket(build_exacta_ticket(TEMPLATE_PASS, TOP4), {}) == "NO BET"
