"""Tests for single-result point arithmetic."""

import pytest

from mjleague.scoring.points import (
    RETURN_PENALTY,
    RETURN_POINTS,
    START_POINTS,
    point_delta,
    round_half_away,
    round_half_up,
    round_tenths,
)


class TestConstants:
    """Test that constants have expected values."""

    def test_start_points(self):
        assert START_POINTS == 25000

    def test_return_points(self):
        assert RETURN_POINTS == 30000

    def test_return_penalty(self):
        assert RETURN_PENALTY == 5.0


class TestRounding:
    """Tests for the rounding helpers."""

    def test_round_half_away_positive(self):
        assert round_half_away(2.5) == 3
        assert round_half_away(2.4) == 2

    def test_round_half_away_negative(self):
        assert round_half_away(-2.5) == -3
        assert round_half_away(-2.4) == -2

    def test_round_half_away_zero(self):
        assert round_half_away(0.0) == 0
        assert round_half_away(-0.4) == 0

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2
        assert round_half_up(-2.6) == -3
        assert round_half_up(-0.5) == 0

    def test_round_tenths(self):
        assert round_tenths(12.25) == pytest.approx(12.3)
        assert round_tenths(-7.75) == pytest.approx(-7.8)
        assert round_tenths(3.04) == pytest.approx(3.0)


class TestPointDelta:
    """Tests for point_delta."""

    def test_start_points_with_top_bonus(self):
        delta = point_delta(250, 50)
        assert delta.base_point == 0
        assert delta.points_delta == 45

    def test_return_points_with_top_bonus(self):
        delta = point_delta(300, 50)
        assert delta.base_point == 5.0
        assert delta.points_delta == 50

    def test_last_place(self):
        delta = point_delta(100, -30)
        assert delta.base_point == -15.0
        assert delta.points_delta == -50

    def test_negative_score(self):
        delta = point_delta(-50, -30)
        assert delta.base_point == -30.0
        assert delta.points_delta == -65

    def test_base_point_rounded_to_tenth(self):
        # 312.34 units = 31,234 points -> 6.234 -> 6.2
        delta = point_delta(312.34, 10)
        assert delta.base_point == pytest.approx(6.2)
        assert delta.points_delta == pytest.approx(11.2)

    def test_negative_base_point_half_rounds_up(self):
        # 24,950 points -> -0.05 -> 0.0
        delta = point_delta(249.5, -10)
        assert delta.base_point == 0.0
        assert delta.points_delta == -15.0

    def test_positive_base_point_half_rounds_up(self):
        # 25,050 points -> 0.05 -> 0.1
        delta = point_delta(250.5, 10)
        assert delta.base_point == pytest.approx(0.1)

    def test_negative_base_point_below_half(self):
        # 24,940 points -> -0.06 -> -0.1
        assert point_delta(249.4, -10).base_point == pytest.approx(-0.1)

    def test_averaged_bonus_not_rounded(self):
        delta = point_delta(300, 50 / 3)
        assert delta.points_delta == pytest.approx(5 + 50 / 3 - 5)
