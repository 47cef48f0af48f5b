"""Tests for easing curves."""

import pytest
from floorplay.easing import EASINGS, ease, lerp


class TestCurves:
    """Every curve maps the unit interval onto itself."""

    @pytest.mark.parametrize("name", sorted(EASINGS))
    def test_endpoints(self, name):
        """Curves should start at 0 and end at 1."""
        assert EASINGS[name](0.0) == 0.0
        assert EASINGS[name](1.0) == 1.0

    def test_ease_in_starts_slow(self):
        """Ease-in should lag linear at the midpoint."""
        assert EASINGS["ease_in"](0.5) == 0.25

    def test_ease_out_starts_fast(self):
        """Ease-out should lead linear at the midpoint."""
        assert EASINGS["ease_out"](0.5) == 0.75


class TestEase:
    def test_progress_is_clamped(self):
        assert ease("linear", -0.5) == 0.0
        assert ease("ease_out", 1.5) == 1.0

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="bounce"):
            ease("bounce", 0.5)


def test_lerp():
    assert lerp(1.08, 0.5, 0.0) == 1.08
    assert lerp(1.08, 0.5, 1.0) == pytest.approx(0.5)
    assert lerp(0.0, 10.0, 0.25) == 2.5
