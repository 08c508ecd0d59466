"""Tests for n_two_props and mdes_two_props."""

import pytest

from pystudypower import ComputationError
from pystudypower.power import mdes_two_props, n_two_props


class TestNTwoProps:
    """Tests for the two-proportion z test sample size."""

    def test_textbook(self):
        """0.5 vs 0.6, alpha=0.05, power=0.80 -> 388 per group."""
        r = n_two_props(0.5, 0.6)
        assert (r.n1, r.n2) == (388, 388)

    def test_achieved_power_meets_target(self):
        r = n_two_props(0.2, 0.3)
        assert r.power >= 0.80

    def test_symmetric_around_half(self):
        """0.5 -> 0.6 and 0.5 -> 0.4 have the same variances."""
        assert n_two_props(0.5, 0.6).n == n_two_props(0.5, 0.4).n

    def test_larger_difference_smaller_n(self):
        ns = [n_two_props(0.5, p2).n for p2 in (0.55, 0.6, 0.65, 0.7)]
        assert ns == sorted(ns, reverse=True)
        assert len(set(ns)) == len(ns)

    def test_unequal_allocation(self):
        r = n_two_props(0.5, 0.6, nratio=3.0)
        assert r.n2 == 3 * r.n1

    def test_zero_effect_error(self):
        with pytest.raises(ComputationError, match="no effect"):
            n_two_props(0.4, 0.4)

    def test_large_effect_minimum_design(self):
        """Power target already met with 2 per arm: return that design."""
        r = n_two_props(0.01, 0.99, alpha=0.5, power=0.6)
        assert (r.n1, r.n2) == (2, 2)
        assert r.power >= 0.6

    @pytest.mark.parametrize("p2", [0.0, 1.0, 1.2])
    def test_invalid_proportion(self, p2):
        with pytest.raises(ValueError, match="p2"):
            n_two_props(0.5, p2)


class TestMdesTwoProps:
    """Tests for the detectable treatment proportion."""

    def test_detectable_proportion(self):
        r = mdes_two_props(0.5, 300)
        assert (r.n1, r.n2) == (150, 150)
        assert 0.6 < r.treatment < 0.7

    def test_roundtrip(self):
        r1 = mdes_two_props(0.3, 400)
        r2 = n_two_props(0.3, r1.treatment)
        assert abs(r2.n - 400) <= 2

    def test_more_subjects_smaller_mdes(self):
        assert mdes_two_props(0.5, 500).delta < mdes_two_props(0.5, 100).delta

    def test_unreachable(self):
        """Too few subjects to detect anything below p2 = 1."""
        with pytest.raises(ComputationError, match="Cannot solve"):
            mdes_two_props(0.9, 10)

    def test_power_must_exceed_alpha(self):
        with pytest.raises(ValueError, match="exceed alpha"):
            mdes_two_props(0.5, 100, alpha=0.1, power=0.05)
