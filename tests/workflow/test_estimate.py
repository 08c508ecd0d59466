"""Tests for resolve_inflection, estimate and report."""

import pytest

from pystudypower import OutOfRangeError
from pystudypower.power import mdes_two_props, n_two_means
from pystudypower.workflow import (
    Collector,
    DesignKind,
    MethodKind,
    OutcomeKind,
    ScriptedInput,
    StudySpecification,
    estimate,
    report,
    resolve_inflection,
    select,
)

M, P = OutcomeKind.MEANS, OutcomeKind.PROPORTIONS
I, C = DesignKind.INDIVIDUAL, DesignKind.CLUSTER
E, N = MethodKind.VARY_EFFECT, MethodKind.VARY_SAMPLE_SIZE


def make_spec(leaf, **params):
    spec = StudySpecification(alpha=0.05, power=0.8).with_kinds(
        test_kind=leaf.test_kind, design_kind=leaf.design_kind, method_kind=leaf.method_kind,
    )
    return spec.with_params(params)


def resolve(leaf, spec, answer):
    return resolve_inflection(Collector(ScriptedInput([answer])), spec, leaf)


class TestResolveInflection:
    """Reading the operator's chosen point."""

    def test_means_mdes(self):
        leaf = select(M, I, E)
        spec = resolve(leaf, make_spec(leaf, control_mean=100, sd=100, nratio=1), "6")
        assert spec.require("mdes") == 6
        assert spec.require("treatment_mean") == 106

    def test_sample_size(self):
        leaf = select(P, I, N)
        spec = resolve(leaf, make_spec(leaf, control_prop=0.5, nratio=1), "300")
        assert spec.require("n") == 300

    @pytest.mark.parametrize("answer", ["0", "-2"])
    def test_mdes_must_be_positive(self, answer):
        leaf = select(M, I, E)
        with pytest.raises(OutOfRangeError):
            resolve(leaf, make_spec(leaf, control_mean=100, sd=100, nratio=1), answer)

    def test_proportion_mdes_in_unit_interval(self):
        leaf = select(P, I, E)
        with pytest.raises(OutOfRangeError):
            resolve(leaf, make_spec(leaf, control_prop=0.5, nratio=1), "1.5")

    def test_treatment_proportion_must_stay_below_one(self):
        leaf = select(P, C, E)
        spec = make_spec(leaf, control_prop=0.5, rho=0.05, k1=20, k2=20)
        with pytest.raises(OutOfRangeError, match="not a proportion"):
            resolve(leaf, spec, "0.6")

    def test_sample_size_must_be_whole(self):
        leaf = select(M, I, N)
        with pytest.raises(OutOfRangeError):
            resolve(leaf, make_spec(leaf, control_mean=100, sd=100, nratio=1), "300.5")


class TestEstimate:
    """Point estimates for each leaf."""

    def test_means_individual(self):
        leaf = select(M, I, E)
        spec = resolve(leaf, make_spec(leaf, control_mean=100, sd=100, nratio=1), "6")
        result = estimate(spec, leaf)
        expected = n_two_means(100, 106, sd=100)
        assert result.treatment_value == 106
        assert result.required_n == expected.n
        assert result.control_n == result.treatment_n == expected.n1
        assert result.effect == 6
        assert result.control_cluster_count is None

    def test_proportions_percentage_points(self):
        leaf = select(P, I, N)
        spec = resolve(leaf, make_spec(leaf, control_prop=0.5, nratio=1), "300")
        result = estimate(spec, leaf)
        expected = mdes_two_props(0.5, 300)
        assert (result.control_n, result.treatment_n) == (150, 150)
        assert result.effect == round((expected.treatment - 0.5) * 100, 2)
        assert 10 < result.effect < 20

    def test_cluster_counts_fixed_returns_sizes(self):
        leaf = select(M, C, E)
        spec = resolve(leaf, make_spec(leaf, control_mean=100, sd=10, rho=0.2, k1=10, k2=10), "8")
        result = estimate(spec, leaf)
        assert (result.control_cluster_count, result.treatment_cluster_count) == (10, 10)
        assert (result.control_cluster_size, result.treatment_cluster_size) == (4, 4)
        assert result.required_n == 80

    def test_cluster_sizes_fixed_returns_counts(self):
        leaf = select(P, C, N)
        spec = resolve(leaf, make_spec(leaf, control_prop=0.5, rho=0.05, m1=20, m2=20), "0.2")
        result = estimate(spec, leaf)
        assert (result.control_cluster_size, result.treatment_cluster_size) == (20, 20)
        assert (result.control_cluster_count, result.treatment_cluster_count) == (9, 9)
        assert result.effect == 20


class TestReport:
    """Final one-sentence reports."""

    def test_individual_sentence(self):
        leaf = select(M, I, E)
        spec = resolve(leaf, make_spec(leaf, control_mean=100, sd=100, nratio=1), "6")
        text = report(spec, leaf, estimate(spec, leaf))
        assert text.startswith("With alpha = 0.05 and power = 0.8")
        assert "treatment 106" in text

    def test_sample_size_sentence(self):
        leaf = select(P, I, N)
        spec = resolve(leaf, make_spec(leaf, control_prop=0.5, nratio=1), "300")
        text = report(spec, leaf, estimate(spec, leaf))
        assert "total sample size of 300" in text
        assert "percentage points" in text

    def test_cluster_sentence(self):
        leaf = select(M, C, E)
        spec = resolve(leaf, make_spec(leaf, control_mean=100, sd=10, rho=0.2, k1=10, k2=10), "8")
        text = report(spec, leaf, estimate(spec, leaf))
        assert "4 subjects per control cluster" in text
        assert "N = 80" in text
