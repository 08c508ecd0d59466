"""Tests for run_sweep and the exported graph."""

import pytest

from pystudypower.workflow import (
    DesignKind,
    MethodKind,
    OutcomeKind,
    StudySpecification,
    SweepRequest,
    format_table,
    run_sweep,
    select,
)


def make_spec(leaf, request, **params):
    spec = StudySpecification(alpha=0.05, power=0.8).with_kinds(
        test_kind=leaf.test_kind, design_kind=leaf.design_kind, method_kind=leaf.method_kind,
    )
    return spec.with_params(params).with_sweep(request)


@pytest.fixture
def means_leaf():
    return select(OutcomeKind.MEANS, DesignKind.INDIVIDUAL, MethodKind.VARY_EFFECT)


class TestRunSweep:
    """Sweep tables and exported graphs."""

    def test_exports_named_graph(self, tmp_path, means_leaf):
        spec = make_spec(means_leaf, SweepRequest(100, 110, 2),
                         control_mean=100, sd=100, nratio=1)
        result = run_sweep(spec, means_leaf, tmp_path)
        assert result.artifact == tmp_path / "MI_vary_effect.png"
        assert result.artifact.stat().st_size > 0
        assert [p.name for p in tmp_path.iterdir()] == ["MI_vary_effect.png"]

    def test_table(self, tmp_path, means_leaf):
        spec = make_spec(means_leaf, SweepRequest(100, 110, 2),
                         control_mean=100, sd=100, nratio=1)
        result = run_sweep(spec, means_leaf, tmp_path)
        assert list(result.table["value"]) == [100, 102, 104, 106, 108, 110]
        assert len(result.feasible) == 5
        assert result.request == spec.sweep

    def test_sample_size_axis(self, tmp_path):
        leaf = select(OutcomeKind.PROPORTIONS, DesignKind.INDIVIDUAL, MethodKind.VARY_SAMPLE_SIZE)
        spec = make_spec(leaf, SweepRequest(100, 500, 50), control_prop=0.5, nratio=1)
        result = run_sweep(spec, leaf, tmp_path)
        assert len(result.table) == 9
        assert result.artifact.name == "PI_vary_sample_size.png"

    def test_cluster_graph(self, tmp_path):
        leaf = select(OutcomeKind.MEANS, DesignKind.CLUSTER, MethodKind.VARY_EFFECT)
        spec = make_spec(leaf, SweepRequest(105, 115, 2),
                         control_mean=100, sd=10, rho=0.2, k1=10, k2=10)
        result = run_sweep(spec, leaf, tmp_path)
        assert not result.table["feasible"].iloc[0]
        assert result.artifact.name == "MC_fixed_cluster_count.png"

    def test_requires_sweep_request(self, tmp_path, means_leaf):
        spec = StudySpecification(alpha=0.05, power=0.8).with_kinds(
            test_kind=OutcomeKind.MEANS, design_kind=DesignKind.INDIVIDUAL,
            method_kind=MethodKind.VARY_EFFECT,
        ).with_params({"control_mean": 100, "sd": 100, "nratio": 1})
        with pytest.raises(ValueError, match="no sweep request"):
            run_sweep(spec, means_leaf, tmp_path)

    def test_format_table(self, tmp_path, means_leaf):
        spec = make_spec(means_leaf, SweepRequest(100, 110, 2),
                         control_mean=100, sd=100, nratio=1)
        text = format_table(run_sweep(spec, means_leaf, tmp_path))
        assert "treatment mean" in text
        assert "MI_vary_effect.png" in text

    def test_format_table_percentage_points(self, tmp_path):
        leaf = select(OutcomeKind.PROPORTIONS, DesignKind.INDIVIDUAL, MethodKind.VARY_SAMPLE_SIZE)
        spec = make_spec(leaf, SweepRequest(100, 500, 50), control_prop=0.5, nratio=1)
        result = run_sweep(spec, leaf, tmp_path)
        text = format_table(result)
        assert "delta (pp)" in text
        assert f"{result.table['delta'].iloc[0] * 100:.4g}" in text
