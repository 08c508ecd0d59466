"""Console presentation of sweep tables and final results."""

from __future__ import annotations

from pystudypower.workflow._design import MEANS, Leaf
from pystudypower.workflow._estimate import PointEstimateResult
from pystudypower.workflow._spec import StudySpecification
from pystudypower.workflow._sweep import SweepResult

_TABLE_COLUMNS = {
    None: ["value", "n", "n1", "n2", "power"],
    "count": ["value", "k1", "k2", "size1", "size2", "n", "power"],
    "size": ["value", "k1", "k2", "size1", "size2", "n", "power"],
}
_N_AXIS_COLUMNS = ["value", "n1", "n2", "treatment", "delta"]


def format_table(sweep: SweepResult) -> str:
    """Render the sweep table, one row per grid point.

    Proportion differences are shown in percentage points, as in the report.
    """
    leaf = sweep.leaf
    columns = _N_AXIS_COLUMNS if leaf.axis == "n" else _TABLE_COLUMNS[leaf.fixed_cluster]
    table = sweep.table[columns].rename(columns={"value": leaf.range_label})
    if "delta" in columns and leaf.test_kind is not MEANS:
        table = table.assign(delta=table["delta"] * 100.0).rename(
            columns={"delta": "delta (pp)"}
        )
    text = table.to_string(index=False, na_rep="-", float_format=lambda v: f"{v:.4g}")
    return f"{text}\n\nGraph saved to {sweep.artifact}"


def _effect_phrase(leaf: Leaf, result: PointEstimateResult) -> str:
    if leaf.test_kind is MEANS:
        return (
            f"a difference in means of {result.effect:g} "
            f"(control {result.control_value:g}, treatment {result.treatment_value:.4g})"
        )
    return (
        f"a difference of {result.effect:g} percentage points "
        f"(control {result.control_value:g}, treatment {result.treatment_value:.4g})"
    )


def report(
    spec: StudySpecification,
    leaf: Leaf,
    result: PointEstimateResult,
) -> str:
    """One sentence describing the final design."""
    prefix = f"With alpha = {spec.alpha:g} and power = {spec.power:g}, "
    effect = _effect_phrase(leaf, result)

    if leaf.axis == "n":
        return (
            f"{prefix}a total sample size of {result.required_n} "
            f"({result.control_n} control, {result.treatment_n} treatment) "
            f"can detect {effect}."
        )
    if leaf.fixed_cluster == "count":
        return (
            f"{prefix}detecting {effect} with {result.control_cluster_count} control and "
            f"{result.treatment_cluster_count} treatment clusters requires "
            f"{result.control_cluster_size} subjects per control cluster and "
            f"{result.treatment_cluster_size} per treatment cluster "
            f"(N = {result.required_n})."
        )
    if leaf.fixed_cluster == "size":
        return (
            f"{prefix}detecting {effect} with clusters of {result.control_cluster_size} "
            f"(control) and {result.treatment_cluster_size} (treatment) subjects requires "
            f"{result.control_cluster_count} control and {result.treatment_cluster_count} "
            f"treatment clusters (N = {result.required_n})."
        )
    return (
        f"{prefix}detecting {effect} requires a total sample size of {result.required_n} "
        f"({result.control_n} control, {result.treatment_n} treatment)."
    )
