"""Run the sweep for a leaf and export its trade-off graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from pystudypower.power import compute_sweep
from pystudypower.workflow._design import MEANS, Leaf
from pystudypower.workflow._spec import StudySpecification, SweepRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SweepResult:
    """Tabulated sweep of one leaf plus the path of its exported graph."""

    leaf: Leaf
    request: SweepRequest
    table: pd.DataFrame
    artifact: Path

    @property
    def feasible(self) -> pd.DataFrame:
        return self.table[self.table["feasible"]]


def artifact_name(leaf: Leaf) -> str:
    """File name of a leaf's graph, e.g. ``MI_vary_effect.png``."""
    return f"{leaf.code}_{leaf.axis_slug}.png"


def _plot_columns(leaf: Leaf) -> tuple[str, str, str]:
    """(y column, x label, y label) for a leaf's graph."""
    if leaf.axis == "n":
        if leaf.test_kind is MEANS:
            return "treatment", "Total sample size", "Detectable treatment mean"
        return "treatment", "Total sample size", "Detectable treatment proportion"
    x_label = leaf.range_label.capitalize()
    if leaf.fixed_cluster == "count":
        return "size1", x_label, "Required cluster size"
    if leaf.fixed_cluster == "size":
        return "k1", x_label, "Required number of clusters per arm"
    return "n", x_label, "Required total sample size"


def _render(result_table: pd.DataFrame, leaf: Leaf, path: Path, dpi: int) -> None:
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    y_col, x_label, y_label = _plot_columns(leaf)
    feasible = result_table[result_table["feasible"]]

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(feasible["value"], feasible[y_col], "o-")
    ax.set_xlabel(x_label)
    ax.set_ylabel(y_label)
    ax.set_title(f"{leaf.test_kind.value.capitalize()}, {leaf.design_kind.value} design")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(path, dpi=dpi)
    plt.close(fig)


def run_sweep(
    spec: StudySpecification,
    leaf: Leaf,
    output_dir: Path,
    *,
    dpi: int = 150,
) -> SweepResult:
    """Sweep the leaf's axis over ``spec.sweep`` and export the graph.

    All parameters other than the swept one are held at their collected
    values.  The graph is written to ``output_dir / artifact_name(leaf)``.
    """
    leaf.check(spec)
    if spec.sweep is None:
        raise ValueError("specification has no sweep request")

    table = compute_sweep(
        leaf.test_kind.value,
        leaf.axis,
        spec.sweep.grid(),
        control=leaf.control(spec),
        **leaf.engine_kwargs(spec),
    )
    path = Path(output_dir) / artifact_name(leaf)
    _render(table, leaf, path, dpi)
    logger.info("Sweep graph written to %s", path)
    return SweepResult(leaf=leaf, request=spec.sweep, table=table, artifact=path)
