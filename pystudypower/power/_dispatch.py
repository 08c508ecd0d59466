"""Single entry points over the means, proportions and cluster calculators.

``compute_point`` evaluates one fully specified design; ``compute_sweep``
evaluates it over a grid of treatment values or total sample sizes and
tabulates the results.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from pystudypower._errors import ComputationError
from pystudypower.power._cluster import n_cluster_means, n_cluster_props
from pystudypower.power._common import PointResult
from pystudypower.power._means import mdes_two_means, n_two_means
from pystudypower.power._proportions import mdes_two_props, n_two_props

logger = logging.getLogger(__name__)

_VALID_OUTCOMES = ("means", "proportions")
_VALID_AXES = ("effect", "n")

SWEEP_COLUMNS = [
    "value", "n", "n1", "n2", "control", "treatment", "delta",
    "k1", "k2", "size1", "size2", "power", "feasible",
]


@dataclass(frozen=True)
class ClusterParams:
    """Clustering inputs: the ICC and exactly one fixed cluster dimension.

    ``clusters`` holds the per-arm cluster counts ``(k1, k2)``; ``sizes`` the
    per-arm subjects per cluster ``(m1, m2)``.
    """

    icc: float
    clusters: tuple[int, int] | None = None
    sizes: tuple[int, int] | None = None

    def __post_init__(self) -> None:
        if (self.clusters is None) == (self.sizes is None):
            raise ValueError("Exactly one of clusters, sizes must be given")

    @property
    def fixed(self) -> str:
        """``'count'`` or ``'size'``: the dimension held fixed."""
        return "count" if self.clusters is not None else "size"


def compute_point(
    outcome: str,
    design_points: Sequence[float],
    *,
    sd: float | None = None,
    nratio: float = 1.0,
    alpha: float = 0.05,
    power: float = 0.80,
    n: int | None = None,
    cluster: ClusterParams | None = None,
) -> PointResult:
    """Evaluate one design.

    Parameters
    ----------
    outcome : str
        ``'means'`` or ``'proportions'``.
    design_points : sequence of float
        ``(control, treatment)`` to solve for the sample size, or
        ``(control,)`` together with ``n`` to solve for the detectable
        treatment value.
    sd : float, optional
        Common standard deviation; required for means.
    nratio : float
        Treatment-to-control allocation ratio (individual designs).
    alpha, power : float
        Significance level and power target.
    n : int, optional
        Total sample size, only with a single design point.
    cluster : ClusterParams, optional
        Clustering inputs; requires both design points.

    Returns
    -------
    PointResult

    Raises
    ------
    ComputationError
        If the power target cannot be reached.
    ValueError
        On inconsistent arguments.
    """
    if outcome not in _VALID_OUTCOMES:
        raise ValueError(f"outcome must be one of {_VALID_OUTCOMES}, got {outcome!r}")
    if outcome == "means" and sd is None:
        raise ValueError("sd is required for means")

    if len(design_points) == 2:
        if n is not None:
            raise ValueError("n must be None when both design points are given")
        control, treatment = design_points
        if cluster is not None:
            if outcome == "means":
                return n_cluster_means(
                    control, treatment, sd, cluster.icc,
                    clusters=cluster.clusters, sizes=cluster.sizes,
                    alpha=alpha, power=power,
                )
            return n_cluster_props(
                control, treatment, cluster.icc,
                clusters=cluster.clusters, sizes=cluster.sizes,
                alpha=alpha, power=power,
            )
        if outcome == "means":
            return n_two_means(control, treatment, sd, nratio, alpha=alpha, power=power)
        return n_two_props(control, treatment, nratio, alpha=alpha, power=power)

    if len(design_points) == 1:
        if n is None:
            raise ValueError("n is required with a single design point")
        if cluster is not None:
            raise ValueError("cluster designs require both design points")
        (control,) = design_points
        if outcome == "means":
            return mdes_two_means(control, n, sd, nratio, alpha=alpha, power=power)
        return mdes_two_props(control, n, nratio, alpha=alpha, power=power)

    raise ValueError(f"expected 1 or 2 design points, got {len(design_points)}")


def _row(value: float, r: PointResult) -> dict[str, object]:
    return {
        "value": value,
        "n": r.n,
        "n1": r.n1,
        "n2": r.n2,
        "control": r.control,
        "treatment": r.treatment,
        "delta": r.delta,
        "k1": np.nan if r.k1 is None else r.k1,
        "k2": np.nan if r.k2 is None else r.k2,
        "size1": np.nan if r.size1 is None else r.size1,
        "size2": np.nan if r.size2 is None else r.size2,
        "power": r.power,
        "feasible": True,
    }


def compute_sweep(
    outcome: str,
    axis: str,
    grid: Iterable[float],
    *,
    control: float,
    sd: float | None = None,
    nratio: float = 1.0,
    alpha: float = 0.05,
    power: float = 0.80,
    cluster: ClusterParams | None = None,
) -> pd.DataFrame:
    """Evaluate a design over a grid of one parameter.

    On the ``'effect'`` axis each grid value is a treatment mean/proportion and
    the required sample size is solved for; on the ``'n'`` axis each grid
    value is a total sample size and the detectable treatment value is solved
    for.  Grid points without a solution are kept with ``feasible=False``.

    Returns
    -------
    pandas.DataFrame
        One row per grid point, columns :data:`SWEEP_COLUMNS`.
    """
    if axis not in _VALID_AXES:
        raise ValueError(f"axis must be one of {_VALID_AXES}, got {axis!r}")

    rows = []
    for value in grid:
        value = float(value)
        if axis == "effect":
            points: tuple[float, ...] = (control, value)
            n = None
        else:
            points = (control,)
            n = int(value)
        try:
            r = compute_point(
                outcome, points, sd=sd, nratio=nratio, alpha=alpha,
                power=power, n=n, cluster=cluster,
            )
        except ComputationError as exc:
            logger.warning("No solution at %s = %g: %s", axis, value, exc)
            rows.append({"value": value, "control": control, "feasible": False})
            continue
        rows.append(_row(value, r))

    table = pd.DataFrame(rows, columns=SWEEP_COLUMNS)
    table["feasible"] = table["feasible"].astype(bool)
    for col in ("n", "n1", "n2", "k1", "k2", "size1", "size2"):
        table[col] = pd.to_numeric(table[col], errors="coerce")
    logger.info(
        "Sweep over %d %s values: %d feasible",
        len(table), axis, int(np.count_nonzero(table["feasible"])),
    )
    return table
