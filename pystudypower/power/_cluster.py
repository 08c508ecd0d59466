"""Power calculations for two-arm cluster randomized trials.

Inflates each arm's variance by the design effect (DEFF) and uses the
two-sided z test.  Either the number of clusters per arm is fixed and the
common cluster size is solved for, or the cluster sizes are fixed and the
common number of clusters is solved for.

Validates against: R clusterPower, Stata power twomeans/twoproportions, cluster
"""

from __future__ import annotations

import math

from pystudypower._errors import ComputationError
from pystudypower.power._common import (
    PointResult,
    _check_design_args,
    _check_proportion,
    _solve_parameter,
)
from pystudypower.power._means import _check_sd, _normal_approx_power


# ---------------------------------------------------------------------------
# Internal power computation
# ---------------------------------------------------------------------------

def _design_effect(cluster_size: float, icc: float) -> float:
    """DEFF = 1 + (m - 1) * ICC."""
    return 1.0 + (cluster_size - 1.0) * icc


def _cluster_power(
    k1: float,
    k2: float,
    size1: float,
    size2: float,
    delta: float,
    var1: float,
    var2: float,
    icc: float,
    alpha: float,
) -> float:
    """Compute power for a two-arm cluster randomized trial.

    The variance of each arm mean is ``var * DEFF / (k * m)``; the test
    statistic under H1 is approximately N(|delta| / SE, 1).
    """
    se = math.sqrt(
        var1 * _design_effect(size1, icc) / (k1 * size1)
        + var2 * _design_effect(size2, icc) / (k2 * size2)
    )
    return _normal_approx_power(abs(delta) / se, alpha)


def _solve_cluster(
    delta: float,
    var1: float,
    var2: float,
    icc: float,
    alpha: float,
    power: float,
    clusters: tuple[int, int] | None,
    sizes: tuple[int, int] | None,
) -> tuple[int, int, int, int]:
    """Solve for the missing cluster dimension.  Returns ``(k1, k2, size1, size2)``."""
    if (clusters is None) == (sizes is None):
        raise ValueError("Exactly one of clusters, sizes must be given")
    if delta == 0.0:
        raise ComputationError("Cannot solve a cluster design with no effect")

    if clusters is not None:
        k1, k2 = clusters
        if k1 < 1 or k2 < 1:
            raise ValueError(f"cluster counts must be >= 1, got {clusters}")

        def func(m: float) -> float:
            return _cluster_power(k1, k2, m, m, delta, var1, var2, icc, alpha)

        if func(1.0) >= power:
            return k1, k2, 1, 1
        try:
            raw = _solve_parameter(func, target=power, bracket=(1.0, 1e7))
        except ComputationError as exc:
            raise ComputationError(
                f"{k1} and {k2} clusters cannot reach power {power} at any "
                f"cluster size (ICC = {icc}); increase the number of clusters"
            ) from exc
        m = math.ceil(raw - 1e-9)
        return k1, k2, m, m

    size1, size2 = sizes
    if size1 < 1 or size2 < 1:
        raise ValueError(f"cluster sizes must be >= 1, got {sizes}")

    def func(k: float) -> float:
        return _cluster_power(k, k, size1, size2, delta, var1, var2, icc, alpha)

    if func(2.0) >= power:
        return 2, 2, size1, size2
    raw = _solve_parameter(func, target=power, bracket=(2.0, 1e7))
    k = math.ceil(raw - 1e-9)
    return k, k, size1, size2


def _check_icc(icc: float) -> None:
    if not (0.0 < icc < 1.0):
        raise ValueError(f"icc must be in (0, 1), got {icc}")


def _cluster_result(
    control: float,
    treatment: float,
    dims: tuple[int, int, int, int],
    achieved: float,
    alpha: float,
    icc: float,
    method: str,
) -> PointResult:
    k1, k2, size1, size2 = dims
    return PointResult(
        n=k1 * size1 + k2 * size2,
        n1=k1 * size1,
        n2=k2 * size2,
        control=control,
        treatment=treatment,
        power=achieved,
        alpha=alpha,
        method=method,
        k1=k1,
        k2=k2,
        size1=size1,
        size2=size2,
        note=(
            f"ICC = {icc}; DEFF = {_design_effect(size1, icc):.2f} (control), "
            f"{_design_effect(size2, icc):.2f} (treatment)"
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def n_cluster_means(
    m1: float,
    m2: float,
    sd: float,
    icc: float,
    *,
    clusters: tuple[int, int] | None = None,
    sizes: tuple[int, int] | None = None,
    alpha: float = 0.05,
    power: float = 0.80,
) -> PointResult:
    """Cluster design needed to detect the difference between two means.

    Exactly one of ``clusters`` (``(k1, k2)``, solve for cluster size) and
    ``sizes`` (``(m1, m2)`` subjects per cluster, solve for cluster count)
    must be given.

    Parameters
    ----------
    m1, m2 : float
        Control and treatment means.
    sd : float
        Common (total) standard deviation.
    icc : float
        Intraclass correlation coefficient, in (0, 1).
    clusters : tuple of int, optional
        Number of clusters in the control and treatment arms.
    sizes : tuple of int, optional
        Subjects per cluster in the control and treatment arms.
    alpha : float
        Two-sided significance level (default 0.05).
    power : float
        Desired power (default 0.80).

    Returns
    -------
    PointResult

    Examples
    --------
    >>> r = n_cluster_means(100, 108, sd=10, icc=0.2, clusters=(10, 10))
    >>> r.size1, r.size2
    (4, 4)
    """
    _check_design_args(alpha=alpha, power=power)
    _check_sd(sd)
    _check_icc(icc)
    var = sd * sd
    dims = _solve_cluster(m2 - m1, var, var, icc, alpha, power, clusters, sizes)
    achieved = _cluster_power(*dims, m2 - m1, var, var, icc, alpha)
    return _cluster_result(
        m1, m2, dims, achieved, alpha, icc,
        "Cluster randomized trial, two-sample means",
    )


def n_cluster_props(
    p1: float,
    p2: float,
    icc: float,
    *,
    clusters: tuple[int, int] | None = None,
    sizes: tuple[int, int] | None = None,
    alpha: float = 0.05,
    power: float = 0.80,
) -> PointResult:
    """Cluster design needed to detect the difference between two proportions.

    Same conventions as :func:`n_cluster_means`; each arm's variance is
    ``p * (1 - p)``.
    """
    _check_design_args(alpha=alpha, power=power)
    _check_proportion(p1, "p1")
    _check_proportion(p2, "p2")
    _check_icc(icc)
    var1 = p1 * (1.0 - p1)
    var2 = p2 * (1.0 - p2)
    dims = _solve_cluster(p2 - p1, var1, var2, icc, alpha, power, clusters, sizes)
    achieved = _cluster_power(*dims, p2 - p1, var1, var2, icc, alpha)
    return _cluster_result(
        p1, p2, dims, achieved, alpha, icc,
        "Cluster randomized trial, two-sample proportions",
    )
