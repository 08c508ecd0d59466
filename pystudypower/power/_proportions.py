"""Power calculations for comparing two independent proportions.

Two-sided z test (Pearson chi-squared without continuity correction): pooled
variance under H0, unpooled variance under H1, unequal allocation
``N2 = nratio * N1``.

Validates against: R pwr::pwr.2p2n.test(), Stata power twoproportions
"""

from __future__ import annotations

import math

from scipy.stats import norm

from pystudypower._errors import ComputationError
from pystudypower.power._common import (
    PointResult,
    _arms_from_control,
    _check_design_args,
    _check_proportion,
    _smallest_control_arm,
    _solve_parameter,
    _split_total,
)


# ---------------------------------------------------------------------------
# Internal power computation
# ---------------------------------------------------------------------------

def _two_props_power(
    n1: float,
    nratio: float,
    p1: float,
    p2: float,
    alpha: float,
) -> float:
    """Compute power for the two-sided two-proportion z test.

    Power = Phi((|p2 - p1| - z * sd0) / sd1) + Phi((-|p2 - p1| - z * sd0) / sd1)
    with sd0 the pooled (H0) and sd1 the unpooled (H1) standard error.
    """
    n2 = nratio * n1
    p_bar = (n1 * p1 + n2 * p2) / (n1 + n2)
    sd0 = math.sqrt(p_bar * (1.0 - p_bar) * (1.0 / n1 + 1.0 / n2))
    sd1 = math.sqrt(p1 * (1.0 - p1) / n1 + p2 * (1.0 - p2) / n2)
    diff = abs(p2 - p1)
    z_crit = norm.ppf(1.0 - alpha / 2.0)
    return float(
        norm.cdf((diff - z_crit * sd0) / sd1) + norm.cdf((-diff - z_crit * sd0) / sd1)
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def n_two_props(
    p1: float,
    p2: float,
    nratio: float = 1.0,
    alpha: float = 0.05,
    power: float = 0.80,
) -> PointResult:
    """Required sample size to detect the difference between two proportions.

    Parameters
    ----------
    p1 : float
        Control-arm proportion, in (0, 1).
    p2 : float
        Treatment-arm proportion, in (0, 1).
    nratio : float
        Treatment-to-control allocation ratio ``N2 / N1``.
    alpha : float
        Two-sided significance level (default 0.05).
    power : float
        Desired power (default 0.80).

    Returns
    -------
    PointResult

    Examples
    --------
    >>> r = n_two_props(0.5, 0.6)
    >>> r.n1
    388
    """
    _check_design_args(alpha=alpha, power=power, nratio=nratio)
    _check_proportion(p1, "p1")
    _check_proportion(p2, "p2")
    if p1 == p2:
        raise ComputationError("Cannot solve for n when p1 = p2 (no effect)")

    def func(x: float) -> float:
        return _two_props_power(x, nratio, p1, p2, alpha)

    lo = _smallest_control_arm(nratio)
    if func(lo) >= power:
        raw_n1 = lo
    else:
        raw_n1 = _solve_parameter(func, target=power, bracket=(lo, 1e7))
    n1, n2 = _arms_from_control(raw_n1, nratio)

    return PointResult(
        n=n1 + n2,
        n1=n1,
        n2=n2,
        control=p1,
        treatment=p2,
        power=_two_props_power(float(n1), n2 / n1, p1, p2, alpha),
        alpha=alpha,
        method="Two-sample test of proportions power calculation",
        note=f"nratio = {nratio}",
    )


def mdes_two_props(
    p1: float,
    n: int,
    nratio: float = 1.0,
    alpha: float = 0.05,
    power: float = 0.80,
) -> PointResult:
    """Minimum detectable treatment proportion (``p2 > p1``) for a total sample size *n*.

    Raises
    ------
    ComputationError
        If no ``p2 < 1`` reaches the desired power with *n* subjects.
    """
    _check_design_args(alpha=alpha, power=power, nratio=nratio)
    _check_proportion(p1, "p1")
    n1, n2 = _split_total(n, nratio)
    ratio = n2 / n1

    p2 = _solve_parameter(
        func=lambda x: _two_props_power(float(n1), ratio, p1, x, alpha),
        target=power,
        bracket=(p1 + 1e-10, 1.0 - 1e-10),
    )

    return PointResult(
        n=n,
        n1=n1,
        n2=n2,
        control=p1,
        treatment=p2,
        power=power,
        alpha=alpha,
        method="Two-sample test of proportions minimum detectable effect",
        note=f"nratio = {nratio}",
    )
