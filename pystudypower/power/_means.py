"""Power calculations for comparing two independent means.

Two-sample t test with a common standard deviation and unequal allocation
``N2 = nratio * N1``.

Validates against: R pwr::pwr.t2n.test(), Stata power twomeans
"""

from __future__ import annotations

import math

from scipy.stats import nct, norm
from scipy.stats import t as t_dist

from pystudypower._errors import ComputationError
from pystudypower.power._common import (
    PointResult,
    _arms_from_control,
    _check_design_args,
    _smallest_control_arm,
    _solve_parameter,
    _split_total,
)


# ---------------------------------------------------------------------------
# Internal power computation — also used by _cluster.py
# ---------------------------------------------------------------------------

def _normal_approx_power(ncp: float, alpha: float) -> float:
    """Two-sided normal approximation to noncentral t power (exact as df -> inf)."""
    z_crit = norm.ppf(1.0 - alpha / 2.0)
    return float(norm.sf(z_crit - ncp) + norm.cdf(-z_crit - ncp))


def _two_means_power(
    n1: float,
    nratio: float,
    delta: float,
    sd: float,
    alpha: float,
) -> float:
    """Compute two-sided two-sample t test power.

    Parameters
    ----------
    n1 : float
        Control-arm size.  May be non-integer during root-finding.
    nratio : float
        Treatment-to-control allocation ratio.
    delta : float
        Difference in means (treatment - control).
    sd : float
        Common standard deviation.
    alpha : float
        Significance level.

    Returns
    -------
    float
        Statistical power in [0, 1].
    """
    n2 = nratio * n1
    ncp = abs(delta) / (sd * math.sqrt(1.0 / n1 + 1.0 / n2))
    df = n1 + n2 - 2.0

    if df < 1.0:
        return 0.0

    if df > 1e5:
        return _normal_approx_power(ncp, alpha)

    t_crit = t_dist.ppf(1.0 - alpha / 2.0, df)
    pwr = float(nct.sf(t_crit, df, ncp) + nct.cdf(-t_crit, df, ncp))

    # scipy's nct can return NaN for large noncentrality params; the normal
    # approximation is very accurate for df > ~30.
    if math.isnan(pwr):
        pwr = _normal_approx_power(ncp, alpha)

    return pwr


def _check_sd(sd: float) -> None:
    if not (sd > 0.0 and math.isfinite(sd)):
        raise ValueError(f"sd must be positive, got {sd}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def n_two_means(
    m1: float,
    m2: float,
    sd: float,
    nratio: float = 1.0,
    alpha: float = 0.05,
    power: float = 0.80,
) -> PointResult:
    """Required sample size to detect the difference between two means.

    Parameters
    ----------
    m1 : float
        Control-arm mean.
    m2 : float
        Treatment-arm mean.
    sd : float
        Common standard deviation.
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
    >>> r = n_two_means(0.0, 0.5, sd=1.0)
    >>> r.n1, r.n2
    (64, 64)
    """
    _check_design_args(alpha=alpha, power=power, nratio=nratio)
    _check_sd(sd)
    delta = m2 - m1
    if delta == 0.0:
        raise ComputationError("Cannot solve for n when m1 = m2 (no effect)")

    def func(x: float) -> float:
        return _two_means_power(x, nratio, delta, sd, alpha)

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
        control=m1,
        treatment=m2,
        power=_two_means_power(float(n1), n2 / n1, delta, sd, alpha),
        alpha=alpha,
        method="Two-sample t test power calculation",
        note=f"sd = {sd}; nratio = {nratio}",
    )


def mdes_two_means(
    m1: float,
    n: int,
    sd: float,
    nratio: float = 1.0,
    alpha: float = 0.05,
    power: float = 0.80,
) -> PointResult:
    """Minimum detectable treatment mean (``m2 > m1``) for a total sample size *n*.

    Validates against: Stata ``power twomeans m1, n(n) sd(sd)``
    """
    _check_design_args(alpha=alpha, power=power, nratio=nratio)
    _check_sd(sd)
    n1, n2 = _split_total(n, nratio)
    ratio = n2 / n1

    d = _solve_parameter(
        func=lambda x: _two_means_power(float(n1), ratio, x, 1.0, alpha),
        target=power,
        bracket=(1e-10, 100.0),
    )

    return PointResult(
        n=n,
        n1=n1,
        n2=n2,
        control=m1,
        treatment=m1 + d * sd,
        power=power,
        alpha=alpha,
        method="Two-sample t test minimum detectable effect",
        note=f"sd = {sd}; nratio = {nratio}",
    )
