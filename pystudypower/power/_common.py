"""Shared result types and helpers for two-arm power/sample size calculations."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

from scipy.optimize import brentq

from pystudypower._errors import ComputationError


@dataclass(frozen=True)
class PointResult:
    """Result of a single two-arm power/sample size calculation.

    ``n`` is always the total number of subjects.  For cluster designs the
    per-arm cluster counts ``k1``/``k2`` and sizes ``size1``/``size2`` are filled;
    one pair was supplied, the other was solved for.
    """

    n: int
    n1: int
    n2: int
    control: float
    treatment: float
    power: float
    alpha: float
    method: str
    k1: int | None = None
    k2: int | None = None
    size1: int | None = None
    size2: int | None = None
    note: str = ""

    @property
    def delta(self) -> float:
        """Treatment minus control."""
        return self.treatment - self.control

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [self.method, ""]
        lines.append(f"              N = {self.n}")
        lines.append(f"        N1, N2 = {self.n1}, {self.n2}")
        if self.k1 is not None:
            lines.append(f"        K1, K2 = {self.k1}, {self.k2}")
            lines.append(f"        M1, M2 = {self.size1}, {self.size2}")
        lines.append(f"  control value = {self.control:.6g}")
        lines.append(f"treatment value = {self.treatment:.6g}")
        lines.append(f"          delta = {self.delta:.6g}")
        lines.append(f"          alpha = {self.alpha}")
        lines.append(f"          power = {self.power:.6f}")
        if self.note:
            lines.append("")
            lines.append(f"NOTE: {self.note}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Shared validation
# ---------------------------------------------------------------------------

def _check_design_args(
    *,
    alpha: float,
    power: float,
    nratio: float = 1.0,
) -> None:
    """Validate the arguments every two-arm calculation shares.

    Raises
    ------
    ValueError
        If *alpha* or *power* is outside (0, 1), *power* does not exceed
        *alpha*, or *nratio* is not positive.
    """
    if not (0.0 < alpha < 1.0):
        raise ValueError(f"alpha must be in (0, 1), got {alpha}")
    if not (0.0 < power < 1.0):
        raise ValueError(f"power must be in (0, 1), got {power}")
    if power <= alpha:
        raise ValueError(f"power must exceed alpha, got power = {power}, alpha = {alpha}")
    if not (nratio > 0.0 and math.isfinite(nratio)):
        raise ValueError(f"nratio must be positive, got {nratio}")


def _check_proportion(value: float, name: str) -> None:
    if not (0.0 < value < 1.0):
        raise ValueError(f"{name} must be in (0, 1), got {value}")


def _split_total(n: int, nratio: float) -> tuple[int, int]:
    """Split a total sample size into control/treatment arms with N2/N1 = nratio."""
    n1 = int(round(n / (1.0 + nratio)))
    n2 = n - n1
    if n1 < 2 or n2 < 2:
        raise ComputationError(
            f"N = {n} with nratio = {nratio} leaves fewer than 2 subjects in an arm"
        )
    return n1, n2


def _smallest_control_arm(nratio: float) -> float:
    """Smallest control arm that leaves at least 2 subjects in each arm."""
    return max(2.0, 2.0 / nratio)


def _arms_from_control(n1_raw: float, nratio: float) -> tuple[int, int]:
    """Round a continuous control-arm solution up to whole subjects in both arms."""
    n1 = math.ceil(n1_raw - 1e-9)
    n2 = math.ceil(nratio * n1 - 1e-9)
    return n1, n2


# ---------------------------------------------------------------------------
# Shared root-finding
# ---------------------------------------------------------------------------

def _solve_parameter(
    func: Callable[[float], float],
    target: float,
    bracket: tuple[float, float],
    *,
    xtol: float = 1e-10,
    maxiter: int = 1000,
) -> float:
    """Solve ``func(x) == target`` via Brent's method.

    Parameters
    ----------
    func : callable
        Monotonic function of one variable (e.g. computes power as f(n)).
    target : float
        Target value (e.g. desired power).
    bracket : tuple
        ``(lower, upper)`` bracket. ``func(lower) - target`` and
        ``func(upper) - target`` must have opposite signs.

    Returns
    -------
    float
        The solution *x* such that ``func(x) ≈ target``.

    Raises
    ------
    ComputationError
        If the bracket does not straddle the target (no sign change).
    """
    lo, hi = bracket
    f_lo = func(lo) - target
    f_hi = func(hi) - target

    if f_lo * f_hi > 0:
        raise ComputationError(
            f"Cannot solve: target {target:.6f} is outside achievable range "
            f"[{func(lo):.6f}, {func(hi):.6f}] for the given parameters. "
            f"Try different input values."
        )

    return brentq(lambda x: func(x) - target, lo, hi, xtol=xtol, maxiter=maxiter)
