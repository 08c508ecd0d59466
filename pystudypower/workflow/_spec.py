"""The study specification accumulated over a session, and sweep requests."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType

import numpy as np
from numpy.typing import NDArray

from pystudypower._errors import IntervalTooLarge, OrderingViolation, OutOfRangeError


class OutcomeKind(Enum):
    """What is compared between the arms."""

    MEANS = "means"
    PROPORTIONS = "proportions"


class DesignKind(Enum):
    """How subjects are randomized."""

    INDIVIDUAL = "individual"
    CLUSTER = "cluster"


class MethodKind(Enum):
    """Which quantity the sweep varies.

    For cluster designs ``VARY_EFFECT`` fixes the number of clusters and
    ``VARY_SAMPLE_SIZE`` fixes the cluster sizes.
    """

    VARY_EFFECT = "vary_effect"
    VARY_SAMPLE_SIZE = "vary_sample_size"


class MissingParameter(KeyError):
    """A stage asked for a parameter its branch never collected."""


@dataclass(frozen=True)
class SweepRequest:
    """A grid ``lower, lower + step, ..., <= upper`` over one axis.

    Invariant: ``0 < step < upper - lower``.
    """

    lower: float
    upper: float
    step: float

    def __post_init__(self) -> None:
        if self.step <= 0:
            raise OutOfRangeError(f"step must be positive, got {self.step}")
        if not self.upper > self.lower:
            raise OrderingViolation(
                f"upper bound {self.upper} must be greater than lower bound {self.lower}"
            )
        if not self.step < self.upper - self.lower:
            raise IntervalTooLarge(
                f"step {self.step} must be smaller than the range "
                f"{self.upper} - {self.lower} = {self.upper - self.lower}"
            )

    def grid(self) -> NDArray[np.floating]:
        """Ordered grid points; always at least two."""
        count = int(math.floor((self.upper - self.lower) / self.step + 1e-9)) + 1
        return np.round(self.lower + self.step * np.arange(count), 10)


@dataclass(frozen=True)
class StudySpecification:
    """Everything the operator has supplied so far.

    Instances are never mutated; every ``with_*`` method returns an updated
    copy.  Only the parameters of the selected branch are ever present in
    ``params``.
    """

    alpha: float | None = None
    power: float | None = None
    test_kind: OutcomeKind | None = None
    design_kind: DesignKind | None = None
    method_kind: MethodKind | None = None
    params: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    sweep: SweepRequest | None = None

    def with_globals(self, alpha: float, power: float) -> StudySpecification:
        return replace(self, alpha=alpha, power=power)

    def with_kinds(self, **kinds: Enum) -> StudySpecification:
        """Set any of ``test_kind``, ``design_kind``, ``method_kind``."""
        for name, kind in kinds.items():
            if getattr(self, name) is not None:
                raise ValueError(f"{name} is already set to {getattr(self, name)}")
        return replace(self, **kinds)

    def with_param(self, name: str, value: float) -> StudySpecification:
        if name in self.params:
            raise ValueError(f"parameter {name!r} is already collected")
        return replace(self, params=MappingProxyType({**self.params, name: value}))

    def with_params(self, values: Mapping[str, float]) -> StudySpecification:
        spec = self
        for name, value in values.items():
            spec = spec.with_param(name, value)
        return spec

    def with_sweep(self, request: SweepRequest) -> StudySpecification:
        return replace(self, sweep=request)

    def require(self, name: str) -> float:
        """Return a collected parameter or raise :class:`MissingParameter`."""
        try:
            return self.params[name]
        except KeyError:
            raise MissingParameter(name) from None
