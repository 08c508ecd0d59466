"""Collect one operator answer at a time and enforce its constraint.

The collector reads from an injectable *input source*: any callable that takes
a prompt string and returns the operator's answer.  :class:`ConsoleInput`
wraps :func:`input`; :class:`ScriptedInput` replays a fixed list of answers.
A rejected answer raises immediately; nothing is ever re-prompted.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from pystudypower._errors import InvalidSelector, OutOfRangeError, ValidationError
from pystudypower.workflow._spec import SweepRequest

logger = logging.getLogger(__name__)

InputSource = Callable[[str], str]


class ConsoleInput:
    """Read answers from the terminal."""

    def __call__(self, prompt: str) -> str:
        return input(prompt)


class ScriptedInput:
    """Replay a fixed sequence of answers, recording every prompt shown."""

    def __init__(self, answers: Iterable[object]) -> None:
        self._answers = [str(a) for a in answers]
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._answers:
            raise EOFError(f"no scripted answer left for prompt {prompt!r}")
        return self._answers.pop(0)

    @property
    def remaining(self) -> int:
        return len(self._answers)


# ---------------------------------------------------------------------------
# Constraint catalog
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Constraint:
    """One predicate from the fixed catalog, with the error it raises."""

    name: str
    description: str
    accepts: Callable[[float], bool]
    error: type[ValidationError]
    integer: bool = False

    def parse(self, raw: str, label: str) -> float:
        """Convert *raw* to a number and check it; raise ``self.error`` otherwise."""
        try:
            value = float(raw)
        except ValueError:
            raise self.error(f"{label}: expected {self.description}, got {raw!r}") from None
        if not math.isfinite(value) or not self.accepts(value):
            raise self.error(f"{label}: expected {self.description}, got {raw!r}")
        if self.integer:
            if not value.is_integer():
                raise self.error(f"{label}: expected {self.description}, got {raw!r}")
            return int(value)
        return value


def selector(*choices: int) -> Constraint:
    """An integer answer from the enumerated set *choices*."""
    allowed = frozenset(choices)
    return Constraint(
        name="selector",
        description="one of " + ", ".join(str(c) for c in sorted(allowed)),
        accepts=lambda v: v in allowed,
        error=InvalidSelector,
        integer=True,
    )


UNIT_INTERVAL = Constraint(
    name="unit_interval",
    description="a number strictly between 0 and 1",
    accepts=lambda v: 0.0 < v < 1.0,
    error=OutOfRangeError,
)

POSITIVE = Constraint(
    name="positive",
    description="a number greater than 0",
    accepts=lambda v: v > 0.0,
    error=OutOfRangeError,
)

POSITIVE_INTEGER = Constraint(
    name="positive_integer",
    description="a whole number greater than 0",
    accepts=lambda v: v > 0.0,
    error=OutOfRangeError,
    integer=True,
)


# ---------------------------------------------------------------------------
# Collector
# ---------------------------------------------------------------------------

class Collector:
    """Ask for values one at a time through an input source."""

    def __init__(self, source: InputSource | None = None) -> None:
        self._source = source if source is not None else ConsoleInput()

    def collect(
        self,
        prompt: str,
        constraint: Constraint,
        *,
        label: str | None = None,
        default: float | None = None,
    ) -> float:
        """Block for one answer and return it once it satisfies *constraint*.

        A blank answer accepts *default* when one is given.

        Raises
        ------
        ValidationError
            The subclass named by the constraint; the session must abort.
        """
        label = label or prompt.strip().rstrip(":?").strip()
        raw = self._source(prompt).strip()
        if not raw and default is not None:
            logger.debug("%s: using default %s", label, default)
            return default
        try:
            value = constraint.parse(raw, label)
        except ValidationError as exc:
            logger.error("Rejected %s (%s): %s", label, exc.kind, exc)
            raise
        logger.debug("%s = %s", label, value)
        return value

    def collect_interval(self, label: str, constraint: Constraint) -> SweepRequest:
        """Collect lower bound, upper bound and step for a sweep over *label*.

        Each value must satisfy *constraint*; the step must also be positive.
        The ordering and step-size checks happen in :class:`SweepRequest`.
        """
        lower = self.collect(f"Lower {label}: ", constraint, label=f"lower {label}")
        upper = self.collect(f"Upper {label}: ", constraint, label=f"upper {label}")
        step_constraint = POSITIVE_INTEGER if constraint.integer else POSITIVE
        step = self.collect(f"Interval between {label} values: ", step_constraint,
                            label=f"{label} interval")
        try:
            return SweepRequest(lower, upper, step)
        except ValidationError as exc:
            logger.error("Rejected %s range (%s): %s", label, exc.kind, exc)
            raise
