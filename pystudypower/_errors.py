"""Exception hierarchy shared by the power engine and the interactive workflow.

Every error is fatal for a session: the workflow never retries a prompt and
never returns partial results.
"""

from __future__ import annotations


class PowerAnalysisError(Exception):
    """Base class for all errors raised by pystudypower."""

    kind = "PowerAnalysisError"


class ValidationError(PowerAnalysisError, ValueError):
    """An operator-supplied value failed its constraint."""

    kind = "ValidationError"


class InvalidSelector(ValidationError):
    """A selector answer outside its enumerated set."""

    kind = "InvalidSelector"


class OutOfRangeError(ValidationError):
    """A probability outside (0, 1) or a required-positive value <= 0."""

    kind = "OutOfRangeError"


class OrderingViolation(ValidationError):
    """An upper bound not strictly greater than its lower bound."""

    kind = "OrderingViolation"


class IntervalTooLarge(ValidationError):
    """A sweep step not strictly smaller than the span it subdivides."""

    kind = "IntervalTooLarge"


class ComputationError(PowerAnalysisError, ValueError):
    """The power target cannot be reached for the given design."""

    kind = "ComputationError"
