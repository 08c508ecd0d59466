"""
PyStudyPower: interactive sample size and power planning for two-arm studies.

Walks a researcher through a two-group comparison of means or proportions,
individually or cluster randomized, sweeps the effect-size / sample-size
trade-off and reports the design at the point the researcher chooses.

Usage:
    from pystudypower import power, workflow
    python -m pystudypower
"""

__version__ = "0.1.0"

from pystudypower import power
from pystudypower import workflow
from pystudypower._config import SessionConfig
from pystudypower._errors import (
    ComputationError,
    IntervalTooLarge,
    InvalidSelector,
    OrderingViolation,
    OutOfRangeError,
    PowerAnalysisError,
    ValidationError,
)

__all__ = [
    "__version__",
    "power",
    "workflow",
    "SessionConfig",
    "PowerAnalysisError",
    "ValidationError",
    "InvalidSelector",
    "OutOfRangeError",
    "OrderingViolation",
    "IntervalTooLarge",
    "ComputationError",
]
