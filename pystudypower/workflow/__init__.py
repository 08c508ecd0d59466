"""
Interactive two-arm power analysis workflow.

Collects and validates the design one answer at a time, dispatches to one of
eight computation paths, sweeps a trade-off for the operator to inspect,
then computes and reports the exact design at the operator's chosen point.
"""

from pystudypower.workflow._spec import (
    DesignKind,
    MethodKind,
    MissingParameter,
    OutcomeKind,
    StudySpecification,
    SweepRequest,
)
from pystudypower.workflow._collect import (
    POSITIVE,
    POSITIVE_INTEGER,
    UNIT_INTERVAL,
    Collector,
    ConsoleInput,
    Constraint,
    ScriptedInput,
    selector,
)
from pystudypower.workflow._design import LEAVES, Leaf, ParameterPrompt, design_prompts, select
from pystudypower.workflow._sweep import SweepResult, artifact_name, run_sweep
from pystudypower.workflow._estimate import PointEstimateResult, estimate, resolve_inflection
from pystudypower.workflow._report import format_table, report
from pystudypower.workflow._session import Session, State

__all__ = [
    "DesignKind",
    "MethodKind",
    "MissingParameter",
    "OutcomeKind",
    "StudySpecification",
    "SweepRequest",
    "POSITIVE",
    "POSITIVE_INTEGER",
    "UNIT_INTERVAL",
    "Collector",
    "ConsoleInput",
    "Constraint",
    "ScriptedInput",
    "selector",
    "LEAVES",
    "Leaf",
    "ParameterPrompt",
    "design_prompts",
    "select",
    "SweepResult",
    "artifact_name",
    "run_sweep",
    "PointEstimateResult",
    "estimate",
    "resolve_inflection",
    "format_table",
    "report",
    "Session",
    "State",
]
