"""The interactive session: a strictly forward state machine.

Init -> CollectGlobals -> SelectTest -> SelectDesign -> CollectDesignParams
-> SelectMethod -> CollectMethodParams -> Sweep -> AwaitInflection
-> PointEstimate -> Report, with Aborted reachable from every step.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from pystudypower._config import SessionConfig
from pystudypower._errors import OutOfRangeError, PowerAnalysisError
from pystudypower.workflow._collect import UNIT_INTERVAL, Collector, InputSource, selector
from pystudypower.workflow._design import (
    DESIGN_MENU,
    TEST_MENU,
    Leaf,
    design_prompts,
    method_menu,
    select,
)
from pystudypower.workflow._estimate import (
    PointEstimateResult,
    estimate,
    resolve_inflection,
)
from pystudypower.workflow._report import format_table, report
from pystudypower.workflow._spec import (
    DesignKind,
    MethodKind,
    OutcomeKind,
    StudySpecification,
)
from pystudypower.workflow._sweep import SweepResult, run_sweep

logger = logging.getLogger(__name__)


class State(Enum):
    INIT = "Init"
    COLLECT_GLOBALS = "CollectGlobals"
    SELECT_TEST = "SelectTest"
    SELECT_DESIGN = "SelectDesign"
    COLLECT_DESIGN_PARAMS = "CollectDesignParams"
    SELECT_METHOD = "SelectMethod"
    COLLECT_METHOD_PARAMS = "CollectMethodParams"
    SWEEP = "Sweep"
    AWAIT_INFLECTION = "AwaitInflection"
    POINT_ESTIMATE = "PointEstimate"
    REPORT = "Report"
    ABORTED = "Aborted"


_ORDER = [
    State.COLLECT_GLOBALS,
    State.SELECT_TEST,
    State.SELECT_DESIGN,
    State.COLLECT_DESIGN_PARAMS,
    State.SELECT_METHOD,
    State.COLLECT_METHOD_PARAMS,
    State.SWEEP,
    State.AWAIT_INFLECTION,
    State.POINT_ESTIMATE,
    State.REPORT,
]

_TESTS = {1: OutcomeKind.MEANS, 2: OutcomeKind.PROPORTIONS}
_DESIGNS = {1: DesignKind.INDIVIDUAL, 2: DesignKind.CLUSTER}
_METHODS = {1: MethodKind.VARY_EFFECT, 2: MethodKind.VARY_SAMPLE_SIZE}


class Session:
    """One run of the workflow, from the first prompt to the final report.

    Parameters
    ----------
    source : callable, optional
        Input source, ``prompt -> answer``.  Defaults to the console.
    config : SessionConfig, optional
        Defaults for alpha/power and the export directory.  The directory
        must already exist (see :meth:`SessionConfig.prepare_output_dir`).
    emit : callable, optional
        Receives every message shown to the operator.  Defaults to ``print``.
    """

    def __init__(
        self,
        source: InputSource | None = None,
        config: SessionConfig | None = None,
        emit: Callable[[str], None] = print,
    ) -> None:
        self.collector = Collector(source)
        self.config = config if config is not None else SessionConfig()
        self.emit = emit
        self.state = State.INIT
        self.history: list[State] = [State.INIT]
        self.spec = StudySpecification()
        self.leaf: Leaf | None = None
        self.sweep: SweepResult | None = None
        self.result: PointEstimateResult | None = None
        self.summary: str | None = None

    def _enter(self, state: State) -> None:
        logger.debug("%s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _abort(self) -> None:
        self.sweep = None
        self.result = None
        self._enter(State.ABORTED)

    def run(self) -> str:
        """Walk every state once and return the final report.

        Raises
        ------
        PowerAnalysisError
            After moving to ``Aborted``; no partial result is kept.
        EOFError, KeyboardInterrupt
            Re-raised after moving to ``Aborted`` when input runs out.
        RuntimeError
            If the session has already been run.
        """
        if self.state is not State.INIT:
            raise RuntimeError(f"session already ran (state {self.state.value})")
        try:
            for state in _ORDER:
                self._enter(state)
                self._step(state)
        except PowerAnalysisError as exc:
            self._abort()
            logger.warning("Session aborted (%s): %s", exc.kind, exc)
            raise
        except (EOFError, KeyboardInterrupt):
            self._abort()
            logger.warning("Session aborted: input closed")
            raise
        return self.summary

    def _step(self, state: State) -> None:
        collect = self.collector.collect
        spec = self.spec

        if state is State.COLLECT_GLOBALS:
            alpha = collect(
                f"Significance level alpha [{self.config.default_alpha}]: ",
                UNIT_INTERVAL, label="alpha", default=self.config.default_alpha,
            )
            power = collect(
                f"Power [{self.config.default_power}]: ",
                UNIT_INTERVAL, label="power", default=self.config.default_power,
            )
            if power <= alpha:
                raise OutOfRangeError(
                    f"power must exceed alpha, got power = {power}, alpha = {alpha}"
                )
            self.spec = spec.with_globals(alpha, power)

        elif state is State.SELECT_TEST:
            choice = collect(TEST_MENU, selector(*_TESTS), label="test")
            self.spec = spec.with_kinds(test_kind=_TESTS[choice])

        elif state is State.SELECT_DESIGN:
            choice = collect(DESIGN_MENU, selector(*_DESIGNS), label="design")
            self.spec = spec.with_kinds(design_kind=_DESIGNS[choice])

        elif state is State.COLLECT_DESIGN_PARAMS:
            for p in design_prompts(spec.test_kind, spec.design_kind):
                spec = spec.with_param(p.name, collect(p.prompt, p.constraint, label=p.name))
            self.spec = spec

        elif state is State.SELECT_METHOD:
            choice = collect(method_menu(spec.design_kind), selector(*_METHODS), label="method")
            self.spec = spec.with_kinds(method_kind=_METHODS[choice])
            self.leaf = select(self.spec.test_kind, self.spec.design_kind, self.spec.method_kind)
            logger.info("Selected leaf %s/%s", self.leaf.code, self.leaf.axis_slug)

        elif state is State.COLLECT_METHOD_PARAMS:
            for p in self.leaf.method_params:
                spec = spec.with_param(p.name, collect(p.prompt, p.constraint, label=p.name))
            request = self.collector.collect_interval(
                self.leaf.range_label, self.leaf.range_constraint,
            )
            self.spec = spec.with_sweep(request)

        elif state is State.SWEEP:
            self.sweep = run_sweep(spec, self.leaf, self.config.output_dir, dpi=self.config.dpi)
            self.emit(format_table(self.sweep))

        elif state is State.AWAIT_INFLECTION:
            self.spec = resolve_inflection(self.collector, spec, self.leaf)

        elif state is State.POINT_ESTIMATE:
            self.result = estimate(spec, self.leaf)

        elif state is State.REPORT:
            self.summary = report(spec, self.leaf, self.result)
            self.emit(self.summary)
