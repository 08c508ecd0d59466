"""Resolve the operator's chosen point on the sweep and compute the exact design."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from pystudypower._errors import OutOfRangeError
from pystudypower.power import compute_point
from pystudypower.workflow._collect import POSITIVE, POSITIVE_INTEGER, UNIT_INTERVAL, Collector
from pystudypower.workflow._design import CLUSTER, MEANS, PROPORTIONS, Leaf
from pystudypower.workflow._spec import StudySpecification

logger = logging.getLogger(__name__)

MDES_PROMPT = "Minimum detectable effect where the curve flattens: "
N_PROMPT = "Total sample size where the curve flattens: "


@dataclass(frozen=True)
class PointEstimateResult:
    """Decomposed result for one resolved specification.

    ``effect`` is the treatment-minus-control difference rounded to two
    decimals; for proportions it is in percentage points.  The cluster fields
    are only filled for cluster designs.
    """

    required_n: int
    control_n: int
    treatment_n: int
    effect: float
    control_value: float
    treatment_value: float
    control_cluster_count: int | None = None
    treatment_cluster_count: int | None = None
    control_cluster_size: int | None = None
    treatment_cluster_size: int | None = None


def resolve_inflection(
    collector: Collector,
    spec: StudySpecification,
    leaf: Leaf,
) -> StudySpecification:
    """Block for the operator's chosen value and fold it into the specification.

    On effect axes the answer is an MDES added to the control value; on the
    sample-size axis it is the total sample size itself.
    """
    if leaf.axis == "n":
        n = collector.collect(N_PROMPT, POSITIVE_INTEGER, label="chosen sample size")
        return spec.with_param("n", n)

    constraint = POSITIVE if leaf.test_kind is MEANS else UNIT_INTERVAL
    mdes = collector.collect(MDES_PROMPT, constraint, label="chosen MDES")
    treatment = leaf.control(spec) + mdes
    if leaf.test_kind is PROPORTIONS and not (0.0 < treatment < 1.0):
        exc = OutOfRangeError(
            f"control proportion {leaf.control(spec)} + MDES {mdes} = {treatment:g} "
            f"is not a proportion in (0, 1)"
        )
        logger.error("Rejected chosen MDES (%s): %s", exc.kind, exc)
        raise exc
    logger.debug("Resolved %s = %s", leaf.treatment_name, treatment)
    return spec.with_params({"mdes": mdes, leaf.treatment_name: treatment})


def estimate(spec: StudySpecification, leaf: Leaf) -> PointEstimateResult:
    """One engine call at the resolved value."""
    leaf.check(spec)
    control = leaf.control(spec)
    if leaf.axis == "n":
        r = compute_point(
            leaf.test_kind.value, (control,),
            n=int(spec.require("n")), **leaf.engine_kwargs(spec),
        )
    else:
        r = compute_point(
            leaf.test_kind.value, (control, spec.require(leaf.treatment_name)),
            **leaf.engine_kwargs(spec),
        )

    scale = 100.0 if leaf.test_kind is PROPORTIONS else 1.0
    result = PointEstimateResult(
        required_n=r.n,
        control_n=r.n1,
        treatment_n=r.n2,
        effect=round(r.delta * scale, 2),
        control_value=r.control,
        treatment_value=r.treatment,
    )
    if leaf.design_kind is CLUSTER:
        result = replace(
            result,
            control_cluster_count=r.k1,
            treatment_cluster_count=r.k2,
            control_cluster_size=r.size1,
            treatment_cluster_size=r.size2,
        )
    logger.info("Point estimate: N = %d (%d + %d)", r.n, r.n1, r.n2)
    return result
