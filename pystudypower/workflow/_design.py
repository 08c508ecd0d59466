"""Dispatch table of the eight computation paths.

Each :class:`Leaf` declares, once, the parameters its branch collects, the
axis its sweep runs over and how its parameters map onto the power engine.
"""

from __future__ import annotations

from dataclasses import dataclass

from pystudypower.power import ClusterParams
from pystudypower.workflow._collect import (
    POSITIVE,
    POSITIVE_INTEGER,
    UNIT_INTERVAL,
    Constraint,
)
from pystudypower.workflow._spec import (
    DesignKind,
    MethodKind,
    MissingParameter,
    OutcomeKind,
    StudySpecification,
)

MEANS, PROPORTIONS = OutcomeKind.MEANS, OutcomeKind.PROPORTIONS
INDIVIDUAL, CLUSTER = DesignKind.INDIVIDUAL, DesignKind.CLUSTER
VARY_EFFECT, VARY_SAMPLE_SIZE = MethodKind.VARY_EFFECT, MethodKind.VARY_SAMPLE_SIZE


@dataclass(frozen=True)
class ParameterPrompt:
    """A named parameter, the question that asks for it and its constraint."""

    name: str
    prompt: str
    constraint: Constraint


CONTROL_MEAN = ParameterPrompt("control_mean", "Mean of the control group: ", POSITIVE)
SD = ParameterPrompt("sd", "Standard deviation: ", POSITIVE)
NRATIO = ParameterPrompt(
    "nratio", "Ratio of treatment to control group size (nratio): ", POSITIVE,
)
RHO = ParameterPrompt("rho", "Intra-cluster correlation (rho): ", UNIT_INTERVAL)
CONTROL_PROP = ParameterPrompt(
    "control_prop", "Proportion in the control group: ", UNIT_INTERVAL,
)
K1 = ParameterPrompt("k1", "Number of clusters in the control group: ", POSITIVE_INTEGER)
K2 = ParameterPrompt("k2", "Number of clusters in the treatment group: ", POSITIVE_INTEGER)
M1 = ParameterPrompt("m1", "Cluster size in the control group: ", POSITIVE_INTEGER)
M2 = ParameterPrompt("m2", "Cluster size in the treatment group: ", POSITIVE_INTEGER)

_DESIGN_PARAMS: dict[tuple[OutcomeKind, DesignKind], tuple[ParameterPrompt, ...]] = {
    (MEANS, INDIVIDUAL): (CONTROL_MEAN, SD, NRATIO),
    (MEANS, CLUSTER): (CONTROL_MEAN, SD, RHO),
    (PROPORTIONS, INDIVIDUAL): (CONTROL_PROP, NRATIO),
    (PROPORTIONS, CLUSTER): (CONTROL_PROP, RHO),
}

TEST_MENU = "Compare 1 = means, 2 = proportions: "
DESIGN_MENU = "Randomize 1 = individuals, 2 = clusters: "
_METHOD_MENUS = {
    INDIVIDUAL: "Vary 1 = effect size, 2 = sample size: ",
    CLUSTER: "Hold fixed 1 = number of clusters, 2 = cluster size: ",
}


@dataclass(frozen=True)
class Leaf:
    """One of the eight (test, design, method) computation paths."""

    test_kind: OutcomeKind
    design_kind: DesignKind
    method_kind: MethodKind
    code: str
    axis: str
    axis_slug: str
    method_params: tuple[ParameterPrompt, ...]
    range_label: str
    range_constraint: Constraint
    fixed_cluster: str | None = None

    @property
    def key(self) -> tuple[OutcomeKind, DesignKind, MethodKind]:
        return (self.test_kind, self.design_kind, self.method_kind)

    @property
    def design_params(self) -> tuple[ParameterPrompt, ...]:
        return _DESIGN_PARAMS[(self.test_kind, self.design_kind)]

    @property
    def param_names(self) -> tuple[str, ...]:
        """Every parameter this leaf collects, in prompt order."""
        return tuple(p.name for p in self.design_params + self.method_params)

    @property
    def control_name(self) -> str:
        return "control_mean" if self.test_kind is MEANS else "control_prop"

    @property
    def treatment_name(self) -> str:
        return "treatment_mean" if self.test_kind is MEANS else "treatment_prop"

    @property
    def resolved_names(self) -> tuple[str, ...]:
        """Parameters written by the inflection step."""
        if self.axis == "n":
            return ("n",)
        return ("mdes", self.treatment_name)

    def check(self, spec: StudySpecification) -> None:
        """Verify *spec* holds exactly this leaf's parameters.

        Raises
        ------
        MissingParameter
            A parameter of this leaf was never collected.
        ValueError
            The kinds do not select this leaf, or a parameter from another
            leaf is present.
        """
        if (spec.test_kind, spec.design_kind, spec.method_kind) != self.key:
            raise ValueError(f"specification does not select leaf {self.code}/{self.axis_slug}")
        collected = set(spec.params)
        missing = [name for name in self.param_names if name not in collected]
        if missing:
            raise MissingParameter(", ".join(missing))
        extra = collected - set(self.param_names) - set(self.resolved_names)
        if extra:
            raise ValueError(
                f"parameters {sorted(extra)} do not belong to leaf {self.code}/{self.axis_slug}"
            )

    def control(self, spec: StudySpecification) -> float:
        return spec.require(self.control_name)

    def engine_kwargs(self, spec: StudySpecification) -> dict[str, object]:
        """Keyword arguments shared by ``compute_point`` and ``compute_sweep``."""
        kwargs: dict[str, object] = {"alpha": spec.alpha, "power": spec.power}
        if self.test_kind is MEANS:
            kwargs["sd"] = spec.require("sd")
        if self.design_kind is INDIVIDUAL:
            kwargs["nratio"] = spec.require("nratio")
        elif self.fixed_cluster == "count":
            kwargs["cluster"] = ClusterParams(
                icc=spec.require("rho"),
                clusters=(int(spec.require("k1")), int(spec.require("k2"))),
            )
        else:
            kwargs["cluster"] = ClusterParams(
                icc=spec.require("rho"),
                sizes=(int(spec.require("m1")), int(spec.require("m2"))),
            )
        return kwargs


_TOTAL_N = "total sample size"

LEAVES: dict[tuple[OutcomeKind, DesignKind, MethodKind], Leaf] = {
    leaf.key: leaf
    for leaf in (
        Leaf(MEANS, INDIVIDUAL, VARY_EFFECT, "MI", "effect", "vary_effect",
             (), "treatment mean", POSITIVE),
        Leaf(MEANS, INDIVIDUAL, VARY_SAMPLE_SIZE, "MI", "n", "vary_sample_size",
             (), _TOTAL_N, POSITIVE_INTEGER),
        Leaf(MEANS, CLUSTER, VARY_EFFECT, "MC", "effect", "fixed_cluster_count",
             (K1, K2), "treatment mean", POSITIVE, fixed_cluster="count"),
        Leaf(MEANS, CLUSTER, VARY_SAMPLE_SIZE, "MC", "effect", "fixed_cluster_size",
             (M1, M2), "treatment mean", POSITIVE, fixed_cluster="size"),
        Leaf(PROPORTIONS, INDIVIDUAL, VARY_EFFECT, "PI", "effect", "vary_effect",
             (), "treatment proportion", UNIT_INTERVAL),
        Leaf(PROPORTIONS, INDIVIDUAL, VARY_SAMPLE_SIZE, "PI", "n", "vary_sample_size",
             (), _TOTAL_N, POSITIVE_INTEGER),
        Leaf(PROPORTIONS, CLUSTER, VARY_EFFECT, "PC", "effect", "fixed_cluster_count",
             (K1, K2), "treatment proportion", UNIT_INTERVAL, fixed_cluster="count"),
        Leaf(PROPORTIONS, CLUSTER, VARY_SAMPLE_SIZE, "PC", "effect", "fixed_cluster_size",
             (M1, M2), "treatment proportion", UNIT_INTERVAL, fixed_cluster="size"),
    )
}


def select(test: OutcomeKind, design: DesignKind, method: MethodKind) -> Leaf:
    """Return the leaf for a (test, design, method) combination."""
    return LEAVES[(test, design, method)]


def design_prompts(test: OutcomeKind, design: DesignKind) -> tuple[ParameterPrompt, ...]:
    """Parameters collected before the method is chosen."""
    return _DESIGN_PARAMS[(test, design)]


def method_menu(design: DesignKind) -> str:
    return _METHOD_MENUS[design]
