"""
Sample size and power calculations for two-arm experiments.

Every two-group study starts with "how many subjects do we need?" This module
provides the computation engine behind the interactive workflow: two-sample
means and proportions, individually or cluster randomized, solved either for
the sample size or for the minimum detectable effect.

Validates against: R packages pwr, clusterPower; Stata power twomeans/twoproportions.
"""

from pystudypower.power._common import PointResult
from pystudypower.power._means import n_two_means, mdes_two_means
from pystudypower.power._proportions import n_two_props, mdes_two_props
from pystudypower.power._cluster import n_cluster_means, n_cluster_props
from pystudypower.power._dispatch import (
    SWEEP_COLUMNS,
    ClusterParams,
    compute_point,
    compute_sweep,
)

__all__ = [
    "PointResult",
    "ClusterParams",
    "SWEEP_COLUMNS",
    "n_two_means",
    "mdes_two_means",
    "n_two_props",
    "mdes_two_props",
    "n_cluster_means",
    "n_cluster_props",
    "compute_point",
    "compute_sweep",
]
