from .base import KMeansBase, KMeansResult
from .lloyd import KMeansLloyd, lloyd_kmeans
from .groups import GroupPartition, build_groups, group_count
from .parallel import MultiprocessingConfig, PhaseExecutor, YinyangState
from .yinyang import KMeansYinyang, YinyangConfig

__all__ = [
    "KMeansBase",
    "KMeansResult",
    "KMeansLloyd",
    "lloyd_kmeans",
    "GroupPartition",
    "build_groups",
    "group_count",
    "MultiprocessingConfig",
    "PhaseExecutor",
    "YinyangState",
    "KMeansYinyang",
    "YinyangConfig",
]
