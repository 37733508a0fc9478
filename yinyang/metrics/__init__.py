from .timers import Timer
from .metrics import speedup, efficiency, throughput, pruning_ratio

__all__ = [
    "Timer",
    "speedup",
    "efficiency",
    "throughput",
    "pruning_ratio",
]
