"""
Metric collectors for host telemetry.
"""

from .base import Collector, CycleStatus, GatherError, GatherResult
from .registry import CollectorRegistry, default_registry
from .system import SystemCollector, SystemFields

__all__ = [
    "Collector",
    "CycleStatus",
    "GatherError",
    "GatherResult",
    "CollectorRegistry",
    "default_registry",
    "SystemCollector",
    "SystemFields",
]
