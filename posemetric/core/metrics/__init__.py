"""Distance metrics with analytic Jacobians."""

from .metric import Metric
from .config import MetricConfig
from .manifold import SE3ManifoldMetric
from .registry import MetricRegistry

__all__ = [
    "Metric",
    "MetricConfig",
    "SE3ManifoldMetric",
    "MetricRegistry",
]
