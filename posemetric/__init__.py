"""posemetric - SE(3) pose distances for optimizers

Geodesic residuals between rigid-body poses in the SE(3) tangent space,
with analytic Jacobians under global/local and coupled/decoupled conventions.
"""

__version__ = "0.1.0"

# Lie group
from .core.math.se3 import SE3, DEFAULT_GLOBAL, DEFAULT_COUPLED

# Metrics
from .core.metrics.metric import Metric
from .core.metrics.config import MetricConfig
from .core.metrics.manifold import SE3ManifoldMetric
from .core.metrics.registry import MetricRegistry

__all__ = [
    # Version
    "__version__",
    # Lie group
    "SE3",
    "DEFAULT_GLOBAL",
    "DEFAULT_COUPLED",
    # Metrics
    "Metric",
    "MetricConfig",
    "SE3ManifoldMetric",
    "MetricRegistry",
]
