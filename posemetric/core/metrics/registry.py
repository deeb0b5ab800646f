"""Registry of the metric kinds known to optimizers."""

import logging
from typing import Dict, List, Optional, Type

from .config import MetricConfig
from .manifold import SE3ManifoldMetric
from .metric import Metric

logger = logging.getLogger(__name__)


class MetricRegistry:
    """Registry for metric types."""

    _metric_kinds: Dict[str, Type[Metric]] = {
        "se3_manifold": SE3ManifoldMetric,
    }

    @classmethod
    def get_metric_class(cls, kind: str) -> Type[Metric]:
        """Get metric class by kind string."""
        if kind not in cls._metric_kinds:
            raise ValueError(f"Unknown metric kind: {kind}")
        return cls._metric_kinds[kind]

    @classmethod
    def list_metric_kinds(cls) -> List[str]:
        """List all available metric kinds."""
        return list(cls._metric_kinds.keys())

    @classmethod
    def create_metric(cls, kind: str, config: Optional[MetricConfig] = None, **kwargs) -> Metric:
        """Create metric of specified kind.

        Args:
            kind: Metric kind string
            config: Convention configuration (takes precedence over kwargs)
            **kwargs: Constructor arguments of the metric class

        Returns:
            Metric instance
        """
        metric_class = cls.get_metric_class(kind)
        logger.debug(f"Creating metric of kind {kind}")
        if config is not None:
            return metric_class.from_config(config)
        return metric_class(**kwargs)
