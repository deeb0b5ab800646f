"""Common interface for distance metrics consumed by optimizers."""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from .config import MetricConfig


class Metric(ABC):
    """Abstract base class for metrics evaluated on raw parameter buffers."""

    @classmethod
    @abstractmethod
    def from_config(cls, config: MetricConfig) -> "Metric":
        """Create metric from a configuration model."""
        pass

    @abstractmethod
    def input_size(self) -> int:
        """Get number of parameters of each input element."""
        pass

    @abstractmethod
    def output_size(self) -> int:
        """Get dimension of the distance vector."""
        pass

    @abstractmethod
    def distance(
        self,
        lhs: np.ndarray,
        rhs: np.ndarray,
        output: np.ndarray,
        J_lhs: Optional[np.ndarray] = None,
        J_rhs: Optional[np.ndarray] = None,
    ) -> None:
        """Evaluate the distance between two elements into caller-owned buffers.

        Args:
            lhs: Left element parameters
            rhs: Right element parameters
            output: Buffer receiving the distance
            J_lhs: Buffer receiving the Jacobian w.r.t. lhs (None if not requested)
            J_rhs: Buffer receiving the Jacobian w.r.t. rhs (None if not requested)
        """
        pass
