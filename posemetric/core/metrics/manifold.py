"""Manifold distance metric on SE(3) with analytic Jacobians."""

import logging
from typing import Optional, Union

import numpy as np

from ..math.se3 import DEFAULT_COUPLED, DEFAULT_GLOBAL, SE3
from .config import MetricConfig
from .metric import Metric

logger = logging.getLogger(__name__)

PoseLike = Union[SE3, np.ndarray]


def _as_parameters(pose: PoseLike) -> np.ndarray:
    """Parameter buffer of a pose, or the array itself."""
    if isinstance(pose, SE3):
        return pose.data
    return np.asarray(pose, dtype=float)


class SE3ManifoldMetric(Metric):
    """Geodesic distance r = Log(lhs * rhs^-1) between SE(3) poses.

    Jacobians are returned under the (global_, coupled) convention, which is
    forwarded unchanged to every group primitive of an evaluation. The
    residual itself is the same for every convention.

    Instances hold only their frozen configuration and may be shared between
    threads; output buffers must not alias the inputs or each other.
    """

    INPUT_SIZE = SE3.NUM_PARAMETERS
    OUTPUT_SIZE = SE3.TANGENT_SIZE

    def __init__(self, global_: bool = DEFAULT_GLOBAL, coupled: bool = DEFAULT_COUPLED):
        """Initialize metric.

        Args:
            global_: Request global Jacobians
            coupled: Compute SE(3) instead of SU(2) x R3 Jacobians
        """
        self._config = MetricConfig(global_=global_, coupled=coupled)
        logger.debug(f"Created SE3 manifold metric (global={global_}, coupled={coupled})")

    @classmethod
    def from_config(cls, config: MetricConfig) -> "SE3ManifoldMetric":
        """Create metric from a configuration model."""
        return cls(global_=config.global_, coupled=config.coupled)

    @property
    def config(self) -> MetricConfig:
        return self._config

    @property
    def global_(self) -> bool:
        return self._config.global_

    @property
    def coupled(self) -> bool:
        return self._config.coupled

    @staticmethod
    def compute_distance(
        lhs: np.ndarray,
        rhs: np.ndarray,
        output: np.ndarray,
        J_lhs: Optional[np.ndarray] = None,
        J_rhs: Optional[np.ndarray] = None,
        global_: bool = DEFAULT_GLOBAL,
        coupled: bool = DEFAULT_COUPLED,
    ) -> None:
        """Evaluate the distance between elements into caller-owned buffers.

        Buffers are not validated. Only the partial Jacobians needed for the
        requested outputs are computed.

        Args:
            lhs: Left element, 7-element parameter block
            rhs: Right element, 7-element parameter block
            output: 6-element buffer receiving the distance
            J_lhs: (6, 6) or (36,) buffer for the Jacobian w.r.t. lhs (optional)
            J_rhs: (6, 6) or (36,) buffer for the Jacobian w.r.t. rhs (optional)
            global_: Request global Jacobians
            coupled: Compute SE(3) instead of SU(2) x R3 Jacobians
        """
        lhs_ = SE3.view(lhs)
        rhs_ = SE3.view(rhs)

        if J_lhs is None and J_rhs is None:
            i_rhs = rhs_.inverse(global_=global_, coupled=coupled)
            output[...] = lhs_.compose(i_rhs, global_=global_, coupled=coupled).log(global_=global_, coupled=coupled)
            return

        size = SE3.TANGENT_SIZE
        J_t_p = np.empty((size, size))
        J_p_l = np.empty((size, size)) if J_lhs is not None else None
        J_p_ir = np.empty((size, size)) if J_rhs is not None else None
        J_ir_r = np.empty((size, size)) if J_rhs is not None else None

        i_rhs = rhs_.inverse(J_ir_r, global_=global_, coupled=coupled)
        lhs_plus_i_rhs = lhs_.compose(i_rhs, J_p_l, J_p_ir, global_=global_, coupled=coupled)
        output[...] = lhs_plus_i_rhs.log(J_t_p, global_=global_, coupled=coupled)

        # Chain rule
        if J_lhs is not None:
            J_lhs[...] = (J_t_p @ J_p_l).reshape(J_lhs.shape)
        if J_rhs is not None:
            J_rhs[...] = (J_t_p @ (J_p_ir @ J_ir_r)).reshape(J_rhs.shape)

    @staticmethod
    def evaluate_distance(
        lhs: PoseLike,
        rhs: PoseLike,
        J_lhs: Optional[np.ndarray] = None,
        J_rhs: Optional[np.ndarray] = None,
        global_: bool = DEFAULT_GLOBAL,
        coupled: bool = DEFAULT_COUPLED,
    ) -> np.ndarray:
        """Evaluate the distance between elements.

        Args:
            lhs: Left pose or parameter block
            rhs: Right pose or parameter block
            J_lhs: Buffer for the Jacobian w.r.t. lhs (optional)
            J_rhs: Buffer for the Jacobian w.r.t. rhs (optional)
            global_: Request global Jacobians
            coupled: Compute SE(3) instead of SU(2) x R3 Jacobians

        Returns:
            6-element distance vector
        """
        output = np.empty(SE3.TANGENT_SIZE)
        SE3ManifoldMetric.compute_distance(
            _as_parameters(lhs), _as_parameters(rhs), output, J_lhs, J_rhs, global_, coupled
        )
        return output

    def input_size(self) -> int:
        """Get pose parameter block size."""
        return self.INPUT_SIZE

    def output_size(self) -> int:
        """Get tangent dimension."""
        return self.OUTPUT_SIZE

    def distance(
        self,
        lhs: np.ndarray,
        rhs: np.ndarray,
        output: np.ndarray,
        J_lhs: Optional[np.ndarray] = None,
        J_rhs: Optional[np.ndarray] = None,
    ) -> None:
        """Evaluate into caller-owned buffers with this metric's conventions."""
        self.compute_distance(lhs, rhs, output, J_lhs, J_rhs, self.global_, self.coupled)

    def evaluate(
        self,
        lhs: PoseLike,
        rhs: PoseLike,
        J_lhs: Optional[np.ndarray] = None,
        J_rhs: Optional[np.ndarray] = None,
    ) -> np.ndarray:
        """Evaluate the distance with this metric's conventions."""
        return self.evaluate_distance(lhs, rhs, J_lhs, J_rhs, self.global_, self.coupled)

    def __repr__(self) -> str:
        return f"SE3ManifoldMetric(global_={self.global_}, coupled={self.coupled})"
