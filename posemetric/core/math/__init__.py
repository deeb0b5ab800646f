"""Lie-group math primitives for posemetric."""

from .quaternions import quat_normalize, quat_canonical, quat_from_axis_angle, quat_to_matrix, quat_from_matrix
from .so3 import skew_symmetric, so3_exp, so3_log
from .se3 import (
    SE3,
    DEFAULT_GLOBAL,
    DEFAULT_COUPLED,
    se3_left_jacobian,
    se3_right_jacobian,
)

__all__ = [
    "quat_normalize",
    "quat_canonical",
    "quat_from_axis_angle",
    "quat_to_matrix",
    "quat_from_matrix",
    "skew_symmetric",
    "so3_exp",
    "so3_log",
    "SE3",
    "DEFAULT_GLOBAL",
    "DEFAULT_COUPLED",
    "se3_left_jacobian",
    "se3_right_jacobian",
]
