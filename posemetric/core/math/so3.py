"""SO(3) exponential, logarithm and Jacobians on rotation vectors."""

import numpy as np

from .quaternions import quat_canonical, quat_from_axis_angle, quat_normalize

# Below this angle the closed forms are replaced by their Taylor expansions.
SMALL_ANGLE = 1e-6


def skew_symmetric(v: np.ndarray) -> np.ndarray:
    """Create skew-symmetric matrix from 3D vector."""
    if v.shape != (3,):
        raise ValueError(f"v must be 3-element vector, got shape {v.shape}")

    return np.array([
        [0, -v[2], v[1]],
        [v[2], 0, -v[0]],
        [-v[1], v[0], 0]
    ])


def so3_exp(phi: np.ndarray) -> np.ndarray:
    """Map a rotation vector to a unit quaternion [w, x, y, z]."""
    if phi.shape != (3,):
        raise ValueError(f"phi must be 3-element vector, got shape {phi.shape}")

    theta = np.linalg.norm(phi)
    if theta < SMALL_ANGLE:
        # First-order quaternion, renormalized
        return quat_normalize(np.concatenate([[1.0], 0.5 * phi]))

    return quat_from_axis_angle(phi / theta, theta)


def so3_log(q: np.ndarray) -> np.ndarray:
    """Map a unit quaternion [w, x, y, z] to its rotation vector.

    The returned angle lies in [0, pi]; q and -q give the same result.
    """
    q = quat_canonical(q)

    w = q[0]
    v = q[1:]
    sin_half = np.linalg.norm(v)

    if sin_half < SMALL_ANGLE:
        # theta / sin(theta / 2) expanded around zero
        return (2.0 / w) * (1.0 - sin_half**2 / (3.0 * w**2)) * v

    theta = 2.0 * np.arctan2(sin_half, w)
    return (theta / sin_half) * v


def so3_left_jacobian(phi: np.ndarray) -> np.ndarray:
    """Left Jacobian of SO(3): Exp(phi + d) ~ Exp(Jl d) Exp(phi)."""
    theta = np.linalg.norm(phi)
    K = skew_symmetric(phi)

    if theta < SMALL_ANGLE:
        a = 0.5 - theta**2 / 24.0
        b = 1.0 / 6.0 - theta**2 / 120.0
    else:
        a = (1.0 - np.cos(theta)) / theta**2
        b = (theta - np.sin(theta)) / theta**3

    return np.eye(3) + a * K + b * (K @ K)


def so3_left_jacobian_inverse(phi: np.ndarray) -> np.ndarray:
    """Closed-form inverse of the SO(3) left Jacobian."""
    theta = np.linalg.norm(phi)
    K = skew_symmetric(phi)

    if theta < SMALL_ANGLE:
        c = 1.0 / 12.0 + theta**2 / 720.0
    else:
        half = theta / 2.0
        c = (1.0 - half * np.cos(half) / np.sin(half)) / theta**2

    return np.eye(3) - 0.5 * K + c * (K @ K)


def so3_right_jacobian(phi: np.ndarray) -> np.ndarray:
    """Right Jacobian of SO(3): Exp(phi + d) ~ Exp(phi) Exp(Jr d)."""
    return so3_left_jacobian(-phi)


def so3_right_jacobian_inverse(phi: np.ndarray) -> np.ndarray:
    """Closed-form inverse of the SO(3) right Jacobian."""
    return so3_left_jacobian_inverse(-phi)
