"""Unit quaternion operations, stored scalar-first as [w, x, y, z].

Rotations are canonicalized to a non-negative scalar part wherever a
quaternion is produced from scratch (`quat_canonical`, `quat_from_matrix`);
products and conjugates keep whatever sign their inputs give.
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)

# Inputs further than this from unit length are reported when normalized.
NORM_TOLERANCE = 1e-6


def _check_quaternion(q: np.ndarray) -> None:
    if q.shape != (4,):
        raise ValueError(f"Quaternion must be 4-element vector, got shape {q.shape}")


def quat_normalize(q: np.ndarray) -> np.ndarray:
    """Normalize quaternion to unit length."""
    _check_quaternion(q)

    norm = np.linalg.norm(q)
    if norm < 1e-12:
        raise ValueError("Cannot normalize zero quaternion")

    if abs(norm - 1.0) > NORM_TOLERANCE:
        logger.debug(f"Normalizing quaternion with norm {norm:.6g}")

    return q / norm


def quat_canonical(q: np.ndarray) -> np.ndarray:
    """Normalize and flip q so that w >= 0 (q and -q are the same rotation)."""
    q = quat_normalize(q)
    return -q if q[0] < 0 else q


def quat_identity() -> np.ndarray:
    """Return the identity rotation [1, 0, 0, 0]."""
    return np.array([1.0, 0.0, 0.0, 0.0])


def quat_from_axis_angle(axis: np.ndarray, angle: float) -> np.ndarray:
    """Rotation of `angle` radians about `axis` (normalized internally).

    A zero axis yields the identity.
    """
    if axis.shape != (3,):
        raise ValueError(f"Axis must be 3-element vector, got shape {axis.shape}")

    axis_norm = np.linalg.norm(axis)
    if axis_norm < 1e-12:
        return quat_identity()

    half_angle = 0.5 * angle
    return np.concatenate([[np.cos(half_angle)], (np.sin(half_angle) / axis_norm) * axis])


def quat_to_matrix(q: np.ndarray) -> np.ndarray:
    """Convert quaternion to 3x3 rotation matrix.

    Uses R = (w^2 - |v|^2) I + 2 v v^T + 2 w [v]x on the normalized input.
    """
    q = quat_normalize(q)
    w, v = q[0], q[1:]

    v_hat = np.array([
        [0.0, -v[2], v[1]],
        [v[2], 0.0, -v[0]],
        [-v[1], v[0], 0.0],
    ])
    return (w * w - v @ v) * np.eye(3) + 2.0 * np.outer(v, v) + 2.0 * w * v_hat


def quat_from_matrix(R: np.ndarray) -> np.ndarray:
    """Convert rotation matrix to a unit quaternion with non-negative w.

    Uses the largest diagonal pivot (Shepperd's method) so the result stays
    accurate for rotations close to 180 degrees.
    """
    if R.shape != (3, 3):
        raise ValueError(f"R must be 3x3 matrix, got shape {R.shape}")

    trace = np.trace(R)
    if trace > max(R[0, 0], R[1, 1], R[2, 2]):
        s = 2.0 * np.sqrt(1.0 + trace)
        q = np.array([
            0.25 * s,
            (R[2, 1] - R[1, 2]) / s,
            (R[0, 2] - R[2, 0]) / s,
            (R[1, 0] - R[0, 1]) / s,
        ])
    elif R[0, 0] >= R[1, 1] and R[0, 0] >= R[2, 2]:
        s = 2.0 * np.sqrt(1.0 + R[0, 0] - R[1, 1] - R[2, 2])
        q = np.array([
            (R[2, 1] - R[1, 2]) / s,
            0.25 * s,
            (R[0, 1] + R[1, 0]) / s,
            (R[0, 2] + R[2, 0]) / s,
        ])
    elif R[1, 1] >= R[2, 2]:
        s = 2.0 * np.sqrt(1.0 + R[1, 1] - R[0, 0] - R[2, 2])
        q = np.array([
            (R[0, 2] - R[2, 0]) / s,
            (R[0, 1] + R[1, 0]) / s,
            0.25 * s,
            (R[1, 2] + R[2, 1]) / s,
        ])
    else:
        s = 2.0 * np.sqrt(1.0 + R[2, 2] - R[0, 0] - R[1, 1])
        q = np.array([
            (R[1, 0] - R[0, 1]) / s,
            (R[0, 2] + R[2, 0]) / s,
            (R[1, 2] + R[2, 1]) / s,
            0.25 * s,
        ])

    return quat_canonical(q)


def quat_multiply(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Hamilton product q1 * q2, in scalar/vector form."""
    if q1.shape != (4,) or q2.shape != (4,):
        raise ValueError("Both quaternions must be 4-element vectors")

    w1, v1 = q1[0], q1[1:]
    w2, v2 = q2[0], q2[1:]

    w = w1 * w2 - v1 @ v2
    v = w1 * v2 + w2 * v1 + np.cross(v1, v2)
    return np.concatenate([[w], v])


def quat_conjugate(q: np.ndarray) -> np.ndarray:
    """Return quaternion conjugate (the inverse of a unit quaternion)."""
    _check_quaternion(q)

    return q * np.array([1.0, -1.0, -1.0, -1.0])
