"""SE(3) Lie group operations for 3D poses.

A pose is stored as a 7-element parameter block [qw, qx, qy, qz, tx, ty, tz]
(unit quaternion followed by translation). Tangent vectors are 6-element
[wx, wy, wz, vx, vy, vz] with the rotational part first.

Every primitive that can output a Jacobian takes two convention flags:

- ``global_``: perturbations are applied on the left (global frame) when
  True, on the right (local/body frame) when False.
- ``coupled``: perturbations are SE(3) tangent vectors when True; when False
  the pose is treated as SU(2) x R3, i.e. rotation and translation are
  perturbed independently and the translation increment is simply added.
"""

from typing import Optional

import numpy as np
from scipy.linalg import block_diag

from .quaternions import (
    quat_canonical,
    quat_conjugate,
    quat_from_matrix,
    quat_identity,
    quat_multiply,
    quat_to_matrix,
)
from .so3 import (
    skew_symmetric,
    so3_exp,
    so3_left_jacobian,
    so3_left_jacobian_inverse,
    so3_log,
)

# Default derivative conventions.
DEFAULT_GLOBAL = True
DEFAULT_COUPLED = False

# Below this angle the SE(3) Q-matrix coefficients use their series.
Q_SERIES_ANGLE = 1e-3


def _se3_q_matrix(xi: np.ndarray) -> np.ndarray:
    """Coupling block between translation and rotation in the SE(3) Jacobian."""
    phi = xi[:3]
    rho = xi[3:]
    theta = np.linalg.norm(phi)

    P = skew_symmetric(phi)
    Rh = skew_symmetric(rho)
    PR = P @ Rh
    RP = Rh @ P
    PRP = PR @ P

    if theta < Q_SERIES_ANGLE:
        theta2 = theta**2
        c1 = 1.0 / 6.0 - theta2 / 120.0
        c2 = 1.0 / 24.0 - theta2 / 720.0
        c3 = 1.0 / 120.0 - theta2 / 2520.0
    else:
        s = np.sin(theta)
        c = np.cos(theta)
        c1 = (theta - s) / theta**3
        c2 = (theta**2 + 2.0 * c - 2.0) / (2.0 * theta**4)
        c3 = (2.0 * theta - 3.0 * s + theta * c) / (2.0 * theta**5)

    return (
        0.5 * Rh
        + c1 * (PR + RP + PRP)
        + c2 * (P @ PR + RP @ P - 3.0 * PRP)
        + c3 * (PRP @ P + P @ PRP)
    )


def se3_left_jacobian(xi: np.ndarray) -> np.ndarray:
    """Left Jacobian of SE(3): Exp(xi + d) ~ Exp(Jl d) Exp(xi)."""
    if xi.shape != (6,):
        raise ValueError(f"xi must be 6-element vector, got shape {xi.shape}")

    J = so3_left_jacobian(xi[:3])
    return np.block([[J, np.zeros((3, 3))], [_se3_q_matrix(xi), J]])


def se3_left_jacobian_inverse(xi: np.ndarray) -> np.ndarray:
    """Inverse of the SE(3) left Jacobian, using the closed-form SO(3) blocks."""
    if xi.shape != (6,):
        raise ValueError(f"xi must be 6-element vector, got shape {xi.shape}")

    J_inv = so3_left_jacobian_inverse(xi[:3])
    Q = _se3_q_matrix(xi)
    return np.block([[J_inv, np.zeros((3, 3))], [-J_inv @ Q @ J_inv, J_inv]])


def se3_right_jacobian(xi: np.ndarray) -> np.ndarray:
    """Right Jacobian of SE(3): Exp(xi + d) ~ Exp(xi) Exp(Jr d)."""
    return se3_left_jacobian(-xi)


def se3_right_jacobian_inverse(xi: np.ndarray) -> np.ndarray:
    """Inverse of the SE(3) right Jacobian."""
    return se3_left_jacobian_inverse(-xi)


def _write_jacobian(out: np.ndarray, value: np.ndarray) -> None:
    """Copy a 6x6 Jacobian into a caller-owned (6, 6) or (36,) buffer."""
    out[...] = value.reshape(out.shape)


class SE3:
    """Rigid-body pose: unit quaternion rotation plus translation."""

    NUM_PARAMETERS = 7
    TANGENT_SIZE = 6

    def __init__(self, rotation: Optional[np.ndarray] = None, translation: Optional[np.ndarray] = None):
        """Create a pose.

        Args:
            rotation: Quaternion [w, x, y, z], normalized to w >= 0 on construction
                (identity if omitted)
            translation: 3-element translation (zero if omitted)
        """
        rotation = quat_identity() if rotation is None else np.asarray(rotation, dtype=float)
        translation = np.zeros(3) if translation is None else np.asarray(translation, dtype=float)

        if rotation.shape != (4,):
            raise ValueError(f"rotation must be 4-element quaternion, got shape {rotation.shape}")
        if translation.shape != (3,):
            raise ValueError(f"translation must be 3-element vector, got shape {translation.shape}")

        self._params = np.concatenate([quat_canonical(rotation), translation])

    @classmethod
    def view(cls, parameters: np.ndarray) -> "SE3":
        """Wrap a caller-owned 7-element parameter buffer without copying.

        The buffer is neither validated nor normalized. The view must not
        outlive the buffer, and the buffer must not be modified while the
        view is in use.
        """
        pose = cls.__new__(cls)
        pose._params = np.asarray(parameters, dtype=float)
        return pose

    @classmethod
    def from_parameters(cls, parameters: np.ndarray) -> "SE3":
        """Create a pose from a 7-element [qw, qx, qy, qz, tx, ty, tz] block."""
        parameters = np.asarray(parameters, dtype=float)
        if parameters.shape != (cls.NUM_PARAMETERS,):
            raise ValueError(f"parameters must be 7-element vector, got shape {parameters.shape}")
        return cls(parameters[:4], parameters[4:])

    @classmethod
    def from_matrix(cls, T: np.ndarray) -> "SE3":
        """Create a pose from a 4x4 homogeneous transformation."""
        T = np.asarray(T, dtype=float)
        if T.shape != (4, 4):
            raise ValueError(f"T must be 4x4 matrix, got shape {T.shape}")
        return cls(quat_from_matrix(T[:3, :3]), T[:3, 3])

    @classmethod
    def identity(cls) -> "SE3":
        """Identity pose."""
        return cls()

    @classmethod
    def exp(cls, tangent: np.ndarray) -> "SE3":
        """Exponential map from a 6-element tangent [w, v] to SE(3)."""
        tangent = np.asarray(tangent, dtype=float)
        if tangent.shape != (cls.TANGENT_SIZE,):
            raise ValueError(f"tangent must be 6-element vector, got shape {tangent.shape}")

        phi = tangent[:3]
        return cls(so3_exp(phi), so3_left_jacobian(phi) @ tangent[3:])

    @classmethod
    def random(
        cls,
        rng: Optional[np.random.Generator] = None,
        max_angle: float = np.pi,
        translation_scale: float = 1.0,
    ) -> "SE3":
        """Sample a pose with rotation angle below max_angle.

        Args:
            rng: Random generator (a fresh default generator if omitted)
            max_angle: Upper bound on the rotation angle in radians
            translation_scale: Standard deviation of each translation component
        """
        rng = rng or np.random.default_rng()
        axis = rng.normal(size=3)
        angle = rng.uniform(0.0, max_angle)
        translation = translation_scale * rng.normal(size=3)
        return cls(so3_exp(angle * axis / np.linalg.norm(axis)), translation)

    @property
    def data(self) -> np.ndarray:
        """Underlying parameter buffer (not a copy)."""
        return self._params

    @property
    def rotation(self) -> np.ndarray:
        """Quaternion [w, x, y, z]."""
        return self._params[:4]

    @property
    def translation(self) -> np.ndarray:
        """Translation [x, y, z]."""
        return self._params[4:]

    def parameters(self) -> np.ndarray:
        """Copy of the 7-element parameter block."""
        return self._params.copy()

    def rotation_matrix(self) -> np.ndarray:
        """3x3 rotation matrix."""
        return quat_to_matrix(self.rotation)

    def matrix(self) -> np.ndarray:
        """4x4 homogeneous transformation."""
        T = np.eye(4)
        T[:3, :3] = self.rotation_matrix()
        T[:3, 3] = self.translation
        return T

    def adjoint(self) -> np.ndarray:
        """Adjoint Ad_X with X Exp(tau) X^-1 = Exp(Ad_X tau)."""
        R = self.rotation_matrix()
        return np.block([
            [R, np.zeros((3, 3))],
            [skew_symmetric(self.translation) @ R, R]
        ])

    def _perturbation_map(self, global_: bool, inverse: bool = False) -> np.ndarray:
        """Map a decoupled perturbation at this pose to the equivalent SE(3) one.

        With ``inverse`` set, map an SE(3) perturbation back to the decoupled one.
        """
        if global_:
            sign = -1.0 if inverse else 1.0
            return np.block([
                [np.eye(3), np.zeros((3, 3))],
                [sign * skew_symmetric(self.translation), np.eye(3)]
            ])

        R = self.rotation_matrix()
        return block_diag(np.eye(3), R if inverse else R.T)

    def inverse(
        self,
        J: Optional[np.ndarray] = None,
        global_: bool = DEFAULT_GLOBAL,
        coupled: bool = DEFAULT_COUPLED,
    ) -> "SE3":
        """Group inverse.

        Args:
            J: Output buffer for d(inverse)/d(self) (optional)
            global_: Global (left) instead of local (right) perturbations
            coupled: SE(3) instead of SU(2) x R3 perturbations

        Returns:
            Inverse pose
        """
        R = self.rotation_matrix()
        result = SE3(quat_conjugate(self.rotation), -R.T @ self.translation)

        if J is not None:
            J_inv = -result.adjoint() if global_ else -self.adjoint()
            if not coupled:
                J_inv = result._perturbation_map(global_, inverse=True) @ J_inv @ self._perturbation_map(global_)
            _write_jacobian(J, J_inv)

        return result

    def compose(
        self,
        other: "SE3",
        J_self: Optional[np.ndarray] = None,
        J_other: Optional[np.ndarray] = None,
        global_: bool = DEFAULT_GLOBAL,
        coupled: bool = DEFAULT_COUPLED,
    ) -> "SE3":
        """Group composition self * other.

        Args:
            other: Right operand
            J_self: Output buffer for d(result)/d(self) (optional)
            J_other: Output buffer for d(result)/d(other) (optional)
            global_: Global (left) instead of local (right) perturbations
            coupled: SE(3) instead of SU(2) x R3 perturbations

        Returns:
            Composed pose
        """
        q = quat_multiply(self.rotation, other.rotation)
        t = self.rotation_matrix() @ other.translation + self.translation
        result = SE3(q, t)

        if J_self is not None:
            J_s = np.eye(6) if global_ else other.inverse().adjoint()
            if not coupled:
                J_s = result._perturbation_map(global_, inverse=True) @ J_s @ self._perturbation_map(global_)
            _write_jacobian(J_self, J_s)

        if J_other is not None:
            J_o = self.adjoint() if global_ else np.eye(6)
            if not coupled:
                J_o = result._perturbation_map(global_, inverse=True) @ J_o @ other._perturbation_map(global_)
            _write_jacobian(J_other, J_o)

        return result

    def log(
        self,
        J: Optional[np.ndarray] = None,
        global_: bool = DEFAULT_GLOBAL,
        coupled: bool = DEFAULT_COUPLED,
    ) -> np.ndarray:
        """Logarithm map to the 6-element tangent [w, v].

        The value does not depend on the convention flags; only the Jacobian does.

        Args:
            J: Output buffer for d(log)/d(self) (optional)
            global_: Global (left) instead of local (right) perturbations
            coupled: SE(3) instead of SU(2) x R3 perturbations

        Returns:
            Tangent vector
        """
        phi = so3_log(self.rotation)
        rho = so3_left_jacobian_inverse(phi) @ self.translation
        tangent = np.concatenate([phi, rho])

        if J is not None:
            J_log = se3_left_jacobian_inverse(tangent) if global_ else se3_right_jacobian_inverse(tangent)
            if not coupled:
                J_log = J_log @ self._perturbation_map(global_)
            _write_jacobian(J, J_log)

        return tangent

    def retract(
        self,
        tangent: np.ndarray,
        global_: bool = DEFAULT_GLOBAL,
        coupled: bool = DEFAULT_COUPLED,
    ) -> "SE3":
        """Apply a tangent perturbation under the given convention."""
        tangent = np.asarray(tangent, dtype=float)
        if tangent.shape != (self.TANGENT_SIZE,):
            raise ValueError(f"tangent must be 6-element vector, got shape {tangent.shape}")

        if coupled:
            delta = SE3.exp(tangent)
            return delta.compose(self) if global_ else self.compose(delta)

        dq = so3_exp(tangent[:3])
        q = quat_multiply(dq, self.rotation) if global_ else quat_multiply(self.rotation, dq)
        return SE3(q, self.translation + tangent[3:])

    def minus(
        self,
        other: "SE3",
        global_: bool = DEFAULT_GLOBAL,
        coupled: bool = DEFAULT_COUPLED,
    ) -> np.ndarray:
        """Tangent d such that other.retract(d, global_, coupled) equals self."""
        if coupled:
            delta = self.compose(other.inverse()) if global_ else other.inverse().compose(self)
            return delta.log()

        conj = quat_conjugate(other.rotation)
        dq = quat_multiply(self.rotation, conj) if global_ else quat_multiply(conj, self.rotation)
        return np.concatenate([so3_log(dq), self.translation - other.translation])

    def __repr__(self) -> str:
        q = np.array2string(self.rotation, precision=6)
        t = np.array2string(self.translation, precision=6)
        return f"SE3(rotation={q}, translation={t})"
