"""Shared fixtures: conventions, random poses and numerical Jacobians."""

from typing import Callable, List, Tuple, Union

import numpy as np
import pytest

from posemetric import SE3

CONVENTIONS = [(False, False), (False, True), (True, False), (True, True)]
CONVENTION_IDS = ["local-decoupled", "local-coupled", "global-decoupled", "global-coupled"]


@pytest.fixture(params=CONVENTIONS, ids=CONVENTION_IDS)
def convention(request) -> Tuple[bool, bool]:
    """(global_, coupled) pair, one test per convention."""
    return request.param


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def random_pose_pairs(rng) -> List[Tuple[SE3, SE3]]:
    """Pose pairs whose relative rotation stays well below pi."""
    return [
        (SE3.random(rng, max_angle=1.2, translation_scale=2.0),
         SE3.random(rng, max_angle=1.2, translation_scale=2.0))
        for _ in range(10)
    ]


def _numerical_jacobian(
    func: Callable[[SE3], Union[SE3, np.ndarray]],
    pose: SE3,
    global_: bool,
    coupled: bool,
    h: float = 1e-6,
) -> np.ndarray:
    """Central differences of func over tangent perturbations of pose.

    Pose-valued outputs are differenced with SE3.minus under the same
    convention as the input perturbation.
    """
    f0 = func(pose)
    J = np.zeros((6, 6))

    for j in range(6):
        delta = np.zeros(6)
        delta[j] = h
        f_plus = func(pose.retract(delta, global_, coupled))
        f_minus = func(pose.retract(-delta, global_, coupled))

        if isinstance(f0, SE3):
            d_plus = f_plus.minus(f0, global_, coupled)
            d_minus = f_minus.minus(f0, global_, coupled)
        else:
            d_plus = f_plus - f0
            d_minus = f_minus - f0

        J[:, j] = (d_plus - d_minus) / (2 * h)

    return J


@pytest.fixture
def numerical_jacobian():
    """Function computing a numerical Jacobian w.r.t. a pose perturbation."""
    return _numerical_jacobian
