"""Property tests of the SE(3) distance on random pose pairs."""

from concurrent.futures import ThreadPoolExecutor

import numpy as np

from posemetric import SE3, SE3ManifoldMetric


def test_jacobians_match_finite_differences(random_pose_pairs, convention, numerical_jacobian):
    """Analytic Jacobians agree with central differences for every convention."""
    global_, coupled = convention

    for lhs, rhs in random_pose_pairs:
        J_lhs = np.empty((6, 6))
        J_rhs = np.empty((6, 6))
        SE3ManifoldMetric.evaluate_distance(lhs, rhs, J_lhs, J_rhs, global_, coupled)

        J_lhs_numeric = numerical_jacobian(
            lambda p: SE3ManifoldMetric.evaluate_distance(p, rhs), lhs, global_, coupled
        )
        J_rhs_numeric = numerical_jacobian(
            lambda p: SE3ManifoldMetric.evaluate_distance(lhs, p), rhs, global_, coupled
        )

        np.testing.assert_allclose(J_lhs, J_lhs_numeric, atol=1e-6)
        np.testing.assert_allclose(J_rhs, J_rhs_numeric, atol=1e-6)


def test_residual_matches_primitives(random_pose_pairs, convention):
    """Residual-only evaluation equals Log(A * B^-1) from the primitives."""
    global_, coupled = convention

    for lhs, rhs in random_pose_pairs:
        expected = lhs.compose(rhs.inverse()).log()
        r = SE3ManifoldMetric.evaluate_distance(lhs, rhs, global_=global_, coupled=coupled)

        np.testing.assert_allclose(r, expected, atol=1e-12)


def test_residual_is_the_relative_pose(random_pose_pairs):
    """Exp of the residual maps rhs back onto lhs."""
    for lhs, rhs in random_pose_pairs:
        r = SE3ManifoldMetric.evaluate_distance(lhs, rhs)

        np.testing.assert_allclose(SE3.exp(r).compose(rhs).matrix(), lhs.matrix(), atol=1e-10)


def test_distance_to_self_is_zero(random_pose_pairs, convention, numerical_jacobian):
    """Distance(A, A) is zero and its Jacobians match central differences."""
    global_, coupled = convention

    for lhs, _ in random_pose_pairs:
        J_lhs = np.empty((6, 6))
        J_rhs = np.empty((6, 6))
        r = SE3ManifoldMetric.evaluate_distance(lhs, lhs, J_lhs, J_rhs, global_, coupled)
        np.testing.assert_allclose(r, np.zeros(6), atol=1e-9)

        J_lhs_numeric = numerical_jacobian(
            lambda p: SE3ManifoldMetric.evaluate_distance(p, lhs), lhs, global_, coupled
        )
        J_rhs_numeric = numerical_jacobian(
            lambda p: SE3ManifoldMetric.evaluate_distance(lhs, p), lhs, global_, coupled
        )

        np.testing.assert_allclose(J_lhs, J_lhs_numeric, atol=1e-6)
        np.testing.assert_allclose(J_rhs, J_rhs_numeric, atol=1e-6)


def test_concurrent_calls_match_sequential(random_pose_pairs, convention):
    """Concurrent evaluations on distinct buffers equal sequential ones."""
    global_, coupled = convention
    metric = SE3ManifoldMetric(global_=global_, coupled=coupled)
    lhs, rhs = random_pose_pairs[0]
    n_calls = 64

    def evaluate(_):
        output = np.empty(6)
        J_lhs = np.empty((6, 6))
        J_rhs = np.empty((6, 6))
        metric.distance(lhs.data, rhs.data, output, J_lhs, J_rhs)
        return output, J_lhs, J_rhs

    sequential = [evaluate(i) for i in range(n_calls)]
    with ThreadPoolExecutor(max_workers=8) as executor:
        concurrent = list(executor.map(evaluate, range(n_calls)))

    for expected, actual in zip(sequential, concurrent):
        for a, b in zip(expected, actual):
            np.testing.assert_array_equal(b, a)
