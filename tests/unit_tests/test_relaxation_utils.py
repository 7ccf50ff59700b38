import numpy as np
from mpi4py import MPI

from discadj.model import Zone
from discadj.interface import (
    AitkenRelaxation,
    UnderRelaxation,
    TestResult,
    real_norm,
    global_norm,
    field_change_norm,
)

import unittest

comm = MPI.COMM_WORLD


class RelaxationTest(unittest.TestCase):
    def test_aitken_update(self):
        zone = Zone("fluid", nnodes=2, ndim=2, nvar=1)
        relax = AitkenRelaxation(theta_init=0.5, theta_min=0.1, theta_max=2.0)
        relax.reset([zone])

        up1 = np.array([[1.0], [2.0]])
        np.testing.assert_allclose(relax.relax(comm, zone, up1), 0.5 * up1)

        up2 = np.array([[0.5], [1.5]])
        diff = up2 - up1
        theta = 0.5 * (1.0 - np.sum(diff * up2) / np.sum(diff * diff))
        np.testing.assert_allclose(relax.relax(comm, zone, up2), theta * up2)
        self.assertAlmostEqual(relax.theta[zone.id], theta)
        return

    def test_aitken_bounds(self):
        zone = Zone("fluid", nnodes=1, ndim=2, nvar=1)
        relax = AitkenRelaxation(theta_init=1.0, theta_min=0.25, theta_max=2.0)
        relax.reset([zone])

        relax.relax(comm, zone, np.array([[1.0]]))
        relax.relax(comm, zone, np.array([[-1.0]]))
        self.assertEqual(relax.theta[zone.id], 0.5)

        relax.relax(comm, zone, np.array([[-0.999]]))
        self.assertEqual(relax.theta[zone.id], 2.0)

        # reset restarts from the initial theta
        relax.reset([zone])
        self.assertEqual(relax.theta[zone.id], 1.0)
        self.assertIsNone(relax.prev_update[zone.id])
        return

    def test_under_relaxation(self):
        zone = Zone("fluid", nnodes=1, ndim=2, nvar=2)
        relax = UnderRelaxation(theta_adjoint=0.3)
        np.testing.assert_allclose(
            relax.relax(comm, zone, np.array([[1.0, -2.0]])), [[0.3, -0.6]]
        )
        return


class NormTest(unittest.TestCase):
    def test_norms(self):
        vec = np.array([3.0 + 1.0j, 4.0])
        self.assertAlmostEqual(real_norm(vec), 5.0)
        self.assertIsNone(real_norm(None))
        self.assertAlmostEqual(
            global_norm(comm, [np.array([3.0]), np.array([4.0])]),
            5.0 * np.sqrt(comm.size),
        )
        return

    def test_field_change_norm(self):
        zone = Zone("fluid", nnodes=2, ndim=2, nvar=2, initial_adjoint=1.0)
        zone.nodes.snapshot_bgs()
        zone.nodes.set_solution(1, 0, 4.0)
        zone.nodes.set_solution(0, 1, 5.0)
        self.assertAlmostEqual(
            field_change_norm(comm, [zone], "solution", "solution_bgs_k"),
            5.0 * np.sqrt(comm.size),
        )
        return

    def test_relative_error(self):
        self.assertEqual(TestResult.relative_error(np.ones(3), np.ones(3)), 0.0)
        self.assertEqual(TestResult.relative_error(np.zeros(2), np.ones(2)), 1.0)
        self.assertAlmostEqual(
            TestResult.relative_error(np.array([3.0, 4.0]), np.array([3.0, 4.5])), 0.1
        )
        return


if __name__ == "__main__":
    unittest.main()
