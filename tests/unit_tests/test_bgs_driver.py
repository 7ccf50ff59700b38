import numpy as np, os
from mpi4py import MPI

from discadj.model import Zone, Scenario, DiscAdjModel
from discadj.interface import (
    TestFlowSolver,
    TestMeshSolver,
    SolverManager,
    AitkenRelaxation,
    UnderRelaxation,
    TestResult,
)
from discadj.driver import DiscAdjBGSDriver

import unittest

comm = MPI.COMM_WORLD
base_dir = os.path.dirname(os.path.abspath(__file__))

results_folder = os.path.join(base_dir, "results")
if comm.rank == 0:  # make the results folder if doesn't exist
    if not os.path.exists(results_folder):
        os.mkdir(results_folder)
comm.Barrier()

rtol = 1e-9


def monolithic_sensitivities(solvers, scenario, zone):
    """
    Solve the coupled flow/mesh adjoint of a zone as one linear system at each
    time level and return the summed geometric adjoint
    """
    flow = solvers.flow.zone_data[zone.id]
    mesh = solvers.mesh.zone_data[zone.id]
    nflow = flow.nflow
    ngeom = flow.ngeom

    mat = np.block(
        [
            [np.eye(nflow) - flow.Jac.T, -mesh.Cq.T],
            [-flow.Bx.T, np.eye(ngeom) - mesh.K.T],
        ]
    )

    if scenario.steady:
        dJdq, dJdx = solvers.flow.get_objective_partials(scenario, zone, 0)
        sol = np.linalg.solve(mat, np.concatenate([dJdq, dJdx]))
        return sol[nflow:].reshape(zone.nnodes, zone.ndim)

    w1, w2 = scenario.dual_time_weights
    psi1 = np.zeros(nflow)
    psi2 = np.zeros(nflow)
    sens = np.zeros(ngeom)
    for step in range(scenario.steps, 0, -1):
        dJdq, dJdx = solvers.flow.get_objective_partials(scenario, zone, step)
        rhs = np.concatenate([dJdq + w1 * psi1 + w2 * psi2, dJdx])
        sol = np.linalg.solve(mat, rhs)
        sens += sol[nflow:]
        psi2 = psi1
        psi1 = sol[:nflow]

    return sens.reshape(zone.nnodes, zone.ndim)


class FailingFlowSolver(TestFlowSolver):
    def iterate_adjoint(self, scenario, zones, step):
        super(FailingFlowSolver, self).iterate_adjoint(scenario, zones, step)
        return 1


class BGSDriverTest(unittest.TestCase):
    FILENAME = "bgs-driver.txt"
    FILEPATH = os.path.join(results_folder, FILENAME)

    def _setup(self, scenario, relaxation=None, mesh_theta=1.0, flow_class=None):
        model = DiscAdjModel("coupled")
        Zone("fluid", nnodes=4, ndim=2, nvar=3, initial_adjoint=0.1).register_to(model)
        Zone("wing", nnodes=3, ndim=3, nvar=2).register_to(model)
        scenario.register_to(model)

        if flow_class is None:
            flow_class = TestFlowSolver

        solvers = SolverManager(comm)
        solvers.flow = flow_class(comm, model)
        solvers.mesh = TestMeshSolver(comm, model, theta=mesh_theta)

        driver = DiscAdjBGSDriver(solvers, model=model, relaxation=relaxation)
        return model, solvers, driver

    def _check_sensitivities(self, name, model, solvers, driver):
        scenario = model.scenarios[0]

        fail = driver.solve_adjoint()
        self.assertEqual(fail, 0)

        for record in driver.history:
            self.assertTrue(record["converged"])
        self.assertEqual(len(driver.history), scenario.steps)

        for zone in model.zones:
            truth = monolithic_sensitivities(solvers, scenario, zone)
            result = TestResult(
                f"{name} {zone.name}", truth, zone.get_sensitivities(), comm=comm
            )
            result.report()
            with open(self.FILEPATH, "a") as file_hdl:
                result.write(file_hdl)
            self.assertTrue(abs(result.rel_error) < rtol)
        return

    def test_steady(self):
        scenario = Scenario.steady("cruise", bgs_steps=200, bgs_tolerance=1e-13)
        model, solvers, driver = self._setup(scenario)
        self._check_sensitivities("steady", model, solvers, driver)
        return

    def test_steady_aitken(self):
        scenario = Scenario.steady("cruise", bgs_steps=200, bgs_tolerance=1e-13)
        relaxation = AitkenRelaxation(theta_init=0.5, theta_min=0.25, theta_max=2.0)
        model, solvers, driver = self._setup(scenario, relaxation=relaxation)
        self._check_sensitivities("steady aitken", model, solvers, driver)
        return

    def test_steady_under_relaxation_old_reference(self):
        scenario = Scenario.steady(
            "cruise", bgs_steps=400, bgs_tolerance=1e-13
        ).set_geometry_convergence("old")
        model, solvers, driver = self._setup(
            scenario, relaxation=UnderRelaxation(theta_adjoint=0.8), mesh_theta=0.7
        )
        self._check_sensitivities("steady relaxed", model, solvers, driver)
        return

    def test_unsteady_bdf1(self):
        scenario = Scenario.unsteady(
            "gust", steps=4, bgs_steps=200, bgs_tolerance=1e-13, time_order=1
        )
        model, solvers, driver = self._setup(scenario)
        self._check_sensitivities("unsteady bdf1", model, solvers, driver)
        return

    def test_unsteady_bdf2(self):
        scenario = Scenario.unsteady(
            "gust", steps=5, bgs_steps=200, bgs_tolerance=1e-13, time_order=2
        )
        model, solvers, driver = self._setup(scenario)
        self._check_sensitivities("unsteady bdf2", model, solvers, driver)

        # history is recorded in reverse time order
        self.assertEqual([record["step"] for record in driver.history], [5, 4, 3, 2, 1])
        return

    def test_unsteady_dual_time_chain(self):
        scenario = Scenario.unsteady(
            "gust", steps=3, bgs_steps=200, bgs_tolerance=1e-13, time_order=2
        )
        model, solvers, driver = self._setup(scenario)
        self.assertEqual(driver.solve_adjoint(), 0)

        # after the last (earliest) level the chain holds the adjoints of levels 1 and 2
        for zone in model.zones:
            np.testing.assert_array_equal(
                zone.nodes.get_field("dual_time_derivative"),
                zone.nodes.get_field("solution"),
            )
            self.assertFalse(
                np.allclose(
                    zone.nodes.get_field("dual_time_derivative"),
                    zone.nodes.get_field("dual_time_derivative_n"),
                )
            )
        return

    def test_adjoint_residual(self):
        scenario = Scenario.steady("cruise", bgs_steps=200, bgs_tolerance=1e-13)
        model, solvers, driver = self._setup(scenario)
        fail = driver.solve_adjoint()
        self.assertEqual(fail, 0)

        # both disciplines solve their linear systems directly
        self.assertTrue(solvers.adjoint_residual < 1e-10)
        for record in driver.history:
            self.assertTrue(record["adjoint_resid"] < 1e-10)
        return

    def test_cross_terms_reset_each_level(self):
        scenario = Scenario.steady("cruise")
        model, solvers, driver = self._setup(scenario)
        zones = model.zones
        driver._initialize_adjoint(scenario, zones)

        for zone in zones:
            zone.nodes.set_cross_term_derivative(0, 0, 5.0)
            zone.nodes.set_geometry_cross_term_derivative_flow(0, 0, -3.0)

        driver._set_states(scenario, zones, 0)
        driver._initialize_adjoint_step(scenario, zones, 0)

        for zone in zones:
            nodes = zone.nodes
            np.testing.assert_array_equal(
                nodes.get_field("cross_term_derivative"),
                np.zeros((zone.nnodes, zone.nvar)),
            )
            np.testing.assert_array_equal(
                nodes.get_field("geometry_cross_term_derivative_flow"),
                np.zeros((zone.nnodes, zone.ndim)),
            )
            _, dJdx = solvers.flow.get_objective_partials(scenario, zone, 0)
            np.testing.assert_allclose(
                nodes.get_field("geometry_cross_term_derivative").reshape(-1), dJdx
            )
        return

    def test_fixed_bgs_steps(self):
        scenario = Scenario.steady("cruise", bgs_steps=7).set_stop_criterion(
            early_stopping=False
        )
        model, solvers, driver = self._setup(scenario)
        self.assertEqual(driver.solve_adjoint(), 0)
        self.assertEqual(driver.history[-1]["bgs_steps"], 7)
        self.assertFalse(driver.history[-1]["converged"])
        return

    def test_fail_flag(self):
        scenario = Scenario.steady("cruise", bgs_steps=10)
        model, solvers, driver = self._setup(scenario, flow_class=FailingFlowSolver)
        fail = driver.solve_adjoint()
        self.assertEqual(fail, comm.size)
        self.assertEqual(len(driver.history), 0)
        return

    def test_summary(self):
        scenario = Scenario.steady("cruise")
        model, solvers, driver = self._setup(scenario)
        self.assertTrue(solvers.fully_defined)
        if comm.rank == 0:
            driver.print_summary(print_model=True)
        self.assertIn("DiscAdjBGSDriver", str(driver))
        return

    def test_missing_solver(self):
        model = DiscAdjModel("coupled")
        solvers = SolverManager(comm)
        solvers.flow = TestFlowSolver(comm, model)
        self.assertFalse(solvers.fully_defined)
        with self.assertRaises(AssertionError):
            DiscAdjBGSDriver(solvers, model=model)
        return


if __name__ == "__main__":
    unittest.main()
