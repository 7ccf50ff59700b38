import numpy as np, os
from mpi4py import MPI

from discadj.model import Zone, Scenario, DiscAdjModel

import unittest

comm = MPI.COMM_WORLD
base_dir = os.path.dirname(os.path.abspath(__file__))

results_folder = os.path.join(base_dir, "results")
if comm.rank == 0:  # make the results folder if doesn't exist
    if not os.path.exists(results_folder):
        os.mkdir(results_folder)
comm.Barrier()


class ZoneTest(unittest.TestCase):
    def test_zone_construction(self):
        zone = Zone.two_dim("airfoil", nnodes=4, nvar=3, initial_adjoint=1.0)
        self.assertEqual(zone.ndim, 2)
        self.assertEqual(zone.nodes.nnodes, 4)
        self.assertEqual(zone.nodes.nvar, 3)
        np.testing.assert_array_equal(zone.node_ids, [1, 2, 3, 4])
        np.testing.assert_array_equal(zone.nodes.get_field("solution"), np.ones((4, 3)))

        zone = Zone.three_dim("wing", nnodes=2, nvar=5)
        self.assertEqual(zone.nodes.ndim, 3)
        return

    def test_zone_errors(self):
        with self.assertRaises(ValueError):
            Zone("bad", nnodes=2, ndim=4)
        with self.assertRaises(ValueError):
            Zone("bad", nnodes=2, nvar=0)
        with self.assertRaises(ValueError):
            Zone("bad", nnodes=2, node_ids=[1, 2, 3])
        return

    def test_initialize_adjoint_variables(self):
        zone = Zone("wing", nnodes=3, ndim=3, nvar=2, initial_adjoint=0.5)
        zone.nodes.set_sensitivity(0, 0, 2.0)
        zone.nodes.set_solution(1, 1, 4.0)

        zone.initialize_adjoint_variables()
        np.testing.assert_array_equal(zone.get_sensitivities(), np.zeros((3, 3)))
        self.assertEqual(zone.nodes.get_solution(1, 1), 0.5)
        return


class ScenarioTest(unittest.TestCase):
    def test_steady(self):
        scenario = Scenario.steady("cruise", bgs_steps=50, bgs_tolerance=1e-8)
        self.assertTrue(scenario.steady)
        self.assertEqual(scenario.steps, 1)
        self.assertEqual(scenario.bgs_steps, 50)
        with self.assertRaises(AssertionError):
            scenario.dual_time_weights
        return

    def test_unsteady_weights(self):
        scenario = Scenario.unsteady("gust", steps=10, time_order=1)
        self.assertEqual(scenario.dual_time_weights, (0.25, 0.0))

        scenario.set_time_order(2, dual_time_factor=1.0)
        self.assertEqual(scenario.dual_time_weights, (2.0, -0.5))
        return

    def test_settings_cascade(self):
        model = DiscAdjModel("model")
        scenario = (
            Scenario("cruise")
            .set_stop_criterion(early_stopping=False, bgs_tolerance=1e-6, min_bgs_steps=3)
            .set_geometry_convergence("old")
            .register_to(model)
        )
        self.assertFalse(scenario.early_stopping)
        self.assertEqual(scenario.bgs_tolerance, 1e-6)
        self.assertEqual(scenario.min_bgs_steps, 3)
        self.assertEqual(scenario.geometry_convergence, "old")
        self.assertIs(model.scenarios[0], scenario)
        self.assertEqual(scenario.id, 1)
        return

    def test_configuration_errors(self):
        with self.assertRaises(ValueError):
            Scenario("bad", time_order=3)
        with self.assertRaises(ValueError):
            Scenario("bad", geometry_convergence="newest")
        with self.assertRaises(ValueError):
            Scenario("ok").set_geometry_convergence("newest")
        return


class ModelTest(unittest.TestCase):
    def _build_model(self):
        model = DiscAdjModel("model")
        nnodes = 3
        offset = comm.rank * nnodes
        Zone(
            "fluid", nnodes=nnodes, ndim=2, nvar=2, node_ids=offset + np.arange(1, 4)
        ).register_to(model)
        Zone(
            "solid", nnodes=nnodes, ndim=3, nvar=1, node_ids=offset + np.arange(1, 4)
        ).register_to(model)
        Scenario.steady("cruise").register_to(model)
        return model

    def test_zone_ids(self):
        model = self._build_model()
        self.assertEqual([zone.id for zone in model.zones], [1, 2])

        zone = Zone("extra", nnodes=1, id=2)
        model.add_zone(zone)
        self.assertEqual(zone.id, 3)

        self.assertIs(model.get_zone("solid"), model.zones[1])
        with self.assertRaises(AssertionError):
            model.get_zone("missing")
        return

    def test_sensitivity_file(self):
        model = self._build_model()
        fluid = model.get_zone("fluid")
        for node in range(fluid.nnodes):
            for dim in range(fluid.ndim):
                fluid.nodes.set_sensitivity(node, dim, 10.0 * node + dim + comm.rank)

        filename = os.path.join(results_folder, "model.sens")
        model.write_sensitivity_file(comm, filename)

        if comm.rank == 0:
            with open(filename, "r") as fp:
                lines = fp.read().splitlines()

            nnodes = 3 * comm.size
            self.assertEqual(lines[0], "2")
            self.assertEqual(lines[1], "fluid")
            self.assertEqual(int(lines[2]), nnodes)

            for i in range(nnodes):
                rank, node = divmod(i, 3)
                entries = lines[3 + i].split()
                self.assertEqual(int(entries[0]), i + 1)
                self.assertEqual(len(entries), 3)
                for dim in range(2):
                    self.assertEqual(float(entries[1 + dim]), 10.0 * node + dim + rank)

            solid_start = 3 + nnodes
            self.assertEqual(lines[solid_start], "solid")
            self.assertEqual(int(lines[solid_start + 1]), nnodes)
            self.assertEqual(len(lines[solid_start + 2].split()), 4)
            self.assertEqual(len(lines), solid_start + 2 + nnodes)
        return

    def test_summary(self):
        model = self._build_model()
        if comm.rank == 0:
            model.print_summary(print_level=1)
        model.print_memory_size(comm, starting_message="Test")
        self.assertIn("Number of zones: 2", str(model))
        return


if __name__ == "__main__":
    unittest.main()
