#!/usr/bin/env python
"""
This file is part of the package DISCADJ for discrete adjoint coupled simulation
and design optimization.

Copyright (C) 2015 Georgia Tech Research Corporation.
Additional copyright (C) 2015 Kevin Jacobson, Jan Kiviaho and Graeme Kennedy.
All rights reserved.

DISCADJ is licensed under the Apache License, Version 2.0 (the "License");
you may not use this software except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

__all__ = ["TestMeshSolver"]

import numpy as np
from .._discipline_interface import DisciplineInterface


class TestMeshSolver(DisciplineInterface):
    def __init__(self, comm, model, seed=1, theta=1.0):
        """
        This class provides the functionality that DISCADJ expects from
        a mesh (geometric) adjoint discipline.

        The geometric adjoint lam of each zone satisfies

        lam = dM/dx^{T} * lam + geometry_cross_term_derivative
                              + geometry_cross_term_derivative_flow

        where the two cross terms are the explicit dependence of the objective on the
        coordinates and the flow adjoint contribution written by the flow discipline.
        For this test solver, the mesh residual Jacobians are random

        dM/dx = K,  dM/dq = Cq

        and the contribution of the geometric adjoint to the flow adjoint is

        cross_term_derivative = Cq^{T} * lam

        Each update solves the equation exactly and then relaxes the result against the
        geometric adjoint before the update, held in solution_geometry_old. The
        sensitivity of the objective w.r.t. the coordinates is the geometric adjoint,
        summed over the time levels of an unsteady scenario.

        Parameters
        ----------
        comm: MPI.comm
            MPI communicator
        model: :class:`~discadj_model.DiscAdjModel`
            The model containing the zones, which must be added before the solver is built
        seed: int
            seed of the random operators
        theta: float
            relaxation factor of the geometric adjoint update
        """

        self.comm = comm
        self.model = model
        self.theta = theta
        np.random.seed(seed)

        super().__init__()

        class ZoneData:
            def __init__(self, nflow, ngeom):
                self.nflow = nflow
                self.ngeom = ngeom

                # mesh residual Jacobians w.r.t. the coordinates and the flow state
                self.K = 0.1 * (np.random.rand(ngeom, ngeom) - 0.5)
                self.Cq = 0.1 * (np.random.rand(ngeom, nflow) - 0.5)

        self.zone_data = {}
        for zone in model.zones:
            self.zone_data[zone.id] = ZoneData(
                zone.nnodes * zone.nvar, zone.nnodes * zone.ndim
            )

        self._adjoint_residual = 0.0

        return

    def initialize_adjoint(self, scenario, zones):
        """Note that this function must return a fail flag of zero on success"""
        self._adjoint_residual = 0.0
        return 0

    def transfer_cross_terms(self, scenario, zones):
        for zone in zones:
            data = self.zone_data[zone.id]
            lam = zone.nodes.get_field("solution_geometry").reshape(-1)
            zone.nodes.set_field(
                "cross_term_derivative",
                np.dot(data.Cq.T, lam).reshape(zone.nnodes, zone.nvar),
            )
        return

    def iterate_adjoint(self, scenario, zones, step):
        """
        Iterate for the geometric adjoint

        Parameters
        ----------
        scenario: :class:`~scenario.Scenario`
            The current scenario
        zones: list of :class:`~zone.Zone` objects
            The zones in the model
        step: integer
            The time level
        """

        resid = 0.0
        for zone in zones:
            data = self.zone_data[zone.id]
            zone.nodes.snapshot_old_geometry()

            rhs = zone.nodes.get_field("geometry_cross_term_derivative").reshape(-1)
            rhs = rhs + zone.nodes.get_field(
                "geometry_cross_term_derivative_flow"
            ).reshape(-1)

            mat = np.eye(data.ngeom) - data.K.T
            lam_old = zone.nodes.get_field("solution_geometry_old").reshape(-1)
            lam = lam_old + self.theta * (np.linalg.solve(mat, rhs) - lam_old)
            zone.nodes.set_field(
                "solution_geometry", lam.reshape(zone.nnodes, zone.ndim)
            )

            resid += np.linalg.norm(np.dot(mat, lam) - rhs) ** 2

        self._adjoint_residual = np.sqrt(self.comm.allreduce(resid))

        # This analysis is always successful so return fail = 0
        fail = 0
        return fail

    def get_coordinate_derivatives(self, scenario, zones, step):
        """
        Add the contributions to the gradient w.r.t. the coordinates
        """
        for zone in zones:
            for node in range(zone.nnodes):
                for dim in range(zone.ndim):
                    value = zone.nodes.get_solution_geometry(node, dim)
                    if not scenario.steady:
                        value += zone.nodes.get_sensitivity(node, dim)
                    zone.nodes.set_sensitivity(node, dim, value)
        return

    def get_adjoint_residual(self):
        return self._adjoint_residual

    def post_adjoint(self, scenario, zones):
        pass
