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

__all__ = ["TestFlowSolver"]

import numpy as np
from .._discipline_interface import DisciplineInterface


class TestFlowSolver(DisciplineInterface):
    def __init__(self, comm, model, seed=0):
        """
        This class provides the functionality that DISCADJ expects from
        a flow adjoint discipline.

        Adjoint analysis
        ----------------

        The flow adjoint psi of each zone satisfies the fixed point equation

        psi = dR/dq^{T} * psi + dJ/dq^{T} + cross_term + dual_time_term

        where cross_term is the contribution of the mesh adjoint, written into the
        cross_term_derivative field by the mesh discipline, and dual_time_term is
        the adjoint unsteady term built from the flow adjoint at the two later
        time levels

        dual_time_term = w1 * dual_time_derivative + w2 * dual_time_derivative_n

        with the weights (w1, w2) of the scenario's backward difference.

        For this test solver, we substitute artificial relationships that are randomly
        generated. These relationships have no physical significance, but reflect the
        dependence between variables in a true solver. The flow residual Jacobians are

        dR/dq = Jac,  dR/dx = Bx

        and the objective is J = sum_n ( 0.5 * q^n . (func_coefs_q * q^n)
                                        + 0.5 * x^n . (func_coefs_x * x^n) )

        so that dJ/dq = func_coefs_q * q and dJ/dx = func_coefs_x * x at each time level.
        The flow adjoint is solved exactly on every call to iterate_adjoint, and the
        contribution of the flow adjoint to the geometric adjoint is

        geometry_cross_term_derivative_flow = Bx^{T} * psi

        Parameters
        ----------
        comm: MPI.comm
            MPI communicator
        model: :class:`~discadj_model.DiscAdjModel`
            The model containing the zones, which must be added before the solver is built
        seed: int
            seed of the random operators
        """

        self.comm = comm
        self.model = model
        np.random.seed(seed)

        # setup adjoint tolerance
        super().__init__()

        # define data owned by each zone
        class ZoneData:
            def __init__(self, nflow, ngeom):
                self.nflow = nflow
                self.ngeom = ngeom

                # choose random flow time step
                self.dt = 0.01

                # flow residual Jacobians w.r.t. the flow state and the coordinates
                self.Jac = 0.1 * (np.random.rand(nflow, nflow) - 0.5)
                self.Bx = 0.1 * (np.random.rand(nflow, ngeom) - 0.5)

                # primal state = state0 + omega * (dt * step)
                self.q0 = np.random.rand(nflow)
                self.x0 = np.random.rand(ngeom)
                rate = 0.1
                self.omega_q = rate * (np.random.rand(nflow) - 0.5)
                self.omega_x = rate * (np.random.rand(ngeom) - 0.5)

                # Data for generating the objective
                self.func_coefs_q = np.random.rand(nflow)
                self.func_coefs_x = np.random.rand(ngeom)

        self.zone_data = {}
        for zone in model.zones:
            self.zone_data[zone.id] = ZoneData(
                zone.nnodes * zone.nvar, zone.nnodes * zone.ndim
            )

        self._adjoint_residual = 0.0

        return

    def get_primal_state(self, scenario, zone, step):
        """
        Get the flattened primal flow state and coordinates of a zone at a time level
        """
        data = self.zone_data[zone.id]
        q = data.q0.copy()
        x = data.x0.copy()
        if not scenario.steady:
            time = step * data.dt
            q += data.omega_q * time
            x += data.omega_x * time
        return q, x

    def get_objective_partials(self, scenario, zone, step):
        """
        Get the flattened partial derivatives dJ/dq and dJ/dx of a zone at a time level
        """
        data = self.zone_data[zone.id]
        q, x = self.get_primal_state(scenario, zone, step)
        return data.func_coefs_q * q, data.func_coefs_x * x

    def initialize_adjoint(self, scenario, zones):
        """Note that this function must return a fail flag of zero on success"""
        self._adjoint_residual = 0.0
        return 0

    def set_states(self, scenario, zones, step):
        for zone in zones:
            q, x = self.get_primal_state(scenario, zone, step)
            q = q.reshape(zone.nnodes, zone.nvar)
            x = x.reshape(zone.nnodes, zone.ndim)
            for node in range(zone.nnodes):
                zone.nodes.set_solution_direct(node, q[node, :])
                zone.nodes.set_geometry_direct(node, x[node, :])
        return

    def initialize_adjoint_step(self, scenario, zones, step):
        """
        Write the explicit dependence of the objective on the coordinates, which is
        fixed during the coupling iterations of the time level
        """
        for zone in zones:
            data = self.zone_data[zone.id]
            x = zone.nodes.get_field("geometry_direct").reshape(-1)
            dJdx = data.func_coefs_x * x
            zone.nodes.set_field(
                "geometry_cross_term_derivative", dJdx.reshape(zone.nnodes, zone.ndim)
            )
        return

    def iterate_adjoint(self, scenario, zones, step):
        """
        Iterate for the flow adjoint

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

            q = zone.nodes.get_field("solution_direct").reshape(-1)
            rhs = data.func_coefs_q * q
            rhs += zone.nodes.get_field("cross_term_derivative").reshape(-1)

            if not scenario.steady:
                w1, w2 = scenario.dual_time_weights
                rhs += w1 * zone.nodes.get_field("dual_time_derivative").reshape(-1)
                rhs += w2 * zone.nodes.get_field("dual_time_derivative_n").reshape(-1)

            mat = np.eye(data.nflow) - data.Jac.T
            psi = np.linalg.solve(mat, rhs)
            zone.nodes.set_field("solution", psi.reshape(zone.nnodes, zone.nvar))

            resid += np.linalg.norm(np.dot(mat, psi) - rhs) ** 2

        self._adjoint_residual = np.sqrt(self.comm.allreduce(resid))

        # This analysis is always successful so return fail = 0
        fail = 0
        return fail

    def transfer_cross_terms(self, scenario, zones):
        for zone in zones:
            data = self.zone_data[zone.id]
            psi = zone.nodes.get_field("solution").reshape(-1)
            zone.nodes.set_field(
                "geometry_cross_term_derivative_flow",
                np.dot(data.Bx.T, psi).reshape(zone.nnodes, zone.ndim),
            )
        return

    def finalize_time_level(self, scenario, zones, step):
        """
        Shift the dual time chain and store the converged flow adjoint of this
        level as the unsteady term of the next (earlier) level
        """
        if scenario.steady:
            return

        for zone in zones:
            zone.nodes.advance_dual_time()
            for node in range(zone.nnodes):
                for var in range(zone.nvar):
                    zone.nodes.set_dual_time_derivative(
                        node, var, zone.nodes.get_solution(node, var)
                    )
        return

    def get_adjoint_residual(self):
        return self._adjoint_residual

    def post_adjoint(self, scenario, zones):
        pass
