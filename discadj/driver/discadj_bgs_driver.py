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

__all__ = ["DiscAdjBGSDriver"]

from ._discadj_driver import DiscAdjDriver
from ..interface.utils.general_utils import field_change_norm


class DiscAdjBGSDriver(DiscAdjDriver):
    def __init__(
        self,
        solvers,
        model,
        relaxation=None,
        debug=False,
    ):
        """
        The DISCADJ driver for the Block Gauss-Seidel solution of the steady and
        unsteady coupled flow/mesh adjoint.

        Each outer iteration snapshots the adjoint solutions of every zone, updates
        the flow adjoint with the cross term of the mesh adjoint, then updates the mesh
        adjoint with the cross term of the new flow adjoint. The iterations of a time
        level stop once the change of both adjoint solutions is within the scenario's
        tolerance.

        Parameters
        ----------
        solvers: SolverManager
           the flow and mesh adjoint disciplines
        model: :class:`~discadj_model.DiscAdjModel`
            The model containing the zones and scenarios
        relaxation: AitkenRelaxation or UnderRelaxation
            relaxation of the flow adjoint update, none by default
        debug: bool
            whether to print the residuals of every coupling iteration
        """

        super(DiscAdjBGSDriver, self).__init__(solvers, model=model, debug=debug)

        self.relaxation = relaxation

        # convergence record of each time level solved
        self.history = []

        return

    def _solve_steady_adjoint(self, scenario):
        """
        Solve the coupled adjoint of a steady scenario with the block Gauss-Seidel algorithm.

        Parameters
        ----------
        scenario: :class:`~scenario.Scenario`
            The current scenario
        """

        assert scenario.steady
        zones = self.model.zones

        # Load the converged primal state
        self._set_states(scenario, zones, 0)
        self._initialize_adjoint_step(scenario, zones, 0)

        fail = self._solve_bgs(scenario, zones, 0)
        if fail != 0:
            return fail

        self._extract_coordinate_derivatives(scenario, zones, 0)
        return 0

    def _solve_unsteady_adjoint(self, scenario):
        """
        Solves the unsteady coupled adjoint by reverse time marching, with block
        Gauss-Seidel iterations at each time level

        Parameters
        ----------
        scenario: :class:`~scenario.Scenario`
            the current scenario

        Returns
        -------
        fail: int
            fail flag
        """

        assert not scenario.steady
        zones = self.model.zones

        # how many steps to take
        steps = scenario.steps

        # Loop over each time step in the reverse order
        for rstep in range(1, steps + 1):
            step = steps - rstep + 1

            self._set_states(scenario, zones, step)
            self._initialize_adjoint_step(scenario, zones, step)

            fail = self._solve_bgs(scenario, zones, step)
            if fail != 0:
                return fail

            # extract and accumulate coordinate derivative every step
            self._extract_coordinate_derivatives(scenario, zones, step)

            # the dual time chain is advanced before the next (earlier) level
            self._finalize_time_level(scenario, zones, step)

        return 0

    def _solve_bgs(self, scenario, zones, step):
        """
        Run the block Gauss-Seidel outer iterations of one time level

        Returns
        -------
        fail: int
            fail flag
        """

        if self.relaxation is not None:
            self.relaxation.reset(zones)

        if scenario.geometry_convergence == "bgs":
            geometry_reference = "solution_geometry_bgs_k"
        else:
            geometry_reference = "solution_geometry_old"

        converged = False
        flow_resid = geometry_resid = adjoint_resid = 0.0
        bgs_step = 0
        for bgs_step in range(1, scenario.bgs_steps + 1):
            # record the start of the outer iteration
            for zone in zones:
                zone.nodes.snapshot_bgs()
                zone.nodes.snapshot_geometry_bgs()

            # Get the mesh adjoint contribution to the flow adjoint
            self.solvers.mesh.transfer_cross_terms(scenario, zones)

            # Iterate over the flow adjoint
            fail = self.solvers.flow.iterate_adjoint(scenario, zones, step)

            fail = self.comm.allreduce(fail)
            if fail != 0:
                if self.comm.rank == 0:
                    print("Flow solver returned fail flag", flush=True)
                return fail

            flow_resid = field_change_norm(self.comm, zones, "solution", "solution_bgs_k")
            self._relax_flow_adjoint(zones)

            # Get the flow adjoint contribution to the mesh adjoint
            self.solvers.flow.transfer_cross_terms(scenario, zones)

            # take a step in the mesh adjoint
            fail = self.solvers.mesh.iterate_adjoint(scenario, zones, step)

            fail = self.comm.allreduce(fail)
            if fail != 0:
                if self.comm.rank == 0:
                    print("Mesh solver returned fail flag", flush=True)
                return fail

            geometry_resid = field_change_norm(
                self.comm, zones, "solution_geometry", geometry_reference
            )

            # residual of the last update reported by the disciplines themselves
            adjoint_resid = self.solvers.adjoint_residual

            if self._debug:
                print(
                    f"DISCADJ scenario {scenario.name}, step {step}, bgs step {bgs_step}, "
                    + f"flow resid = {flow_resid}, geometry resid = {geometry_resid}, "
                    + f"adjoint resid = {adjoint_resid}",
                    flush=True,
                )

            # check for early stopping criterion, exit if meets criterion
            if (
                scenario.early_stopping
                and bgs_step >= scenario.min_bgs_steps
                and max(flow_resid, geometry_resid) <= scenario.bgs_tolerance
            ):
                converged = True
                if self.comm.rank == 0:
                    print(
                        f"DISCADJ adjoint of scenario {scenario.name}, step {step}",
                        flush=True,
                    )
                    print(
                        f"\texited early at bgs step {bgs_step} with resid "
                        + f"{max(flow_resid, geometry_resid)} < {scenario.bgs_tolerance}",
                        flush=True,
                    )
                break

        if scenario.early_stopping and not converged and self.comm.rank == 0:
            print(
                f"Warning: DISCADJ adjoint of scenario {scenario.name}, step {step} "
                + f"did not converge in {scenario.bgs_steps} bgs steps",
                flush=True,
            )

        self.history.append(
            {
                "scenario": scenario.name,
                "step": step,
                "bgs_steps": bgs_step,
                "flow_resid": flow_resid,
                "geometry_resid": geometry_resid,
                "adjoint_resid": adjoint_resid,
                "converged": converged,
            }
        )

        return 0

    def _relax_flow_adjoint(self, zones):
        """
        Relax the flow adjoint update of the outer iteration against the
        solution at the start of the iteration
        """
        if self.relaxation is None:
            return

        for zone in zones:
            psi_k = zone.nodes.get_field("solution_bgs_k")
            update = zone.nodes.get_field("solution") - psi_k
            zone.nodes.set_field(
                "solution", psi_k + self.relaxation.relax(self.comm, zone, update)
            )

        return

    def __str__(self):
        line1 = super(DiscAdjBGSDriver, self).__str__()
        line2 = f"  Relaxation: {self.relaxation.__class__.__qualname__ if self.relaxation is not None else None}"

        output = (line1, line2)

        return "\n".join(output)
