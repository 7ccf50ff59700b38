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

from __future__ import annotations

__all__ = ["DiscAdjDriver"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..interface.solver_manager import SolverManager
    from ..model.discadj_model import DiscAdjModel


class DiscAdjDriver(object):
    """
    The DISCADJ driver base class has all of the driver except for the coupling algorithms
    """

    def __init__(
        self,
        solvers: SolverManager,
        model: DiscAdjModel,
        debug=False,
    ):
        """
        Parameters
        ----------
        solvers: SolverManager
           the flow and mesh adjoint disciplines
        model: :class:`~discadj_model.DiscAdjModel`
            The model containing the zones and scenarios
        debug: bool
            whether to print the residuals of every coupling iteration
        """

        if not solvers.fully_defined:
            raise AssertionError("DISCADJ driver: the solver manager is missing a discipline")

        # communicator
        self.comm = solvers.comm

        # debug flag
        self._debug = debug
        if self.comm.rank != 0:
            self._debug = False

        # SolverManager class
        self.solvers = solvers
        self.model = model

        return

    def solve_adjoint(self):
        """
        Solves the coupled adjoint problem of each scenario and computes the
        sensitivities w.r.t. the coordinates. The sensitivities left in each zone
        are those of the last scenario solved.

        Returns
        -------
        fail: int
            fail flag, zero on success
        """

        fail = 0

        for scenario in self.model.scenarios:
            # Initialize the adjoint node state and the adjoint solvers
            fail = self._initialize_adjoint(scenario, self.model.zones)
            if fail != 0:
                if self.comm.rank == 0:
                    print("Fail flag return during adjoint initialization", flush=True)
                return fail

            if scenario.steady:
                fail = self._solve_steady_adjoint(scenario)
                if fail != 0:
                    return fail
            else:
                fail = self._solve_unsteady_adjoint(scenario)
                if fail != 0:
                    return fail

            # Perform any operations after the adjoint solve
            self._post_adjoint(scenario, self.model.zones)

        return fail

    def _initialize_adjoint(self, scenario, zones):
        """
        Initialize the node state and solver data for an adjoint solve
        """
        for zone in zones:
            zone.initialize_adjoint_variables(scenario)

        for solver in self.solvers.solver_list:
            fail = self.comm.allreduce(solver.initialize_adjoint(scenario, zones))
            if fail != 0:
                return fail

        return 0

    def _post_adjoint(self, scenario, zones):
        for solver in self.solvers.solver_list:
            solver.post_adjoint(scenario, zones)

    def _set_states(self, scenario, zones, step):
        for solver in self.solvers.solver_list:
            solver.set_states(scenario, zones, step)

    def _initialize_adjoint_step(self, scenario, zones, step):
        # cross terms are rebuilt from zero at every time level
        for zone in zones:
            zone.nodes.cross_terms.reset()

        for solver in self.solvers.solver_list:
            solver.initialize_adjoint_step(scenario, zones, step)

    def _extract_coordinate_derivatives(self, scenario, zones, step):
        # get the contributions from the solvers
        for solver in self.solvers.solver_list:
            solver.get_coordinate_derivatives(scenario, zones, step)

        return

    def _finalize_time_level(self, scenario, zones, step):
        for solver in self.solvers.solver_list:
            solver.finalize_time_level(scenario, zones, step)

    def _solve_steady_adjoint(self, scenario):
        return 1

    def _solve_unsteady_adjoint(self, scenario):
        return 1

    def print_summary(self, print_model=False):
        """
        Print out a summary of the DISCADJ driver for inspection.
        """

        print("==========================================================")
        print("||                DISCADJ Driver Summary                ||")
        print("==========================================================")
        print(self)
        print(self.solvers)

        if print_model:
            print(
                "\nPrinting abbreviated model summary. For details print model summary directly."
            )
            self.model.print_summary(print_level=0)

        return

    def __str__(self):
        line1 = f"Driver (<Type>): {self.__class__.__qualname__}"
        line2 = f"  Model: {self.model.name}"
        line3 = f"  Number of scenarios: {len(self.model.scenarios)}"

        output = (line1, line2, line3)

        return "\n".join(output)
