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

__all__ = ["DisciplineInterface"]


class DisciplineInterface(object):
    """
    A base class to define what functions discipline interfaces in DISCADJ need.

    A discipline is one of the coupled adjoint solvers, usually the flow
    adjoint or the mesh (geometric) adjoint. Disciplines only communicate
    through the node state of each zone, ``zone.nodes``, which is a
    :class:`~disc_adj_variable.DiscAdjVariable`.
    """

    def __init__(self, *args, **kwargs):
        """
        The constructor can be used flexibly for discipline specific activities
        (e.g. solver instantiation, reading the mesh, allocating solver data).
        Disciplines that run in the BGS loop should set ``adjoint_tolerance``.
        """
        self.adjoint_tolerance = 1e-10

    def initialize_adjoint(self, scenario, zones):
        """
        Set up anything that is necessary for the adjoint solve of a scenario.
        Called after the node state of each zone has been allocated.

        Parameters
        ----------
        scenario: :class:`~scenario.Scenario`
            The current scenario
        zones: list of :class:`~zone.Zone` objects
            The zones in the model

        Returns
        -------
        fail: int
            zero on success
        """
        return 0

    def set_states(self, scenario, zones, step):
        """
        Load the converged primal state of a time level into the node state.

        The primal solver owning the state writes the direct solution and the
        direct geometry once per time level, before the adjoint subiterations
        of that level start.

        Parameters
        ----------
        scenario: :class:`~scenario.Scenario`
            The current scenario
        zones: list of :class:`~zone.Zone` objects
            The zones in the model
        step: int
            The time level, 0 for steady problems

        Examples
        --------
        Flow Solver:

        .. code-block:: python

            for zone in zones:
                q, x = solver.read_primal_state(zone.id, step)
                for node in range(zone.nnodes):
                    zone.nodes.set_solution_direct(node, q[node, :])
                    zone.nodes.set_geometry_direct(node, x[node, :])
        """
        pass

    def initialize_adjoint_step(self, scenario, zones, step):
        """
        Set the terms of the adjoint equations that are fixed during the coupling
        iterations of a time level, such as the explicit dependence of the objective
        on the mesh coordinates.

        Parameters
        ----------
        scenario: :class:`~scenario.Scenario`
            The current scenario
        zones: list of :class:`~zone.Zone` objects
            The zones in the model
        step: int
            The time level
        """
        pass

    def transfer_cross_terms(self, scenario, zones):
        """
        Write the contribution of this discipline's current adjoint into the
        cross terms read by the other discipline. Cross terms are replaced, not
        added to, on every call.

        Parameters
        ----------
        scenario: :class:`~scenario.Scenario`
            The current scenario
        zones: list of :class:`~zone.Zone` objects
            The zones in the model

        Examples
        --------
        Mesh Solver:

        .. code-block:: python

            for zone in zones:
                lam = zone.nodes.get_field("solution_geometry")
                zone.nodes.set_field("cross_term_derivative", solver.mesh_to_flow(lam))
        """
        pass

    def iterate_adjoint(self, scenario, zones, step):
        """
        Take one update of this discipline's adjoint, holding the cross terms
        from the other disciplines fixed, and write the new adjoint solution
        into the node state.

        Parameters
        ----------
        scenario: :class:`~scenario.Scenario`
            The current scenario
        zones: list of :class:`~zone.Zone` objects
            The zones in the model
        step: int
            The time level

        Returns
        -------
        fail: int
            zero on success
        """
        return 0

    def get_coordinate_derivatives(self, scenario, zones, step):
        """
        Add the discipline's contribution to the sensitivities once the coupling
        iterations of a time level have converged. For unsteady problems this is
        called once per time level during reverse time marching, and the
        contributions are accumulated with a read-modify-write of the sensitivity.

        Parameters
        ----------
        scenario: :class:`~scenario.Scenario`
            The current scenario
        zones: list of :class:`~zone.Zone` objects
            The zones in the model
        step: int
            The time level
        """
        pass

    def finalize_time_level(self, scenario, zones, step):
        """
        Close a time level of an unsteady adjoint. A discipline with an unsteady
        term advances the dual time chain here and then writes its new unsteady term.

        Parameters
        ----------
        scenario: :class:`~scenario.Scenario`
            The current scenario
        zones: list of :class:`~zone.Zone` objects
            The zones in the model
        step: int
            The time level that was just solved
        """
        pass

    def get_adjoint_residual(self):
        """
        Return the residual of the last adjoint update of this discipline, 0.0
        if the discipline solves its equations exactly
        """
        return 0.0

    def post_adjoint(self, scenario, zones):
        """
        Perform any tasks the solver needs to do after the adjoint solve of a scenario
        """
        pass
