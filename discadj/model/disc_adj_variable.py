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

__all__ = ["DiscAdjVariable"]

import numpy as np
from ._base import NodeStateStore
from .node_variable import NodeVariable
from .direct_state import DirectStateCache
from .dual_time import DualTimeDerivativeChain
from .cross_terms import CrossTermLedger
from .coupling_tracker import CouplingSubiterationTracker
from .sensitivity import SensitivityAccumulator


class DiscAdjVariable(NodeStateStore):
    """
    Node state of the discrete adjoint solver for one zone or partition.

    The adjoint solution is the solution of the shared :class:`NodeVariable`
    fields. The adjoint specific fields are held by separate components that
    are composed on top of it:

    direct
        :class:`DirectStateCache`, the primal state the adjoint is linearized about
    dual_time
        :class:`DualTimeDerivativeChain`, the adjoint unsteady term
    cross_terms
        :class:`CrossTermLedger`, contributions from other disciplines
    coupling
        :class:`CouplingSubiterationTracker`, BGS and old snapshots and the
        geometric adjoint solution
    sensitivity
        :class:`SensitivityAccumulator`, the output

    Every field can also be reached by name through the
    :class:`NodeStateStore` methods, see :func:`field_names`.
    """

    def __init__(self, initial_adjoint, nnodes, ndim, nvar, dtype=float):
        """
        Parameters
        ----------
        initial_adjoint: float or sequence of float
            initial value of the adjoint solution, broadcast to every node
        nnodes: int
            number of nodes N
        ndim: int
            number of spatial dimensions D
        nvar: int
            number of solver variables V
        dtype:
            numpy data type of all the stored values. Use complex for complex-step
            verification of the adjoint.
        """

        super(DiscAdjVariable, self).__init__(nnodes, ndim=ndim, nvar=nvar)

        self.dtype = np.dtype(dtype)

        self.base = NodeVariable(initial_adjoint, self.nnodes, self.nvar, dtype=dtype)
        self.direct = DirectStateCache(self.nnodes, self.ndim, self.nvar, dtype=dtype)
        self.dual_time = DualTimeDerivativeChain(self.nnodes, self.nvar, dtype=dtype)
        self.cross_terms = CrossTermLedger(
            self.nnodes, self.ndim, self.nvar, dtype=dtype
        )
        self.coupling = CouplingSubiterationTracker(
            self.base.solution, self.nnodes, self.ndim, dtype=dtype
        )
        self.sensitivity = SensitivityAccumulator(self.nnodes, self.ndim, dtype=dtype)

        for component in (
            self.base,
            self.direct,
            self.dual_time,
            self.cross_terms,
            self.coupling,
            self.sensitivity,
        ):
            self.include(component)

        return

    # adjoint solution
    # ----------------

    def get_solution(self, node, var=None):
        return self.base.get_solution(node, var)

    def set_solution(self, node, var, value):
        self.base.set_solution(node, var, value)
        return

    def set_solution_vector(self, node, values):
        self.base.set_solution_vector(node, values)
        return

    def set_old_solution(self, node=None):
        self.base.set_old_solution(node)
        return

    def get_solution_old(self, node, var=None):
        return self.base.get_solution_old(node, var)

    def restore_solution(self, node=None):
        self.base.restore_solution(node)
        return

    # primal state
    # ------------

    def set_solution_direct(self, node, values):
        self.direct.set_solution_direct(node, values)
        return

    def get_solution_direct(self, node):
        return self.direct.get_solution_direct(node)

    def set_geometry_direct(self, node, coords):
        self.direct.set_geometry_direct(node, coords)
        return

    def get_geometry_direct(self, node, dim=None):
        return self.direct.get_geometry_direct(node, dim)

    # dual time derivative
    # --------------------

    def set_dual_time_derivative(self, node, var, der):
        self.dual_time.set_dual_time_derivative(node, var, der)
        return

    def get_dual_time_derivative(self, node, var):
        return self.dual_time.get_dual_time_derivative(node, var)

    def set_dual_time_derivative_n(self, node, var, der):
        self.dual_time.set_dual_time_derivative_n(node, var, der)
        return

    def get_dual_time_derivative_n(self, node, var):
        return self.dual_time.get_dual_time_derivative_n(node, var)

    def advance_dual_time(self, node=None):
        self.dual_time.advance(node)
        return

    # cross terms
    # -----------

    def set_cross_term_derivative(self, node, var, der):
        self.cross_terms.set_cross_term_derivative(node, var, der)
        return

    def get_cross_term_derivative(self, node, var):
        return self.cross_terms.get_cross_term_derivative(node, var)

    def set_geometry_cross_term_derivative(self, node, dim, der):
        self.cross_terms.set_geometry_cross_term_derivative(node, dim, der)
        return

    def get_geometry_cross_term_derivative(self, node, dim):
        return self.cross_terms.get_geometry_cross_term_derivative(node, dim)

    def set_geometry_cross_term_derivative_flow(self, node, dim, der):
        self.cross_terms.set_geometry_cross_term_derivative_flow(node, dim, der)
        return

    def get_geometry_cross_term_derivative_flow(self, node, dim):
        return self.cross_terms.get_geometry_cross_term_derivative_flow(node, dim)

    # coupling subiterations and geometric adjoint
    # --------------------------------------------

    def get_solution_geometry(self, node, dim=None):
        return self.coupling.get_solution_geometry(node, dim)

    def set_solution_geometry(self, node, dim, value):
        self.coupling.set_solution_geometry(node, dim, value)
        return

    def set_solution_geometry_vector(self, node, values):
        self.coupling.set_solution_geometry_vector(node, values)
        return

    def snapshot_bgs(self, node=None):
        self.coupling.snapshot_bgs(node)
        return

    def snapshot_geometry_bgs(self, node=None):
        self.coupling.snapshot_geometry_bgs(node)
        return

    def snapshot_old_geometry(self, node=None):
        self.coupling.snapshot_old_geometry(node)
        return

    def get_bgs_solution_k(self, node, var):
        return self.coupling.get_bgs_solution_k(node, var)

    def get_bgs_solution_geometry(self, node, dim):
        return self.coupling.get_bgs_solution_geometry(node, dim)

    def get_old_solution_geometry(self, node, dim):
        return self.coupling.get_old_solution_geometry(node, dim)

    # sensitivity
    # -----------

    def set_sensitivity(self, node, dim, val):
        self.sensitivity.set_sensitivity(node, dim, val)
        return

    def get_sensitivity(self, node, dim):
        return self.sensitivity.get_sensitivity(node, dim)

    def get_sensitivity_vector(self, node):
        return self.sensitivity.get_sensitivity_vector(node)

    def __str__(self):
        line1 = f"DiscAdjVariable (<N> <D> <V>): {self.nnodes} {self.ndim} {self.nvar}"
        line2 = f"    Fields: {', '.join(self.field_names())}"
        line3 = f"    Memory (bytes): {self.memory_size()}"

        output = (line1, line2, line3)

        return "\n".join(output)
