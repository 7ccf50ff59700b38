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

__all__ = ["CrossTermLedger"]

from ._base import NodeStateStore
from .node_array import NodeArray


class CrossTermLedger(NodeStateStore):
    """
    Derivative contributions injected from the adjoint of another discipline.

    cross_term_derivative
        contribution into this node's solver variables (nvar components)
    geometry_cross_term_derivative
        contribution into the mesh adjoint from any other discipline (ndim components)
    geometry_cross_term_derivative_flow
        contribution into the mesh adjoint from the flow adjoint (ndim components)

    Every set replaces the stored value. A kernel that adds to an existing
    contribution has to read, add, and write it back itself, so a coupling
    iteration can always rebuild a cross term from zero.
    """

    def __init__(self, nnodes, ndim, nvar, dtype=float):
        super(CrossTermLedger, self).__init__(nnodes, ndim=ndim, nvar=nvar)

        self.cross_term = NodeArray(
            "cross_term_derivative", self.nnodes, self.nvar, dtype=dtype
        )
        self.geometry_cross_term = NodeArray(
            "geometry_cross_term_derivative", self.nnodes, self.ndim, dtype=dtype
        )
        self.geometry_cross_term_flow = NodeArray(
            "geometry_cross_term_derivative_flow", self.nnodes, self.ndim, dtype=dtype
        )

        self._register_field("cross_term_derivative", self.cross_term)
        self._register_field("geometry_cross_term_derivative", self.geometry_cross_term)
        self._register_field(
            "geometry_cross_term_derivative_flow", self.geometry_cross_term_flow
        )

        return

    def set_cross_term_derivative(self, node, var, der):
        self.cross_term.set(node, var, der)
        return

    def get_cross_term_derivative(self, node, var):
        return self.cross_term.get(node, var)

    def set_geometry_cross_term_derivative(self, node, dim, der):
        self.geometry_cross_term.set(node, dim, der)
        return

    def get_geometry_cross_term_derivative(self, node, dim):
        return self.geometry_cross_term.get(node, dim)

    def set_geometry_cross_term_derivative_flow(self, node, dim, der):
        self.geometry_cross_term_flow.set(node, dim, der)
        return

    def get_geometry_cross_term_derivative_flow(self, node, dim):
        return self.geometry_cross_term_flow.get(node, dim)

    def reset(self):
        """
        Zero all the cross terms
        """
        self.cross_term.fill(0.0)
        self.geometry_cross_term.fill(0.0)
        self.geometry_cross_term_flow.fill(0.0)
        return
