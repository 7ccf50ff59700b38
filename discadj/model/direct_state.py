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

__all__ = ["DirectStateCache"]

from ._base import NodeStateStore
from .node_array import NodeArray


class DirectStateCache(NodeStateStore):
    """
    Converged primal solution and primal mesh coordinates at each node.

    The adjoint equations are linearized about this state. It is written
    once per time level by the primal solver, before the adjoint
    subiterations of that level start, and is only read afterwards. Values
    are stored and returned exactly as given.
    """

    def __init__(self, nnodes, ndim, nvar, dtype=float):
        super(DirectStateCache, self).__init__(nnodes, ndim=ndim, nvar=nvar)

        self.solution_direct = NodeArray(
            "solution_direct", self.nnodes, self.nvar, dtype=dtype
        )
        self.geometry_direct = NodeArray(
            "geometry_direct", self.nnodes, self.ndim, dtype=dtype
        )

        self._register_field("solution_direct", self.solution_direct)
        self._register_field("geometry_direct", self.geometry_direct)

        return

    def set_solution_direct(self, node, values):
        """
        Set the converged primal solution at a node

        Parameters
        ----------
        node: int
            node index
        values: array-like
            the nvar primal variables
        """
        self.solution_direct.set_row(node, values)
        return

    def get_solution_direct(self, node):
        """
        Get a copy of the converged primal solution at a node
        """
        return self.solution_direct.get_row(node)

    def set_geometry_direct(self, node, coords):
        """
        Set the converged primal coordinates of a node

        Parameters
        ----------
        node: int
            node index
        coords: array-like
            the ndim coordinates
        """
        self.geometry_direct.set_row(node, coords)
        return

    def get_geometry_direct(self, node, dim=None):
        """
        Get the converged primal coordinates of a node, or one coordinate of it if dim is given
        """
        if dim is None:
            return self.geometry_direct.get_row(node)
        return self.geometry_direct.get(node, dim)
