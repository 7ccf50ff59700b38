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

__all__ = ["NodeVariable"]

import numpy as np
from ._base import NodeStateStore
from .node_array import SnapshotPair, ShapeMismatch


class NodeVariable(NodeStateStore):
    """
    The solution fields shared by every solver's node state: the current
    solution and its "old" copy used for under-relaxation and restarts of
    a subiteration.
    """

    def __init__(self, initial_value, nnodes, nvar, dtype=float):
        """
        Parameters
        ----------
        initial_value: float or sequence of float
            value broadcast to the solution at every node, either a scalar
            or one value per variable
        nnodes: int
            number of nodes
        nvar: int
            number of variables per node
        dtype:
            numpy data type of the stored values
        """

        super(NodeVariable, self).__init__(nnodes, nvar=nvar)

        self.solution = SnapshotPair(
            "solution", self.nnodes, self.nvar, snapshots=("old",), dtype=dtype
        )

        initial_value = np.asarray(initial_value, dtype=dtype)
        if initial_value.ndim == 0:
            self.solution.current.fill(initial_value)
        elif initial_value.shape == (self.nvar,):
            self.solution.current.assign(
                np.broadcast_to(initial_value, (self.nnodes, self.nvar))
            )
        else:
            raise ShapeMismatch(
                f"initial value must be a scalar or have {self.nvar} components, got shape {initial_value.shape}"
            )

        self._register_field("solution", self.solution)
        self._register_field(
            "solution_old", self.solution.snapshots["old"], writable=False
        )

        return

    def get_solution(self, node, var=None):
        """
        Get one variable of the solution, or a copy of the solution vector if var is None
        """
        if var is None:
            return self.solution.current.get_row(node)
        return self.solution.get(node, var)

    def set_solution(self, node, var, value):
        self.solution.set(node, var, value)
        return

    def set_solution_vector(self, node, values):
        self.solution.current.set_row(node, values)
        return

    def set_old_solution(self, node=None):
        """
        Copy the solution into the old solution
        """
        self.solution.snapshot("old", node)
        return

    def get_solution_old(self, node, var=None):
        return self.solution.get_snapshot("old", node, var)

    def restore_solution(self, node=None):
        """
        Reset the solution to the old solution
        """
        self.solution.current.copy_from(self.solution.snapshots["old"], node)
        return
