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

__all__ = ["CouplingSubiterationTracker"]

from ._base import NodeStateStore
from .node_array import SnapshotPair


class CouplingSubiterationTracker(NodeStateStore):
    """
    Point-in-time copies of the adjoint solution and the geometric adjoint
    solution used by the coupling loop.

    solution_bgs_k
        adjoint solution at the start of the current BGS outer iteration
    solution_geometry_bgs_k
        geometric adjoint solution at the start of the current BGS outer iteration
    solution_geometry_old
        geometric adjoint solution before the mesh discipline's own update

    The copies are read by convergence checks and relaxation only. The tracker
    computes no norms; it supplies the two values a norm subtracts.
    """

    def __init__(self, solution, nnodes, ndim, dtype=float):
        """
        Parameters
        ----------
        solution: SnapshotPair
            the adjoint solution of the node state, a BGS snapshot is added to it
        nnodes: int
            number of nodes
        ndim: int
            number of spatial dimensions
        """

        super(CouplingSubiterationTracker, self).__init__(
            nnodes, ndim=ndim, nvar=solution.ncomp
        )

        self.solution = solution
        self.solution.add_snapshot("bgs_k")

        self.solution_geometry = SnapshotPair(
            "solution_geometry",
            self.nnodes,
            self.ndim,
            snapshots=("old", "bgs_k"),
            dtype=dtype,
        )

        self._register_field(
            "solution_bgs_k", self.solution.snapshots["bgs_k"], writable=False
        )
        self._register_field("solution_geometry", self.solution_geometry)
        self._register_field(
            "solution_geometry_old",
            self.solution_geometry.snapshots["old"],
            writable=False,
        )
        self._register_field(
            "solution_geometry_bgs_k",
            self.solution_geometry.snapshots["bgs_k"],
            writable=False,
        )

        return

    def snapshot_bgs(self, node=None):
        """
        Store the adjoint solution at the start of a BGS outer iteration.
        Call once per outer iteration, before the disciplines update the solution.
        """
        self.solution.snapshot("bgs_k", node)
        return

    def snapshot_geometry_bgs(self, node=None):
        """
        Store the geometric adjoint solution at the start of a BGS outer iteration
        """
        self.solution_geometry.snapshot("bgs_k", node)
        return

    def snapshot_old_geometry(self, node=None):
        """
        Store the geometric adjoint solution before the mesh discipline updates it
        """
        self.solution_geometry.snapshot("old", node)
        return

    def get_bgs_solution_k(self, node, var):
        return self.solution.get_snapshot("bgs_k", node, var)

    def get_bgs_solution_geometry(self, node, dim):
        return self.solution_geometry.get_snapshot("bgs_k", node, dim)

    def get_old_solution_geometry(self, node, dim):
        return self.solution_geometry.get_snapshot("old", node, dim)

    def get_solution_geometry(self, node, dim=None):
        if dim is None:
            return self.solution_geometry.current.get_row(node)
        return self.solution_geometry.get(node, dim)

    def set_solution_geometry(self, node, dim, value):
        self.solution_geometry.set(node, dim, value)
        return

    def set_solution_geometry_vector(self, node, values):
        self.solution_geometry.current.set_row(node, values)
        return
