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

__all__ = ["DualTimeDerivativeChain"]

from ._base import NodeStateStore
from .node_array import SnapshotPair


class DualTimeDerivativeChain(NodeStateStore):
    """
    The adjoint unsteady term at the current and the previous time level.

    Two levels are enough for the second order backward difference in time.
    A higher order scheme would need this widened to a ring buffer with
    more history levels.

    The previous level is only overwritten by :func:`advance` (or an
    explicit set), which the time loop calls once a time level is
    finalized and before the new current value is written.
    """

    def __init__(self, nnodes, nvar, dtype=float):
        super(DualTimeDerivativeChain, self).__init__(nnodes, nvar=nvar)

        self.derivative = SnapshotPair(
            "dual_time_derivative",
            self.nnodes,
            self.nvar,
            snapshots=("n",),
            dtype=dtype,
        )

        self._register_field("dual_time_derivative", self.derivative)
        self._register_field(
            "dual_time_derivative_n", self.derivative.snapshots["n"]
        )

        return

    def set_dual_time_derivative(self, node, var, der):
        self.derivative.set(node, var, der)
        return

    def get_dual_time_derivative(self, node, var):
        return self.derivative.get(node, var)

    def set_dual_time_derivative_n(self, node, var, der):
        self.derivative.set_snapshot("n", node, var, der)
        return

    def get_dual_time_derivative_n(self, node, var):
        return self.derivative.get_snapshot("n", node, var)

    def advance(self, node=None):
        """
        Move the current unsteady term into the previous time level
        """
        self.derivative.snapshot("n", node)
        return
