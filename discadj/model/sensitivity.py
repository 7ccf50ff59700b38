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

__all__ = ["SensitivityAccumulator"]

from ._base import NodeStateStore
from .node_array import NodeArray


class SensitivityAccumulator(NodeStateStore):
    """
    Derivative of the objective with respect to each node coordinate.

    A set overwrites the stored value. The value is final once the coupling
    loop (and for unsteady problems the whole time loop) has finished.
    """

    def __init__(self, nnodes, ndim, dtype=float):
        super(SensitivityAccumulator, self).__init__(nnodes, ndim=ndim)

        self.sensitivity = NodeArray("sensitivity", self.nnodes, self.ndim, dtype=dtype)
        self._register_field("sensitivity", self.sensitivity)

        return

    def set_sensitivity(self, node, dim, val):
        self.sensitivity.set(node, dim, val)
        return

    def get_sensitivity(self, node, dim):
        return self.sensitivity.get(node, dim)

    def get_sensitivity_vector(self, node):
        return self.sensitivity.get_row(node)

    def reset(self):
        self.sensitivity.fill(0.0)
        return
