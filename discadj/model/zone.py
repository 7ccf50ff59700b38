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

__all__ = ["Zone"]

import numpy as np
from ._base import Base
from .disc_adj_variable import DiscAdjVariable


class Zone(Base):
    """
    A zone (or the partition of a zone owned by this processor) of the
    coupled adjoint problem. The zone owns the discrete adjoint node state
    of its local nodes and the global ids of those nodes.
    """

    def __init__(
        self,
        name,
        nnodes,
        ndim=3,
        nvar=1,
        initial_adjoint=0.0,
        node_ids=None,
        id=0,
        group=None,
        dtype=float,
    ):
        """

        Parameters
        ----------
        name: str
            name of the zone
        nnodes: int
            number of nodes owned by this processor
        ndim: int
            number of spatial dimensions, 2 or 3
        nvar: int
            number of solver variables per node
        initial_adjoint: float or sequence of float
            initial adjoint value broadcast to every node
        node_ids: array-like
            global id of each local node, defaults to 1, ..., nnodes
        id: int
            ID number of the zone in the list of zones in the model
        group: int
            group number of the zone
        dtype:
            numpy data type of the node state

        See Also
        --------
        :mod:`base` : Zone inherits from Base
        """

        if not ndim in (2, 3):
            raise ValueError(f"Zone {name}: ndim must be 2 or 3, got {ndim}")
        if nvar < 1:
            raise ValueError(f"Zone {name}: nvar must be positive, got {nvar}")

        super(Zone, self).__init__(name, id, group)

        self.nnodes = nnodes
        self.ndim = ndim
        self.nvar = nvar
        self.initial_adjoint = initial_adjoint
        self.dtype = dtype

        if node_ids is None:
            node_ids = np.arange(1, nnodes + 1)
        self.node_ids = np.asarray(node_ids, dtype=int)
        if self.node_ids.shape != (nnodes,):
            raise ValueError(
                f"Zone {name}: expected {nnodes} node ids, got {self.node_ids.shape}"
            )

        self.nodes = None
        self.initialize_adjoint_variables()

        return

    @classmethod
    def two_dim(cls, name: str, nnodes: int, nvar: int, initial_adjoint=0.0):
        """
        Class method to create a two-dimensional zone
        """
        return cls(name=name, nnodes=nnodes, ndim=2, nvar=nvar, initial_adjoint=initial_adjoint)

    @classmethod
    def three_dim(cls, name: str, nnodes: int, nvar: int, initial_adjoint=0.0):
        """
        Class method to create a three-dimensional zone
        """
        return cls(name=name, nnodes=nnodes, ndim=3, nvar=nvar, initial_adjoint=initial_adjoint)

    def register_to(self, discadj_model):
        """
        add this zone to the model in a method cascade
        """
        discadj_model.add_zone(self)
        return self

    def initialize_adjoint_variables(self, scenario=None):
        """
        Allocate a fresh adjoint node state for the zone.

        The node state is constructed once for each adjoint solve. All the
        fields are zero except the adjoint solution, which is set to the
        initial adjoint value.

        Parameters
        ----------
        scenario: :class:`~scenario.Scenario`
            The scenario about to be solved
        """

        self.nodes = DiscAdjVariable(
            self.initial_adjoint, self.nnodes, self.ndim, self.nvar, dtype=self.dtype
        )

        return

    def get_sensitivities(self):
        """
        Get a copy of the (nnodes, ndim) sensitivities of this zone
        """
        return np.array(self.nodes.get_field("sensitivity"))

    def __str__(self):
        line1 = f"Zone (<ID> <Name>): {self.id} {self.name}"
        line2 = f"    Nodes: {self.nnodes}"
        line3 = f"    Dimensions: {self.ndim}"
        line4 = f"    Variables: {self.nvar}"

        output = (line1, line2, line3, line4)

        return "\n".join(output)
