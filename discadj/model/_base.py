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

__all__ = ["Base", "NodeStateStore"]

import operator
from .node_array import NodeArray, SnapshotPair


class Base(object):
    """
    Base class for DISCADJ zones and scenarios
    """

    def __init__(self, name, id=0, group=None):
        """

        Parameters
        ----------
        name: str
            name of the zone or scenario
        id: int
            id number in list of zones or scenarios in the model
        group: int
            group number for the zone or scenario. Zones in the same group belong to the
            same coupled problem

        See Also
        --------
        :mod:`zone`,:mod:`scenario` : subclass the Base class
        """

        self.name = name
        self.id = id
        if group:
            self.group = group
        else:
            self.group = -1
        self.group_root = False

        return

    def register_to(self, discadj_model):
        """
        required method for each subclass
        """
        pass

    def set_id(self, id):
        """
        **[model call]**
        Update the id number of the zone or scenario

        Parameters
        ----------
        id: int
           id number of the zone or scenario
        """
        self.id = id

    def _print_long(self, value, width=12, indent_line=0, end_line=False, align="^"):
        if value is None:
            value = "None"
        if indent_line > 0:
            print("{val:{wid}}".format(wid=indent_line, val=""), end="")
        if not end_line:
            print("|{val:{ali}{wid}}".format(wid=width, ali=align, val=value), end="")
        else:
            print(
                "|{val:{ali}{wid}}|".format(wid=width, ali=align, val=value), end="\n"
            )
        return


class NodeStateStore(object):
    """
    Capability interface for per-node state containers.

    A store declares the fields it holds by name. Each field is a
    :class:`~node_array.NodeArray` with either ``nvar`` or ``ndim``
    components per node. Concrete stores add the accessors for their own
    fields on top of the generic by-name access provided here, and can pull
    the fields of another store in with :func:`include`.
    """

    def __init__(self, nnodes, ndim=0, nvar=0):
        """
        Parameters
        ----------
        nnodes: int
            number of nodes N in this partition
        ndim: int
            number of spatial dimensions D
        nvar: int
            number of solver variables V
        """

        self._nnodes = operator.index(nnodes)
        self._ndim = operator.index(ndim)
        self._nvar = operator.index(nvar)
        self._fields = {}
        self._snapshot_fields = set()

        return

    @property
    def nnodes(self) -> int:
        return self._nnodes

    @property
    def ndim(self) -> int:
        return self._ndim

    @property
    def nvar(self) -> int:
        return self._nvar

    def _register_field(self, name, array, writable=True):
        """
        Declare a field held by this store.

        Parameters
        ----------
        name: str
            public name of the field
        array: NodeArray or SnapshotPair
            the storage. For a SnapshotPair only the current value is registered.
        writable: bool
            False for snapshot fields, which only a snapshot call may write
        """

        if isinstance(array, SnapshotPair):
            array = array.current
        assert isinstance(array, NodeArray)

        if name in self._fields:
            raise ValueError(f"Field '{name}' is already declared in this store")
        if array.nnodes != self._nnodes:
            raise ValueError(
                f"Field '{name}' has {array.nnodes} nodes, store has {self._nnodes}"
            )

        self._fields[name] = array
        if not writable:
            self._snapshot_fields.add(name)
        return

    def include(self, store):
        """
        Add all the fields declared by another store to this one
        """

        for name, array in store._fields.items():
            self._register_field(
                name, array, writable=name not in store._snapshot_fields
            )
        return

    def field_names(self):
        return list(self._fields.keys())

    def has_field(self, name) -> bool:
        return name in self._fields

    def is_snapshot_field(self, name) -> bool:
        return name in self._snapshot_fields

    def _field(self, name):
        if not name in self._fields:
            raise AssertionError(
                f"{self.__class__.__qualname__} has no field named '{name}'"
            )
        return self._fields[name]

    def get_field(self, name):
        """
        Get a read-only (nnodes, ncomp) view of a field
        """
        return self._field(name).view()

    def set_field(self, name, values):
        """
        Overwrite every node of a field from an (nnodes, ncomp) array.
        Snapshot fields are rejected.
        """
        array = self._field(name)
        if name in self._snapshot_fields:
            raise AssertionError(
                f"Field '{name}' is a snapshot and is only written by a snapshot call"
            )
        array.assign(values)
        return

    def memory_size(self) -> int:
        """
        Number of bytes held by all declared fields
        """
        return sum(array.nbytes for array in self._fields.values())
