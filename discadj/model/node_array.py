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

__all__ = ["IndexOutOfRange", "ShapeMismatch", "NodeArray", "SnapshotPair"]

import operator
import numpy as np


class IndexOutOfRange(IndexError):
    """
    A node or component index fell outside of its valid range.
    """

    pass


class ShapeMismatch(ValueError):
    """
    A component array does not match the number of components of the field.
    """

    pass


class NodeArray(object):
    """
    Fixed-shape per-node, per-component storage.

    The values live in a single contiguous buffer of length nnodes * ncomp.
    Entry (node, comp) sits at offset node * ncomp + comp, so the rows of
    all the nodes in a partition are adjacent in memory.
    """

    def __init__(self, name, nnodes, ncomp, dtype=float, fill=0.0):
        """
        Parameters
        ----------
        name: str
            name of the stored quantity, used in error messages
        nnodes: int
            number of nodes N
        ncomp: int
            number of components per node (D or V)
        dtype:
            numpy data type of the entries (real or complex)
        fill: float
            initial value of every entry
        """

        nnodes = operator.index(nnodes)
        ncomp = operator.index(ncomp)
        if nnodes < 0 or ncomp < 0:
            raise ValueError(
                f"{name}: cannot allocate {nnodes} nodes with {ncomp} components"
            )

        self.name = name
        self.nnodes = nnodes
        self.ncomp = ncomp
        self.dtype = np.dtype(dtype)

        self._buffer = np.full(nnodes * ncomp, fill, dtype=self.dtype)
        self._values = self._buffer.reshape(nnodes, ncomp)

        return

    @property
    def shape(self):
        return (self.nnodes, self.ncomp)

    @property
    def nbytes(self) -> int:
        return self._buffer.nbytes

    def _check_node(self, node):
        if isinstance(node, (bool, np.bool_)):
            raise IndexOutOfRange(f"{self.name}: node index {node!r} is a boolean")
        try:
            node = operator.index(node)
        except TypeError:
            raise IndexOutOfRange(
                f"{self.name}: node index {node!r} is not an integer"
            )
        if node < 0 or node >= self.nnodes:
            raise IndexOutOfRange(
                f"{self.name}: node index {node} outside [0, {self.nnodes})"
            )
        return node

    def _check_comp(self, comp):
        if isinstance(comp, (bool, np.bool_)):
            raise IndexOutOfRange(
                f"{self.name}: component index {comp!r} is a boolean"
            )
        try:
            comp = operator.index(comp)
        except TypeError:
            raise IndexOutOfRange(
                f"{self.name}: component index {comp!r} is not an integer"
            )
        if comp < 0 or comp >= self.ncomp:
            raise IndexOutOfRange(
                f"{self.name}: component index {comp} outside [0, {self.ncomp})"
            )
        return comp

    def _check_row(self, values):
        values = np.asarray(values)
        if values.shape != (self.ncomp,):
            raise ShapeMismatch(
                f"{self.name}: expected {self.ncomp} components, got shape {values.shape}"
            )
        return values

    def get(self, node, comp):
        node = self._check_node(node)
        comp = self._check_comp(comp)
        return self._values[node, comp]

    def set(self, node, comp, value):
        node = self._check_node(node)
        comp = self._check_comp(comp)
        if np.ndim(value) != 0:
            raise ShapeMismatch(
                f"{self.name}: expected a scalar value, got shape {np.shape(value)}"
            )
        self._values[node, comp] = value
        return

    def get_row(self, node):
        """
        Return a copy of all the components stored at a node
        """
        node = self._check_node(node)
        return self._values[node].copy()

    def set_row(self, node, values):
        """
        Overwrite all the components stored at a node
        """
        node = self._check_node(node)
        values = self._check_row(values)
        self._values[node, :] = values
        return

    def copy_from(self, other, node=None):
        """
        Copy the entries of another array with the same shape into this one.

        Parameters
        ----------
        other: NodeArray
            the source array
        node: int
            the node to copy, or None to copy every node
        """

        if other.shape != self.shape:
            raise ShapeMismatch(
                f"cannot copy {other.name} {other.shape} into {self.name} {self.shape}"
            )

        if node is None:
            self._buffer[:] = other._buffer
        else:
            node = self._check_node(node)
            self._values[node, :] = other._values[node, :]
        return

    def assign(self, values):
        """
        Overwrite every entry from an (nnodes, ncomp) array
        """
        values = np.asarray(values)
        if values.shape != self.shape:
            raise ShapeMismatch(
                f"{self.name}: expected shape {self.shape}, got {values.shape}"
            )
        self._values[:, :] = values
        return

    def fill(self, value=0.0):
        self._buffer[:] = value
        return

    def view(self):
        """
        Read-only (nnodes, ncomp) view of the stored values
        """
        values = self._values.view()
        values.flags.writeable = False
        return values

    def __repr__(self):
        return f"NodeArray({self.name!r}, nnodes={self.nnodes}, ncomp={self.ncomp}, dtype={self.dtype})"


class SnapshotPair(object):
    """
    A current value plus any number of named point-in-time copies of it.

    Every field of the form "solution / solution_old / solution_bgs_k" is one
    of these. Snapshots are only ever written by an explicit call to
    snapshot() or set_snapshot(), never as a side effect of writing the
    current value.
    """

    def __init__(self, name, nnodes, ncomp, snapshots=(), dtype=float, fill=0.0):
        self.name = name
        self.nnodes = nnodes
        self.ncomp = ncomp
        self.dtype = np.dtype(dtype)

        self.current = NodeArray(name, nnodes, ncomp, dtype=dtype, fill=fill)
        self.snapshots = {}
        for label in snapshots:
            self.add_snapshot(label)

        return

    def add_snapshot(self, label):
        """
        Add a new named snapshot, initialized to zero
        """
        if label in self.snapshots:
            raise ValueError(f"{self.name} already has a snapshot named '{label}'")

        self.snapshots[label] = NodeArray(
            f"{self.name}_{label}", self.nnodes, self.ncomp, dtype=self.dtype
        )
        return self.snapshots[label]

    def snapshot(self, label, node=None):
        """
        Copy the current value into the named snapshot for one node or all nodes
        """
        self.snapshots[label].copy_from(self.current, node)
        return

    def get(self, node, comp):
        return self.current.get(node, comp)

    def set(self, node, comp, value):
        self.current.set(node, comp, value)
        return

    def get_snapshot(self, label, node, comp=None):
        if comp is None:
            return self.snapshots[label].get_row(node)
        return self.snapshots[label].get(node, comp)

    def set_snapshot(self, label, node, comp, value):
        self.snapshots[label].set(node, comp, value)
        return

    @property
    def nbytes(self) -> int:
        return self.current.nbytes + sum(
            snap.nbytes for snap in self.snapshots.values()
        )
