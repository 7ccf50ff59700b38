# -------------------------------------------------
# General utility functions used in DISCADJ.
# Norms of node fields, local or summed over processors.
# -------------------------------------------------

__all__ = [
    "real_norm",
    "global_norm",
    "field_change_norm",
]

import numpy as np


def real_norm(vec):
    if vec is None:
        return None
    return np.linalg.norm(np.real(vec))


def global_norm(comm, vecs):
    """
    2-norm of the real part of a list of local vectors, taken over all processors
    """
    local = 0.0
    for vec in vecs:
        local += real_norm(vec) ** 2
    return np.sqrt(comm.allreduce(local))


def field_change_norm(comm, zones, field, reference):
    """
    2-norm over all zones and processors of the difference between a node field
    and its reference snapshot, e.g. "solution" against "solution_bgs_k"
    """
    diffs = []
    for zone in zones:
        diffs.append(zone.nodes.get_field(field) - zone.nodes.get_field(reference))
    return global_norm(comm, diffs)
