# __init__.py file for discadj model folder
# represents the node state containers, zones, scenarios and the model

# the classes/methods in import * are detailed in __all__ at the
# top of each file

# per-node storage and the adjoint node state
from .node_array import *
from ._base import *
from .node_variable import *
from .direct_state import *
from .dual_time import *
from .cross_terms import *
from .coupling_tracker import *
from .sensitivity import *
from .disc_adj_variable import *

# zones, scenarios and the model
from .zone import *
from .scenario import *
from .discadj_model import *
