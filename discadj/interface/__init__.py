# import the base interface and solver manager
from ._discipline_interface import *
from .solver_manager import *

# test interfaces
from .test_interfaces import *

# import any interface utilities
# -------------------------------
from .utils import *
