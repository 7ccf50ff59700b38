# __init__ file for discadj/interface/utils
# Provides utilities to the discipline interfaces and the drivers in discadj

# general utilities
from .general_utils import *

from .relaxation_utils import *
from .test_result import *
