# __init__.py file for discadj driver folder
# represents the coupled adjoint drivers

# the classes/methods in import * are detailed in __all__ at the
# top of each file

# import base discadj driver
from ._discadj_driver import *

# import the block Gauss-Seidel driver
from .discadj_bgs_driver import *
