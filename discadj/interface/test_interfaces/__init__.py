# linear test disciplines with random operators
from ._test_flow_solver import *
from ._test_mesh_solver import *
