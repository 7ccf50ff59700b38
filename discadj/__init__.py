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

# import each subfolder
# the storage model has no dependency on MPI, the drivers and interfaces
# expect an mpi4py communicator to be passed in

# TIP : open a python shell and run the following to check imported packages:
# import discadj
# discadj.__dict__

from .model import *
from .interface import *
from .driver import *
