"""
Coupled flow/mesh adjoint of a steady and an unsteady scenario with the linear
test disciplines. Run with, e.g.,

    mpirun -n 2 python run_bgs_adjoint.py
"""

import os
from mpi4py import MPI

from discadj.model import Zone, Scenario, DiscAdjModel
from discadj.interface import (
    TestFlowSolver,
    TestMeshSolver,
    SolverManager,
    AitkenRelaxation,
)
from discadj.driver import DiscAdjBGSDriver

comm = MPI.COMM_WORLD
base_dir = os.path.dirname(os.path.abspath(__file__))

# each processor owns a partition of 20 nodes of a 3D zone
nnodes = 20
model = DiscAdjModel("coupled_wing")
Zone.three_dim("wing", nnodes=nnodes, nvar=5, initial_adjoint=0.0).register_to(model)
model.zones[0].node_ids += comm.rank * nnodes

Scenario.steady("cruise", bgs_steps=100, bgs_tolerance=1e-12).register_to(model)
Scenario.unsteady(
    "gust", steps=10, bgs_steps=100, bgs_tolerance=1e-12, time_order=2
).set_stop_criterion(min_bgs_steps=2).register_to(model)

# the linear test disciplines
solvers = SolverManager(comm)
solvers.flow = TestFlowSolver(comm, model)
solvers.mesh = TestMeshSolver(comm, model)

driver = DiscAdjBGSDriver(
    solvers, model=model, relaxation=AitkenRelaxation(theta_init=0.8), debug=True
)
if comm.rank == 0:
    driver.print_summary(print_model=True)

model.print_memory_size(comm, starting_message="Node state")

fail = driver.solve_adjoint()
if fail == 0:
    # the sensitivities of the last scenario (the unsteady one)
    model.write_sensitivity_file(comm, os.path.join(base_dir, "wing.sens"))
