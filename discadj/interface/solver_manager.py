__all__ = ["SolverManager"]


class SolverManager:
    def __init__(self, comm, use_flow: bool = True, use_mesh: bool = True):
        """
        Create a solver manager object which holds the flow and mesh adjoint disciplines

        Parameters
        ---------------------------------------------------
        comm: MPI COMM
            MPI master communicator
        use_flow: bool
            whether to require a flow adjoint discipline
        use_mesh: bool
            whether to require a mesh adjoint discipline
        """
        self.comm = comm
        self._use_flow = use_flow
        self._use_mesh = use_mesh

        self._flow = None
        self._mesh = None

    @property
    def use_flow(self) -> bool:
        return self._use_flow

    @property
    def use_mesh(self) -> bool:
        return self._use_mesh

    @property
    def solver_list(self):
        """
        return a list of solvers
        """
        mlist = []
        if self.use_flow:
            mlist.append(self.flow)
        if self.use_mesh:
            mlist.append(self.mesh)
        return mlist

    @property
    def adjoint_residual(self) -> float:
        return max([abs(solver.get_adjoint_residual()) for solver in self.solver_list])

    @property
    def flow(self):
        return self._flow

    @flow.setter
    def flow(self, new_flow_solver):
        self._flow = new_flow_solver

    @property
    def mesh(self):
        return self._mesh

    @mesh.setter
    def mesh(self, new_mesh_solver):
        self._mesh = new_mesh_solver

    @property
    def fully_defined(self) -> bool:
        has_flow = not (self.use_flow) or self.flow is not None
        has_mesh = not (self.use_mesh) or self.mesh is not None
        return has_flow and has_mesh

    def __str__(self):
        line0 = f"SolverManager"
        line1 = f"  Comm: {self.comm}"
        line2 = f"  Flow: {self.flow.__class__.__qualname__ if self.flow is not None else None}"
        line3 = f"  Mesh: {self.mesh.__class__.__qualname__ if self.mesh is not None else None}"

        output = (line0, line1, line2, line3)

        return "\n".join(output)
