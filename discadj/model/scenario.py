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

__all__ = ["Scenario"]

from ._base import Base


class Scenario(Base):
    """A class to hold the settings of one coupled adjoint analysis"""

    CONVERGENCE_REFERENCES = ["bgs", "old"]
    TIME_ORDERS = [1, 2]

    def __init__(
        self,
        name,
        id=0,
        group=None,
        steady=True,
        steps=1,
        bgs_steps=100,
        min_bgs_steps=1,
        bgs_tolerance=1e-10,
        early_stopping=True,
        time_order=2,
        dual_time_factor=0.25,
        geometry_convergence="bgs",
    ):
        """
        Parameters
        ----------
        name: str
            name of the scenario
        id: int
            ID number of the scenario in the list of scenarios in the model
        group: int
            group number for the scenario
        steady: bool
            whether the scenario's simulation is steady or unsteady
        steps: int
            number of physical time steps for an unsteady scenario (ignored when steady)
        bgs_steps: int
            maximum number of BGS outer iterations for each time level
        min_bgs_steps: int
            minimum number of BGS outer iterations before the stopping criterion is checked
        bgs_tolerance: float
            absolute tolerance on the change of the adjoint solutions over one outer iteration
        early_stopping: bool
            whether to stop the BGS loop once the tolerance is met
        time_order: int
            order of the backward difference in time, 1 or 2
        dual_time_factor: float
            scaling of the adjoint unsteady term, the ratio of the discipline time
            scale to the physical time step
        geometry_convergence: str
            which snapshot the geometric adjoint change is measured against, 'bgs'
            for the start of the outer iteration or 'old' for the value before
            the mesh discipline's own update

        See Also
        --------
        :mod:`base` : Scenario inherits from Base
        """

        super(Scenario, self).__init__(name, id, group)

        if not time_order in Scenario.TIME_ORDERS:
            raise ValueError(f"time_order must be one of {Scenario.TIME_ORDERS}")
        if not geometry_convergence in Scenario.CONVERGENCE_REFERENCES:
            raise ValueError(
                f"geometry_convergence must be one of {Scenario.CONVERGENCE_REFERENCES}"
            )

        self.steady = steady
        self.steps = 1 if steady else steps
        self.bgs_steps = bgs_steps
        self.min_bgs_steps = min_bgs_steps
        self.bgs_tolerance = bgs_tolerance
        self.early_stopping = early_stopping
        self.time_order = time_order
        self.dual_time_factor = dual_time_factor
        self.geometry_convergence = geometry_convergence

        return

    @classmethod
    def steady(cls, name: str, bgs_steps: int = 100, bgs_tolerance: float = 1e-10):
        return cls(
            name=name,
            steady=True,
            bgs_steps=bgs_steps,
            bgs_tolerance=bgs_tolerance,
        )

    @classmethod
    def unsteady(
        cls,
        name: str,
        steps: int,
        bgs_steps: int = 100,
        bgs_tolerance: float = 1e-10,
        time_order: int = 2,
    ):
        return cls(
            name=name,
            steady=False,
            steps=steps,
            bgs_steps=bgs_steps,
            bgs_tolerance=bgs_tolerance,
            time_order=time_order,
        )

    @property
    def dual_time_weights(self):
        """
        Weights of the adjoint at the two later time levels in the adjoint
        unsteady term of the current level: (weight of level n+1, weight of level n+2)
        """
        assert not self.steady
        if self.time_order == 1:
            weights = (1.0, 0.0)
        else:
            weights = (2.0, -0.5)
        return tuple(self.dual_time_factor * w for w in weights)

    def register_to(self, discadj_model):
        """
        add this scenario to the model at the end of a method cascade
        """
        discadj_model.add_scenario(self)
        return self

    def set_stop_criterion(
        self,
        early_stopping: bool = True,
        bgs_tolerance=None,
        min_bgs_steps=None,
        bgs_steps=None,
    ):
        """
        turn on the early stopping criterion of the BGS loop

        Parameters
        ----------
        early_stopping: bool
            whether to perform early stopping criterion
        bgs_tolerance: float
            (optional) - the absolute tolerance on the change of the adjoint solutions
        min_bgs_steps: int
            (optional) - the minimum number of outer iterations before early stopping
        bgs_steps: int
            (optional) - the maximum number of outer iterations
        """
        self.early_stopping = early_stopping
        if bgs_tolerance is not None:
            self.bgs_tolerance = bgs_tolerance
        if min_bgs_steps is not None:
            self.min_bgs_steps = min_bgs_steps
        if bgs_steps is not None:
            self.bgs_steps = bgs_steps
        return self

    def set_time_order(self, time_order: int = 2, dual_time_factor=None):
        """
        set the order of the backward difference in time in a method cascade
        """
        if not time_order in Scenario.TIME_ORDERS:
            raise ValueError(f"time_order must be one of {Scenario.TIME_ORDERS}")
        self.time_order = time_order
        if dual_time_factor is not None:
            self.dual_time_factor = dual_time_factor
        return self

    def set_geometry_convergence(self, reference: str = "bgs"):
        """
        choose the snapshot the geometric adjoint convergence is measured against
        """
        if not reference in Scenario.CONVERGENCE_REFERENCES:
            raise ValueError(
                f"geometry_convergence must be one of {Scenario.CONVERGENCE_REFERENCES}"
            )
        self.geometry_convergence = reference
        return self

    def __str__(self):
        line1 = f"Scenario (<ID> <Name>): {self.id} {self.name}"
        line2 = f"    Coupling Group: {self.group}"
        line3 = f"    Steps: {self.steps}"
        line4 = f"    Steady-state: {self.steady}"
        line5 = f"    BGS steps: {self.bgs_steps} (tolerance {self.bgs_tolerance})"

        output = (line1, line2, line3, line4, line5)

        return "\n".join(output)
