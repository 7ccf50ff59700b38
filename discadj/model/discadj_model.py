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

__all__ = ["DiscAdjModel"]

import numpy as np


class DiscAdjModel(object):
    """
    The DiscAdjModel type holds all the data required for a coupled discrete adjoint
    analysis. To create a model, instantiate it then add zones and scenarios to it.

    See Also
    --------
    :mod:`zone`, :mod:`scenario`
    """

    def __init__(self, name, id=0):
        """

        Parameters
        ----------
        name: str
            name of the model
        id: int
            id number of the model
        """

        self.name = name
        self.id = id

        self.scenarios = []
        self.zones = []

    def add_zone(self, zone):
        """
        Add a zone to the model. The zone must be completely defined before adding to the model

        Parameters
        ----------
        zone: zone object
            the zone to be added
        """
        if zone.id == 0:
            zone.set_id(len(self.zones) + 1)
        else:
            zone_ids = [z.id for z in self.zones]
            if zone.id in zone_ids:
                print("Error: specified zone id has already been assigned")
                print("Assigning a new zone id")
                zone.set_id(max(zone_ids) + 1)

        zone.group_root = True
        for z in self.zones:
            if z.group == zone.group:
                zone.group_root = False
                break

        self.zones.append(zone)

    def add_scenario(self, scenario):
        """
        Add a scenario to model. The scenario must be completely defined before adding to the model

        Parameters
        ----------
        scenario: scenario object
            the scenario to be added
        """

        scenario.set_id(len(self.scenarios) + 1)

        scenario.group_root = True
        for scen in self.scenarios:
            if scen.group == scenario.group:
                scenario.group_root = False
                break

        self.scenarios.append(scenario)

    def get_zone(self, name):
        """
        Get the zone with a matching name
        """
        for zone in self.zones:
            if zone.name == name:
                return zone
        raise AssertionError(f"Can't find zone {name} in model {self.name}")

    def collect_sensitivities(self, comm, root=0):
        """
        Gather the node ids and sensitivities of every zone on the root processor

        Parameters
        ----------
        comm: MPI communicator
            Global communicator across all processors
        root: int
            The rank of the processor that receives the data

        Returns
        -------
        data: list of (str, np.ndarray, np.ndarray)
            on the root processor, the zone name, the global node ids and the
            (nnodes, ndim) sensitivities of each zone. None on the other processors.
        """

        data = []
        for zone in self.zones:
            all_ids = comm.gather(zone.node_ids, root=root)
            all_sens = comm.gather(zone.get_sensitivities(), root=root)

            if comm.rank == root:
                ids = np.concatenate(all_ids)
                sens = np.concatenate(all_sens, axis=0)
                data.append((zone.name, ids, sens))

        if comm.rank == root:
            return data
        return None

    def write_sensitivity_file(self, comm, filename, root=0):
        """
        Write the sensitivity file.

        This file contains the following information:

        Number of zones

        Zone name
        Number of nodes
        for node in nodes:
            node, dfdx, dfdy, [dfdz]

        Parameters
        ----------
        comm: MPI communicator
            Global communicator across all processors
        filename: str
            The name of the file to be generated
        root: int
            The rank of the processor that will write the file
        """

        data = self.collect_sensitivities(comm, root=root)

        if comm.rank == root:
            lines = "{}\n".format(len(data))

            for name, ids, sens in data:
                # Print the zone name and the number of nodes
                lines += "{}\n".format(name)
                lines += "{}\n".format(len(ids))

                for i in range(len(ids)):
                    lines += "{} ".format(int(ids[i]))
                    lines += " ".join(str(value.real) for value in sens[i, :])
                    lines += "\n"

            with open(filename, "w") as fp:
                fp.write(lines)

        return

    def print_memory_size(self, comm, root: int = 0, starting_message=""):
        """
        Print the number of bytes held by the node state of each zone, summed over processors
        """

        sizes = []
        for zone in self.zones:
            sizes.append(comm.allreduce(zone.nodes.memory_size()))

        if comm.rank == root:
            print(f"{starting_message} memory of model {self.name}", flush=True)
            for zone, size in zip(self.zones, sizes):
                print(f"\tzone {zone.name}: {size / 1.0e6:.4f} MB", flush=True)

        return

    def print_summary(self, print_level: int = 0):
        """
        Print out a summary of the assembled model for inspection

        Parameters
        ----------
        print_level: int
            How much detail to print. 0 prints the zone and scenario tables,
            a positive level also prints the fields held by each zone.
        """

        print("\n\n==========================================================")
        print("||                DISCADJ Model Summary                 ||")
        print("==========================================================")
        print(self)

        self._print_zones()
        self._print_scenarios()

        if print_level > 0:
            for zone in self.zones:
                print(f"\n{zone}")
                print(zone.nodes)

        return

    def _print_zones(self):
        print(
            "     ------------------------------------------------------------------"
        )
        self._print_long("Zone", width=18, indent_line=5)
        self._print_long("Nodes", width=12)
        self._print_long("Dims", width=8)
        self._print_long("Vars", width=8)
        self._print_long("Group", width=12, end_line=True)
        print(
            "     ------------------------------------------------------------------"
        )
        for zone in self.zones:
            self._print_long(zone.name, width=18, indent_line=5)
            self._print_long(zone.nnodes, width=12)
            self._print_long(zone.ndim, width=8)
            self._print_long(zone.nvar, width=8)
            self._print_long(zone.group, width=12, end_line=True)
        print(
            "     ------------------------------------------------------------------"
        )
        return

    def _print_scenarios(self):
        print(
            "     ------------------------------------------------------------------"
        )
        self._print_long("Scenario", width=18, indent_line=5)
        self._print_long("Steady", width=8)
        self._print_long("Steps", width=8)
        self._print_long("BGS steps", width=12)
        self._print_long("Tolerance", width=12, end_line=True)
        print(
            "     ------------------------------------------------------------------"
        )
        for scenario in self.scenarios:
            _tol = "{:#.3g}".format(scenario.bgs_tolerance)
            self._print_long(scenario.name, width=18, indent_line=5)
            self._print_long(str(scenario.steady), width=8)
            self._print_long(scenario.steps, width=8)
            self._print_long(scenario.bgs_steps, width=12)
            self._print_long(_tol, width=12, end_line=True)
        print(
            "     ------------------------------------------------------------------"
        )
        return

    def _print_long(self, value, width=12, indent_line=0, end_line=False, align="^"):
        if value is None:
            value = "None"
        if indent_line > 0:
            print("{val:{wid}}".format(wid=indent_line, val=""), end="")
        if not end_line:
            print("|{val:{ali}{wid}}".format(wid=width, ali=align, val=value), end="")
        else:
            print(
                "|{val:{ali}{wid}}|".format(wid=width, ali=align, val=value), end="\n"
            )
        return

    def __str__(self):
        line1 = f"Model (<Name>): {self.name}"
        line2 = f"  Number of zones: {len(self.zones)}"
        line3 = f"  Number of scenarios: {len(self.scenarios)}"

        output = (line1, line2, line3)

        return "\n".join(output)
