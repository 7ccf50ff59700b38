# -------------------------------------------------
# Relaxation scheme objects used in DISCADJ.
# Applied by the BGS driver to the flow adjoint update.
# -------------------------------------------------

__all__ = ["AitkenRelaxation", "UnderRelaxation"]

import numpy as np


class AitkenRelaxation:
    """
    Class to define Aitken relaxation settings and hold the relaxation state
    of each zone during a BGS loop.
    """

    def __init__(
        self,
        theta_init=1.0,
        theta_min=0.25,
        theta_max=2.0,
        aitken_tol=1e-13,
        debug=False,
    ):
        """
        Construct an Aitken relaxation setting object.

        Parameters
        ----------
        theta_init : float
            Initial relaxation parameter.
        theta_min : float
            Minimum relaxation parameter. Defaults to 0.25.
        theta_max : float
            Maximum relaxation parameter. Defaults to 2.0.
        aitken_tol : float
            Tolerance for the denominator in Aitken equation.
            When met, Aitken relaxation stops and theta is set to unity.
        """
        self.theta_init = theta_init
        self.theta_min = theta_min
        self.theta_max = theta_max
        self.aitken_tol = aitken_tol
        self.aitken_debug = debug

        self.theta = {}
        self.prev_update = {}

        return

    def reset(self, zones):
        """
        Restart the relaxation at the beginning of a BGS loop
        """
        for zone in zones:
            self.theta[zone.id] = self.theta_init
            self.prev_update[zone.id] = None
        return

    def relax(self, comm, zone, update):
        """
        Compute the relaxed update of a zone from the unrelaxed update

        Parameters
        ----------
        comm: MPI communicator
            the norms in the Aitken update are summed over processors
        zone: :class:`~zone.Zone`
            the zone the update belongs to
        update: np.ndarray
            the unrelaxed change of the adjoint over one BGS step
        """
        prev = self.prev_update.get(zone.id)
        theta = self.theta.get(zone.id, self.theta_init)

        if prev is not None:
            up_diff = update - prev
            norm2 = comm.allreduce(np.real(np.sum(np.conj(up_diff) * up_diff)))

            if norm2 > self.aitken_tol:
                value = comm.allreduce(np.real(np.sum(np.conj(up_diff) * update)))
                theta *= 1.0 - value / norm2
                theta = np.max((np.min((theta, self.theta_max)), self.theta_min))
            else:
                theta = 1.0

            if self.aitken_debug and comm.rank == 0:
                print(f"Aitken zone {zone.name}: theta = {theta}", flush=True)

        self.theta[zone.id] = theta
        self.prev_update[zone.id] = np.array(update, copy=True)

        return theta * update


class UnderRelaxation:
    def __init__(self, theta_adjoint=1.0):
        self.theta_adjoint = theta_adjoint

    def reset(self, zones):
        return

    def relax(self, comm, zone, update):
        return self.theta_adjoint * update
