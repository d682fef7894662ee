# src/circlesim/sync.py

import logging
from typing import Optional

import numpy as np

from .models import Ensemble, DX, DY
from .partition import partition_table, block_range

logger = logging.getLogger(__name__)


class Synchronizer:
    """
    PROTOCOLUL DE SINCRONIZARE (singura cale prin care copiile se reconciliază)
    --------------------------------------------------------------------------
    Per iterație, în ordine:
      1) aggregate_overlaps  – suma contoarelor locale (reduce spre root)
      2) reconcile           – deplasările devin vizibile tuturor
                               "owner":    Allgatherv pe feliile deținute
                               "pairwise": Allreduce SUM pe tot (dx, dy)
      3) broadcast_positions – după integrarea locală, root difuzează starea canonică

    Mărimea feliei fiecărui worker se ia din partiția REALĂ (counts, displs),
    nu din N/P: pentru N nedivizibil cu P o felie uniformă ar pierde
    actualizările cercurilor din rest.
    """

    def __init__(self, comm, n: int, root: int = 0, impulse: str = "owner"):
        if not 0 <= root < comm.size:
            raise ValueError(f"root {root} out of range for {comm.size} workers")
        self.comm = comm
        self.n = n
        self.root = root
        self.impulse = impulse
        self.counts, self.displs = partition_table(n, comm.size)
        self.start, self.end = block_range(comm.rank, comm.size, n)

        # invariant de partiție: acoperire exactă, fără goluri/suprapuneri
        assert sum(self.counts) == n, f"partition covers {sum(self.counts)} of {n} circles"
        assert all(self.displs[k] + self.counts[k] == self.displs[k + 1]
                   for k in range(comm.size - 1)), "partition slices are not contiguous"
        assert (self.displs[self.comm.rank], self.counts[self.comm.rank]) == (self.start, self.end - self.start)

    # -------------------------------------------------------------------------
    # Replicare inițială (o singură dată, înainte de iterația 0)
    # -------------------------------------------------------------------------
    @staticmethod
    def replicate(comm, ensemble: Optional[Ensemble], root: int = 0) -> Ensemble:
        """
        root trimite n, apoi tot tabloul de cercuri; ceilalți alocă și primesc.
        Numai root are voie să aibă `ensemble` (singura sursă de aleator).
        """
        if comm.rank == root:
            if ensemble is None:
                raise ValueError("root worker must provide the initial ensemble")
            n = comm.bcast_object(ensemble.n, root=root)
        else:
            if ensemble is not None:
                raise ValueError(f"worker {comm.rank} must not create its own ensemble")
            n = comm.bcast_object(None, root=root)
            ensemble = Ensemble.empty(n)
        comm.bcast_array(ensemble.data, root=root)
        logger.debug("worker %d: ensemble of %d circles replicated", comm.rank, n)
        return ensemble

    # -------------------------------------------------------------------------
    # Pașii per iterație
    # -------------------------------------------------------------------------
    def aggregate_overlaps(self, local: int) -> Optional[int]:
        """Totalul pe root, None pe ceilalți."""
        total = self.comm.reduce_sum(int(local), root=self.root)
        return None if total is None else int(total)

    def reconcile(self, ensemble: Ensemble):
        if ensemble.n != self.n:
            raise ValueError(f"ensemble has {ensemble.n} circles, protocol expects {self.n}")
        if self.impulse == "pairwise":
            disp = np.ascontiguousarray(ensemble.data[:, DX:DY + 1])
            self.comm.allreduce_sum(disp)
            ensemble.data[:, DX:DY + 1] = disp
        else:
            self.comm.allgatherv_rows(ensemble.data, self.counts, self.displs)

    def broadcast_positions(self, ensemble: Ensemble):
        self.comm.bcast_array(ensemble.data, root=self.root)
