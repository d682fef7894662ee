# src/circlesim/comm.py

# Despre colective:
#  - Toate operațiile sunt BLOCANTE: niciun worker nu trece de un apel colectiv
#    până când toți participanții au ajuns la același apel.
#  - Bufferele sunt np.ndarray contigue float64; obiectele mici (n, contoare)
#    trec prin variantele "object" (pickle în mpi4py).
#  - Două implementări cu aceeași interfață:
#       MPIComm   – procese separate, mpi4py (mpirun -n P ...)
#       LocalComm – același program SPMD pe thread-uri într-un singur proces

import copy
import logging
import threading

import numpy as np

logger = logging.getLogger(__name__)


class MPIComm:
    """Adaptor subțire peste un comunicator mpi4py (implicit COMM_WORLD)."""

    def __init__(self, comm=None):
        # Importul inițializează runtime-ul MPI; îl facem doar când e cerut explicit.
        from mpi4py import MPI
        self._MPI = MPI
        self.comm = MPI.COMM_WORLD if comm is None else comm
        self.rank = self.comm.Get_rank()
        self.size = self.comm.Get_size()

    def bcast_object(self, obj, root=0):
        return self.comm.bcast(obj, root=root)

    def bcast_array(self, buf: np.ndarray, root=0):
        self.comm.Bcast(buf, root=root)

    def reduce_sum(self, value, root=0):
        return self.comm.reduce(value, op=self._MPI.SUM, root=root)

    def allgatherv_rows(self, buf: np.ndarray, counts, displs):
        """
        Fiecare rank contribuie rândurile buf[displs[rank] : displs[rank] + counts[rank]]
        (in place); la final toți au toate feliile. counts pot fi inegale.
        """
        width = buf.shape[1] if buf.ndim > 1 else 1
        counts = [c * width for c in counts]
        displs = [d * width for d in displs]
        self.comm.Allgatherv(self._MPI.IN_PLACE, [buf, counts, displs, self._MPI.DOUBLE])

    def allreduce_sum(self, buf: np.ndarray):
        self.comm.Allreduce(self._MPI.IN_PLACE, buf, op=self._MPI.SUM)

    def barrier(self):
        self.comm.Barrier()


class LocalGroup:
    """
    Grup de `size` worker-i SPMD în același proces, câte un thread pe worker.

    Fiecare worker primește propriul LocalComm și își ține propria copie a
    datelor; singura vizibilitate între worker-i trece prin colective
    (slot partajat + threading.Barrier).

    Dacă un worker ridică o excepție, bariera este abortată: ceilalți primesc
    BrokenBarrierError în loc să aștepte la nesfârșit, iar run() re-ridică
    eroarea originală.
    """

    def __init__(self, size: int):
        if size < 1:
            raise ValueError(f"LocalGroup size must be >= 1, got {size}")
        self.size = size
        self._barrier = threading.Barrier(size)
        self._slots = [None] * size

    def comm(self, rank: int) -> "LocalComm":
        return LocalComm(self, rank)

    def run(self, target, *args, **kwargs):
        """Rulează target(comm, *args, **kwargs) pe fiecare worker; întoarce lista rezultatelor pe rank."""
        results = [None] * self.size
        errors = [None] * self.size

        def worker(rank):
            try:
                results[rank] = target(self.comm(rank), *args, **kwargs)
            except BaseException as exc:
                errors[rank] = exc
                self._barrier.abort()

        threads = [threading.Thread(target=worker, args=(rank,), name=f"circlesim-worker-{rank}")
                   for rank in range(self.size)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        # eroarea "reală" are prioritate față de barierele rupte din cauza ei
        primary = [e for e in errors if e is not None and not isinstance(e, threading.BrokenBarrierError)]
        if primary:
            logger.error("Worker failure, run aborted: %r", primary[0])
            raise primary[0]
        broken = [e for e in errors if e is not None]
        if broken:
            raise broken[0]
        return results


class LocalComm:
    """Interfața MPIComm implementată peste un LocalGroup."""

    def __init__(self, group: LocalGroup, rank: int):
        if not 0 <= rank < group.size:
            raise ValueError(f"rank {rank} out of range for size {group.size}")
        self.group = group
        self.rank = rank
        self.size = group.size

    def _exchange(self, value):
        # scrie → barieră → citește → barieră (slotul nu e suprascris înainte ca toți să citească)
        g = self.group
        g._slots[self.rank] = value
        g._barrier.wait()
        values = list(g._slots)
        g._barrier.wait()
        return values

    def bcast_object(self, obj, root=0):
        values = self._exchange(obj if self.rank == root else None)
        return obj if self.rank == root else copy.deepcopy(values[root])

    def bcast_array(self, buf: np.ndarray, root=0):
        values = self._exchange(buf.copy() if self.rank == root else None)
        if self.rank != root:
            if values[root].shape != buf.shape:
                raise ValueError(f"Bcast shape mismatch: {values[root].shape} vs {buf.shape}")
            buf[...] = values[root]

    def reduce_sum(self, value, root=0):
        values = self._exchange(value)
        if self.rank != root:
            return None
        total = values[0]
        for v in values[1:]:
            total = total + v
        return total

    def allgatherv_rows(self, buf: np.ndarray, counts, displs):
        lo = displs[self.rank]
        own = buf[lo:lo + counts[self.rank]].copy()
        blocks = self._exchange(own)
        for rank, block in enumerate(blocks):
            if rank != self.rank:
                if block.shape[0] != counts[rank]:
                    raise ValueError(f"rank {rank} sent {block.shape[0]} rows, expected {counts[rank]}")
                buf[displs[rank]:displs[rank] + counts[rank]] = block

    def allreduce_sum(self, buf: np.ndarray):
        values = self._exchange(buf.copy())
        total = values[0].copy()
        for v in values[1:]:
            total += v
        buf[...] = total

    def barrier(self):
        self.group._barrier.wait()
