# src/circlesim/simulator.py

# Despre modelul SPMD:
#  - Fiecare worker rulează EXACT același cod (Simulator.run) pe propria copie
#    a ansamblului; diferă doar intervalul deținut [start, end).
#  - Worker-ii avansează în lock-step prin colective blocante (Synchronizer).
#  - Doar root creează ansamblul, raportează și scrie fișiere.

import logging
import os
import time
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .config import SimConfig
from .models import Ensemble
from .metrics import displacement_stats, unique_pairs
from .physics import OverlapKernel
from .sync import Synchronizer
from .io import DataWriter, FrameWriter

logger = logging.getLogger(__name__)


@dataclass
class SimResult:
    """Rezultatul unui worker. Contoarele agregate există doar pe root (None în rest)."""
    rank: int
    workers: int
    overlaps: List[Optional[int]] = field(default_factory=list)
    iter_times: List[float] = field(default_factory=list)
    mean_disp: List[float] = field(default_factory=list)
    max_disp: List[float] = field(default_factory=list)
    elapsed: float = 0.0
    ensemble: Optional[Ensemble] = None


class Simulator:
    """
    ORCHESTRATORUL SIMULĂRII
    ------------------------
    Init → {Iterate} × iterations → Done

    • Init: root creează ansamblul (sau folosește cel primit), îl replică la toți.
    • Iterate: reset dx,dy → kernel pe intervalul propriu → reduce contoare →
      reconciliere deplasări → integrare locală (toți, redundant) →
      broadcast poziții canonice de la root → raport pe root.
    • Done: timp total pe root; ansamblul final rămâne în SimResult.

    Nicio iterație nu e sărită sau repetată.
    """

    def __init__(self, cfg: SimConfig, comm, ensemble: Optional[Ensemble] = None):
        self.cfg = cfg.validate()
        self.comm = comm
        if not 0 <= cfg.root < comm.size:
            raise ValueError(f"root {cfg.root} out of range for {comm.size} workers")
        self.is_root = (comm.rank == cfg.root)
        if ensemble is not None and not self.is_root:
            raise ValueError("only the root worker may supply the initial ensemble")
        # copia proprie: nu modificăm ansamblul apelantului
        self._initial = ensemble.copy() if ensemble is not None else None
        self.kernel = OverlapKernel.from_config(cfg)

    # -------------------------------------------------------------------------
    # Init
    # -------------------------------------------------------------------------
    def _create(self) -> Optional[Ensemble]:
        if not self.is_root:
            return None
        if self._initial is not None:
            return self._initial
        rng = np.random.default_rng(self.cfg.seed)
        return Ensemble.random(self.cfg.N, self.cfg, rng)

    def _frame_writer(self):
        if not (self.cfg.movie and self.is_root):
            return None
        c = self.cfg
        return FrameWriter(c.output_dir or os.getcwd(), (c.XMIN, c.XMAX, c.YMIN, c.YMAX))

    # -------------------------------------------------------------------------
    # Bucla principală
    # -------------------------------------------------------------------------
    def run(self) -> SimResult:
        cfg, comm = self.cfg, self.comm

        ensemble = Synchronizer.replicate(comm, self._create(), root=cfg.root)
        sync = Synchronizer(comm, ensemble.n, root=cfg.root, impulse=cfg.impulse)
        start, end = sync.start, sync.end
        logger.debug("worker %d/%d owns circles [%d, %d)", comm.rank, comm.size, start, end)

        result = SimResult(rank=comm.rank, workers=comm.size)
        frames = self._frame_writer()

        # Traiectorii pentru VPython (doar root; atenție memorie)
        r_series = None
        if cfg.enable_vpython and self.is_root:
            r_series = np.zeros((ensemble.n, cfg.iterations + 1, 2))
            r_series[:, 0, :] = ensemble.positions()

        tstart_prog = time.perf_counter()
        if frames is not None:
            frames.write(0, ensemble)

        for it in range(cfg.iterations):
            tstart_iter = time.perf_counter()
            ensemble.reset_displacements()

            local_overlaps = self.kernel.compute(ensemble, start, end)
            total_overlaps = sync.aggregate_overlaps(local_overlaps)

            sync.reconcile(ensemble)
            stats = displacement_stats(ensemble)
            ensemble.move()
            sync.broadcast_positions(ensemble)

            elapsed_iter = time.perf_counter() - tstart_iter
            result.overlaps.append(total_overlaps)
            result.iter_times.append(elapsed_iter)
            result.mean_disp.append(stats['mean'])
            result.max_disp.append(stats['max'])

            if self.is_root:
                print(f"Iteration {it + 1} of {cfg.iterations}, {total_overlaps} overlaps ({elapsed_iter:f} s)",
                      flush=True)
                logger.debug("iteration %d: %d unique pairs, max |d| = %g",
                             it + 1, unique_pairs(total_overlaps), stats['max'])
                if frames is not None:
                    frames.write(it + 1, ensemble)
                if r_series is not None:
                    r_series[:, it + 1, :] = ensemble.positions()

        result.elapsed = time.perf_counter() - tstart_prog
        result.ensemble = ensemble

        if self.is_root:
            print(f"Elapsed time: {result.elapsed:f}", flush=True)
            if cfg.output_dir:
                writer = DataWriter(cfg.output_dir)
                paths = (writer.write_iterations(result.overlaps, result.iter_times,
                                                 result.mean_disp, result.max_disp),
                         writer.write_summary(ensemble.n, cfg.iterations, comm.size,
                                              result.elapsed, cfg.impulse))
                for p in paths:
                    logger.info("Wrote: %s", p)
            if r_series is not None:
                from .vis import animate_vpython
                animate_vpython(r_series, ensemble.r, viz_n=cfg.viz_n,
                                box=(cfg.XMIN, cfg.XMAX, cfg.YMIN, cfg.YMAX))

        return result


def run_local(cfg: SimConfig, workers: int, ensemble: Optional[Ensemble] = None) -> SimResult:
    """
    Rulează simularea cu `workers` worker-i SPMD în procesul curent (thread-uri)
    și întoarce rezultatul worker-ului root.
    """
    from .comm import LocalGroup

    def program(comm):
        initial = ensemble if comm.rank == cfg.root else None
        return Simulator(cfg, comm, initial).run()

    results = LocalGroup(workers).run(program)
    return results[cfg.root]
