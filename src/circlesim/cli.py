# src/circlesim/cli.py

# Lansare:
#   mpirun -n P circlesim [ncircles [iterations]]                (procese MPI)
#   circlesim [ncircles [iterations]] --backend local --workers P (thread-uri, un proces)

import argparse
import logging

from threadpoolctl import threadpool_limits

from .config import SimConfig, IMPULSE_MODES
from .logging_config import setup_logging
from .simulator import Simulator, run_local

logger = logging.getLogger(__name__)


def build_parser():
    """
    Argumentele din linia de comandă.
    Pozițional: [ncircles [iterations]], apoi opțiunile.
    """
    p = argparse.ArgumentParser(prog='circlesim',
                                description='Circles intersection: parallel pairwise repulsion (SPMD)')

    # --- NUCLEU ---
    p.add_argument('ncircles', type=int, nargs='?', default=10000,
                   help="Numărul de cercuri N (cost ~ O(N²/P) per worker).")
    p.add_argument('iterations', type=int, nargs='?', default=20,
                   help="Numărul fix de iterații.")

    # --- PARALELISM ---
    p.add_argument('--backend', choices=['mpi', 'local'], default='mpi',
                   help="'mpi' = procese sub mpirun (P dat de runtime); 'local' = thread-uri în acest proces.")
    p.add_argument('--workers', type=int, default=1,
                   help="Numărul de worker-i pentru --backend local (ignorat sub MPI).")
    p.add_argument('--impulse', choices=list(IMPULSE_MODES), default='owner',
                   help="'owner' = deplasări doar pe cercurile proprii + all-gather; "
                        "'pairwise' = impuls pe ambele capete + all-reduce.")
    p.add_argument('--block-rows', type=int, default=256,
                   help="Rânduri procesate vectorizat de kernel (memorie ~ block_rows × N).")
    p.add_argument('--blas-threads', type=int, default=1,
                   help="Thread-uri BLAS/OpenMP per worker (threadpoolctl).")

    # --- RNG / OUTPUT ---
    p.add_argument('--seed', type=int, default=None,
                   help="Sămânța RNG (folosită doar de worker-ul care creează cercurile).")
    p.add_argument('--output', type=str, default=None,
                   help="Directorul pentru iterations.dat, summary.dat și cadre.")
    p.add_argument('--movie', action='store_true',
                   help="Scrie cadre gnuplot circles-%%05d.gp (depanare, nu pentru măsurători).")
    p.add_argument('--enable-vpython', action='store_true',
                   help="Animă cercurile în VPython după simulare.")
    p.add_argument('--viz-n', type=int, default=200,
                   help="Număr maxim de cercuri afișate.")

    # --- LOGGING ---
    p.add_argument('--log-level', default='WARNING',
                   choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                   help="Nivelul logger-ului 'circlesim' (progresul merge oricum pe stdout).")
    p.add_argument('--log-file', type=str, default=None,
                   help="Fișier de log (sufix .<rank> pentru rank > 0).")
    return p


def build_config(a) -> SimConfig:
    """Construiește și validează SimConfig; ValueError pentru argumente în afara domeniului."""
    if a.workers < 1:
        raise ValueError(f"--workers must be >= 1, got {a.workers}")
    if a.viz_n < 1:
        raise ValueError(f"--viz-n must be >= 1, got {a.viz_n}")
    cfg = SimConfig(
        N=a.ncircles, iterations=a.iterations,
        impulse=a.impulse, block_rows=a.block_rows, seed=a.seed,
        output_dir=a.output, movie=a.movie,
        enable_vpython=a.enable_vpython, viz_n=a.viz_n,
        blas_threads=a.blas_threads,
    )
    return cfg.validate()


def run(argv=None):
    """
    Flux:
      1) Parsează și validează argumentele (înainte de orice coordonare între worker-i).
      2) Configurează logging-ul (cu rank-ul worker-ului).
      3) Rulează simularea pe backend-ul ales, cu thread-urile BLAS limitate.
    """
    parser = build_parser()
    a = parser.parse_args(argv)
    try:
        cfg = build_config(a)
    except ValueError as e:
        parser.error(str(e))

    level = getattr(logging, a.log_level)

    with threadpool_limits(limits=cfg.blas_threads):
        if a.backend == 'local':
            setup_logging(level=level, log_file=a.log_file)
            logger.info("local backend, %d workers, N=%d, %d iterations", a.workers, cfg.N, cfg.iterations)
            result = run_local(cfg, a.workers)
        else:
            from .comm import MPIComm
            comm = MPIComm()
            setup_logging(level=level, log_file=a.log_file, rank=comm.rank)
            logger.info("MPI backend, %d workers, N=%d, %d iterations", comm.size, cfg.N, cfg.iterations)
            result = Simulator(cfg, comm).run()
    return result


def main(argv=None):
    run(argv)


if __name__ == '__main__':
    main()
