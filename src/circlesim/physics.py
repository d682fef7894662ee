# src/circlesim/physics.py

# Despre NumPy (np):
#  - Pentru un bloc de rânduri i ∈ [lo, hi) construim matrici (B, N) cu
#    Δx = x_j - x_i, Δy = y_j - y_i, dist, Rsum prin broadcasting.
#  - Memoria unui bloc este ~ 8 tablouri × B × N × 8 octeți; B = block_rows.
#  - Reducerile pe axis=1 adună contribuțiile tuturor j pentru fiecare i.

import numpy as np

from .models import Ensemble, DX, DY

SQRT2 = np.sqrt(2.0)

# =============================================================================
# KERNEL DE SUPRAPUNERE (brute force, toate perechile)
# -----------------------------------------------------------------------------
# Pentru fiecare pereche ordonată (i, j), i în intervalul deținut, j în TOT
# ansamblul, i ≠ j:
#   dist = hypot(x_j - x_i, y_j - y_i),   Rsum = r_i + r_j
#   suprapunere  ⇔  dist < Rsum - EPSILON
#   overlap      = Rsum - dist  (> 0)
#   dacă dist < EPSILON:  overlap_x = overlap_y = overlap / sqrt(2)
#   altfel:               overlap_x = overlap / dist · (x_j - x_i)
#                         overlap_y = overlap / dist · (y_j - y_i)
#   d_i -= overlap / K
#   d_j += overlap / K      (doar în modul "pairwise")
#
# Contorul numără perechile ORDONATE: fiecare pereche neordonată apare o dată
# ca (i, j) și o dată ca (j, i), eventual pe worker-i diferiți ⇒ totalul
# agregat este 2 × numărul de perechi unice.
#
# În modul "owner" impulsul oglindit pe j nu se scrie: este exact impulsul pe
# care proprietarul lui j îl calculează pentru perechea (j, i). Astfel fiecare
# cerc primește o contribuție per vecin, indiferent de P.
# =============================================================================
class OverlapKernel:
    """Calculează deplasările de respingere pentru intervalul deținut de un worker."""

    def __init__(self, eps: float, k: float, mirror: bool = False, block_rows: int = 256):
        #  eps        – toleranța EPSILON
        #  k          – constanta de amortizare K
        #  mirror     – True în modul "pairwise" (scrie și impulsul pe j)
        #  block_rows – mărimea blocului de rânduri procesat vectorizat
        self.eps, self.k = float(eps), float(k)
        self.mirror = bool(mirror)
        self.block_rows = int(block_rows)

    @classmethod
    def from_config(cls, cfg):
        return cls(cfg.EPSILON, cfg.K, mirror=(cfg.impulse == "pairwise"),
                   block_rows=cfg.block_rows)

    def compute(self, ensemble: Ensemble, start: int, end: int) -> int:
        """
        Acumulează în ensemble.dx/dy impulsurile perechilor (i, j), i ∈ [start, end).

        Parametri
        ---------
        ensemble : Ensemble – copia locală a worker-ului (dx, dy deja resetate)
        start, end : int    – intervalul semideschis deținut

        Returnează
        ----------
        int – numărul local de perechi ordonate suprapuse (>= 0).
        Interval gol ⇒ 0, fără efecte.
        """
        if start >= end:
            return 0

        data = ensemble.data
        x, y, r = ensemble.x, ensemble.y, ensemble.r
        count = 0

        for lo in range(start, end, self.block_rows):
            hi = min(lo + self.block_rows, end)
            rows = np.arange(hi - lo)

            deltax = x[None, :] - x[lo:hi, None]           # (B, N)
            deltay = y[None, :] - y[lo:hi, None]
            dist = np.hypot(deltax, deltay)
            rsum = r[lo:hi, None] + r[None, :]

            hit = dist < rsum - self.eps
            hit[rows, rows + lo] = False                    # i == j
            count += int(np.count_nonzero(hit))

            overlap = np.where(hit, rsum - dist, 0.0)
            coincident = dist < self.eps
            safe = np.where(coincident, 1.0, dist)          # fără împărțire la zero
            diag = overlap / SQRT2
            overlap_x = np.where(coincident, diag, overlap / safe * deltax)
            overlap_y = np.where(coincident, diag, overlap / safe * deltay)

            data[lo:hi, DX] -= overlap_x.sum(axis=1) / self.k
            data[lo:hi, DY] -= overlap_y.sum(axis=1) / self.k

            if self.mirror:
                data[:, DX] += overlap_x.sum(axis=0) / self.k
                data[:, DY] += overlap_y.sum(axis=0) / self.k

        return count
