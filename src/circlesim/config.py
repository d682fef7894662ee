# src/circlesim/config.py

# Despre ansamblu (np):
#  - Starea este un singur np.ndarray (N, 5) float64, coloane x, y, r, dx, dy.
#  - Operațiile sunt vectorizate pe blocuri de rânduri (fără bucle Python pe perechi).
#  - Aleatorul se folosește O SINGURĂ DATĂ, pe worker-ul 0 (np.random.default_rng(seed)).
#  - Unități: arbitrare (coordonate în "pixeli" ai cutiei [XMIN, XMAX] × [YMIN, YMAX]).

from dataclasses import dataclass
from typing import Optional

IMPULSE_MODES = ("owner", "pairwise")


@dataclass(frozen=True)
class SimConfig:
    """
    ============================================================================
    CONFIGURAȚIA SIMULĂRII — CERCURI CARE SE RESPING
    ============================================================================

    SCOP
    ----
    Reunește toți parametrii numerici ai simulării. Restul codului citește
    exclusiv din acest obiect, identic pe toți worker-ii (SPMD).

    MODEL
    -----
    Pentru fiecare pereche ordonată (i, j), i ≠ j, cu
        dist = |c_i - c_j|,   Rsum = r_i + r_j,
    perechea se suprapune dacă dist < Rsum - EPSILON. Suprapunerea
        overlap = Rsum - dist
    se proiectează pe direcția centrelor (sau pe diagonala fixă dacă
    dist < EPSILON) și se aplică amortizat cu factorul 1/K.

    MODURI DE IMPULS (`impulse`)
    ----------------------------
    "owner"    → fiecare worker scrie doar deplasările cercurilor proprii;
                 reconcilierea = all-gather pe felii de mărime variabilă.
    "pairwise" → worker-ul scrie și impulsul oglindit pe j; reconcilierea =
                 all-reduce SUM pe tot vectorul de deplasări.
    În ambele moduri contorul numără perechi ORDONATE (fiecare pereche de 2 ori).
    """

    # -----------------------
    # NUCLEU
    # -----------------------

    N: int = 10000
    # Numărul de cercuri. Cost O(N²/P) per worker și per iterație.

    iterations: int = 20
    # Număr fix de iterații (nu există criteriu de convergență).

    # -----------------------
    # GEOMETRIE
    # -----------------------

    XMIN: float = 0.0
    XMAX: float = 1000.0
    YMIN: float = 0.0
    YMAX: float = 1000.0
    # Cutia în care se generează centrele (doar la inițializare; nu sunt pereți).

    RMIN: float = 10.0
    RMAX: float = 100.0
    # Intervalul razelor; r se trage o singură dată și nu se mai modifică.

    EPSILON: float = 1e-5
    # Toleranță pentru zgomotul numeric la distanțe aproape nule.

    K: float = 1.5
    # Constanta de amortizare a impulsului (overlap / K).

    # -----------------------
    # ALGORITM
    # -----------------------

    impulse: str = "owner"
    # Vezi docstring-ul clasei.

    block_rows: int = 256
    # Câte rânduri i procesează kernelul deodată (memorie ~ block_rows × N).

    seed: Optional[int] = None
    # Sămânța RNG, folosită doar de worker-ul care creează ansamblul.

    root: int = 0
    # Worker-ul care inițializează, raportează și difuzează pozițiile canonice.

    # --------
    # OUTPUT
    # --------

    output_dir: Optional[str] = None
    # Dacă e setat, se scriu iterations.dat și summary.dat (TSV).

    movie: bool = False
    # Dacă True, se scriu cadre gnuplot circles-%05d.gp în output_dir (sau în cwd).

    enable_vpython: bool = False
    # Dacă True, worker-ul root reține pozițiile și le animă la final (VPython).

    viz_n: int = 200
    # Număr maxim de cercuri afișate în animație.

    blas_threads: int = 1
    # Limita thread-urilor BLAS/OpenMP per worker (threadpoolctl), evită suprasubscrierea.

    def validate(self):
        """Ridică ValueError dacă un parametru este în afara domeniului."""
        if self.N < 0:
            raise ValueError(f"N must be >= 0, got {self.N}")
        if self.iterations < 0:
            raise ValueError(f"iterations must be >= 0, got {self.iterations}")
        if not (self.XMIN <= self.XMAX and self.YMIN <= self.YMAX):
            raise ValueError("Cutia trebuie să aibă XMIN <= XMAX și YMIN <= YMAX.")
        if not (0.0 <= self.RMIN <= self.RMAX):
            raise ValueError("Razele trebuie să respecte 0 <= RMIN <= RMAX.")
        if self.K <= 0.0:
            raise ValueError(f"K must be > 0, got {self.K}")
        if self.EPSILON < 0.0:
            raise ValueError(f"EPSILON must be >= 0, got {self.EPSILON}")
        if self.block_rows < 1:
            raise ValueError(f"block_rows must be >= 1, got {self.block_rows}")
        if self.impulse not in IMPULSE_MODES:
            raise ValueError(f"impulse necunoscut: {self.impulse} (alege din {IMPULSE_MODES})")
        if self.root < 0:
            raise ValueError(f"root must be >= 0, got {self.root}")
        if self.blas_threads < 1:
            raise ValueError(f"blas_threads must be >= 1, got {self.blas_threads}")
        return self
