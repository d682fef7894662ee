# src/circlesim/models.py

import numpy as np

# Coloanele înregistrării unui cerc în tabloul (N, 5)
X, Y, R, DX, DY = range(5)
FIELDS = 5


class Ensemble:
    """
    Ansamblul de N cercuri, deținut câte o copie completă de fiecare worker.
    Ține starea colectivă într-un singur tablou contiguu:
      - data : (N, 5) float64, coloane x, y, r, dx, dy

    Un tablou contiguu pe rânduri face ca felia deținută de un worker
    [start, end) să fie un bloc continuu de memorie, exact ce cer
    colectivele (Bcast / Allgatherv) pe buffere.

    SRP: clasa stochează și actualizează starea; nu calculează forțe și nu
    comunică. Doar Synchronizer are voie să înlocuiască conținutul între worker-i.
    """

    def __init__(self, data: np.ndarray):
        data = np.ascontiguousarray(data, dtype=np.float64)
        if data.ndim != 2 or data.shape[1] != FIELDS:
            raise ValueError(f"Ensemble data must have shape (N, {FIELDS}), got {data.shape}")
        self.data = data

    # -------------------------------------------------------------------------
    # Constructori
    # -------------------------------------------------------------------------

    @classmethod
    def empty(cls, n: int) -> "Ensemble":
        """Buffer neinițializat (pentru worker-ii care primesc ansamblul prin broadcast)."""
        return cls(np.empty((n, FIELDS), dtype=np.float64))

    @classmethod
    def random(cls, n: int, cfg, rng: np.random.Generator) -> "Ensemble":
        """
        Creează n cercuri uniform în cutie, cu raze uniforme în [RMIN, RMAX]
        și deplasări nule. Se apelează pe UN SINGUR worker.

        Ordinea tragerilor (x, y, r per cerc) e fixă ⇒ același seed dă
        același ansamblu indiferent de numărul de worker-i.
        """
        data = np.zeros((n, FIELDS), dtype=np.float64)
        draws = rng.uniform(size=(n, 3))
        data[:, X] = cfg.XMIN + draws[:, 0] * (cfg.XMAX - cfg.XMIN)
        data[:, Y] = cfg.YMIN + draws[:, 1] * (cfg.YMAX - cfg.YMIN)
        data[:, R] = cfg.RMIN + draws[:, 2] * (cfg.RMAX - cfg.RMIN)
        return cls(data)

    @classmethod
    def from_arrays(cls, x, y, r) -> "Ensemble":
        """Ansamblu explicit (scenarii de test, stări încărcate)."""
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        r = np.asarray(r, dtype=np.float64)
        if not (x.shape == y.shape == r.shape) or x.ndim != 1:
            raise ValueError("x, y, r must be 1-D arrays of equal length")
        data = np.zeros((x.size, FIELDS), dtype=np.float64)
        data[:, X], data[:, Y], data[:, R] = x, y, r
        return cls(data)

    # -------------------------------------------------------------------------
    # Acces (view-uri, nu copii)
    # -------------------------------------------------------------------------

    @property
    def n(self) -> int:
        return self.data.shape[0]

    @property
    def x(self):
        return self.data[:, X]

    @property
    def y(self):
        return self.data[:, Y]

    @property
    def r(self):
        return self.data[:, R]

    @property
    def dx(self):
        return self.data[:, DX]

    @property
    def dy(self):
        return self.data[:, DY]

    def positions(self):
        """Copie (N, 2) a centrelor; folosită pentru cadre și animație."""
        return self.data[:, X:Y + 1].copy()

    # -------------------------------------------------------------------------
    # Actualizări
    # -------------------------------------------------------------------------

    def reset_displacements(self):
        """dx = dy = 0 pentru toate cercurile (începutul fiecărei iterații)."""
        self.data[:, DX:DY + 1] = 0.0

    def move(self):
        """Integrare: x += dx, y += dy pe tot ansamblul. r nu se atinge."""
        self.data[:, X] += self.data[:, DX]
        self.data[:, Y] += self.data[:, DY]

    def copy(self) -> "Ensemble":
        return Ensemble(self.data.copy())
