# src/circlesim/metrics.py

# NumPy: toate calculele sunt vectorizate pe ansamblu:
#  - norma deplasării per cerc => hypot(dx, dy), apoi mean/max peste cercuri;
#  - cutia de încadrare => min/max pe x ± r, y ± r.

import numpy as np

from .models import Ensemble


def unique_pairs(ordered_overlaps: int) -> int:
    """
    Numărul de perechi neordonate suprapuse.

    Contorul raportat de kernel numără perechile ORDONATE (fiecare pereche
    apare ca (i, j) și ca (j, i)), deci totalul agregat este mereu par.
    """
    if ordered_overlaps % 2:
        raise ValueError(f"ordered overlap count must be even, got {ordered_overlaps}")
    return ordered_overlaps // 2


def displacement_stats(ensemble: Ensemble):
    """
    Mărimea deplasărilor din iterația curentă (după reconciliere).

    Returnează
    ----------
    dict cu:
      - 'mean' : float – media |d_i| peste cercuri
      - 'max'  : float – max |d_i|
    Ansamblu gol ⇒ 0.0 pentru ambele.
    """
    if ensemble.n == 0:
        return {'mean': 0.0, 'max': 0.0}
    norms = np.hypot(ensemble.dx, ensemble.dy)
    return {'mean': float(norms.mean()), 'max': float(norms.max())}


def bounding_box(ensemble: Ensemble):
    """(xmin, xmax, ymin, ymax) care cuprinde toate cercurile, inclusiv razele."""
    if ensemble.n == 0:
        return (0.0, 0.0, 0.0, 0.0)
    x, y, r = ensemble.x, ensemble.y, ensemble.r
    return (float((x - r).min()), float((x + r).max()),
            float((y - r).min()), float((y + r).max()))
