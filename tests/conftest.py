import numpy as np
import pytest

from circlesim.config import SimConfig
from circlesim.models import Ensemble


@pytest.fixture
def two_circles():
    """Scenariul de referință: (0,0,r=10) și (15,0,r=10) ⇒ overlap = 5."""
    return Ensemble.from_arrays([0.0, 15.0], [0.0, 0.0], [10.0, 10.0])


@pytest.fixture
def random_ensemble():
    cfg = SimConfig(N=103)
    return Ensemble.random(cfg.N, cfg, np.random.default_rng(1234))


@pytest.fixture
def one_pair_ensemble():
    """Un singur cuplu suprapus (0, 1); restul cercurilor sunt departe unele de altele."""
    x = [0.0, 15.0, 500.0, 1000.0, 1500.0, 2000.0, 2500.0]
    y = [0.0, 0.0, 500.0, 0.0, 1000.0, 0.0, 2000.0]
    r = [10.0] * 7
    return Ensemble.from_arrays(x, y, r)
