import numpy as np
import pytest

from circlesim.config import SimConfig
from circlesim.models import Ensemble


def test_random_within_bounds():
    cfg = SimConfig(N=500)
    ens = Ensemble.random(cfg.N, cfg, np.random.default_rng(0))
    assert ens.n == 500
    assert np.all((ens.x >= cfg.XMIN) & (ens.x <= cfg.XMAX))
    assert np.all((ens.y >= cfg.YMIN) & (ens.y <= cfg.YMAX))
    assert np.all((ens.r >= cfg.RMIN) & (ens.r <= cfg.RMAX))
    assert not ens.dx.any() and not ens.dy.any()


def test_random_is_reproducible():
    cfg = SimConfig(N=20)
    a = Ensemble.random(cfg.N, cfg, np.random.default_rng(7))
    b = Ensemble.random(cfg.N, cfg, np.random.default_rng(7))
    np.testing.assert_array_equal(a.data, b.data)


def test_move_and_reset(two_circles):
    ens = two_circles
    ens.dx[:] = [1.0, -2.0]
    ens.dy[:] = [0.5, 0.0]
    ens.move()
    np.testing.assert_allclose(ens.x, [1.0, 13.0])
    np.testing.assert_allclose(ens.y, [0.5, 0.0])
    np.testing.assert_allclose(ens.r, [10.0, 10.0])
    ens.reset_displacements()
    assert not ens.dx.any() and not ens.dy.any()


def test_copy_is_independent(two_circles):
    c = two_circles.copy()
    c.x[0] = 99.0
    assert two_circles.x[0] == 0.0


def test_bad_shapes():
    with pytest.raises(ValueError):
        Ensemble(np.zeros((3, 4)))
    with pytest.raises(ValueError):
        Ensemble.from_arrays([0.0, 1.0], [0.0], [1.0, 1.0])


def test_empty_ensemble():
    assert Ensemble.empty(0).n == 0
