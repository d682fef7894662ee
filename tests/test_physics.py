import numpy as np
import pytest

from circlesim.config import SimConfig
from circlesim.models import Ensemble
from circlesim.physics import OverlapKernel

K = 1.5
EPS = 1e-5


def kernel(**kw):
    return OverlapKernel(EPS, K, **kw)


def test_reference_scenario(two_circles):
    count = kernel().compute(two_circles, 0, 2)
    assert count == 2
    np.testing.assert_allclose(two_circles.dx, [-5.0 / K, 5.0 / K])
    np.testing.assert_allclose(two_circles.dy, [0.0, 0.0])


def test_reference_scenario_split_across_ranges(two_circles):
    a, b = two_circles.copy(), two_circles.copy()
    k = kernel()
    assert k.compute(a, 0, 1) + k.compute(b, 1, 2) == 2
    assert a.dx[0] == pytest.approx(-5.0 / K)
    assert b.dx[1] == pytest.approx(5.0 / K)


def test_coincident_centers_use_fixed_diagonal():
    ens = Ensemble.from_arrays([100.0, 100.0], [200.0, 200.0], [50.0, 50.0])
    count = kernel().compute(ens, 0, 2)
    assert count == 2
    step = 100.0 / (np.sqrt(2.0) * K)
    assert np.all(np.isfinite(ens.data))
    np.testing.assert_allclose(np.abs(ens.dx), [step, step])
    np.testing.assert_allclose(np.abs(ens.dy), [step, step])


def test_no_overlap_leaves_displacements_zero():
    ens = Ensemble.from_arrays([0.0, 100.0, 300.0], [0.0, 0.0, 0.0], [10.0, 10.0, 10.0])
    assert kernel().compute(ens, 0, 3) == 0
    assert not ens.dx.any() and not ens.dy.any()


def test_touching_within_epsilon_is_not_overlap():
    ens = Ensemble.from_arrays([0.0, 20.0 - EPS / 2], [0.0, 0.0], [10.0, 10.0])
    assert kernel().compute(ens, 0, 2) == 0


def test_single_pair_counted_twice(one_pair_ensemble):
    assert kernel().compute(one_pair_ensemble, 0, one_pair_ensemble.n) == 2


def test_empty_range_is_noop(two_circles):
    before = two_circles.data.copy()
    assert kernel().compute(two_circles, 1, 1) == 0
    np.testing.assert_array_equal(two_circles.data, before)


def test_pairwise_mode_updates_both_endpoints(two_circles):
    # rândul 0 vede perechea (0, 1): -5/K pe 0, +5/K oglindit pe 1
    count = kernel(mirror=True).compute(two_circles, 0, 1)
    assert count == 1
    np.testing.assert_allclose(two_circles.dx, [-5.0 / K, 5.0 / K])


def test_block_size_does_not_change_result(random_ensemble):
    a, b = random_ensemble.copy(), random_ensemble.copy()
    ca = kernel(block_rows=1).compute(a, 10, 80)
    cb = kernel(block_rows=256).compute(b, 10, 80)
    assert ca == cb
    np.testing.assert_allclose(a.dx, b.dx, rtol=1e-12, atol=1e-12)
    np.testing.assert_allclose(a.dy, b.dy, rtol=1e-12, atol=1e-12)


def test_from_config():
    k = OverlapKernel.from_config(SimConfig(impulse="pairwise", block_rows=8))
    assert k.mirror and k.block_rows == 8 and k.k == 1.5
