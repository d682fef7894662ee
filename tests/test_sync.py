import numpy as np
import pytest

from circlesim.comm import LocalGroup
from circlesim.models import Ensemble
from circlesim.sync import Synchronizer


def test_replicate_from_root_only(random_ensemble):
    def program(comm):
        mine = random_ensemble.copy() if comm.rank == 0 else None
        return Synchronizer.replicate(comm, mine, root=0).data

    for data in LocalGroup(3).run(program):
        np.testing.assert_array_equal(data, random_ensemble.data)


def test_replicate_rejects_second_source(random_ensemble):
    def program(comm):
        return Synchronizer.replicate(comm, random_ensemble.copy(), root=0)

    with pytest.raises(ValueError):
        LocalGroup(2).run(program)


@pytest.mark.parametrize("n,size", [(7, 3), (10, 4), (2, 5), (11, 2)])
def test_reconcile_uses_real_slice_sizes(n, size):
    # fiecare worker scrie dx = rank doar pe felia proprie, gunoi în rest
    def program(comm):
        ens = Ensemble(np.zeros((n, 5)))
        sync = Synchronizer(comm, n)
        ens.dx[:] = -99.0
        ens.dx[sync.start:sync.end] = comm.rank
        sync.reconcile(ens)
        return ens.dx.copy(), sync.counts

    results = LocalGroup(size).run(program)
    counts = results[0][1]
    expected = np.repeat(np.arange(size, dtype=float), counts)
    for dx, _ in results:
        np.testing.assert_array_equal(dx, expected)


def test_reconcile_pairwise_sums_full_vectors():
    def program(comm):
        ens = Ensemble(np.zeros((4, 5)))
        ens.dx[:] = 1.0
        ens.dy[:] = comm.rank
        Synchronizer(comm, 4, impulse="pairwise").reconcile(ens)
        return ens

    for ens in LocalGroup(3).run(program):
        np.testing.assert_array_equal(ens.dx, np.full(4, 3.0))
        np.testing.assert_array_equal(ens.dy, np.full(4, 3.0))
        assert not ens.x.any()


def test_aggregate_and_broadcast():
    def program(comm):
        sync = Synchronizer(comm, 3, root=0)
        total = sync.aggregate_overlaps(2 * comm.rank)
        ens = Ensemble(np.full((3, 5), float(comm.rank)))
        sync.broadcast_positions(ens)
        return total, ens.data

    results = LocalGroup(3).run(program)
    assert [t for t, _ in results] == [6, None, None]
    for _, data in results:
        assert not data.any()


def test_wrong_ensemble_size_rejected():
    def program(comm):
        Synchronizer(comm, 5).reconcile(Ensemble(np.zeros((4, 5))))

    with pytest.raises(ValueError):
        LocalGroup(1).run(program)
