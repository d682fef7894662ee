import pytest

from circlesim.partition import block_range, partition_table


@pytest.mark.parametrize("n", [0, 1, 2, 3, 7, 10, 29, 100])
@pytest.mark.parametrize("size", [1, 2, 3, 5, 8, 13])
def test_ranges_cover_exactly(n, size):
    covered = []
    prev_end = 0
    for rank in range(size):
        start, end = block_range(rank, size, n)
        assert start == prev_end
        assert start <= end
        covered.extend(range(start, end))
        prev_end = end
    assert covered == list(range(n))


def test_fewer_circles_than_workers_gives_empty_ranges():
    ranges = [block_range(k, 5, 2) for k in range(5)]
    assert sum(1 for s, e in ranges if s == e) == 3
    assert [i for s, e in ranges for i in range(s, e)] == [0, 1]


def test_partition_table_uneven():
    counts, displs = partition_table(10, 3)
    assert counts == [3, 3, 4]
    assert displs == [0, 3, 6]


def test_floor_formula():
    assert block_range(2, 4, 10) == (5, 7)


@pytest.mark.parametrize("rank,size,n", [(0, 0, 5), (3, 3, 5), (-1, 2, 5), (0, 2, -1)])
def test_invalid_arguments(rank, size, n):
    with pytest.raises(ValueError):
        block_range(rank, size, n)
