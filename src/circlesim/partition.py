# src/circlesim/partition.py

# Împărțire statică pe blocuri contigue: worker-ul k deține
#   [floor(k·N/P), floor((k+1)·N/P))
# Pentru N < P unele intervale sunt goale (valide, kernelul nu face nimic).

from typing import List, Tuple


def block_range(rank: int, size: int, n: int) -> Tuple[int, int]:
    """Intervalul semideschis [start, end) deținut de `rank` din `size` worker-i."""
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")
    if not 0 <= rank < size:
        raise ValueError(f"rank {rank} out of range for size {size}")
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    return (rank * n) // size, ((rank + 1) * n) // size


def partition_table(n: int, size: int) -> Tuple[List[int], List[int]]:
    """
    (counts, displs) pentru toți worker-ii, în rânduri.
    counts[k] = lungimea reală a feliei lui k (poate diferi între worker-i),
    displs[k] = primul index al feliei.
    """
    counts, displs = [], []
    for rank in range(size):
        start, end = block_range(rank, size, n)
        counts.append(end - start)
        displs.append(start)
    return counts, displs
