import pytest

from circlesim.config import SimConfig


def test_defaults():
    cfg = SimConfig().validate()
    assert (cfg.N, cfg.iterations) == (10000, 20)
    assert (cfg.EPSILON, cfg.K) == (1e-5, 1.5)
    assert cfg.impulse == "owner"


@pytest.mark.parametrize("kwargs", [
    {"N": -1}, {"iterations": -1}, {"K": 0.0}, {"EPSILON": -1.0},
    {"RMIN": 50.0, "RMAX": 10.0}, {"XMIN": 10.0, "XMAX": 0.0},
    {"block_rows": 0}, {"impulse": "halved"}, {"blas_threads": 0},
])
def test_invalid(kwargs):
    with pytest.raises(ValueError):
        SimConfig(**kwargs).validate()
