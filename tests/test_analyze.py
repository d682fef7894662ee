import pandas as pd
import pytest

from circlesim.analyze import load_runs, scaling_table, weak_sizes, main
from circlesim.io import DataWriter


def make_runs(tmp_path, rows):
    dirs = []
    for i, (n, workers, elapsed) in enumerate(rows):
        d = tmp_path / f"run{i}"
        DataWriter(str(d)).write_summary(n, 10, workers, elapsed)
        dirs.append(str(d))
    return dirs


def test_strong_scaling(tmp_path):
    dirs = make_runs(tmp_path, [(1000, 1, 8.0), (1000, 1, 10.0), (1000, 2, 4.5), (1000, 4, 3.0)])
    table = scaling_table(load_runs(dirs), mode="strong")
    assert table["workers"].tolist() == [1, 2, 4]
    assert table["reps"].tolist() == [2, 1, 1]
    assert table["speedup"].tolist() == pytest.approx([1.0, 2.0, 3.0])
    assert table["efficiency"].tolist() == pytest.approx([1.0, 1.0, 0.75])


def test_weak_scaling(tmp_path):
    dirs = make_runs(tmp_path, [(1000, 1, 4.0), (2000, 4, 5.0)])
    table = scaling_table(load_runs(dirs), mode="weak")
    assert table["efficiency"].tolist() == pytest.approx([1.0, 0.8])


def test_weak_sizes():
    assert weak_sizes(1000, [1, 4, 9]) == [1000, 2000, 3000]


def test_missing_baseline(tmp_path):
    with pytest.raises(ValueError):
        scaling_table(load_runs(make_runs(tmp_path, [(1000, 2, 1.0)])))


def test_strong_requires_fixed_size(tmp_path):
    with pytest.raises(ValueError):
        scaling_table(load_runs(make_runs(tmp_path, [(1000, 1, 1.0), (2000, 2, 1.0)])))


def test_missing_summary(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_runs([str(tmp_path)])


def test_cli_writes_table(tmp_path, capsys):
    dirs = make_runs(tmp_path, [(1000, 1, 2.0), (1414, 2, 2.5)])
    out = tmp_path / "weak.dat"
    main(["--runs", *dirs, "--mode", "weak", "--out", str(out)])
    df = pd.read_csv(out, sep="\t")
    assert df["efficiency"].tolist() == pytest.approx([1.0, 0.8])
    assert "[WARN] workers=2" not in capsys.readouterr().out
