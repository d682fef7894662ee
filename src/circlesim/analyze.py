# src/circlesim/analyze.py
"""
Analiză post-procesare: scalare strong / weak din mai multe rulări.

Fiecare director de rulare conține summary.dat (scris de DataWriter):
  n, iterations, workers, impulse, elapsed

Strong scaling (N fix, P variabil):
  speedup(P)    = T(1) / T(P)
  efficiency(P) = speedup(P) / P

Weak scaling (N crescut cu P astfel încât munca per worker să fie constantă;
pentru kernelul O(N²) asta înseamnă N(P) = N0 · sqrt(P)):
  efficiency(P) = T(1) / T(P)

Rulările repetate cu același P sunt mediate (media timpilor).
"""

import argparse
import os
from typing import List

import numpy as np
import pandas as pd

SUMMARY_FILE = "summary.dat"

# ------------------------- I/O helpers -------------------------

def _read_dat(path: str) -> pd.DataFrame:
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Nu am găsit fișierul: {os.path.abspath(path)}")
    df = pd.read_csv(path, sep="\t")
    df.columns = [c.strip().lstrip("\ufeff") for c in df.columns]
    return df

def load_runs(run_dirs: List[str]) -> pd.DataFrame:
    """Concatenează summary.dat din fiecare director într-un singur tabel."""
    if not run_dirs:
        raise ValueError("Trebuie dat cel puțin un director de rulare.")
    frames = []
    for d in run_dirs:
        df = _read_dat(os.path.join(d, SUMMARY_FILE))
        missing = {"n", "workers", "elapsed"} - set(df.columns)
        if missing:
            raise ValueError(f"{d}/{SUMMARY_FILE}: lipsesc coloanele {sorted(missing)}")
        df["run"] = d
        frames.append(df)
    return pd.concat(frames, ignore_index=True)

# ------------------------- Core formulas -------------------------

def scaling_table(runs: pd.DataFrame, mode: str = "strong") -> pd.DataFrame:
    """
    Tabel pe worker-i: workers, n, elapsed (medie), reps, speedup, efficiency.

    Necesită o rulare de bază cu workers == 1.
    În modul strong toate rulările trebuie să aibă același n.
    """
    if mode not in ("strong", "weak"):
        raise ValueError(f"mode necunoscut: {mode}")
    if mode == "strong" and runs["n"].nunique() != 1:
        raise ValueError(f"Strong scaling cere același n în toate rulările, am găsit {sorted(runs['n'].unique())}")

    table = (runs.groupby("workers", as_index=False)
                 .agg(n=("n", "first"), elapsed=("elapsed", "mean"), reps=("elapsed", "size"))
                 .sort_values("workers", ignore_index=True))
    base = table.loc[table["workers"] == 1, "elapsed"]
    if base.empty:
        raise ValueError("Lipsește rularea de bază cu workers=1.")
    t1 = float(base.iloc[0])

    p = table["workers"].to_numpy(dtype=float)
    tp = table["elapsed"].to_numpy(dtype=float)
    table["speedup"] = t1 / tp
    if mode == "strong":
        table["efficiency"] = table["speedup"] / p
    else:
        table["efficiency"] = t1 / tp
    return table

def weak_sizes(n0: int, workers: List[int]) -> List[int]:
    """Dimensiunile problemei pentru weak scaling la cost O(N²): N0 · sqrt(P)."""
    return [int(round(n0 * np.sqrt(p))) for p in workers]

# ------------------------- CLI -------------------------

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Scaling analysis (strong/weak) from circlesim run directories")
    p.add_argument("--runs", nargs="+", required=True,
                   help="Directoarele rulărilor (fiecare cu summary.dat).")
    p.add_argument("--mode", choices=["strong", "weak"], default="strong",
                   help="strong: N fix; weak: N crescut cu sqrt(P).")
    p.add_argument("--out", type=str, default=None,
                   help="Dacă e dat, scrie tabelul (TSV) în acest fișier.")
    p.add_argument("--plot", action="store_true", help="Plotează speedup/efficiency în VPython.")
    return p.parse_args(argv)

def main(argv=None):
    a = parse_args(argv)
    table = scaling_table(load_runs(a.runs), mode=a.mode)
    print(table.to_string(index=False, float_format=lambda v: f"{v:.4f}"))

    if a.mode == "weak":
        n0 = int(table.loc[table["workers"] == 1, "n"].iloc[0])
        expected = weak_sizes(n0, table["workers"].tolist())
        off = [(int(p), int(n), e) for p, n, e in zip(table["workers"], table["n"], expected) if int(n) != e]
        for p, n, e in off:
            print(f"[WARN] workers={p}: n={n}, weak scaling la O(N²) cere n≈{e}")

    if a.out:
        table.to_csv(a.out, sep="\t", index=False, float_format="%.8g")
        print(f"[OK] scris: {a.out}")

    if a.plot:
        from .vis import plot_timeseries_vpython
        series = {"efficiency": table["efficiency"].to_numpy()}
        if a.mode == "strong":
            series["speedup"] = table["speedup"].to_numpy()
        plot_timeseries_vpython(t=table["workers"].to_numpy(), series=series,
                                title=f"{a.mode} scaling", xlabel="workers", ylabel="")
    return table

if __name__ == "__main__":
    main()
