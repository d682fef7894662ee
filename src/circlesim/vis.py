# src/circlesim/vis.py

"""
VIZUALIZARE VPYTHON (OPȚIONALĂ)
===============================
Scop:
  - să vedem cercurile cum se împing unele pe altele, iterație cu iterație;
  - să plotăm serii 2D (ex. timp vs. worker-i în analiza de scalare).

Important:
  - Vizualizarea este *pasivă*: nu afectează datele salvate în .dat.
  - Cercurile sunt desenate ca inele (ring) în planul XY, cu axa pe z.
  - Coordonatele se scalează DOAR pentru ecran, ca cutia să încapă în ~±4 unități.

Despre r_series:
  - r_series are forma (N, T+1, 2): pozițiile centrelor la iterațiile 0..T.
  - VPython cere update per-obiect; pentru performanță limităm M = min(viz_n, N).

Dependență:
  - Necesită `vpython` (pip install vpython).
"""

import numpy as np


def draw_wire_rect(xmin, xmax, ymin, ymax, s, vector, curve, color):
    """Dreptunghi wireframe în planul XY (cutia de generare)."""
    X = [xmin * s, xmax * s]
    Y = [ymin * s, ymax * s]
    edges = [
        ((X[0], Y[0], 0.0), (X[1], Y[0], 0.0)),
        ((X[1], Y[0], 0.0), (X[1], Y[1], 0.0)),
        ((X[1], Y[1], 0.0), (X[0], Y[1], 0.0)),
        ((X[0], Y[1], 0.0), (X[0], Y[0], 0.0)),
    ]
    for a, b in edges:
        curve(pos=[vector(*a), vector(*b)], color=color.white, radius=0.01)


def _box_scale_and_center(box):
    xmin, xmax, ymin, ymax = box
    half_extent = 0.5 * max(xmax - xmin, ymax - ymin)
    scale = 4.0 / half_extent if half_extent > 0 else 1.0
    center = np.array([0.5 * (xmin + xmax), 0.5 * (ymin + ymax)])
    return scale, center


def animate_vpython(
    r_series: np.ndarray,
    radii: np.ndarray,
    viz_n: int = 200,
    box=(0.0, 1000.0, 0.0, 1000.0),
    fps: int = 10,
    auto_close: bool = True
):
    """
    RO: Animează cercurile pe iterații în VPython.

    Parametri
    ---------
    r_series : np.ndarray, shape (N, T+1, 2)
        Centrele la iterațiile 0..T.
    radii : np.ndarray, shape (N,)
        Razele (fixe pe toată rularea).
    viz_n : int
        Câte cercuri max randăm.
    box : (xmin, xmax, ymin, ymax)
        Cutia de generare; fixează cadrarea și e desenată ca wireframe.
    fps : int
        Iterații afișate pe secundă (sunt puține, deci lent).
    auto_close : bool
        Închide fereastra la final (batch-friendly).
    """
    try:
        from vpython import canvas, vector, ring, color, rate, curve
    except Exception as e:
        raise RuntimeError('VPython is not installed. Run `pip install vpython`.') from e

    N, T_plus_1, D = r_series.shape
    if D != 2:
        raise ValueError(f"animate_vpython: expected 2-D positions, got D={D}")
    M = min(viz_n, N)
    s, center = _box_scale_and_center(box)

    scene = canvas(title='Circles', width=900, height=900, background=color.black)
    draw_wire_rect(box[0] - center[0], box[1] - center[0],
                   box[2] - center[1], box[3] - center[1], s, vector, curve, color)

    rng = np.random.default_rng(42)
    cols = [vector(float(r), float(g), float(b)) for r, g, b in rng.uniform(0.5, 1.0, size=(M, 3))]

    def at(i, k):
        x, y = ((r_series[i, k] - center) * s).tolist()
        return vector(x, y, 0.0)

    rings = [ring(pos=at(i, 0), axis=vector(0, 0, 1), radius=float(radii[i]) * s,
                  thickness=0.01, color=cols[i])
             for i in range(M)]

    for k in range(1, T_plus_1):
        rate(fps)
        for i in range(M):
            rings[i].pos = at(i, k)

    if auto_close:
        try:
            scene.delete()
        except Exception:
            scene.visible = False


def plot_timeseries_vpython(
    t: np.ndarray,
    series: dict,
    title: str = "Scalare",
    xlabel: str = "workers",
    ylabel: str = "",
    legend: bool = True
):
    """
    RO: Plotează serii 2D (t, y) folosind VPython (graph + gcurve).
    Fereastra NU se închide automat.

    series : dict[str, np.ndarray] – {nume_curba -> valori_y}, fiecare de lungime len(t).
    """
    try:
        from vpython import graph, gcurve, color
    except Exception as e:
        raise RuntimeError('VPython is not installed. Run `pip install vpython`.') from e

    palette = [color.red, color.green, color.blue, color.cyan,
               color.magenta, color.yellow, color.white, color.orange]
    names = list(series.keys())

    full_title = f"{title}  —  {' | '.join(names)}" if legend else title
    g = graph(title=full_title, xtitle=xlabel, ytitle=ylabel, width=900, height=600, fast=False)
    curves = [gcurve(graph=g, color=palette[i % len(palette)], label=name)
              for i, name in enumerate(names)]

    for k in range(len(t)):
        x = float(t[k])
        for c, name in zip(curves, names):
            c.plot(x, float(series[name][k]))
