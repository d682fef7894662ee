# src/circlesim/io.py

import os

import numpy as np
import pandas as pd


class DataWriter:
    """
    Clasa responsabilă DOAR de scrierea pe disc a statisticilor rulării
    (SRP). Produce fișiere .dat (TSV) ușor de importat în
    gnuplot/matplotlib/pandas.

    Convenții:
      - separare cu TAB ('\t')
      - fără index pandas
      - float_format='%.8g'
    """

    def __init__(self, output_dir: str):
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)

    def write_iterations(self, overlaps, times, mean_disp, max_disp):
        """
        Scrie seria per iterație.

        Parametri
        ---------
        overlaps : array-like (iterations,) – perechi ordonate suprapuse (total agregat)
        times : array-like (iterations,)    – durata fiecărei iterații [s]
        mean_disp, max_disp : array-like    – |d| mediu / maxim în iterație

        Output
        ------
        <output_dir>/iterations.dat
          Coloane: iter, overlaps, pairs, t_iter, mean_disp, max_disp
        """
        overlaps = np.asarray(overlaps, dtype=np.int64)
        df = pd.DataFrame({
            'iter': np.arange(1, overlaps.size + 1),
            'overlaps': overlaps,
            'pairs': overlaps // 2,
            't_iter': np.asarray(times, dtype=float),
            'mean_disp': np.asarray(mean_disp, dtype=float),
            'max_disp': np.asarray(max_disp, dtype=float),
        })
        path = os.path.join(self.output_dir, 'iterations.dat')
        df.to_csv(path, sep='\t', index=False, float_format='%.8g')
        return path

    def write_summary(self, n, iterations, workers, elapsed, impulse='owner'):
        """
        Un singur rând cu parametrii rulării și timpul total; input pentru analyze.py.

        Output
        ------
        <output_dir>/summary.dat
          Coloane: n, iterations, workers, impulse, elapsed
        """
        df = pd.DataFrame([{
            'n': int(n), 'iterations': int(iterations), 'workers': int(workers),
            'impulse': impulse, 'elapsed': float(elapsed),
        }])
        path = os.path.join(self.output_dir, 'summary.dat')
        df.to_csv(path, sep='\t', index=False, float_format='%.8g')
        return path


class FrameWriter:
    """
    Cadre gnuplot pentru depanare / film: câte un fișier circles-%05d.gp per
    iterație, care desenează cercurile într-o fereastră cu 20% margine în jurul
    cutiei inițiale. Se procesează cu:

        for f in circles-*.gp; do gnuplot "$f"; done
        ffmpeg -y -i "circles-%05d.png" -vcodec mpeg4 circles.avi
    """

    def __init__(self, output_dir: str, box, prefix: str = 'circles'):
        self.output_dir = output_dir
        self.box = tuple(float(v) for v in box)   # (xmin, xmax, ymin, ymax)
        self.prefix = prefix
        os.makedirs(output_dir, exist_ok=True)

    def write(self, iterno: int, ensemble):
        xmin, xmax, ymin, ymax = self.box
        width, height = xmax - xmin, ymax - ymin
        name = f'{self.prefix}-{iterno:05d}'
        path = os.path.join(self.output_dir, f'{name}.gp')
        with open(path, 'w') as out:
            out.write('set term png notransparent large\n')
            out.write(f'set output "{name}.png"\n')
            out.write(f'set xrange [{xmin - width * .2:f}:{xmax + width * .2:f}]\n')
            out.write(f'set yrange [{ymin - height * .2:f}:{ymax + height * .2:f}]\n')
            out.write('set size square\n')
            out.write("plot '-' with circles notitle\n")
            for x, y, r in zip(ensemble.x, ensemble.y, ensemble.r):
                out.write(f'{x:f} {y:f} {r:f}\n')
            out.write('e\n')
        return path
