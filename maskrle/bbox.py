from __future__ import annotations

from typing import Tuple

import numpy as np

from maskrle.rle import RLEs, RunLength


def rle_to_bbox(r: RunLength) -> Tuple[int, int, int, int]:
    """Return ``(x, y, width, height)`` of the foreground, read off the runs.

    Only an even number of runs is scanned; a trailing odd run is background.
    A foreground run that crosses a column boundary covers the bottom of one
    column and the top of the next, so the box spans the full height.
    """
    h, w = r.h, r.w
    m = (r.m // 2) * 2
    if m == 0 or h == 0:
        return 0, 0, 0, 0
    xs, ys, xe, ye = w, h, 0, 0
    cc = 0
    xp = 0
    for j in range(m):
        cc += r.cnts[j]
        t = cc - (j % 2)
        y = t % h
        x = (t - y) // h
        if j % 2 == 0:
            xp = x
        elif xp < x:
            ys = 0
            ye = h - 1
        xs = min(xs, x)
        xe = max(xe, x)
        ys = min(ys, y)
        ye = max(ye, y)
    return xs, ys, xe - xs + 1, ye - ys + 1


def rles_to_bbox(rles: RLEs) -> np.ndarray:
    bb = np.zeros((4 * rles.n,), dtype=np.float64)
    for i, r in enumerate(rles):
        bb[4 * i : 4 * i + 4] = rle_to_bbox(r)
    return bb
