"""Run-length records and the raw mask buffer they are encoded from.

Layout of a raw buffer holding N masks of size H x W:
- flat array of length H*W*N (uint8 0/1 once decoded)
- column-major per mask: pixel (y, x) of mask n lives at n*H*W + x*H + y
- runs alternate background/foreground, starting with background
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple

import numpy as np

from maskrle.errors import ShapeMismatchError


@dataclass(frozen=True)
class RunLength:
    h: int
    w: int
    m: int
    cnts: Tuple[int, ...]

    @property
    def area(self) -> int:
        return int(self.h) * int(self.w)


def make_rle(h: int, w: int, m: int, cnts: Sequence[int]) -> RunLength:
    if m == 0:
        return RunLength(h=int(h), w=int(w), m=0, cnts=(0,))
    return RunLength(h=int(h), w=int(w), m=int(m), cnts=tuple(int(c) for c in cnts))


@dataclass
class RLEs:
    records: List[RunLength] = field(default_factory=list)

    @property
    def n(self) -> int:
        return len(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[RunLength]:
        return iter(self.records)

    def __getitem__(self, i: int) -> RunLength:
        return self.records[i]


@dataclass
class DataArray:
    """Flat column-major mask buffer paired with its ``[H, W, N]`` shape."""

    data: np.ndarray
    shape: List[int]

    def __post_init__(self):
        if len(self.shape) != 3:
            raise ShapeMismatchError(f"shape must be [H, W, N], got {list(self.shape)}")
        self.shape = [int(s) for s in self.shape]
        if any(s < 0 for s in self.shape):
            raise ShapeMismatchError(f"shape must be non-negative, got {self.shape}")
        self.data = np.asarray(self.data).reshape(-1)
        h, w, n = self.shape
        if self.data.size != h * w * n:
            raise ShapeMismatchError(
                f"buffer holds {self.data.size} values, shape {self.shape} needs {h * w * n}"
            )

    @classmethod
    def from_ndarray(cls, mask: np.ndarray) -> "DataArray":
        if not isinstance(mask, np.ndarray):
            raise ValueError("mask must be a numpy.ndarray")
        if mask.ndim == 2:
            mask = mask[:, :, None]
        if mask.ndim != 3:
            raise ShapeMismatchError(f"mask must be (H, W) or (H, W, N), got ndim={mask.ndim}")
        h, w, n = mask.shape
        flat = mask.ravel(order="F")
        return cls(data=flat, shape=[h, w, n])

    def to_ndarray(self) -> np.ndarray:
        h, w, n = self.shape
        return self.data.reshape((h, w, n), order="F")

    def mask_slice(self, i: int) -> np.ndarray:
        a = self.shape[0] * self.shape[1]
        return self.data[a * i : a * (i + 1)]


class Masks:
    """Zero-filled output buffer for ``n`` decoded masks of size ``h`` x ``w``."""

    def __init__(self, h: int, w: int, n: int):
        self._mask = np.zeros((h * w * n,), dtype=np.uint8)
        self._h = h
        self._w = w
        self._n = n

    def to_data_array(self) -> DataArray:
        return DataArray(self._mask, [self._h, self._w, self._n])


def encode_slice_runs(flat: np.ndarray) -> List[int]:
    """Run lengths of one column-major mask slice, first run being background.

    A slice that starts with a non-zero value gets a leading zero-length run.
    """
    a = int(flat.shape[0])
    if a == 0:
        return [0]
    starts_fg = flat[:1] != 0
    changes = np.flatnonzero(np.concatenate((starts_fg, flat[1:] != flat[:-1])))
    bounds = np.concatenate(([0], changes, [a]))
    return np.diff(bounds).tolist()


def rle_encode(data: np.ndarray, h: int, w: int, n: int) -> RLEs:
    data = np.asarray(data).reshape(-1)
    a = h * w
    if data.size != a * n:
        raise ShapeMismatchError(f"buffer holds {data.size} values, expected {h}*{w}*{n}={a * n}")
    records: List[RunLength] = []
    for i in range(n):
        cnts = encode_slice_runs(data[a * i : a * (i + 1)])
        records.append(make_rle(h, w, len(cnts), cnts))
    return RLEs(records)


def rle_decode(rles: RLEs, out: np.ndarray) -> np.ndarray:
    """Write alternating 0/1 runs of every record into ``out``, back to back.

    Output is binary whatever values were encoded; ``out`` must hold
    ``sum(h*w)`` values over all records.
    """
    p = 0
    for r in rles:
        cnts = np.asarray(r.cnts[: r.m], dtype=np.int64)
        if np.any(cnts < 0):
            raise ShapeMismatchError("negative run length in counts")
        values = (np.arange(r.m) % 2).astype(np.uint8)
        run = np.repeat(values, cnts)
        if p + run.size > out.size:
            raise ShapeMismatchError(
                f"runs need {p + run.size} values, output buffer holds {out.size}"
            )
        out[p : p + run.size] = run
        p += int(run.size)
    return out


def check_rle(r: RunLength, index: int = 0) -> None:
    """Raise ShapeMismatchError unless the runs exactly cover ``h*w`` pixels."""
    if r.h < 0 or r.w < 0:
        raise ShapeMismatchError(f"mask {index}: negative size [{r.h}, {r.w}]")
    cnts = r.cnts[: r.m]
    if any(c < 0 for c in cnts):
        raise ShapeMismatchError(f"mask {index}: negative run length in counts")
    total = sum(cnts)
    if total != r.area:
        raise ShapeMismatchError(
            f"mask {index}: sum(counts)={total}, expected h*w={r.h}*{r.w}={r.area}"
        )
