from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np

from maskrle.mask import RLEObject


def binarize(mask: np.ndarray) -> np.ndarray:
    """Normalize arbitrary mask to uint8 values 0/1."""
    return (mask > 0).astype(np.uint8)


def read_mask_png(path: Path, binary: bool = False) -> Optional[np.ndarray]:
    """Read a single-mask PNG as an (H, W) array, or None if unreadable.

    Colour and alpha images are collapsed so that a pixel is foreground when
    any of its channels is non-zero. ``binary=True`` returns 0/1 uint8.
    """
    arr = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if arr is None or arr.dtype not in (np.uint8, np.uint16):
        return None
    if arr.ndim == 3:
        arr = arr.max(axis=2)
    if arr.ndim != 2 or arr.size == 0:
        return None
    return binarize(arr) if binary else arr


def write_mask_png(path: Path, mask: np.ndarray, scale: bool = True) -> None:
    if mask.ndim != 2:
        raise ValueError(f"mask must be 2D, got ndim={mask.ndim}")
    out = mask.astype(np.uint8)
    if scale:
        out = out * np.uint8(255)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(path), out):
        raise RuntimeError(f"Failed to write {path}")


def save_rle_json(path: Path, objs: List[RLEObject]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = []
    for obj in objs:
        counts = obj["counts"]
        if isinstance(counts, bytes):
            counts = counts.decode("ascii")
        rows.append({"size": [int(obj["size"][0]), int(obj["size"][1])], "counts": counts})
    path.write_text(json.dumps(rows), encoding="utf-8")


def load_rle_json(path: Path) -> List[RLEObject]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of RLE objects")
    return data
