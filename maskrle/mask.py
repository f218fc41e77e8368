"""COCO RLE encode / decode / toBbox over batches of binary masks.

Wire objects are plain dicts ``{"size": [h, w], "counts": str}``, one per mask,
in mask order.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from maskrle.bbox import rles_to_bbox
from maskrle.coding.counts_string import rle_fr_string, rle_to_string
from maskrle.errors import NonBinaryInputWarning, RLEError, ShapeMismatchError
from maskrle.rle import DataArray, Masks, RLEs, check_rle, rle_decode, rle_encode

RLEObject = Dict[str, Any]


@dataclass
class CodecConfig:
    """Runtime switches for encode / decode / to_bbox.

    ``validate=False`` skips the size and run-sum checks only; counts strings
    with characters outside 48..111 or ending on a continuation character
    always raise.
    """

    validate: bool = True
    warn_non_binary: bool = True


_DEFAULT_CONFIG = CodecConfig()


def _as_data_array(mask: Union[DataArray, np.ndarray]) -> DataArray:
    if isinstance(mask, DataArray):
        return mask
    return DataArray.from_ndarray(mask)


def _warn_non_binary(arr: DataArray) -> None:
    data = arr.data
    bad = (data != 0) & (data != 1)
    if not np.any(bad):
        return
    a = arr.shape[0] * arr.shape[1]
    masks = sorted(set((np.flatnonzero(bad) // max(a, 1)).tolist()))
    warnings.warn(
        f"mask values outside {{0, 1}} in mask(s) {masks}; "
        "runs follow raw values and decode will not reproduce them",
        NonBinaryInputWarning,
        stacklevel=3,
    )


def _to_string(rles: RLEs) -> List[RLEObject]:
    return [{"size": [r.h, r.w], "counts": rle_to_string(r)} for r in rles]


def _parse_size(obj: RLEObject, index: int) -> Tuple[int, int]:
    try:
        size = obj["size"]
        h, w = int(size[0]), int(size[1])
    except (KeyError, TypeError, IndexError, ValueError) as e:
        raise ShapeMismatchError(f"mask {index}: invalid 'size' in RLE object: {e}") from e
    if len(size) != 2:
        raise ShapeMismatchError(f"mask {index}: 'size' must be [h, w], got {list(size)}")
    return h, w


def _fr_string(rle_objs: Sequence[RLEObject], config: CodecConfig) -> RLEs:
    rles = RLEs()
    for i, obj in enumerate(rle_objs):
        h, w = _parse_size(obj, i)
        if "counts" not in obj:
            raise RLEError(f"mask {i}: RLE object has no 'counts'")
        r = rle_fr_string(obj["counts"], h, w)
        if config.validate:
            check_rle(r, i)
        rles.records.append(r)
    return rles


def _as_list(rle_objs: Union[RLEObject, Sequence[RLEObject]]) -> List[RLEObject]:
    if isinstance(rle_objs, dict):
        return [rle_objs]
    return list(rle_objs)


def encode(mask: Union[DataArray, np.ndarray], config: Optional[CodecConfig] = None) -> List[RLEObject]:
    """Encode ``(H, W, N)`` masks (column-major ``DataArray`` or numpy array)."""
    config = config or _DEFAULT_CONFIG
    arr = _as_data_array(mask)
    if config.warn_non_binary:
        _warn_non_binary(arr)
    h, w, n = arr.shape
    rles = rle_encode(arr.data, h, w, n)
    return _to_string(rles)


def decode(rle_objs: Sequence[RLEObject], config: Optional[CodecConfig] = None) -> DataArray:
    config = config or _DEFAULT_CONFIG
    rles = _fr_string(_as_list(rle_objs), config)
    if rles.n == 0:
        return Masks(0, 0, 0).to_data_array()
    h, w = rles[0].h, rles[0].w
    if config.validate:
        for i, r in enumerate(rles):
            if (r.h, r.w) != (h, w):
                raise ShapeMismatchError(
                    f"mask {i}: size [{r.h}, {r.w}] differs from mask 0 size [{h}, {w}]"
                )
    masks = Masks(h, w, rles.n)
    rle_decode(rles, masks._mask)
    return masks.to_data_array()


def to_bbox(rle_objs: Sequence[RLEObject], config: Optional[CodecConfig] = None) -> np.ndarray:
    """Flat ``[x, y, w, h] * N`` boxes computed from the runs, without decoding."""
    config = config or _DEFAULT_CONFIG
    rles = _fr_string(_as_list(rle_objs), config)
    return rles_to_bbox(rles)


toBbox = to_bbox


def encode_mask(mask: np.ndarray, config: Optional[CodecConfig] = None) -> RLEObject:
    if not isinstance(mask, np.ndarray) or mask.ndim != 2:
        raise ValueError("mask must be a 2D numpy array")
    return encode(mask[:, :, None], config)[0]


def decode_mask(rle_obj: RLEObject, config: Optional[CodecConfig] = None) -> np.ndarray:
    return decode([rle_obj], config).to_ndarray()[:, :, 0]
