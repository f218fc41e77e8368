from maskrle.errors import (
    InvalidCharacterError,
    NonBinaryInputWarning,
    RLEError,
    ShapeMismatchError,
    TruncatedCountsError,
)
from maskrle.mask import CodecConfig, decode, decode_mask, encode, encode_mask, to_bbox, toBbox
from maskrle.rle import DataArray, RLEs, RunLength, make_rle

__all__ = [
    "encode",
    "decode",
    "to_bbox",
    "toBbox",
    "encode_mask",
    "decode_mask",
    "CodecConfig",
    "DataArray",
    "RunLength",
    "RLEs",
    "make_rle",
    "RLEError",
    "ShapeMismatchError",
    "InvalidCharacterError",
    "TruncatedCountsError",
    "NonBinaryInputWarning",
]
