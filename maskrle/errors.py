from __future__ import annotations


class RLEError(ValueError):
    """Base class for malformed masks, run-length records and counts strings."""


class ShapeMismatchError(RLEError):
    pass


class InvalidCharacterError(RLEError):
    pass


class TruncatedCountsError(RLEError):
    pass


class NonBinaryInputWarning(UserWarning):
    """Mask values outside {0, 1}; decoding will not reproduce them."""
