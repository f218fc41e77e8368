from maskrle.coding.counts_string import rle_fr_string, rle_to_string, to_int32

__all__ = ["rle_to_string", "rle_fr_string", "to_int32"]
