"""COCO compressed ``counts`` strings.

Similar to LEB128 but with 6 bits per character and ASCII 48..111:
- 5 data bits per character, little-endian groups
- bit 0x20 marks that another character follows
- bit 0x10 of the last character carries the sign
- runs 3.. are stored as deltas against the run two positions back

All arithmetic is done on 32-bit signed values so strings stay byte-identical
to the C implementation in pycocotools.
"""

from __future__ import annotations

from typing import List, Union

from maskrle.errors import InvalidCharacterError, TruncatedCountsError
from maskrle.rle import RunLength, make_rle

CHAR_OFFSET = 48
CHAR_MAX = CHAR_OFFSET + 63

_INT32_SIGN = 1 << 31
_INT32_MOD = 1 << 32


def to_int32(x: int) -> int:
    return ((x + _INT32_SIGN) % _INT32_MOD) - _INT32_SIGN


def rle_to_string(r: RunLength) -> str:
    s: List[str] = []
    cnts = r.cnts
    for i in range(r.m):
        x = cnts[i]
        if i > 2:
            x -= cnts[i - 2]
        x = to_int32(x)
        more = True
        while more:
            c = x & 0x1F
            x >>= 5
            more = x != -1 if c & 0x10 else x != 0
            if more:
                c |= 0x20
            s.append(chr(c + CHAR_OFFSET))
    return "".join(s)


def rle_fr_string(counts: Union[str, bytes], h: int, w: int) -> RunLength:
    if isinstance(counts, (bytes, bytearray)):
        counts = counts.decode("ascii", errors="replace")
    cnts: List[int] = []
    n_chars = len(counts)
    p = 0
    while p < n_chars:
        x = 0
        k = 0
        more = True
        while more:
            if p >= n_chars:
                raise TruncatedCountsError(
                    f"counts string ends inside run {len(cnts)} (last char has continuation bit)"
                )
            code = ord(counts[p])
            if code < CHAR_OFFSET or code > CHAR_MAX:
                raise InvalidCharacterError(
                    f"invalid character {counts[p]!r} (code {code}) at index {p}; "
                    f"expected codes {CHAR_OFFSET}..{CHAR_MAX}"
                )
            c = code - CHAR_OFFSET
            x |= (c & 0x1F) << (5 * k)
            more = bool(c & 0x20)
            p += 1
            k += 1
            if not more and c & 0x10:
                x |= -1 << (5 * k)
        m = len(cnts)
        if m > 2:
            x += cnts[m - 2]
        cnts.append(to_int32(x))
    return make_rle(h, w, len(cnts), cnts)
