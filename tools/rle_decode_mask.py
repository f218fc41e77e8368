#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np

if __package__ is None or __package__ == "":
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))
from maskrle.io import load_rle_json, read_mask_png, write_mask_png
from maskrle.mask import CodecConfig, decode


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Decode COCO RLE JSON to PNG mask(s)")
    p.add_argument("--json", type=Path, required=True)
    p.add_argument("--out-dir", type=Path, required=True)
    p.add_argument("--prefix", type=str, default="mask")
    p.add_argument("--verify-against", type=Path, default=None)
    p.add_argument("--no-validate", action="store_true")
    p.add_argument("--no-scale", action="store_true", help="write 0/1 instead of 0/255")
    return p.parse_args()


def main() -> None:
    args = parse_args()
    config = CodecConfig(validate=not args.no_validate)

    objs = load_rle_json(args.json)
    masks = decode(objs, config).to_ndarray()
    n = masks.shape[2]
    for i in range(n):
        write_mask_png(args.out_dir / f"{args.prefix}_{i:04d}.png", masks[:, :, i], scale=not args.no_scale)
    print(f"[OK] decoded={n} size={masks.shape[:2]} out_dir={args.out_dir}")

    if args.verify_against is not None:
        gt = read_mask_png(args.verify_against, binary=True)
        if gt is None:
            raise ValueError("Invalid verify-against mask")
        if n != 1 or gt.shape != masks.shape[:2] or not np.array_equal(gt, masks[:, :, 0]):
            raise RuntimeError("Decoded mask mismatch against verify-against")
        print("[OK] verified against", args.verify_against)


if __name__ == "__main__":
    main()
