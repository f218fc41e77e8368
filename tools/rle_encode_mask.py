#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from tqdm import tqdm

if __package__ is None or __package__ == "":
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))
from maskrle.io import read_mask_png, save_rle_json
from maskrle.mask import CodecConfig, encode_mask


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encode PNG mask(s) to COCO RLE JSON")
    p.add_argument("--input", type=Path)
    p.add_argument("--input-list", type=Path)
    p.add_argument("--subdir", type=str, default="")
    p.add_argument("--out", type=Path, required=True)
    p.add_argument("--no-binarize", action="store_true", help="encode raw pixel values instead of mask > 0")
    p.add_argument("--no-warn-non-binary", action="store_true")
    args = p.parse_args()
    if bool(args.input is None) == bool(args.input_list is None):
        raise ValueError("Specify exactly one of --input or --input-list")
    return args


def encode_file(path: Path, config: CodecConfig, binary: bool = True) -> dict:
    mask = read_mask_png(path, binary=binary)
    if mask is None:
        raise ValueError(f"Invalid or unsupported mask: {path}")
    return encode_mask(mask, config)


def main() -> None:
    args = parse_args()
    config = CodecConfig(warn_non_binary=not args.no_warn_non_binary)

    if args.input is not None:
        out_json = args.out
        if out_json.suffix != ".json":
            out_json = out_json.with_suffix(".json")
        obj = encode_file(args.input, config, binary=not args.no_binarize)
        save_rle_json(out_json, [obj])
        print(json.dumps({"input": str(args.input), "out": str(out_json), "size": obj["size"],
                          "counts_len": len(obj["counts"])}, indent=2))
        return

    lines = [ln.strip() for ln in args.input_list.read_text(encoding="utf-8").splitlines() if ln.strip()]
    objs = []
    for rel in tqdm(lines, desc="encode", unit="mask", dynamic_ncols=True):
        in_path = Path(rel)
        if args.subdir:
            in_path = Path(args.subdir) / in_path
        objs.append(encode_file(in_path, config, binary=not args.no_binarize))
    save_rle_json(args.out, objs)
    print(f"[OK] encoded={len(objs)} out={args.out}")


if __name__ == "__main__":
    main()
