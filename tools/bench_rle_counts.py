#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd
from tqdm import tqdm

if __package__ is None or __package__ == "":
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))
from maskrle.io import read_mask_png
from maskrle.mask import decode_mask, encode_mask, to_bbox


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Measure COCO RLE counts-string size on a directory of PNG masks")
    p.add_argument("--mask-dir", type=Path, required=True)
    p.add_argument("--glob", type=str, default="**/*.png")
    p.add_argument("--out-csv", type=Path, default=Path("output/rle_counts.csv"))
    p.add_argument("--limit", type=int, default=0)
    return p.parse_args()


def q(x, p):
    return float(x.quantile(p)) if len(x) else float("nan")


def bench_one(path: Path) -> dict:
    mask01 = read_mask_png(path, binary=True)
    if mask01 is None:
        return {}
    h, w = mask01.shape
    obj = encode_mask(mask01)
    x, y, bw, bh = to_bbox([obj]).tolist()
    ok = bool(np.array_equal(decode_mask(obj), mask01))
    n_chars = len(obj["counts"])
    return dict(
        path=str(path), H=h, W=w,
        fg_frac=float(mask01.mean()) if mask01.size else 0.0,
        counts_chars=n_chars,
        bbp=(n_chars * 8.0) / max(1, h * w),
        bbox_x=x, bbox_y=y, bbox_w=bw, bbox_h=bh,
        roundtrip_ok=ok,
    )


def main() -> None:
    args = parse_args()
    files = sorted(args.mask_dir.glob(args.glob))
    if args.limit > 0:
        files = files[: args.limit]
    print(f"[INFO] mask_dir={args.mask_dir} files={len(files)}")

    rows = []
    skipped = 0
    for p in tqdm(files, desc="bench", unit="mask", dynamic_ncols=True):
        row = bench_one(p)
        if not row:
            skipped += 1
            continue
        rows.append(row)

    df = pd.DataFrame(rows)
    args.out_csv.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(args.out_csv, index=False)

    if df.empty:
        print(f"No readable masks. skipped={skipped}")
        return
    bad = int((~df["roundtrip_ok"]).sum())
    print(f"[summary] masks={len(df)} skipped={skipped} roundtrip_fail={bad}")
    print(f"[summary] bbp_med={float(df['bbp'].median()):.6f} bbp_p90={q(df['bbp'], 0.90):.6f}")
    print(f"[summary] counts_chars_med={float(df['counts_chars'].median()):.1f}")
    print(f"[OK] wrote {len(df)} rows to {args.out_csv}")
    if bad:
        raise RuntimeError(f"{bad} mask(s) failed the RLE round trip")


if __name__ == "__main__":
    main()
