from pathlib import Path

import cv2
import numpy as np
import pytest

from maskrle.io import binarize, load_rle_json, read_mask_png, save_rle_json, write_mask_png
from maskrle.mask import decode_mask, encode_mask


def test_png_roundtrip_through_rle(tmp_path: Path):
    mask = np.zeros((16, 17), dtype=np.uint8)
    mask[::2, 3:9] = 1

    png = tmp_path / "mask.png"
    write_mask_png(png, mask)
    raw = read_mask_png(png)
    assert raw is not None
    assert raw.max() == 255

    obj = encode_mask(binarize(raw))
    out_json = tmp_path / "out" / "mask.json"
    save_rle_json(out_json, [obj])
    loaded = load_rle_json(out_json)
    assert loaded == [obj]
    assert np.array_equal(decode_mask(loaded[0]), mask)


def test_write_unscaled_png(tmp_path: Path):
    mask = np.eye(4, dtype=np.uint8)
    png = tmp_path / "eye.png"
    write_mask_png(png, mask, scale=False)
    assert np.array_equal(read_mask_png(png), mask)


def test_read_missing_png_returns_none(tmp_path: Path):
    assert read_mask_png(tmp_path / "missing.png") is None


def test_save_rle_json_accepts_bytes_counts(tmp_path: Path):
    path = tmp_path / "rle.json"
    save_rle_json(path, [{"size": [2, 2], "counts": b"121"}])
    assert load_rle_json(path) == [{"size": [2, 2], "counts": "121"}]


def test_load_single_object_is_wrapped(tmp_path: Path):
    path = tmp_path / "one.json"
    path.write_text('{"size": [2, 2], "counts": "04"}', encoding="utf-8")
    assert load_rle_json(path) == [{"size": [2, 2], "counts": "04"}]


def test_load_rejects_non_list(tmp_path: Path):
    path = tmp_path / "bad.json"
    path.write_text("42", encoding="utf-8")
    with pytest.raises(ValueError, match="JSON list"):
        load_rle_json(path)


def test_write_mask_png_rejects_3d(tmp_path: Path):
    with pytest.raises(ValueError, match="2D"):
        write_mask_png(tmp_path / "x.png", np.zeros((2, 2, 2), dtype=np.uint8))


def test_read_binary_mask_png(tmp_path: Path):
    mask = np.zeros((5, 6), dtype=np.uint8)
    mask[1:3, 2:5] = 1
    png = tmp_path / "m.png"
    write_mask_png(png, mask)
    out = read_mask_png(png, binary=True)
    assert out.dtype == np.uint8
    assert np.array_equal(out, mask)


def test_read_colour_png_any_channel_is_foreground(tmp_path: Path):
    img = np.zeros((4, 4, 3), dtype=np.uint8)
    img[0, 0, 2] = 200
    img[3, 1, 0] = 7
    png = tmp_path / "c.png"
    assert cv2.imwrite(str(png), img)
    out = read_mask_png(png, binary=True)
    expected = np.zeros((4, 4), dtype=np.uint8)
    expected[0, 0] = 1
    expected[3, 1] = 1
    assert np.array_equal(out, expected)
