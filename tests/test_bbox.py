import numpy as np

from maskrle.bbox import rle_to_bbox, rles_to_bbox
from maskrle.mask import encode, to_bbox
from maskrle.rle import DataArray, RLEs, make_rle, rle_encode


def _true_bbox(mask: np.ndarray):
    ys, xs = np.nonzero(mask)
    if ys.size == 0:
        return (0, 0, 0, 0)
    return (int(xs.min()), int(ys.min()), int(xs.max() - xs.min() + 1), int(ys.max() - ys.min() + 1))


def test_empty_record_bbox():
    assert rle_to_bbox(make_rle(3, 3, 0, [])) == (0, 0, 0, 0)


def test_all_background_bbox():
    assert rle_to_bbox(make_rle(3, 3, 1, [9])) == (0, 0, 0, 0)


def test_full_mask_bbox():
    assert rle_to_bbox(make_rle(3, 5, 2, [0, 15])) == (0, 0, 5, 3)


def test_two_by_two_straddling_run_spans_full_height():
    r = rle_encode(np.array([0, 1, 1, 0], dtype=np.uint8), 2, 2, 1)[0]
    assert r.m == 3
    assert rle_to_bbox(r) == (0, 0, 2, 2)


def test_single_column_run():
    mask = np.zeros((6, 4), dtype=np.uint8)
    mask[2:5, 1] = 1
    r = rle_encode(DataArray.from_ndarray(mask).data, 6, 4, 1)[0]
    assert r.cnts == (8, 3, 13)
    assert rle_to_bbox(r) == (1, 2, 1, 3)


def test_odd_run_count_ignores_trailing_background():
    r = make_rle(4, 4, 3, [5, 2, 9])
    assert rle_to_bbox(r) == (1, 1, 1, 2)


def test_bbox_matches_raster_on_random_masks():
    rng = np.random.default_rng(99)
    for _ in range(30):
        h = int(rng.integers(1, 20))
        w = int(rng.integers(1, 20))
        mask = np.zeros((h, w), dtype=np.uint8)
        if rng.random() < 0.8:
            y0, x0 = int(rng.integers(0, h)), int(rng.integers(0, w))
            y1, x1 = int(rng.integers(y0, h)) + 1, int(rng.integers(x0, w)) + 1
            mask[y0:y1, x0:x1] = 1
        r = rle_encode(DataArray.from_ndarray(mask).data, h, w, 1)[0]
        assert rle_to_bbox(r) == _true_bbox(mask)


def test_batch_order_is_preserved():
    boxes = [(1, 2, 3, 4), (0, 0, 1, 1), (5, 1, 2, 6), (0, 0, 0, 0)]
    h, w = 10, 12
    masks = np.zeros((h, w, len(boxes)), dtype=np.uint8)
    for i, (x, y, bw, bh) in enumerate(boxes):
        masks[y : y + bh, x : x + bw, i] = 1
    bb = to_bbox(encode(masks))
    assert bb.shape == (4 * len(boxes),)
    assert bb.reshape(-1, 4).tolist() == [list(map(float, b)) for b in boxes]


def test_rles_to_bbox_packs_flat_array():
    rles = RLEs([make_rle(2, 2, 2, [0, 4]), make_rle(2, 2, 0, [])])
    assert rles_to_bbox(rles).tolist() == [0.0, 0.0, 2.0, 2.0, 0.0, 0.0, 0.0, 0.0]
