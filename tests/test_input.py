import cv2
import numpy as np
import pytest

from pipeline.dense_disparity import estimate_disparity_global, load_pair
from sgm.config import SGMConfig
from sgm.input import (load_gray_image, load_pixel_stream, save_pixel_stream,
                       split_stereo_image)


def test_pixel_stream_round_trip(tmp_path):
    src = tmp_path / "left_pixels.txt"
    src.write_text("\n".join(str(v) for v in range(6)) + "\n")
    img = load_pixel_stream(str(src), 2, 3)
    assert img.dtype == np.float32
    np.testing.assert_array_equal(img, [[0, 1, 2], [3, 4, 5]])

    out = tmp_path / "results" / "disparity.txt"
    save_pixel_stream(img.astype(np.int32), str(out))
    assert out.read_text().split() == ["0", "1", "2", "3", "4", "5"]


def test_pixel_stream_wrong_count(tmp_path):
    src = tmp_path / "short.txt"
    src.write_text("1 2 3\n")
    with pytest.raises(ValueError, match="expected 2x2"):
        load_pixel_stream(str(src), 2, 2)


def test_pixel_stream_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_pixel_stream(str(tmp_path / "nope.txt"), 2, 2)


def test_split_stereo_image():
    frame = np.arange(24, dtype=np.uint8).reshape(2, 12)
    left, right = split_stereo_image(frame)
    np.testing.assert_array_equal(left, frame[:, :6])
    np.testing.assert_array_equal(right, frame[:, 6:])
    with pytest.raises(ValueError):
        split_stereo_image(np.zeros((2, 5)))


def test_load_gray_image(tmp_path):
    path = tmp_path / "img.png"
    img = (np.arange(20, dtype=np.uint8) * 10).reshape(4, 5)
    assert cv2.imwrite(str(path), img)
    np.testing.assert_array_equal(load_gray_image(str(path)), img)
    with pytest.raises(FileNotFoundError):
        load_gray_image(str(tmp_path / "missing.png"))


def test_load_pair_side_by_side(tmp_path):
    path = tmp_path / "frame.png"
    frame = np.zeros((3, 8), dtype=np.uint8)
    frame[:, 4:] = 200
    cv2.imwrite(str(path), frame)
    left, right = load_pair(str(path))
    assert left.shape == right.shape == (3, 4)
    assert np.all(right == 200)


def test_pipeline_on_pixel_streams(tmp_path, capsys):
    left = tmp_path / "left_pixels.txt"
    right = tmp_path / "right_pixels.txt"
    values = np.full(16, 10)
    left.write_text("\n".join(map(str, values)))
    values[5] = 50   # row 1, col 1
    right.write_text("\n".join(map(str, values)))

    config = SGMConfig(max_disparity=2, P1=1, P2=4, height=4, width=4)
    disp = estimate_disparity_global(str(left), str(right), config, pixel_stream=True)

    expected = np.zeros((4, 4), dtype=np.int32)
    expected[1, 1] = 1
    np.testing.assert_array_equal(disp, expected)
    assert "[estimate_disparity_global] time" in capsys.readouterr().out


def test_pixel_streams_need_geometry(tmp_path):
    with pytest.raises(ValueError, match="height and width"):
        load_pair("a.txt", "b.txt", SGMConfig(), pixel_stream=True)
