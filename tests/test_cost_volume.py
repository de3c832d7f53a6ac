import numpy as np
import pytest

from sgm.cost_volume import as_image, build_cost_volume_ad


def test_absolute_difference_and_boundary_penalty():
    left = np.array([[10, 20, 30, 40]], dtype=np.uint8)
    right = np.array([[12, 15, 35, 40]], dtype=np.uint8)

    cost = build_cost_volume_ad(left, right, max_disp=3, invalid_cost=1000.0)

    assert cost.shape == (1, 4, 3)
    assert cost.dtype == np.float32
    np.testing.assert_array_equal(cost[0, :, 0], [2, 5, 5, 0])
    np.testing.assert_array_equal(cost[0, :, 1], [1000, 8, 15, 5])
    np.testing.assert_array_equal(cost[0, :, 2], [1000, 1000, 18, 25])


def test_every_col_below_d_holds_the_sentinel():
    rng = np.random.default_rng(0)
    left = rng.integers(0, 256, size=(6, 9))
    right = rng.integers(0, 256, size=(6, 9))

    cost = build_cost_volume_ad(left, right, max_disp=5, invalid_cost=777.0)

    for d in range(5):
        assert np.all(cost[:, :d, d] == 777.0)
        np.testing.assert_array_equal(
            cost[:, d:, d], np.abs(left[:, d:] - right[:, :9 - d]).astype(np.float32)
        )


def test_disparity_wider_than_image():
    cost = build_cost_volume_ad(np.ones((2, 2)), np.ones((2, 2)), max_disp=4)
    assert np.all(cost[:, :, 2:] == 1000.0)
    assert np.all(cost[:, :, 0] == 0)


def test_volume_is_read_only():
    cost = build_cost_volume_ad(np.zeros((2, 3)), np.zeros((2, 3)), max_disp=2)
    with pytest.raises(ValueError):
        cost[0, 0, 0] = 1


@pytest.mark.parametrize("left, right", [
    (np.zeros((3, 4)), np.zeros((3, 5))),
    (np.zeros((3, 4)), np.zeros((4, 4))),
])
def test_shape_mismatch_rejected(left, right):
    with pytest.raises(ValueError, match="mismatch"):
        build_cost_volume_ad(left, right, max_disp=2)


def test_bad_max_disp_rejected():
    with pytest.raises(ValueError):
        build_cost_volume_ad(np.zeros((2, 2)), np.zeros((2, 2)), max_disp=0)


def test_as_image_rejects_bad_input():
    with pytest.raises(ValueError, match="grayscale"):
        as_image(np.zeros((2, 2, 3)))
    with pytest.raises(ValueError, match="empty"):
        as_image(np.zeros((0, 4)))
    with pytest.raises(ValueError, match="non-finite"):
        as_image(np.array([[1.0, np.nan]]))
