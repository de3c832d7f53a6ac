import numpy as np


def as_image(img, name: str = "image") -> np.ndarray:
    """Validate a grayscale image and return a read-only float32 copy"""
    img = np.asarray(img)
    if img.ndim != 2:
        raise ValueError(f"{name}: grayscale only, expected 2D array, got shape {img.shape}")
    if img.size == 0:
        raise ValueError(f"{name}: empty image")
    if not np.issubdtype(img.dtype, np.number) or np.issubdtype(img.dtype, np.complexfloating):
        raise ValueError(f"{name}: expected real numeric samples, got dtype {img.dtype}")

    out = np.array(img, dtype=np.float32)
    if not np.all(np.isfinite(out)):
        raise ValueError(f"{name}: contains non-finite samples")
    out.setflags(write=False)
    return out


def build_cost_volume_ad(left, right, max_disp: int, invalid_cost: float = 1000.0) -> np.ndarray:
    """
    Absolute-difference matching cost, left image as reference.

    cost[y, x, d] = |left[y, x] - right[y, x - d]|   if x - d >= 0
                    invalid_cost                      otherwise

    Returns:
        cost_volume (np.ndarray): (H, W, max_disp) float32, read-only
    """
    L = as_image(left, "left")
    R = as_image(right, "right")
    if L.shape != R.shape:
        raise ValueError(f"left/right shape mismatch: {L.shape} vs {R.shape}")
    if max_disp <= 0:
        raise ValueError(f"max_disp must be > 0, got {max_disp}")

    H, W = L.shape
    cost_volume = np.empty((H, W, max_disp), dtype=np.float32)

    for d in range(max_disp):
        if d >= W:
            cost_volume[:, :, d] = invalid_cost
            continue

        if d > 0:
            cost_volume[:, d:, d] = np.abs(L[:, d:] - R[:, :-d])
            cost_volume[:, :d, d] = invalid_cost   # 这 d 列是无效匹配，强制惩罚
        else:
            cost_volume[:, :, d] = np.abs(L - R)

    cost_volume.setflags(write=False)
    return cost_volume
