from pathlib import Path
from typing import Tuple

import cv2
import numpy as np


def load_gray_image(path: str) -> np.ndarray:
    img = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
    if img is None:
        raise FileNotFoundError(f"image load failed (check path): {path}")
    return img


def split_stereo_image(img: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    输入：左右合并图 (H, 2W) 或 (H, 2W, 3)
    输出：imgL, imgR
    """
    H, W2 = img.shape[:2]
    if W2 % 2 != 0:
        raise ValueError(f"side-by-side frame width must be even, got {W2}")
    W = W2 // 2
    imgL = img[:, :W].copy()
    imgR = img[:, W:].copy()
    return imgL, imgR


def load_pixel_stream(path: str, height: int, width: int) -> np.ndarray:
    """
    Read a whitespace separated pixel stream (row-major, height*width values)
    and return it as a (height, width) float32 image.
    """
    if not Path(path).is_file():
        raise FileNotFoundError(f"pixel stream not found: {path}")

    values = np.loadtxt(str(path), dtype=np.float32, ndmin=1).ravel()
    if values.size != height * width:
        raise ValueError(
            f"{path}: got {values.size} samples, expected {height}x{width}={height * width}"
        )
    return values.reshape(height, width)


def save_pixel_stream(disp: np.ndarray, path: str):
    """One integer disparity per line, row-major."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    np.savetxt(str(path), np.asarray(disp).reshape(-1), fmt="%d")
