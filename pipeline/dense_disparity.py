import time
from typing import Optional

import numpy as np

from sgm.config import SGMConfig
from sgm.core import SemiGlobalMatcher
from sgm.input import load_gray_image, load_pixel_stream, split_stereo_image
from sgm.viz import disp_to_vis_linear, show_pair


def load_pair(
        left_path: str,
        right_path: Optional[str] = None,
        config: Optional[SGMConfig] = None,
        pixel_stream: bool = False
):
    """
    Load a rectified grayscale pair.

    left_path alone is treated as a side-by-side (left | right) frame.
    With pixel_stream=True both paths are flat text streams shaped by
    config.height/config.width.
    """
    config = config or SGMConfig()
    if pixel_stream:
        if right_path is None:
            raise ValueError("pixel streams need both left and right paths")
        if config.height is None or config.width is None:
            raise ValueError("pixel streams need config height and width")
        left = load_pixel_stream(left_path, config.height, config.width)
        right = load_pixel_stream(right_path, config.height, config.width)
        return left, right

    if right_path is None:
        return split_stereo_image(load_gray_image(left_path))
    return load_gray_image(left_path), load_gray_image(right_path)


def estimate_disparity_global(
        left_path: str,
        right_path: Optional[str] = None,
        config: Optional[SGMConfig] = None,
        pixel_stream: bool = False,
        show_vis: bool = False
) -> np.ndarray:
    """
    AD + 4-path SGM disparity on the whole image

    Args:
        left_path (str): left image, or side-by-side frame when right_path is None.
        right_path (str): right image.
        config (SGMConfig): max_disparity, P1, P2, sentinels, geometry.
            P1 (int): Penalty for small disparity changes (|d_p - d_q| = 1).
                Controls local smoothness of the disparity map and preserves fine details.
            P2 (int): Penalty for larger disparity changes (|d_p - d_q| > 1).
        pixel_stream (bool): inputs are flat text pixel streams.
        show_vis (bool): Whether to display disparity map.

    Returns:
        disp(np.ndarray): (H, W) int32 disparity map
    """
    t0 = time.perf_counter()
    matcher = SemiGlobalMatcher(config)
    left, right = load_pair(left_path, right_path, matcher.config, pixel_stream)

    disp = matcher.compute(left, right)

    t1 = time.perf_counter()
    print(f"[estimate_disparity_global] time = {(t1 - t0)*1000:.2f} ms")
    if show_vis:
        show_pair(left, disp_to_vis_linear(disp, matcher.config.max_disparity))

    return disp
