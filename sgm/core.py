from typing import Dict, Optional

import numpy as np

from sgm.aggregate import Direction, aggregate_all_directions
from sgm.config import SGMConfig
from sgm.cost_volume import as_image, build_cost_volume_ad
from sgm.select import select_disparity


def _coerce(img, config: SGMConfig, name: str) -> np.ndarray:
    img = np.asarray(img)
    if img.ndim == 1:
        if config.height is None or config.width is None:
            raise ValueError(f"{name}: flat buffer needs config height and width")
        expected = config.height * config.width
        if img.size != expected:
            raise ValueError(
                f"{name}: flat buffer has {img.size} samples, "
                f"expected {config.height}x{config.width}={expected}"
            )
        img = img.reshape(config.height, config.width)

    img = as_image(img, name)
    H, W = img.shape
    if config.height is not None and H != config.height:
        raise ValueError(f"{name}: height {H} does not match config height {config.height}")
    if config.width is not None and W != config.width:
        raise ValueError(f"{name}: width {W} does not match config width {config.width}")
    return img


class SemiGlobalMatcher:
    """
    AD cost + 4-path SGM + WTA.

    Every input is validated before any volume is built, so a call either
    returns the full disparity map or raises.
    """

    def __init__(self, config: Optional[SGMConfig] = None, **overrides):
        config = config or SGMConfig()
        self.config = config.with_overrides(**overrides) if overrides else config.validate()

    def prepare(self, left, right):
        L = _coerce(left, self.config, "left")
        R = _coerce(right, self.config, "right")
        if L.shape != R.shape:
            raise ValueError(f"left/right shape mismatch: {L.shape} vs {R.shape}")
        return L, R

    def cost_volume(self, left, right) -> np.ndarray:
        L, R = self.prepare(left, right)
        return build_cost_volume_ad(L, R, self.config.max_disparity, self.config.invalid_cost)

    def aggregate(self, cost_vol: np.ndarray) -> Dict[Direction, np.ndarray]:
        cfg = self.config
        return aggregate_all_directions(cost_vol, P1=cfg.P1, P2=cfg.P2,
                                        unreachable_cost=cfg.unreachable_cost,
                                        parallel=cfg.parallel)

    def compute(self, left, right) -> np.ndarray:
        cost_vol = self.cost_volume(left, right)
        return select_disparity(self.aggregate(cost_vol))


def compute_disparity(left, right, config: Optional[SGMConfig] = None) -> np.ndarray:
    """
    Args:
        left, right: rectified grayscale images, (H, W) arrays or flat
            row-major buffers when config.height/width are set.
        config (SGMConfig): defaults to SGMConfig().

    Returns:
        disp (np.ndarray): (H, W) int32 disparity in [0, max_disparity)
    """
    return SemiGlobalMatcher(config).compute(left, right)
