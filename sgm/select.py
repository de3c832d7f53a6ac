from typing import Mapping, Sequence, Union

import numpy as np

Volumes = Union[Sequence[np.ndarray], Mapping[object, np.ndarray]]


def sum_aggregated(volumes: Volumes) -> np.ndarray:
    """S(p, d) = sum over directions of L_r(p, d), float64"""
    if isinstance(volumes, Mapping):
        volumes = list(volumes.values())
    if len(volumes) == 0:
        raise ValueError("no aggregated volumes to combine")

    shape = np.shape(volumes[0])
    if len(shape) != 3 or shape[2] == 0:
        raise ValueError(f"aggregated volume must be (H, W, D) with D > 0, got shape {shape}")

    S = np.zeros(shape, dtype=np.float64)
    for i, L in enumerate(volumes):
        if np.shape(L) != shape:
            raise ValueError(f"volume {i} has shape {np.shape(L)}, expected {shape}")
        S += L
    return S


def select_disparity(volumes: Volumes) -> np.ndarray:
    """
    Winner-take-all over the summed volume.

    np.argmin returns the first minimum, so ties go to the smallest disparity.
    """
    S = sum_aggregated(volumes)
    return np.argmin(S, axis=2).astype(np.int32)
