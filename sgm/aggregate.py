import math
import numbers
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Dict, Tuple, Union

import numpy as np
from numba import njit


class Direction(Enum):
    """Scan directions as (dy, dx): → ← ↓ ↑"""
    LEFT_TO_RIGHT = (0, 1)
    RIGHT_TO_LEFT = (0, -1)
    TOP_TO_BOTTOM = (1, 0)
    BOTTOM_TO_TOP = (-1, 0)

    @property
    def dy(self) -> int:
        return self.value[0]

    @property
    def dx(self) -> int:
        return self.value[1]

    @classmethod
    def from_vector(cls, dy: int, dx: int) -> "Direction":
        # exact integer components only, no truncation of 0.5 or True
        for v in (dy, dx):
            if isinstance(v, (bool, np.bool_)) or not isinstance(v, numbers.Integral):
                raise ValueError(
                    f"direction components must be integers, got ({dy!r}, {dx!r})"
                )
        try:
            return cls((int(dy), int(dx)))
        except ValueError:
            raise ValueError(
                f"direction must be one of {[d.value for d in cls]}, got ({dy}, {dx})"
            ) from None


DirectionLike = Union[Direction, Tuple[int, int]]


@njit(cache=True, nogil=True)
def dp_update_1d(prev_L, c, P1, P2, unreachable, out_L):
    D = prev_L.shape[0]

    # min_prev
    min_prev = prev_L[0]
    for d in range(1, D):
        v = prev_L[d]
        if v < min_prev:
            min_prev = v

    base_jump = min_prev + P2

    for d in range(D):
        best = prev_L[d]

        v = prev_L[d-1] + P1 if d > 0 else unreachable
        if v < best:
            best = v

        v = prev_L[d+1] + P1 if d < D - 1 else unreachable
        if v < best:
            best = v

        if base_jump < best:
            best = base_jump

        out_L[d] = c[d] + best - min_prev


@njit(cache=True, nogil=True)
def aggregate_path_numba(C, dy, dx, P1, P2, unreachable, L):
    """
    C: (H, W, D) cost volume
    L: (H, W, D) output, written in scan order so that (y-dy, x-dx)
       is always finished before (y, x)
    """
    H, W, D = C.shape

    if dy >= 0:
        y_start, y_end, y_step = 0, H, 1
    else:
        y_start, y_end, y_step = H - 1, -1, -1
    if dx >= 0:
        x_start, x_end, x_step = 0, W, 1
    else:
        x_start, x_end, x_step = W - 1, -1, -1

    for y in range(y_start, y_end, y_step):
        for x in range(x_start, x_end, x_step):
            py = y - dy
            px = x - dx
            if 0 <= py < H and 0 <= px < W:
                dp_update_1d(L[py, px], C[y, x], P1, P2, unreachable, L[y, x])
            else:
                # path starts here, no history
                for d in range(D):
                    L[y, x, d] = C[y, x, d]


def _check_penalties(P1, P2, unreachable_cost):
    for name, v in (("P1", P1), ("P2", P2)):
        if not math.isfinite(float(v)) or v < 0:
            raise ValueError(f"penalties must be finite and non-negative, got {name}={v}")
    if not float(unreachable_cost) > 0:
        raise ValueError(f"unreachable_cost must be > 0, got {unreachable_cost}")


def aggregate_path(cost_vol: np.ndarray,
                   direction: DirectionLike,
                   P1: float = 8,
                   P2: float = 128,
                   unreachable_cost: float = 2000.0) -> np.ndarray:
    """
    Aggregate the cost volume along one scan direction.

    L(p, d) = C(p, d) + min(L(p-r, d),
                            L(p-r, d-1) + P1,
                            L(p-r, d+1) + P1,
                            min_k L(p-r, k) + P2) - min_k L(p-r, k)

    Args:
        cost_vol (np.ndarray): (H, W, D) matching cost.
        direction: a Direction or its (dy, dx) vector.
        P1 (float): penalty for |Δd| = 1.
        P2 (float): penalty for |Δd| > 1.
        unreachable_cost (float): stands in for d-1 / d+1 outside [0, D).

    Returns:
        L (np.ndarray): (H, W, D) float32, read-only
    """
    if not isinstance(direction, Direction):
        direction = Direction.from_vector(*direction)
    cost_vol = np.asarray(cost_vol)
    if cost_vol.ndim != 3 or cost_vol.shape[2] == 0:
        raise ValueError(f"cost volume must be (H, W, D) with D > 0, got shape {cost_vol.shape}")
    _check_penalties(P1, P2, unreachable_cost)

    C = np.ascontiguousarray(cost_vol, dtype=np.float32)
    L = np.empty(C.shape, dtype=np.float32)
    aggregate_path_numba(C, direction.dy, direction.dx,
                         float(P1), float(P2), float(unreachable_cost), L)
    L.setflags(write=False)
    return L


def aggregate_all_directions(cost_vol: np.ndarray,
                             P1: float = 8,
                             P2: float = 128,
                             unreachable_cost: float = 2000.0,
                             parallel: bool = True) -> Dict[Direction, np.ndarray]:
    """
    Run aggregate_path for the four directions.

    The directions only read cost_vol and each owns its output, so with
    parallel=True they are submitted to a thread pool (the kernel releases
    the GIL).
    """
    if parallel:
        with ThreadPoolExecutor(max_workers=len(Direction)) as pool:
            futures = {
                r: pool.submit(aggregate_path, cost_vol, r, P1, P2, unreachable_cost)
                for r in Direction
            }
            return {r: f.result() for r, f in futures.items()}

    return {r: aggregate_path(cost_vol, r, P1, P2, unreachable_cost) for r in Direction}
