import numpy as np
import cv2

def disp_stats(disp: np.ndarray, D: int) -> dict:
    """
    Share of pixels per disparity in [0, D), plus the share sitting on the
    search-range edges (d=0 and d=D-1), which usually means the range is off.
    """
    disp = np.asarray(disp)
    hist = np.bincount(disp.ravel().astype(np.int64), minlength=D)[:D]
    share = hist / max(1, disp.size)
    stats = {
        "min": int(disp.min()),
        "max": int(disp.max()),
        "median": float(np.median(disp)),
        "share": share,
        "at_zero": float(share[0]),
        "at_max": float(share[D - 1]),
    }
    print(f"[disp_stats] min/max: {stats['min']} {stats['max']}  median: {stats['median']:.1f}")
    print(f"[disp_stats] ratio d=0: {stats['at_zero']:.3f}  ratio d={D - 1}: {stats['at_max']:.3f}")
    print("[disp_stats] per-disparity share:", np.round(share, 3).tolist())
    return stats

def disp_to_vis_linear(disp: np.ndarray, D: int) -> np.ndarray:
    # d=0 -> black, d=D-1 -> white
    scale = 255.0 / max(1, D - 1)
    return np.clip(np.asarray(disp, dtype=np.float32) * scale, 0, 255).astype(np.uint8)

def show_pair(left_gray: np.ndarray, disp_vis: np.ndarray, scale=1.0):
    left_show = np.clip(left_gray, 0, 255).astype(np.uint8)
    if scale != 1.0:
        left_show = cv2.resize(left_show, None, fx=scale, fy=scale, interpolation=cv2.INTER_AREA)
        disp_vis = cv2.resize(disp_vis, None, fx=scale, fy=scale, interpolation=cv2.INTER_NEAREST)
    cv2.imshow("left", left_show)
    cv2.imshow("disp", disp_vis)
    cv2.waitKey(0)
