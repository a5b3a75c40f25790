"""Optical flow evaluation metrics."""
import numpy as np

# Middlebury marks unknown ground truth with values above this
UNKNOWN_FLOW_THRESH = 1e9


def flow_errors(uv, gt, border=0):
    """Average angular error (Barron et al.) and endpoint error.

    Args:
        uv: Estimated flow (H, W, 2).
        gt: Ground truth flow (H, W, 2). Unknown entries are skipped.
        border: Number of border pixels to ignore on each side. Use
            ``window_size // 2`` to exclude the band Lucas-Kanade leaves at
            zero.

    Returns:
        aae: Average angular error in degrees.
        aepe: Average endpoint error in pixels.
    """
    uv = np.asarray(uv, dtype=float)
    gt = np.asarray(gt, dtype=float)
    if uv.shape != gt.shape:
        raise ValueError(f"Flow shapes differ: {uv.shape} vs {gt.shape}")

    if border > 0:
        uv = uv[border:-border, border:-border]
        gt = gt[border:-border, border:-border]

    valid = np.all(np.abs(gt) < UNKNOWN_FLOW_THRESH, axis=2)
    u, v = uv[valid, 0], uv[valid, 1]
    tu, tv = gt[valid, 0], gt[valid, 1]
    if u.size == 0:
        return 0.0, 0.0

    cos_angle = (u * tu + v * tv + 1.0) / (
        np.sqrt(u ** 2 + v ** 2 + 1.0) * np.sqrt(tu ** 2 + tv ** 2 + 1.0))
    ae = np.degrees(np.arccos(np.clip(cos_angle, -1.0, 1.0)))

    epe = np.hypot(tu - u, tv - v)
    return float(np.mean(ae)), float(np.mean(epe))
