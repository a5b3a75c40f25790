"""
Dense Lucas-Kanade optical flow estimation.

B.D. Lucas and T. Kanade. "An iterative image registration technique with
an application to stereo vision." IJCAI, 674-679, 1981.

Every pixel gets its own least-squares velocity estimate from the
brightness constancy equations of a square window centred on it. Pixels
whose window leaves the image, or whose structure tensor is near-singular,
get a zero vector.
"""
import logging
from collections import namedtuple

import numpy as np

from lk_flow.methods.base import BaseOpticalFlow
from lk_flow.utils.derivatives import spatial_gradients


logger = logging.getLogger(__name__)

# Absolute cutoff on |det(A)|; scale-dependent in intensity units
DET_THRESHOLD = 1e-6

FlowVector = namedtuple('FlowVector', ['u', 'v'])


def _check_window_size(window_size):
    if (not isinstance(window_size, (int, np.integer))
            or window_size < 1 or window_size % 2 == 0):
        raise ValueError(f"window_size must be a positive odd integer, got {window_size}")


def solve_structure_tensor(axx, axy, ayy, bx, by, det_threshold=DET_THRESHOLD):
    """Solve the 2x2 system A @ [u, v] = -b in closed form.

    A = [[axx, axy], [axy, ayy]], b = [bx, by]. Works on scalars or on
    arrays of per-pixel sums. Entries with |det(A)| < det_threshold are
    treated as unrecoverable and solved to zero.

    Args:
        axx, axy, ayy: Structure tensor entries.
        bx, by: Gradient-weighted temporal differences.
        det_threshold: Absolute determinant cutoff (strict less-than).

    Returns:
        u, v: float32 arrays (0-d for scalar input).
    """
    axx, axy, ayy, bx, by = (np.asarray(a, dtype=np.float32)
                             for a in (axx, axy, ayy, bx, by))

    det = axx * ayy - axy * axy
    degenerate = np.abs(det.astype(np.float64)) < det_threshold
    det = np.where(degenerate, np.float32(1.0), det)

    # Cramer's rule
    u = (ayy * -bx - axy * -by) / det
    v = (axx * -by - axy * -bx) / det

    u = np.where(degenerate, np.float32(0.0), u)
    v = np.where(degenerate, np.float32(0.0), v)
    return u, v


def solve_window(im1, im2, grad_x, grad_y, x, y, window_size=5,
                 det_threshold=DET_THRESHOLD):
    """Estimate the flow vector of a single pixel.

    Accumulates the structure tensor over the window centred at (x, y) in
    float32, rows outer and columns inner.

    Args:
        im1, im2: Intensity images (H, W).
        grad_x, grad_y: Spatial gradients of im1.
        x, y: Column and row of the pixel.
        window_size: Odd window side length.
        det_threshold: Absolute determinant cutoff.

    Returns:
        FlowVector(u, v). (0, 0) when the window does not fit inside the
        image or the system is near-singular.
    """
    _check_window_size(window_size)
    im1 = np.asarray(im1, dtype=np.float32)
    im2 = np.asarray(im2, dtype=np.float32)
    grad_x = np.asarray(grad_x, dtype=np.float32)
    grad_y = np.asarray(grad_y, dtype=np.float32)

    H, W = im1.shape
    hw = window_size // 2
    if x - hw < 0 or x + hw >= W or y - hw < 0 or y + hw >= H:
        return FlowVector(0.0, 0.0)

    axx = axy = ayy = bx = by = np.float32(0.0)
    for dy in range(-hw, hw + 1):
        for dx in range(-hw, hw + 1):
            r, c = y + dy, x + dx
            Ix = grad_x[r, c]
            Iy = grad_y[r, c]
            It = im2[r, c] - im1[r, c]

            axx += Ix * Ix
            axy += Ix * Iy
            ayy += Iy * Iy
            bx += Ix * It
            by += Iy * It

    u, v = solve_structure_tensor(axx, axy, ayy, bx, by, det_threshold)
    return FlowVector(float(u), float(v))


class LucasKanadeFlow(BaseOpticalFlow):
    """Dense single-scale Lucas-Kanade optical flow."""

    def __init__(self):
        self.window_size = 5
        self.det_threshold = DET_THRESHOLD

    def compute_flow(self, im1, im2):
        """Compute a dense flow field from im1 to im2.

        Window sums are accumulated for all valid centres at once, one
        window offset at a time. Each pixel sees the same float32 operation
        sequence as solve_window, so the result is identical to calling it
        at every pixel.

        Args:
            im1: First intensity image (H, W).
            im2: Second intensity image (H, W).

        Returns:
            uv: Flow field (H, W, 2), float32. uv[:,:,0] = horizontal,
                uv[:,:,1] = vertical.
        """
        _check_window_size(self.window_size)
        im1, im2 = self._check_pair(im1, im2)

        H, W = im1.shape
        uv = np.zeros((H, W, 2), dtype=np.float32)

        hw = self.window_size // 2
        ch, cw = H - 2 * hw, W - 2 * hw
        if ch <= 0 or cw <= 0:
            logger.debug("Image %dx%d smaller than window %d, flow is zero",
                         W, H, self.window_size)
            return uv

        grad_x, grad_y = spatial_gradients(im1)
        It_full = im2 - im1

        axx = np.zeros((ch, cw), dtype=np.float32)
        axy = np.zeros_like(axx)
        ayy = np.zeros_like(axx)
        bx = np.zeros_like(axx)
        by = np.zeros_like(axx)

        for dy in range(-hw, hw + 1):
            rows = slice(hw + dy, hw + dy + ch)
            for dx in range(-hw, hw + 1):
                cols = slice(hw + dx, hw + dx + cw)
                Ix = grad_x[rows, cols]
                Iy = grad_y[rows, cols]
                It = It_full[rows, cols]

                axx += Ix * Ix
                axy += Ix * Iy
                ayy += Iy * Iy
                bx += Ix * It
                by += Iy * It

        u, v = solve_structure_tensor(axx, axy, ayy, bx, by, self.det_threshold)
        uv[hw:H - hw, hw:W - hw, 0] = u
        uv[hw:H - hw, hw:W - hw, 1] = v

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Lucas-Kanade %dx%d window=%d: %d/%d non-zero vectors",
                         W, H, self.window_size,
                         int(np.count_nonzero((u != 0) | (v != 0))), H * W)
        return uv
