"""Arrow overlays of a flow field on top of the source frame."""
import numpy as np
from skimage.draw import line

from lk_flow.utils.image_processing import round_half_away

ARROW_STRIDE = 10
ARROW_COLOR = (0, 255, 0)


def _clip_endpoint(x0, y0, x1, y1, width, height):
    """Liang-Barsky clip of a segment whose start lies inside the image.

    Returns the last point of (x0, y0) -> (x1, y1) inside
    [0, width - 1] x [0, height - 1], rounded to a pixel.
    """
    dx, dy = x1 - x0, y1 - y0
    t = 1.0
    for p, q in ((-dx, x0), (dx, width - 1 - x0), (-dy, y0), (dy, height - 1 - y0)):
        if p > 0:
            t = min(t, q / p)
    if t == 1.0:
        return x1, y1
    return round_half_away(x0 + t * dx), round_half_away(y0 + t * dy)


def draw_flow_arrows(image, uv, stride=ARROW_STRIDE, color=ARROW_COLOR):
    """Draw sampled flow vectors as line segments on a copy of an image.

    The field is sampled every ``stride`` pixels along both axes starting at
    (0, 0). Each sample becomes a Bresenham segment from (x, y) to
    (x + round(u), y + round(v)), clipped to the image first so that the
    cost of a segment is bounded by the image size.

    Args:
        image: (H, W, 3) uint8 RGB image. Not modified.
        uv: (H, W, 2) flow field.
        stride: Sampling step in pixels.
        color: RGB colour of the segments.

    Returns:
        vis: (H, W, 3) uint8 image with the segments drawn.
    """
    vis = np.array(image, dtype=np.uint8, copy=True)
    if vis.ndim != 3 or vis.shape[2] != 3:
        raise ValueError(f"Expected (H, W, 3) RGB image, got shape {vis.shape}")

    uv = np.asarray(uv)
    H, W = vis.shape[:2]
    if uv.shape != (H, W, 2):
        raise ValueError(
            f"Flow shape {uv.shape} does not match image shape {vis.shape[:2]}"
        )
    if stride < 1:
        raise ValueError(f"stride must be positive, got {stride}")

    for y in range(0, H, stride):
        for x in range(0, W, stride):
            u, v = uv[y, x]
            if not (np.isfinite(u) and np.isfinite(v)):
                continue
            x1, y1 = _clip_endpoint(x, y, x + round_half_away(u),
                                    y + round_half_away(v), W, H)
            rr, cc = line(y, x, y1, x1)
            inside = (rr >= 0) & (rr < H) & (cc >= 0) & (cc < W)
            vis[rr[inside], cc[inside]] = color

    return vis
