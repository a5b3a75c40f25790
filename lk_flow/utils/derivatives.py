"""Spatial derivatives for Lucas-Kanade flow estimation."""
import numpy as np
from scipy.ndimage import correlate


# Central difference: (I[x+1] - I[x-1]) / 2
CENTRAL_DIFF = np.array([-0.5, 0.0, 0.5])


def spatial_gradients(image, deriv_filter=CENTRAL_DIFF):
    """Compute horizontal and vertical spatial gradients of an image.

    Only interior pixels are filled; the outermost 1-pixel border of both
    outputs is left at zero so that no value is ever derived from an
    out-of-image neighbour.

    Args:
        image: Intensity image (H, W).
        deriv_filter: 1D derivative filter of length 3.

    Returns:
        grad_x: Horizontal derivative (H, W), float32.
        grad_y: Vertical derivative (H, W), float32.
    """
    image = np.asarray(image, dtype=np.float32)
    if image.ndim != 2:
        raise ValueError(f"Expected a 2D intensity image, got shape {image.shape}")

    grad_x = np.zeros_like(image)
    grad_y = np.zeros_like(image)

    H, W = image.shape
    if H < 3 or W < 3:
        return grad_x, grad_y

    dfilter_x = np.asarray(deriv_filter, dtype=float).reshape(1, -1)
    dfilter_y = np.asarray(deriv_filter, dtype=float).reshape(-1, 1)

    Ix = correlate(image, dfilter_x, mode='nearest')
    Iy = correlate(image, dfilter_y, mode='nearest')

    grad_x[1:-1, 1:-1] = Ix[1:-1, 1:-1]
    grad_y[1:-1, 1:-1] = Iy[1:-1, 1:-1]

    return grad_x, grad_y
