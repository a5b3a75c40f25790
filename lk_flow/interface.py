"""
High-level interface for optical flow estimation.
"""
import numpy as np
from lk_flow.methods.config import load_of_method
from lk_flow.utils.image_processing import rgb_to_intensity


def estimate_flow(im1, im2, method='lk', params=None):
    """Estimate optical flow between two images.

    Args:
        im1: First image, (H, W) grayscale or (H, W, 3) RGB, float or uint8,
            intensities in [0, 255].
        im2: Second image, same size/format as im1.
        method: Method name string. See load_of_method for options.
        params: Optional dict of parameter overrides, e.g.
            ``{'window_size': 7}``.

    Returns:
        uv: Estimated optical flow (H, W, 2), float32. uv[:,:,0] =
            horizontal, uv[:,:,1] = vertical.
    """
    ope = load_of_method(method)

    if params is not None:
        ope.parse_input_parameter(params)

    gray1 = rgb_to_intensity(np.asarray(im1))
    gray2 = rgb_to_intensity(np.asarray(im2))

    return ope.compute_flow(gray1, gray2)
