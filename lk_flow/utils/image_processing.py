"""Image conversion helpers."""
import numpy as np


# ITU-R BT.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def rgb_to_intensity(im):
    """Convert an RGB image to a float32 intensity image.

    Weights are applied in double precision and the result is stored as
    float32, values stay in the 0-255 range of the input.

    Args:
        im: (H, W, 3) RGB image, or (H, W) which is returned as float32.

    Returns:
        gray: (H, W) float32 intensity image.
    """
    im = np.asarray(im)
    if im.ndim == 2:
        return im.astype(np.float32)
    if im.ndim != 3 or im.shape[2] != 3:
        raise ValueError(f"Expected (H, W) or (H, W, 3) image, got shape {im.shape}")

    im = im.astype(np.float64)
    gray = (LUMA_WEIGHTS[0] * im[:, :, 0] +
            LUMA_WEIGHTS[1] * im[:, :, 1] +
            LUMA_WEIGHTS[2] * im[:, :, 2])
    return gray.astype(np.float32)


def round_half_away(x):
    """Round to the nearest integer, halves away from zero."""
    return int(np.sign(x) * np.floor(abs(x) + 0.5))
