"""
Abstract base class for optical flow estimation methods.
"""
import numpy as np
from abc import ABC, abstractmethod


def parameter_items(params):
    """(key, value) pairs from a dictionary or a [key, value, ...] list."""
    if isinstance(params, dict):
        return params.items()
    elif isinstance(params, (list, tuple)):
        return zip(params[0::2], params[1::2])
    raise TypeError(f"Parameters must be a dict or list, got {type(params).__name__}")


class BaseOpticalFlow(ABC):
    """Base class for two-frame optical flow estimation."""

    def parse_input_parameter(self, params):
        """Set parameters from a dictionary or list of key-value pairs.

        Unknown keys are ignored.

        Args:
            params: dict or list of [key, value, key, value, ...].
        """
        for key, val in parameter_items(params):
            if hasattr(self, key):
                setattr(self, key, val)

    @staticmethod
    def _check_pair(im1, im2):
        """Convert a frame pair to float32 and validate shapes."""
        im1 = np.asarray(im1, dtype=np.float32)
        im2 = np.asarray(im2, dtype=np.float32)

        if im1.ndim != 2 or im2.ndim != 2:
            raise ValueError(
                f"Frames must be 2D intensity images. Got shapes: "
                f"{im1.shape}, {im2.shape}"
            )
        if im1.shape != im2.shape:
            raise ValueError(
                f"Frame shapes must match. Got: {im1.shape} vs {im2.shape}"
            )
        return im1, im2

    @abstractmethod
    def compute_flow(self, im1, im2):
        """Compute the dense flow field (H, W, 2) from im1 to im2."""
        pass
