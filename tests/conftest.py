"""Shared fixtures for Lucas-Kanade flow tests."""
import numpy as np
import pytest
from PIL import Image

from lk_flow.io.frames import FrameDecodeError
from lk_flow.utils.image_processing import rgb_to_intensity


class InMemoryCodec:
    """Codec stand-in serving frames from a dict and recording writes.

    ``frames`` maps a path to an (H, W) or (H, W, 3) uint8 array, or to an
    exception instance that decode should raise.
    """

    def __init__(self, frames):
        self.frames = frames
        self.written = {}

    def _lookup(self, path):
        if path not in self.frames:
            raise FrameDecodeError(f"Could not load {path}")
        img = self.frames[path]
        if isinstance(img, Exception):
            raise img
        return np.asarray(img)

    def decode(self, path):
        return rgb_to_intensity(self._lookup(path))

    def decode_rgb(self, path):
        img = self._lookup(path)
        if img.ndim == 2:
            img = np.stack([img] * 3, axis=2)
        return img.astype(np.uint8)

    def encode(self, path, rgb, quality=90):
        self.written[path] = np.array(rgb, copy=True)


@pytest.fixture
def make_codec():
    """Factory for in-memory codecs."""
    return InMemoryCodec


@pytest.fixture
def textured_pair():
    """Random texture and a one-pixel right shift of it."""
    rng = np.random.default_rng(42)
    H, W = 32, 40
    im1 = (rng.random((H, W)) * 255).astype(np.float32)
    im2 = np.zeros_like(im1)
    im2[:, 1:] = im1[:, :-1]
    im2[:, 0] = im1[:, 0]
    return im1, im2


@pytest.fixture
def quadratic_pair():
    """Paraboloid I1 = x^2 + y^2 under linearised motion (k, l) = (0.5, -0.25).

    Central differences of I1 are exactly (2x, 2y), and I2 - I1 equals
    -(Ix * k + Iy * l) at every pixel, so the least-squares solution of any
    non-degenerate window is exactly (k, l).
    """
    H, W = 24, 28
    k, l = 0.5, -0.25
    y, x = np.mgrid[0:H, 0:W].astype(np.float64)
    im1 = x ** 2 + y ** 2
    im2 = im1 - 2 * k * x - 2 * l * y
    return im1.astype(np.float32), im2.astype(np.float32), (k, l)


@pytest.fixture
def write_frames(tmp_path):
    """Write uint8 arrays as numbered PNG frames, returning the directory."""
    def _write(arrays, pattern='frame_{:04d}.png', start=1, subdir='frames_input'):
        frame_dir = tmp_path / subdir
        frame_dir.mkdir(exist_ok=True)
        for i, arr in enumerate(arrays, start=start):
            Image.fromarray(np.asarray(arr, dtype=np.uint8)).save(
                str(frame_dir / pattern.format(i)))
        return frame_dir
    return _write
