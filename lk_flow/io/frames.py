"""Frame sequence discovery and image codec.

Input frames are still images named by a zero-padded, 1-indexed pattern
(``frame_0001.jpg``, ``frame_0002.jpg``, ...), for example as produced by::

    ffmpeg -i input.mp4 frames_input/frame_%04d.jpg

The sequence ends at the first missing index. Decoding goes through
Pillow; any codec exposing ``decode``, ``decode_rgb`` and ``encode`` can be
handed to the pipeline instead.
"""
import logging
import os

import numpy as np
from PIL import Image

from lk_flow.utils.image_processing import rgb_to_intensity


logger = logging.getLogger(__name__)

INPUT_PATTERN = 'frame_{:04d}.jpg'
JPEG_QUALITY = 90


class FrameDecodeError(Exception):
    """Raised when a frame is missing or cannot be decoded."""
    pass


class FrameFormatError(FrameDecodeError):
    """Raised when a frame decodes to an unsupported channel count."""
    pass


def check_pattern(pattern):
    """Raise ValueError unless ``pattern.format(index)`` varies with the index."""
    try:
        first, second = pattern.format(1), pattern.format(2)
    except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid file name pattern '{pattern}': {e}") from e
    if first == second:
        raise ValueError(f"File name pattern '{pattern}' has no index placeholder")


class FrameSequence:
    """Ordered, gap-free sequence of frame files in a directory.

    Iterating yields ``(index, path)`` pairs starting at ``start`` and stops
    at the first index whose file does not exist.
    """

    def __init__(self, directory, pattern=INPUT_PATTERN, start=1):
        check_pattern(pattern)
        self.directory = directory
        self.pattern = pattern
        self.start = start

    def path_for(self, index):
        return os.path.join(self.directory, self.pattern.format(index))

    def __iter__(self):
        index = self.start
        while True:
            path = self.path_for(index)
            if not os.path.isfile(path):
                logger.debug("No frame file at %s, sequence ends", path)
                return
            yield index, path
            index += 1


def _load_image(path):
    img = None
    try:
        img = Image.open(path)
        img.load()
    except (OSError, Image.DecompressionBombError) as e:
        if img is not None:
            img.close()
        raise FrameDecodeError(f"Could not load {path}: {e}") from e
    return img


def _gray_array(img):
    """8-bit intensity of a single-band image.

    16- and 32-bit integer modes keep the top byte of the 16-bit range
    rather than being clipped to 255.
    """
    if img.mode.startswith('I'):
        arr = np.clip(np.asarray(img, dtype=np.int64), 0, 0xFFFF) >> 8
        return arr.astype(np.uint8)
    return np.asarray(img.convert('L'))


class PillowFrameCodec:
    """Reads frames and writes overlays with Pillow."""

    def decode(self, path):
        """Decode a frame into an intensity image.

        Single-channel images are used directly, 16-bit ones scaled down to
        8 bits; 3-channel images are converted with BT.601 luma weights.
        Palette images are expanded before counting channels.

        Args:
            path: Image file path.

        Returns:
            gray: (H, W) float32 intensity image in [0, 255].

        Raises:
            FrameDecodeError: If the file is missing or unreadable.
            FrameFormatError: If the channel count is not 1 or 3.
        """
        with _load_image(path) as img:
            if img.mode == 'P':
                img = img.convert('RGBA' if 'transparency' in img.info else 'RGB')

            channels = len(img.getbands())
            try:
                if channels == 1:
                    return _gray_array(img).astype(np.float32)
                elif channels == 3:
                    return rgb_to_intensity(np.asarray(img.convert('RGB')))
            except ValueError as e:
                raise FrameDecodeError(f"Could not convert {path} ({img.mode}): {e}") from e

        raise FrameFormatError(f"Unsupported channel count {channels} in {path}")

    def decode_rgb(self, path):
        """Decode a frame as an (H, W, 3) uint8 RGB image for display."""
        with _load_image(path) as img:
            try:
                if img.mode.startswith('I'):
                    return np.stack([_gray_array(img)] * 3, axis=2)
                return np.array(img.convert('RGB'), dtype=np.uint8)
            except ValueError as e:
                raise FrameDecodeError(f"Could not convert {path} to RGB: {e}") from e

    def encode(self, path, rgb, quality=JPEG_QUALITY):
        """Write an (H, W, 3) uint8 image; format follows the file extension."""
        rgb = np.ascontiguousarray(rgb, dtype=np.uint8)
        if rgb.ndim != 3 or rgb.shape[2] != 3:
            raise ValueError(f"Expected (H, W, 3) image, got shape {rgb.shape}")
        Image.fromarray(rgb).save(path, quality=quality)
