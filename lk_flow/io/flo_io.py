"""Read and write .flo optical flow files (Middlebury format).

Layout, all little-endian:
    - float32 tag 202021.25
    - int32 width, int32 height
    - height * width * 2 float32 values, row-major, interleaved u, v
"""
import numpy as np

TAG_FLOAT = 202021.25


def read_flo(filename):
    """Read a .flo optical flow file.

    Args:
        filename: Path to .flo file.

    Returns:
        flow: (H, W, 2) float32 array.

    Raises:
        ValueError: If the tag is wrong or the payload is truncated.
    """
    with open(filename, 'rb') as f:
        header = f.read(12)
        if len(header) < 12:
            raise ValueError(f'Truncated .flo header in {filename}')
        tag = np.frombuffer(header, '<f4', count=1, offset=0)[0]
        if tag != TAG_FLOAT:
            raise ValueError(
                f'Invalid .flo file tag: {tag} (expected {TAG_FLOAT})'
            )
        w, h = np.frombuffer(header, '<i4', count=2, offset=4)
        data = np.frombuffer(f.read(), '<f4')

    if data.size != int(w) * int(h) * 2:
        raise ValueError(
            f'Invalid .flo payload in {filename}: {data.size} values '
            f'for {w}x{h} flow'
        )
    return data.reshape((int(h), int(w), 2)).astype(np.float32)


def write_flo(flow, filename):
    """Write an (H, W, 2) flow field to a .flo file."""
    flow = np.asarray(flow)
    if flow.ndim != 3 or flow.shape[2] != 2:
        raise ValueError(
            f"Flow must be (H, W, 2) array, got shape {flow.shape}"
        )

    h, w = flow.shape[:2]
    with open(filename, 'wb') as f:
        f.write(np.array([TAG_FLOAT], dtype='<f4').tobytes())
        f.write(np.array([w, h], dtype='<i4').tobytes())
        f.write(np.ascontiguousarray(flow, dtype='<f4').tobytes())
