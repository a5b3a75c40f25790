"""Flow visualization with matplotlib."""
import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt


def plot_flow(uv, style='quiver', ax=None, background=None, step=10):
    """Plot optical flow field.

    Args:
        uv: (H, W, 2) flow field.
        style: 'quiver' (arrows on a ``step`` grid) or 'magnitude'.
        ax: matplotlib axes. If None, creates new figure.
        background: Optional (H, W) or (H, W, 3) image drawn under the
            quiver arrows.
        step: Step size for quiver plots.

    Returns:
        ax: The matplotlib axes used.
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(8, 6))

    u = uv[:, :, 0]
    v = uv[:, :, 1]
    H, W = u.shape

    if style == 'quiver':
        if background is not None:
            ax.imshow(background, cmap='gray' if np.ndim(background) == 2 else None)
        Y, X = np.mgrid[0:H:step, 0:W:step]
        ax.quiver(X, Y, u[::step, ::step], v[::step, ::step],
                  color='lime', angles='xy', scale_units='xy', scale=1)
        ax.set_ylim(H, 0)
        ax.set_xlim(0, W)
        ax.set_aspect('equal')
        ax.set_title('Optical Flow (Quiver)')
    elif style == 'magnitude':
        mag = np.sqrt(u ** 2 + v ** 2)
        ax.imshow(mag, cmap='jet')
        ax.set_title('Flow Magnitude')
    else:
        raise ValueError(f"Unknown style: {style}")

    ax.axis('off')
    return ax


def save_flow_plot(uv, filename, **kwargs):
    """Render plot_flow into a new figure and save it to ``filename``."""
    fig, ax = plt.subplots(1, 1, figsize=(8, 6))
    try:
        plot_flow(uv, ax=ax, **kwargs)
        fig.savefig(filename, bbox_inches='tight')
    finally:
        plt.close(fig)
