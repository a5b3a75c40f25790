"""Tests for matplotlib flow plots."""
import numpy as np
import pytest
import matplotlib.pyplot as plt
from lk_flow.viz.plot_flow import plot_flow, save_flow_plot


class TestPlotFlow:

    def test_quiver(self):
        uv = np.ones((30, 40, 2))
        ax = plot_flow(uv, style='quiver', background=np.zeros((30, 40)))
        assert ax.get_title() == 'Optical Flow (Quiver)'
        plt.close(ax.figure)

    def test_magnitude(self):
        ax = plot_flow(np.zeros((10, 10, 2)), style='magnitude')
        assert ax.get_title() == 'Flow Magnitude'
        plt.close(ax.figure)

    def test_unknown_style(self):
        fig, ax = plt.subplots()
        with pytest.raises(ValueError):
            plot_flow(np.zeros((5, 5, 2)), style='hsv', ax=ax)
        plt.close(fig)

    def test_save(self, tmp_path):
        path = tmp_path / 'quiver.png'
        save_flow_plot(np.ones((20, 20, 2)), str(path), step=5)
        assert path.is_file()
