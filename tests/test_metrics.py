"""Tests for flow evaluation metrics."""
import numpy as np
import pytest
from lk_flow.evaluation.metrics import flow_errors
from lk_flow.methods.lucas_kanade import LucasKanadeFlow


class TestFlowErrors:
    """Test AAE and EPE computation."""

    def test_perfect_flow(self):
        uv = np.random.randn(20, 20, 2)
        aae, aepe = flow_errors(uv, uv)
        assert aae == pytest.approx(0.0, abs=1e-5)
        assert aepe == pytest.approx(0.0, abs=1e-10)

    def test_endpoint_error(self):
        gt = np.array([[[3.0, 0.0]]])
        est = np.zeros((1, 1, 2))
        _, aepe = flow_errors(est, gt)
        assert aepe == pytest.approx(3.0)

    def test_border_excluded(self):
        """Errors in the border band are ignored."""
        gt = np.zeros((10, 10, 2))
        est = np.zeros((10, 10, 2))
        est[0, :] = 5.0
        assert flow_errors(est, gt)[1] > 0
        assert flow_errors(est, gt, border=2) == (0.0, 0.0)

    def test_unknown_flow_filtered(self):
        gt = np.zeros((5, 5, 2))
        gt[0, 0] = 1e10
        aae, aepe = flow_errors(np.zeros((5, 5, 2)), gt)
        assert aae == pytest.approx(0.0, abs=1e-10)
        assert aepe == pytest.approx(0.0, abs=1e-10)

    def test_shape_mismatch_raises(self):
        with pytest.raises(ValueError):
            flow_errors(np.zeros((4, 4, 2)), np.zeros((4, 5, 2)))

    def test_lucas_kanade_on_paraboloid(self, quadratic_pair):
        """LK error on the analytic pattern is negligible inside the border."""
        im1, im2, (k, l) = quadratic_pair
        uv = LucasKanadeFlow().compute_flow(im1, im2)
        gt = np.zeros_like(uv)
        gt[..., 0], gt[..., 1] = k, l
        aae, aepe = flow_errors(uv, gt, border=2)
        assert aepe < 1e-3
        assert aae < 0.1
