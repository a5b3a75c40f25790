"""
Lucas-Kanade Optical Flow Package

Dense single-scale Lucas-Kanade optical flow between consecutive video
frames, with arrow overlays of the estimated motion for visual inspection.
"""

from lk_flow.interface import estimate_flow
from lk_flow.methods.config import load_of_method
from lk_flow.methods.lucas_kanade import LucasKanadeFlow, FlowVector, solve_window
from lk_flow.utils.derivatives import spatial_gradients
from lk_flow.io.flo_io import read_flo, write_flo
from lk_flow.io.frames import FrameSequence, PillowFrameCodec, FrameDecodeError, FrameFormatError
from lk_flow.viz.overlay import draw_flow_arrows
from lk_flow.viz.plot_flow import plot_flow
from lk_flow.evaluation.metrics import flow_errors
from lk_flow.pipeline import FlowPipeline, PipelineResult, StopReason

__all__ = [
    'estimate_flow',
    'load_of_method',
    'LucasKanadeFlow',
    'FlowVector',
    'solve_window',
    'spatial_gradients',
    'read_flo',
    'write_flo',
    'FrameSequence',
    'PillowFrameCodec',
    'FrameDecodeError',
    'FrameFormatError',
    'draw_flow_arrows',
    'plot_flow',
    'flow_errors',
    'FlowPipeline',
    'PipelineResult',
    'StopReason',
]
