"""Optical flow estimation methods."""
from lk_flow.methods.lucas_kanade import (
    LucasKanadeFlow, FlowVector, solve_window, solve_structure_tensor
)
from lk_flow.methods.config import load_of_method

__all__ = [
    'LucasKanadeFlow',
    'FlowVector',
    'solve_window',
    'solve_structure_tensor',
    'load_of_method',
]
