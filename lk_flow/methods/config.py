"""
Method configuration factory.

Maps method name strings to configured optical flow objects.
"""


def load_of_method(method):
    """Load a pre-configured optical flow method by name.

    Available methods:
        - 'lk': Lucas-Kanade with a 5x5 window (default)
        - 'lk-wide': Lucas-Kanade with a 9x9 window, smoother but blurs
          motion boundaries

    Args:
        method: Method name string.

    Returns:
        ope: Configured optical flow object.
    """
    if method == 'lk':
        from lk_flow.methods.lucas_kanade import LucasKanadeFlow
        ope = LucasKanadeFlow()
        ope.window_size = 5
        ope.det_threshold = 1e-6
        return ope

    elif method == 'lk-wide':
        ope = load_of_method('lk')
        ope.window_size = 9
        return ope

    else:
        raise ValueError(f"Unknown optical flow method: '{method}'")
