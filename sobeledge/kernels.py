""" Sobel derivative kernels

GX responds to horizontal changes of intensity (vertical edges), GY to
vertical changes (horizontal edges). Both arrays are read-only and shared by
all workers.
"""


import numpy as np


def _constant(rows):
    k = np.array(rows, np.int32)
    k.setflags(write=False)
    return k


GX = _constant([[-1, 0, 1],
                [-2, 0, 2],
                [-1, 0, 1]])

GY = _constant([[-1,-2,-1],
                [ 0, 0, 0],
                [ 1, 2, 1]])

KERNELS = {"x": GX, "y": GY}

_SMOOTH = _constant([1, 2, 1])
_DERIV = _constant([-1, 0, 1])


def separable(axis):
    """ Separable factors of the kernel for axis "x" or "y"

    Outputs
    -------
    rows, cols : ndarray
        1-D factors such that np.outer(rows, cols) == KERNELS[axis]
    """
    if axis == "x":
        return _SMOOTH, _DERIV
    if axis == "y":
        return _DERIV, _SMOOTH
    raise ValueError(f"Unknown axis '{axis}'")
