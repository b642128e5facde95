""" Rescaling of gradient magnitude to [0,255]

The maximum over the interior is found by parallel reduction (partial maxima
of partitions combined with max), then each interior cell is replaced by
v*255 // max. Integer division truncates, no rounding takes place.
"""


import logging

import numba as nb
import numpy as np

from .executor import WorkerPool
from .partition import Tiled, as_bounds
from .plane import Plane


logger = logging.getLogger(__name__)


@nb.njit(nogil=True)
def _region_max(buf, width, row0, row1, col0, col1):
    m = 0
    for r in range(row0, row1):
        offset = r * width
        for c in range(col0, col1):
            v = buf[offset+c]
            if v > m:
                m = v
    return m


@nb.njit(nogil=True)
def _rescale_region(buf, width, row0, row1, col0, col1, max_val):
    for r in range(row0, row1):
        offset = r * width
        for c in range(col0, col1):
            buf[offset+c] = np.int64(buf[offset+c]) * 255 // max_val


@nb.njit(nogil=True)
def _parts_max(buf, width, bounds):
    m = 0
    for i in range(bounds.shape[0]):
        v = _region_max(buf, width, bounds[i,0], bounds[i,1], bounds[i,2], bounds[i,3])
        if v > m:
            m = v
    return m


@nb.njit(nogil=True)
def _rescale_parts(buf, width, bounds, max_val):
    for i in range(bounds.shape[0]):
        _rescale_region(buf, width, bounds[i,0], bounds[i,1], bounds[i,2], bounds[i,3], max_val)


def region_max(gradient:Plane, part):
    """ Max value in part, 0 for empty part """
    if part.size == 0:
        return 0
    return int(_region_max(gradient.samples, gradient.width, part.row0, part.row1, part.col0, part.col1))


def rescale_region(gradient:Plane, part, max_val):
    """ In-place v*255 // max_val for cells in part """
    if part.size == 0 or max_val <= 0:
        return
    _rescale_region(gradient.samples, gradient.width, part.row0, part.row1, part.col0, part.col1, int(max_val))


def parts_max(gradient:Plane, parts):
    """ Max value over a work list, 0 when it is empty """
    if not parts:
        return 0
    return int(_parts_max(gradient.samples, gradient.width, as_bounds(parts)))


def rescale_parts(gradient:Plane, parts, max_val):
    if not parts or max_val <= 0:
        return
    _rescale_parts(gradient.samples, gradient.width, as_bounds(parts), int(max_val))


def _work(gradient, strategy, workers):
    strategy = strategy or Tiled()
    return strategy.assign(gradient.width, gradient.height, workers)


def interior_max(gradient:Plane, workers=1, strategy=None, pool=None):
    """ Maximum over interior cells of gradient (0 when there is no interior) """
    own_pool = pool is None
    pool = pool or WorkerPool(workers)
    try:
        work = _work(gradient, strategy, pool.workers)
        partial = pool.map(lambda parts: parts_max(gradient, parts), work)
    finally:
        if own_pool:
            pool.close()
    return max(partial, default=0)


def normalize(gradient:Plane, workers=1, strategy=None, pool=None):
    """ Rescale interior of gradient plane to [0,255] in place

    Inputs
    ------
    gradient : Plane
        Output of sobeledge.gradient.sobel. Must not be accessed by other
        threads during normalization.
    workers, strategy, pool
        Same meaning as in sobel(). The partitioning does not affect the result.

    Outputs
    -------
    max_val : int
        Maximum gradient used as the scale reference. When it is 0, the plane
        is left untouched.
    """
    own_pool = pool is None
    pool = pool or WorkerPool(workers)
    try:
        max_val = interior_max(gradient, strategy=strategy, pool=pool)
        if max_val == 0:
            logger.info("Flat image, no gradient to normalize")
            return 0
        work = _work(gradient, strategy, pool.workers)
        logger.debug(f"Rescaling {len(work)} work lists, max gradient {max_val}")
        pool.map(lambda parts: rescale_parts(gradient, parts, max_val), work)
    finally:
        if own_pool:
            pool.close()
    return max_val
