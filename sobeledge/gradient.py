""" Sobel gradient magnitude

For every interior pixel (r,c)

    sx = sum(image[r+p,c+q] * GX[p+1,q+1])
    sy = sum(image[r+p,c+q] * GY[p+1,q+1])
    g[r,c] = floor(sqrt(sx**2 + sy**2))

Border pixels are never evaluated and stay 0. The computation is split into
partitions (see sobeledge.partition) evaluated by numba kernels that release
the GIL, so a WorkerPool evaluates them in parallel.

Functions
---------
sobel               Partitioned computation, configurable workers/strategy
sobel_region        Evaluate one partition
sobel_parts         Evaluate a work list of partitions
sobel_reference     Vectorized computation with scipy.ndimage
"""


import logging
import math

import numba as nb
import numpy as np
from scipy.ndimage import convolve1d

from .executor import WorkerPool
from .kernels import GX, GY, separable
from .partition import Tiled, as_bounds
from .plane import Plane


logger = logging.getLogger(__name__)


@nb.njit(nogil=True)
def _sobel_region_unrolled(src, dst, width, row0, row1, col0, col1):
    """ Nine explicit terms per kernel, row offsets computed once per row """
    for r in range(row0, row1):
        above = (r-1) * width
        here = r * width
        below = (r+1) * width
        for c in range(col0, col1):
            a0 = np.int64(src[above+c-1])
            a1 = np.int64(src[above+c])
            a2 = np.int64(src[above+c+1])
            m0 = np.int64(src[here+c-1])
            m2 = np.int64(src[here+c+1])
            b0 = np.int64(src[below+c-1])
            b1 = np.int64(src[below+c])
            b2 = np.int64(src[below+c+1])
            sx = -a0 + a2 - 2*m0 + 2*m2 - b0 + b2
            sy = -a0 - 2*a1 - a2 + b0 + 2*b1 + b2
            dst[here+c] = int(math.sqrt(sx*sx + sy*sy))


@nb.njit(nogil=True)
def _sobel_region_loop(src, dst, width, row0, row1, col0, col1):
    """ Plain 3x3 accumulation over the kernel tables """
    for r in range(row0, row1):
        for c in range(col0, col1):
            sx = 0
            sy = 0
            for p in range(-1, 2):
                for q in range(-1, 2):
                    pixel = np.int64(src[(r+p)*width + c+q])
                    sx += pixel * GX[p+1, q+1]
                    sy += pixel * GY[p+1, q+1]
            dst[r*width+c] = int(math.sqrt(sx*sx + sy*sy))


@nb.njit(nogil=True)
def _sobel_parts_unrolled(src, dst, width, bounds):
    for i in range(bounds.shape[0]):
        _sobel_region_unrolled(src, dst, width, bounds[i,0], bounds[i,1], bounds[i,2], bounds[i,3])


@nb.njit(nogil=True)
def _sobel_parts_loop(src, dst, width, bounds):
    for i in range(bounds.shape[0]):
        _sobel_region_loop(src, dst, width, bounds[i,0], bounds[i,1], bounds[i,2], bounds[i,3])


def sobel_region(image:Plane, gradient:Plane, part, unroll=True):
    """ Compute gradient magnitude for cells in part

    Only gradient cells inside part are written. The caller must ensure that
    part lies inside image.interior.
    """
    if part.size == 0:
        return
    kernel = _sobel_region_unrolled if unroll else _sobel_region_loop
    kernel(image.samples, gradient.samples, image.width, part.row0, part.row1, part.col0, part.col1)


def sobel_parts(image:Plane, gradient:Plane, parts, unroll=True):
    """ Compute gradient magnitude for a work list of partitions in one call """
    if not parts:
        return
    kernel = _sobel_parts_unrolled if unroll else _sobel_parts_loop
    kernel(image.samples, gradient.samples, image.width, as_bounds(parts))


def sobel(image:Plane, workers=1, strategy=None, unroll=True, pool=None) -> Plane:
    """ Gradient magnitude of image

    Inputs
    ------
    image : Plane
        Input intensities (usually uint8)
    workers : int
        Number of worker threads. Ignored when pool is given.
    strategy : RowMajor or Tiled
        How the interior is split among workers. Tiled(32) by default.
    unroll : bool
        Use the unrolled kernel. Results are identical either way.
    pool : WorkerPool
        Existing pool to use (e.g. shared with the normalization stage)

    Outputs
    -------
    gradient : Plane
        int32 plane with the same dimensions as image. Border is 0.

    Notes
    -----
    Planes without interior (width or height < 3) produce all-zero gradient.
    """
    gradient = Plane.zeros_like(image, np.int32)
    if not image.has_interior:
        logger.warning(f"Image {image.width}x{image.height} has no interior pixels, gradient is empty")
        return gradient

    strategy = strategy or Tiled()
    own_pool = pool is None
    pool = pool or WorkerPool(workers)
    work = strategy.assign(image.width, image.height, pool.workers)
    logger.debug(f"Computing gradient of {image.width}x{image.height} image in {len(work)} work lists ({strategy})")
    try:
        pool.map(lambda parts: sobel_parts(image, gradient, parts, unroll), work)
    finally:
        if own_pool:
            pool.close()
    return gradient


def gradients(image):
    """ Horizontal and vertical derivatives of (H,W) array as int32 """
    image = np.asarray(image, np.int32)
    hx, dx = separable("x")
    dy, hy = separable("y")
    # convolve1d flips the kernel, which only changes the sign of derivatives
    gx = convolve1d(convolve1d(image, hx, axis=0), dx, axis=1)
    gy = convolve1d(convolve1d(image, hy, axis=1), dy, axis=0)
    return gx, gy


def sobel_reference(image:Plane) -> Plane:
    """ Vectorized gradient magnitude, equal to sobel(image) """
    gradient = Plane.zeros_like(image, np.int32)
    if not image.has_interior:
        return gradient
    gx, gy = gradients(image.grid)
    mag = np.sqrt((gx.astype(np.int64)**2 + gy.astype(np.int64)**2).astype(np.float64))
    gradient.grid[1:-1,1:-1] = mag[1:-1,1:-1].astype(np.int32)
    return gradient
