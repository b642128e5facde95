""" Edge map pipeline

image -> gradient (parallel map) -> barrier -> normalization (parallel
reduction + parallel rescale) -> edge map

Both phases share one WorkerPool.
"""


import logging
import time
from numbers import Integral

from .executor import WorkerPool
from .gradient import sobel
from .normalize import normalize
from .partition import STRATEGIES, strategy_from_name
from .pgm import read_pgm, write_pgm
from .plane import Plane


logger = logging.getLogger(__name__)


default_opts = {
    "workers": 1,        # Number of worker threads, 1 = sequential
    "strategy": "tiled", # "rows" or "tiled"
    "tile_size": 32,     # Tile side for "tiled" strategy
    "unroll": True,      # Use unrolled 3x3 kernel
}


def check_opts(opts=None):
    """ Merge opts with default_opts and validate them """
    opts = opts or {}
    unknown = set(opts) - set(default_opts)
    if unknown:
        raise ValueError(f"Unknown options: {sorted(unknown)}")
    merged = dict(default_opts, **opts)
    if int(merged["workers"]) < 1:
        raise ValueError("Option 'workers' must be >= 1")
    if merged["strategy"] not in STRATEGIES:
        raise ValueError(f"Option 'strategy' must be one of {sorted(STRATEGIES)}")
    tile_size = merged["tile_size"]
    if isinstance(tile_size, Integral):
        tile_size = (tile_size, tile_size)
    if min(tile_size) < 1:
        raise ValueError("Option 'tile_size' must be >= 1")
    return merged


def edge_map(image:Plane, opts=None, stats=None) -> Plane:
    """ Normalized gradient magnitude of image

    Inputs
    ------
    image : Plane
        uint8 input image
    opts : dict
        Options, see default_opts
    stats : dict or None
        When given, it is updated with 'max_gradient', 'gradient_time' and
        'normalize_time' (seconds)

    Outputs
    -------
    edges : Plane
        int32 plane with values in [0,255] and zero border
    """
    opts = check_opts(opts)
    strategy = strategy_from_name(opts["strategy"], opts["tile_size"])
    with WorkerPool(opts["workers"]) as pool:
        t0 = time.perf_counter()
        gradient = sobel(image, strategy=strategy, unroll=opts["unroll"], pool=pool)
        t1 = time.perf_counter()
        max_val = normalize(gradient, strategy=strategy, pool=pool)
        t2 = time.perf_counter()
    logger.debug(f"Gradient: {1000*(t1-t0):.2f} ms, normalization: {1000*(t2-t1):.2f} ms")
    if stats is not None:
        stats.update(max_gradient=max_val, gradient_time=t1-t0, normalize_time=t2-t1)
    return gradient


def process_file(src, dst, opts=None):
    """ Compute edge map of PGM file src and save it to dst

    Outputs
    -------
    stats : dict
        width, height, max_gradient, gradient_time and normalize_time
    """
    image = read_pgm(src)
    stats = dict(width=image.width, height=image.height)
    edges = edge_map(image, opts, stats)
    write_pgm(dst, edges)
    logger.info(f"Edge map of {src} saved to {dst}")
    return stats
