""" Partitioning of the interior region among workers

A Partition holds bounds only. Workers read the shared input plane and write
the cells of their own partition, so partitions produced by one strategy never
overlap and together cover the whole interior.

Strategies
----------
RowMajor      Contiguous bands of full-width rows, one band per worker
Tiled         Square (or rectangular) tiles, visited row by row inside a tile

Strategy.partitions() lists the regions, Strategy.assign() groups them into at
most one work list per worker.
"""


from collections import namedtuple
from numbers import Integral

import numpy as np


class Partition(namedtuple("Partition", ["row0", "row1", "col0", "col1"])):
    """ Half-open region [row0,row1) x [col0,col1) of a plane """
    __slots__ = ()

    @property
    def rows(self):
        return max(self.row1 - self.row0, 0)

    @property
    def cols(self):
        return max(self.col1 - self.col0, 0)

    @property
    def size(self):
        return self.rows * self.cols

    def cells(self):
        """ Iterate (r,c) pairs in row-major order """
        for r in range(self.row0, self.row1):
            for c in range(self.col0, self.col1):
                yield r, c


def as_bounds(parts):
    """ (N,4) int64 array with row0, row1, col0, col1 of each partition """
    return np.array(parts, np.int64).reshape(-1, 4)


def interior_region(width, height):
    """ Region of pixels with complete 3x3 neighborhood

    Empty partition when width < 3 or height < 3.
    """
    if width < 3 or height < 3:
        return Partition(1, 1, 1, 1)
    return Partition(1, height-1, 1, width-1)


def row_bands(width, height, n):
    """ Split interior rows into at most n bands of near equal height """
    if n < 1:
        raise ValueError("Number of bands must be >= 1")
    interior = interior_region(width, height)
    n_rows = interior.rows
    if n_rows == 0:
        return []
    n = min(n, n_rows)
    base, extra = divmod(n_rows, n)
    bands = []
    r = interior.row0
    for i in range(n):
        h = base + (1 if i < extra else 0)
        bands.append(Partition(r, r+h, interior.col0, interior.col1))
        r += h
    return bands


def _tile_shape(tile_size):
    if isinstance(tile_size, Integral):
        tile_size = (tile_size, tile_size)
    th, tw = (int(x) for x in tile_size)
    if th < 1 or tw < 1:
        raise ValueError(f"Tile size must be >= 1, got {tile_size}")
    return th, tw


def tiles(width, height, tile_size=32):
    """ Cover interior by tiles, clipped at the edges of the interior

    Inputs
    ------
    width, height : int
        Plane dimensions
    tile_size : int or (int,int)
        Tile height and width. Single int means square tiles.

    Outputs
    -------
    parts : list of Partition
        Tiles ordered by rows of tiles, left to right.
    """
    th, tw = _tile_shape(tile_size)
    interior = interior_region(width, height)
    parts = []
    for r in range(interior.row0, interior.row1, th):
        for c in range(interior.col0, interior.col1, tw):
            parts.append(Partition(r, min(r+th, interior.row1), c, min(c+tw, interior.col1)))
    return parts


def tile_rows_round_robin(parts, n):
    """ Group tiles into at most n work lists

    Rows of tiles (tiles sharing row0) are dealt to the lists round-robin.
    Each list keeps the tiles in row-of-tiles-major order.
    """
    if n < 1:
        raise ValueError("Number of work lists must be >= 1")
    rows = []
    for p in parts:
        if not rows or rows[-1][0].row0 != p.row0:
            rows.append([])
        rows[-1].append(p)
    n = min(n, len(rows))
    return [[p for row in rows[i::n] for p in row] for i in range(n)]


class RowMajor:
    """ One contiguous band of rows per worker """
    name = "rows"

    def partitions(self, width, height, workers=1):
        return row_bands(width, height, workers)

    def assign(self, width, height, workers=1):
        return [[band] for band in row_bands(width, height, workers)]

    def __repr__(self):
        return "RowMajor()"


class Tiled:
    """ Fixed size tiles, whole rows of tiles assigned to workers round-robin

    The default size of 32 keeps the three input rows of a tile within L1/L2.
    """
    name = "tiled"

    def __init__(self, tile_size=32):
        self.tile_size = _tile_shape(tile_size)

    def partitions(self, width, height, workers=1):
        return tiles(width, height, self.tile_size)

    def assign(self, width, height, workers=1):
        return tile_rows_round_robin(tiles(width, height, self.tile_size), workers)

    def __repr__(self):
        return f"Tiled(tile_size={self.tile_size})"


STRATEGIES = {
    RowMajor.name: RowMajor,
    Tiled.name: Tiled,
}


def strategy_from_name(name, tile_size=32):
    """ Construct strategy by its name ("rows" or "tiled") """
    if name not in STRATEGIES:
        raise ValueError(f"Unknown strategy '{name}'. Use one of {sorted(STRATEGIES)}")
    if name == Tiled.name:
        return Tiled(tile_size)
    return RowMajor()
