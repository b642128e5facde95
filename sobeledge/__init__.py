""" Sobel edge maps for grayscale images

Functions
---------
edge_map                    Normalized gradient magnitude of an image
process_file                Edge map of a PGM file saved to another PGM file
sobel                       Raw gradient magnitude
normalize                   Rescale gradient magnitude to [0,255]
read_pgm, write_pgm         PGM (P5) input/output

Classes
-------
Plane                       Image stored in a linear row-major buffer
RowMajor, Tiled             Partitioning strategies
WorkerPool                  Pool of worker threads

Example
-------
import sobeledge as se

image = se.read_pgm("input.pgm")
edges = se.edge_map(image, {"workers": 4, "strategy": "tiled", "tile_size": 32})
se.write_pgm("edges.pgm", edges)

# or the same with one call
stats = se.process_file("input.pgm", "edges.pgm", {"workers": 4})
"""


import os

from .errors import FormatError, GeometryError, SobelError, SourceError
from .executor import WorkerPool
from .gradient import sobel, sobel_reference
from .kernels import GX, GY
from .normalize import normalize
from .partition import Partition, RowMajor, Tiled
from .pgm import PGMFile, read_pgm, write_pgm
from .pipeline import default_opts, edge_map, process_file
from .plane import Plane


def _set_version():
    with open(os.path.join(os.path.dirname(__file__), "VERSION"), "r") as f:
        return f.read().strip()


__version__ = _set_version()
