""" Image plane stored as a linear row-major buffer

Pixel (r,c) lives at samples[r*width + c]. The 2-D view (Plane.grid) is
derived from the buffer and shares its memory.
"""


import numpy as np

from .errors import GeometryError
from .partition import interior_region


def _check_range(samples, dtype):
    dtype = np.dtype(dtype)
    if not np.issubdtype(dtype, np.integer) or samples.size == 0:
        return
    info = np.iinfo(dtype)
    low, high = samples.min(), samples.max()
    if low < info.min or high > info.max:
        raise ValueError(f"Samples in range [{low},{high}] do not fit {dtype}")


class Plane:
    """ Single channel raster

    Inputs
    ------
    width, height : int
        Dimensions of the plane. Both must be positive.
    samples : array_like or None
        Linear buffer with width*height values. When None, zero-filled buffer
        of the given dtype is allocated.
    dtype : numpy dtype or None
        Type of samples. Input images are uint8, gradient planes int32. None
        keeps the type of samples (uint8 for a newly allocated buffer). Values
        outside the range of an integer dtype raise ValueError.

    Example
    -------
    image = Plane(4, 3, np.arange(12))
    image[1,2]  # -> 6
    image.grid  # (3,4) view of the same data
    """
    def __init__(self, width, height, samples=None, dtype=None):
        width, height = int(width), int(height)
        if width <= 0 or height <= 0:
            raise GeometryError(f"Invalid plane dimensions {width}x{height}")
        if samples is None:
            samples = np.zeros(width * height, np.uint8 if dtype is None else dtype)
        else:
            samples = np.asarray(samples)
            if dtype is not None:
                _check_range(samples, dtype)
            samples = np.ascontiguousarray(samples, dtype=dtype).ravel()
        if samples.size != width * height:
            raise GeometryError(f"Expected {width*height} samples for {width}x{height} plane, got {samples.size}")
        self.width = width
        self.height = height
        self.samples = samples

    @staticmethod
    def from_array(arr, dtype=None):
        """ Create plane from (H,W) array (data are copied) """
        if not isinstance(arr, np.ndarray):
            raise TypeError("Image must be numpy array")
        if arr.ndim != 2:
            raise GeometryError("Image must have 2 dimensions")
        h, w = arr.shape
        return Plane(w, h, arr.copy(), arr.dtype if dtype is None else dtype)

    @staticmethod
    def zeros_like(plane, dtype=np.int32):
        return Plane(plane.width, plane.height, None, dtype)

    @property
    def shape(self):
        return self.height, self.width

    @property
    def size(self):
        return self.samples.size

    @property
    def dtype(self):
        return self.samples.dtype

    @property
    def grid(self):
        """ (height,width) view of samples """
        return self.samples.reshape(self.shape)

    @property
    def has_interior(self):
        return self.width >= 3 and self.height >= 3

    @property
    def interior(self):
        """ Partition covering all pixels with full 3x3 neighborhood """
        return interior_region(self.width, self.height)

    def index(self, r, c):
        return r * self.width + c

    def __getitem__(self, rc):
        r, c = rc
        if not (0 <= r < self.height and 0 <= c < self.width):
            raise IndexError(f"Pixel ({r},{c}) out of {self.width}x{self.height} plane")
        return self.samples[self.index(r, c)]

    def __eq__(self, other):
        if not isinstance(other, Plane):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self.samples, other.samples)

    def __repr__(self):
        return f"Plane({self.width}x{self.height}, dtype={self.dtype})"

    def copy(self):
        return Plane(self.width, self.height, self.samples.copy(), self.dtype)

    def to_u8(self):
        """ Clamp samples to [0,255] and convert to uint8 """
        return Plane(self.width, self.height, np.clip(self.samples, 0, 255).astype(np.uint8), np.uint8)
