""" Binary PGM (P5) reading and writing

Layout of the file:

    P5 <ws> width <ws> height <ws> maxval <single ws byte> <width*height bytes>

Header tokens may be separated by any whitespace and '#' comments. Only 8 bit
files (maxval <= 255) are supported. Files are always written with maxval 255.
"""


import logging
import os

import numpy as np

from .errors import FormatError, GeometryError, SourceError
from .plane import Plane


logger = logging.getLogger(__name__)


MAGIC = b"P5"
_WHITESPACE = b" \t\n\r\v\f"


def _header_tokens(data, n):
    """ Read n whitespace separated tokens from data, return them with the
    position right after the last token """
    tokens = []
    pos = 0
    size = len(data)
    while len(tokens) < n:
        while pos < size and (data[pos] in _WHITESPACE or data[pos] == ord("#")):
            if data[pos] == ord("#"):
                while pos < size and data[pos] not in b"\r\n":
                    pos += 1
            else:
                pos += 1
        start = pos
        while pos < size and data[pos] not in _WHITESPACE and data[pos] != ord("#"):
            pos += 1
        if start == pos:
            raise FormatError("Truncated PGM header")
        tokens.append(bytes(data[start:pos]))
    return tokens, pos


def _header_int(token, name):
    if not token.isdigit():
        raise FormatError(f"Invalid {name} in PGM header: {token!r}")
    return int(token)


def decode(data) -> Plane:
    """ Decode P5 image from bytes

    Raises
    ------
    FormatError
        Wrong magic, malformed header, unsupported maxval or truncated payload
    GeometryError
        Zero width or height
    """
    data = memoryview(data).cast("B")
    if bytes(data[:2]) != MAGIC:
        raise FormatError("Unsupported file format, expected binary PGM (P5)")
    tokens, pos = _header_tokens(data, 4)
    if tokens[0] != MAGIC:
        raise FormatError("Unsupported file format, expected binary PGM (P5)")
    width = _header_int(tokens[1], "width")
    height = _header_int(tokens[2], "height")
    max_val = _header_int(tokens[3], "maxval")
    if width == 0 or height == 0:
        raise GeometryError(f"Invalid image dimensions {width}x{height}")
    if not 0 < max_val <= 255:
        raise FormatError(f"Unsupported maxval {max_val}, only 8 bit images are supported")
    if pos >= len(data) or data[pos] not in _WHITESPACE:
        raise FormatError("Missing whitespace after PGM header")
    pos += 1
    n = width * height
    if len(data) - pos < n:
        raise FormatError(f"Truncated pixel data, expected {n} bytes, got {len(data) - pos}")
    samples = np.frombuffer(data, np.uint8, count=n, offset=pos).copy()
    return Plane(width, height, samples)


def encode(plane:Plane) -> bytes:
    """ Encode plane as P5 image, samples are clamped to [0,255] """
    header = f"P5\n{plane.width} {plane.height}\n255\n".encode("ascii")
    return header + plane.to_u8().samples.tobytes()


def read_pgm(filename) -> Plane:
    try:
        with open(filename, "rb") as f:
            data = f.read()
    except OSError as e:
        raise SourceError(f"Cannot open file {filename}: {e.strerror}") from e
    plane = decode(data)
    logger.debug(f"Loaded {plane.width}x{plane.height} image from {filename}")
    return plane


def write_pgm(filename, plane:Plane):
    """ Save plane to filename

    Data are written to a temporary file next to filename which then replaces
    it, so a failed write never leaves a partial image behind.
    """
    data = encode(plane)
    tmp_filename = f"{os.fspath(filename)}.part"
    try:
        with open(tmp_filename, "wb") as f:
            f.write(data)
        os.replace(tmp_filename, filename)
    except OSError as e:
        if os.path.exists(tmp_filename):
            os.remove(tmp_filename)
        raise SourceError(f"Cannot write file {filename}: {e.strerror}") from e
    logger.debug(f"Saved {plane.width}x{plane.height} image to {filename}")


class PGMFile:
    """ Image source/destination backed by a PGM file

    Example
    -------
    w, h, samples = PGMFile("input.pgm").load()
    PGMFile("output.pgm").store(w, h, samples)
    """
    def __init__(self, filename):
        self.filename = filename

    def load(self):
        plane = read_pgm(self.filename)
        return plane.width, plane.height, plane.samples

    def store(self, width, height, samples):
        write_pgm(self.filename, Plane(width, height, samples, np.asarray(samples).dtype))

    def __repr__(self):
        return f"PGMFile({self.filename!r})"
