""" Error kinds reported by the pipeline

All of them originate at the I/O boundary. The gradient computation itself
cannot fail on a valid Plane.
"""


class SobelError(Exception):
    """ Base class for errors raised by sobeledge """


class SourceError(SobelError, OSError):
    """ Source or destination cannot be opened """


class FormatError(SobelError, ValueError):
    """ Unsupported or malformed raster data """


class GeometryError(SobelError, ValueError):
    """ Image dimensions do not describe a valid plane """
