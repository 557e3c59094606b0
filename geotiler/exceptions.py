"""
Custom exceptions for the geotiler package.

This module defines exception classes for better error handling and messaging
across the package, particularly in path construction, tile rendering and the
command-line interface.
"""


class GeotilerError(Exception):
    """Base exception class for all geotiler errors."""
    pass


class InvalidGeometryError(GeotilerError, ValueError):
    """
    Raised when a geometry cannot be turned into a drawable path.

    This occurs when a subpath has fewer than 3 points or when a feature
    carries a geometry type the renderers do not understand. It is fatal to
    the feature being rendered, never to the whole tile.
    """
    pass


class IndexOutOfRangeError(GeotilerError, IndexError):
    """
    Raised when a coordinate lookup addresses a subpath that does not exist.

    This indicates a programming error rather than bad input data.
    """
    pass


class InvalidParameterError(GeotilerError, ValueError):
    """
    Raised for invalid user inputs.

    This exception is used for parameter validation failures such as
    inverted bounding boxes, unknown paint keys, unsupported projections or
    malformed command-line arguments.
    """
    pass


class RenderError(GeotilerError):
    """
    Raised when a drawing surface cannot produce its output.

    This typically occurs when the rendered image cannot be written to disk.
    """
    pass
