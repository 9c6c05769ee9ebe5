"""
Custom errors for the catalog search / cart backend.

Malformed catalog *records* never raise: they degrade to safe defaults and
are reported through the logger.  Absent carts are signalled by returning
None.  What is left is below.
"""


class BeverageSearchError(Exception):
    """Base error for the package."""


class InputShapeError(BeverageSearchError, ValueError):
    """Caller input the core cannot work with (blank query, non-positive limit)."""


class CatalogLoadError(BeverageSearchError, RuntimeError):
    """The catalog file is missing, unreadable or unparsable. Fatal at startup."""
