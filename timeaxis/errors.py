from __future__ import annotations


class TimeAxisError(RuntimeError):
    """Base class for time axis runtime errors."""


class SurfaceDisposedError(TimeAxisError):
    """Raised when a drawing surface is used after `dispose()`."""
