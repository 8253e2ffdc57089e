"""
Custom exceptions for view3d

Pattern: Domain-specific exceptions for proper error handling
The thumbnail engine records these as failure reasons instead of
propagating them to the UI layer.
"""

from typing import Optional


class ViewerError(Exception):
    """Base exception for all view3d errors"""

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self):
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ThumbnailError(ViewerError):
    """Thumbnail generation failed"""
    pass


class AssetLoadError(ThumbnailError):
    """Model asset failed to load or did not finish loading in time"""

    def __init__(self, message: str, path: Optional[str] = None, details: Optional[str] = None):
        self.path = path
        super().__init__(message, details if details is not None else path)


class CacheConsistencyError(ThumbnailError):
    """Internal thumbnail cache invariant violated (programming error)"""
    pass


__all__ = [
    'ViewerError',
    'ThumbnailError',
    'AssetLoadError',
    'CacheConsistencyError',
]
