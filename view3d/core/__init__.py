"""
Core functionality for view3d

Contains:
- Collaborator interfaces (asset loader, scene graph, render targets)
- Headless in-memory collaborators
- Custom exceptions for error handling
"""

from .scene import (
    LoadState,
    ObjectKind,
    TAG_THUMBNAIL_PATH,
    AssetLoader,
    SceneGraph,
    RenderTargetAllocator,
)
from .headless import SceneObject, InMemorySceneGraph, ManualAssetLoader
from .exceptions import (
    ViewerError,
    ThumbnailError,
    AssetLoadError,
    CacheConsistencyError,
)

__all__ = [
    # Interfaces
    'LoadState',
    'ObjectKind',
    'TAG_THUMBNAIL_PATH',
    'AssetLoader',
    'SceneGraph',
    'RenderTargetAllocator',
    # Headless collaborators
    'SceneObject',
    'InMemorySceneGraph',
    'ManualAssetLoader',
    # Exceptions
    'ViewerError',
    'ThumbnailError',
    'AssetLoadError',
    'CacheConsistencyError',
]
