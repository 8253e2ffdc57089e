"""
Utility functions for view3d

Helper utilities for render targets, logging, decorators, path handling.
"""

from .image_utils import rgb_to_qcolor, hex_to_rgb, QImageAllocator
from .logging_config import LoggingConfig
from .decorators import timed
from .path_utils import normalize_path, is_model_file, scene_asset_path

__all__ = [
    # Image utilities
    'rgb_to_qcolor',
    'hex_to_rgb',
    'QImageAllocator',
    # Logging
    'LoggingConfig',
    # Decorators
    'timed',
    # Path utilities
    'normalize_path',
    'is_model_file',
    'scene_asset_path',
]
