"""
view3d

Interactive 3D model file browser with offscreen-rendered preview thumbnails.
"""

__version__ = "0.1.0"
__author__ = "view3d developers"

__all__ = ['__version__', '__author__']
