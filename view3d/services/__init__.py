"""
Services for view3d

Thumbnail generation: cache, admission queue, render jobs, scheduler.
"""

from .thumbnail_cache import ThumbnailCache, ThumbnailStage, ThumbnailState
from .thumbnail_queue import ThumbnailQueue
from .render_job import JobPhase, RenderJob
from .thumbnail_service import ThumbnailService
from .frame_ticker import FrameTicker
from .model_loader import ModelLoader
from . import scene_isolation

__all__ = [
    # Cache
    'ThumbnailCache',
    'ThumbnailStage',
    'ThumbnailState',
    'ThumbnailQueue',
    # Jobs
    'JobPhase',
    'RenderJob',
    'scene_isolation',
    # Services
    'ThumbnailService',
    'FrameTicker',
    'ModelLoader',
]
