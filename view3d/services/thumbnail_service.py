"""
ThumbnailService - Offscreen-rendered model previews for the file grid

Pattern: Cooperative per-frame scheduler
- request_thumbnail() only reserves state (image handle + queue slot)
- tick_admission() starts at most one RenderJob
- tick_jobs() advances the active job and finalizes it

Nothing here blocks or renders; the host calls tick() once per frame.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..config import Config
from ..core.scene import AssetLoader, RenderTargetAllocator, SceneGraph
from ..events.event_bus import EventBus, get_event_bus
from ..utils.decorators import timed
from ..utils.image_utils import QImageAllocator
from ..utils.path_utils import is_model_file, normalize_path
from .render_job import JobPhase, RenderJob
from . import scene_isolation
from .scene_isolation import select_layer
from .thumbnail_cache import ThumbnailCache, ThumbnailStage, ThumbnailState
from .thumbnail_queue import ThumbnailQueue

logger = logging.getLogger(__name__)


class ThumbnailService:
    """
    Thumbnail generation and cache engine

    Features:
    - Request deduplication (one image handle per path, ever)
    - Single-job admission control with FIFO ordering
    - Multi-tick render jobs with a settle countdown
    - Failure path for broken or stalled loads (error thumbnail, lock released)
    - Performance counters

    Usage:
        service = ThumbnailService(loader, scene)
        service.request_thumbnail("models/a.glb")
        # every frame:
        service.tick()
        if service.is_ready("models/a.glb"):
            image = service.get_cached_thumbnail("models/a.glb")
    """

    def __init__(
        self,
        loader: AssetLoader,
        scene: SceneGraph,
        allocator: Optional[RenderTargetAllocator] = None,
        event_bus: Optional[EventBus] = None,
        settings: Optional[Dict[str, Any]] = None
    ):
        self._loader = loader
        self._scene = scene
        self._allocator = allocator or QImageAllocator()
        self._event_bus = event_bus if event_bus is not None else get_event_bus()

        resolved = Config.thumbnail_settings(settings)
        self.thumbnail_size: int = resolved['size']
        self.settle_frames: int = resolved['settle_frames']
        self.load_timeout_ticks: int = resolved['load_timeout_ticks']
        self.render_layer: int = resolved['layer']
        self.layer_mode: str = resolved['layer_mode']

        self.cache = ThumbnailCache()
        self.queue = ThumbnailQueue()
        self.active_job: Optional[RenderJob] = None

        # Performance monitoring
        self.total_requests: int = 0
        self.duplicate_requests: int = 0
        self.completed_jobs: int = 0
        self.failed_jobs: int = 0
        self.job_ticks: List[int] = []
        self.frame_count: int = 0

        self._event_bus.request_thumbnail.connect(self.request_thumbnail)
        self._event_bus.request_retry_thumbnail.connect(self.retry_thumbnail)

    # ==================== REQUESTS ====================

    def request_thumbnail(self, path: str) -> bool:
        """
        Reserve a thumbnail for path.

        Allocates the render target and queues the path on first request;
        later requests for the same path are absorbed.

        Returns:
            True if the path was newly queued
        """
        key = normalize_path(path)
        self.total_requests += 1

        if key in self.cache:
            self.duplicate_requests += 1
            return False

        image = self._allocator.allocate(self.thumbnail_size, self.thumbnail_size)
        self.cache.add(key, image)
        self.queue.push(key)

        logger.debug(f"Queued thumbnail for {key} ({len(self.queue)} pending)")
        self._event_bus.thumbnail_queued.emit(key)
        return True

    request = request_thumbnail

    def request_many(self, paths: Iterable[str]) -> int:
        """
        Request thumbnails for the model files among paths, in order.

        Returns:
            Number of paths newly queued
        """
        return sum(1 for path in paths if is_model_file(path) and self.request_thumbnail(path))

    def retry_thumbnail(self, path: str) -> bool:
        """
        Re-queue a failed thumbnail, reusing its image handle.

        Returns:
            True if the path was failed and is queued again
        """
        key = normalize_path(path)
        if self.cache.stage(key) is not ThumbnailStage.FAILED:
            return False

        self.cache.transition(key, ThumbnailState.queued())
        self._allocator.fill(self.cache.image_for(key), Config.THUMBNAIL_CLEAR_COLOR)
        self.queue.push(key)

        logger.info(f"Retrying thumbnail for {key}")
        self._event_bus.thumbnail_queued.emit(key)
        return True

    # ==================== LOOKUPS ====================

    def lookup(self, path: str) -> Optional[Any]:
        """
        Image handle for path in any stage.

        Contents are only final once is_ready(path) is True.
        """
        return self.cache.lookup(normalize_path(path))

    def get_cached_thumbnail(self, path: str) -> Optional[Any]:
        """Image handle for path, only once its thumbnail is READY"""
        key = normalize_path(path)
        if not self.cache.is_ready(key):
            return None
        return self.cache.lookup(key)

    def get_or_request(self, path: str) -> Optional[Any]:
        """
        Lookup, requesting generation for unknown paths.

        Returns:
            Image handle if the path was already requested, else None
        """
        key = normalize_path(path)
        image = self.cache.lookup(key)
        if key not in self.cache:
            self.request_thumbnail(key)
        return image

    def state_of(self, path: str) -> Optional[ThumbnailState]:
        return self.cache.state(normalize_path(path))

    def is_ready(self, path: str) -> bool:
        return self.cache.is_ready(normalize_path(path))

    @property
    def busy(self) -> bool:
        return self.queue.busy

    @property
    def pending_paths(self) -> List[str]:
        return self.queue.snapshot()

    @property
    def is_idle(self) -> bool:
        """True when no job runs and nothing is queued"""
        return not self.queue.busy and not self.queue.pending

    # ==================== FRAME TICKS ====================

    @timed
    def tick(self) -> None:
        """
        Run one frame of the engine.

        Admission runs before the job poll, so a job finalized in this tick
        frees the lock for the next path on the following tick.
        """
        self.frame_count += 1
        self.tick_admission()
        self.tick_jobs()

    def tick_admission(self) -> Optional[RenderJob]:
        """
        Start the next queued job if none is active.

        Returns:
            The job started this tick, or None
        """
        path = self.queue.admit()
        if path is None:
            return None

        job = None
        try:
            image = self.cache.image_for(path)
            job = RenderJob(
                path,
                image,
                select_layer(path, self.layer_mode, self.render_layer),
                settle_frames=self.settle_frames,
                load_timeout_ticks=self.load_timeout_ticks,
            )
            job.spawn(self._loader, self._scene)
            self.cache.transition(path, ThumbnailState.rendering(job))
        except Exception as e:
            logger.exception(f"Could not start thumbnail job for {path}")
            self._abort(path, job, str(e))
            return None

        self.active_job = job
        logger.info(f"Rendering thumbnail for {path} ({len(self.queue)} still queued)")
        self._event_bus.thumbnail_started.emit(path)
        return job

    def tick_jobs(self) -> Optional[JobPhase]:
        """
        Advance the active job by one tick.

        Returns:
            The job's phase after this tick, or None when idle
        """
        job = self.active_job
        if job is None:
            return None

        try:
            phase = job.poll(self._loader, self._scene)
            if phase is JobPhase.FINALIZED:
                self._finalize(job)
            elif phase is JobPhase.FAILED:
                self._fail(job)
        except Exception as e:
            logger.exception(f"Thumbnail job for {job.path} hit an error")
            self._abort(job.path, job, str(e))
            return JobPhase.FAILED

        return phase

    # ==================== COMPLETION ====================

    def _finalize(self, job: RenderJob) -> None:
        self.cache.transition(job.path, ThumbnailState.ready())
        job.teardown(self._scene)
        self._release(job)

        self.completed_jobs += 1
        self.job_ticks.append(job.ticks)
        logger.info(f"Thumbnail ready for {job.path} after {job.ticks} tick(s)")
        self._event_bus.thumbnail_ready.emit(job.path)

    def _fail(self, job: RenderJob) -> None:
        message = str(job.error) if job.error else "Thumbnail render failed"
        self.cache.transition(job.path, ThumbnailState.failed(message))
        self._allocator.fill(job.image, Config.THUMBNAIL_ERROR_COLOR)
        job.teardown(self._scene)
        self._release(job)

        self.failed_jobs += 1
        self._event_bus.thumbnail_failed.emit(job.path, message)
        self._event_bus.emit_error(f"Could not render preview for {job.path}")

    def _abort(self, path: str, job: Optional[RenderJob], message: str) -> None:
        """
        Recover from an error raised mid-job: mark failed, clean up, unlock.

        Cleanup sweeps by tag, so objects from a spawn that raised partway
        through are removed even though the job never recorded them.
        """
        try:
            if self.cache.stage(path) in (ThumbnailStage.QUEUED, ThumbnailStage.RENDERING):
                self.cache.lifecycle[path] = ThumbnailState.failed(message)
                image = self.cache.lookup(path)
                if image is not None:
                    self._allocator.fill(image, Config.THUMBNAIL_ERROR_COLOR)
            if job is None:
                scene_isolation.teardown(self._scene, path)
            elif not job.torn_down:
                job.teardown(self._scene)
        except Exception:
            logger.exception(f"Cleanup after failed thumbnail job for {path} did not complete")
        finally:
            self._release(job)

        self.failed_jobs += 1
        self._event_bus.thumbnail_failed.emit(path, message)
        self._event_bus.emit_error(f"Could not render preview for {path}")

    def _release(self, job: Optional[RenderJob]) -> None:
        if job is None or self.active_job is job:
            self.active_job = None
        self.queue.release()

    # ==================== STATS ====================

    def get_cache_stats(self) -> Dict[str, Any]:
        """
        Get performance statistics

        Returns:
            Dict with cache statistics
        """
        avg_ticks = (sum(self.job_ticks) / len(self.job_ticks)) if self.job_ticks else 0
        stats = {
            'total_requests': self.total_requests,
            'duplicate_requests': self.duplicate_requests,
            'cached_count': len(self.cache),
            'queue_length': len(self.queue),
            'busy': self.queue.busy,
            'active_path': self.active_job.path if self.active_job else None,
            'completed_jobs': self.completed_jobs,
            'failed_jobs': self.failed_jobs,
            'avg_ticks_per_job': avg_ticks,
            'frame_count': self.frame_count,
        }
        stats.update({f"{stage}_count": count for stage, count in self.cache.counts().items()})
        return stats

    def reset_stats(self):
        """Reset performance statistics"""
        self.total_requests = 0
        self.duplicate_requests = 0
        self.completed_jobs = 0
        self.failed_jobs = 0
        self.job_ticks.clear()


__all__ = ['ThumbnailService']
