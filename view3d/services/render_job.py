"""
RenderJob - One offscreen thumbnail render spanning several frame ticks

Phases:
    SPAWNING -> WAITING_FOR_LOAD -> SETTLING -> FINALIZED
                       |
                       +-> FAILED (loader failure or timeout)

The job never blocks: poll() advances it by at most one step per tick.
Lifecycle bookkeeping in the cache is done by ThumbnailService.
"""

import logging
from enum import Enum
from typing import Any, Hashable, Optional

from ..config import Config
from ..core.exceptions import AssetLoadError, CacheConsistencyError
from ..core.scene import AssetLoader, LoadState, ObjectKind, SceneGraph, TAG_THUMBNAIL_PATH
from ..utils.image_utils import hex_to_rgb
from ..utils.path_utils import scene_asset_path
from . import scene_isolation

logger = logging.getLogger(__name__)


class JobPhase(Enum):
    SPAWNING = "spawning"
    WAITING_FOR_LOAD = "waiting_for_load"
    SETTLING = "settling"
    FINALIZED = "finalized"
    FAILED = "failed"


class RenderJob:
    """
    Offscreen render of a single model into its thumbnail image

    Usage:
        job = RenderJob(path, image, layer)
        job.spawn(loader, scene)
        while not job.is_done:
            job.poll(loader, scene)   # once per frame
        job.teardown(scene)
    """

    def __init__(
        self,
        path: str,
        image: Any,
        render_layer: int,
        settle_frames: int = Config.THUMBNAIL_SETTLE_FRAMES,
        load_timeout_ticks: Optional[int] = Config.THUMBNAIL_LOAD_TIMEOUT_TICKS
    ):
        if settle_frames < 1:
            raise ValueError("settle_frames must be at least 1")

        self.path = path
        self.image = image
        self.render_layer = render_layer
        self.settle_frames = settle_frames
        self.frames_remaining = settle_frames
        self.load_timeout_ticks = load_timeout_ticks

        self.phase = JobPhase.SPAWNING
        self.asset: Optional[Hashable] = None
        self.model: Optional[Hashable] = None
        self.camera: Optional[Hashable] = None
        self.light: Optional[Hashable] = None

        self.ticks = 0
        self.load_wait_ticks = 0
        self.layered_objects = 0
        self.suppressed_cameras = 0
        self.error: Optional[AssetLoadError] = None
        self._torn_down = False

    def __repr__(self) -> str:
        return f"RenderJob({self.path!r}, phase={self.phase.value}, layer={self.render_layer})"

    @property
    def is_done(self) -> bool:
        return self.phase in (JobPhase.FINALIZED, JobPhase.FAILED)

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    # ==================== SPAWN ====================

    def spawn(self, loader: AssetLoader, scene: SceneGraph) -> None:
        """Start loading the model and spawn the offscreen rig"""
        if self.phase is not JobPhase.SPAWNING:
            raise CacheConsistencyError("Render job spawned twice", self.path)

        tags = {TAG_THUMBNAIL_PATH: self.path}
        self.asset = loader.load(scene_asset_path(self.path))

        self.model = scene.spawn(
            ObjectKind.MODEL,
            layer=self.render_layer,
            tags=tags,
            asset=self.asset,
            scale=1.0,
            visible=True,
            tint=hex_to_rgb(Config.THUMBNAIL_MODEL_TINT),
        )
        self.camera = scene.spawn(
            ObjectKind.CAMERA,
            layer=self.render_layer,
            tags=tags,
            target=self.image,
            order=Config.THUMBNAIL_CAMERA_ORDER,
            clear_color=Config.THUMBNAIL_CLEAR_COLOR,
            position=Config.THUMBNAIL_CAMERA_POSITION,
            look_at=Config.THUMBNAIL_CAMERA_TARGET,
        )
        self.light = scene.spawn(
            ObjectKind.LIGHT,
            layer=self.render_layer,
            tags=tags,
            illuminance=Config.THUMBNAIL_LIGHT_ILLUMINANCE,
            shadows=Config.THUMBNAIL_LIGHT_SHADOWS,
            rotation=Config.THUMBNAIL_LIGHT_ROTATION,
        )

        self.phase = JobPhase.WAITING_FOR_LOAD
        logger.debug(
            f"Spawned thumbnail rig for {self.path} on layer {self.render_layer} "
            f"(model={self.model}, camera={self.camera}, light={self.light})"
        )

    # ==================== POLL ====================

    def poll(self, loader: AssetLoader, scene: SceneGraph) -> JobPhase:
        """
        Advance the job by one tick.

        The tick that observes LOADED also counts as the first settle frame.

        Returns:
            Phase after this tick
        """
        if self.is_done:
            return self.phase
        if self.phase is JobPhase.SPAWNING:
            raise CacheConsistencyError("Render job polled before spawn", self.path)

        self.ticks += 1

        if self.phase is JobPhase.WAITING_FOR_LOAD:
            state = loader.load_state(self.asset)
            if state is LoadState.FAILED:
                self._fail(AssetLoadError("Model failed to load", self.path))
                return self.phase
            if state is not LoadState.LOADED:
                self.load_wait_ticks += 1
                if self.load_timeout_ticks and self.load_wait_ticks > self.load_timeout_ticks:
                    self._fail(AssetLoadError(
                        "Model load timed out", self.path,
                        f"{self.path} not loaded after {self.load_wait_ticks} ticks"
                    ))
                return self.phase
            self._on_loaded(scene)

        self.frames_remaining -= 1
        if self.frames_remaining <= 0:
            self.frames_remaining = 0
            self.phase = JobPhase.FINALIZED
            logger.debug(f"Thumbnail settled for {self.path} after {self.ticks} ticks")
        return self.phase

    def _on_loaded(self, scene: SceneGraph) -> None:
        self.layered_objects = scene_isolation.propagate_layer(scene, self.model, self.render_layer)
        self.suppressed_cameras = scene_isolation.suppress_cameras(scene, self.model)
        self.frames_remaining = self.settle_frames
        self.phase = JobPhase.SETTLING
        logger.debug(
            f"Model loaded for {self.path}: {self.layered_objects} object(s) on layer "
            f"{self.render_layer}, {self.suppressed_cameras} embedded camera(s) disabled"
        )

    def _fail(self, error: AssetLoadError) -> None:
        self.error = error
        self.phase = JobPhase.FAILED
        logger.warning(f"Thumbnail render failed: {error}")

    # ==================== TEARDOWN ====================

    def teardown(self, scene: SceneGraph) -> int:
        """
        Despawn the offscreen rig. Must happen exactly once.

        Raises:
            CacheConsistencyError: On a second teardown
        """
        if self._torn_down:
            raise CacheConsistencyError("Render job torn down twice", self.path)
        self._torn_down = True
        return scene_isolation.teardown(scene, self.path, self.camera)


__all__ = ['JobPhase', 'RenderJob']
