"""
ThumbnailCache - Render target handles and generation lifecycle per path

Pattern: Two maps keyed by path
- images: allocated once at first request, never replaced
- lifecycle: QUEUED -> RENDERING -> READY (or FAILED)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Optional, TYPE_CHECKING

from ..core.exceptions import CacheConsistencyError

if TYPE_CHECKING:
    from .render_job import RenderJob


class ThumbnailStage(Enum):
    """Generation stage of a cached thumbnail"""
    QUEUED = "queued"
    RENDERING = "rendering"
    READY = "ready"
    FAILED = "failed"


# Allowed lifecycle transitions. FAILED -> QUEUED is an explicit retry.
_TRANSITIONS = {
    ThumbnailStage.QUEUED: {ThumbnailStage.RENDERING, ThumbnailStage.FAILED},
    ThumbnailStage.RENDERING: {ThumbnailStage.READY, ThumbnailStage.FAILED},
    ThumbnailStage.READY: set(),
    ThumbnailStage.FAILED: {ThumbnailStage.QUEUED},
}


@dataclass(frozen=True)
class ThumbnailState:
    """Lifecycle entry: a stage plus the active job or failure reason"""
    stage: ThumbnailStage
    job: Optional['RenderJob'] = None
    error: Optional[str] = None

    @classmethod
    def queued(cls) -> 'ThumbnailState':
        return cls(ThumbnailStage.QUEUED)

    @classmethod
    def rendering(cls, job: 'RenderJob') -> 'ThumbnailState':
        return cls(ThumbnailStage.RENDERING, job=job)

    @classmethod
    def ready(cls) -> 'ThumbnailState':
        return cls(ThumbnailStage.READY)

    @classmethod
    def failed(cls, error: str) -> 'ThumbnailState':
        return cls(ThumbnailStage.FAILED, error=error)

    @property
    def is_ready(self) -> bool:
        return self.stage is ThumbnailStage.READY


class ThumbnailCache:
    """
    Path-keyed thumbnail cache

    Entries live for the process lifetime; there is no eviction.
    """

    def __init__(self):
        self.images: Dict[str, Any] = {}
        self.lifecycle: Dict[str, ThumbnailState] = {}

    def __contains__(self, path: str) -> bool:
        return path in self.images

    def __len__(self) -> int:
        return len(self.images)

    def __iter__(self) -> Iterator[str]:
        return iter(self.images)

    def add(self, path: str, image: Any) -> None:
        """
        Register a freshly allocated image and mark the path QUEUED.

        Raises:
            CacheConsistencyError: If path already has an image
        """
        if path in self.images:
            raise CacheConsistencyError("Thumbnail image already allocated", path)
        self.images[path] = image
        self.lifecycle[path] = ThumbnailState.queued()

    def lookup(self, path: str) -> Optional[Any]:
        """Image handle for path in any stage, or None"""
        return self.images.get(path)

    def image_for(self, path: str) -> Any:
        """
        Image handle for a path that must already be cached.

        Raises:
            CacheConsistencyError: If no image was allocated for path
        """
        try:
            return self.images[path]
        except KeyError:
            raise CacheConsistencyError("No render target allocated for thumbnail", path) from None

    def state(self, path: str) -> Optional[ThumbnailState]:
        return self.lifecycle.get(path)

    def stage(self, path: str) -> Optional[ThumbnailStage]:
        state = self.lifecycle.get(path)
        return state.stage if state else None

    def is_ready(self, path: str) -> bool:
        state = self.lifecycle.get(path)
        return state is not None and state.is_ready

    def transition(self, path: str, new_state: ThumbnailState) -> ThumbnailState:
        """
        Move path to a new lifecycle state.

        Returns:
            The previous state

        Raises:
            CacheConsistencyError: If path is unknown or the transition would regress
        """
        current = self.lifecycle.get(path)
        if current is None:
            raise CacheConsistencyError("Lifecycle transition for unknown thumbnail", path)
        if new_state.stage not in _TRANSITIONS[current.stage]:
            raise CacheConsistencyError(
                "Invalid thumbnail lifecycle transition",
                f"{path}: {current.stage.value} -> {new_state.stage.value}"
            )
        self.lifecycle[path] = new_state
        return current

    def counts(self) -> Dict[str, int]:
        """Number of paths per stage"""
        counts = {stage.value: 0 for stage in ThumbnailStage}
        for state in self.lifecycle.values():
            counts[state.stage.value] += 1
        return counts


__all__ = ['ThumbnailStage', 'ThumbnailState', 'ThumbnailCache']
