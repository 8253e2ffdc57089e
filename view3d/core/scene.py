"""
Collaborator interfaces for the thumbnail engine

The engine never talks to a renderer directly. It drives three host
collaborators: an asset loader, a scene graph and a render target
allocator. Any host runtime (or the headless implementations in
view3d.core.headless) can provide them.
"""

from enum import Enum
from typing import Any, Hashable, List, Optional, Protocol, Sequence, Tuple, runtime_checkable


class LoadState(Enum):
    """Load state reported by the asset loader"""
    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class ObjectKind(Enum):
    """Capability of a scene object"""
    NODE = "node"      # Plain transform/mesh node
    MODEL = "model"    # Root of a loaded model instance
    CAMERA = "camera"
    LIGHT = "light"


# Tag keys attached to objects spawned for thumbnails
TAG_THUMBNAIL_PATH = "thumbnail_path"


@runtime_checkable
class AssetLoader(Protocol):
    """Asynchronous model loader"""

    def load(self, path: str) -> Hashable:
        """Begin loading the asset at path and return its handle."""
        ...

    def load_state(self, handle: Hashable) -> LoadState:
        """Current load state of a previously requested asset."""
        ...


@runtime_checkable
class SceneGraph(Protocol):
    """
    Host scene graph

    Contract:
    - spawn() returns a handle unique for the life of the graph
    - despawn() removes the object and all of its descendants
    - children() returns direct children only; containment is acyclic
    """

    def spawn(
        self,
        kind: ObjectKind,
        *,
        parent: Optional[Hashable] = None,
        layer: int = 0,
        tags: Optional[dict] = None,
        **properties: Any
    ) -> Hashable:
        ...

    def despawn(self, handle: Hashable) -> None:
        ...

    def exists(self, handle: Hashable) -> bool:
        ...

    def children(self, handle: Hashable) -> Sequence[Hashable]:
        ...

    def kind(self, handle: Hashable) -> ObjectKind:
        ...

    def set_layer(self, handle: Hashable, layer: int) -> None:
        ...

    def get_layer(self, handle: Hashable) -> int:
        ...

    def set_active(self, handle: Hashable, active: bool) -> None:
        ...

    def is_active(self, handle: Hashable) -> bool:
        ...

    def find_tagged(self, kind: ObjectKind, key: str, value: Any) -> List[Hashable]:
        """All live objects of kind whose tag key equals value."""
        ...


@runtime_checkable
class RenderTargetAllocator(Protocol):
    """Allocates images usable as camera targets and UI textures"""

    def allocate(self, width: int, height: int) -> Any:
        ...

    def fill(self, image: Any, color: Tuple[float, float, float]) -> None:
        """Overwrite image contents with a solid color."""
        ...


__all__ = [
    'LoadState',
    'ObjectKind',
    'TAG_THUMBNAIL_PATH',
    'AssetLoader',
    'SceneGraph',
    'RenderTargetAllocator',
]
