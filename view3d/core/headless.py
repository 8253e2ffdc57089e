"""
Headless collaborators

In-memory scene graph and asset loader for running the thumbnail engine
without a renderer (tests, batch tooling, host integrations under
development). They implement the protocols in view3d.core.scene.
"""

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional

from .scene import LoadState, ObjectKind

logger = logging.getLogger(__name__)


@dataclass
class SceneObject:
    """Single object stored by InMemorySceneGraph"""
    handle: int
    kind: ObjectKind
    layer: int = 0
    active: bool = True
    parent: Optional[int] = None
    tags: Dict[str, Any] = field(default_factory=dict)
    properties: Dict[str, Any] = field(default_factory=dict)
    children: List[int] = field(default_factory=list)


class InMemorySceneGraph:
    """
    Dictionary-backed scene graph

    Features:
    - Explicit parent -> children index
    - Recursive despawn
    - Tag queries by object kind

    Usage:
        scene = InMemorySceneGraph()
        root = scene.spawn(ObjectKind.MODEL, layer=1, tags={'thumbnail_path': path})
        mesh = scene.spawn(ObjectKind.NODE, parent=root)
    """

    def __init__(self):
        self._objects: Dict[int, SceneObject] = {}
        self._ids = itertools.count(1)
        self.spawn_count = 0
        self.despawn_count = 0

    def spawn(
        self,
        kind: ObjectKind,
        *,
        parent: Optional[int] = None,
        layer: int = 0,
        tags: Optional[dict] = None,
        **properties: Any
    ) -> int:
        if parent is not None and parent not in self._objects:
            raise KeyError(f"Parent object {parent} does not exist")

        handle = next(self._ids)
        self._objects[handle] = SceneObject(
            handle=handle,
            kind=kind,
            layer=layer,
            parent=parent,
            tags=dict(tags or {}),
            properties=properties,
        )
        if parent is not None:
            self._objects[parent].children.append(handle)

        self.spawn_count += 1
        return handle

    def despawn(self, handle: int) -> None:
        obj = self._objects.get(handle)
        if obj is None:
            logger.debug(f"Despawn of missing object {handle} ignored")
            return

        if obj.parent is not None and obj.parent in self._objects:
            self._objects[obj.parent].children.remove(handle)

        stack = [handle]
        while stack:
            current = self._objects.pop(stack.pop())
            stack.extend(current.children)
            self.despawn_count += 1

    def exists(self, handle: Hashable) -> bool:
        return handle in self._objects

    def get(self, handle: int) -> SceneObject:
        return self._objects[handle]

    def children(self, handle: int) -> List[int]:
        return list(self._objects[handle].children)

    def kind(self, handle: int) -> ObjectKind:
        return self._objects[handle].kind

    def set_layer(self, handle: int, layer: int) -> None:
        self._objects[handle].layer = layer

    def get_layer(self, handle: int) -> int:
        return self._objects[handle].layer

    def set_active(self, handle: int, active: bool) -> None:
        self._objects[handle].active = active

    def is_active(self, handle: int) -> bool:
        return self._objects[handle].active

    def find_tagged(self, kind: ObjectKind, key: str, value: Any) -> List[int]:
        return [
            obj.handle for obj in self._objects.values()
            if obj.kind is kind and obj.tags.get(key) == value
        ]

    def objects(self, kind: Optional[ObjectKind] = None) -> List[SceneObject]:
        """All live objects, optionally filtered by kind"""
        return [obj for obj in self._objects.values() if kind is None or obj.kind is kind]

    def __len__(self) -> int:
        return len(self._objects)


class ManualAssetLoader:
    """
    Asset loader whose load states are driven by the caller

    load() registers the path as LOADING; the host (or a test) later calls
    set_state() to complete or fail it.
    """

    def __init__(self, initial_state: LoadState = LoadState.LOADING):
        self._initial_state = initial_state
        self._states: Dict[str, LoadState] = {}
        self.load_calls: List[str] = []

    def load(self, path: str) -> str:
        self.load_calls.append(path)
        self._states.setdefault(path, self._initial_state)
        return path

    def load_state(self, handle: str) -> LoadState:
        return self._states.get(handle, LoadState.NOT_LOADED)

    def set_state(self, handle: str, state: LoadState) -> None:
        self._states[handle] = state


__all__ = ['SceneObject', 'InMemorySceneGraph', 'ManualAssetLoader']
