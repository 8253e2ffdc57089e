"""
Scene isolation for offscreen thumbnail renders

Keeps a job's model, camera and light on their own render layer so the
offscreen camera sees only its own content and nothing leaks into the
main view. Traversals use an explicit worklist over the scene graph's
parent -> children index.
"""

import logging
import zlib
from typing import Hashable, Iterator, Optional

from ..config import Config
from ..core.scene import ObjectKind, SceneGraph, TAG_THUMBNAIL_PATH

logger = logging.getLogger(__name__)


def compute_layer(path: str, max_layer: int = Config.MAX_RENDER_LAYER) -> int:
    """
    Stable per-path render layer in 1..max_layer.

    Layer 0 is reserved for the main world.
    """
    return (zlib.crc32(path.encode('utf-8')) % max_layer) + 1


def select_layer(path: str, mode: str = Config.THUMBNAIL_LAYER_MODE,
                 fixed_layer: int = Config.THUMBNAIL_LAYER) -> int:
    """
    Render layer for a job.

    'fixed' shares one reserved layer between all jobs, which is only
    safe while a single job runs at a time. 'hashed' spreads paths over
    layers via compute_layer().
    """
    if mode == 'hashed':
        return compute_layer(path)
    if mode != 'fixed':
        raise ValueError(f"Unknown layer mode: {mode}")
    return fixed_layer


def iter_subtree(scene: SceneGraph, root: Hashable) -> Iterator[Hashable]:
    """Yield root and every transitive child, depth-first"""
    stack = [root]
    while stack:
        handle = stack.pop()
        yield handle
        stack.extend(scene.children(handle))


def propagate_layer(scene: SceneGraph, root: Hashable, layer: int) -> int:
    """
    Put root and all of its descendants on layer.

    Loaded assets declare their own (main) layer on nested nodes, which
    would keep them out of the offscreen camera's view.

    Returns:
        Number of objects tagged
    """
    count = 0
    for handle in iter_subtree(scene, root):
        scene.set_layer(handle, layer)
        count += 1
    return count


def suppress_cameras(scene: SceneGraph, root: Hashable) -> int:
    """
    Deactivate camera objects embedded in a loaded asset.

    Returns:
        Number of cameras deactivated
    """
    count = 0
    for handle in iter_subtree(scene, root):
        if scene.kind(handle) is ObjectKind.CAMERA and scene.is_active(handle):
            scene.set_active(handle, False)
            count += 1
    if count:
        logger.debug(f"Disabled {count} embedded camera(s) under {root}")
    return count


def despawn_tagged(scene: SceneGraph, kind: ObjectKind, path: str) -> int:
    """
    Despawn every object of kind tagged with path.

    Returns:
        Number of objects despawned
    """
    handles = scene.find_tagged(kind, TAG_THUMBNAIL_PATH, path)
    for handle in handles:
        scene.despawn(handle)
    return len(handles)


def teardown(scene: SceneGraph, path: str, camera: Optional[Hashable] = None) -> int:
    """
    Remove the offscreen rig of a finished thumbnail.

    The camera goes by handle; models and lights are matched by path tag
    so stale duplicates from earlier spawns go too.

    Returns:
        Number of top-level objects despawned
    """
    removed = 0
    if camera is not None and scene.exists(camera):
        scene.despawn(camera)
        removed += 1

    removed += despawn_tagged(scene, ObjectKind.MODEL, path)
    removed += despawn_tagged(scene, ObjectKind.LIGHT, path)
    logger.debug(f"Tore down {removed} object(s) for {path}")
    return removed


__all__ = [
    'compute_layer',
    'select_layer',
    'iter_subtree',
    'propagate_layer',
    'suppress_cameras',
    'despawn_tagged',
    'teardown',
]
