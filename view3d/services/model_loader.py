"""
ModelLoader - Background glTF loading with QThreadPool

Pattern: Background loading with QRunnable workers
load() returns at once with a LOADING handle; a worker reads and checks the
file, and the result is applied on the owner's thread via a queued signal.
"""

import json
import logging
import struct
import time
from pathlib import Path
from typing import Dict, Optional

from PyQt6.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal

from ..core.exceptions import AssetLoadError
from ..core.scene import LoadState

logger = logging.getLogger(__name__)

GLB_MAGIC = b'glTF'
GLB_HEADER = struct.Struct('<4sII')  # magic, version, total length


def model_file_path(asset_path: str) -> Path:
    """Strip the '#Scene0' style label from an asset path"""
    return Path(asset_path.split('#', 1)[0])


def check_model_file(path: Path) -> None:
    """
    Check that path holds a readable glTF 2.0 model.

    Raises:
        AssetLoadError: If the file is missing, unsupported or malformed
    """
    suffix = path.suffix.lower()
    try:
        if suffix == '.glb':
            with open(path, 'rb') as f:
                header = f.read(GLB_HEADER.size)
            if len(header) < GLB_HEADER.size:
                raise AssetLoadError("Truncated GLB header", str(path))
            magic, version, length = GLB_HEADER.unpack(header)
            if magic != GLB_MAGIC:
                raise AssetLoadError("Not a GLB file", str(path))
            if version != 2:
                raise AssetLoadError("Unsupported glTF version", str(path), f"version {version}")
            if length < GLB_HEADER.size:
                raise AssetLoadError("Corrupt GLB length", str(path))
        elif suffix == '.gltf':
            document = json.loads(path.read_text(encoding='utf-8'))
            if not isinstance(document, dict) or 'version' not in document.get('asset', {}):
                raise AssetLoadError("glTF document has no asset version", str(path))
        else:
            raise AssetLoadError("Unsupported model format", str(path))
    except OSError as e:
        raise AssetLoadError("Could not read model", str(path), str(e)) from e
    except (ValueError, TypeError) as e:
        raise AssetLoadError("Malformed glTF document", str(path), str(e)) from e


class ModelLoadSignals(QObject):
    """Signals for ModelLoadTask"""
    load_complete = pyqtSignal(str, float)  # handle, elapsed_ms
    load_failed = pyqtSignal(str, str)  # handle, error_message


class ModelLoadTask(QRunnable):
    """
    Background task checking one model file

    Usage:
        task = ModelLoadTask(handle)
        threadpool.start(task)
    """

    def __init__(self, handle: str):
        super().__init__()
        self.handle = handle
        self.signals = ModelLoadSignals()
        self.start_time = time.time()

    def run(self):
        """Execute model load task"""
        try:
            check_model_file(model_file_path(self.handle))
        except Exception as e:
            self.signals.load_failed.emit(self.handle, str(e))
            return

        elapsed_ms = (time.time() - self.start_time) * 1000
        self.signals.load_complete.emit(self.handle, elapsed_ms)


class ModelLoader(QObject):
    """
    Asset loader reading glTF models on QThreadPool workers

    Features:
    - Non-blocking load() returning a pollable handle
    - Load deduplication (one task per asset path)
    - Load timing

    Usage:
        loader = ModelLoader()
        handle = loader.load("models/ship.glb#Scene0")
        # later, on the same thread:
        loader.load_state(handle)  # LOADING -> LOADED / FAILED
    """

    def __init__(self, thread_pool: Optional[QThreadPool] = None, parent=None):
        super().__init__(parent)
        self.thread_pool = thread_pool if thread_pool is not None else QThreadPool.globalInstance()

        self._states: Dict[str, LoadState] = {}
        self._errors: Dict[str, str] = {}
        # Tasks stay referenced until their signal lands
        self._tasks: Dict[str, ModelLoadTask] = {}
        self.load_times: list[float] = []

    def load(self, path: str) -> str:
        if path in self._states:
            return path

        self._states[path] = LoadState.LOADING
        task = ModelLoadTask(path)
        task.setAutoDelete(False)
        task.signals.load_complete.connect(self._on_load_complete)
        task.signals.load_failed.connect(self._on_load_failed)
        self._tasks[path] = task
        self.thread_pool.start(task)
        return path

    def load_state(self, handle: str) -> LoadState:
        return self._states.get(handle, LoadState.NOT_LOADED)

    def error_for(self, handle: str) -> Optional[str]:
        return self._errors.get(handle)

    def wait_for_done(self, msecs: int = -1) -> bool:
        """Block until queued tasks finish; results still need the event loop"""
        return self.thread_pool.waitForDone(msecs)

    def _on_load_complete(self, handle: str, elapsed_ms: float):
        self._tasks.pop(handle, None)
        self._states[handle] = LoadState.LOADED
        self.load_times.append(elapsed_ms)
        logger.debug(f"Loaded {handle} in {elapsed_ms:.1f}ms")

    def _on_load_failed(self, handle: str, error: str):
        self._tasks.pop(handle, None)
        self._states[handle] = LoadState.FAILED
        self._errors[handle] = error
        logger.warning(f"Model load failed: {error}")


__all__ = ['ModelLoader', 'ModelLoadTask', 'check_model_file', 'model_file_path']
