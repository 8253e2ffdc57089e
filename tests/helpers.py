"""Shared builders for thumbnail engine tests"""

from view3d.core import InMemorySceneGraph, LoadState, ManualAssetLoader, ObjectKind
from view3d.events import EventBus
from view3d.services import ThumbnailService
from view3d.utils import QImageAllocator


class EngineHarness:
    """Service wired to headless collaborators"""

    def __init__(self, loader=None, scene=None, **settings):
        self.scene = scene if scene is not None else InMemorySceneGraph()
        self.loader = loader if loader is not None else ManualAssetLoader()
        self.allocator = QImageAllocator()
        self.bus = EventBus()
        self.service = ThumbnailService(
            self.loader,
            self.scene,
            allocator=self.allocator,
            event_bus=self.bus,
            settings=settings or None,
        )

    def tick(self, count=1):
        for _ in range(count):
            self.service.tick()

    def stage(self, path):
        state = self.service.state_of(path)
        return state.stage if state else None

    def complete_load(self, path, nodes=2, embedded_cameras=0):
        """Instantiate the loaded scene under the job's model root and report LOADED"""
        job = self.service.active_job
        assert job is not None and job.path == path
        parent = job.model
        for _ in range(nodes):
            # Nested content arrives on the main layer
            parent = self.scene.spawn(ObjectKind.NODE, parent=parent, layer=0)
        for _ in range(embedded_cameras):
            self.scene.spawn(ObjectKind.CAMERA, parent=job.model, layer=0)
        self.loader.set_state(job.asset, LoadState.LOADED)
        return job

    def fail_load(self, path):
        job = self.service.active_job
        assert job is not None and job.path == path
        self.loader.set_state(job.asset, LoadState.FAILED)
        return job

    def run_to_ready(self, path):
        """Admit (if needed), load and settle path"""
        if self.service.active_job is None or self.service.active_job.path != path:
            self.tick()
        self.complete_load(path)
        self.tick(self.service.settle_frames)

    def thumbnail_objects(self, path):
        return [
            obj for obj in self.scene.objects()
            if obj.tags.get("thumbnail_path") == path
        ]
