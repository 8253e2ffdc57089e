import unittest

from view3d.core import (
    AssetLoadError,
    CacheConsistencyError,
    InMemorySceneGraph,
    LoadState,
    ManualAssetLoader,
    ObjectKind,
)
from view3d.services import JobPhase, RenderJob

PATH = "models/robot.gltf"


class RenderJobTests(unittest.TestCase):
    def setUp(self) -> None:
        self.scene = InMemorySceneGraph()
        self.loader = ManualAssetLoader()
        self.image = object()
        self.job = RenderJob(PATH, self.image, render_layer=1)

    def spawn(self) -> None:
        self.job.spawn(self.loader, self.scene)

    def test_spawn_creates_tagged_rig(self) -> None:
        self.assertIs(self.job.phase, JobPhase.SPAWNING)
        self.spawn()
        self.assertIs(self.job.phase, JobPhase.WAITING_FOR_LOAD)
        self.assertEqual(self.loader.load_calls, [PATH + "#Scene0"])

        for handle, kind in (
            (self.job.model, ObjectKind.MODEL),
            (self.job.camera, ObjectKind.CAMERA),
            (self.job.light, ObjectKind.LIGHT),
        ):
            obj = self.scene.get(handle)
            self.assertIs(obj.kind, kind)
            self.assertEqual(obj.layer, 1)
            self.assertEqual(obj.tags, {"thumbnail_path": PATH})

        self.assertIs(self.scene.get(self.job.camera).properties["target"], self.image)
        self.assertEqual(self.scene.get(self.job.model).properties["asset"], self.job.asset)

    def test_spawn_twice_is_an_invariant_error(self) -> None:
        self.spawn()
        with self.assertRaises(CacheConsistencyError):
            self.spawn()

    def test_poll_before_spawn_is_an_invariant_error(self) -> None:
        with self.assertRaises(CacheConsistencyError):
            self.job.poll(self.loader, self.scene)

    def test_settle_countdown(self) -> None:
        self.spawn()
        self.assertIs(self.job.poll(self.loader, self.scene), JobPhase.WAITING_FOR_LOAD)

        self.loader.set_state(self.job.asset, LoadState.LOADED)
        self.assertIs(self.job.poll(self.loader, self.scene), JobPhase.SETTLING)
        self.assertEqual(self.job.frames_remaining, 2)
        self.assertIs(self.job.poll(self.loader, self.scene), JobPhase.SETTLING)
        self.assertEqual(self.job.frames_remaining, 1)
        self.assertIs(self.job.poll(self.loader, self.scene), JobPhase.FINALIZED)
        self.assertEqual(self.job.frames_remaining, 0)
        self.assertTrue(self.job.is_done)

        # Finished jobs do not advance
        self.assertIs(self.job.poll(self.loader, self.scene), JobPhase.FINALIZED)
        self.assertEqual(self.job.ticks, 4)

    def test_custom_settle_frames(self) -> None:
        job = RenderJob(PATH, self.image, render_layer=1, settle_frames=1)
        job.spawn(self.loader, self.scene)
        self.loader.set_state(job.asset, LoadState.LOADED)
        self.assertIs(job.poll(self.loader, self.scene), JobPhase.FINALIZED)

    def test_invalid_settle_frames(self) -> None:
        with self.assertRaises(ValueError):
            RenderJob(PATH, self.image, render_layer=1, settle_frames=0)

    def test_not_loaded_counts_as_waiting(self) -> None:
        loader = ManualAssetLoader(initial_state=LoadState.NOT_LOADED)
        self.job.spawn(loader, self.scene)
        for _ in range(3):
            self.assertIs(self.job.poll(loader, self.scene), JobPhase.WAITING_FOR_LOAD)
        self.assertEqual(self.job.load_wait_ticks, 3)

    def test_loader_failure(self) -> None:
        self.spawn()
        self.loader.set_state(self.job.asset, LoadState.FAILED)
        self.assertIs(self.job.poll(self.loader, self.scene), JobPhase.FAILED)
        self.assertIsInstance(self.job.error, AssetLoadError)
        self.assertEqual(self.job.error.path, PATH)

    def test_timeout_disabled(self) -> None:
        job = RenderJob(PATH, self.image, render_layer=1, load_timeout_ticks=None)
        job.spawn(self.loader, self.scene)
        for _ in range(1000):
            job.poll(self.loader, self.scene)
        self.assertIs(job.phase, JobPhase.WAITING_FOR_LOAD)

    def test_teardown_exactly_once(self) -> None:
        self.spawn()
        self.assertEqual(self.job.teardown(self.scene), 3)
        self.assertEqual(len(self.scene), 0)
        self.assertTrue(self.job.torn_down)
        with self.assertRaises(CacheConsistencyError):
            self.job.teardown(self.scene)


if __name__ == "__main__":
    unittest.main()
