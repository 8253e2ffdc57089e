import unittest

from view3d.core import CacheConsistencyError
from view3d.services import ThumbnailCache, ThumbnailQueue, ThumbnailStage, ThumbnailState


class ThumbnailCacheTests(unittest.TestCase):
    def setUp(self) -> None:
        self.cache = ThumbnailCache()
        self.image = object()
        self.cache.add("a.glb", self.image)

    def test_add_marks_queued(self) -> None:
        self.assertIn("a.glb", self.cache)
        self.assertEqual(self.cache.stage("a.glb"), ThumbnailStage.QUEUED)
        self.assertIs(self.cache.lookup("a.glb"), self.image)
        self.assertFalse(self.cache.is_ready("a.glb"))

    def test_image_is_allocated_once(self) -> None:
        with self.assertRaises(CacheConsistencyError):
            self.cache.add("a.glb", object())
        self.assertIs(self.cache.lookup("a.glb"), self.image)

    def test_image_for_missing_path(self) -> None:
        with self.assertRaises(CacheConsistencyError) as ctx:
            self.cache.image_for("missing.glb")
        self.assertIn("missing.glb", str(ctx.exception))

    def test_forward_transitions(self) -> None:
        job = object()
        self.cache.transition("a.glb", ThumbnailState.rendering(job))
        self.assertIs(self.cache.state("a.glb").job, job)
        previous = self.cache.transition("a.glb", ThumbnailState.ready())
        self.assertEqual(previous.stage, ThumbnailStage.RENDERING)
        self.assertTrue(self.cache.is_ready("a.glb"))

    def test_lifecycle_never_regresses(self) -> None:
        with self.assertRaises(CacheConsistencyError):
            self.cache.transition("a.glb", ThumbnailState.ready())

        self.cache.transition("a.glb", ThumbnailState.rendering(object()))
        self.cache.transition("a.glb", ThumbnailState.ready())
        for state in (ThumbnailState.queued(), ThumbnailState.rendering(object()), ThumbnailState.failed("x")):
            with self.assertRaises(CacheConsistencyError):
                self.cache.transition("a.glb", state)

    def test_failed_can_be_requeued(self) -> None:
        self.cache.transition("a.glb", ThumbnailState.rendering(object()))
        self.cache.transition("a.glb", ThumbnailState.failed("broken"))
        self.assertEqual(self.cache.state("a.glb").error, "broken")
        self.cache.transition("a.glb", ThumbnailState.queued())
        self.assertEqual(self.cache.stage("a.glb"), ThumbnailStage.QUEUED)

    def test_transition_unknown_path(self) -> None:
        with self.assertRaises(CacheConsistencyError):
            self.cache.transition("b.glb", ThumbnailState.ready())

    def test_counts(self) -> None:
        self.cache.add("b.glb", object())
        self.cache.transition("b.glb", ThumbnailState.rendering(object()))
        self.assertEqual(
            self.cache.counts(),
            {"queued": 1, "rendering": 1, "ready": 0, "failed": 0},
        )


class ThumbnailQueueTests(unittest.TestCase):
    def test_admit_is_fifo_and_single_flight(self) -> None:
        queue = ThumbnailQueue()
        for path in ("a", "b", "c"):
            queue.push(path)

        self.assertEqual(queue.admit(), "a")
        self.assertTrue(queue.busy)
        self.assertIsNone(queue.admit())
        self.assertEqual(queue.snapshot(), ["b", "c"])

        queue.release()
        self.assertEqual(queue.admit(), "b")
        queue.release()
        self.assertEqual(queue.admit(), "c")
        queue.release()
        self.assertIsNone(queue.admit())
        self.assertFalse(queue.busy)


if __name__ == "__main__":
    unittest.main()
