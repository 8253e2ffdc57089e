import logging
import unittest
from pathlib import Path

import pytest

from view3d.config import Config
from view3d.utils import LoggingConfig, hex_to_rgb, is_model_file, normalize_path, scene_asset_path


class ConfigTests(unittest.TestCase):
    @pytest.fixture(autouse=True)
    def _user_data(self, isolated_user_data):
        self.user_data = isolated_user_data

    def test_user_data_dir_override(self) -> None:
        self.assertEqual(Config.get_user_data_dir(), self.user_data)
        self.assertTrue(Config.get_logs_directory().is_dir())

    def test_thumbnail_defaults(self) -> None:
        settings = Config.thumbnail_settings()
        self.assertEqual(settings, {
            "size": 256,
            "settle_frames": 3,
            "load_timeout_ticks": 600,
            "layer": 1,
            "layer_mode": "fixed",
        })

    def test_settings_file_and_overrides(self) -> None:
        self.assertTrue(Config.save_settings({"thumbnails": {"size": 128, "layer_mode": "hashed", "bogus": 1}}))
        self.assertEqual(Config.load_settings()["thumbnails"]["size"], 128)

        settings = Config.thumbnail_settings({"settle_frames": 5})
        self.assertEqual(settings["size"], 128)
        self.assertEqual(settings["layer_mode"], "hashed")
        self.assertEqual(settings["settle_frames"], 5)
        self.assertNotIn("bogus", settings)

    def test_invalid_layer_mode_falls_back(self) -> None:
        settings = Config.thumbnail_settings({"layer_mode": "sideways"})
        self.assertEqual(settings["layer_mode"], "fixed")

    def test_invalid_size_falls_back(self) -> None:
        self.assertEqual(Config.thumbnail_settings({"size": 0})["size"], 256)
        self.assertEqual(Config.thumbnail_settings({"size": 100_000})["size"], 256)
        self.assertEqual(Config.thumbnail_settings({"size": 4096})["size"], 4096)

    def test_invalid_settle_frames_falls_back(self) -> None:
        self.assertEqual(Config.thumbnail_settings({"settle_frames": 0})["settle_frames"], 3)
        self.assertEqual(Config.thumbnail_settings({"settle_frames": "5"})["settle_frames"], 3)
        self.assertEqual(Config.thumbnail_settings({"settle_frames": True})["settle_frames"], 3)
        self.assertEqual(Config.thumbnail_settings({"settle_frames": 1})["settle_frames"], 1)

    def test_invalid_load_timeout_falls_back(self) -> None:
        self.assertEqual(Config.thumbnail_settings({"load_timeout_ticks": -1})["load_timeout_ticks"], 600)
        self.assertEqual(Config.thumbnail_settings({"load_timeout_ticks": 2.5})["load_timeout_ticks"], 600)

    def test_invalid_layer_falls_back(self) -> None:
        self.assertEqual(Config.thumbnail_settings({"layer": 0})["layer"], 1)
        self.assertEqual(Config.thumbnail_settings({"layer": 99})["layer"], 1)
        self.assertEqual(Config.thumbnail_settings({"layer": 31})["layer"], 31)

    def test_invalid_stored_values_fall_back(self) -> None:
        Config.save_settings({"thumbnails": {"size": -8, "settle_frames": None, "layer": 7}})
        settings = Config.thumbnail_settings()
        self.assertEqual(settings["size"], 256)
        self.assertEqual(settings["settle_frames"], 3)
        self.assertEqual(settings["layer"], 7)

    def test_corrupt_settings_file(self) -> None:
        Config.get_settings_file().write_text("{not json", encoding="utf-8")
        self.assertEqual(Config.load_settings(), {})
        self.assertEqual(Config.thumbnail_settings()["size"], 256)


class LoggingConfigTests(unittest.TestCase):
    def tearDown(self) -> None:
        logger = logging.getLogger(LoggingConfig.LOGGER_NAME)
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

    def test_setup_logging_writes_file(self) -> None:
        log_dir = Config.get_logs_directory()
        logger = LoggingConfig.setup_logging(log_dir, level=logging.DEBUG, log_to_console=False)
        LoggingConfig.get_logger("view3d.services.thumbnail_service").info("Thumbnail ready for a.glb")
        for handler in logger.handlers:
            handler.flush()

        log_files = list(log_dir.glob("view3d_*.log"))
        self.assertEqual(len(log_files), 1)
        self.assertIn("Thumbnail ready for a.glb", log_files[0].read_text(encoding="utf-8"))

    def test_setup_logging_replaces_handlers(self) -> None:
        LoggingConfig.setup_logging(log_to_file=False)
        logger = LoggingConfig.setup_logging(log_to_file=False)
        self.assertEqual(len(logger.handlers), 1)


class PathUtilsTests(unittest.TestCase):
    def test_is_model_file(self) -> None:
        self.assertTrue(is_model_file("models/ship.glb"))
        self.assertTrue(is_model_file(Path("models/SHIP.GLTF")))
        self.assertFalse(is_model_file("models/ship.obj"))
        self.assertFalse(is_model_file("models/.ship.glb"))
        self.assertTrue(is_model_file("ship.obj", extensions=(".OBJ",)))

    def test_scene_asset_path(self) -> None:
        self.assertEqual(scene_asset_path("a.glb"), "a.glb#Scene0")
        self.assertEqual(scene_asset_path("a.gltf#Scene1"), "a.gltf#Scene1")
        self.assertEqual(scene_asset_path("a.obj"), "a.obj")

    def test_normalize_path(self) -> None:
        self.assertEqual(normalize_path("models/./sub/../a.glb"), "models/a.glb")

    def test_hex_to_rgb(self) -> None:
        self.assertEqual(hex_to_rgb("#ff0000"), (1.0, 0.0, 0.0))
        with self.assertRaises(ValueError):
            hex_to_rgb("#fff")


if __name__ == "__main__":
    unittest.main()
