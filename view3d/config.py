"""
Configuration for view3d

Centralized app configuration with sensible defaults.
Pattern: Single source of truth for all settings.
"""

import json
import math
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from . import __version__


class Config:
    """
    Application configuration

    Features:
    - App metadata
    - Thumbnail engine settings (size, settle frames, isolation layer)
    - Offscreen camera/light rig used for previews
    - User settings file (JSON overrides)
    """

    # ==================== APP METADATA ====================
    APP_NAME = "view3d"
    APP_VERSION = __version__

    # ==================== PATHS ====================
    APP_ROOT: Path = Path(__file__).parent
    SETTINGS_FILE = "settings.json"
    LOGS_FOLDER = "logs"

    # ==================== MODEL FILES ====================
    MODEL_EXTENSIONS = ('.glb', '.gltf')
    SCENE_LABEL = "#Scene0"  # glTF files are loaded through their first scene

    # ==================== THUMBNAILS ====================
    THUMBNAIL_SIZE = 256
    MAX_THUMBNAIL_SIZE = 4096
    THUMBNAIL_SETTLE_FRAMES = 3
    THUMBNAIL_LOAD_TIMEOUT_TICKS = 600  # ~10s at 60 fps

    # Render layers: 0 is the main world, thumbnails use a reserved layer
    MAIN_LAYER = 0
    THUMBNAIL_LAYER = 1
    MAX_RENDER_LAYER = 31
    THUMBNAIL_LAYER_MODE = 'fixed'  # 'fixed' or 'hashed'
    LAYER_MODES = ('fixed', 'hashed')

    # ==================== OFFSCREEN RIG ====================
    THUMBNAIL_CAMERA_POSITION = (0.0, 0.42, 1.2)
    THUMBNAIL_CAMERA_TARGET = (0.0, 0.0, 0.0)
    THUMBNAIL_CAMERA_ORDER = -10  # Render before main camera
    THUMBNAIL_CLEAR_COLOR = (0.001, 0.001, 0.001)
    THUMBNAIL_ERROR_COLOR = (0.35, 0.05, 0.05)

    THUMBNAIL_LIGHT_ILLUMINANCE = 10_000.0
    THUMBNAIL_LIGHT_SHADOWS = False
    THUMBNAIL_LIGHT_ROTATION = (0.0, math.pi / 2.0, -math.pi / 4.0)  # euler ZYX

    THUMBNAIL_MODEL_TINT = "#030712"

    # ==================== FRAME LOOP ====================
    FRAME_INTERVAL_MS = 16

    # Keys of the "thumbnails" settings section that may override defaults
    THUMBNAIL_SETTING_KEYS = {
        'size': 'THUMBNAIL_SIZE',
        'settle_frames': 'THUMBNAIL_SETTLE_FRAMES',
        'load_timeout_ticks': 'THUMBNAIL_LOAD_TIMEOUT_TICKS',
        'layer': 'THUMBNAIL_LAYER',
        'layer_mode': 'THUMBNAIL_LAYER_MODE',
    }

    # Inclusive integer bounds for numeric thumbnail settings (None = unbounded)
    THUMBNAIL_SETTING_RANGES = {
        'size': (1, MAX_THUMBNAIL_SIZE),
        'settle_frames': (1, None),
        'load_timeout_ticks': (1, None),
        'layer': (1, MAX_RENDER_LAYER),
    }

    @classmethod
    def get_user_data_dir(cls) -> Path:
        """Get user config directory in OS AppData.

        VIEW3D_DATA_DIR overrides the platform default.
        """
        override = os.environ.get('VIEW3D_DATA_DIR')
        if override:
            user_dir = Path(override)
            user_dir.mkdir(parents=True, exist_ok=True)
            return user_dir

        if sys.platform == 'win32':
            base = Path(os.environ.get('LOCALAPPDATA', Path.home() / 'AppData' / 'Local'))
        elif sys.platform == 'darwin':
            base = Path.home() / 'Library' / 'Application Support'
        else:
            base = Path(os.environ.get('XDG_DATA_HOME', Path.home() / '.local' / 'share'))

        user_dir = base / 'view3d'
        user_dir.mkdir(parents=True, exist_ok=True)
        return user_dir

    @classmethod
    def get_logs_directory(cls) -> Path:
        """Get logs directory path"""
        logs_dir = cls.get_user_data_dir() / cls.LOGS_FOLDER
        logs_dir.mkdir(parents=True, exist_ok=True)
        return logs_dir

    @classmethod
    def get_settings_file(cls) -> Path:
        """Get path to user settings file."""
        return cls.get_user_data_dir() / cls.SETTINGS_FILE

    @classmethod
    def load_settings(cls) -> dict:
        """Load user settings from config file."""
        settings_file = cls.get_settings_file()
        if settings_file.exists():
            try:
                return json.loads(settings_file.read_text(encoding='utf-8'))
            except Exception:
                pass
        return {}

    @classmethod
    def save_settings(cls, settings: dict) -> bool:
        """Save user settings to config file."""
        try:
            settings_file = cls.get_settings_file()
            settings_file.parent.mkdir(parents=True, exist_ok=True)
            settings_file.write_text(
                json.dumps(settings, indent=2),
                encoding='utf-8'
            )
            return True
        except Exception:
            return False

    @classmethod
    def thumbnail_settings(cls, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Resolve effective thumbnail engine settings.

        Defaults come from the class constants, then the "thumbnails" section
        of the settings file, then explicit overrides.

        Args:
            overrides: Optional dict using the same keys as the settings file

        Returns:
            Dict with keys size, settle_frames, load_timeout_ticks, layer, layer_mode
        """
        settings = {key: getattr(cls, attr) for key, attr in cls.THUMBNAIL_SETTING_KEYS.items()}

        stored = cls.load_settings().get('thumbnails', {})
        if isinstance(stored, dict):
            settings.update({k: v for k, v in stored.items() if k in settings})

        if overrides:
            settings.update({k: v for k, v in overrides.items() if k in settings})

        # Invalid values fall back to the built-in default
        for key, attr in cls.THUMBNAIL_SETTING_KEYS.items():
            if not cls._valid_thumbnail_setting(key, settings[key]):
                settings[key] = getattr(cls, attr)

        return settings

    @classmethod
    def _valid_thumbnail_setting(cls, key: str, value: Any) -> bool:
        if key == 'layer_mode':
            return value in cls.LAYER_MODES

        # bool is an int subclass but never a valid count
        if not isinstance(value, int) or isinstance(value, bool):
            return False
        low, high = cls.THUMBNAIL_SETTING_RANGES[key]
        return value >= low and (high is None or value <= high)


__all__ = ['Config']
