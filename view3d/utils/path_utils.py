"""
Path utilities for view3d

Model file filtering and asset path helpers.
"""

import os
from pathlib import Path
from typing import Iterable, Union

from ..config import Config


def normalize_path(path: Union[str, Path]) -> str:
    """
    Normalize a thumbnail key.

    Keys are compared as strings, so separators are unified and
    "./" prefixes removed. The path is not resolved against the disk.

    Args:
        path: Path string or Path object

    Returns:
        Normalized path string
    """
    text = os.path.normpath(os.fspath(path))
    return text.replace('\\', '/')


def is_model_file(path: Union[str, Path], extensions: Iterable[str] = None) -> bool:
    """
    Check if a path names a model file the viewer can preview.

    Args:
        path: File path
        extensions: Accepted suffixes (default Config.MODEL_EXTENSIONS)

    Returns:
        True if the suffix matches, case-insensitive
    """
    extensions = tuple(ext.lower() for ext in (extensions or Config.MODEL_EXTENSIONS))
    name = Path(path).name
    if not name or name.startswith('.'):
        return False
    return Path(name).suffix.lower() in extensions


def scene_asset_path(path: Union[str, Path]) -> str:
    """
    Asset path handed to the loader for a model file.

    glTF files are loaded through their first scene (Config.SCENE_LABEL).

    Args:
        path: Model file path

    Returns:
        Loader asset path
    """
    text = os.fspath(path)
    if Path(text).suffix.lower() in ('.glb', '.gltf') and '#' not in text:
        return f"{text}{Config.SCENE_LABEL}"
    return text


__all__ = ['normalize_path', 'is_model_file', 'scene_asset_path']
