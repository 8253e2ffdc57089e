import os

import pytest

# Headless Qt for QTimer-based tests
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(autouse=True)
def isolated_user_data(tmp_path, monkeypatch):
    """Keep Config away from the real user data directory"""
    monkeypatch.setenv("VIEW3D_DATA_DIR", str(tmp_path / "userdata"))
    yield tmp_path / "userdata"
