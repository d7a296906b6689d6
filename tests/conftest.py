"""
Shared fixtures for snapshot toolkit tests
"""

import os

import pytest

from snapshot_toolkit.core.config import Settings, reset_settings
from snapshot_toolkit.visual_testing.pixel_buffer import PixelBuffer


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep SNAPSHOT_* variables and .env files from leaking into tests"""
    for name in list(os.environ):
        if name.upper().startswith("SNAPSHOT_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def reference_root(tmp_path):
    """Reference image root (not created; suffix directories are made on record)"""
    return tmp_path / "refs"


@pytest.fixture
def settings(reference_root):
    """Settings pointing at a temporary reference root"""
    return Settings(reference_image_dir=reference_root)


@pytest.fixture
def gray_buffer():
    """A 4x3 opaque gray buffer"""
    return PixelBuffer.solid(4, 3, (128, 128, 128, 255))


class CountingRenderer:
    """Renderer that records every element it is asked to capture"""

    def __init__(self):
        self.captured = []

    def capture(self, element):
        self.captured.append(element)
        return element


@pytest.fixture
def counting_renderer():
    return CountingRenderer()
