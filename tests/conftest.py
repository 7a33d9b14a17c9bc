import os
import shutil
import subprocess

import pytest
from PIL import Image

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from core.settings_manager import SettingsManager

HAS_FFMPEG = shutil.which("ffmpeg") is not None and shutil.which("ffprobe") is not None

requires_ffmpeg = pytest.mark.skipif(not HAS_FFMPEG, reason="ffmpeg and ffprobe are required")


@pytest.fixture
def make_image(tmp_path):
    """Factory writing a gradient test image and returning its path."""

    def _make(name="source.png", size=(320, 240), mode="RGB"):
        width, height = size
        img = Image.new(mode, size)
        if mode == "RGB":
            img.putdata([(x * 255 // width, y * 255 // height, 128)
                         for y in range(height) for x in range(width)])
        path = tmp_path / name
        img.save(path)
        return str(path)

    return _make


@pytest.fixture
def settings_manager(tmp_path):
    return SettingsManager(str(tmp_path / "settings.json"))


@pytest.fixture(scope="session")
def video_clip(tmp_path_factory):
    """12 second 640x480 test pattern with a sine tone."""
    if not HAS_FFMPEG:
        pytest.skip("ffmpeg and ffprobe are required")

    path = tmp_path_factory.mktemp("media") / "clip.mp4"
    subprocess.run(
        [
            "ffmpeg", "-y", "-hide_banner", "-loglevel", "error",
            "-f", "lavfi", "-i", "testsrc=size=640x480:rate=25:duration=12",
            "-f", "lavfi", "-i", "sine=frequency=440:duration=12",
            "-c:v", "libx264", "-pix_fmt", "yuv420p", "-c:a", "aac", "-shortest",
            str(path),
        ],
        check=True,
        capture_output=True,
    )
    return str(path)
