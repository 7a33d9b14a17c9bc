import io
import os

import pytest

from core import video_processor
from core.errors import EncoderFailure
from core.geometry import Rect
from core.settings_manager import DEFAULT_EXPORT_CONFIG, export_config_for
from core.trim_model import TrimRange
from core.video_processor import VideoProcessor, even_floor


@pytest.fixture
def processor():
    return VideoProcessor("ffmpeg")


def test_even_floor():
    assert even_floor(401) == 400
    assert even_floor(300) == 300
    assert even_floor(1) == 2
    assert even_floor(0) == 2


def test_command_with_trim_and_crop(processor):
    cmd = processor.build_video_command(
        "in.mp4", "out.mp4", DEFAULT_EXPORT_CONFIG,
        trim=TrimRange(3, 9, 12), crop_rect=Rect(100, 100, 400, 300),
    )

    assert cmd[:5] == ["ffmpeg", "-y", "-hide_banner", "-i", "in.mp4"]
    # Seeking after the input is frame accurate
    assert cmd.index("-ss") > cmd.index("-i")
    assert cmd[cmd.index("-ss") + 1] == "3.000"
    assert cmd[cmd.index("-t") + 1] == "6.000"
    assert cmd[cmd.index("-avoid_negative_ts") + 1] == "make_zero"
    assert cmd[cmd.index("-vf") + 1] == "crop=400:300:100:100"
    assert cmd[cmd.index("-c:v") + 1] == "libx264"
    assert cmd[cmd.index("-crf") + 1] == "23"
    assert cmd[cmd.index("-pix_fmt") + 1] == "yuv420p"
    assert cmd[cmd.index("-c:a") + 1] == "aac"
    assert "+faststart" in cmd
    assert cmd[-1] == "out.mp4"


def test_full_range_trim_and_no_crop_add_nothing(processor):
    cmd = processor.build_video_command(
        "in.mkv", "out.mkv", DEFAULT_EXPORT_CONFIG, trim=TrimRange(0, 12, 12),
    )

    assert "-ss" not in cmd
    assert "-vf" not in cmd
    assert "-movflags" not in cmd


def test_odd_crop_is_made_even(processor):
    assert processor.build_crop_filter(Rect(1, 3, 401, 301)) == "crop=400:300:1:3"


def test_silent_source_drops_audio(processor):
    cmd = processor.build_video_command(
        "in.mov", "out.mov", export_config_for("mobile_video"), has_audio=False,
    )

    assert "-an" in cmd
    assert "-c:a" not in cmd
    assert cmd[cmd.index("-c:v") + 1] == "libx265"


class FakePopen:
    """Stands in for ffmpeg: writes the output file and replays stderr."""

    def __init__(self, stderr_lines, returncode=0, write_output=True):
        self.stderr_lines = stderr_lines
        self.returncode = returncode
        self.write_output = write_output
        self.commands = []

    def __call__(self, cmd, **kwargs):
        self.commands.append(cmd)
        if self.write_output:
            with open(cmd[-1], "wb") as f:
                f.write(b"encoded")
        self.stderr = io.StringIO("\n".join(self.stderr_lines) + "\n")
        return self

    def wait(self):
        return self.returncode


def test_export_video_reports_progress_and_renames(monkeypatch, processor, tmp_path):
    fake = FakePopen(["Duration: 00:00:10.00", "time=00:00:03.00", "time=00:00:06.00"])
    monkeypatch.setattr(video_processor.subprocess, "Popen", fake)
    output = str(tmp_path / "out.mp4")
    progress = []

    processor.export_video("in.mp4", output, DEFAULT_EXPORT_CONFIG,
                           trim=TrimRange(2, 8, 10), total_duration=10,
                           progress_callback=progress.append)

    assert progress == [50, 100, 100]
    assert os.path.exists(output)
    assert not os.path.exists(str(tmp_path / "out.tmp.mp4"))
    assert fake.commands[0][-1] == str(tmp_path / "out.tmp.mp4")


def test_encoder_failure_carries_diagnostics(monkeypatch, processor, tmp_path):
    fake = FakePopen(["Input #0", "Invalid data found when processing input"], returncode=1)
    monkeypatch.setattr(video_processor.subprocess, "Popen", fake)
    output = tmp_path / "out.mp4"

    with pytest.raises(EncoderFailure) as excinfo:
        processor.export_video("in.mp4", str(output), DEFAULT_EXPORT_CONFIG)

    assert excinfo.value.returncode == 1
    assert "Invalid data found" in excinfo.value.diagnostics
    assert "Invalid data found" in excinfo.value.user_message
    assert not output.exists()
    assert not (tmp_path / "out.tmp.mp4").exists()


def test_missing_output_is_a_failure(monkeypatch, processor, tmp_path):
    monkeypatch.setattr(video_processor.subprocess, "Popen", FakePopen([], write_output=False))

    with pytest.raises(EncoderFailure, match="no output"):
        processor.export_video("in.mp4", str(tmp_path / "out.mp4"), DEFAULT_EXPORT_CONFIG)


def test_missing_ffmpeg_binary(tmp_path):
    processor = VideoProcessor("no-such-ffmpeg-binary")

    with pytest.raises(EncoderFailure, match="not installed"):
        processor.export_video("in.mp4", str(tmp_path / "out.mp4"), DEFAULT_EXPORT_CONFIG)
