import pytest
from PIL import Image

from core import editor as editor_module
from core.editor import MediaEditor
from core.errors import (
    EncoderFailure,
    ExportInProgress,
    MetadataProbeError,
    NoMediaLoaded,
    UnsupportedFormat,
)
from core.geometry import Dimension, Point, Rect
from core.metadata import VideoMetadata
from core.trim_model import TrimRange


@pytest.fixture
def editor(qtbot, settings_manager):
    return MediaEditor(settings_manager=settings_manager)


@pytest.fixture
def fake_probe(monkeypatch):
    calls = []

    def _probe(path, ffprobe="ffprobe", timeout=10):
        calls.append((path, ffprobe, timeout))
        return VideoMetadata(duration_sec=120.0, width=1920, height=1080, has_audio=False)

    monkeypatch.setattr(editor_module, "probe_video", _probe)
    return calls


@pytest.fixture
def video_file(tmp_path):
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"\x00" * 32)
    return str(path)


def drag(editor, start, end):
    editor.crop_selection.begin_drag(Point(*start))
    editor.crop_selection.update_drag(Point(*end))
    editor.crop_selection.end_drag(Point(*end))


def test_load_image_emits_media_loaded(qtbot, editor, make_image):
    path = make_image(size=(400, 300))

    with qtbot.waitSignal(editor.media_loaded) as blocker:
        session = editor.load_media(path)

    assert blocker.args == [session]
    assert editor.is_loaded
    assert editor.trim_model.duration == 0.0


def test_preview_drag_sets_session_crop(qtbot, editor, make_image):
    editor.load_media(make_image(size=(400, 300)))

    with qtbot.waitSignal(editor.preview_changed) as blocker:
        editor.set_preview_container(Dimension(200, 150))
    drag(editor, (10, 10), (60, 40))

    assert blocker.args == [Dimension(200, 150)]
    assert editor.session.crop == Rect(20, 20, 100, 60)


def test_zero_area_drag_drops_existing_crop(editor, make_image):
    editor.load_media(make_image(size=(400, 300)))
    editor.set_preview_container(Dimension(200, 150))
    drag(editor, (10, 10), (60, 40))

    drag(editor, (80, 80), (80, 120))

    assert editor.session.crop is None


def test_crop_survives_preview_resize(editor, make_image):
    editor.load_media(make_image(size=(400, 300)))
    editor.set_preview_container(Dimension(200, 150))
    drag(editor, (10, 10), (60, 40))

    editor.set_preview_container(Dimension(400, 300))

    assert editor.session.crop == Rect(20, 20, 100, 60)
    rect = editor.crop_selection.current_rect
    assert (rect.x, rect.y, rect.width, rect.height) == pytest.approx((20, 20, 100, 60))


def test_clear_crop(editor, make_image):
    editor.load_media(make_image(size=(400, 300)))
    editor.set_crop(Rect(0, 0, 50, 50))

    editor.clear_crop()

    assert editor.session.crop is None
    assert editor.crop_selection.current_rect is None


def test_failed_load_leaves_editor_empty(editor, make_image):
    editor.load_media(make_image())

    with pytest.raises(UnsupportedFormat):
        editor.load_media("notes.txt")

    assert not editor.is_loaded
    assert editor.preview_dim is None


def test_probe_failure_leaves_editor_empty(editor, make_image, monkeypatch):
    editor.load_media(make_image())

    def _probe(path, **kwargs):
        raise MetadataProbeError("no video stream")
    monkeypatch.setattr(editor_module, "probe_video", _probe)

    with pytest.raises(MetadataProbeError):
        editor.load_media("broken.mp4")

    assert not editor.is_loaded


def test_unsupported_load_drops_video_and_its_edits(qtbot, editor, fake_probe, video_file):
    editor.load_media(video_file)
    editor.set_crop(Rect(0, 0, 100, 100))
    editor.set_trim(TrimRange(10, 60, 120))

    with qtbot.waitSignal(editor.media_closed):
        with pytest.raises(UnsupportedFormat):
            editor.load_media("notes.txt")

    assert editor.session is None
    assert editor.trim_model.duration == 0.0


def test_failed_load_disables_crop_drags(qtbot, editor, make_image):
    editor.load_media(make_image(size=(400, 300)))
    editor.set_preview_container(Dimension(200, 150))

    with pytest.raises(UnsupportedFormat):
        editor.load_media("notes.txt")

    assert not editor.crop_selection.has_geometry()
    with qtbot.assertNotEmitted(editor.crop_selection.crop_committed):
        drag(editor, (10, 10), (60, 40))


def test_probe_uses_configured_tool(editor, fake_probe, video_file):
    editor.settings["ffprobe_path"] = "/opt/bin/ffprobe"
    editor.settings["probe_timeout"] = 3

    editor.load_media(video_file)

    assert fake_probe == [(video_file, "/opt/bin/ffprobe", 3)]


def test_timeline_drag_sets_session_trim(editor, fake_probe, video_file):
    editor.load_media(video_file)
    editor.trim_model.set_timeline_width(600)

    editor.trim_model.press_end_handle()
    editor.trim_model.pointer_move(300)
    editor.trim_model.release()

    assert editor.session.trim == TrimRange(0.0, 60.0, 120.0)

    editor.set_trim(None)
    assert editor.session.trim is None
    assert editor.trim_model.is_full_range()


def test_set_trim_goes_through_model(editor, fake_probe, video_file):
    editor.load_media(video_file)

    editor.set_trim(TrimRange(10, 500, 120))

    assert editor.session.trim == TrimRange(10.0, 120.0, 120.0)


def test_set_trim_errors(editor, make_image):
    with pytest.raises(NoMediaLoaded):
        editor.set_trim(None)

    editor.load_media(make_image())
    with pytest.raises(UnsupportedFormat):
        editor.set_trim(TrimRange(0, 1, 1))


def test_export_image_in_background(qtbot, editor, make_image, tmp_path):
    editor.load_media(make_image(size=(400, 300)))
    editor.set_crop(Rect(0, 0, 40, 30))
    output = str(tmp_path / "out.png")

    with qtbot.waitSignal(editor.export_finished, timeout=10000) as blocker:
        editor.export_image(output)
        assert editor.is_exporting

    assert blocker.args == [output, None]
    assert not editor.is_exporting
    with Image.open(output) as img:
        assert img.size == (40, 30)


def test_second_export_is_rejected(qtbot, editor, make_image, tmp_path):
    editor.load_media(make_image())

    with qtbot.waitSignal(editor.export_finished, timeout=10000):
        editor.export_image(str(tmp_path / "a.png"))
        with pytest.raises(ExportInProgress):
            editor.export_image(str(tmp_path / "b.png"))
        with pytest.raises(ExportInProgress):
            editor.load_media("other.png")


def test_export_type_must_match_media(editor, make_image, tmp_path):
    with pytest.raises(NoMediaLoaded):
        editor.export_image(str(tmp_path / "out.png"))

    editor.load_media(make_image())
    with pytest.raises(UnsupportedFormat):
        editor.export_video(str(tmp_path / "out.mp4"))


def test_validation_error_arrives_as_result(qtbot, editor, make_image, tmp_path):
    editor.load_media(make_image())

    with qtbot.waitSignal(editor.export_finished, timeout=10000) as blocker:
        editor.export_image(str(tmp_path / "out.mp4"))

    output, error = blocker.args
    assert isinstance(error, UnsupportedFormat)
    assert editor.is_loaded


def test_encoder_failure_arrives_as_result(qtbot, editor, fake_probe, video_file, tmp_path):
    editor.load_media(video_file)
    editor.settings["ffmpeg_path"] = "no-such-ffmpeg-binary"

    with qtbot.waitSignal(editor.export_finished, timeout=10000) as blocker:
        editor.export_video(str(tmp_path / "out.mp4"))

    output, error = blocker.args
    assert isinstance(error, EncoderFailure)
    assert not (tmp_path / "out.mp4").exists()
    assert editor.session.file_path == video_file


def test_close_media(qtbot, editor, make_image):
    editor.load_media(make_image())

    with qtbot.waitSignal(editor.media_closed):
        editor.close_media()

    assert not editor.is_loaded
