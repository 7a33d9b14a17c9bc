import pytest
from PyQt5.QtCore import Qt

from core import editor as editor_module
from core.editor import MediaEditor
from core.errors import MetadataProbeError
from core.metadata import VideoMetadata
from core.trim_model import TrimModel
from ui import main_window
from ui.main_window import MediaEditorWindow
from ui.timeline import TimelineWidget
from ui.widgets import read_first_frame

from tests.conftest import requires_ffmpeg


@pytest.fixture
def window(qtbot, settings_manager):
    win = MediaEditorWindow(MediaEditor(settings_manager=settings_manager))
    qtbot.addWidget(win)
    return win


def test_save_as_without_media_shows_info(window, monkeypatch):
    shown = []
    monkeypatch.setattr(main_window.QMessageBox, "information",
                        lambda *args: shown.append(args[1:]))
    monkeypatch.setattr(main_window.QFileDialog, "getSaveFileName",
                        lambda *args, **kwargs: pytest.fail("dialog must not open"))

    window.save_as()

    assert shown == [("No Media Loaded", "No media file is loaded. Please open a file first.")]


def test_cancelled_save_dialog_is_a_no_op(window, make_image, monkeypatch):
    window.load_media_file(make_image())
    monkeypatch.setattr(main_window.QFileDialog, "getSaveFileName", lambda *args, **kwargs: ("", ""))

    window.save_as()

    assert not window.editor.is_exporting


def test_load_image_hides_timeline(window, make_image):
    assert window.load_media_file(make_image(size=(200, 100)))

    assert "200x100" in window.media_info.text()
    assert window.timeline.isHidden()
    assert window.clear_crop_btn.isEnabled()
    assert not window.reset_trim_btn.isEnabled()


def test_load_error_shows_warning(window, monkeypatch):
    shown = []
    monkeypatch.setattr(main_window.QMessageBox, "warning", lambda *args: shown.append(args[1]))

    assert not window.load_media_file("notes.txt")

    assert shown == ["Unsupported Format"]
    assert window.media_info.text() == "No media loaded"


def test_probe_failure_resets_window(window, tmp_path, monkeypatch):
    video = tmp_path / "a.mp4"
    video.write_bytes(b"\x00")
    monkeypatch.setattr(editor_module, "probe_video", lambda path, **kwargs: VideoMetadata(
        duration_sec=120.0, width=640, height=480, has_audio=False))
    assert window.load_media_file(str(video))
    assert not window.timeline.isHidden()

    def _probe(path, **kwargs):
        raise MetadataProbeError("no video stream")
    monkeypatch.setattr(editor_module, "probe_video", _probe)
    monkeypatch.setattr(main_window.QMessageBox, "critical", lambda *args: None)

    assert not window.load_media_file(str(tmp_path / "b.mp4"))

    assert window.media_info.text() == "No media loaded"
    assert window.timeline.isHidden()
    assert not window.reset_trim_btn.isEnabled()
    assert window.preview.pixmap is None


def test_save_as_exports_image(qtbot, window, make_image, tmp_path, monkeypatch):
    window.load_media_file(make_image())
    output = str(tmp_path / "exported.png")
    monkeypatch.setattr(main_window.QFileDialog, "getSaveFileName", lambda *args, **kwargs: (output, ""))
    monkeypatch.setattr(main_window.ExportCompleteDialog, "exec_", lambda self: 0)

    with qtbot.waitSignal(window.editor.export_finished, timeout=10000):
        window.save_as()

    assert window.progress_status.text() == "Export Done"
    assert window.settings["last_save_dir"] == str(tmp_path)


def test_preview_canvas_fits_loaded_image(window, make_image):
    window.load_media_file(make_image(size=(400, 300)))

    assert window.preview.pixmap is not None
    preview = window.editor.preview_dim
    container = window.preview.container_dim()
    assert preview.width <= container.width and preview.height <= container.height
    assert window.editor.crop_selection.has_geometry()


def test_timeline_labels(qtbot):
    model = TrimModel(duration_sec=125.0)
    widget = TimelineWidget(model)
    qtbot.addWidget(widget)

    model.set_range(5, 65)

    assert widget.start_label.text() == "Start 00:05"
    assert widget.end_label.text() == "End 01:05"
    assert widget.length_label.text() == "Selected 01:00 of 02:05"


def test_trim_bar_release_anywhere_stops_drag(qtbot):
    model = TrimModel(duration_sec=10.0)
    widget = TimelineWidget(model)
    qtbot.addWidget(widget)
    widget.show()
    qtbot.waitExposed(widget)

    model.press_end_handle()
    qtbot.mouseRelease(widget.start_label, Qt.LeftButton)

    assert not model.is_dragging


@requires_ffmpeg
def test_first_frame_preview(qtbot, video_clip):
    image = read_first_frame(video_clip)

    assert image is not None
    assert (image.width(), image.height()) == (640, 480)


def test_first_frame_of_missing_file(qtbot, tmp_path):
    assert read_first_frame(str(tmp_path / "missing.mp4")) is None
