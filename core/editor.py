# --------------------------------------------------
# Media Editor Module
# Owns the session and wires interaction models to it
# --------------------------------------------------

import functools
import logging

from PyQt5.QtCore import QObject, pyqtSignal

from .crop_selection import CropSelection
from .errors import ExportInProgress, NoMediaLoaded, UnsupportedFormat
from .export_worker import ExportWorker
from .geometry import Dimension, fit_preview_dimension
from .media_session import MediaType, SessionState
from .metadata import probe_video
from .settings_manager import SettingsManager
from .trim_model import TrimModel
from .video_processor import VideoProcessor

logger = logging.getLogger(__name__)


class MediaEditor(QObject):
    """
    The single editing document exposed to the shell.

    Crop drags and timeline drags flow into the session through the
    models' signals; exports read an immutable snapshot of the session on a
    worker thread, so editing may continue while an export runs. Only one
    export is accepted at a time.
    """

    media_loaded = pyqtSignal(object)
    media_closed = pyqtSignal()
    preview_changed = pyqtSignal(object)
    export_started = pyqtSignal(str)
    export_progress = pyqtSignal(int)
    export_finished = pyqtSignal(str, object)

    def __init__(self, settings_manager=None, parent=None):
        super().__init__(parent)
        self.settings_manager = settings_manager or SettingsManager()
        self.settings = self.settings_manager.load_settings()
        self.export_config = self.settings_manager.export_config(self.settings)

        self.state = SessionState(self)
        self.crop_selection = CropSelection(self)
        self.trim_model = TrimModel(parent=self)

        self.container_dim = None
        self.preview_dim = None
        self.worker = None

        self.crop_selection.crop_committed.connect(self._on_crop_committed)
        self.crop_selection.selection_changed.connect(self._on_selection_changed)
        self.trim_model.trim_changed.connect(self._on_trim_changed)

    # --------------------------------------------------
    # Properties
    # --------------------------------------------------
    @property
    def session(self):
        return self.state.session

    @property
    def is_loaded(self):
        return self.state.is_loaded

    @property
    def is_exporting(self):
        # Cleared only once the finished signal has been delivered
        return self.worker is not None

    # --------------------------------------------------
    # Loading
    # --------------------------------------------------
    def load_media(self, path):
        """Open ``path``; raises MediaEditorError and leaves the editor empty on failure."""
        if self.is_exporting:
            raise ExportInProgress("Cannot open a new file while an export is running.")

        prober = functools.partial(
            probe_video,
            ffprobe=self.settings.get("ffprobe_path", "ffprobe"),
            timeout=self.settings.get("probe_timeout", 10),
        )
        try:
            session = self.state.load_media(path, prober=prober)
        except Exception:
            self._reset_models()
            self.media_closed.emit()
            raise

        self.trim_model.reset(session.duration_sec or 0.0)
        self._update_geometry()
        self.media_loaded.emit(session)
        return session

    def close_media(self):
        if self.is_exporting:
            raise ExportInProgress("Cannot close the file while an export is running.")
        self.state.clear()
        self._reset_models()
        self.media_closed.emit()

    # --------------------------------------------------
    # Preview geometry
    # --------------------------------------------------
    def set_preview_container(self, container_dim: Dimension):
        """Fit the preview into a new container size and re-map the crop."""
        if container_dim.width <= 0 or container_dim.height <= 0:
            return
        self.container_dim = container_dim
        self._update_geometry()

    def _update_geometry(self):
        session = self.session
        if session is None or self.container_dim is None:
            self.preview_dim = None
            return

        self.preview_dim = fit_preview_dimension(session.source_dim, self.container_dim)
        self.crop_selection.set_geometry(self.preview_dim, session.source_dim)
        self.crop_selection.show_source_rect(session.crop)
        self.preview_changed.emit(self.preview_dim)

    # --------------------------------------------------
    # Edits
    # --------------------------------------------------
    def set_crop(self, rect):
        self.state.set_crop(rect)
        self.crop_selection.show_source_rect(rect)

    def clear_crop(self):
        if self.is_loaded:
            self.state.clear_crop()
        self.crop_selection.clear()

    def set_trim(self, trim_range):
        session = self.session
        if session is None:
            raise NoMediaLoaded()
        if not session.is_video:
            raise UnsupportedFormat("Only videos can be trimmed.")
        if trim_range is None:
            self.trim_model.set_range(0.0, self.trim_model.duration)
        else:
            self.trim_model.set_range(trim_range.start_sec, trim_range.end_sec)

    def _on_crop_committed(self, rect):
        if self.is_loaded:
            self.state.set_crop(rect)

    def _on_selection_changed(self, rect):
        # A discarded selection (zero-area drag or clear) also drops the crop
        if rect is None and not self.crop_selection.is_drawing and self.is_loaded:
            if self.session.crop is not None:
                self.state.clear_crop()

    def _on_trim_changed(self, start, end):
        session = self.session
        if session is None or not session.is_video:
            return
        trim = self.trim_model.to_trim_range()
        self.state.set_trim(None if trim.is_full_range() else trim)

    def _reset_models(self):
        self.preview_dim = None
        self.crop_selection.set_geometry(None, None)
        self.crop_selection.clear()
        self.trim_model.reset(0.0)

    # --------------------------------------------------
    # Export
    # --------------------------------------------------
    def export_image(self, output_path):
        return self._start_export(output_path, MediaType.IMAGE)

    def export_video(self, output_path):
        return self._start_export(output_path, MediaType.VIDEO)

    def export(self, output_path):
        """Export with whichever routine matches the loaded media."""
        if self.session is None:
            raise NoMediaLoaded()
        return self._start_export(output_path, self.session.media_type)

    def _start_export(self, output_path, media_type):
        session = self.session
        if session is None:
            raise NoMediaLoaded()
        if session.media_type is not media_type:
            raise UnsupportedFormat(
                f"The loaded file is a {session.media_type.value}, not a {media_type.value}."
            )
        if self.is_exporting:
            raise ExportInProgress()

        processor = VideoProcessor(self.settings.get("ffmpeg_path", "ffmpeg"))
        worker = ExportWorker(session, output_path, self.export_config, processor, parent=self)
        worker.progress_updated.connect(self.export_progress.emit)
        worker.export_finished.connect(self._on_export_finished)
        self.worker = worker

        logger.info("Starting %s export to %s", media_type.value, output_path)
        self.export_started.emit(output_path)
        worker.start()
        return worker

    def _on_export_finished(self, output_path, error):
        worker = self.worker
        if worker is not None:
            worker.wait()
            worker.deleteLater()
        self.worker = None

        if error is None:
            logger.info("Export finished: %s", output_path)
        self.export_finished.emit(output_path, error)

    def wait_for_export(self, timeout_ms=5000):
        """Block until the running export ends; None waits without a limit."""
        if self.worker is not None:
            if timeout_ms is None:
                return self.worker.wait()
            return self.worker.wait(timeout_ms)
        return True
