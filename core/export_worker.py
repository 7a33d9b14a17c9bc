# --------------------------------------------------
# Background export thread
# --------------------------------------------------
import logging

from PyQt5.QtCore import QThread, pyqtSignal

from . import exporter
from .errors import ExportError, MediaEditorError

logger = logging.getLogger(__name__)


class ExportWorker(QThread):
    """Runs one export off the GUI thread and reports back through signals."""

    progress_updated = pyqtSignal(int)
    # Output path and None on success, or the MediaEditorError that stopped it
    export_finished = pyqtSignal(str, object)

    def __init__(self, session, output_path, config, video_processor=None, parent=None):
        super().__init__(parent)
        self.session = session
        self.output_path = output_path
        self.config = config
        self.video_processor = video_processor
        self.error = None

    def run(self):
        try:
            exporter.export(
                self.session,
                self.output_path,
                self.config,
                progress_callback=self.progress_updated.emit,
                video_processor=self.video_processor,
            )
        except MediaEditorError as e:
            logger.error("Export to %s failed: %s", self.output_path, e)
            self.error = e
        except Exception as e:
            # Anything unexpected still has to reach the shell as a typed error
            logger.exception("Unexpected error exporting to %s", self.output_path)
            self.error = ExportError(f"Unexpected error: {e}")

        self.export_finished.emit(self.output_path, self.error)
