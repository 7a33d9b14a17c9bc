# --------------------------------------------------
# Widgets Module
# Custom widgets for the media editor window
# --------------------------------------------------

import logging

import cv2
from PyQt5.QtWidgets import QPushButton, QWidget
from PyQt5.QtCore import Qt, QRect, pyqtSignal
from PyQt5.QtGui import QDragEnterEvent, QDropEvent, QImage, QPainter, QPixmap, QColor
import qtawesome as qta

from core.errors import UnsupportedFormat
from core.geometry import Dimension, letterbox_offset
from core.media_session import MediaType, route_by_extension
from ui.crop_widget import CropOverlay

logger = logging.getLogger(__name__)

# --------------------------------------------------
# IconButton Class
# Custom button with Font Awesome icon support
# --------------------------------------------------
class IconButton(QPushButton):
    def __init__(self, icon_name, text='', parent=None):
        super().__init__(parent)
        self.setIcon(qta.icon(icon_name))
        self.setText(text)

        self.setStyleSheet("""
            QPushButton {
                padding: 8px 12px;
                border: 1px solid #3f8e93;
                border-radius: 4px;
                background-color: #f8f9fa;
                font-weight: bold;
                color: #2c3e50;
            }
            QPushButton:hover {
                background-color: #e3f2fd;
                border-color: #2980b9;
            }
            QPushButton:pressed {
                background-color: #bbdefb;
            }
            QPushButton:disabled {
                background-color: #eeeeee;
                color: #999999;
                border-color: #cccccc;
            }
        """)

# --------------------------------------------------
# Preview frame loading
# --------------------------------------------------
def read_first_frame(video_path):
    """Decode the first frame of a video with OpenCV, or None."""
    cap = cv2.VideoCapture(video_path)
    try:
        if not cap.isOpened():
            return None
        ok, frame = cap.read()
    finally:
        cap.release()

    if not ok or frame is None:
        return None

    rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
    height, width, channels = rgb.shape
    image = QImage(rgb.data, width, height, channels * width, QImage.Format_RGB888)
    # Detach from the numpy buffer before it goes away
    return image.copy()

def load_preview_pixmap(session):
    if session.media_type is MediaType.IMAGE:
        pixmap = QPixmap(session.file_path)
        return None if pixmap.isNull() else pixmap

    image = read_first_frame(session.file_path)
    if image is None:
        logger.warning("Could not decode a preview frame from %s", session.file_path)
        return None
    return QPixmap.fromImage(image)

# --------------------------------------------------
# PreviewCanvas Class
# Letterboxed still preview with the crop overlay on top
# --------------------------------------------------
class PreviewCanvas(QWidget):
    fileDropped = pyqtSignal(str)

    def __init__(self, editor, parent=None):
        super().__init__(parent)
        self.editor = editor
        self.pixmap = None
        self.setAcceptDrops(True)
        self.setMinimumSize(400, 300)

        self.overlay = CropOverlay(editor.crop_selection, self)
        self.overlay.hide()

        self.editor.preview_changed.connect(self.on_preview_changed)
        self.editor.media_loaded.connect(self.on_media_loaded)
        self.editor.media_closed.connect(self.on_media_closed)

    def container_dim(self):
        return Dimension(max(1, self.width()), max(1, self.height()))

    # --------------------------------------------------
    # Editor callbacks
    # --------------------------------------------------
    def on_media_loaded(self, session):
        self.pixmap = load_preview_pixmap(session)
        self.overlay.show()
        self.editor.set_preview_container(self.container_dim())
        self.update()

    def on_media_closed(self):
        self.pixmap = None
        self.overlay.hide()
        self.update()

    def on_preview_changed(self, preview_dim):
        offset = letterbox_offset(preview_dim, self.container_dim())
        self.overlay.set_preview_offset(offset)
        self.update()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.overlay.setGeometry(self.rect())
        if self.editor.is_loaded:
            self.editor.set_preview_container(self.container_dim())

    # --------------------------------------------------
    # Painting
    # --------------------------------------------------
    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(0, 0, 0))

        preview_dim = self.editor.preview_dim
        if self.editor.is_loaded and preview_dim is not None:
            offset = letterbox_offset(preview_dim, self.container_dim())
            target = QRect(int(offset.x), int(offset.y), preview_dim.width, preview_dim.height)
            if self.pixmap is not None:
                painter.setRenderHint(QPainter.SmoothPixmapTransform)
                painter.drawPixmap(target, self.pixmap)
            else:
                painter.fillRect(target, QColor(40, 40, 40))
                painter.setPen(QColor(200, 200, 200))
                painter.drawText(target, Qt.AlignCenter, "No preview available")
            return

        painter.setPen(QColor(127, 140, 141))
        painter.drawText(self.rect(), Qt.AlignCenter, "Drop an image or video here or use 'Open'")

    # --------------------------------------------------
    # Drag and Drop Event Handlers
    # --------------------------------------------------
    def dragEnterEvent(self, event: QDragEnterEvent):
        if event.mimeData().hasUrls() and not self.editor.is_exporting:
            urls = event.mimeData().urls()
            if urls:
                try:
                    route_by_extension(urls[0].toLocalFile())
                except UnsupportedFormat:
                    return
                event.acceptProposedAction()

    def dragMoveEvent(self, event):
        if event.mimeData().hasUrls():
            event.acceptProposedAction()

    def dropEvent(self, event: QDropEvent):
        if event.mimeData().hasUrls():
            urls = event.mimeData().urls()
            if urls:
                self.fileDropped.emit(urls[0].toLocalFile())
                event.acceptProposedAction()
