# --------------------------------------------------
# Crop Widget Module
# Transparent overlay that turns mouse drags into crop selections
# --------------------------------------------------

from PyQt5.QtCore import Qt, QRectF, QPointF
from PyQt5.QtGui import QPainter, QPen, QColor, QBrush, QCursor, QPainterPath
from PyQt5.QtWidgets import QWidget

from core.geometry import Point, widget_to_preview_point

# --------------------------------------------------
# CropOverlay Class
# Draws the selection of a CropSelection and feeds it pointer events
# --------------------------------------------------
class CropOverlay(QWidget):
    def __init__(self, selection, parent=None):
        super().__init__(parent)

        # Transparent background
        self.setAttribute(Qt.WA_TranslucentBackground)
        self.setCursor(QCursor(Qt.CrossCursor))

        self.selection = selection
        self.selection.selection_changed.connect(self.on_selection_changed)

        # Where the letterboxed preview sits inside this widget
        self.preview_offset = Point(0, 0)
        self.source_label = ""
        self.last_pos = None

    # --------------------------------------------------
    # Geometry
    # --------------------------------------------------
    def set_preview_offset(self, offset: Point):
        self.preview_offset = offset
        self.update()

    def _to_preview(self, pos):
        return widget_to_preview_point(Point(pos.x(), pos.y()), self.preview_offset)

    def _to_widget_rect(self, rect):
        return QRectF(
            rect.x + self.preview_offset.x,
            rect.y + self.preview_offset.y,
            rect.width,
            rect.height,
        )

    def on_selection_changed(self, rect):
        source = self.selection.source_rect if rect is not None else None
        self.source_label = f"{source.width} × {source.height}" if source and not self.selection.is_drawing else ""
        self.update()

    # --------------------------------------------------
    # Mouse Events
    # --------------------------------------------------
    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.last_pos = event.pos()
            self.selection.begin_drag(self._to_preview(event.pos()))

    def mouseMoveEvent(self, event):
        if self.selection.is_drawing:
            self.last_pos = event.pos()
            self.selection.update_drag(self._to_preview(event.pos()))

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton and self.selection.is_drawing:
            self.selection.end_drag(self._to_preview(event.pos()))
            self.last_pos = None

    def leaveEvent(self, event):
        # Leaving the overlay finishes the drag where the pointer was last seen
        if self.selection.is_drawing and self.last_pos is not None:
            self.selection.end_drag(self._to_preview(self.last_pos))
            self.last_pos = None
        super().leaveEvent(event)

    # --------------------------------------------------
    # Painting and Display
    # --------------------------------------------------
    def paintEvent(self, event):
        rect = self.selection.current_rect
        if rect is None or rect.is_empty():
            return

        crop_rect = self._to_widget_rect(rect)
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        # Dark area around crop
        path = QPainterPath()
        path.addRect(QRectF(self.rect()))
        path.addRect(crop_rect)
        painter.fillPath(path, QBrush(QColor(0, 0, 0, 160)))

        # Main crop border
        painter.setPen(QPen(Qt.white, 2, Qt.DashLine if self.selection.is_drawing else Qt.SolidLine))
        painter.setBrush(Qt.NoBrush)
        painter.drawRect(crop_rect)

        # Corner guides
        guide = min(20.0, crop_rect.width() / 2, crop_rect.height() / 2)
        painter.setPen(QPen(Qt.white, 3))
        corners = [
            (crop_rect.topLeft(), 1, 1),
            (crop_rect.topRight(), -1, 1),
            (crop_rect.bottomLeft(), 1, -1),
            (crop_rect.bottomRight(), -1, -1),
        ]
        for corner, dx, dy in corners:
            painter.drawLine(corner, corner + QPointF(dx * guide, 0))
            painter.drawLine(corner, corner + QPointF(0, dy * guide))

        # Display source dimensions
        if self.source_label:
            painter.setFont(self.font())
            text_rect = painter.boundingRect(crop_rect, Qt.AlignCenter, self.source_label)
            painter.setBrush(QBrush(QColor(0, 0, 0, 150)))
            painter.setPen(Qt.NoPen)
            painter.drawRect(text_rect.adjusted(-5, -2, 5, 2))

            painter.setPen(QPen(Qt.white, 1))
            painter.drawText(crop_rect, Qt.AlignCenter, self.source_label)
