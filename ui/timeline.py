# --------------------------------------------------
# Timeline Module
# Trim bar with draggable start and end handles
# --------------------------------------------------

from PyQt5.QtCore import Qt, QEvent, QRectF
from PyQt5.QtGui import QPainter, QColor, QPen
from PyQt5.QtWidgets import QApplication, QWidget, QHBoxLayout, QVBoxLayout, QLabel

from core.utils import mmss_str

HANDLE_WIDTH = 10
BAR_MARGIN = HANDLE_WIDTH // 2

# --------------------------------------------------
# TrimBar Class
# Paints the selected range and translates drags for the TrimModel
# --------------------------------------------------
class TrimBar(QWidget):
    def __init__(self, trim_model, parent=None):
        super().__init__(parent)
        self.trim_model = trim_model
        self.trim_model.trim_changed.connect(lambda *_: self.update())
        self.setMinimumHeight(36)
        self.setMouseTracking(True)

        # Drags may end anywhere in the application, not only over the bar
        app = QApplication.instance()
        if app is not None:
            app.installEventFilter(self)

    def bar_width(self):
        return max(0, self.width() - 2 * BAR_MARGIN)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.trim_model.set_timeline_width(self.bar_width())

    def _bar_x(self, pos):
        return pos.x() - BAR_MARGIN

    def _handle_rect(self, seconds):
        x = BAR_MARGIN + self.trim_model.time_to_pixel(seconds)
        return QRectF(x - HANDLE_WIDTH / 2, 0, HANDLE_WIDTH, self.height())

    # --------------------------------------------------
    # Mouse Events
    # --------------------------------------------------
    def mousePressEvent(self, event):
        if event.button() != Qt.LeftButton or self.trim_model.duration <= 0:
            return

        pos = event.pos()
        start_hit = self._handle_rect(self.trim_model.start).contains(pos)
        end_hit = self._handle_rect(self.trim_model.end).contains(pos)

        if start_hit and end_hit:
            # Overlapping handles: pick by side of the click
            if self._bar_x(pos) < self.trim_model.time_to_pixel(self.trim_model.start):
                self.trim_model.press_start_handle()
            else:
                self.trim_model.press_end_handle()
        elif start_hit:
            self.trim_model.press_start_handle()
        elif end_hit:
            self.trim_model.press_end_handle()

    def mouseMoveEvent(self, event):
        if self.trim_model.is_dragging:
            self.trim_model.pointer_move(self._bar_x(event.pos()))
        elif (self._handle_rect(self.trim_model.start).contains(event.pos())
              or self._handle_rect(self.trim_model.end).contains(event.pos())):
            self.setCursor(Qt.SizeHorCursor)
        else:
            self.unsetCursor()

    def eventFilter(self, obj, event):
        if event.type() == QEvent.MouseButtonRelease and self.trim_model.is_dragging:
            self.trim_model.release()
        return False

    # --------------------------------------------------
    # Painting
    # --------------------------------------------------
    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        bar = QRectF(BAR_MARGIN, 8, self.bar_width(), self.height() - 16)
        painter.setPen(Qt.NoPen)
        painter.setBrush(QColor(220, 220, 220))
        painter.drawRect(bar)

        if self.trim_model.duration <= 0:
            return

        start_x = BAR_MARGIN + self.trim_model.time_to_pixel(self.trim_model.start)
        end_x = BAR_MARGIN + self.trim_model.time_to_pixel(self.trim_model.end)

        # Discarded parts
        painter.setBrush(QColor(255, 0, 0, 50))
        painter.drawRect(QRectF(bar.left(), bar.top(), start_x - bar.left(), bar.height()))
        painter.drawRect(QRectF(end_x, bar.top(), bar.right() - end_x, bar.height()))

        # Kept range
        painter.setBrush(QColor(63, 142, 147, 120))
        painter.drawRect(QRectF(start_x, bar.top(), end_x - start_x, bar.height()))

        painter.setPen(QPen(QColor(44, 62, 80), 1))
        painter.setBrush(QColor(63, 142, 147))
        painter.drawRoundedRect(self._handle_rect(self.trim_model.start), 3, 3)
        painter.drawRoundedRect(self._handle_rect(self.trim_model.end), 3, 3)


# --------------------------------------------------
# TimelineWidget Class
# Trim bar plus start, end and duration labels
# --------------------------------------------------
class TimelineWidget(QWidget):
    def __init__(self, trim_model, parent=None):
        super().__init__(parent)
        self.trim_model = trim_model

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.bar = TrimBar(trim_model, self)
        layout.addWidget(self.bar)

        labels = QHBoxLayout()
        self.start_label = QLabel()
        self.length_label = QLabel()
        self.length_label.setAlignment(Qt.AlignCenter)
        self.end_label = QLabel()
        self.end_label.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        for label in (self.start_label, self.length_label, self.end_label):
            label.setStyleSheet("color: #666666;")
            labels.addWidget(label)
        layout.addLayout(labels)

        self.trim_model.trim_changed.connect(self.update_labels)
        self.update_labels()

    def update_labels(self, *_):
        model = self.trim_model
        self.start_label.setText(f"Start {mmss_str(model.start)}")
        self.end_label.setText(f"End {mmss_str(model.end)}")
        self.length_label.setText(
            f"Selected {mmss_str(model.end - model.start)} of {mmss_str(model.duration)}"
        )
