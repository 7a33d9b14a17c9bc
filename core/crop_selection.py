# --------------------------------------------------
# Crop Selection Module
# Turns a pointer drag into a normalized crop rectangle
# --------------------------------------------------

import enum
import logging

from PyQt5.QtCore import QObject, pyqtSignal

from .geometry import Dimension, Point, Rect, clamp_point, preview_rect_to_source_rect, \
    source_rect_to_preview_rect

logger = logging.getLogger(__name__)


class SelectionState(enum.Enum):
    IDLE = "idle"
    DRAWING = "drawing"


def normalize_rect(p1: Point, p2: Point) -> Rect:
    """Rectangle spanned by two corners, independent of drag direction."""
    return Rect(
        min(p1.x, p2.x),
        min(p1.y, p2.y),
        abs(p1.x - p2.x),
        abs(p1.y - p2.y),
    )


# --------------------------------------------------
# CropSelection Class
# Single-selection state machine in preview space
# --------------------------------------------------
class CropSelection(QObject):
    # Live (uncommitted) or committed preview rectangle, None when cleared
    selection_changed = pyqtSignal(object)
    # Committed rectangle converted to source space
    crop_committed = pyqtSignal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.preview_dim = None
        self.source_dim = None
        self.state = SelectionState.IDLE
        self.anchor = None
        self.live_rect = None
        self.committed_rect = None

    # --------------------------------------------------
    # Geometry setup
    # --------------------------------------------------
    def set_geometry(self, preview_dim: Dimension, source_dim: Dimension):
        self.preview_dim = preview_dim
        self.source_dim = source_dim
        self._reset()

    def has_geometry(self):
        return self.preview_dim is not None and self.source_dim is not None

    @property
    def is_drawing(self):
        return self.state is SelectionState.DRAWING

    @property
    def current_rect(self):
        """Rectangle to paint: the live one while drawing, else the committed one."""
        if self.is_drawing:
            return self.live_rect
        return self.committed_rect

    @property
    def source_rect(self):
        if self.committed_rect is None or not self.has_geometry():
            return None
        return preview_rect_to_source_rect(self.committed_rect, self.preview_dim, self.source_dim)

    # --------------------------------------------------
    # Drag handling
    # --------------------------------------------------
    def begin_drag(self, point: Point):
        if not self.has_geometry():
            logger.debug("Ignoring drag before geometry is known")
            return

        self.anchor = clamp_point(point, self.preview_dim)
        self.committed_rect = None
        self.live_rect = Rect(self.anchor.x, self.anchor.y, 0, 0)
        self.state = SelectionState.DRAWING
        self.selection_changed.emit(None)

    def update_drag(self, point: Point):
        if not self.is_drawing:
            return

        self.live_rect = normalize_rect(self.anchor, clamp_point(point, self.preview_dim))
        self.selection_changed.emit(self.live_rect)

    def end_drag(self, point: Point):
        if not self.is_drawing:
            return

        rect = normalize_rect(self.anchor, clamp_point(point, self.preview_dim))
        self.state = SelectionState.IDLE
        self.anchor = None
        self.live_rect = None

        if rect.is_empty():
            logger.debug("Discarding zero-area selection at (%s, %s)", rect.x, rect.y)
            self.committed_rect = None
            self.selection_changed.emit(None)
            return

        self.committed_rect = rect
        self.selection_changed.emit(rect)

        source = preview_rect_to_source_rect(rect, self.preview_dim, self.source_dim)
        logger.debug("Committed crop %s (preview %s)", source, rect)
        self.crop_committed.emit(source)

    def clear(self):
        self._reset()
        self.selection_changed.emit(None)

    def show_source_rect(self, rect):
        """Display an existing source-space crop without committing it again."""
        if not self.has_geometry():
            return

        self.state = SelectionState.IDLE
        self.anchor = None
        self.live_rect = None
        if rect is None:
            self.committed_rect = None
        else:
            self.committed_rect = source_rect_to_preview_rect(rect, self.preview_dim, self.source_dim)
        self.selection_changed.emit(self.committed_rect)

    def _reset(self):
        self.state = SelectionState.IDLE
        self.anchor = None
        self.live_rect = None
        self.committed_rect = None
