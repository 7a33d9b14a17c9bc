# --------------------------------------------------
# Trim Model Module
# Start/end handles over the duration of a video
# --------------------------------------------------

import logging
import math
from dataclasses import dataclass

from PyQt5.QtCore import QObject, pyqtSignal

from .geometry import clamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrimRange:
    start_sec: float
    end_sec: float
    duration_sec: float

    @property
    def length(self):
        return self.end_sec - self.start_sec

    def is_valid(self) -> bool:
        values = (self.start_sec, self.end_sec, self.duration_sec)
        if not all(math.isfinite(v) for v in values):
            return False
        return 0 <= self.start_sec <= self.end_sec <= self.duration_sec

    def is_full_range(self) -> bool:
        return self.start_sec <= 0 and self.end_sec >= self.duration_sec

    def __str__(self):
        return f"[{self.start_sec:.3f}, {self.end_sec:.3f}] of {self.duration_sec:.3f}s"


# --------------------------------------------------
# TrimModel Class
# Two independently dragged handles with hard stops at each other
# --------------------------------------------------
class TrimModel(QObject):
    trim_changed = pyqtSignal(float, float)

    def __init__(self, duration_sec=0.0, timeline_width=0, parent=None):
        super().__init__(parent)
        self.duration = 0.0
        self.start = 0.0
        self.end = 0.0
        self.timeline_width = 0
        self.dragging_start = False
        self.dragging_end = False
        self.set_timeline_width(timeline_width)
        self.reset(duration_sec)

    # --------------------------------------------------
    # Setup
    # --------------------------------------------------
    def reset(self, duration_sec):
        """Select the whole duration and drop any drag in progress."""
        duration = float(duration_sec or 0.0)
        if not math.isfinite(duration) or duration < 0:
            duration = 0.0
        self.duration = duration
        self.dragging_start = False
        self.dragging_end = False
        self._apply(0.0, duration, force=True)

    def set_timeline_width(self, width_px):
        self.timeline_width = max(0, int(width_px or 0))

    # --------------------------------------------------
    # Pixel <-> time conversion
    # --------------------------------------------------
    def pixel_to_time(self, pixel):
        if self.timeline_width <= 0 or self.duration <= 0:
            return 0.0
        pixel = clamp(float(pixel), 0, self.timeline_width)
        return pixel / self.timeline_width * self.duration

    def time_to_pixel(self, seconds):
        if self.timeline_width <= 0 or self.duration <= 0:
            return 0.0
        return clamp(seconds, 0, self.duration) / self.duration * self.timeline_width

    # --------------------------------------------------
    # Handle updates
    # --------------------------------------------------
    def drag_start(self, pixel):
        if math.isnan(pixel):
            return
        t = self.pixel_to_time(pixel)
        new_start = clamp(min(t, self.end), 0, self.duration)
        self._apply(new_start, self.end)

    def drag_end(self, pixel):
        if math.isnan(pixel):
            return
        t = self.pixel_to_time(pixel)
        new_end = clamp(max(t, self.start), 0, self.duration)
        self._apply(self.start, new_end)

    def set_range(self, start_sec, end_sec):
        """Programmatic update following the same clamping rules as the handles."""
        start = clamp(float(start_sec), 0, self.duration)
        end = clamp(float(end_sec), start, self.duration)
        self._apply(start, end)

    # --------------------------------------------------
    # Pointer state
    # --------------------------------------------------
    def press_start_handle(self):
        self.dragging_start = True
        self.dragging_end = False

    def press_end_handle(self):
        self.dragging_end = True
        self.dragging_start = False

    def pointer_move(self, pixel):
        if self.dragging_start:
            self.drag_start(pixel)
        elif self.dragging_end:
            self.drag_end(pixel)

    def release(self):
        self.dragging_start = False
        self.dragging_end = False

    @property
    def is_dragging(self):
        return self.dragging_start or self.dragging_end

    # --------------------------------------------------
    # Queries
    # --------------------------------------------------
    def to_trim_range(self) -> TrimRange:
        return TrimRange(self.start, self.end, self.duration)

    def is_full_range(self):
        return self.to_trim_range().is_full_range()

    def _apply(self, start, end, force=False):
        # Both handles stay inside [0, duration] and never cross
        start = clamp(start, 0, self.duration)
        end = clamp(end, start, self.duration)
        if not force and start == self.start and end == self.end:
            return
        self.start = start
        self.end = end
        self.trim_changed.emit(start, end)
