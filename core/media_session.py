# --------------------------------------------------
# Media Session Module
# The one open document: file, type, size and the pending edits
# --------------------------------------------------

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, replace

from PyQt5.QtCore import QObject, pyqtSignal

from .errors import NoMediaLoaded, UnsupportedFormat
from .geometry import Dimension, Rect
from .metadata import probe_video, read_image_dimension
from .trim_model import TrimRange
from .utils import file_extension

logger = logging.getLogger(__name__)


class MediaType(enum.Enum):
    IMAGE = "image"
    VIDEO = "video"


IMAGE_EXTENSIONS = ("png", "jpg", "jpeg", "bmp", "gif")
VIDEO_EXTENSIONS = ("mp4", "mov", "mkv")

_EXTENSION_MAP = {ext: MediaType.IMAGE for ext in IMAGE_EXTENSIONS}
_EXTENSION_MAP.update({ext: MediaType.VIDEO for ext in VIDEO_EXTENSIONS})


def route_by_extension(path) -> MediaType:
    ext = file_extension(path)
    media_type = _EXTENSION_MAP.get(ext)
    if media_type is None:
        shown = f".{ext}" if ext else "(none)"
        raise UnsupportedFormat(
            f"Unsupported file extension {shown}. Supported formats: "
            f"{', '.join(IMAGE_EXTENSIONS + VIDEO_EXTENSIONS)}"
        )
    return media_type


def extensions_for(media_type):
    return IMAGE_EXTENSIONS if media_type is MediaType.IMAGE else VIDEO_EXTENSIONS


# --------------------------------------------------
# File dialog filters
# --------------------------------------------------
def _pattern(extensions):
    return " ".join(f"*.{ext}" for ext in extensions)


def open_dialog_filter():
    return (
        f"Media Files ({_pattern(IMAGE_EXTENSIONS + VIDEO_EXTENSIONS)});;"
        f"Image Files ({_pattern(IMAGE_EXTENSIONS)});;"
        f"Video Files ({_pattern(VIDEO_EXTENSIONS)})"
    )


def save_dialog_filter(media_type):
    if media_type is MediaType.IMAGE:
        return f"Image Files ({_pattern(IMAGE_EXTENSIONS)})"
    return f"Video Files ({_pattern(VIDEO_EXTENSIONS)})"


@dataclass(frozen=True)
class MediaSession:
    file_path: str
    media_type: MediaType
    source_dim: Dimension
    duration_sec: float | None = None
    crop: Rect | None = None
    trim: TrimRange | None = None
    has_audio: bool = False

    @property
    def is_video(self):
        return self.media_type is MediaType.VIDEO


# --------------------------------------------------
# SessionState Class
# Owns the current MediaSession and announces every change
# --------------------------------------------------
class SessionState(QObject):
    session_changed = pyqtSignal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.session = None

    @property
    def is_loaded(self):
        return self.session is not None

    def load_media(self, path, prober=probe_video, image_reader=read_image_dimension):
        """
        Resolve type, size and duration of ``path`` and make it the session.

        The previous session is dropped before anything is read, so a failed
        load leaves the state empty rather than stale or half-populated.
        """
        self.clear()
        media_type = route_by_extension(path)

        if media_type is MediaType.IMAGE:
            session = MediaSession(path, media_type, image_reader(path))
        else:
            metadata = prober(path)
            session = MediaSession(
                path,
                media_type,
                Dimension(metadata.width, metadata.height),
                duration_sec=metadata.duration_sec,
                has_audio=metadata.has_audio,
            )

        logger.info("Loaded %s %s (%s)", media_type.value, path, session.source_dim)
        self._set(session)
        return session

    def set_crop(self, rect):
        session = self._require()
        self._set(replace(session, crop=rect))

    def clear_crop(self):
        self.set_crop(None)

    def set_trim(self, trim_range):
        session = self._require()
        if trim_range is not None and not session.is_video:
            raise UnsupportedFormat("Only videos can be trimmed.")
        self._set(replace(session, trim=trim_range))

    def clear(self):
        if self.session is None:
            return
        self._set(None)

    def _require(self):
        if self.session is None:
            raise NoMediaLoaded()
        return self.session

    def _set(self, session):
        self.session = session
        self.session_changed.emit(session)
