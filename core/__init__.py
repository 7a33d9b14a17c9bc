"""
Core module for CropTrim

This module contains the editing engine, independent of any window:
- Coordinate transforms between preview and source pixels
- Crop selection and timeline trim models
- The media session and metadata probing
- Image and video export
- Settings management
"""


from .errors import (
    MediaEditorError,
    UnsupportedFormat,
    NoMediaLoaded,
    MetadataProbeError,
    ExportError,
    InvalidCropRect,
    InvalidTrimRange,
    EncoderFailure,
    MediaIOError,
    ExportInProgress
)
from .geometry import (
    Dimension,
    Point,
    Rect,
    fit_preview_dimension,
    preview_rect_to_source_rect,
    source_rect_to_preview_rect
)
from .crop_selection import CropSelection, SelectionState, normalize_rect
from .trim_model import TrimModel, TrimRange
from .media_session import MediaType, MediaSession, SessionState, route_by_extension
from .metadata import VideoMetadata, probe_video, read_image_dimension
from .settings_manager import ExportConfig, DEFAULT_EXPORT_CONFIG, SettingsManager
from .exporter import export
from .editor import MediaEditor

__all__ = [
    'MediaEditorError',
    'UnsupportedFormat',
    'NoMediaLoaded',
    'MetadataProbeError',
    'ExportError',
    'InvalidCropRect',
    'InvalidTrimRange',
    'EncoderFailure',
    'MediaIOError',
    'ExportInProgress',
    'Dimension',
    'Point',
    'Rect',
    'fit_preview_dimension',
    'preview_rect_to_source_rect',
    'source_rect_to_preview_rect',
    'CropSelection',
    'SelectionState',
    'normalize_rect',
    'TrimModel',
    'TrimRange',
    'MediaType',
    'MediaSession',
    'SessionState',
    'route_by_extension',
    'VideoMetadata',
    'probe_video',
    'read_image_dimension',
    'ExportConfig',
    'DEFAULT_EXPORT_CONFIG',
    'SettingsManager',
    'export',
    'MediaEditor'
]
