# --------------------------------------------------
# Export Pipeline
# Validates a session and produces the edited output file
# --------------------------------------------------
"""
Checks run in a fixed order so the first problem reported is always the
same for a given session:

1. a file must be loaded
2. the output extension must suit the media type
3. the crop rectangle must lie inside the source frame
4. the trim range must lie inside the video duration

Only then is the pixel crop or the encoder started.
"""

import logging
import os

from .errors import InvalidCropRect, InvalidTrimRange, MediaIOError, NoMediaLoaded, UnsupportedFormat
from .geometry import Rect
from .image_processor import crop_image
from .media_session import MediaType, extensions_for
from .settings_manager import DEFAULT_EXPORT_CONFIG
from .utils import file_extension
from .video_processor import VideoProcessor

logger = logging.getLogger(__name__)


# --------------------------------------------------
# Validation
# --------------------------------------------------
def validate_output_path(session, output_path):
    if not output_path:
        raise MediaIOError("No output path was given.")

    ext = file_extension(output_path)
    allowed = extensions_for(session.media_type)
    # Images without an extension are written as PNG
    if ext == "" and session.media_type is MediaType.IMAGE:
        return
    if ext not in allowed:
        raise UnsupportedFormat(
            f"Cannot save a {session.media_type.value} as '.{ext}'. "
            f"Choose one of: {', '.join(allowed)}"
        )


def validate_crop(session):
    crop = session.crop
    if crop is None:
        return

    dim = session.source_dim
    if not crop.fits_within(dim):
        raise InvalidCropRect(
            f"Crop {crop.width}x{crop.height} at ({crop.x}, {crop.y}) "
            f"does not fit inside the {dim} source."
        )
    if crop.is_empty():
        raise InvalidCropRect("Crop rectangle must have a non-zero width and height.")


def validate_trim(session):
    trim = session.trim
    if trim is None:
        return

    if session.media_type is not MediaType.VIDEO:
        raise InvalidTrimRange("Only videos can be trimmed.")

    duration = session.duration_sec or 0.0
    if not trim.is_valid() or trim.end_sec > duration or trim.duration_sec > duration + 1e-6:
        raise InvalidTrimRange(f"Time range {trim} is outside the video duration of {duration:.3f}s.")
    if trim.length <= 0:
        raise InvalidTrimRange("Start time must be before end time.")


def validate(session, output_path):
    if session is None:
        raise NoMediaLoaded()
    validate_output_path(session, output_path)
    validate_crop(session)
    validate_trim(session)


def check_paths(session, output_path):
    if not os.path.isfile(session.file_path):
        raise MediaIOError(f"Source file no longer exists: {session.file_path}")

    if os.path.abspath(output_path) == os.path.abspath(session.file_path):
        raise MediaIOError("The output file must be different from the file being edited.")

    directory = os.path.dirname(os.path.abspath(output_path))
    if not os.path.isdir(directory):
        raise MediaIOError(f"Output folder does not exist: {directory}")


# --------------------------------------------------
# Export entry point
# --------------------------------------------------
def export(session, output_path, config=DEFAULT_EXPORT_CONFIG, progress_callback=None,
           video_processor=None):
    """Write the edited version of ``session`` to ``output_path``; raises ExportError."""
    validate(session, output_path)
    check_paths(session, output_path)

    if session.media_type is MediaType.IMAGE:
        crop = session.crop or Rect.full(session.source_dim)
        logger.info("Exporting image %s crop=%s", session.file_path, crop)
        crop_image(session.file_path, output_path, crop, default_format=config.image_format)
        if progress_callback is not None:
            progress_callback(100)
        return output_path

    processor = video_processor or VideoProcessor()
    logger.info(
        "Exporting video %s crop=%s trim=%s",
        session.file_path, session.crop, session.trim,
    )
    return processor.export_video(
        session.file_path,
        output_path,
        config,
        trim=session.trim,
        crop_rect=session.crop,
        has_audio=session.has_audio,
        total_duration=session.duration_sec or 0.0,
        progress_callback=progress_callback,
    )
