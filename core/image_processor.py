# --------------------------------------------------
# Image crop and export
# --------------------------------------------------

import logging
import os

from PIL import Image, UnidentifiedImageError

from .errors import MediaIOError
from .geometry import Rect
from .utils import file_extension, remove_file_quietly, temp_output_path

logger = logging.getLogger(__name__)

# Pillow format names per output extension
PIL_FORMATS = {
    "png": "PNG",
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "bmp": "BMP",
    "gif": "GIF",
}


def output_format(output_path, default="png"):
    ext = file_extension(output_path) or default
    return PIL_FORMATS.get(ext, PIL_FORMATS.get(default, "PNG"))


def _prepare_for_format(img, fmt):
    if fmt == "JPEG" and img.mode not in ("RGB", "L", "CMYK"):
        return img.convert("RGB")
    if fmt == "BMP" and img.mode not in ("1", "L", "P", "RGB", "RGBA"):
        return img.convert("RGBA")
    return img


def _save_options(fmt):
    if fmt == "JPEG":
        return {"quality": 95, "subsampling": 0}
    return {}


def crop_image(input_path, output_path, crop_rect: Rect, default_format="png"):
    """
    Crop ``crop_rect`` (source pixels) out of ``input_path`` into ``output_path``.

    The rectangle must already be validated against the image size. The file
    is written next to the target first and renamed over it on success.
    """
    fmt = output_format(output_path, default_format)
    box = (
        int(crop_rect.x),
        int(crop_rect.y),
        int(crop_rect.x + crop_rect.width),
        int(crop_rect.y + crop_rect.height),
    )
    temp_path = temp_output_path(output_path)
    logger.info("Cropping %s box=%s -> %s (%s)", input_path, box, output_path, fmt)

    try:
        with Image.open(input_path) as img:
            cropped = img.crop(box)
            cropped = _prepare_for_format(cropped, fmt)
            cropped.save(temp_path, format=fmt, **_save_options(fmt))
    except (OSError, UnidentifiedImageError, ValueError) as exc:
        remove_file_quietly(temp_path)
        raise MediaIOError(f"Failed to write cropped image: {exc}") from exc

    try:
        os.replace(temp_path, output_path)
    except OSError as exc:
        remove_file_quietly(temp_path)
        raise MediaIOError(f"Could not move export into place at {output_path}: {exc}") from exc

    return output_path
