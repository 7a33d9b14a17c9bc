# --------------------------------------------------
# Media metadata probing
# --------------------------------------------------
"""Resolve dimensions and duration of a file before it can be edited."""

from __future__ import annotations

import json
import logging
import math
import os
import subprocess
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from .errors import MediaIOError, MetadataProbeError
from .geometry import Dimension

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 10


@dataclass(frozen=True)
class VideoMetadata:
    duration_sec: float
    width: int
    height: int
    has_audio: bool = False
    codec: str | None = None

    @property
    def dimension(self) -> Dimension:
        return Dimension(self.width, self.height)


def _parse_duration(value):
    if value in (None, "", "N/A"):
        return None
    try:
        duration = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(duration) or duration <= 0:
        return None
    return duration


def probe_video(path, ffprobe="ffprobe", timeout=DEFAULT_PROBE_TIMEOUT) -> VideoMetadata:
    """Read duration, frame size and audio presence with ffprobe."""
    name = os.path.basename(path)
    if not os.path.isfile(path):
        raise MetadataProbeError(f"Video file not found: {name}")

    cmd = [
        ffprobe, "-v", "error",
        "-show_entries", "stream=codec_type,codec_name,width,height,duration",
        "-show_entries", "format=duration",
        "-of", "json",
        os.fspath(path),
    ]
    logger.debug("Probing %s: %s", name, " ".join(cmd))

    try:
        process = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout, check=False)
    except FileNotFoundError as exc:
        raise MetadataProbeError(f"ffprobe is not installed or not on PATH ({ffprobe})") from exc
    except subprocess.TimeoutExpired as exc:
        raise MetadataProbeError(f"Timed out probing '{name}' after {timeout}s") from exc

    if process.returncode != 0:
        detail = process.stderr.strip() or process.stdout.strip()
        raise MetadataProbeError(f"Unable to probe '{name}': {detail}")

    try:
        data = json.loads(process.stdout or "{}")
    except json.JSONDecodeError as exc:
        raise MetadataProbeError(f"ffprobe returned invalid JSON for '{name}': {exc}") from exc

    streams = data.get("streams") or []
    video = next((s for s in streams if s.get("codec_type") == "video"), None)
    if video is None:
        raise MetadataProbeError(f"No video stream found in '{name}'")

    try:
        width = int(video["width"])
        height = int(video["height"])
    except (KeyError, TypeError, ValueError) as exc:
        raise MetadataProbeError(f"Invalid width/height metadata for '{name}'") from exc
    if width <= 0 or height <= 0:
        raise MetadataProbeError(f"Invalid frame size {width}x{height} for '{name}'")

    duration = _parse_duration(video.get("duration"))
    if duration is None:
        duration = _parse_duration((data.get("format") or {}).get("duration"))
    if duration is None:
        raise MetadataProbeError(f"Duration not found in metadata for '{name}'")

    has_audio = any(s.get("codec_type") == "audio" for s in streams)

    metadata = VideoMetadata(
        duration_sec=duration,
        width=width,
        height=height,
        has_audio=has_audio,
        codec=video.get("codec_name"),
    )
    logger.info("Probed %s: %sx%s, %.3fs, audio=%s", name, width, height, duration, has_audio)
    return metadata


def read_image_dimension(path) -> Dimension:
    """Decode the image header with Pillow to get its pixel size."""
    try:
        with Image.open(path) as img:
            width, height = img.size
    except (OSError, UnidentifiedImageError) as exc:
        raise MediaIOError(f"Failed to load image '{os.path.basename(path)}': {exc}") from exc

    if width <= 0 or height <= 0:
        raise MediaIOError(f"Image '{os.path.basename(path)}' has no pixels")
    return Dimension(width, height)
