import logging
import os
import re

logger = logging.getLogger(__name__)

# --------------------------------------------------
# Time conversion
# --------------------------------------------------
def seconds_to_hmsms(total_seconds):
    if total_seconds is None:
        return 0, 0, 0, 0

    total_seconds = max(0.0, float(total_seconds))
    hours = int(total_seconds // 3600)
    minutes = int((total_seconds % 3600) // 60)
    seconds = int(total_seconds % 60)
    milliseconds = int(round((total_seconds - int(total_seconds)) * 1000))
    if milliseconds >= 1000:
        milliseconds = 999
    return hours, minutes, seconds, milliseconds

def hmsms_str(total_seconds):
    if total_seconds is None:
        return "00:00:00.000"

    h, m, s, ms = seconds_to_hmsms(total_seconds)
    return f"{h:02d}:{m:02d}:{s:02d}.{ms:03d}"

def mmss_str(total_seconds):
    """Short label used on the timeline, e.g. 01:05 or 1:02:03."""
    h, m, s, _ = seconds_to_hmsms(total_seconds)
    if h:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"

# --------------------------------------------------
# FFmpeg progress parsing
# --------------------------------------------------
_PROGRESS_PATTERNS = [
    re.compile(r'time=(\d+):(\d+):(\d+(?:\.\d+)?)'),
    re.compile(r'time=(\d+(?:\.\d+)?)'),
]

def parse_ffmpeg_progress(line, total_duration):
    if not line or not total_duration or total_duration <= 0:
        return None

    for pattern in _PROGRESS_PATTERNS:
        match = pattern.search(line)
        if match:
            groups = match.groups()
            if len(groups) == 3:
                hours, minutes, seconds = map(float, groups)
                current_time = hours * 3600 + minutes * 60 + seconds
            else:
                current_time = float(groups[0])
            return min(current_time / total_duration, 1.0)

    return None

# --------------------------------------------------
# File management
# --------------------------------------------------
def temp_output_path(output_path):
    """Sibling path keeping the extension so encoders still pick the right muxer."""
    base, ext = os.path.splitext(output_path)
    return f"{base}.tmp{ext}"

def remove_file_quietly(path):
    try:
        if path and os.path.exists(path):
            os.remove(path)
            logger.debug("Removed %s", path)
            return True
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)
    return False

def file_extension(path):
    """Lower-case extension of the last path component, without the dot."""
    name = re.split(r'[\\/]', path or "")[-1]
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower()

# --------------------------------------------------
# Formatting utilities
# --------------------------------------------------
def format_file_size(size_bytes):
    if size_bytes == 0:
        return "0 B"

    size_names = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    while size_bytes >= 1024 and i < len(size_names) - 1:
        size_bytes /= 1024.0
        i += 1

    return f"{size_bytes:.1f} {size_names[i]}"
