import json
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


# --------------------------------------------------
# Export configuration
# --------------------------------------------------
@dataclass(frozen=True)
class ExportConfig:
    video_codec: str = "libx264"
    audio_codec: str = "aac"
    quality: str = "23"          # CRF value
    preset: str = "medium"
    audio_bitrate: str = "192k"
    image_format: str = "png"


DEFAULT_EXPORT_CONFIG = ExportConfig()

EXPORT_PRESETS = {
    "default": DEFAULT_EXPORT_CONFIG,
    "high_quality_video": ExportConfig(quality="18", preset="slow"),
    "mobile_video": ExportConfig(video_codec="libx265", quality="28", preset="fast"),
}


def export_config_for(name):
    config = EXPORT_PRESETS.get(name)
    if config is None:
        logger.warning("Unknown export preset %r, using default", name)
        return DEFAULT_EXPORT_CONFIG
    return config


# --------------------------------------------------
# Settings management
# --------------------------------------------------
class SettingsManager:
    DEFAULTS = {
        "ffmpeg_path": "ffmpeg",
        "ffprobe_path": "ffprobe",
        "probe_timeout": 10,
        "export_preset": "default",
        "last_open_dir": "",
        "last_save_dir": "",
        "preview_width": 960,
        "preview_height": 540,
    }

    def __init__(self, settings_file=None):
        self.settings_file = settings_file or os.path.join(
            os.path.expanduser("~"), ".croptrim_settings.json"
        )

    def load_settings(self):
        settings = dict(self.DEFAULTS)

        if not os.path.exists(self.settings_file):
            return settings

        try:
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                saved_settings = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Error loading settings from %s: %s", self.settings_file, e)
            return settings

        if not isinstance(saved_settings, dict):
            logger.warning("Ignoring malformed settings file %s", self.settings_file)
            return settings

        for key, value in saved_settings.items():
            if key in settings:
                settings[key] = value
        return settings

    def save_settings(self, settings):
        try:
            directory = os.path.dirname(self.settings_file)
            if directory:
                os.makedirs(directory, exist_ok=True)

            with open(self.settings_file, 'w', encoding='utf-8') as f:
                json.dump(settings, f, indent=2, ensure_ascii=False)
            return True
        except OSError as e:
            logger.error("Error saving settings to %s: %s", self.settings_file, e)
            return False

    def export_config(self, settings=None):
        settings = settings or self.load_settings()
        return export_config_for(settings.get("export_preset", "default"))
