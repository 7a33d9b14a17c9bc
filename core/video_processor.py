# --------------------------------------------------
# Video encoding through ffmpeg
# --------------------------------------------------
import collections
import logging
import os
import subprocess

from .errors import EncoderFailure, MediaIOError
from .utils import file_extension, parse_ffmpeg_progress, remove_file_quietly, temp_output_path

logger = logging.getLogger(__name__)

# Lines of ffmpeg stderr kept for the failure message
DIAGNOSTIC_LINES = 20


def even_floor(value, minimum=2):
    value = int(value)
    return max(minimum, value - (value % 2))


class VideoProcessor:
    def __init__(self, ffmpeg="ffmpeg"):
        self.ffmpeg = ffmpeg
        self.current_process = None

    # --------------------------------------------------
    # Command building
    # --------------------------------------------------
    def build_crop_filter(self, crop_rect):
        """ffmpeg crop filter; yuv420p output needs an even frame size."""
        if crop_rect is None:
            return None
        width = even_floor(crop_rect.width)
        height = even_floor(crop_rect.height)
        return f"crop={width}:{height}:{int(crop_rect.x)}:{int(crop_rect.y)}"

    def build_video_command(self, input_path, output_path, config, trim=None, crop_rect=None,
                            has_audio=True):
        """Single re-encoding invocation combining the optional trim and crop."""
        cmd = [self.ffmpeg, "-y", "-hide_banner", "-i", input_path]

        # Seeking after -i is frame-accurate
        if trim is not None and not trim.is_full_range():
            cmd.extend(["-ss", f"{trim.start_sec:.3f}", "-t", f"{trim.length:.3f}"])
            cmd.extend(["-avoid_negative_ts", "make_zero"])

        crop_filter = self.build_crop_filter(crop_rect)
        if crop_filter:
            cmd.extend(["-vf", crop_filter])

        cmd.extend(self._get_video_codec_params(config))
        cmd.extend(self._get_audio_params(config, has_audio))

        if file_extension(output_path) in ("mp4", "mov"):
            cmd.extend(["-movflags", "+faststart"])

        cmd.append(output_path)
        return cmd

    def _get_video_codec_params(self, config):
        return [
            "-c:v", config.video_codec,
            "-preset", config.preset,
            "-crf", str(config.quality),
            "-pix_fmt", "yuv420p",
        ]

    def _get_audio_params(self, config, has_audio):
        if not has_audio:
            return ["-an"]
        return ["-c:a", config.audio_codec, "-b:a", config.audio_bitrate]

    # --------------------------------------------------
    # Export
    # --------------------------------------------------
    def export_video(self, input_path, output_path, config, trim=None, crop_rect=None,
                     has_audio=True, total_duration=0.0, progress_callback=None):
        """Encode into a temp file, then move it over ``output_path``."""
        temp_path = temp_output_path(output_path)
        cmd = self.build_video_command(input_path, temp_path, config, trim, crop_rect, has_audio)

        if trim is not None and not trim.is_full_range():
            total_duration = trim.length

        try:
            self._run_ffmpeg_process(cmd, total_duration, progress_callback)
            if not os.path.exists(temp_path) or os.path.getsize(temp_path) == 0:
                raise EncoderFailure("ffmpeg finished but produced no output file")
            os.replace(temp_path, output_path)
        except OSError as exc:
            remove_file_quietly(temp_path)
            raise MediaIOError(f"Could not move export into place at {output_path}: {exc}") from exc
        except EncoderFailure:
            remove_file_quietly(temp_path)
            raise

        logger.info("Exported video to %s", output_path)
        return output_path

    def _run_ffmpeg_process(self, cmd, total_duration, progress_callback=None):
        """Run ffmpeg to completion, reporting progress parsed from stderr."""
        logger.info("Running: %s", " ".join(cmd))
        tail = collections.deque(maxlen=DIAGNOSTIC_LINES)

        try:
            self.current_process = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except FileNotFoundError as exc:
            raise EncoderFailure(f"ffmpeg is not installed or not on PATH ({cmd[0]})") from exc

        process = self.current_process
        try:
            # Text mode treats ffmpeg's carriage-return progress updates as lines
            for line in process.stderr:
                line = line.strip()
                if not line:
                    continue
                logger.debug("FFmpeg: %s", line)
                tail.append(line)
                if progress_callback is not None:
                    progress = parse_ffmpeg_progress(line, total_duration)
                    if progress is not None:
                        progress_callback(int(progress * 100))
            returncode = process.wait()
        finally:
            process.stderr.close()
            self.current_process = None

        if returncode != 0:
            logger.error("ffmpeg exited with code %s", returncode)
            raise EncoderFailure(
                f"ffmpeg exited with code {returncode}",
                returncode=returncode,
                diagnostics="\n".join(tail),
            )

        if progress_callback is not None:
            progress_callback(100)
