#!/usr/bin/env python3
"""
CropTrim - Image and Video Crop & Trim Editor
License: MIT
"""

import sys
import os
import logging
import argparse
import subprocess
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

# --------------------------------------------------
# Environment Configuration
# --------------------------------------------------
# Must be set before any Qt imports
os.environ.setdefault('QT_LOGGING_RULES', 'qt.qpa.*=false')

# --------------------------------------------------
# Application Constants
# --------------------------------------------------
APP_VERSION = "1.0.0"
APP_NAME = "CropTrim"
LOG_DIR = Path.home() / ".croptrim" / "logs"

logger = logging.getLogger(__name__)

# --------------------------------------------------
# Logging Setup
# --------------------------------------------------
def qt_message_handler(mode, context, message):
    """Route Qt's own diagnostics into the logging tree."""
    from PyQt5.QtCore import QtMsgType

    levels = {
        QtMsgType.QtDebugMsg: logging.DEBUG,
        QtMsgType.QtInfoMsg: logging.INFO,
        QtMsgType.QtWarningMsg: logging.WARNING,
        QtMsgType.QtCriticalMsg: logging.ERROR,
        QtMsgType.QtFatalMsg: logging.CRITICAL,
    }
    logging.getLogger("qt").log(levels.get(mode, logging.INFO), "Qt: %s", message)

def setup_logging(debug=False, log_dir=LOG_DIR):
    """
    Configure the root logger with a console handler and a daily rotating
    log file.

    Args:
        debug (bool): Log at DEBUG level instead of INFO
        log_dir (Path): Directory for the rotating log files

    Returns:
        Path: The active log file, or None if it could not be created
    """
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    log_file = Path(log_dir) / "croptrim.log"
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_file,
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
    except OSError as e:
        logger.warning("File logging disabled: %s", e)
        return None

    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)
    return log_file

# --------------------------------------------------
# Command Line Interface Functions
# --------------------------------------------------
def show_version():
    """
    Display version information.
    """
    print(f"{APP_NAME} v{APP_VERSION}")
    print("Image and Video Crop & Trim Editor")
    print("License: MIT")

def check_dependencies(ffmpeg="ffmpeg", ffprobe="ffprobe"):
    """
    Check for required dependencies (ffmpeg and ffprobe).

    Returns:
        list: Names of the missing tools, empty if all are available
    """
    missing_deps = []

    for name, binary in (("ffmpeg", ffmpeg), ("ffprobe", ffprobe)):
        try:
            result = subprocess.run([binary, '-version'], capture_output=True, text=True)
            if result.returncode != 0:
                missing_deps.append(name)
        except OSError:
            missing_deps.append(name)

    return missing_deps

def build_parser():
    parser = argparse.ArgumentParser(
        prog=APP_NAME.lower(),
        description=f"{APP_NAME} - Image and Video Crop & Trim Editor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {APP_NAME.lower()} photo.jpg      Open photo.jpg
  {APP_NAME.lower()} clip.mp4       Open clip.mp4
  {APP_NAME.lower()} --version      Show version info
        """
    )

    parser.add_argument(
        'file',
        nargs='?',
        help='Image or video file to open (optional)'
    )

    parser.add_argument(
        '-v', '--version',
        action='store_true',
        help='Show version information'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    return parser

# --------------------------------------------------
# Main Application Entry Point
# --------------------------------------------------
def main(argv=None):
    """
    Main entry point for the CropTrim application.
    """
    args = build_parser().parse_args(argv)

    if args.version:
        show_version()
        return 0

    log_file = setup_logging(args.debug)
    logger.info("%s v%s starting", APP_NAME, APP_VERSION)
    if log_file:
        logger.debug("Logging to %s", log_file)

    # Validate file if provided
    if args.file:
        file_path = Path(args.file)
        if not file_path.is_file():
            logger.error("File not found: %s", args.file)
            return 1

    # --------------------------------------------------
    # Qt Application Setup
    # --------------------------------------------------
    try:
        from PyQt5.QtWidgets import QApplication, QMessageBox
        from PyQt5.QtCore import QTimer, qInstallMessageHandler
    except ImportError as e:
        logger.error("Failed to import PyQt5: %s", e)
        print("\nPlease install PyQt5:")
        print("  pip install PyQt5")
        return 1

    qInstallMessageHandler(qt_message_handler)

    app = QApplication(sys.argv[:1])
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)
    app.setStyle("Fusion")

    from ui.main_window import MediaEditorWindow

    window = MediaEditorWindow()

    # Images still work without ffmpeg, so only warn
    settings = window.settings
    missing = check_dependencies(settings.get("ffmpeg_path", "ffmpeg"), settings.get("ffprobe_path", "ffprobe"))
    if missing:
        logger.warning("Missing required dependencies: %s", ", ".join(missing))
        QMessageBox.warning(
            window, "Missing Dependencies",
            "Video editing needs " + " and ".join(missing) + ".\n\n"
            "Please install FFmpeg:\n"
            "  Ubuntu/Debian: sudo apt install ffmpeg\n"
            "  Fedora: sudo dnf install ffmpeg\n"
            "  Arch: sudo pacman -S ffmpeg"
        )

    window.show()

    # Center window on screen
    screen_geometry = app.primaryScreen().availableGeometry()
    window.move(
        (screen_geometry.width() - window.width()) // 2,
        (screen_geometry.height() - window.height()) // 2,
    )

    # Load after the first layout pass so the preview has its real size
    if args.file:
        media_path = str(Path(args.file).resolve())
        QTimer.singleShot(100, lambda: window.load_media_file(media_path))

    exit_code = app.exec_()
    logger.info("%s exiting with code %s", APP_NAME, exit_code)
    return exit_code

# --------------------------------------------------
# Script Entry Point
# --------------------------------------------------
if __name__ == '__main__':
    sys.exit(main())
