# --------------------------------------------------
# Media Editor Main Window
# This module contains the main window of the CropTrim editor
# --------------------------------------------------

import os
import time
import logging
import subprocess

from PyQt5.QtWidgets import (QMainWindow, QVBoxLayout, QHBoxLayout, QLabel,
                             QFileDialog, QMessageBox, QProgressBar, QWidget,
                             QDialog)
from PyQt5.QtCore import Qt, QTimer
import qtawesome as qta

from ui.widgets import IconButton, PreviewCanvas
from ui.timeline import TimelineWidget
from ui.dialogs import AboutDialog
from core.editor import MediaEditor
from core.errors import (MediaEditorError, EncoderFailure, MediaIOError,
                         MetadataProbeError, NoMediaLoaded)
from core.media_session import MediaType, open_dialog_filter, save_dialog_filter
from core.utils import format_file_size, hmsms_str

APP_VERSION = "1.0.0"
APP_NAME = "CropTrim"

logger = logging.getLogger(__name__)

# Failures the user cannot fix by changing the selection
CRITICAL_ERRORS = (EncoderFailure, MediaIOError, MetadataProbeError)

# --------------------------------------------------
# ExportCompleteDialog Class
# Dialog shown when an export completes successfully
# --------------------------------------------------
class ExportCompleteDialog(QDialog):
    def __init__(self, parent=None, output_file=None):
        super().__init__(parent)
        self.output_file = output_file
        self.setup_ui()

    def setup_ui(self):
        self.setWindowTitle("Export Complete")
        self.setFixedSize(450, 220)

        layout = QVBoxLayout()
        layout.setSpacing(15)

        icon_label = QLabel()
        icon_label.setPixmap(qta.icon('fa5s.check-circle', color='#27ae60').pixmap(36, 36))
        layout.addWidget(icon_label)

        message_label = QLabel("File exported successfully!")
        message_label.setAlignment(Qt.AlignCenter)
        message_label.setStyleSheet("font-size: 16px; font-weight: bold; color: #2c3e50;")
        layout.addWidget(message_label)

        file_label = QLabel(f"File: {os.path.basename(self.output_file)}")
        file_label.setAlignment(Qt.AlignCenter)
        file_label.setStyleSheet("color: #7f8c8d; font-size: 13px;")
        file_label.setWordWrap(True)
        layout.addWidget(file_label)

        button_layout = QHBoxLayout()

        self.open_folder_btn = IconButton('fa5s.folder-open', ' Open Output Folder')
        self.open_folder_btn.clicked.connect(self.open_output_folder)
        self.open_folder_btn.setFixedSize(160, 36)

        self.close_btn = IconButton('fa5s.times', ' Close')
        self.close_btn.clicked.connect(self.accept)
        self.close_btn.setFixedSize(100, 36)

        button_layout.addStretch()
        button_layout.addWidget(self.open_folder_btn)
        button_layout.addWidget(self.close_btn)
        button_layout.addStretch()

        layout.addLayout(button_layout)
        self.setLayout(layout)

    def open_output_folder(self):
        if self.output_file and os.path.exists(self.output_file):
            output_dir = os.path.dirname(self.output_file)
            try:
                if os.name == 'nt':
                    os.startfile(output_dir)
                else:
                    subprocess.Popen(['xdg-open', output_dir])
            except OSError as e:
                logger.warning("Could not open folder %s: %s", output_dir, e)
                QMessageBox.warning(self, "Error", f"Could not open folder: {e}")
        self.accept()

# --------------------------------------------------
# MediaEditorWindow Class
# Main application window
# --------------------------------------------------
class MediaEditorWindow(QMainWindow):
    def __init__(self, editor=None):
        super().__init__()
        self.editor = editor or MediaEditor(parent=self)
        self.settings = self.editor.settings

        self.export_start_time = None
        self.export_timer = QTimer(self)
        self.export_timer.timeout.connect(self.update_export_time)
        self.export_timer.setInterval(1000)

        self.init_ui()
        self.setup_core_connections()
        self.update_controls()

    # --------------------------------------------------
    # UI Initialization
    # --------------------------------------------------
    def init_ui(self):
        self.setWindowTitle(f"{APP_NAME} v{APP_VERSION}")
        self.resize(self.settings.get("preview_width", 1000), self.settings.get("preview_height", 700))

        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QVBoxLayout()
        main_layout.setSpacing(10)
        main_layout.setContentsMargins(10, 10, 10, 10)

        main_layout.addLayout(self.create_header())

        self.preview = PreviewCanvas(self.editor, self)
        self.preview.fileDropped.connect(self.load_media_file)
        main_layout.addWidget(self.preview, 1)

        self.timeline = TimelineWidget(self.editor.trim_model, self)
        self.timeline.hide()
        main_layout.addWidget(self.timeline)

        main_layout.addLayout(self.create_progress_section())

        central_widget.setLayout(main_layout)

    def create_header(self):
        layout = QHBoxLayout()

        self.open_btn = IconButton('fa5s.folder-open', ' Open')
        self.open_btn.clicked.connect(self.open_file)
        layout.addWidget(self.open_btn)

        self.save_btn = IconButton('fa5s.save', ' Save As')
        self.save_btn.clicked.connect(self.save_as)
        layout.addWidget(self.save_btn)

        self.clear_crop_btn = IconButton('fa5s.crop-alt', ' Clear Crop')
        self.clear_crop_btn.clicked.connect(self.clear_crop)
        layout.addWidget(self.clear_crop_btn)

        self.reset_trim_btn = IconButton('fa5s.undo', ' Reset Trim')
        self.reset_trim_btn.clicked.connect(self.reset_trim)
        layout.addWidget(self.reset_trim_btn)

        self.media_info = QLabel("No media loaded")
        self.media_info.setAlignment(Qt.AlignCenter)
        self.media_info.setStyleSheet("font-size: 14px; color: #666666;")
        layout.addWidget(self.media_info, 1)

        self.about_btn = IconButton('fa5s.info-circle', ' About')
        self.about_btn.clicked.connect(self.show_about)
        layout.addWidget(self.about_btn)
        return layout

    def create_progress_section(self):
        layout = QVBoxLayout()

        progress_info_layout = QHBoxLayout()

        self.progress_percent = QLabel("Ready")
        self.progress_percent.setStyleSheet("""
            QLabel {
                font-weight: bold;
                color: #666666;
                min-width: 60px;
            }
        """)

        self.progress_status = QLabel("No active operation")
        self.progress_status.setStyleSheet("color: #666666;")

        self.progress_time_label = QLabel("")
        self.progress_time_label.setStyleSheet("color: #666666; min-width: 100px;")

        progress_info_layout.addWidget(self.progress_percent)
        progress_info_layout.addStretch()
        progress_info_layout.addWidget(self.progress_status)
        progress_info_layout.addWidget(self.progress_time_label)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setValue(0)
        self.progress_bar.setTextVisible(True)
        self.progress_bar.setFormat("%p%")
        self.set_progress_bar_style(active=False)

        layout.addLayout(progress_info_layout)
        layout.addWidget(self.progress_bar)
        return layout

    def set_progress_bar_style(self, active=True):
        color = "#3f8e93" if active else "#e0e0e0"
        border = "#3f8e93" if active else "#cccccc"
        self.progress_bar.setStyleSheet(f"""
            QProgressBar {{
                border: 1px solid {border};
                border-radius: 5px;
                text-align: center;
                background-color: #f5f5f5;
            }}
            QProgressBar::chunk {{
                background-color: {color};
                border-radius: 4px;
            }}
        """)

    # --------------------------------------------------
    # Core Connections Setup
    # --------------------------------------------------
    def setup_core_connections(self):
        self.editor.media_loaded.connect(self.on_media_loaded)
        self.editor.media_closed.connect(self.on_media_closed)
        self.editor.export_started.connect(self.export_started)
        self.editor.export_progress.connect(self.update_progress)
        self.editor.export_finished.connect(self.export_complete)

    def update_controls(self):
        loaded = self.editor.is_loaded
        exporting = self.editor.is_exporting
        is_video = loaded and self.editor.session.is_video

        self.open_btn.setEnabled(not exporting)
        self.save_btn.setEnabled(not exporting)
        self.clear_crop_btn.setEnabled(loaded)
        self.reset_trim_btn.setEnabled(is_video)

    # --------------------------------------------------
    # Media Loading
    # --------------------------------------------------
    def open_file(self):
        start_dir = self.settings.get("last_open_dir") or os.path.expanduser("~")
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Open Image or Video", start_dir, open_dialog_filter()
        )
        if not file_path:
            return

        self.remember_dir("last_open_dir", file_path)
        self.load_media_file(file_path)

    def load_media_file(self, file_path):
        try:
            self.editor.load_media(file_path)
        except MediaEditorError as e:
            logger.warning("Could not load %s: %s", file_path, e)
            self.show_error(e)
            return False
        return True

    def on_media_loaded(self, session):
        info_text = os.path.basename(session.file_path)
        try:
            info_text += f" ({format_file_size(os.path.getsize(session.file_path))})"
        except OSError:
            pass
        info_text += f" - {session.source_dim.width}x{session.source_dim.height}"
        if session.is_video:
            info_text += f" - {hmsms_str(session.duration_sec)}"

        self.media_info.setText(info_text)
        self.timeline.setVisible(session.is_video)
        self.show_notification(f"Loaded: {os.path.basename(session.file_path)}")
        self.update_controls()

    def on_media_closed(self):
        self.media_info.setText("No media loaded")
        self.timeline.hide()
        self.update_controls()

    # --------------------------------------------------
    # Edits
    # --------------------------------------------------
    def clear_crop(self):
        self.editor.clear_crop()
        self.show_notification("Crop cleared")

    def reset_trim(self):
        try:
            self.editor.set_trim(None)
        except MediaEditorError as e:
            self.show_error(e)
            return
        self.show_notification("Trim reset to the full duration")

    # --------------------------------------------------
    # Export
    # --------------------------------------------------
    def save_as(self):
        session = self.editor.session
        if session is None:
            QMessageBox.information(self, NoMediaLoaded.title, NoMediaLoaded().user_message)
            return

        start_dir = self.settings.get("last_save_dir") or os.path.dirname(session.file_path)
        base, ext = os.path.splitext(os.path.basename(session.file_path))
        suggested = os.path.join(start_dir, f"{base}_edited{ext}")

        output_path, _ = QFileDialog.getSaveFileName(
            self, "Save As", suggested, save_dialog_filter(session.media_type)
        )
        if not output_path:
            return

        self.remember_dir("last_save_dir", output_path)
        try:
            if session.media_type is MediaType.IMAGE:
                self.editor.export_image(output_path)
            else:
                self.editor.export_video(output_path)
        except MediaEditorError as e:
            self.show_error(e)

    def export_started(self, output_path):
        self.export_start_time = time.time()
        self.export_timer.start()

        self.progress_bar.setValue(0)
        self.progress_percent.setText("0%")
        self.progress_status.setText(f"Exporting {os.path.basename(output_path)}...")
        self.progress_status.setStyleSheet("color: #3f8e93; font-weight: bold;")
        self.progress_time_label.setText("")
        self.set_progress_bar_style(active=True)
        self.update_controls()

    def update_export_time(self):
        if self.export_start_time:
            elapsed = int(time.time() - self.export_start_time)
            self.progress_time_label.setText(f"⏱ {elapsed // 60:02d}:{elapsed % 60:02d}")

    def update_progress(self, percent):
        self.progress_bar.setValue(percent)
        self.progress_percent.setText(f"{percent}%")

    def export_complete(self, output_file, error):
        self.export_timer.stop()
        self.progress_bar.setValue(0)
        self.progress_percent.setText("Ready")
        self.set_progress_bar_style(active=False)
        self.update_controls()

        if error is None:
            self.progress_status.setText("Export Done")
            self.progress_status.setStyleSheet("color: #27ae60; font-weight: bold;")
            ExportCompleteDialog(self, output_file).exec_()
        else:
            self.progress_status.setText("Export Failed")
            self.progress_status.setStyleSheet("color: #e74c3c; font-weight: bold;")
            self.show_error(error)

    # --------------------------------------------------
    # Messages and Dialogs
    # --------------------------------------------------
    def show_error(self, error):
        if isinstance(error, CRITICAL_ERRORS):
            QMessageBox.critical(self, error.title, error.user_message)
        else:
            QMessageBox.warning(self, error.title, error.user_message)

    def show_notification(self, message):
        self.statusBar().showMessage(f"{message}", 3000)

    def show_about(self):
        AboutDialog(self, version=APP_VERSION).exec_()

    def remember_dir(self, key, path):
        self.settings[key] = os.path.dirname(path)
        self.editor.settings_manager.save_settings(self.settings)

    # --------------------------------------------------
    # Window Events
    # --------------------------------------------------
    def closeEvent(self, event):
        if self.editor.is_exporting:
            reply = QMessageBox.question(
                self, "Export in Progress",
                "An export is still in progress. Wait for it to finish and quit?",
                QMessageBox.Yes | QMessageBox.Cancel, QMessageBox.Cancel
            )
            if reply != QMessageBox.Yes:
                event.ignore()
                return
            self.editor.wait_for_export(None)

        self.settings["preview_width"] = self.width()
        self.settings["preview_height"] = self.height()
        self.editor.settings_manager.save_settings(self.settings)
        event.accept()
