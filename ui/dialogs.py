# --------------------------------------------------
# Dialogs Module
# Contains the about dialog
# --------------------------------------------------

from PyQt5.QtWidgets import QDialog, QVBoxLayout, QLabel, QDialogButtonBox
from PyQt5.QtCore import Qt
import qtawesome as qta

# --------------------------------------------------
# AboutDialog Class
# Application information and credits dialog
# --------------------------------------------------
class AboutDialog(QDialog):
    def __init__(self, parent=None, version=""):
        super().__init__(parent)
        self.version = version
        self.setWindowTitle("About CropTrim")
        self.setModal(True)
        self.setFixedSize(380, 360)

        self.setStyleSheet("""
            QDialog {
                border: 2px solid #3f8e93;
            }
        """)

        self.init_ui()

    # --------------------------------------------------
    # UI Initialization
    # --------------------------------------------------
    def init_ui(self):
        layout = QVBoxLayout()
        layout.setSpacing(15)
        layout.setContentsMargins(20, 30, 20, 20)

        icon_label = QLabel()
        icon_label.setAlignment(Qt.AlignCenter)
        icon_label.setPixmap(qta.icon('fa5s.crop-alt', color='#2c3e50').pixmap(96, 96))

        name_label = QLabel("CropTrim")
        name_label.setAlignment(Qt.AlignCenter)
        name_label.setStyleSheet("font-size: 20px; font-weight: bold; color: #2c3e50;")

        version_label = QLabel(f"Version {self.version}")
        version_label.setAlignment(Qt.AlignCenter)
        version_label.setStyleSheet("font-size: 12px; color: #7f8c8d;")

        description_label = QLabel("Crop images, crop and trim videos")
        description_label.setAlignment(Qt.AlignCenter)
        description_label.setStyleSheet("font-size: 14px; color: #34495e;")

        tools_label = QLabel("Video export uses FFmpeg")
        tools_label.setAlignment(Qt.AlignCenter)
        tools_label.setStyleSheet("font-size: 12px; color: #7f8c8d;")

        license_label = QLabel("License: MIT Open Source")
        license_label.setAlignment(Qt.AlignCenter)
        license_label.setStyleSheet("font-size: 12px; color: #7f8c8d;")

        for widget in (icon_label, name_label, version_label, description_label,
                       tools_label, license_label):
            layout.addWidget(widget)

        close_button = QDialogButtonBox(QDialogButtonBox.Close)
        close_button.rejected.connect(self.reject)
        layout.addWidget(close_button)

        self.setLayout(layout)
