# ui/__init__.py
# --------------------------------------------------
# UI Package Initialization
# --------------------------------------------------

# Import main classes for easier access
from .main_window import MediaEditorWindow
from .dialogs import AboutDialog
from .widgets import IconButton, PreviewCanvas
from .timeline import TimelineWidget, TrimBar
from .crop_widget import CropOverlay

__all__ = [
    'MediaEditorWindow',
    'AboutDialog',
    'IconButton',
    'PreviewCanvas',
    'TimelineWidget',
    'TrimBar',
    'CropOverlay'
]
