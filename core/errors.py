# --------------------------------------------------
# Error taxonomy for loading and exporting media
# --------------------------------------------------


class MediaEditorError(Exception):
    """Base class for every error surfaced to the shell."""

    title = "Error"

    def __init__(self, message):
        super().__init__(message)
        self.user_message = message


class UnsupportedFormat(MediaEditorError):
    title = "Unsupported Format"


class NoMediaLoaded(MediaEditorError):
    title = "No Media Loaded"

    def __init__(self, message="No media file is loaded. Please open a file first."):
        super().__init__(message)


class MetadataProbeError(MediaEditorError):
    title = "Unreadable Video"


# --------------------------------------------------
# Export errors
# --------------------------------------------------
class ExportError(MediaEditorError):
    title = "Export Failed"


class InvalidCropRect(ExportError):
    title = "Invalid Crop"


class InvalidTrimRange(ExportError):
    title = "Invalid Time Range"


class EncoderFailure(ExportError):
    title = "Encoder Failed"

    def __init__(self, message, returncode=None, diagnostics=""):
        super().__init__(message)
        self.returncode = returncode
        self.diagnostics = diagnostics
        if diagnostics:
            self.user_message = f"{message}\n\n{diagnostics}"


class MediaIOError(ExportError):
    title = "File Error"


class ExportInProgress(ExportError):
    title = "Export Running"

    def __init__(self, message="Please wait for the current export to finish."):
        super().__init__(message)
