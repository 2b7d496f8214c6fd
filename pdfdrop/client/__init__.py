from pdfdrop.client.form import (
    MAX_FILE_SIZE,
    TIMEOUT_MESSAGE,
    UPLOAD_TIMEOUT,
    SelectedFile,
    UploadForm,
    UploadResult,
)
from pdfdrop.client.preview import PREVIEW_METHODS, PdfPreview, PreviewRegistry, PreviewResource

__all__ = [
    "MAX_FILE_SIZE",
    "PREVIEW_METHODS",
    "TIMEOUT_MESSAGE",
    "UPLOAD_TIMEOUT",
    "PdfPreview",
    "PreviewRegistry",
    "PreviewResource",
    "SelectedFile",
    "UploadForm",
    "UploadResult",
]
