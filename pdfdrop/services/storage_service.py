"""Local-store mode: write uploads into the temporary upload directory."""
from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from werkzeug.utils import secure_filename


class UploadError(Exception):
    """The upload could not be written to disk."""


@dataclass
class StoredUpload:
    file_name: str
    original_name: str
    size: int
    path: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": "File uploaded",
            "fileName": self.file_name,
            "originalName": self.original_name,
            "size": self.size,
            "path": self.path,
        }


def build_file_name(original_name: str, now_ms: Optional[int] = None) -> str:
    # Same-millisecond uploads of the same name overwrite each other.
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    safe = secure_filename(original_name or "") or "upload.pdf"
    return f"{now_ms}_{safe}"


def store_upload(data: bytes, original_name: str, upload_dir: str) -> StoredUpload:
    file_name = build_file_name(original_name)
    path = os.path.join(upload_dir, file_name)
    try:
        os.makedirs(upload_dir, exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise UploadError(f"Could not write {path}: {e}") from e
    return StoredUpload(file_name=file_name, original_name=original_name, size=len(data), path=path)
