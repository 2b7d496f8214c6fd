"""Upload form state: selection, validation, preview lifecycle and upload.

The browser page (static/upload.js) and this class follow the same rules, so
scripts and the command line behave like the page does.
"""
from __future__ import annotations

import logging
import mimetypes
import os
from concurrent import futures
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import requests

from pdfdrop.client.preview import PdfPreview, PreviewRegistry, PreviewResource
from pdfdrop.services.pdf_service import PDF_MIME, format_file_size, looks_like_pdf

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024
UPLOAD_TIMEOUT = 30
PROGRESS_CHECKPOINTS = (30, 70, 100)

TIMEOUT_MESSAGE = "Upload timed out"
NOT_PDF_MESSAGE = "Please choose a PDF file"


@dataclass
class SelectedFile:
    name: str
    data: bytes = field(repr=False)
    content_type: str = ""

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: str, content_type: Optional[str] = None) -> "SelectedFile":
        with open(path, "rb") as f:
            data = f.read()
        if content_type is None:
            content_type = mimetypes.guess_type(path)[0] or ""
        return cls(name=os.path.basename(path), data=data, content_type=content_type)


@dataclass
class UploadResult:
    message: str
    file_name: str
    original_name: str
    size: int
    path: str
    processor_status: Optional[str] = None

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "UploadResult":
        return cls(
            message=payload.get("message", ""),
            file_name=payload["fileName"],
            original_name=payload["originalName"],
            size=int(payload["size"]),
            path=payload["path"],
        )


class UploadForm:
    """State of one upload form instance.

    ``max_file_size=None`` drops the size ceiling.
    """

    def __init__(self, upload_url: str, max_file_size: Optional[int] = MAX_FILE_SIZE,
                 timeout: float = UPLOAD_TIMEOUT, session: Optional[requests.Session] = None,
                 registry: Optional[PreviewRegistry] = None):
        self.upload_url = upload_url
        self.max_file_size = max_file_size
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.registry = registry or PreviewRegistry()

        self.selected_file: Optional[SelectedFile] = None
        self.preview: Optional[PdfPreview] = None
        self.result: Optional[UploadResult] = None
        self.error: Optional[str] = None
        self.is_uploading = False
        self.is_drag_over = False
        self.progress = 0
        self.progress_history: List[int] = []
        self.input_value = ""

        self._preview_resource: Optional[PreviewResource] = None
        self._result_resource: Optional[PreviewResource] = None

    # errors

    def set_error(self, message: str) -> None:
        self.error = message

    def clear_error(self) -> None:
        self.error = None

    # selection

    def validate(self, candidate: SelectedFile) -> Optional[str]:
        if not looks_like_pdf(candidate.content_type):
            return NOT_PDF_MESSAGE
        if self.max_file_size is not None and candidate.size > self.max_file_size:
            return (f"File is too large. Choose a file of "
                    f"{format_file_size(self.max_file_size)} or less")
        return None

    def select_file(self, candidate: SelectedFile) -> bool:
        self.clear_error()
        problem = self.validate(candidate)
        if problem:
            logger.info("Rejected %s: %s", candidate.name, problem)
            self.set_error(problem)
            return False

        self.registry.release(self._preview_resource)
        self.selected_file = candidate
        self.input_value = candidate.name
        self._preview_resource = self.registry.create(candidate.data, PDF_MIME)
        method = self.preview.method if self.preview else "embed"
        self.preview = PdfPreview(candidate.name, self._preview_resource, self.set_error, method=method)
        self._clear_result()
        return True

    def remove_file(self) -> None:
        self.registry.release(self._preview_resource)
        self._preview_resource = None
        self.preview = None
        self.selected_file = None
        self._clear_result()
        self.clear_error()
        self.input_value = ""

    # drop zone

    def drag_over(self) -> None:
        self.is_drag_over = True

    def drag_leave(self) -> None:
        self.is_drag_over = False

    def drop(self, files: Sequence[SelectedFile]) -> bool:
        self.is_drag_over = False
        if not files:
            return False
        return self.select_file(files[0])

    # upload

    @property
    def can_upload(self) -> bool:
        return self.selected_file is not None and not self.is_uploading

    def upload(self) -> Optional[UploadResult]:
        if not self.can_upload:
            return None

        selected = self.selected_file
        self.is_uploading = True
        self.progress_history = []
        self._set_progress(0)
        self._clear_result()
        self.clear_error()

        try:
            files = {"file": (selected.name, selected.data, selected.content_type or PDF_MIME)}
            self._set_progress(PROGRESS_CHECKPOINTS[0])

            r = self._post_with_deadline(files)
            self._set_progress(PROGRESS_CHECKPOINTS[1])

            if not r.ok:
                self.set_error(self._failure_message(r))
                return None

            self.result = self._read_result(r, selected)
            self._set_progress(PROGRESS_CHECKPOINTS[2])
            logger.info("Uploaded %s (%d bytes)", selected.name, selected.size)
            return self.result
        except (requests.Timeout, futures.TimeoutError):
            logger.warning("Upload of %s timed out after %ss", selected.name, self.timeout)
            self.set_error(TIMEOUT_MESSAGE)
        except (requests.RequestException, ValueError, KeyError) as e:
            logger.warning("Upload of %s failed: %s", selected.name, e)
            self.set_error(f"Upload error: {e}")
        finally:
            self.is_uploading = False
            self.progress = 0
        return None

    def result_bytes(self) -> Optional[bytes]:
        """Bytes behind a proxy-mode result, while its blob URL is alive."""
        if self._result_resource is None:
            return None
        resource = self.registry.get(self._result_resource.url)
        return resource.data if resource else None

    def close(self) -> None:
        self.registry.release_all()
        self._preview_resource = None
        self._result_resource = None
        self.preview = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    # helpers

    def _post_with_deadline(self, files) -> requests.Response:
        # requests timeouts bound each socket operation; the deadline bounds the whole request.
        executor = futures.ThreadPoolExecutor(max_workers=1)
        future = executor.submit(self.session.post, self.upload_url, files=files, timeout=self.timeout)
        try:
            return future.result(timeout=self.timeout)
        except futures.TimeoutError:
            future.add_done_callback(_close_abandoned)
            if self._owns_session:
                self.session.close()
                self.session = requests.Session()
            raise
        finally:
            executor.shutdown(wait=False)

    def _set_progress(self, value: int) -> None:
        self.progress = value
        self.progress_history.append(value)

    def _clear_result(self) -> None:
        self.registry.release(self._result_resource)
        self._result_resource = None
        self.result = None

    def _read_result(self, r: requests.Response, selected: SelectedFile) -> UploadResult:
        content_type = r.headers.get("Content-Type", "")
        if "application/json" in content_type:
            return UploadResult.from_json(r.json())

        self._result_resource = self.registry.create(r.content, content_type or PDF_MIME)
        return UploadResult(
            message="Upload complete",
            file_name=selected.name,
            original_name=selected.name,
            size=selected.size,
            path=self._result_resource.url,
            processor_status=r.headers.get("X-Processor-Status"),
        )

    @staticmethod
    def _failure_message(r: requests.Response) -> str:
        message = f"Upload failed: {r.status_code} {r.reason or ''}".rstrip()
        try:
            payload = r.json()
        except ValueError:
            payload = None
        detail = payload.get("error") if isinstance(payload, dict) else None
        if detail:
            message += f" ({detail})"
        return message


def _close_abandoned(future: futures.Future) -> None:
    """Close the response of a request that finished after its deadline."""
    if not future.cancelled() and future.exception() is None:
        future.result().close()
