"""PDF type checks and small PDF helpers shared by the server and the client."""
from __future__ import annotations

import io
from typing import Optional

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

PDF_MIME = "application/pdf"

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def is_pdf_mimetype(mimetype: Optional[str]) -> bool:
    """Server rule: the declared type must be exactly application/pdf."""
    return (mimetype or "").strip().lower() == PDF_MIME


def looks_like_pdf(mimetype: Optional[str]) -> bool:
    """Client rule: any declared type mentioning pdf is accepted."""
    return "pdf" in (mimetype or "").lower()


def count_pages(data: bytes) -> Optional[int]:
    """Return the page count, or None when PyPDF2 cannot parse the bytes."""
    if not data:
        return None
    try:
        return len(PdfReader(io.BytesIO(data)).pages)
    except (PdfReadError, ValueError, KeyError):
        return None


def format_file_size(num_bytes: int) -> str:
    if num_bytes <= 0:
        return "0 Bytes"
    value = float(num_bytes)
    i = 0
    while value >= 1024 and i < len(_SIZE_UNITS) - 1:
        value /= 1024
        i += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[i]}"
