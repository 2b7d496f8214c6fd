"""External PDF processor wrapper.

Proxy mode hands every upload to this endpoint. Its answer is logged by the
route and reported as a status header; it never replaces the response body.
"""
from __future__ import annotations

from typing import Any, Dict

import requests

from pdfdrop.services.pdf_service import PDF_MIME


class ProcessorError(Exception):
    """The processor could not be reached or answered with an error."""


def forward_pdf(data: bytes, filename: str, url: str, timeout: float = 60) -> Dict[str, Any]:
    if not url:
        raise ProcessorError("PROCESSOR_URL not set")

    files = {"file": (filename, data, PDF_MIME)}
    try:
        r = requests.post(url, files=files, timeout=timeout)
    except requests.RequestException as e:
        raise ProcessorError(f"Processor request failed: {type(e).__name__}: {e}") from e

    try:
        payload = r.json()
    except ValueError as e:
        raise ProcessorError(f"Processor returned non-JSON response (HTTP {r.status_code})") from e

    if not r.ok:
        raise ProcessorError(f"Processor returned HTTP {r.status_code}: {payload}")
    return payload
