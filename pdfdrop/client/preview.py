"""Preview resources and preview renderers for the upload form.

A preview resource is the Python counterpart of a browser object URL: an
in-memory copy of the selected file addressed by a ``blob:`` URL. The
registry tracks which URLs are still alive so a form can prove it never
leaks or double-releases one.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from markupsafe import Markup, escape

from pdfdrop.services.pdf_service import PDF_MIME, count_pages

logger = logging.getLogger(__name__)

PREVIEW_METHODS = ("embed", "iframe", "object")
PREVIEW_LABELS = {"embed": "Embed", "iframe": "iFrame", "object": "Object"}


@dataclass
class PreviewResource:
    url: str
    data: bytes = field(repr=False)
    content_type: str = PDF_MIME
    released: bool = False


class PreviewRegistry:
    def __init__(self):
        self._live: Dict[str, PreviewResource] = {}
        self.revoked: List[str] = []

    def create(self, data: bytes, content_type: str = PDF_MIME) -> PreviewResource:
        resource = PreviewResource(url=f"blob:pdfdrop/{uuid.uuid4()}", data=bytes(data), content_type=content_type)
        self._live[resource.url] = resource
        logger.debug("Created preview %s (%d bytes)", resource.url, len(resource.data))
        return resource

    def release(self, resource: Optional[PreviewResource]) -> bool:
        """Revoke a resource. Returns False when it was not live."""
        if resource is None or resource.url not in self._live:
            return False
        del self._live[resource.url]
        resource.released = True
        self.revoked.append(resource.url)
        logger.debug("Released preview %s", resource.url)
        return True

    def release_all(self) -> None:
        for resource in list(self._live.values()):
            self.release(resource)

    def get(self, url: str) -> Optional[PreviewResource]:
        return self._live.get(url)

    @property
    def live_count(self) -> int:
        return len(self._live)


class PdfPreview:
    """One selected file shown through one of the three embedding strategies.

    Each strategy reports its own load and error events; an error in one only
    raises an error message through ``on_error`` and leaves the others usable.
    """

    def __init__(self, name: str, resource: PreviewResource,
                 on_error: Callable[[str], None], method: str = "embed"):
        self.name = name
        self.resource = resource
        self.on_error = on_error
        self.method = method
        self.is_loading = True
        self.failed_methods: List[str] = []
        self._page_count: Optional[int] = None
        self._page_count_read = False
        self.switch(method)

    @property
    def url(self) -> str:
        return self.resource.url

    def switch(self, method: str) -> None:
        if method not in PREVIEW_METHODS:
            raise ValueError(f"Unknown preview method {method!r}; expected one of {PREVIEW_METHODS}")
        self.method = method
        self.is_loading = True

    def handle_load(self) -> None:
        self.is_loading = False

    def handle_error(self, method: Optional[str] = None) -> None:
        method = method or self.method
        label = PREVIEW_LABELS.get(method, method)
        logger.error("%s preview failed for %s", label, self.name)
        if method not in self.failed_methods:
            self.failed_methods.append(method)
        self.on_error(f"{label} preview failed")

    @property
    def page_count(self) -> Optional[int]:
        if not self._page_count_read:
            self._page_count = count_pages(self.resource.data)
            self._page_count_read = True
        return self._page_count

    def render(self) -> Markup:
        url = escape(self.url)
        if self.method == "iframe":
            return Markup('<iframe src="%s" title="PDF preview"></iframe>') % url
        if self.method == "object":
            return Markup(
                '<object data="%s" type="application/pdf">'
                '<p>The PDF cannot be displayed. '
                '<a href="%s" target="_blank" rel="noopener noreferrer">Open in new tab</a></p>'
                '</object>'
            ) % (url, url)
        return Markup('<embed src="%s" type="application/pdf">') % url

    def download_link(self) -> Markup:
        return Markup('<a href="%s" download="%s">Download</a>') % (self.url, self.name)
