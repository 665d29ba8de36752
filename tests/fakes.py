"""
In-memory stand-ins for Confluence and the diagram renderer.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import asyncio
import random
from pathlib import Path

from md2adf.adf import AdfElement
from md2adf.api_types import ConfluenceContentVersion, ConfluencePage, ConfluencePageLinks, ConfluenceStatus
from md2adf.serializer import JsonType
from md2adf.types import MultipartFiles, RenderedDiagram

SITE_BASE = "https://example.atlassian.net/wiki"

SVG_IMAGE = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 50" width="100" height="50"><rect width="10" height="10"/></svg>'


class FakeClient:
    """
    Records calls to Confluence and answers with canned responses.

    :param delay: Upper bound (in seconds) of a random delay before each upload, to shuffle completion order.
    :param file_id: File ID returned for uploads; `None` produces a response with an unexpected shape.
    """

    calls: list[tuple[str, str]]
    pages: dict[str, list[AdfElement]]
    uploads: list[tuple[str, MultipartFiles]]

    def __init__(self, *, delay: float = 0.0, file_id: str | None = "file-1") -> None:
        self.calls = []
        self.pages = {}
        self.uploads = []
        self.delay = delay
        self.file_id = file_id
        self._next_id = 1000

    async def create_page(self, space_id: str, title: str) -> ConfluencePage:
        self.calls.append(("create_page", title))
        self._next_id += 1
        page_id = str(self._next_id)
        return ConfluencePage(
            id=page_id,
            status=ConfluenceStatus.CURRENT,
            title=title,
            spaceId=space_id,
            version=ConfluenceContentVersion(number=1),
            _links=ConfluencePageLinks(base=SITE_BASE, webui=f"/spaces/SPACE/pages/{page_id}"),
        )

    async def update_page(self, page_id: str, title: str, body: list[AdfElement]) -> None:
        self.calls.append(("update_page", page_id))
        self.pages[page_id] = body

    async def upload_file(self, page_id: str, files: MultipartFiles) -> JsonType:
        if self.delay:
            await asyncio.sleep(random.uniform(0, self.delay))
        self.calls.append(("upload_file", page_id))
        self.uploads.append((page_id, files))
        if self.file_id is None:
            return {"results": []}
        return {"results": [{"id": "att1", "extensions": {"fileId": self.file_id}}]}


class FakeRenderer:
    "Returns a fixed SVG image, or fails if so instructed."

    sources: list[str]

    def __init__(self, *, fail: bool = False) -> None:
        self.sources = []
        self.fail = fail

    async def render(self, unique_id: str, source: str) -> RenderedDiagram:
        self.sources.append(source)
        if self.fail:
            raise RuntimeError("failed to execute Mermaid; exit code: 1")
        return RenderedDiagram(SVG_IMAGE)


def write_documents(root_dir: Path, documents: dict[str, str]) -> None:
    "Populates a directory with Markdown documents, keyed by relative path."

    for name, text in documents.items():
        path = root_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
