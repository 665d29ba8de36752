"""
Common type definitions and protocols.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Protocol, runtime_checkable

from .adf import AdfElement
from .api_types import ConfluencePage
from .serializer import JsonType

MultipartFiles = dict[str, tuple[str, bytes, str]]
"Files in a `multipart/form-data` request body, keyed by form field name; each value is (file name, data, MIME type)."

LinkResolver = Callable[[Path], Awaitable[str]]
"Maps a document to the address of its Confluence page, creating the page if necessary."


@runtime_checkable
class RemoteClient(Protocol):
    """
    Asynchronous operations on the Confluence backend.
    """

    async def create_page(self, space_id: str, title: str) -> ConfluencePage:
        "Creates a new page with empty content."
        ...

    async def update_page(self, page_id: str, title: str, body: list[AdfElement]) -> None:
        "Replaces the content of a page."
        ...

    async def upload_file(self, page_id: str, files: MultipartFiles) -> JsonType:
        "Uploads a file as a page attachment, returning the raw response."
        ...


@dataclass(frozen=True)
class RenderedDiagram:
    """
    A diagram rendered into an image.

    :param image: SVG image markup.
    """

    image: str


@runtime_checkable
class DiagramRenderer(Protocol):
    async def render(self, unique_id: str, source: str) -> RenderedDiagram:
        """
        Renders diagram source text into a vector image.

        :param unique_id: Identifier unique to this rendering, used as the ID of the root SVG element.
        :param source: Diagram source text.
        """
        ...
