"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging
import uuid

from .options import DocumentOptions
from .serializer import JsonType
from .svg import fit_canvas, parse_svg, svg_to_document
from .types import DiagramRenderer, MultipartFiles, RemoteClient

LOGGER = logging.getLogger(__name__)


def unique_render_id() -> str:
    "Generates an identifier that tells apart diagrams rendered concurrently."

    return f"mermaid-{uuid.uuid4().hex[:9]}"


def extract_file_id(response: JsonType) -> str | None:
    """
    Extracts the file ID of the first attachment in an attachment upload response.

    ```
    {"results": [{"id": "att123", "extensions": {"fileId": "..."}}]}
    ```

    :returns: The file ID assigned by Confluence, or `None` if the response has an unexpected shape.
    """

    if not isinstance(response, dict):
        return None
    results = response.get("results")
    if not isinstance(results, list) or not results:
        return None
    first = results[0]
    if not isinstance(first, dict):
        return None
    extensions = first.get("extensions")
    if not isinstance(extensions, dict):
        return None
    file_id = extensions.get("fileId")
    if not isinstance(file_id, str) or not file_id:
        return None
    return file_id


class DiagramUploader:
    """
    Renders diagram source text into an SVG image, and uploads the image as an attachment to a Confluence page.
    """

    client: RemoteClient
    renderer: DiagramRenderer
    options: DocumentOptions

    def __init__(self, client: RemoteClient, renderer: DiagramRenderer, options: DocumentOptions) -> None:
        self.client = client
        self.renderer = renderer
        self.options = options

    async def _upload(self, source: str, page_id: str) -> str | None:
        render_id = unique_render_id()
        diagram = await self.renderer.render(render_id, source)

        root = parse_svg(diagram.image)
        fit_canvas(
            root,
            width=self.options.canvas_width,
            height=self.options.canvas_height,
            background_color=self.options.background_color,
        )
        image_data = svg_to_document(root)

        files: MultipartFiles = {"file": (f"{render_id}.svg", image_data, "image/svg+xml")}
        response = await self.client.upload_file(page_id, files)

        file_id = extract_file_id(response)
        if file_id is None:
            LOGGER.warning("Unexpected response to attachment upload for page %s: %s", page_id, response)
        return file_id

    async def diagram_to_attachment(self, source: str, page_id: str) -> str | None:
        """
        Converts a diagram into an image attached to a Confluence page.

        Failures are logged and reported as a missing result; they are never raised.

        :param source: Diagram source text.
        :param page_id: Confluence page to attach the image to.
        :returns: File ID of the attachment, or `None` if the diagram could not be rendered or uploaded.
        """

        try:
            return await self._upload(source, page_id)
        except Exception as ex:
            LOGGER.error("Failed to convert diagram to attachment on page %s: %s", page_id, ex)
            return None
