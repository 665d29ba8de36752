"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

from dataclasses import dataclass
from typing import Literal


@dataclass
class DocumentOptions:
    """
    Options that control the generated page content.

    :param render_mermaid: Whether to render Mermaid diagrams into SVG images uploaded as page attachments.
    :param diagram_layout: Layout of the media element that displays a rendered diagram.
    :param canvas_width: Width of the canvas (in pixels) that rendered diagrams are fitted into.
    :param canvas_height: Height of the canvas (in pixels) that rendered diagrams are fitted into.
    :param background_color: Opaque background color applied to rendered diagrams.
    """

    render_mermaid: bool = True
    diagram_layout: Literal["wide", "center", "full-width"] = "wide"
    canvas_width: int = 1200
    canvas_height: int = 800
    background_color: str = "white"
