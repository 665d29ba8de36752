"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Literal

from .compatibility import override
from .serializer import JsonType

MediaLayout = Literal["wide", "center", "full-width"]


class AdfNode(ABC):
    "A node in an Atlassian Document Format (ADF) tree."

    @abstractmethod
    def to_json(self) -> dict[str, JsonType]:
        "Serializes the node into its ADF JSON representation."
        ...


def _text_content(text: str) -> list[JsonType]:
    # ADF rejects text nodes with empty text
    if not text:
        return []
    return [{"type": "text", "text": text}]


def _local_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Mark:
    """
    Formatting applied to a text node.

    :param type: Mark type, e.g. `strong`, `em`, `code`, `strike`, `underline` or `link`.
    :param href: Link target, only for marks of type `link`.
    """

    type: Literal["strong", "em", "code", "strike", "underline", "link"]
    href: str | None = None

    def to_json(self) -> dict[str, JsonType]:
        if self.type == "link":
            return {"type": "link", "attrs": {"href": self.href or "#"}}
        return {"type": self.type}


@dataclass(frozen=True)
class Text(AdfNode):
    text: str
    marks: tuple[Mark, ...] = ()

    @override
    def to_json(self) -> dict[str, JsonType]:
        node: dict[str, JsonType] = {"type": "text", "text": self.text}
        if self.marks:
            node["marks"] = [mark.to_json() for mark in self.marks]
        return node


@dataclass(frozen=True)
class HardBreak(AdfNode):
    @override
    def to_json(self) -> dict[str, JsonType]:
        return {"type": "hardBreak"}


InlineElement = Text | HardBreak


@dataclass(frozen=True)
class Heading(AdfNode):
    level: int
    text: str

    def __post_init__(self) -> None:
        if not 1 <= self.level <= 6:
            raise ValueError(f"heading level out of range: {self.level}")

    @override
    def to_json(self) -> dict[str, JsonType]:
        return {"type": "heading", "attrs": {"level": self.level}, "content": _text_content(self.text)}


@dataclass(frozen=True)
class Paragraph(AdfNode):
    content: list[InlineElement] = field(default_factory=list)

    @override
    def to_json(self) -> dict[str, JsonType]:
        return {"type": "paragraph", "content": [item.to_json() for item in self.content]}


@dataclass(frozen=True)
class TableRow(AdfNode):
    "A table row, holding a sequence of block-level elements for each cell."

    cells: list[list["AdfElement"]]

    @override
    def to_json(self) -> dict[str, JsonType]:
        return {
            "type": "tableRow",
            "content": [{"type": "tableCell", "attrs": {}, "content": [item.to_json() for item in cell]} for cell in self.cells],
        }


@dataclass(frozen=True)
class Table(AdfNode):
    rows: list[TableRow]

    @override
    def to_json(self) -> dict[str, JsonType]:
        return {
            "type": "table",
            "attrs": {"isNumberColumnEnabled": False, "layout": "default"},
            "content": [row.to_json() for row in self.rows],
        }


@dataclass(frozen=True)
class ListItem(AdfNode):
    content: list["AdfElement"]

    @override
    def to_json(self) -> dict[str, JsonType]:
        return {"type": "listItem", "content": [item.to_json() for item in self.content]}


@dataclass(frozen=True)
class OrderedList(AdfNode):
    items: list[ListItem]

    @override
    def to_json(self) -> dict[str, JsonType]:
        return {"type": "orderedList", "attrs": {"order": 1}, "content": [item.to_json() for item in self.items]}


@dataclass(frozen=True)
class BulletList(AdfNode):
    items: list[ListItem]

    @override
    def to_json(self) -> dict[str, JsonType]:
        return {"type": "bulletList", "content": [item.to_json() for item in self.items]}


@dataclass(frozen=True)
class TaskItem(AdfNode):
    text: str
    checked: bool

    @override
    def to_json(self) -> dict[str, JsonType]:
        return {
            "type": "taskItem",
            "attrs": {"localId": _local_id(), "state": "DONE" if self.checked else "TODO"},
            "content": _text_content(self.text),
        }


@dataclass(frozen=True)
class TaskList(AdfNode):
    items: list[TaskItem]

    @override
    def to_json(self) -> dict[str, JsonType]:
        return {"type": "taskList", "attrs": {"localId": _local_id()}, "content": [item.to_json() for item in self.items]}


@dataclass(frozen=True)
class CodeBlock(AdfNode):
    text: str
    language: str | None = None

    @override
    def to_json(self) -> dict[str, JsonType]:
        node: dict[str, JsonType] = {"type": "codeBlock", "content": _text_content(self.text)}
        if self.language:
            node["attrs"] = {"language": self.language}
        return node


@dataclass(frozen=True)
class Blockquote(AdfNode):
    text: str

    @override
    def to_json(self) -> dict[str, JsonType]:
        return {"type": "blockquote", "content": [{"type": "paragraph", "content": _text_content(self.text)}]}


@dataclass(frozen=True)
class HorizontalRule(AdfNode):
    @override
    def to_json(self) -> dict[str, JsonType]:
        return {"type": "rule"}


@dataclass(frozen=True)
class MediaSingle(AdfNode):
    """
    A block-level image that references a file attached to a Confluence page.

    :param attachment_id: File ID assigned to the attachment by Confluence (distinct from the attachment ID).
    :param layout: Media layout.
    :param collection: Media collection the file belongs to, e.g. `contentId-123456`.
    """

    attachment_id: str
    layout: MediaLayout = "wide"
    collection: str = ""

    @override
    def to_json(self) -> dict[str, JsonType]:
        return {
            "type": "mediaSingle",
            "attrs": {"layout": self.layout},
            "content": [{"type": "media", "attrs": {"type": "file", "id": self.attachment_id, "collection": self.collection}}],
        }


AdfElement = (
    Heading
    | Paragraph
    | Table
    | TableRow
    | OrderedList
    | BulletList
    | ListItem
    | TaskList
    | TaskItem
    | CodeBlock
    | Blockquote
    | HorizontalRule
    | MediaSingle
)


def as_document(elements: list[AdfElement]) -> dict[str, JsonType]:
    "Wraps a sequence of block-level elements into an ADF document."

    return {"version": 1, "type": "doc", "content": [element.to_json() for element in elements]}
