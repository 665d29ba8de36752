"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

from .adf import (
    AdfElement,
    Blockquote,
    BulletList,
    CodeBlock,
    HardBreak,
    Heading,
    HorizontalRule,
    InlineElement,
    ListItem,
    Mark,
    MediaLayout,
    MediaSingle,
    OrderedList,
    Paragraph,
    Table,
    TableRow,
    TaskItem,
    TaskList,
    Text,
)


class AdfBuilder:
    """
    Accumulates an ordered sequence of block-level ADF elements.

    A fresh builder is created for each traversal scope (document root, list item, table cell). Element constructors
    are pure, and return a value to pass to `add_item`.
    """

    _items: list[AdfElement]

    def __init__(self) -> None:
        self._items = []

    def add_item(self, item: AdfElement) -> None:
        self._items.append(item)

    def build(self) -> list[AdfElement]:
        "Returns the elements accumulated so far."

        return list(self._items)

    @staticmethod
    def heading_item(level: int, text: str) -> Heading:
        return Heading(level, text)

    @staticmethod
    def paragraph_item(content: list[InlineElement]) -> Paragraph:
        return Paragraph(content)

    @staticmethod
    def text_item(text: str, marks: tuple[Mark, ...] = ()) -> Text:
        return Text(text, marks)

    @staticmethod
    def hard_break_item() -> HardBreak:
        return HardBreak()

    @staticmethod
    def table_item(rows: list[TableRow]) -> Table:
        return Table(rows)

    @staticmethod
    def table_row_item(cells: list[list[AdfElement]]) -> TableRow:
        return TableRow(cells)

    @staticmethod
    def list_item(content: list[AdfElement]) -> ListItem:
        return ListItem(content)

    @staticmethod
    def ordered_list_item(items: list[ListItem]) -> OrderedList:
        return OrderedList(items)

    @staticmethod
    def bullet_list_item(items: list[ListItem]) -> BulletList:
        return BulletList(items)

    @staticmethod
    def task_item(text: str, checked: bool) -> TaskItem:
        return TaskItem(text, checked)

    @staticmethod
    def task_list_item(items: list[TaskItem]) -> TaskList:
        return TaskList(items)

    @staticmethod
    def code_block_item(text: str, language: str | None = None) -> CodeBlock:
        return CodeBlock(text, language)

    @staticmethod
    def blockquote_item(text: str) -> Blockquote:
        return Blockquote(text)

    @staticmethod
    def horizontal_rule_item() -> HorizontalRule:
        return HorizontalRule()

    @staticmethod
    def media_single_item(attachment_id: str, layout: MediaLayout = "wide", collection: str = "") -> MediaSingle:
        return MediaSingle(attachment_id, layout, collection)
