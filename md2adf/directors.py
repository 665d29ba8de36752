"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging
import re

from .adf import HardBreak, InlineElement, Mark, Text
from .builder import AdfBuilder
from .compatibility import override
from .environment import DocumentError
from .markdown import ElementType
from .types import LinkResolver
from .uri import is_absolute_url
from .vault import Vault

LOGGER = logging.getLogger(__name__)

_MARKS: dict[str, Mark] = {
    "strong": Mark("strong"),
    "b": Mark("strong"),
    "em": Mark("em"),
    "i": Mark("em"),
    "del": Mark("strike"),
    "s": Mark("strike"),
    "strike": Mark("strike"),
    "ins": Mark("underline"),
    "u": Mark("underline"),
}

# elements that start on a new line when flattened into inline content
_BLOCK_TAGS = {"p", "div", "li", "ul", "ol", "pre", "blockquote", "table", "tr", "h1", "h2", "h3", "h4", "h5", "h6"}


def _normalize(text: str) -> str:
    return re.sub(r"\s*\n\s*", " ", text)


def _coalesce(items: list[InlineElement]) -> list[InlineElement]:
    "Trims whitespace at the edges and around line breaks, and merges adjacent text nodes that share formatting."

    result: list[InlineElement] = []
    for item in items:
        if isinstance(item, Text) and result:
            last = result[-1]
            if isinstance(last, Text) and last.marks == item.marks:
                result[-1] = Text(last.text + item.text, item.marks)
                continue
        result.append(item)

    trimmed: list[InlineElement] = []
    for index, item in enumerate(result):
        if isinstance(item, Text):
            text = item.text
            if index == 0 or isinstance(result[index - 1], HardBreak):
                text = text.lstrip()
            if index == len(result) - 1 or isinstance(result[index + 1], HardBreak):
                text = text.rstrip()
            if not text:
                continue
            item = Text(text, item.marks)
        trimmed.append(item)

    while trimmed and isinstance(trimmed[0], HardBreak):
        trimmed.pop(0)
    while trimmed and isinstance(trimmed[-1], HardBreak):
        trimmed.pop()
    return trimmed


class ParagraphDirector:
    """
    Converts the inline content of a paragraph into Atlassian Document Format, and appends a paragraph to a builder.
    """

    builder: AdfBuilder
    vault: Vault
    resolve_link: LinkResolver | None

    def __init__(self, builder: AdfBuilder, vault: Vault, resolve_link: LinkResolver | None = None) -> None:
        """
        :param builder: Builder to append elements to.
        :param vault: Directory of Markdown documents that relative links point into.
        :param resolve_link: Maps a linked Markdown document to the address of its Confluence page.
        """

        self.builder = builder
        self.vault = vault
        self.resolve_link = resolve_link

    async def add_items(self, node: ElementType, path: str) -> None:
        """
        Appends the inline content of an element as a paragraph. Appends nothing if the element has no content.

        :param node: Element whose inline content to convert.
        :param path: Path of the document being converted, relative to the root directory.
        """

        content = await self.inline_content(node, path)
        if content:
            self.builder.add_item(self.builder.paragraph_item(content))

    async def inline_content(self, node: ElementType, path: str) -> list[InlineElement]:
        items: list[InlineElement] = []
        await self._visit(node, (), path, items)
        return _coalesce(items)

    async def _visit(self, node: ElementType, marks: tuple[Mark, ...], path: str, items: list[InlineElement]) -> None:
        if node.text:
            items.append(self.builder.text_item(_normalize(node.text), marks))

        for child in node:
            if isinstance(child.tag, str):
                await self._visit_element(child, marks, path, items)
            if child.tail:
                items.append(self.builder.text_item(_normalize(child.tail), marks))

    async def _visit_element(self, elem: ElementType, marks: tuple[Mark, ...], path: str, items: list[InlineElement]) -> None:
        tag = elem.tag

        if tag == "br":
            items.append(self.builder.hard_break_item())
        elif tag == "input":
            # checkbox of a task in a list that is not a task list
            pass
        elif tag == "img":
            alt = elem.get("alt")
            if alt:
                items.append(self.builder.text_item(alt, marks))
        elif tag == "code":
            # ADF permits only links alongside inline code
            code_marks = tuple(m for m in marks if m.type == "link") + (Mark("code"),)
            items.append(self.builder.text_item(elem.text_content(), code_marks))
        elif tag == "a":
            href = await self._transform_link(elem, path)
            link_marks = tuple(m for m in marks if m.type != "link") + (Mark("link", href),)
            await self._visit(elem, link_marks, path, items)
        elif tag in _MARKS:
            mark = _MARKS[tag]
            await self._visit(elem, marks if mark in marks else marks + (mark,), path, items)
        elif tag in _BLOCK_TAGS:
            items.append(self.builder.hard_break_item())
            await self._visit(elem, marks, path, items)
        else:
            await self._visit(elem, marks, path, items)

    async def _transform_link(self, anchor: ElementType, path: str) -> str:
        href = anchor.get("href")
        if href is None:
            raise DocumentError("expected: attribute `href` on `<a>`")

        if is_absolute_url(href) or href.startswith("#"):
            return href

        target = self.vault.resolve_link(href, path)
        if target is None:
            LOGGER.warning("Unable to resolve link to a document: %s", href)
            return href
        if target.suffix != ".md" or self.resolve_link is None:
            return href

        LOGGER.debug("Resolving link to document: %s", target)
        return await self.resolve_link(target)


class TableDirector(ParagraphDirector):
    """
    Converts the content of a table cell into Atlassian Document Format.

    A cell always yields a paragraph, possibly empty, since table cells require block content.
    """

    @override
    async def add_items(self, node: ElementType, path: str) -> None:
        if node.tag not in ("td", "th"):
            raise DocumentError(f"expected: `<td>` or `<th>` as table cell; got: `<{node.tag}>`")

        content = await self.inline_content(node, path)
        self.builder.add_item(self.builder.paragraph_item(content))
