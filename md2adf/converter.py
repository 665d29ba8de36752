"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import asyncio
import copy
import enum
import logging

import lxml.html

from .adf import AdfElement, ListItem, TableRow, TaskItem
from .builder import AdfBuilder
from .diagram import DiagramUploader
from .directors import ParagraphDirector, TableDirector
from .markdown import ElementType, markdown_to_tree
from .options import DocumentOptions
from .properties import PropertiesAdaptor
from .types import DiagramRenderer, LinkResolver, RemoteClient
from .vault import Vault

LOGGER = logging.getLogger(__name__)

# language of fenced code blocks rendered as diagrams
DIAGRAM_LANGUAGE = "mermaid"

# language of the fenced code block that holds document front-matter
METADATA_LANGUAGE = "yaml"


@enum.unique
class NodeKind(enum.Enum):
    "Kinds of block-level nodes in a rendered Markdown document."

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    TABLE = "table"
    ORDERED_LIST = "ordered_list"
    UNORDERED_LIST = "unordered_list"
    BLOCKQUOTE = "blockquote"
    HORIZONTAL_RULE = "horizontal_rule"
    CODE_BLOCK = "code_block"
    OTHER = "other"


_NODE_KINDS: dict[str, NodeKind] = {
    "h1": NodeKind.HEADING,
    "h2": NodeKind.HEADING,
    "h3": NodeKind.HEADING,
    "h4": NodeKind.HEADING,
    "h5": NodeKind.HEADING,
    "h6": NodeKind.HEADING,
    "p": NodeKind.PARAGRAPH,
    "table": NodeKind.TABLE,
    "ol": NodeKind.ORDERED_LIST,
    "ul": NodeKind.UNORDERED_LIST,
    "blockquote": NodeKind.BLOCKQUOTE,
    "hr": NodeKind.HORIZONTAL_RULE,
    "pre": NodeKind.CODE_BLOCK,
}


def node_kind(node: ElementType) -> NodeKind:
    "Classifies a node of a rendered Markdown document."

    if not isinstance(node.tag, str):
        # comments and processing instructions
        return NodeKind.OTHER
    return _NODE_KINDS.get(node.tag.lower(), NodeKind.OTHER)


def get_code_language(code: ElementType) -> str | None:
    "Extracts the language from a class name such as `language-python`."

    for class_name in code.get("class", "").split():
        if class_name.startswith("language-"):
            return class_name.removeprefix("language-")
    return None


def is_task_list(node: ElementType) -> bool:
    """
    True if a list is to be presented as a task list.

    A list qualifies if the number of its items equals the number of checkboxes anywhere under the list. The check does
    not verify that checkboxes and items pair up one-to-one.

    Only direct `<li>` children count as items; items of nested lists do not, even though their checkboxes do. A list
    whose nested items carry the checkboxes (e.g. three direct items and one nested task, with three checkboxes in total)
    is thus a task list, whereas counting every `<li>` descendant would reject it.
    """

    items = [child for child in node if child.tag == "li"]
    checkboxes = node.xpath('.//input[@type="checkbox"]')
    return len(items) == len(checkboxes)


class DocumentConverter:
    """
    Converts a rendered Markdown document into a sequence of Atlassian Document Format (ADF) block elements.

    Sibling nodes are converted one after the other, such that side effects of one node (e.g. uploading an attachment)
    complete before the next node is processed. Table cells and the items of lists (other than task lists) are
    converted concurrently, and re-assembled in document order.
    """

    vault: Vault
    options: DocumentOptions
    resolve_link: LinkResolver | None
    uploader: DiagramUploader | None

    def __init__(
        self,
        vault: Vault,
        *,
        client: RemoteClient | None = None,
        renderer: DiagramRenderer | None = None,
        options: DocumentOptions | None = None,
        resolve_link: LinkResolver | None = None,
    ) -> None:
        """
        :param vault: Directory of Markdown documents.
        :param client: Confluence client for uploading rendered diagrams; diagrams are kept as code without a client.
        :param renderer: Renders diagram source into images; diagrams are kept as code without a renderer.
        :param options: Options that control the generated page content.
        :param resolve_link: Maps a linked Markdown document to the address of its Confluence page.
        """

        self.vault = vault
        self.options = options or DocumentOptions()
        self.resolve_link = resolve_link
        if client is not None and renderer is not None:
            self.uploader = DiagramUploader(client, renderer, self.options)
        else:
            self.uploader = None

    async def convert(self, text: str, path: str) -> list[AdfElement]:
        """
        Converts a Markdown document into ADF.

        :param text: Markdown document text, including front-matter.
        :param path: Path of the document relative to the root directory.
        :returns: Block-level ADF elements in document order.
        """

        container = markdown_to_tree(text)
        return await self.html_to_adf(container, path)

    async def html_to_adf(self, container: ElementType, path: str) -> list[AdfElement]:
        "Converts the children of a container element into ADF."

        builder = AdfBuilder()
        for node in container:
            await self.traverse(node, builder, path)
        return builder.build()

    async def traverse(self, node: ElementType, builder: AdfBuilder, path: str) -> None:
        """
        Converts a single block-level node, appending the result (if any) to a builder.

        Nodes of an unrecognized kind are skipped.
        """

        kind = node_kind(node)
        if kind is NodeKind.HEADING:
            builder.add_item(builder.heading_item(int(node.tag[1]), node.text_content()))
        elif kind is NodeKind.TABLE:
            await self._transform_table(node, builder, path)
        elif kind is NodeKind.CODE_BLOCK:
            await self._transform_code_block(node, builder, path)
        elif kind is NodeKind.PARAGRAPH:
            director = ParagraphDirector(builder, self.vault, self.resolve_link)
            await director.add_items(node, path)
        elif kind is NodeKind.ORDERED_LIST or kind is NodeKind.UNORDERED_LIST:
            await self._transform_list(node, builder, path, ordered=kind is NodeKind.ORDERED_LIST)
        elif kind is NodeKind.BLOCKQUOTE:
            builder.add_item(builder.blockquote_item(node.text_content()))
        elif kind is NodeKind.HORIZONTAL_RULE:
            builder.add_item(builder.horizontal_rule_item())
        elif kind is NodeKind.OTHER:
            LOGGER.debug("Skipping element: %s", node.tag)
        else:
            raise NotImplementedError("match not exhaustive for enumeration")

    async def _transform_table_cell(self, cell: ElementType, path: str) -> list[AdfElement]:
        cell_builder = AdfBuilder()
        director = TableDirector(cell_builder, self.vault, self.resolve_link)
        await director.add_items(cell, path)
        return cell_builder.build()

    async def _transform_table_row(self, row: ElementType, builder: AdfBuilder, path: str) -> TableRow:
        cells = [cell for cell in row if cell.tag in ("td", "th")]
        contents = await asyncio.gather(*(self._transform_table_cell(cell, path) for cell in cells))
        return builder.table_row_item(list(contents))

    async def _transform_table(self, table: ElementType, builder: AdfBuilder, path: str) -> None:
        rows = list(table.iter("tr"))
        table_rows = await asyncio.gather(*(self._transform_table_row(row, builder, path) for row in rows))
        builder.add_item(builder.table_item(list(table_rows)))

    async def _transform_code_block(self, pre: ElementType, builder: AdfBuilder, path: str) -> None:
        code = next(pre.iter("code"), None)
        if code is None:
            return

        text = code.text_content()
        language = get_code_language(code)

        if language == DIAGRAM_LANGUAGE:
            try:
                media = await self._transform_diagram(text, builder, path)
                if media:
                    return
            except Exception as ex:
                LOGGER.error("Error processing diagram in %s: %s", path, ex)

        if language != METADATA_LANGUAGE:
            builder.add_item(builder.code_block_item(text, language))

    async def _transform_diagram(self, source: str, builder: AdfBuilder, path: str) -> bool:
        "Appends an image of a diagram if the document is linked to a page that the image can be attached to."

        if not self.options.render_mermaid or self.uploader is None:
            return False

        absolute_path = self.vault.get_file_by_path(path)
        if absolute_path is None:
            return False

        text = await self.vault.read(absolute_path)
        page_id = PropertiesAdaptor().load_properties(text).properties.page_id
        if not page_id:
            LOGGER.info("Rendering diagram skipped; document not yet linked to a page: %s", path)
            return False

        file_id = await self.uploader.diagram_to_attachment(source, page_id)
        if file_id is None:
            return False

        builder.add_item(builder.media_single_item(file_id, self.options.diagram_layout, f"contentId-{page_id}"))
        return True

    async def _transform_list_item(self, item: ElementType, path: str) -> ListItem:
        # strip the list item wrapper down to its inline content
        paragraph = lxml.html.Element("p")
        paragraph.text = item.text
        for child in item:
            paragraph.append(copy.deepcopy(child))

        item_builder = AdfBuilder()
        director = ParagraphDirector(item_builder, self.vault, self.resolve_link)
        await director.add_items(paragraph, path)
        return item_builder.list_item(item_builder.build())

    async def _transform_list(self, node: ElementType, builder: AdfBuilder, path: str, *, ordered: bool) -> None:
        items = [child for child in node if child.tag == "li"]

        if is_task_list(node):
            tasks: list[TaskItem] = []
            for item in items:
                tasks.append(builder.task_item(item.text_content().strip(), bool(item.get("data-task"))))
            builder.add_item(builder.task_list_item(tasks))
            return

        list_items = await asyncio.gather(*(self._transform_list_item(item, path) for item in items))
        if ordered:
            builder.add_item(builder.ordered_list_item(list(list_items)))
        else:
            builder.add_item(builder.bullet_list_item(list(list_items)))

