"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import re
import xml.etree.ElementTree

import lxml.html
import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from .compatibility import override
from .properties import extract_frontmatter_block

ElementType = lxml.html.HtmlElement

_TASK_REGEXP = re.compile(r"^\[([xX ])\](?:\s+|$)")


class TaskListTreeprocessor(Treeprocessor):
    """
    Marks list items that start with `[ ]` or `[x]` as tasks.

    The marker is replaced with a disabled checkbox, and the item receives the attribute `data-task`, which is `x` for
    completed tasks and empty for incomplete tasks.
    """

    @override
    def run(self, root: xml.etree.ElementTree.Element) -> None:
        for item in root.iter("li"):
            # loose lists wrap item text in a paragraph
            holder = item
            if not (item.text or "").strip() and len(item) > 0 and item[0].tag == "p":
                holder = item[0]

            match = _TASK_REGEXP.match(holder.text or "")
            if match is None:
                continue

            checked = not match.group(1).isspace()
            checkbox = xml.etree.ElementTree.Element("input", {"type": "checkbox", "disabled": "disabled"})
            if checked:
                checkbox.set("checked", "checked")
            checkbox.tail = (holder.text or "")[match.end() :]
            holder.text = None
            holder.insert(0, checkbox)

            item.set("class", "task-list-item")
            item.set("data-task", "x" if checked else "")


class TaskListExtension(Extension):
    @override
    def extendMarkdown(self, md: markdown.Markdown) -> None:
        # run after inline patterns have been applied
        md.treeprocessors.register(TaskListTreeprocessor(md), "md2adf_tasklist", 5)


def _build_wikilink_url(label: str, base: str, end: str) -> str:
    "Maps `[[Other note]]` to a relative link `Other note.md`, keeping spaces intact."

    return f"{base}{label}{end}"


_CONVERTER = markdown.Markdown(
    extensions=[
        "markdown.extensions.tables",
        "markdown.extensions.wikilinks",
        "pymdownx.highlight",  # required by `pymdownx.superfences`
        "pymdownx.magiclink",
        "pymdownx.superfences",
        "pymdownx.tilde",
        "sane_lists",
        TaskListExtension(),
    ],
    extension_configs={
        "markdown.extensions.wikilinks": {
            "base_url": "",
            "end_url": ".md",
            "html_class": "internal-link",
            "build_url": _build_wikilink_url,
        },
        "pymdownx.highlight": {
            "use_pygments": False,
        },
    },
)


def markdown_to_html(content: str) -> str:
    """
    Converts a Markdown document into XHTML with Python-Markdown.

    Front-matter is rendered as a fenced code block with language `yaml` at the top of the document.

    :param content: Markdown input as a string.
    :returns: XHTML output as a string.
    :see: https://python-markdown.github.io/
    """

    block, body = extract_frontmatter_block(content)
    if block is not None:
        if block and not block.endswith("\n"):
            block = f"{block}\n"
        body = f"```yaml\n{block}```\n\n{body}"

    _CONVERTER.reset()
    return _CONVERTER.convert(body)


def markdown_to_tree(content: str) -> ElementType:
    """
    Renders a Markdown document into an element tree.

    :param content: Markdown input as a string.
    :returns: A container element whose direct children are the block-level nodes of the document.
    """

    return html_to_tree(markdown_to_html(content))


def html_to_tree(html: str) -> ElementType:
    "Parses an HTML fragment into a container `<div>` element."

    return lxml.html.fromstring(f"<div>{html}</div>")
