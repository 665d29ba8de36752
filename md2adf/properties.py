"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import dataclasses
import logging
import re
import typing
from dataclasses import dataclass, field

import yaml

from .serializer import JsonType

LOGGER = logging.getLogger(__name__)

_FRONT_MATTER_REGEXP = re.compile(r"\A---\n(.*?)^---[ \t]*(?:\n|\Z)", flags=re.DOTALL | re.MULTILINE)


def extract_frontmatter_block(text: str) -> tuple[str | None, str]:
    """
    Extracts the front-matter from a Markdown document as a blob of unparsed text.

    :returns: A tuple of (1) the front-matter block without the enclosing `---` lines and (2) remaining text.
    """

    match = _FRONT_MATTER_REGEXP.match(text)
    if match is None:
        return None, text
    return match.group(1), text[match.end() :]


def _to_str(value: JsonType) -> str | None:
    if value is None:
        return None
    return str(value)


@dataclass
class DocumentProperties:
    """
    Properties that link a Markdown document to a Confluence page.

    :param page_id: Confluence page ID.
    :param space_id: Confluence space ID.
    :param confluence_url: Web UI address of the Confluence page.
    :param extra: Other front-matter properties, preserved as found in the document.
    """

    page_id: str | None = None
    space_id: str | None = None
    confluence_url: str | None = None
    extra: dict[str, JsonType] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: dict[str, JsonType]) -> "DocumentProperties":
        extra = dict(data)
        return cls(
            page_id=_to_str(extra.pop("pageId", None)),
            space_id=_to_str(extra.pop("spaceId", None)),
            confluence_url=_to_str(extra.pop("confluenceUrl", None)),
            extra=extra,
        )

    def to_json(self) -> dict[str, JsonType]:
        data: dict[str, JsonType] = dict(self.extra)
        if self.page_id is not None:
            data["pageId"] = self.page_id
        if self.space_id is not None:
            data["spaceId"] = self.space_id
        if self.confluence_url is not None:
            data["confluenceUrl"] = self.confluence_url
        return data


class PropertiesAdaptor:
    """
    Reads and writes the YAML front-matter block at the top of a Markdown document.
    """

    properties: DocumentProperties

    def __init__(self) -> None:
        self.properties = DocumentProperties()

    def load_properties(self, text: str) -> "PropertiesAdaptor":
        "Parses the front-matter of a Markdown document, if any."

        block, _ = extract_frontmatter_block(text)
        if block is None:
            self.properties = DocumentProperties()
            return self

        data = yaml.safe_load(block)
        if isinstance(data, dict):
            self.properties = DocumentProperties.from_json(typing.cast(dict[str, JsonType], data))
        else:
            if data is not None:
                LOGGER.warning("Ignoring front-matter that is not a key-value mapping")
            self.properties = DocumentProperties()
        return self

    def add_properties(self, patch: DocumentProperties) -> None:
        "Merges properties into the current set, overwriting values that the patch assigns."

        updates = {f.name: getattr(patch, f.name) for f in dataclasses.fields(patch) if f.name != "extra" and getattr(patch, f.name) is not None}
        extra = dict(self.properties.extra)
        extra.update(patch.extra)
        self.properties = dataclasses.replace(self.properties, extra=extra, **updates)

    def to_file(self, text: str) -> str:
        """
        Writes the current set of properties into a Markdown document, replacing any existing front-matter.

        :param text: Markdown document text.
        :returns: Markdown document text with a front-matter block at the top.
        """

        _, body = extract_frontmatter_block(text)
        data = self.properties.to_json()
        if not data:
            return body

        block = yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)
        return f"---\n{block}---\n{body}"
