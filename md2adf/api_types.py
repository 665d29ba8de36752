"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import enum
from dataclasses import dataclass

from .serializer import JsonType


@enum.unique
class ConfluenceVersion(enum.Enum):
    """
    Confluence REST API version an HTTP request corresponds to.

    Pages and spaces are managed with v2 endpoints. Attachments are uploaded with v1 endpoints, which are the only ones
    that accept file uploads.
    """

    VERSION_1 = "rest/api"
    VERSION_2 = "api/v2"


@enum.unique
class ConfluenceRepresentation(enum.Enum):
    STORAGE = "storage"
    ATLAS = "atlas_doc_format"


@enum.unique
class ConfluenceStatus(enum.Enum):
    CURRENT = "current"
    DRAFT = "draft"
    ARCHIVED = "archived"


@dataclass(frozen=True)
class ConfluenceLinks:
    next: str | None = None
    base: str | None = None


@dataclass(frozen=True)
class ConfluenceResultSet:
    results: list[JsonType]
    _links: ConfluenceLinks


@dataclass(frozen=True)
class ConfluencePageLinks:
    """
    Links returned for a Confluence page.

    :param base: Base URL of the Confluence site, e.g. `https://example.atlassian.net/wiki`.
    :param webui: Path of the page in the web UI, relative to the base URL.
    """

    base: str
    webui: str


@dataclass(frozen=True)
class ConfluenceContentVersion:
    number: int
    minorEdit: bool = False
    message: str | None = None


@dataclass(frozen=True)
class ConfluencePageProperties:
    """
    Holds Confluence page properties.

    :param id: Confluence page ID.
    :param status: Page status.
    :param title: Page title.
    :param spaceId: Confluence space ID.
    :param version: Page version. Incremented when the page is updated.
    """

    id: str
    status: ConfluenceStatus
    title: str
    spaceId: str
    version: ConfluenceContentVersion


@dataclass(frozen=True)
class ConfluencePage(ConfluencePageProperties):
    """
    Holds Confluence page data returned when a page is created.

    :param _links: Links to the page, used to construct its web address.
    """

    _links: ConfluencePageLinks

    @property
    def url(self) -> str:
        "Web UI address of the page."

        return self._links.base + self._links.webui


@dataclass(frozen=True)
class ConfluencePageBody:
    """
    Holds Confluence page content.

    :param representation: Type of content representation used (e.g. Atlassian Document Format).
    :param value: Body of the content, in the format found in the representation field.
    """

    representation: ConfluenceRepresentation
    value: str


@dataclass(frozen=True)
class ConfluenceSpace:
    id: str
    key: str


@dataclass(frozen=True)
class ConfluenceCreatePageRequest:
    spaceId: str
    status: ConfluenceStatus
    title: str
    body: ConfluencePageBody


@dataclass(frozen=True)
class ConfluenceUpdatePageRequest:
    id: str
    status: ConfluenceStatus
    title: str
    body: ConfluencePageBody
    version: ConfluenceContentVersion
