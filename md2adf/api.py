"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import asyncio
import logging
import typing
from types import TracebackType
from typing import Any, TypeVar
from urllib.parse import urlencode, urlparse, urlunparse

import requests

from .adf import AdfElement, as_document
from .api_types import (
    ConfluenceContentVersion,
    ConfluenceCreatePageRequest,
    ConfluencePage,
    ConfluencePageBody,
    ConfluencePageProperties,
    ConfluenceRepresentation,
    ConfluenceResultSet,
    ConfluenceSpace,
    ConfluenceStatus,
    ConfluenceUpdatePageRequest,
    ConfluenceVersion,
)
from .environment import ArgumentError, ConfluenceConnectionProperties, ConfluenceError
from .metadata import ConfluenceSiteMetadata
from .serializer import JsonType, json_dump_string, json_to_object, object_to_json_payload
from .types import MultipartFiles

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def build_url(base_url: str, query: dict[str, str] | None = None) -> str:
    "Builds a URL with scheme, host, port, path and query string parameters."

    scheme, netloc, path, params, query_str, fragment = urlparse(base_url)

    if params:
        raise ValueError("expected: url with no parameters")
    if query_str:
        raise ValueError("expected: url with no query string")
    if fragment:
        raise ValueError("expected: url with no fragment")

    url_parts = (scheme, netloc, path, None, urlencode(query) if query else None, None)
    return urlunparse(url_parts)


def _adf_body(elements: list[AdfElement]) -> ConfluencePageBody:
    return ConfluencePageBody(representation=ConfluenceRepresentation.ATLAS, value=json_dump_string(as_document(elements)))


class ConfluenceAPI:
    """
    Represents an active connection to a Confluence server.
    """

    properties: ConfluenceConnectionProperties
    session: "ConfluenceSession | None" = None

    def __init__(self, properties: ConfluenceConnectionProperties | None = None) -> None:
        self.properties = properties or ConfluenceConnectionProperties()

    def __enter__(self) -> "ConfluenceSession":
        session = requests.Session()
        if self.properties.user_name:
            session.auth = (self.properties.user_name, self.properties.api_key)
        else:
            session.headers.update({"Authorization": f"Bearer {self.properties.api_key}"})

        if self.properties.headers:
            session.headers.update(self.properties.headers)

        self.session = ConfluenceSession(
            session,
            api_url=self.properties.api_url,
            domain=self.properties.domain,
            base_path=self.properties.base_path,
            space_key=self.properties.space_key,
        )
        return self.session

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self.session is not None:
            self.session.close()
            self.session = None


class ConfluenceSession:
    """
    Information about an open session to a Confluence server.
    """

    session: requests.Session
    api_url: str
    site: ConfluenceSiteMetadata

    _space_key_to_id: dict[str, str]

    def __init__(
        self,
        session: requests.Session,
        *,
        api_url: str | None,
        domain: str | None,
        base_path: str | None,
        space_key: str | None,
    ) -> None:
        self.session = session
        self._space_key_to_id = {}

        if api_url:
            self.api_url = api_url

            if not domain or not base_path:
                data = self._get(ConfluenceVersion.VERSION_2, "/spaces", ConfluenceResultSet, query={"limit": "1"})
                base_url = data._links.base or ""

                _, domain, base_path, _, _, _ = urlparse(base_url)
                if not base_path.endswith("/"):
                    base_path = f"{base_path}/"

        if not domain:
            raise ArgumentError("Confluence domain not specified and cannot be inferred")
        if not base_path:
            raise ArgumentError("Confluence base path not specified and cannot be inferred")
        self.site = ConfluenceSiteMetadata(domain, base_path, space_key)
        if not api_url:
            self.api_url = f"https://{self.site.domain}{self.site.base_path}"

    def close(self) -> None:
        self.session.close()
        self.session = requests.Session()

    def _build_url(self, version: ConfluenceVersion, path: str, query: dict[str, str] | None = None) -> str:
        """
        Builds a full URL for invoking the Confluence API.

        :param version: Confluence REST API version, which determines the URL path prefix.
        :param path: Path of API endpoint to invoke.
        :param query: Query parameters to pass to the API endpoint.
        :returns: A full URL.
        """

        base_url = f"{self.api_url}{version.value}{path}"
        return build_url(base_url, query)

    def _get(self, version: ConfluenceVersion, path: str, response_type: type[T], *, query: dict[str, str] | None = None) -> T:
        "Executes an HTTP request via Confluence API."

        url = self._build_url(version, path, query)
        response = self.session.get(url, headers={"Accept": "application/json"}, verify=True)
        if response.text:
            LOGGER.debug("Received HTTP payload:\n%s", response.text)
        response.raise_for_status()
        return json_to_object(response_type, response.json())

    def _send(self, method: str, version: ConfluenceVersion, path: str, body: Any) -> requests.Response:
        url = self._build_url(version, path)
        response = self.session.request(
            method,
            url,
            data=object_to_json_payload(body),
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            verify=True,
        )
        if response.text:
            LOGGER.debug("Received HTTP payload:\n%s", response.text)
        response.raise_for_status()
        return response

    def space_key_to_id(self, key: str) -> str:
        "Finds the Confluence space ID for a space key."

        id = self._space_key_to_id.get(key)
        if id is not None:
            return id

        data = self._get(ConfluenceVersion.VERSION_2, "/spaces", ConfluenceResultSet, query={"keys": key})
        results = json_to_object(list[ConfluenceSpace], data.results)
        if len(results) != 1:
            raise ConfluenceError(f"unique space not found with key: {key}")

        id = results[0].id
        self._space_key_to_id[key] = id
        return id

    def get_space_id(self, *, space_id: str | None = None, space_key: str | None = None) -> str | None:
        """
        Coalesces a space ID or space key into a space ID, accounting for site default.

        :param space_id: A Confluence space ID.
        :param space_key: A Confluence space key.
        """

        if space_id is not None and space_key is not None:
            raise ConfluenceError("either space ID or space key is required; not both")

        if space_id is not None:
            return space_id

        space_key = space_key or self.site.space_key
        if space_key is not None:
            return self.space_key_to_id(space_key)

        # space ID and key are unset, and no default space is configured
        return None

    def get_page_properties(self, page_id: str) -> ConfluencePageProperties:
        """
        Retrieves Confluence wiki page details.

        :param page_id: The Confluence page ID.
        :returns: Confluence page info.
        """

        return self._get(ConfluenceVersion.VERSION_2, f"/pages/{page_id}", ConfluencePageProperties)

    def create_page(self, space_id: str, title: str) -> ConfluencePage:
        """
        Creates a new page with empty content via Confluence API.

        :param space_id: The Confluence space ID in which to create the page.
        :param title: Page title. Pages in the same Confluence space must have a unique title.
        :returns: The newly created page, including links to the page.
        """

        LOGGER.info("Creating page: %s", title)
        request = ConfluenceCreatePageRequest(
            spaceId=space_id,
            status=ConfluenceStatus.CURRENT,
            title=title,
            body=_adf_body([]),
        )
        response = self._send("POST", ConfluenceVersion.VERSION_2, "/pages", request)
        return json_to_object(ConfluencePage, response.json())

    def update_page(self, page_id: str, title: str, body: list[AdfElement]) -> None:
        """
        Replaces the content of a page via Confluence API.

        :param page_id: The Confluence page ID.
        :param title: Page title.
        :param body: Block-level Atlassian Document Format elements that make up the new page content.
        """

        page = self.get_page_properties(page_id)

        request = ConfluenceUpdatePageRequest(
            id=page_id,
            status=ConfluenceStatus.CURRENT,
            title=title,
            body=_adf_body(body),
            version=ConfluenceContentVersion(number=page.version.number + 1, minorEdit=True),
        )
        LOGGER.info("Updating page: %s", page_id)
        self._send("PUT", ConfluenceVersion.VERSION_2, f"/pages/{page_id}", request)

    def upload_file(self, page_id: str, files: MultipartFiles) -> JsonType:
        """
        Uploads a new attachment to a Confluence page.

        :param page_id: Confluence page ID.
        :param files: Body of a `multipart/form-data` request, holding the file to upload.
        :returns: The attachment result set returned by Confluence.
        """

        url = self._build_url(ConfluenceVersion.VERSION_1, f"/content/{page_id}/child/attachment")
        for name, _, _ in files.values():
            LOGGER.info("Uploading attachment: %s", name)

        response = self.session.post(
            url,
            files=files,
            headers={
                "X-Atlassian-Token": "no-check",
                "Accept": "application/json",
            },
            verify=True,
        )
        if response.text:
            LOGGER.debug("Received HTTP payload:\n%s", response.text)
        response.raise_for_status()
        return typing.cast(JsonType, response.json())


class AsyncConfluenceClient:
    """
    Exposes Confluence API operations as coroutines.

    Each call runs on a worker thread so that the event loop remains free to make progress on other branches of a
    document conversion.
    """

    api: ConfluenceSession

    def __init__(self, api: ConfluenceSession) -> None:
        self.api = api

    async def create_page(self, space_id: str, title: str) -> ConfluencePage:
        return await asyncio.to_thread(self.api.create_page, space_id, title)

    async def update_page(self, page_id: str, title: str, body: list[AdfElement]) -> None:
        await asyncio.to_thread(self.api.update_page, page_id, title, body)

    async def upload_file(self, page_id: str, files: MultipartFiles) -> JsonType:
        return await asyncio.to_thread(self.api.upload_file, page_id, files)
