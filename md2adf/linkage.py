"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import asyncio
import logging
from pathlib import Path

from .converter import DocumentConverter
from .options import DocumentOptions
from .properties import DocumentProperties, PropertiesAdaptor
from .types import DiagramRenderer, RemoteClient
from .vault import Vault

LOGGER = logging.getLogger(__name__)

NO_LINK = "#"
"Link target returned for documents that cannot be found."


class PageLinker:
    """
    Links Markdown documents to Confluence pages.

    A document is linked the first time another document refers to it (or it is published explicitly). Linking creates
    a page, records the page identity in the front-matter of the document, and uploads the converted document content.
    Once linked, the recorded page address is returned without contacting Confluence.
    """

    vault: Vault
    client: RemoteClient
    space_id: str
    converter: DocumentConverter

    _locks: dict[Path, asyncio.Lock]

    def __init__(
        self,
        vault: Vault,
        client: RemoteClient,
        space_id: str,
        renderer: DiagramRenderer | None = None,
        options: DocumentOptions | None = None,
    ) -> None:
        self.vault = vault
        self.client = client
        self.space_id = space_id
        self._locks = {}
        self.converter = DocumentConverter(
            vault,
            client=client,
            renderer=renderer,
            options=options,
            resolve_link=self.get_remote_link,
        )

    def _resolve(self, path: str | Path) -> Path | None:
        if isinstance(path, Path) and path.is_absolute():
            return self.vault.get_file_by_path(path)
        return self.vault.resolve_link(str(path))

    async def get_remote_link(self, path: str | Path) -> str:
        """
        Returns the Confluence page address of a document, creating the page if the document is not yet linked.

        :param path: Absolute path, or path relative to the root directory.
        :returns: Web UI address of the page, or `#` if the document does not exist.
        """

        absolute_path = self._resolve(path)
        if absolute_path is None:
            LOGGER.warning("Document not found: %s", path)
            return NO_LINK

        # held until the page identity is recorded, but not during conversion, which may link back to this document
        lock = self._locks.setdefault(absolute_path, asyncio.Lock())
        async with lock:
            text = await self.vault.read(absolute_path)
            adaptor = PropertiesAdaptor().load_properties(text)
            if adaptor.properties.confluence_url:
                return adaptor.properties.confluence_url

            name = absolute_path.stem
            page = await self.client.create_page(self.space_id, name)
            url = page.url

            # record page identity before conversion such that diagrams can be attached to the new page
            adaptor.add_properties(DocumentProperties(page_id=page.id, space_id=self.space_id, confluence_url=url))
            text = adaptor.to_file(text)
            await self.vault.modify(absolute_path, text)

        adf = await self.converter.convert(text, self.vault.relative_path(absolute_path))
        await self.client.update_page(page.id, name, adf)

        LOGGER.info("Page created: %s", name)
        return url

    async def publish(self, path: str | Path) -> str:
        """
        Synchronizes the content of a document with its Confluence page.

        Links the document if necessary. Documents that have been linked earlier are converted again, and the page
        content is replaced.

        :param path: Absolute path, or path relative to the root directory.
        :returns: Web UI address of the page.
        """

        absolute_path = self._resolve(path)
        if absolute_path is None:
            raise FileNotFoundError(f"document not found: {path}")

        text = await self.vault.read(absolute_path)
        properties = PropertiesAdaptor().load_properties(text).properties
        if not properties.confluence_url or not properties.page_id:
            return await self.get_remote_link(absolute_path)

        name = absolute_path.stem
        adf = await self.converter.convert(text, self.vault.relative_path(absolute_path))
        await self.client.update_page(properties.page_id, name, adf)

        LOGGER.info("Page updated: %s", name)
        return properties.confluence_url
