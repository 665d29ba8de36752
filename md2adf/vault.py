"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import asyncio
import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

LOGGER = logging.getLogger(__name__)


def is_directory_within(absolute_path: Path, base_path: Path) -> bool:
    "True if the absolute path is nested within the base path."

    return absolute_path.as_posix().startswith(base_path.as_posix().rstrip("/") + "/")


class Vault:
    """
    A directory of Markdown documents, addressed by paths relative to the root directory.
    """

    root_dir: Path

    def __init__(self, root_dir: Path) -> None:
        self.root_dir = root_dir.resolve()

    def _within(self, path: Path) -> Path | None:
        absolute_path = path.resolve()
        if not is_directory_within(absolute_path, self.root_dir):
            LOGGER.warning("Path points outside of the root directory: %s", path)
            return None
        if not absolute_path.is_file():
            return None
        return absolute_path

    def get_file_by_path(self, path: str | Path) -> Path | None:
        """
        Looks up a document by its exact path.

        :param path: Path relative to the root directory.
        :returns: Absolute path to the document, or `None` if no such document exists.
        """

        return self._within(self.root_dir / path)

    def resolve_link(self, link: str, source_path: str | Path | None = None) -> Path | None:
        """
        Finds the document that a link points to.

        Tries the link (1) relative to the directory of the source document, (2) relative to the root directory, and
        (3) as a file name anywhere in the root directory, picking the match with the shortest path.

        :param link: A relative URL such as `Other note.md`, `../notes/page.md#section` or `Other note`.
        :param source_path: Path of the document that contains the link, relative to the root directory.
        :returns: Absolute path to the target document, or `None` if the link cannot be resolved.
        """

        target = unquote(urlparse(link).path)
        if not target:
            return None
        if not Path(target).suffix:
            target = f"{target}.md"

        candidates: list[Path] = []
        if source_path is not None:
            candidates.append((self.root_dir / source_path).parent / target)
        candidates.append(self.root_dir / target)

        for candidate in candidates:
            absolute_path = self._within(candidate)
            if absolute_path is not None:
                return absolute_path

        name = Path(target).name
        matches = sorted(self.root_dir.rglob(name), key=lambda p: (len(p.parts), p.as_posix()))
        for match in matches:
            absolute_path = self._within(match)
            if absolute_path is not None:
                return absolute_path

        return None

    def relative_path(self, absolute_path: Path) -> str:
        "Path of a document relative to the root directory, with forward slashes."

        return absolute_path.relative_to(self.root_dir).as_posix()

    async def read(self, absolute_path: Path) -> str:
        "Reads the text of a document."

        return await asyncio.to_thread(absolute_path.read_text, encoding="utf-8")

    async def modify(self, absolute_path: Path, text: str) -> None:
        "Replaces the text of a document."

        LOGGER.debug("Writing document: %s", absolute_path)
        await asyncio.to_thread(absolute_path.write_text, text, encoding="utf-8")
