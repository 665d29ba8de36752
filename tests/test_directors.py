"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import tempfile
import unittest
from pathlib import Path

from md2adf.builder import AdfBuilder
from md2adf.directors import ParagraphDirector, TableDirector
from md2adf.environment import DocumentError
from md2adf.markdown import html_to_tree
from md2adf.vault import Vault
from tests.fakes import write_documents
from tests.utility import TypedAsyncTestCase, to_json


class TestDirectors(TypedAsyncTestCase):
    root_dir: Path
    vault: Vault

    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        self.root_dir = Path(self._temp_dir.name)
        write_documents(self.root_dir, {"index.md": "# Index\n", "notes/Other note.md": "# Other\n"})
        self.vault = Vault(self.root_dir)

    def tearDown(self) -> None:
        self._temp_dir.cleanup()

    async def paragraph(self, html: str, director_type: type[ParagraphDirector] = ParagraphDirector) -> list[object]:
        builder = AdfBuilder()
        linked: list[Path] = []

        async def resolve_link(path: Path) -> str:
            linked.append(path)
            return f"https://example.com/{path.stem}"

        await director_type(builder, self.vault, resolve_link).add_items(html_to_tree(html)[0], "index.md")
        return to_json(builder.build())

    async def test_marks(self) -> None:
        adf = await self.paragraph("<p>plain <strong>bold <em>both</em></strong> <code>x()</code></p>")
        self.assertEqual(
            adf,
            [
                {
                    "type": "paragraph",
                    "content": [
                        {"type": "text", "text": "plain "},
                        {"type": "text", "text": "bold ", "marks": [{"type": "strong"}]},
                        {"type": "text", "text": "both", "marks": [{"type": "strong"}, {"type": "em"}]},
                        {"type": "text", "text": " "},
                        {"type": "text", "text": "x()", "marks": [{"type": "code"}]},
                    ],
                }
            ],
        )

    async def test_line_break(self) -> None:
        adf = await self.paragraph("<p>first<br />\nsecond</p>")
        self.assertEqual(
            adf,
            [
                {
                    "type": "paragraph",
                    "content": [{"type": "text", "text": "first"}, {"type": "hardBreak"}, {"type": "text", "text": "second"}],
                }
            ],
        )

    async def test_external_link(self) -> None:
        adf = await self.paragraph('<p><a href="https://example.org/">site</a></p>')
        self.assertEqual(
            adf,
            [
                {
                    "type": "paragraph",
                    "content": [{"type": "text", "text": "site", "marks": [{"type": "link", "attrs": {"href": "https://example.org/"}}]}],
                }
            ],
        )

    async def test_document_link(self) -> None:
        adf = await self.paragraph('<p><a href="Other note.md">other</a></p>')
        self.assertEqual(
            adf,
            [
                {
                    "type": "paragraph",
                    "content": [
                        {"type": "text", "text": "other", "marks": [{"type": "link", "attrs": {"href": "https://example.com/Other note"}}]}
                    ],
                }
            ],
        )

    async def test_unresolved_link(self) -> None:
        adf = await self.paragraph('<p><a href="missing.md">gone</a></p>')
        self.assertEqual(
            adf,
            [
                {
                    "type": "paragraph",
                    "content": [{"type": "text", "text": "gone", "marks": [{"type": "link", "attrs": {"href": "missing.md"}}]}],
                }
            ],
        )

    async def test_missing_href(self) -> None:
        with self.assertRaises(DocumentError):
            await self.paragraph("<p><a>no target</a></p>")

    async def test_empty_paragraph(self) -> None:
        self.assertEqual(await self.paragraph("<p> </p>"), [])

    async def test_table_cell(self) -> None:
        builder = AdfBuilder()
        cell = html_to_tree("<table><tr><td></td><th>head</th></tr></table>").xpath(".//td | .//th")
        director = TableDirector(builder, self.vault)
        for item in cell:
            await director.add_items(item, "index.md")
        self.assertEqual(
            to_json(builder.build()),
            [
                {"type": "paragraph", "content": []},
                {"type": "paragraph", "content": [{"type": "text", "text": "head"}]},
            ],
        )

    async def test_table_cell_unexpected(self) -> None:
        with self.assertRaises(DocumentError):
            await self.paragraph("<p>not a cell</p>", TableDirector)


if __name__ == "__main__":
    unittest.main()
