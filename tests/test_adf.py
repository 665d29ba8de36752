"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import unittest

from md2adf.adf import Mark, as_document
from md2adf.builder import AdfBuilder
from tests.utility import TypedTestCase


class TestBuilder(TypedTestCase):
    def test_order(self) -> None:
        builder = AdfBuilder()
        builder.add_item(builder.heading_item(1, "Title"))
        builder.add_item(builder.horizontal_rule_item())
        builder.add_item(builder.code_block_item("print()", "python"))
        self.assertTypes(builder.build(), ["heading", "rule", "codeBlock"])

    def test_build_is_snapshot(self) -> None:
        builder = AdfBuilder()
        builder.add_item(builder.horizontal_rule_item())
        items = builder.build()
        builder.add_item(builder.horizontal_rule_item())
        self.assertEqual(len(items), 1)
        self.assertEqual(len(builder.build()), 2)

    def test_heading_level(self) -> None:
        with self.assertRaises(ValueError):
            AdfBuilder.heading_item(7, "Too deep")
        with self.assertRaises(ValueError):
            AdfBuilder.heading_item(0, "Too shallow")


class TestSerialization(TypedTestCase):
    def test_heading(self) -> None:
        self.assertEqual(
            AdfBuilder.heading_item(2, "Section").to_json(),
            {"type": "heading", "attrs": {"level": 2}, "content": [{"type": "text", "text": "Section"}]},
        )

    def test_empty_text(self) -> None:
        self.assertEqual(AdfBuilder.heading_item(1, "").to_json()["content"], [])
        self.assertEqual(AdfBuilder.code_block_item("").to_json(), {"type": "codeBlock", "content": []})

    def test_paragraph(self) -> None:
        paragraph = AdfBuilder.paragraph_item(
            [
                AdfBuilder.text_item("see "),
                AdfBuilder.text_item("here", (Mark("strong"), Mark("link", "https://example.com"))),
                AdfBuilder.hard_break_item(),
                AdfBuilder.text_item("end"),
            ]
        )
        self.assertEqual(
            paragraph.to_json(),
            {
                "type": "paragraph",
                "content": [
                    {"type": "text", "text": "see "},
                    {
                        "type": "text",
                        "text": "here",
                        "marks": [{"type": "strong"}, {"type": "link", "attrs": {"href": "https://example.com"}}],
                    },
                    {"type": "hardBreak"},
                    {"type": "text", "text": "end"},
                ],
            },
        )

    def test_table(self) -> None:
        cell = [AdfBuilder.paragraph_item([AdfBuilder.text_item("x")])]
        table = AdfBuilder.table_item([AdfBuilder.table_row_item([cell, cell])])
        data = table.to_json()
        self.assertEqual(data["type"], "table")
        rows = data["content"]
        assert isinstance(rows, list)
        self.assertEqual(
            rows[0],
            {
                "type": "tableRow",
                "content": [
                    {"type": "tableCell", "attrs": {}, "content": [{"type": "paragraph", "content": [{"type": "text", "text": "x"}]}]},
                    {"type": "tableCell", "attrs": {}, "content": [{"type": "paragraph", "content": [{"type": "text", "text": "x"}]}]},
                ],
            },
        )

    def test_lists(self) -> None:
        item = AdfBuilder.list_item([AdfBuilder.paragraph_item([AdfBuilder.text_item("a")])])
        self.assertEqual(AdfBuilder.ordered_list_item([item]).to_json()["attrs"], {"order": 1})
        self.assertEqual(AdfBuilder.bullet_list_item([item]).to_json()["type"], "bulletList")

    def test_task_list(self) -> None:
        tasks = AdfBuilder.task_list_item([AdfBuilder.task_item("done", True), AdfBuilder.task_item("todo", False)])
        data = tasks.to_json()
        self.assertEqual(data["type"], "taskList")
        items = data["content"]
        assert isinstance(items, list)
        states = []
        for item in items:
            assert isinstance(item, dict)
            attrs = item["attrs"]
            assert isinstance(attrs, dict)
            self.assertEqual(item["type"], "taskItem")
            self.assertIsInstance(attrs["localId"], str)
            states.append(attrs["state"])
        self.assertListEqual(states, ["DONE", "TODO"])

    def test_code_block(self) -> None:
        self.assertEqual(
            AdfBuilder.code_block_item("x = 1", "python").to_json(),
            {"type": "codeBlock", "content": [{"type": "text", "text": "x = 1"}], "attrs": {"language": "python"}},
        )
        self.assertNotIn("attrs", AdfBuilder.code_block_item("x = 1").to_json())

    def test_blockquote(self) -> None:
        self.assertEqual(
            AdfBuilder.blockquote_item("quote").to_json(),
            {"type": "blockquote", "content": [{"type": "paragraph", "content": [{"type": "text", "text": "quote"}]}]},
        )

    def test_media(self) -> None:
        self.assertEqual(
            AdfBuilder.media_single_item("f-1", "center", "contentId-42").to_json(),
            {
                "type": "mediaSingle",
                "attrs": {"layout": "center"},
                "content": [{"type": "media", "attrs": {"type": "file", "id": "f-1", "collection": "contentId-42"}}],
            },
        )

    def test_document(self) -> None:
        doc = as_document([AdfBuilder.horizontal_rule_item()])
        self.assertEqual(doc, {"version": 1, "type": "doc", "content": [{"type": "rule"}]})


if __name__ == "__main__":
    unittest.main()
