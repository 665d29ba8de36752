"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import unittest

from md2adf.properties import DocumentProperties, PropertiesAdaptor, extract_frontmatter_block
from tests.utility import TypedTestCase


class TestFrontMatter(TypedTestCase):
    def test_extract(self) -> None:
        block, body = extract_frontmatter_block("---\ntitle: Note\n---\n# Heading\n")
        self.assertEqual(block, "title: Note\n")
        self.assertEqual(body, "# Heading\n")

    def test_missing(self) -> None:
        block, body = extract_frontmatter_block("# Heading\n---\n")
        self.assertIsNone(block)
        self.assertEqual(body, "# Heading\n---\n")

    def test_load(self) -> None:
        text = "---\npageId: 123\nspaceId: '456'\nconfluenceUrl: https://example.com/page\ntags: [a, b]\n---\nbody\n"
        properties = PropertiesAdaptor().load_properties(text).properties
        self.assertEqual(properties.page_id, "123")
        self.assertEqual(properties.space_id, "456")
        self.assertEqual(properties.confluence_url, "https://example.com/page")
        self.assertEqual(properties.extra, {"tags": ["a", "b"]})

    def test_load_not_mapping(self) -> None:
        properties = PropertiesAdaptor().load_properties("---\n- a\n- b\n---\nbody\n").properties
        self.assertEqual(properties, DocumentProperties())


class TestPropertiesAdaptor(TypedTestCase):
    def test_insert(self) -> None:
        body = "# Heading\n\nText with *emphasis*.\n"
        adaptor = PropertiesAdaptor().load_properties(body)
        adaptor.add_properties(DocumentProperties(page_id="1", space_id="2", confluence_url="https://example.com/1"))
        text = adaptor.to_file(body)
        self.assertStartsWith(text, "---\npageId: '1'\nspaceId: '2'\nconfluenceUrl: https://example.com/1\n---\n")
        self.assertEqual(extract_frontmatter_block(text)[1], body)

    def test_merge_preserves_other_keys(self) -> None:
        text = "---\ntitle: Note\npageId: '7'\n---\nbody\n"
        adaptor = PropertiesAdaptor().load_properties(text)
        adaptor.add_properties(DocumentProperties(confluence_url="https://example.com/7"))
        properties = PropertiesAdaptor().load_properties(adaptor.to_file(text)).properties
        self.assertEqual(properties.page_id, "7")
        self.assertEqual(properties.confluence_url, "https://example.com/7")
        self.assertEqual(properties.extra, {"title": "Note"})

    def test_no_properties(self) -> None:
        self.assertEqual(PropertiesAdaptor().to_file("body\n"), "body\n")


if __name__ == "__main__":
    unittest.main()
