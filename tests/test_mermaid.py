"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging
import sys
import unittest

from md2adf.mermaid import MermaidRenderer, execute_subprocess, has_mmdc
from md2adf.svg import parse_svg
from tests.utility import TypedAsyncTestCase, TypedTestCase

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(funcName)s [%(lineno)d] - %(message)s",
)

MERMAID_SOURCE = """
graph TD
  C{ How to contribute? }
  C --> D[ Reporting bugs ]
  C --> E[ Sharing ideas ]
"""


class TestSubprocess(TypedTestCase):
    def test_echo(self) -> None:
        output = execute_subprocess([sys.executable, "-c", "import sys; sys.stdout.write(sys.stdin.read())"], b"data", application="Echo")
        self.assertEqual(output, b"data")

    def test_failure(self) -> None:
        with self.assertRaises(RuntimeError) as cm:
            execute_subprocess([sys.executable, "-c", "import sys; sys.exit(3)"], b"", application="Failing")
        self.assertIn("exit code: 3", str(cm.exception))


@unittest.skipUnless(has_mmdc(), "mmdc is not available")
class TestMermaidRendering(TypedAsyncTestCase):
    async def test_render_svg(self) -> None:
        diagram = await MermaidRenderer().render("mermaid-0123456789", MERMAID_SOURCE)
        root = parse_svg(diagram.image)

        self.assertEqual(root.get("id"), "mermaid-0123456789")
        self.assertIn("Reporting bugs", diagram.image)


if __name__ == "__main__":
    unittest.main()
