"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Renders Markdown documents, converts the rendered content into Atlassian Document Format (ADF), and invokes
Confluence API endpoints to create pages, upload diagrams and update content.
"""

__version__ = "0.1.1"

__all__ = ["__version__"]

__author__ = "Levente Hunyadi"
__copyright__ = "Copyright 2022-2026, Levente Hunyadi"
__license__ = "MIT"
__maintainer__ = "Levente Hunyadi"
__status__ = "Production"
