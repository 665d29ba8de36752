"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Converts Markdown documents into Atlassian Document Format (ADF), creates Confluence pages for documents on first
reference, and invokes Confluence API endpoints to upload diagrams and content.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import argparse
import asyncio
import logging
import os.path
import sys
import typing
from io import StringIO
from pathlib import Path
from typing import Any, Literal, Sequence

from . import __version__
from .compatibility import override
from .environment import ArgumentError, ConfluenceConnectionProperties
from .options import DocumentOptions
from .vault import Vault


class Arguments(argparse.Namespace):
    root: Path
    mdpath: str
    action: Literal["link", "publish", "convert"]
    domain: str | None
    path: str | None
    api_url: str | None
    username: str | None
    api_key: str | None
    space: str | None
    space_id: str | None
    loglevel: str
    render_mermaid: bool
    headers: dict[str, str] | None


class KwargsAppendAction(argparse.Action):
    """Append key-value pairs to a dictionary."""

    @override
    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: str | Sequence[Any] | None,
        option_string: str | None = None,
    ) -> None:
        try:
            d = dict(map(lambda x: x.split("=", 1), typing.cast(Sequence[str], values)))
        except ValueError:
            raise argparse.ArgumentError(
                self,
                f'Could not parse argument "{values}". It should follow the format: k1=v1 k2=v2 ...',
            ) from None
        setattr(namespace, self.dest, d)


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser()
    parser.prog = os.path.basename(os.path.dirname(__file__))
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("root", help="Root directory that holds Markdown documents.")
    parser.add_argument("mdpath", help="Path to a Markdown document, relative to the root directory.")
    parser.add_argument(
        "--action",
        choices=["link", "publish", "convert"],
        default="link",
        help=(
            "Link the document to a Confluence page, creating the page if necessary (default: 'link'); "
            "publish the current document content to its page; or convert the document and print ADF."
        ),
    )
    parser.add_argument("-d", "--domain", help="Confluence organization domain.")
    parser.add_argument("-p", "--path", help="Base path for Confluence (default: '/wiki/').")
    parser.add_argument(
        "--api-url",
        dest="api_url",
        help="Confluence API URL. Required for scoped tokens. Refer to documentation how to obtain one.",
    )
    parser.add_argument("-u", "--username", help="Confluence user name.")
    parser.add_argument(
        "-a",
        "--api-key",
        dest="api_key",
        help="Confluence API key. Refer to documentation how to obtain one.",
    )
    parser.add_argument("-s", "--space", help="Confluence space key in which new pages are created.")
    parser.add_argument(
        "--space-id",
        dest="space_id",
        help="Confluence space ID in which new pages are created. Takes precedence over space key.",
    )
    parser.add_argument(
        "-l",
        "--loglevel",
        choices=[
            logging.getLevelName(level).lower()
            for level in (
                logging.DEBUG,
                logging.INFO,
                logging.WARN,
                logging.ERROR,
                logging.CRITICAL,
            )
        ],
        default=logging.getLevelName(logging.INFO).lower(),
        help="Use this option to set the log verbosity.",
    )
    parser.add_argument(
        "--render-mermaid",
        dest="render_mermaid",
        action="store_true",
        default=True,
        help="Render Mermaid diagrams as image files. (Installed utility required to convert.)",
    )
    parser.add_argument(
        "--no-render-mermaid",
        dest="render_mermaid",
        action="store_false",
        help="Keep Mermaid diagrams as code blocks.",
    )
    parser.add_argument(
        "--headers",
        nargs="+",
        required=False,
        action=KwargsAppendAction,
        metavar="KEY=VALUE",
        help="Apply custom headers to all Confluence API requests.",
    )
    return parser


def get_help() -> str:
    parser = get_parser()
    with StringIO() as buf:
        parser.print_help(file=buf)
        return buf.getvalue()


async def convert_document(vault: Vault, mdpath: str, options: DocumentOptions) -> str:
    "Converts a document into ADF without contacting Confluence."

    from .adf import as_document
    from .converter import DocumentConverter
    from .serializer import json_dump_string

    absolute_path = vault.get_file_by_path(mdpath)
    if absolute_path is None:
        raise FileNotFoundError(f"document not found: {mdpath}")

    text = await vault.read(absolute_path)
    elements = await DocumentConverter(vault, options=options).convert(text, mdpath)
    return json_dump_string(as_document(elements))


def process_document(properties: ConfluenceConnectionProperties, vault: Vault, args: Arguments, options: DocumentOptions) -> str:
    "Links or publishes a document, returning the address of its Confluence page."

    from .api import AsyncConfluenceClient, ConfluenceAPI
    from .linkage import PageLinker
    from .mermaid import MermaidRenderer, has_mmdc

    with ConfluenceAPI(properties) as api:
        space_id = api.get_space_id(space_id=properties.space_id)
        if space_id is None:
            raise ArgumentError("Confluence space ID or space key required to create pages")

        renderer = MermaidRenderer() if options.render_mermaid and has_mmdc() else None
        if options.render_mermaid and renderer is None:
            logging.warning("Mermaid diagrams are published as code blocks; `mmdc` not found")

        linker = PageLinker(vault, AsyncConfluenceClient(api), space_id, renderer, options)
        if args.action == "publish":
            return asyncio.run(linker.publish(args.mdpath))
        else:
            return asyncio.run(linker.get_remote_link(args.mdpath))


def main() -> None:
    parser = get_parser()
    args = Arguments()
    parser.parse_args(namespace=args)

    args.root = Path(args.root)

    logging.basicConfig(
        level=getattr(logging, args.loglevel.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(funcName)s [%(lineno)d] - %(message)s",
    )

    if not args.root.is_dir():
        parser.error(f"not a directory: {args.root}")

    vault = Vault(args.root)
    options = DocumentOptions(render_mermaid=args.render_mermaid)

    if args.action == "convert":
        print(asyncio.run(convert_document(vault, args.mdpath, options)))
        return

    from requests import HTTPError, JSONDecodeError

    try:
        properties = ConfluenceConnectionProperties(
            api_url=args.api_url,
            domain=args.domain,
            base_path=args.path,
            user_name=args.username,
            api_key=args.api_key,
            space_key=args.space,
            space_id=args.space_id,
            headers=args.headers,
        )
    except ArgumentError as e:
        parser.error(str(e))

    try:
        url = process_document(properties, vault, args, options)
    except HTTPError as err:
        logging.error(err)

        # print details for a response with JSON body
        if err.response is not None:
            try:
                logging.error(err.response.json())
            except JSONDecodeError:
                pass

        sys.exit(1)

    print(url)


if __name__ == "__main__":
    main()
