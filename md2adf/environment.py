"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import os
from typing import overload


class ArgumentError(ValueError):
    "Raised when wrong arguments are passed to a function call."


class ConfluenceError(RuntimeError):
    "Raised when a Confluence API call fails."


@overload
def _validate_domain(domain: str) -> str: ...


@overload
def _validate_domain(domain: str | None) -> str | None: ...


def _validate_domain(domain: str | None) -> str | None:
    if domain is None:
        return None

    if domain.startswith(("http://", "https://")) or domain.endswith("/"):
        raise ArgumentError("Confluence domain looks like a URL; only host name required")

    return domain


@overload
def _validate_base_path(base_path: str) -> str: ...


@overload
def _validate_base_path(base_path: str | None) -> str | None: ...


def _validate_base_path(base_path: str | None) -> str | None:
    if base_path is None:
        return None

    if not base_path.startswith("/") or not base_path.endswith("/"):
        raise ArgumentError("Confluence base path must start and end with a '/'")

    return base_path


class ConfluenceConnectionProperties:
    """
    Properties related to connecting to Confluence.

    Each parameter falls back to an environment variable when omitted.

    :param api_url: Confluence API URL. Required for scoped tokens.
    :param domain: Confluence organization domain (e.g. `levente-hunyadi.atlassian.net`).
    :param base_path: Base path for Confluence (default: `/wiki/`).
    :param user_name: Confluence user name.
    :param api_key: Confluence API key.
    :param space_key: Confluence space key in which new pages are created.
    :param space_id: Confluence space ID in which new pages are created. Takes precedence over space key.
    :param headers: Additional HTTP headers to pass to Confluence REST API calls.
    """

    api_url: str | None
    domain: str | None
    base_path: str | None
    user_name: str | None
    api_key: str
    space_key: str | None
    space_id: str | None
    headers: dict[str, str] | None

    def __init__(
        self,
        *,
        api_url: str | None = None,
        domain: str | None = None,
        base_path: str | None = None,
        user_name: str | None = None,
        api_key: str | None = None,
        space_key: str | None = None,
        space_id: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        opt_api_url = api_url or os.getenv("CONFLUENCE_API_URL")
        opt_domain = domain or os.getenv("CONFLUENCE_DOMAIN")
        opt_base_path = base_path or os.getenv("CONFLUENCE_PATH")
        opt_user_name = user_name or os.getenv("CONFLUENCE_USER_NAME")
        opt_api_key = api_key or os.getenv("CONFLUENCE_API_KEY")
        opt_space_key = space_key or os.getenv("CONFLUENCE_SPACE_KEY")
        opt_space_id = space_id or os.getenv("CONFLUENCE_SPACE_ID")

        if not opt_api_key:
            raise ArgumentError("Confluence API key not specified")
        if not opt_api_url and not opt_domain:
            raise ArgumentError("Confluence API URL or domain required")
        if not opt_api_url and not opt_base_path:
            opt_base_path = "/wiki/"

        self.api_url = opt_api_url
        self.domain = _validate_domain(opt_domain)
        self.base_path = _validate_base_path(opt_base_path)
        self.user_name = opt_user_name
        self.api_key = opt_api_key
        self.space_key = opt_space_key
        self.space_id = opt_space_id
        self.headers = headers


class DocumentError(RuntimeError):
    "Raised when a rendered Markdown document has an unexpected element or attribute."
