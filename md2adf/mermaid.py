"""
Publish Markdown documents to Confluence as Atlassian Document Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import asyncio
import dataclasses
import json
import logging
import os
import os.path
import re
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from typing import Sequence

from .types import RenderedDiagram

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class MermaidConfig:
    """
    Visual defaults for rendering Mermaid diagrams, passed to the Mermaid CLI as a configuration file.

    :see: https://mermaid.js.org/config/schema-docs/config.html
    """

    theme: str = "default"
    securityLevel: str = "loose"
    fontFamily: str = "arial"
    htmlLabels: bool = True
    fontSize: int = 16


def get_mmdc() -> str:
    "Path to the Mermaid diagram converter."

    if os.name == "nt":
        return "mmdc.cmd"
    else:
        return "mmdc"


def has_mmdc() -> bool:
    "True if Mermaid diagram converter is available on the OS."

    executable = get_mmdc()
    return shutil.which(executable) is not None


def execute_subprocess(command: Sequence[str], data: bytes, *, application: str) -> bytes:
    """
    Executes a subprocess, feeding input to stdin, and capturing output from stdout.

    :param command: Full command with arguments to execute.
    :param data: Application input as `bytes`.
    :param application: Human-readable application name for error messages (e.g. "Mermaid").
    :returns: Application output as `bytes`.
    :raises RuntimeError: If the subprocess fails with non-zero exit code.
    """

    LOGGER.debug("Executing: %s", " ".join(command))

    proc = subprocess.Popen(command, stdout=subprocess.PIPE, stdin=subprocess.PIPE, stderr=subprocess.PIPE)
    stdout, stderr = proc.communicate(input=data)

    if proc.returncode:
        messages = [f"failed to execute {application}; exit code: {proc.returncode}"]
        if stderr:
            try:
                console_error = stderr.decode("utf-8")

                # omit Node.js exception stack trace
                console_error = re.sub(r"^\s+at.*:\d+:\d+\)$\n", "", console_error, flags=re.MULTILINE).rstrip()

                messages.append(f"error:\n{console_error}")
            except UnicodeDecodeError:
                LOGGER.error("%s returned binary data on stderr", application)
        raise RuntimeError("\n".join(messages))

    return stdout


class MermaidRenderer:
    """
    Renders Mermaid diagrams into SVG images with the Mermaid CLI (`mmdc`).
    """

    config: MermaidConfig

    def __init__(self, config: MermaidConfig | None = None) -> None:
        self.config = config or MermaidConfig()

    def render_sync(self, unique_id: str, source: str) -> RenderedDiagram:
        "Generates an SVG image from a Mermaid diagram source, blocking until the image is available."

        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = os.path.join(temp_dir, "mermaid-config.json")
            with open(config_path, "w", encoding="utf-8") as f:
                json.dump(dataclasses.asdict(self.config), f)

            cmd = [
                get_mmdc(),
                "--input",
                "-",
                "--output",
                "-",
                "--outputFormat",
                "svg",
                "--svgId",
                unique_id,
                "--configFile",
                config_path,
            ]
            image = execute_subprocess(cmd, source.encode("utf-8"), application="Mermaid")

        return RenderedDiagram(image.decode("utf-8"))

    async def render(self, unique_id: str, source: str) -> RenderedDiagram:
        return await asyncio.to_thread(self.render_sync, unique_id, source)
