"""
passlink CLI - Command Line Interface for the passlink native messaging host.
"""
from typing import Any
import io
import json
import logging

import click
from rich.console import Console
from rich.table import Table

from ..config import HostSettings
from ..core.store import DirectoryStore
from ..errors import PasslinkError
from ..native.api import API
from ..native.host import build_api

logger = logging.getLogger(__name__)

# Create console for rich output
console = Console()


class PasslinkCLI:
    """Shared state of the CLI commands."""

    def __init__(self, settings: HostSettings):
        self.settings = settings
        if settings.debug:
            logger.debug("Debug mode enabled")

    @property
    def debug(self) -> bool:
        return self.settings.debug

    def open_store(self) -> DirectoryStore:
        return DirectoryStore(self.settings.store_dir)

    def make_api(self, reader=None, writer=None) -> API:
        return build_api(self.settings, reader, writer, store=self.open_store())

    def request(self, message: str) -> Any:
        """Dispatch one JSON message and return the decoded response."""
        api = self.make_api(io.BytesIO(), io.BytesIO())
        try:
            response = api.respond(message.encode("utf-8"))
        except PasslinkError as e:
            if self.debug:
                logger.exception("Request failed")
            raise click.ClickException(str(e))
        return json.loads(response)


def print_response(response: Any) -> None:
    """Print a response, as a table for entry lists."""
    if isinstance(response, list):
        if not response:
            console.print("[yellow]No entries found.[/]")
            return
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Entry")
        for name in response:
            table.add_row(name)
        console.print(table)
        return
    click.echo(json.dumps(response, indent=2, default=str))
