"""
passlink CLI - Command Line Interface for the passlink native messaging host.
"""
import json
import logging
import shutil
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Tuple

import click
from click.core import ParameterSource

from . import PasslinkCLI, console, print_response
from .. import __version__
from ..config import HostSettings
from ..core.generator import PASSWORD_MODES
from ..native.host import configure_logging, run_host
from ..native.manifest import BROWSERS, build_manifest, default_manifest_dir, write_manifest

logger = logging.getLogger("passlink")


@click.group(invoke_without_command=True)
@click.option(
    "--store-dir",
    type=click.Path(file_okay=False, dir_okay=True),
    default=None,
    help="Directory of the password store [env: PASSLINK_STORE_DIR]",
)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Enable debug output [env: PASSLINK_DEBUG]",
)
@click.option(
    "--password-mode",
    type=click.Choice(PASSWORD_MODES),
    default=None,
    help="How create generates passwords [env: PASSLINK_PASSWORD_MODE]",
)
@click.pass_context
def cli(ctx: click.Context, store_dir: Optional[str], debug: bool, password_mode: Optional[str]) -> None:
    """passlink - expose a password store to browser extensions."""
    try:
        settings = HostSettings.from_env()
    except ValueError as e:
        raise click.UsageError(str(e))
    if store_dir is not None:
        settings = replace(settings, store_dir=store_dir)
    if password_mode is not None:
        settings = replace(settings, password_mode=password_mode)
    if ctx.get_parameter_source("debug") != ParameterSource.DEFAULT:
        settings = replace(settings, debug=debug)

    configure_logging(settings)

    # Store the CLI instance in the context
    ctx.obj = PasslinkCLI(settings)

    # If no command is provided, show help
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("browser_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def listen(cli: PasslinkCLI, browser_args: Tuple[str, ...]) -> None:
    """Serve native messaging requests on stdin/stdout.

    Browsers append the caller origin (and on Windows a parent window
    handle); they are logged and otherwise ignored.
    """
    if browser_args:
        logger.debug("Started by %s", " ".join(browser_args))
    api = cli.make_api(sys.stdin.buffer, sys.stdout.buffer)
    run_host(api)


@cli.command()
@click.argument("message")
@click.pass_obj
def request(cli: PasslinkCLI, message: str) -> None:
    """Dispatch one JSON MESSAGE and print the response."""
    print_response(cli.request(message))


@cli.command()
@click.option("--browser", "-b", type=click.Choice(BROWSERS), required=True, help="Target browser")
@click.option(
    "--extension-id",
    "-e",
    "extension_ids",
    multiple=True,
    required=True,
    help="Extension allowed to talk to the host (can be used multiple times)",
)
@click.option("--wrapper", type=click.Path(dir_okay=False), default=None, help="Executable started by the browser")
@click.option(
    "--manifest-dir",
    type=click.Path(file_okay=False, dir_okay=True),
    default=None,
    help="Directory for the manifest (browser default if omitted)",
)
@click.option("--print", "print_only", is_flag=True, default=False, help="Print the manifest instead of writing it")
@click.pass_obj
def configure(
    cli: PasslinkCLI,
    browser: str,
    extension_ids: Tuple[str, ...],
    wrapper: Optional[str],
    manifest_dir: Optional[str],
    print_only: bool,
) -> None:
    """Install the native messaging manifest for a browser."""
    wrapper = wrapper or shutil.which("passlink-host")
    if not wrapper:
        raise click.ClickException("passlink-host not found in PATH, use --wrapper")

    manifest = build_manifest(browser, str(Path(wrapper).expanduser().resolve()), list(extension_ids))
    if print_only:
        click.echo(json.dumps(manifest, indent=2))
        return

    directory = Path(manifest_dir).expanduser() if manifest_dir else default_manifest_dir(browser)
    try:
        path = write_manifest(manifest, directory)
    except OSError as e:
        raise click.ClickException(f"Failed to write manifest: {e}")
    console.print(f"[green]✓[/] Installed manifest for [bold]{browser}[/] at {path}")


@cli.command()
def version() -> None:
    """Print the passlink version."""
    click.echo(__version__)


def main() -> None:
    """Entry point for the passlink CLI."""
    cli()


if __name__ == "__main__":
    main()
