#!/usr/bin/env python3

import json
import re
import sys
import traceback

import click
from dotenv import load_dotenv

from postman_exporter import __version__
from postman_exporter.config import get_settings
from postman_exporter.converters import CONVERTERS, get_converter
from postman_exporter.errors import (
    BatchPartialFailureError,
    PostmanExportError,
    get_error_human_message,
)
from postman_exporter.exporter import export_workspace, list_collections, list_workspaces
from postman_exporter.summary import render_collections, render_report, render_workspaces
from postman_exporter.utils.logging import setup_logging


def split_list(value: str | None) -> list[str]:
    """Split a comma or newline separated option into trimmed, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in re.split(r"[,\r\n]+", value) if item.strip()]


def resolve_api_key(api_key: str | None) -> str:
    """Use the option, then POSTMAN_API_KEY, then ask."""
    if api_key:
        return api_key
    configured = get_settings().postman.get_api_key()
    if configured:
        return configured
    return click.prompt("Enter your Postman API key", hide_input=True)


def fail(error: Exception, debug: bool) -> None:
    click.secho(f"Error: {get_error_human_message(error)}", fg="red", err=True)
    if debug:
        click.echo(traceback.format_exc(), err=True)
    sys.exit(1)


def echo_report(report, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        click.echo(render_report(report))


def debug_callback(ctx, param, value):
    """Configure logging as soon as --debug is parsed"""
    settings = get_settings()
    debug = value or settings.logging.debug
    setup_logging(debug=debug, log_level=settings.logging.log_level)
    return debug


debug_option = click.option(
    "-d",
    "--debug",
    is_flag=True,
    default=False,
    callback=debug_callback,
    is_eager=True,
    help="Log request/response detail and show stack traces",
)
api_key_option = click.option(
    "-k",
    "--api-key",
    help="Postman API key (default: POSTMAN_API_KEY)",
)


@click.group(invoke_without_command=True)
@click.version_option(__version__)
@click.pass_context
def cli(ctx) -> None:
    """Postman OpenAPI Exporter - export Postman collections to OpenAPI"""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.option("-w", "--workspace", required=True, help="Postman workspace ID")
@api_key_option
@click.option(
    "-o",
    "--output",
    type=click.Path(file_okay=False, dir_okay=True),
    help="Output directory (default: OUTPUT_DIR or ./openapi-exports)",
)
@click.option("-i", "--ids", help="Collection IDs (comma-separated)")
@click.option("-n", "--names", help="Collection names (comma-separated)")
@click.option(
    "--converter",
    type=click.Choice(sorted(CONVERTERS)),
    help="Converter implementation (default: CONVERTER or builtin)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@debug_option
def export(workspace, api_key, output, ids, names, converter, as_json, debug) -> None:
    """Export workspace collections to OpenAPI JSON files"""
    settings = get_settings()
    try:
        report = export_workspace(
            workspace,
            output or settings.export.output_dir,
            api_key=resolve_api_key(api_key),
            ids=split_list(ids),
            names=split_list(names),
            debug=debug,
            converter=get_converter(converter or settings.export.converter),
        )
    except BatchPartialFailureError as e:
        echo_report(e.report, as_json)
        fail(e, debug)
    except (PostmanExportError, OSError, ValueError) as e:
        fail(e, debug)
    else:
        if not as_json:
            click.secho("Export completed successfully!", fg="green")
        echo_report(report, as_json)


@cli.command()
@api_key_option
@debug_option
def workspaces(api_key, debug) -> None:
    """List the workspaces visible to the API key"""
    try:
        found = list_workspaces(resolve_api_key(api_key), debug=debug)
    except PostmanExportError as e:
        fail(e, debug)
    else:
        if not found:
            click.echo("No workspaces found for this API key")
            return
        click.echo(render_workspaces(found))


@cli.command()
@click.argument("workspace")
@api_key_option
@debug_option
def collections(workspace, api_key, debug) -> None:
    """List the collections of WORKSPACE"""
    try:
        found = list_collections(workspace, resolve_api_key(api_key), debug=debug)
    except PostmanExportError as e:
        fail(e, debug)
    else:
        click.echo(render_collections(found))


def main() -> None:
    load_dotenv()
    cli()


if __name__ == "__main__":
    main()
