"""Root CLI group for graphtoll with global flags and command registration."""

from __future__ import annotations

import click

from graphtoll import __version__
from graphtoll.commands import register_commands
from graphtoll.commands._context import AppContext
from graphtoll.config.settings import GraphtollSettings


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"], "max_content_width": 100},
)
@click.version_option(version=__version__, prog_name="graphtoll")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON on stdout.")
@click.option("-q", "--quiet", is_flag=True, help="Print only ids (or OK) for scripting.")
@click.option("-v", "--verbose", is_flag=True, help="Show timing spans and debug logs.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    help="Use this graphtoll.toml instead of searching for one.",
)
@click.option("--principal", default=None, help="Identity to act as (pays for graphs and paths).")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    principal: str | None,
) -> None:
    """graphtoll — token-metered weighted graphs and shortest paths."""
    settings = GraphtollSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        principal=principal,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
