import os
import sys
import typing

import click
import rich
import rich.console
import rich.markup
import rich.table

import tgd
import tgd.core
import tgd.core.configuration
import tgd.core.file
import tgd.core.size
import tgd.log

logger = tgd.log.get_logger(__name__)

_pass_configuration = click.make_pass_decorator(tgd.core.configuration.Configuration)


@click.option(
    "--config",
    "-c",
    "config",
    envvar="TGD_CONFIG",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML configuration file.",
)
@click.option(
    "--log-level",
    "log_level",
    envvar="TGD_LOG_LEVEL",
    type=click.Choice(tgd.core.configuration.LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level, overrides the configuration file.",
)
@click.option(
    "--log-format",
    "log_format",
    envvar="TGD_LOG_FORMAT",
    type=click.Choice(tgd.core.configuration.LOG_FORMATS),
    default=None,
    help="Log format, overrides the configuration file.",
)
@click.group()
@click.pass_context
def main(
    ctx: click.Context,
    config: typing.Optional[str],
    log_level: typing.Optional[str],
    log_format: typing.Optional[str],
):
    overrides = {}
    if log_level is not None:
        overrides["level"] = log_level
    if log_format is not None:
        overrides["format"] = log_format

    try:
        configuration = tgd.core.configuration.load(config)
        if overrides:
            configuration = tgd.core.configuration.Configuration(
                {
                    **configuration.data,
                    "logging": {
                        **configuration.data["logging"],
                        **overrides,
                    },
                }
            )
    except tgd.core.configuration.InvalidConfigurationError as error:
        raise click.ClickException(str(error)) from error

    tgd.log.configure(configuration.log_level, configuration.log_format)
    tgd.core.size.select(configuration.size_strategy)

    ctx.obj = configuration


@main.command(name="size", help="Show the size of files, queried through their descriptors.")
@click.option(
    "--strategy",
    "strategy",
    envvar="TGD_SIZE_STRATEGY",
    type=click.Choice(tgd.core.size.STRATEGIES),
    default=None,
    help="Size query backend, overrides the configuration file.",
)
@click.option(
    "--bytes",
    "plain",
    is_flag=True,
    default=False,
    help="Print one bare byte count per line.",
)
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(),
)
@_pass_configuration
def _size(
    configuration: "tgd.core.configuration.Configuration",
    strategy: typing.Optional[str],
    plain: bool,
    paths: typing.Tuple[str, ...],
):
    if strategy is None:
        strategy = configuration.size_strategy

    table = rich.table.Table()

    table.add_column("Path")
    table.add_column("Descriptor", justify="right")
    table.add_column("Size", justify="right")

    console = rich.console.Console()
    failed = False

    for path in paths:
        try:
            with tgd.core.file.open(path, os.O_RDONLY) as handle:
                descriptor = handle.descriptor
                size = handle.size(strategy)
        except tgd.core.OsError as error:
            logger.warning("size_query_failed", path=path, errno=error.errno)
            click.echo("Error: {}".format(error), err=True)
            failed = True
            continue

        if plain:
            click.echo(size)
        else:
            table.add_row(rich.markup.escape(path), str(descriptor), str(size))

    if not plain and table.row_count > 0:
        console.print(table)

    if failed:
        sys.exit(1)


@main.command(name="config", help="Show the effective configuration.")
@_pass_configuration
def _config(
    configuration: "tgd.core.configuration.Configuration",
):
    configuration.dump(sys.stdout)
