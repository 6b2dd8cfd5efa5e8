"""Command line front end: run column data through a configured external program."""

import logging
from typing import Optional

import click
from dotenv import load_dotenv

from pipefilter.config.provider import ConfigProvider, EnvConfigProvider, YamlConfigProvider
from pipefilter.logging_config import setup_logging
from pipefilter.modules.transformations.errors import TransformationError
from pipefilter.modules.transformations.options import parse_option_string
from pipefilter.modules.transformations.text_plain_external import TextPlainExternal

load_dotenv()

logger = logging.getLogger("pipefilter.cli")


def _get_provider(config_path: Optional[str]) -> ConfigProvider:
    if config_path:
        return YamlConfigProvider(config_path)
    return EnvConfigProvider()


def _build_plugin(config_path: Optional[str]) -> TextPlainExternal:
    provider = _get_provider(config_path)
    setup_logging(provider.get_logging_config().level)
    return TextPlainExternal.from_config(provider.get_transformation_config())


@click.group()
def main():
    """Pipe column data through administrator-approved external programs."""


@main.command()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="YAML configuration file (defaults to environment settings)")
@click.option("--options", "option_string", default="",
              help="Transformation options, e.g. \"0,'',1,1\"")
@click.option("--input", "input_file", type=click.File("rb"), default="-",
              help="File to transform (defaults to stdin)")
def run(config_path: Optional[str], option_string: str, input_file):
    """Transform INPUT and write the result to stdout."""
    try:
        plugin = _build_plugin(config_path)
        buffer = input_file.read()
        result = plugin.run(buffer, parse_option_string(option_string))
    except TransformationError as e:
        raise click.ClickException(str(e))

    if result.is_passthrough:
        logger.info("No external programs configured, input passed through unchanged")

    click.echo(result.text, nl=False)


@main.command()
def info():
    """Describe the external transformation."""
    click.echo(f"{TextPlainExternal.get_name()} ({TextPlainExternal.get_mime()})")
    click.echo(TextPlainExternal.get_info())


@main.command()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="YAML configuration file (defaults to environment settings)")
def programs(config_path: Optional[str]):
    """List the programs available to the external transformation."""
    try:
        registry = _get_provider(config_path).get_transformation_config().build_registry()
    except TransformationError as e:
        raise click.ClickException(str(e))

    if not registry:
        click.echo("No programs configured")
        return

    for entry in registry:
        click.echo(f"{entry.index}: {entry.command_line}")


if __name__ == "__main__":
    main()
