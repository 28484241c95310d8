"""CLI entrypoint for w3name."""

from pathlib import Path

import click

from . import __version__
from .errors import W3NameError
from .keys import load_key, save_key
from .logger import get_logger
from .name import Name, WritableName
from .revision import Revision
from .transport import BaseTransport, NameNotFound, client_factory

log = get_logger("w3name.cli")


def _client(ctx: click.Context) -> BaseTransport:
    if ctx.obj.get("client") is None:
        ctx.obj["client"] = client_factory()
    return ctx.obj["client"]


@click.group()
@click.version_option(__version__, prog_name="w3name")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level for messages on stderr (defaults to $W3NAME_LOG_LEVEL or INFO)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """w3name - publish and resolve signed name records."""
    ctx.ensure_object(dict)
    if log_level:
        get_logger(level=log_level.upper())


@cli.command()
@click.argument("name")
@click.pass_context
def resolve(ctx: click.Context, name: str) -> None:
    """Print the current value published for NAME."""
    try:
        revision = _client(ctx).resolve(Name.parse(name))
    except NameNotFound as e:
        raise click.ClickException(f"no record published for {name}") from e
    except W3NameError as e:
        raise click.ClickException(str(e)) from e
    click.echo(revision.value)


@cli.command()
@click.option(
    "--key",
    "key_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Key file created by `w3name create`",
)
@click.option("--value", required=True, help="Value to publish")
@click.pass_context
def publish(ctx: click.Context, key_file: Path, value: str) -> None:
    """Publish VALUE as the next revision of the key's name.

    The current revision is resolved first; an unpublished name starts at
    sequence 0.
    """
    client = _client(ctx)
    try:
        writable = load_key(key_file)
        name = writable.to_name()
        try:
            revision = client.resolve(name).increment(value)
        except NameNotFound:
            log.info(f"[CLI] no record for {name}, publishing first revision")
            revision = Revision.v0(name, value)
        client.publish(writable, revision)
    except W3NameError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"{name} {revision.sequence}")


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write the private key (defaults to <name>.key)",
)
def create(output: Path | None) -> None:
    """Create a new name and save its private key."""
    writable = WritableName.new()
    try:
        path = save_key(writable, output or Path(f"{writable}.key"))
    except FileExistsError as e:
        raise click.ClickException(f"{e.filename} already exists, refusing to overwrite") from e
    log.debug(f"[CLI] wrote key for {writable} to {path}")
    click.echo(str(writable))


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
