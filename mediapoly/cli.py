"""mediapoly CLI entry point: Click group with subcommands."""

from __future__ import annotations

import logging
import time

import click
from conterm.pretty import Markup

from mediapoly import __version__
from mediapoly.config import default_options
from mediapoly.css.compiler import CSSCompiler
from mediapoly.css.media import MalformedWidthError, extract_rules
from mediapoly.reactor import MediaQuery
from mediapoly.rules import active_rules
from mediapoly.surface import FileStylesheet, InlineStylesheet, Surface, TerminalSurface


def _stylesheets(files: tuple[str, ...]) -> list:
    """An empty base stylesheet followed by each given file.

    Raises
        click.ClickException: When a file can not be read or decoded.
    """
    stylesheets = [FileStylesheet(path) for path in files]
    for stylesheet in stylesheets:
        try:
            stylesheet.read()
        except (OSError, UnicodeDecodeError, LookupError) as exc:
            raise click.ClickException(f"Could not read {stylesheet.path}: {exc}") from exc
    return [InlineStylesheet("", name="base"), *stylesheets]


@click.group()
@click.version_option(version=__version__, prog_name="mediapoly")
@click.option("-v", "--verbose", is_flag=True, help="Log every step of the engine.")
def cli(verbose: bool) -> None:
    """mediapoly - min-width/max-width media queries for sized surfaces."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
def rules(files: tuple[str, ...]) -> None:
    """List the media rules parsed from each stylesheet."""
    for path in files:
        try:
            found = extract_rules(FileStylesheet(path).read())
        except (OSError, UnicodeDecodeError, LookupError) as exc:
            raise click.ClickException(f"Could not read {path}: {exc}") from exc

        click.echo(f"{path}: {len(found)} rule(s)")
        for rule in found:
            click.echo(
                f"  {rule.condition or '<none>'}"
                f"  min={rule.min_width or '-'} max={rule.max_width or '-'}"
            )
            for line in rule.body.splitlines():
                click.echo(f"    {line}")


@cli.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--width", "-w", type=float, required=True, help="Surface width in pixels.")
@click.option("--rem", type=float, default=None, help="Pixels per rem.")
def match(files: tuple[str, ...], width: float, rem: float | None) -> None:
    """Print the stylesheet generated for a surface of the given width."""
    options = {} if rem is None else {"rem": rem}
    query = MediaQuery(CSSCompiler(), options=options)
    surface = Surface(width, 0, _stylesheets(files))

    query.load_stylesheets(surface)

    try:
        active = active_rules(query.store, width, query.options["rem"])
    except MalformedWidthError as exc:
        raise click.ClickException(str(exc)) from exc
    if len(active) == 0:
        return

    if (stylesheet := query.apply(surface)) is None:
        raise click.ClickException("Generated stylesheet could not be compiled")
    click.echo(stylesheet.read(), nl=False)


@cli.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--interval", type=float, default=None, help="Seconds between size checks.")
def watch(files: tuple[str, ...], interval: float | None) -> None:
    """Print the generated stylesheet each time the terminal is resized."""
    options = default_options({} if interval is None else {"interval": interval})
    query = MediaQuery(CSSCompiler(), options=options)
    surface = TerminalSurface(_stylesheets(files))

    previous = None
    first = True
    try:
        while True:
            query.on_update(surface)
            current = surface.find(query.generated_name)
            source = None if current is None else current.read()
            if first or source != previous:
                first = False
                previous = source
                (width, height) = surface.size
                click.echo(Markup.parse(f"[blue]{width}x{height}"))
                click.echo(source if source is not None else "(no active rules)")
            time.sleep(options["interval"])
    except KeyboardInterrupt:
        return
