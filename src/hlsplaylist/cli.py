from typing import IO, Callable, Optional
from wsgiref.simple_server import make_server

import click

import hlsplaylist
from hlsplaylist.ads import strip_ads
from hlsplaylist.errors import ParseError
from hlsplaylist.m3u8 import MasterPlaylist, MediaPlaylist, parse_master, parse_media


def validate_within(
    minval: int, maxval: int
) -> Callable[[click.core.Context, str, int], int]:
    def _validator(ctx: click.core.Context, param: str, value: int) -> int:
        if minval <= value <= maxval:
            return value
        raise click.BadParameter(f"must be within {minval}-{maxval}")

    return _validator


def _read_master(master: IO[str]) -> MasterPlaylist:
    try:
        return parse_master(master.read())
    except ParseError as error:
        raise click.ClickException(f"Parse failed: {error}") from error


def _read_media(media: IO[str]) -> MediaPlaylist:
    try:
        return parse_media(media.read())
    except ParseError as error:
        raise click.ClickException(f"Parse failed: {error}") from error


@click.group("hlsplaylist", invoke_without_command=True)
@click.version_option(hlsplaylist.__version__)
@click.pass_context
@click.option("--host", help="Bind host", default="127.0.0.1", show_default=True)
@click.option(
    "-p",
    "--port",
    help="Bind port",
    default=8000,
    show_default=True,
    callback=validate_within(0, 65535),
)
def main(ctx: click.core.Context, host: str, port: int) -> None:
    """Serve the playlist API."""

    if ctx.invoked_subcommand is not None:
        return

    from hlsplaylist.app import app

    try:
        httpd = make_server(host, port, app)
    except OSError as error:
        raise click.ClickException(f"Bind failed: {error}") from error
    bind_host, bind_port = httpd.server_address
    click.echo(f"Running on http://{bind_host}:{bind_port}/")
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        httpd.server_close()


@main.command("renditions")
@click.argument("master", type=click.File("r"))
def renditions(master: IO[str]) -> None:
    """List rendition names of a master playlist."""
    for name in _read_master(master).rendition_names():
        click.echo(name)


@main.command("variant")
@click.argument("master", type=click.File("r"))
@click.option("--name", help="Rendition name, quotes included")
def variant(master: IO[str], name: Optional[str]) -> None:
    """Print a variant stream URI of a master playlist."""
    playlist = _read_master(master)
    if name is not None:
        uri = playlist.rendition_uri(name)
    else:
        uri = playlist.first_variant_uri()
    if uri is None:
        raise click.ClickException("No matching variant stream")
    click.echo(uri)


@main.command("segments")
@click.argument("media", type=click.File("r"))
def segments(media: IO[str]) -> None:
    """List segments of a media playlist."""
    for segment in _read_media(media).segments:
        click.echo(f"{segment.duration:.3f}\t{segment.title or ''}\t{segment.uri}")


@main.command("strip-ads")
@click.argument("media", type=click.File("r"))
@click.argument("output", type=click.File("wb"))
def strip_ads_command(media: IO[str], output: IO[bytes]) -> None:
    """Remove ad segments from a media playlist."""
    playlist = _read_media(media)
    removed = strip_ads(playlist)
    try:
        playlist.serialize(output)
    except ParseError as error:
        raise click.ClickException(f"Write failed: {error}") from error
    click.echo(f"Removed {removed} segment(s)", err=True)
