"""
Command-line interface for hatchet-resolver.

This module implements the CLI using Click, with rich-click for the
help output colors. Every command builds a resolver from config.yaml,
submits one request, waits for its outcome and prints a summary.

Commands:
    hatchet artist <name>                       Artist info
    hatchet albums <name>                       Artist albums with their tracks
    hatchet top-hits <name>                     Artist top hits in chart order
    hatchet album <name> --artist <artist>      Album detail with tracks
    hatchet search <term>                       Albums, artists and users matching term
    hatchet user <name>                         Public profile of a user
    hatchet me                                  Your own profile
    hatchet playlists                           Your playlists
    hatchet loved                               Your loved items
    hatchet now-playing --payload <file.json>   Send a now-playing entry

Options:
    --config <path>                             Use this config.yaml instead of ./config.yaml

Exit codes:
    0    Request done
    1    Configuration or unexpected error
    2    Account store error
    3    Malformed request
    4    Other resolver error
    5    Request not done (see the failed_requests log)
    130  Interrupted

Configuration:
    See hatchet_resolver.core.config. The commands 'me', 'playlists',
    'loved' need account.user_name (or a stored user id); 'now-playing'
    needs an access token (HATCHET_ACCESS_TOKEN or account.token_file).
"""

import sys
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FuturesTimeoutError
from pathlib import Path
from typing import Any, Optional

import rich_click as click
from tqdm import tqdm

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100
click.rich_click.COMMAND_GROUPS = {
    "hatchet": [
        {
            "name": "Catalog",
            "commands": ["artist", "albums", "top-hits", "album", "search", "user"],
        },
        {
            "name": "Your Account",
            "commands": ["me", "playlists", "loved", "now-playing"],
        },
    ],
}

from hatchet_resolver import __version__
from hatchet_resolver.api.query import (
    PARAM_ARTIST_NAME,
    PARAM_NAME,
    PARAM_TERM,
    RequestKind,
)
from hatchet_resolver.core import (
    AccountStoreError,
    ConfigError,
    HatchetResolverError,
    QueryError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from hatchet_resolver.domain.models import Album, Artist, Playlist, Track, User
from hatchet_resolver.engine import build_engine
from hatchet_resolver.infosystem.conversion import ALBUMS, ARTISTS, PLAYLISTS, USERS
from hatchet_resolver.infosystem.request import InfoRequest, RequestOutcome

logger = get_logger(__name__)


# Seconds between spinner refreshes while waiting for an outcome
SPINNER_INTERVAL = 0.1

EXIT_NOT_DONE = 5


@click.group(invoke_without_command=True)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml)"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], version: bool) -> None:
    """
    hatchet-resolver: Resolve music metadata from the Hatchet API.

    \b
    CATALOG:
        hatchet artist "Boards of Canada"
        hatchet top-hits "Boards of Canada"
        hatchet album "Geogaddi" --artist "Boards of Canada"
        hatchet search "geogaddi"

    \b
    YOUR ACCOUNT:
        hatchet me
        hatchet loved
        hatchet now-playing --payload entry.json
    """
    if version:
        click.echo(f"hatchet-resolver {__version__}")
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


# =========================================================================
# Catalog commands
# =========================================================================


@cli.command()
@click.argument("name")
@click.pass_context
def artist(ctx: click.Context, name: str) -> None:
    """Show basic information about an artist."""
    target = Artist(name=name)
    _resolve(ctx, InfoRequest.create(RequestKind.ARTISTS, {PARAM_NAME: name}), target)

    click.echo(f"{target.name} [{target.id or '?'}]")
    if target.wiki_abstract:
        click.echo(target.wiki_abstract)
    if target.image is not None and target.image.url:
        click.echo(f"Image: {target.image.url}")


@cli.command()
@click.argument("name")
@click.pass_context
def albums(ctx: click.Context, name: str) -> None:
    """List an artist's albums with their tracks."""
    target = Artist(name=name)
    _resolve(ctx, InfoRequest.create(RequestKind.ARTISTS_ALBUMS, {PARAM_NAME: name}), target)

    if not target.albums:
        click.echo(f"No albums found for {name}")
        return
    for album_obj in target.albums.values():
        _echo_album(album_obj)


@cli.command("top-hits")
@click.argument("name")
@click.pass_context
def top_hits(ctx: click.Context, name: str) -> None:
    """List an artist's top hits in chart order."""
    target = Artist(name=name)
    _resolve(ctx, InfoRequest.create(RequestKind.ARTISTS_TOPHITS, {PARAM_NAME: name}), target)

    if not target.top_hits:
        click.echo(f"No top hits found for {name}")
        return
    for rank, track in enumerate(target.top_hits, start=1):
        click.echo(f"{rank:3d}. {_track_line(track)}")


@cli.command()
@click.argument("name")
@click.option(
    "--artist", "artist_name",
    required=True,
    metavar="<artist>",
    help="Name of the album's artist"
)
@click.pass_context
def album(ctx: click.Context, name: str, artist_name: str) -> None:
    """Show an album with its cover and tracks."""
    target = Album(name=name, artist_name=artist_name)
    request = InfoRequest.create(
        RequestKind.ALBUMS,
        {PARAM_NAME: name, PARAM_ARTIST_NAME: artist_name}
    )
    _resolve(ctx, request, target)
    _echo_album(target)


@cli.command()
@click.argument("term")
@click.pass_context
def search(ctx: click.Context, term: str) -> None:
    """Search albums, artists and users."""
    outcome = _resolve(ctx, InfoRequest.create(RequestKind.SEARCHES, {PARAM_TERM: term}))
    converted = outcome.resolution.converted

    for artist_obj in converted.get(ARTISTS, []):
        click.echo(f"artist  {artist_obj.name}")
    for album_obj in converted.get(ALBUMS, []):
        click.echo(f"album   {album_obj.name} - {album_obj.artist_name}")
    for user_obj in converted.get(USERS, []):
        click.echo(f"user    {user_obj.name}")


@cli.command()
@click.argument("name")
@click.pass_context
def user(ctx: click.Context, name: str) -> None:
    """Show the public profile of a user."""
    target = User(name=name)
    _resolve(ctx, InfoRequest.create(RequestKind.USERS, {PARAM_NAME: name}), target)
    _echo_user(target)


# =========================================================================
# Account commands
# =========================================================================


@cli.command()
@click.pass_context
def me(ctx: click.Context) -> None:
    """Show your own profile."""
    outcome = _resolve(ctx, InfoRequest.create(RequestKind.USERS_SELF))
    users = outcome.resolution.converted.get(USERS, [])
    if not users:
        click.echo("Profile not found")
        return
    _echo_user(users[0])


@cli.command()
@click.pass_context
def playlists(ctx: click.Context) -> None:
    """List your playlists."""
    outcome = _resolve(ctx, InfoRequest.create(RequestKind.USERS_PLAYLISTS))
    for playlist in outcome.resolution.converted.get(PLAYLISTS, []):
        click.echo(f"{playlist.name} [{playlist.id}]")


@cli.command()
@click.pass_context
def loved(ctx: click.Context) -> None:
    """List your loved items."""
    outcome = _resolve(ctx, InfoRequest.create(RequestKind.USERS_LOVEDITEMS))
    found: list[Playlist] = outcome.resolution.converted.get(PLAYLISTS, [])
    if not found or not found[0].tracks:
        click.echo("No loved items")
        return
    for track in found[0].tracks:
        click.echo(_track_line(track))


@cli.command("now-playing")
@click.option(
    "--payload",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    metavar="<file.json>",
    help="JSON document to send as the now-playing entry"
)
@click.pass_context
def now_playing(ctx: click.Context, payload: Path) -> None:
    """Send a now-playing entry."""
    body = payload.read_text(encoding="utf-8")
    request = InfoRequest.create(RequestKind.PLAYBACKLOGENTRIES_NOWPLAYING, payload=body)
    _run(ctx, request, send=True)
    click.echo("Now playing sent")


# =========================================================================
# Helpers
# =========================================================================


def _resolve(ctx: click.Context, request: InfoRequest, fill_target: Any = None) -> RequestOutcome:
    return _run(ctx, request, fill_target=fill_target)


def _run(
    ctx: click.Context,
    request: InfoRequest,
    fill_target: Any = None,
    send: bool = False
) -> RequestOutcome:
    """
    Dispatch one request and wait for its outcome.

    This is the orchestration shared by every command:
    1. Load configuration
    2. Set up logging
    3. Build the engine
    4. Submit the request and wait with a spinner
    5. Shut everything down

    Raises:
        SystemExit: On errors and on requests that were not done.
    """
    engine = None
    try:
        config = load_config(ctx.obj.get("config_path"))
        setup_logging(config.logging.directory, config.logging.level)
        logger.debug(f"hatchet-resolver {__version__}: {request.kind.name}")

        engine = build_engine(config)
        if send:
            future = engine.dispatcher.send(request)
        else:
            future = engine.dispatcher.resolve(request, fill_target=fill_target)
        outcome = _wait(future, request.kind.name.lower().replace("_", " "))

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    except AccountStoreError as e:
        click.echo(f"Account store error: {e.message}", err=True)
        logger.error(f"Account store error: {e.message}", exc_info=True)
        sys.exit(2)

    except QueryError as e:
        click.echo(f"Malformed request: {e.message}", err=True)
        sys.exit(3)

    except HatchetResolverError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        sys.exit(4)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        sys.exit(130)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)

    finally:
        if engine is not None:
            engine.close()
        shutdown_logging()

    if not outcome.done:
        click.echo(
            f"{request.kind.name} not done ({outcome.status.value}): {outcome.error}",
            err=True
        )
        sys.exit(EXIT_NOT_DONE)
    return outcome


def _wait(future: Future, label: str) -> RequestOutcome:
    """Block on future, showing an elapsed-time spinner on stderr."""
    with tqdm(desc=label, bar_format="{desc}: {elapsed}", leave=False, file=sys.stderr, disable=None) as bar:
        while True:
            try:
                return future.result(timeout=SPINNER_INTERVAL)
            except FuturesTimeoutError:
                bar.refresh()


def _track_line(track: Track) -> str:
    line = f"{track.name} - {track.artist_name}"
    if track.duration:
        line += f" ({track.duration_str})"
    return line


def _echo_album(album_obj: Album) -> None:
    header = album_obj.name
    if album_obj.release_date:
        header += f" ({album_obj.release_date})"
    click.echo(header)
    for number, track in enumerate(album_obj.tracks, start=1):
        click.echo(f"  {number:2d}. {_track_line(track)}")


def _echo_user(user_obj: User) -> None:
    click.echo(f"{user_obj.name} [{user_obj.id or '?'}]")
    if user_obj.about:
        click.echo(user_obj.about)
    click.echo(
        f"Followers: {user_obj.followers_count}  Following: {user_obj.follows_count}  "
        f"Plays: {user_obj.total_plays}  Playlists: {user_obj.playlists_count}"
    )
    if user_obj.now_playing is not None:
        click.echo(f"Now playing: {_track_line(user_obj.now_playing)}")


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `hatchet` from the command line.
    """
    cli()


if __name__ == "__main__":
    main()
