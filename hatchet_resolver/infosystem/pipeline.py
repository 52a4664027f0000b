"""
Fetch-parse-join pipeline.

One function per request family. Each issues its GETs synchronously on
the calling worker, parses every body into a raw shape and joins
denormalized references into a Resolution:

    Simple kinds       one GET, one parse, the envelope is the result
    Identity kinds     same, scoped to the caller's user id; fail fast
                       when the id is unknown
    Two-hop joins      artist by name -> artist albums / top hits,
                       then one batched tracks GET per album
    Album detail       album -> cover image + one batched tracks GET
    Loved items        the caller's loved-items entries, keyed by playlist

Any TransportError or ParseError propagates and aborts the whole chain
for the request; there is no partial result and no retry here.
"""

from dataclasses import dataclass
from typing import Protocol

from hatchet_resolver.api.models import (
    Albums,
    ArtistInfo,
    Artists,
    ChartItem,
    Charts,
    PlaylistEntries,
    Playlists,
    Tracks,
    Users,
    index_by_id,
    parse,
)
from hatchet_resolver.api.query import (
    API_VERSION,
    BASE_URL,
    PARAM_ID,
    PARAM_IDARRAY,
    Params,
    RequestKind,
    build_query,
)
from hatchet_resolver.core.exceptions import IdentityUnavailableError
from hatchet_resolver.core.logger import get_logger
from hatchet_resolver.domain.convert import first_ref
from hatchet_resolver.domain.models import LOVED_ITEMS_PLAYLIST_ID
from hatchet_resolver.infosystem.identity import IdentityService
from hatchet_resolver.infosystem.request import InfoRequest, Resolution

logger = get_logger(__name__)


# Result map categories
TRACKS = "tracks"
IMAGES = "images"
ENTRIES = "entries"


class Transport(Protocol):
    def get(self, url: str) -> str: ...


@dataclass
class FetchContext:
    """
    Collaborators shared by every fetch function.

    Attributes:
        transport: Blocking HTTP client.
        identity: Resolver of the caller's user id.
        base_url: API scheme and host.
        version: API version path segment.
    """
    transport: Transport
    identity: IdentityService
    base_url: str = BASE_URL
    version: str = API_VERSION

    def fetch(self, kind: RequestKind, params: Params, shape: type):
        """Build the URL for kind, GET it and parse the body into shape."""
        url = build_query(kind, params, self.base_url, self.version)
        return parse(self.transport.get(url), shape)

    def fetch_tracks(self, track_ids: tuple[str, ...]) -> Tracks:
        """Fetch a batch of tracks in one request (repeated ids[] params)."""
        return self.fetch(
            RequestKind.TRACKS,
            tuple((PARAM_IDARRAY, track_id) for track_id in track_ids),
            Tracks
        )

    def require_user_id(self, request: InfoRequest) -> str:
        user_id = self.identity.get()
        if not user_id:
            raise IdentityUnavailableError(
                f"No user id known for identity-scoped {request.kind.name} request",
                details={"request_id": request.id, "kind": request.kind.name}
            )
        return user_id


def fetch_simple(ctx: FetchContext, request: InfoRequest, shape: type) -> Resolution:
    """One GET with the request's own parameters; the envelope is the result."""
    return Resolution(info_result=ctx.fetch(request.kind, request.params, shape))


def fetch_self(ctx: FetchContext, request: InfoRequest) -> Resolution:
    user_id = ctx.require_user_id(request)
    users = ctx.fetch(RequestKind.USERS, ((PARAM_IDARRAY, user_id),), Users)
    return Resolution(info_result=users)


def fetch_user_playlists(ctx: FetchContext, request: InfoRequest) -> Resolution:
    user_id = ctx.require_user_id(request)
    params = ((PARAM_ID, user_id),) + tuple(p for p in request.params if p[0] != PARAM_ID)
    return Resolution(info_result=ctx.fetch(RequestKind.USERS_PLAYLISTS, params, Playlists))


def fetch_loved_items(ctx: FetchContext, request: InfoRequest) -> Resolution:
    """
    Fetch the caller's loved items.

    The single entries object is stored under its own playlist's id, a
    map of at most one element, like every other map-valued result.
    """
    user_id = ctx.require_user_id(request)
    entries = ctx.fetch(RequestKind.USERS_LOVEDITEMS, ((PARAM_ID, user_id),), PlaylistEntries)

    key = entries.playlist.id if entries.playlist is not None else LOVED_ITEMS_PLAYLIST_ID
    return Resolution(
        info_result=entries,
        result_map={ENTRIES: {key: entries}},
        entities={key: entries.playlist},
    )


def _first_artist(ctx: FetchContext, request: InfoRequest) -> ArtistInfo | None:
    artists = ctx.fetch(RequestKind.ARTISTS, request.params, Artists)
    return artists.artists[0] if artists.artists else None


def fetch_artist_albums(ctx: FetchContext, request: InfoRequest) -> Resolution:
    """
    Artist -> albums two-hop join.

    1. GET the artist by the request's parameters, keep the first match
       (none found: success with empty output)
    2. GET the artist's album chart
    3. Index the chart's images
    4. Per album: resolve its first image; batch-fetch its tracks

    Ordering of the albums is not significant.
    """
    artist = _first_artist(ctx, request)
    if artist is None:
        logger.debug(f"No artist found for request {request.id}")
        return Resolution(info_result=None)

    charts = ctx.fetch(RequestKind.ARTISTS_ALBUMS, ((PARAM_ID, artist.id),), Charts)
    image_map = index_by_id(charts.images)

    tracks_map: dict[str, Tracks] = {}
    images: dict = {}
    entities: dict = {}
    for album_info in charts.albums:
        entities[album_info.id] = album_info
        image = first_ref(album_info.images, image_map)
        if image is not None:
            images[album_info.id] = image
        if album_info.tracks:
            tracks_map[album_info.id] = ctx.fetch_tracks(album_info.tracks)

    return Resolution(
        info_result=artist,
        result_map={TRACKS: tracks_map, IMAGES: images},
        entities=entities,
    )


def chart_key(item: ChartItem, position: int) -> str:
    """Stable key of a chart item: its id, or its 1-based position."""
    return item.id or f"rank:{position + 1}"


def fetch_artist_top_hits(ctx: FetchContext, request: InfoRequest) -> Resolution:
    """
    Artist -> top hits two-hop join.

    The resulting map preserves chart order. Chart items whose track is
    missing from the side table map to None.
    """
    artist = _first_artist(ctx, request)
    if artist is None:
        logger.debug(f"No artist found for request {request.id}")
        return Resolution(info_result=None)

    charts = ctx.fetch(RequestKind.ARTISTS_TOPHITS, ((PARAM_ID, artist.id),), Charts)
    track_map = index_by_id(charts.tracks)

    tracks: dict = {}
    entities: dict = {}
    for position, item in enumerate(charts.chart_items):
        key = chart_key(item, position)
        entities[key] = item
        tracks[key] = track_map.get(item.track) if item.track else None

    return Resolution(
        info_result=artist,
        result_map={TRACKS: tracks},
        entities=entities,
    )


def fetch_album(ctx: FetchContext, request: InfoRequest) -> Resolution:
    """
    Album detail: first matching album, its cover and its tracks.

    An empty images list skips the image lookup; no track ids skips the
    tracks GET.
    """
    albums = ctx.fetch(RequestKind.ALBUMS, request.params, Albums)
    if not albums.albums:
        return Resolution(info_result=None)

    album_info = albums.albums[0]
    image_map = index_by_id(albums.images)

    images: dict = {}
    image = first_ref(album_info.images, image_map)
    if image is not None:
        images[album_info.id] = image

    tracks_map: dict[str, Tracks] = {}
    if album_info.tracks:
        tracks_map[album_info.id] = ctx.fetch_tracks(album_info.tracks)

    return Resolution(
        info_result=album_info,
        result_map={IMAGES: images, TRACKS: tracks_map},
        entities={album_info.id: album_info},
    )
