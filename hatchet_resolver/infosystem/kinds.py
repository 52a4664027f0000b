"""
The request kind table.

Every RequestKind has exactly one KindHandler describing how it is
served: its endpoint, the shape its response parses into, the function
that fetches and joins it, and the optional conversion and fill steps.
The dispatcher consults this table instead of branching on the kind.

Send kinds (POST) have no fetch function; resolvable kinds (GET) have
no POST endpoint. handler_for() raises QueryError for a kind missing
from the table.
"""

from dataclasses import dataclass
from functools import partial
from typing import Callable

from hatchet_resolver.api.models import (
    Artists,
    PlaylistEntries,
    SocialActionResponse,
    Search,
    Tracks,
    Users,
)
from hatchet_resolver.api.query import ENDPOINTS, Endpoint, RequestKind
from hatchet_resolver.core.exceptions import QueryError
from hatchet_resolver.infosystem import conversion, pipeline
from hatchet_resolver.infosystem.executor import Priority


@dataclass(frozen=True)
class KindHandler:
    """
    How one request kind is served.

    Attributes:
        kind: The request kind.
        fetch: (FetchContext, InfoRequest) -> Resolution, or None for send kinds.
        convert: Resolution -> {category: [domain objects]}, or None.
        fill: (target, Resolution) -> None, or None when the kind fills nothing.
        priority: Executor lane the work unit is submitted to.
        identity_scoped: True when the kind needs the caller's user id.
    """
    kind: RequestKind
    fetch: Callable | None = None
    convert: Callable | None = None
    fill: Callable | None = None
    priority: Priority = Priority.LOW
    identity_scoped: bool = False

    @property
    def endpoint(self) -> Endpoint:
        return ENDPOINTS[self.kind]

    @property
    def sendable(self) -> bool:
        return self.endpoint.method == "POST"


KIND_TABLE: dict[RequestKind, KindHandler] = {
    handler.kind: handler for handler in (
        KindHandler(
            RequestKind.USERS,
            fetch=partial(pipeline.fetch_simple, shape=Users),
            fill=conversion.fill_user,
        ),
        KindHandler(
            RequestKind.USERS_SELF,
            fetch=pipeline.fetch_self,
            convert=conversion.convert_self,
            fill=conversion.fill_user,
            identity_scoped=True,
        ),
        KindHandler(
            RequestKind.USERS_PLAYLISTS,
            fetch=pipeline.fetch_user_playlists,
            convert=conversion.convert_playlists,
            identity_scoped=True,
        ),
        KindHandler(
            RequestKind.USERS_LOVEDITEMS,
            fetch=pipeline.fetch_loved_items,
            convert=conversion.convert_loved_items,
            identity_scoped=True,
        ),
        KindHandler(
            RequestKind.USERS_SOCIALACTIONS,
            fetch=partial(pipeline.fetch_simple, shape=SocialActionResponse),
            fill=conversion.fill_social_actions,
        ),
        KindHandler(
            RequestKind.USERS_FRIENDSFEED,
            fetch=partial(pipeline.fetch_simple, shape=SocialActionResponse),
            fill=conversion.fill_friends_feed,
        ),
        KindHandler(
            RequestKind.PLAYLISTS_ENTRIES,
            fetch=partial(pipeline.fetch_simple, shape=PlaylistEntries),
            convert=conversion.convert_playlist_entries,
        ),
        KindHandler(
            RequestKind.ARTISTS,
            fetch=partial(pipeline.fetch_simple, shape=Artists),
            convert=conversion.convert_artists,
            fill=conversion.fill_artist,
        ),
        KindHandler(
            RequestKind.ARTISTS_ALBUMS,
            fetch=pipeline.fetch_artist_albums,
            fill=conversion.fill_artist_albums,
        ),
        KindHandler(
            RequestKind.ARTISTS_TOPHITS,
            fetch=pipeline.fetch_artist_top_hits,
            fill=conversion.fill_artist_top_hits,
            priority=Priority.HIGH,
        ),
        KindHandler(
            RequestKind.TRACKS,
            fetch=partial(pipeline.fetch_simple, shape=Tracks),
        ),
        KindHandler(
            RequestKind.ALBUMS,
            fetch=pipeline.fetch_album,
            fill=conversion.fill_album,
        ),
        KindHandler(
            RequestKind.SEARCHES,
            fetch=partial(pipeline.fetch_simple, shape=Search),
            convert=conversion.convert_search,
        ),
        KindHandler(RequestKind.PLAYBACKLOGENTRIES),
        KindHandler(RequestKind.PLAYBACKLOGENTRIES_NOWPLAYING),
        KindHandler(RequestKind.SOCIALACTIONS),
    )
}


def handler_for(kind: RequestKind) -> KindHandler:
    """
    Look up the handler of a kind.

    Raises:
        QueryError: If the kind is not in the table.
    """
    try:
        return KIND_TABLE[kind]
    except KeyError:
        raise QueryError(
            f"Unsupported request kind: {kind}",
            details={"kind": str(kind)}
        ) from None
