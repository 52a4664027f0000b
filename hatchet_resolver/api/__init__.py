"""
Hatchet API access for hatchet-resolver.

This module handles everything that touches the wire:
    - query: Request kinds, endpoint table and URL construction
    - transport: Blocking HTTPS GET/POST over requests
    - models: Raw response shapes and parse()
    - auth: Access token providers for the send path

Usage:
    from hatchet_resolver.api import RequestKind, build_query, HttpTransport, parse, Artists

    transport = HttpTransport()
    url = build_query(RequestKind.ARTISTS, [("name", "Boards of Canada")])
    artists = parse(transport.get(url), Artists)
"""

from hatchet_resolver.api.auth import (
    AccessTokenProvider,
    StaticTokenProvider,
    TokenFileProvider,
)
from hatchet_resolver.api.models import (
    AlbumInfo,
    Albums,
    ArtistInfo,
    Artists,
    ChartItem,
    Charts,
    Image,
    PlaylistEntries,
    PlaylistEntry,
    PlaylistInfo,
    Playlists,
    Search,
    SearchItem,
    SocialActionInfo,
    SocialActionResponse,
    TrackInfo,
    Tracks,
    UserInfo,
    Users,
    index_by_id,
    parse,
)
from hatchet_resolver.api.query import (
    ENDPOINTS,
    PARAM_ARTIST_NAME,
    PARAM_AUTHORIZATION,
    PARAM_ID,
    PARAM_IDARRAY,
    PARAM_NAME,
    PARAM_TERM,
    RequestKind,
    build_query,
    to_params,
)
from hatchet_resolver.api.transport import HttpTransport

__all__ = [
    # Query
    "RequestKind",
    "ENDPOINTS",
    "build_query",
    "to_params",
    "PARAM_NAME",
    "PARAM_ID",
    "PARAM_IDARRAY",
    "PARAM_ARTIST_NAME",
    "PARAM_TERM",
    "PARAM_AUTHORIZATION",
    # Transport
    "HttpTransport",
    # Auth
    "AccessTokenProvider",
    "StaticTokenProvider",
    "TokenFileProvider",
    # Models
    "parse",
    "index_by_id",
    "Image",
    "ArtistInfo",
    "AlbumInfo",
    "TrackInfo",
    "UserInfo",
    "ChartItem",
    "PlaylistInfo",
    "PlaylistEntry",
    "SocialActionInfo",
    "SearchItem",
    "Users",
    "Artists",
    "Albums",
    "Tracks",
    "Charts",
    "Playlists",
    "PlaylistEntries",
    "Search",
    "SocialActionResponse",
]
