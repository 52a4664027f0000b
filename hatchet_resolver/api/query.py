"""
Endpoint construction for the Hatchet REST API.

Every request kind maps to one endpoint below the versioned base path.
Some endpoints embed an identifier in the path (the playlists of user U,
the top hits of artist A); for those, the FIRST value of the designated
parameter key is spliced into the path and every value of that key is
removed before the leftover parameters are appended as a query string.

Parameters form an ordered multimap: a sequence of (key, value) pairs
where keys may repeat. Repeated "ids[]" pairs are how the API fetches a
batch of entities in a single request:

    build_query(RequestKind.TRACKS, [("ids[]", "T1"), ("ids[]", "T2")])
    -> "https://api.hatchet.is/v1/tracks/?ids[]=T1&ids[]=T2"

build_query() is pure: no I/O, same input, same URL.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Sequence
from urllib.parse import quote, quote_plus

from hatchet_resolver.core.exceptions import QueryError


BASE_URL = "https://api.hatchet.is"
API_VERSION = "v1"

PARAM_NAME = "name"
PARAM_ID = "id"
PARAM_IDARRAY = "ids[]"
PARAM_ARTIST_NAME = "artist_name"
PARAM_TERM = "term"
PARAM_AUTHORIZATION = "authorization"

Params = Sequence[tuple[str, str]]


class RequestKind(Enum):
    """Operations the resolver knows how to fetch or send."""
    USERS = "users"
    USERS_SELF = "users_self"
    USERS_PLAYLISTS = "users_playlists"
    USERS_LOVEDITEMS = "users_loveditems"
    USERS_SOCIALACTIONS = "users_socialactions"
    USERS_FRIENDSFEED = "users_friendsfeed"
    PLAYLISTS_ENTRIES = "playlists_entries"
    ARTISTS = "artists"
    ARTISTS_ALBUMS = "artists_albums"
    ARTISTS_TOPHITS = "artists_tophits"
    TRACKS = "tracks"
    ALBUMS = "albums"
    SEARCHES = "searches"
    PLAYBACKLOGENTRIES = "playbacklogentries"
    PLAYBACKLOGENTRIES_NOWPLAYING = "playbacklogentries_nowplaying"
    SOCIALACTIONS = "socialactions"


@dataclass(frozen=True)
class Endpoint:
    """
    Path template of one request kind.

    Attributes:
        path: Path below "{base_url}/{version}/". May contain "{id}".
        path_param: Parameter key whose first value fills "{id}", or None.
        method: "GET" for resolvable kinds, "POST" for sendable ones.
    """
    path: str
    path_param: str | None = None
    method: str = "GET"


ENDPOINTS: dict[RequestKind, Endpoint] = {
    RequestKind.USERS: Endpoint("users/"),
    # Self lookups go through the plain users endpoint with ids[]=<self>
    RequestKind.USERS_SELF: Endpoint("users/"),
    RequestKind.USERS_PLAYLISTS: Endpoint("users/{id}/playlists", PARAM_ID),
    RequestKind.USERS_LOVEDITEMS: Endpoint("users/{id}/lovedItems", PARAM_ID),
    RequestKind.USERS_SOCIALACTIONS: Endpoint("users/{id}/socialActions", PARAM_ID),
    RequestKind.USERS_FRIENDSFEED: Endpoint("users/{id}/friendsFeed", PARAM_ID),
    RequestKind.PLAYLISTS_ENTRIES: Endpoint("playlists/{id}/entries", PARAM_ID),
    RequestKind.ARTISTS: Endpoint("artists/"),
    RequestKind.ARTISTS_ALBUMS: Endpoint("artists/{id}/albums/", PARAM_ID),
    RequestKind.ARTISTS_TOPHITS: Endpoint("artists/{id}/topHits/", PARAM_ID),
    RequestKind.TRACKS: Endpoint("tracks/"),
    RequestKind.ALBUMS: Endpoint("albums/"),
    RequestKind.SEARCHES: Endpoint("searches/"),
    RequestKind.PLAYBACKLOGENTRIES: Endpoint("playbackLogEntries/", method="POST"),
    RequestKind.PLAYBACKLOGENTRIES_NOWPLAYING: Endpoint(
        "playbackLogEntries/nowplaying/", method="POST"
    ),
    RequestKind.SOCIALACTIONS: Endpoint("socialActions/", method="POST"),
}


def to_params(
    values: Mapping[str, str | Iterable[str]] | Params | None
) -> tuple[tuple[str, str], ...]:
    """
    Normalize caller input into an immutable ordered multimap.

    A mapping value that is any non-string iterable expands into one pair
    per item, so {"ids[]": ["T1", "T2"]} becomes (("ids[]", "T1"), ("ids[]", "T2")).

    Example:
        to_params({"name": "Boards of Canada"})
        -> (("name", "Boards of Canada"),)
    """
    if values is None:
        return ()

    if isinstance(values, Mapping):
        pairs: list[tuple[str, str]] = []
        for key, value in values.items():
            if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
                pairs.extend((key, str(item)) for item in value)
            else:
                pairs.append((key, str(value)))
        return tuple(pairs)

    return tuple((str(key), str(value)) for key, value in values)


def first_param(params: Params, key: str) -> str | None:
    """Return the first value stored under key, or None."""
    for param_key, value in params:
        if param_key == key:
            return value
    return None


def params_to_string(params: Params) -> str:
    """
    Serialize pairs as a query string, keeping their order.

    Keys keep "[]" literal so id arrays read "ids[]=a&ids[]=b".
    Values are form-encoded (spaces become '+').
    """
    return "&".join(
        f"{quote(key, safe='[]')}={quote_plus(value)}" for key, value in params
    )


def build_query(
    kind: RequestKind,
    params: Params | None = None,
    base_url: str = BASE_URL,
    version: str = API_VERSION
) -> str:
    """
    Build the full request URL for a request kind.

    Args:
        kind: The request kind selecting the endpoint.
        params: Ordered (key, value) pairs. Keys may repeat.
        base_url: Scheme and host, without trailing slash.
        version: API version path segment.

    Returns:
        The endpoint URL, followed by "?" and the unconsumed parameters
        when any remain.

    Raises:
        QueryError: If the kind has no endpoint, or its path parameter
                    is absent from params.

    Example:
        build_query(RequestKind.ARTISTS, [("name", "Boards of Canada")])
        -> "https://api.hatchet.is/v1/artists/?name=Boards+of+Canada"
    """
    endpoint = ENDPOINTS.get(kind)
    if endpoint is None:
        raise QueryError(
            f"No endpoint defined for request kind {kind}",
            details={"kind": str(kind)}
        )

    remaining = list(params or ())
    path = endpoint.path

    if endpoint.path_param is not None:
        path_value = first_param(remaining, endpoint.path_param)
        if path_value is None:
            raise QueryError(
                f"Missing path parameter '{endpoint.path_param}' for {kind.name}",
                details={"kind": kind.name, "param": endpoint.path_param}
            )
        path = path.replace("{id}", quote(path_value, safe=""))
        remaining = [pair for pair in remaining if pair[0] != endpoint.path_param]

    url = f"{base_url}/{version}/{path}"
    if remaining:
        url += "?" + params_to_string(remaining)
    return url
