"""
Raw response shapes of the Hatchet API.

This module defines immutable dataclasses mirroring the JSON documents
returned by the API, plus parse() which decodes a response body into one
of them.

Denormalized References:
    The API never nests entities. An album names its artist, images and
    tracks by id only, and the referenced objects travel in side tables
    next to the primary list:

        {
          "albums": [{"id": "AL1", "artist": "A1", "images": ["I1"], "tracks": ["T1"]}],
          "artists": [{"id": "A1", "name": "Boards of Canada"}],
          "images": [{"id": "I1", "url": "https://..."}]
        }

    index_by_id() turns a side table into an id -> entity map; absent ids
    simply do not resolve.

Design Decisions:
    - All dataclasses are frozen; lists are stored as tuples
    - Unknown fields are ignored, missing arrays become empty tuples
    - Every entity requires an "id"; anything else may be absent
    - Wire names are camelCase, attribute names snake_case
"""

import json
from dataclasses import dataclass
from typing import Any, Iterable, Protocol, TypeVar

from hatchet_resolver.core.exceptions import ParseError


def _ids(data: dict[str, Any], key: str) -> tuple[str, ...]:
    values = data.get(key) or ()
    if isinstance(values, str):
        return (values,)
    return tuple(str(v) for v in values)


def _opt_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    return None if value is None else str(value)


def _items(data: dict[str, Any], key: str, cls: type) -> tuple:
    return tuple(cls.from_api(item) for item in (data.get(key) or ()))


@dataclass(frozen=True)
class Image:
    id: str
    url: str | None = None
    square_url: str | None = None
    width: int = 0
    height: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Image":
        return cls(
            id=str(data["id"]),
            url=_opt_str(data, "url"),
            square_url=_opt_str(data, "squareurl"),
            width=int(data.get("width") or 0),
            height=int(data.get("height") or 0),
        )


@dataclass(frozen=True)
class ArtistInfo:
    """
    Artist record.

    Attributes:
        id: Hatchet artist id.
        name: Artist name.
        wiki_abstract: Short biography, when the API has one.
        images: Image ids, best first.
        tracks: Track ids the API lists for the artist.
    """
    id: str
    name: str = ""
    wiki_abstract: str | None = None
    images: tuple[str, ...] = ()
    tracks: tuple[str, ...] = ()

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ArtistInfo":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            wiki_abstract=_opt_str(data, "wikiabstract"),
            images=_ids(data, "images"),
            tracks=_ids(data, "tracks"),
        )


@dataclass(frozen=True)
class AlbumInfo:
    """
    Album record.

    Attributes:
        id: Hatchet album id.
        name: Album title.
        artist: Id of the album artist.
        release_date: Release date string as sent by the API.
        images: Image ids, best first.
        tracks: Track ids in album order.
    """
    id: str
    name: str = ""
    artist: str | None = None
    release_date: str | None = None
    images: tuple[str, ...] = ()
    tracks: tuple[str, ...] = ()

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "AlbumInfo":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            artist=_opt_str(data, "artist"),
            release_date=_opt_str(data, "releaseDate"),
            images=_ids(data, "images"),
            tracks=_ids(data, "tracks"),
        )


@dataclass(frozen=True)
class TrackInfo:
    id: str
    name: str = ""
    artist: str | None = None
    album: str | None = None
    duration: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "TrackInfo":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            artist=_opt_str(data, "artist"),
            album=_opt_str(data, "album"),
            duration=int(data.get("duration") or 0),
        )


@dataclass(frozen=True)
class UserInfo:
    """
    User profile record.

    Attributes:
        id: Hatchet user id.
        name: Display name.
        about: Free-text profile description.
        avatar: Image ids of the avatar, best first.
        followers_count: Users following this user.
        follows_count: Users this user follows.
        total_plays: Lifetime playback count.
        playlists_count: Number of public playlists.
        nowplaying: Id of the track currently playing, if any.
        nowplaying_timestamp: When the now-playing track started.
    """
    id: str
    name: str = ""
    about: str | None = None
    avatar: tuple[str, ...] = ()
    followers_count: int = 0
    follows_count: int = 0
    total_plays: int = 0
    playlists_count: int = 0
    nowplaying: str | None = None
    nowplaying_timestamp: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "UserInfo":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            about=_opt_str(data, "about"),
            avatar=_ids(data, "avatar"),
            followers_count=int(data.get("followersCount") or 0),
            follows_count=int(data.get("followsCount") or 0),
            total_plays=int(data.get("totalPlays") or 0),
            playlists_count=int(data.get("playlistsCount") or 0),
            nowplaying=_opt_str(data, "nowplaying"),
            nowplaying_timestamp=_opt_str(data, "nowplayingtimestamp"),
        )


@dataclass(frozen=True)
class ChartItem:
    """
    One entry of a chart (an artist's top hits).

    Chart items may come without an id; their position in the chart is
    what identifies them.
    """
    id: str | None = None
    track: str | None = None
    album: str | None = None
    plays: int = 0
    rank: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ChartItem":
        return cls(
            id=_opt_str(data, "id"),
            track=_opt_str(data, "track"),
            album=_opt_str(data, "album"),
            plays=int(data.get("plays") or 0),
            rank=int(data.get("rank") or 0),
        )


@dataclass(frozen=True)
class PlaylistInfo:
    id: str
    title: str = ""
    created: str | None = None
    current_revision: str | None = None
    user: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PlaylistInfo":
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            created=_opt_str(data, "created"),
            current_revision=_opt_str(data, "currentrevision"),
            user=_opt_str(data, "user"),
        )


@dataclass(frozen=True)
class PlaylistEntry:
    id: str
    track: str | None = None
    playlist: str | None = None
    created: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PlaylistEntry":
        return cls(
            id=str(data["id"]),
            track=_opt_str(data, "track"),
            playlist=_opt_str(data, "playlist"),
            created=_opt_str(data, "created"),
        )


@dataclass(frozen=True)
class SocialActionInfo:
    """
    A social action: a love, follow, comment or latch-on/off.

    Attributes:
        action: Free-form action value (e.g. "true" for a love).
        type: One of "love", "follow", "createcomment", "latchOn", "latchOff".
        user: Id of the acting user.
        target: Id of the user acted upon (follows, latches).
        track, artist, album, playlist: Ids of the object acted upon.
    """
    id: str
    action: str | None = None
    type: str | None = None
    date: str | None = None
    user: str | None = None
    target: str | None = None
    track: str | None = None
    artist: str | None = None
    album: str | None = None
    playlist: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "SocialActionInfo":
        return cls(
            id=str(data["id"]),
            action=_opt_str(data, "action"),
            type=_opt_str(data, "type"),
            date=_opt_str(data, "date"),
            user=_opt_str(data, "user"),
            target=_opt_str(data, "target"),
            track=_opt_str(data, "track"),
            artist=_opt_str(data, "artist"),
            album=_opt_str(data, "album"),
            playlist=_opt_str(data, "playlist"),
        )


@dataclass(frozen=True)
class SearchItem:
    type: str
    score: float = 0.0
    album: str | None = None
    artist: str | None = None
    user: str | None = None
    track: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "SearchItem":
        return cls(
            type=str(data.get("type") or ""),
            score=float(data.get("score") or 0.0),
            album=_opt_str(data, "album"),
            artist=_opt_str(data, "artist"),
            user=_opt_str(data, "user"),
            track=_opt_str(data, "track"),
        )


# =========================================================================
# Envelopes
# =========================================================================


def _side_tables(data: dict[str, Any]) -> dict[str, tuple]:
    return {
        "images": _items(data, "images", Image),
        "tracks": _items(data, "tracks", TrackInfo),
        "albums": _items(data, "albums", AlbumInfo),
        "artists": _items(data, "artists", ArtistInfo),
        "users": _items(data, "users", UserInfo),
    }


@dataclass(frozen=True)
class Envelope:
    """Side tables shared by every response document."""
    images: tuple[Image, ...] = ()
    tracks: tuple[TrackInfo, ...] = ()
    albums: tuple[AlbumInfo, ...] = ()
    artists: tuple[ArtistInfo, ...] = ()
    users: tuple[UserInfo, ...] = ()

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Envelope":
        return cls(**_side_tables(data))


@dataclass(frozen=True)
class Users(Envelope):
    """Response of users/. The primary list is `users`."""


@dataclass(frozen=True)
class Artists(Envelope):
    """Response of artists/. The primary list is `artists`."""


@dataclass(frozen=True)
class Albums(Envelope):
    """Response of albums/. The primary list is `albums`."""


@dataclass(frozen=True)
class Tracks(Envelope):
    """Response of tracks/. The primary list is `tracks`."""


@dataclass(frozen=True)
class Charts(Envelope):
    """Response of artists/{id}/albums/ and artists/{id}/topHits/."""
    chart_items: tuple[ChartItem, ...] = ()

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Charts":
        return cls(chart_items=_items(data, "chartItems", ChartItem), **_side_tables(data))


@dataclass(frozen=True)
class Playlists(Envelope):
    playlists: tuple[PlaylistInfo, ...] = ()

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Playlists":
        return cls(playlists=_items(data, "playlists", PlaylistInfo), **_side_tables(data))


@dataclass(frozen=True)
class PlaylistEntries(Envelope):
    """
    Entries of one playlist, plus the playlist record itself.

    The entries array is named "playlistEntries" by the API; "entries"
    is accepted as well.
    """
    entries: tuple[PlaylistEntry, ...] = ()
    playlist: PlaylistInfo | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PlaylistEntries":
        key = "playlistEntries" if "playlistEntries" in data else "entries"
        playlist_data = data.get("playlist")
        return cls(
            entries=_items(data, key, PlaylistEntry),
            playlist=PlaylistInfo.from_api(playlist_data) if isinstance(playlist_data, dict) else None,
            **_side_tables(data)
        )


@dataclass(frozen=True)
class Search(Envelope):
    search_results: tuple[SearchItem, ...] = ()

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Search":
        return cls(search_results=_items(data, "searchResults", SearchItem), **_side_tables(data))


@dataclass(frozen=True)
class SocialActionResponse(Envelope):
    social_actions: tuple[SocialActionInfo, ...] = ()

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "SocialActionResponse":
        return cls(
            social_actions=_items(data, "socialActions", SocialActionInfo),
            **_side_tables(data)
        )


class _HasId(Protocol):
    id: str


ShapeT = TypeVar("ShapeT")
EntityT = TypeVar("EntityT", bound=_HasId)


def parse(raw_body: str, shape: type[ShapeT]) -> ShapeT:
    """
    Decode a response body into the given shape.

    Args:
        raw_body: Response text as returned by the transport.
        shape: One of the envelope classes above.

    Returns:
        A frozen instance of shape.

    Raises:
        ParseError: If the body is not a JSON object, or an entity in it
                    lacks its id or carries a non-numeric count.
    """
    try:
        data = json.loads(raw_body)
    except (json.JSONDecodeError, TypeError) as e:
        raise ParseError(
            f"Response is not valid JSON for {shape.__name__}: {e}",
            details={"shape": shape.__name__, "original_error": str(e)}
        ) from e

    if not isinstance(data, dict):
        raise ParseError(
            f"Expected a JSON object for {shape.__name__}, got {type(data).__name__}",
            details={"shape": shape.__name__}
        )

    try:
        return shape.from_api(data)
    except KeyError as e:
        raise ParseError(
            f"Missing required field {e} in {shape.__name__} response",
            details={"shape": shape.__name__, "field": str(e)}
        ) from e
    except (TypeError, ValueError, AttributeError) as e:
        raise ParseError(
            f"Malformed {shape.__name__} response: {e}",
            details={"shape": shape.__name__, "original_error": str(e)}
        ) from e


def index_by_id(entities: Iterable[EntityT]) -> dict[str, EntityT]:
    """
    Build an id -> entity map from a side table.

    Later duplicates win. Must be built before any join on the table.
    """
    return {entity.id: entity for entity in entities}
