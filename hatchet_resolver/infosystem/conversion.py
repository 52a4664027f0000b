"""
Kind-specific conversion and fill steps.

After the pipeline has produced a Resolution, two optional steps run:

    convert_*()  turn the normalized result into new domain objects,
                 stored in Resolution.converted by category
    fill_*()     merge the result into the caller's registered fill
                 target (an Artist, Album or User) in place

Which functions apply to which request kind is decided by the kind
table in hatchet_resolver.infosystem.kinds. An empty primary list or an
unresolvable reference skips the affected sub-field; neither is an error.
"""

from dataclasses import replace

from hatchet_resolver.api.models import (
    AlbumInfo,
    Artists,
    PlaylistEntries,
    Playlists,
    Search,
    SocialActionResponse,
    Users,
    index_by_id,
)
from hatchet_resolver.domain import convert
from hatchet_resolver.domain.convert import first_ref
from hatchet_resolver.domain.models import (
    LOVED_ITEMS_PLAYLIST_ID,
    Album,
    Artist,
    Playlist,
    User,
)
from hatchet_resolver.infosystem.pipeline import ENTRIES, IMAGES, TRACKS
from hatchet_resolver.infosystem.request import Resolution


# Converted result categories
PLAYLISTS = "playlists"
ALBUMS = "albums"
ARTISTS = "artists"
USERS = "users"

# Search results scoring at or below this are discarded
SEARCH_MIN_SCORE = 5.0

SEARCH_TYPE_ALBUM = "album"
SEARCH_TYPE_ARTIST = "artist"
SEARCH_TYPE_USER = "user"

LOVED_ITEMS_TITLE = "Loved Items"


# =========================================================================
# Conversion
# =========================================================================


def convert_artists(resolution: Resolution) -> dict[str, list]:
    """Convert the first artist of an artists response (with its image)."""
    artists: Artists | None = resolution.info_result
    if artists is None or not artists.artists:
        return {}
    artist_info = artists.artists[0]
    image = first_ref(artist_info.images, index_by_id(artists.images))
    return {ARTISTS: [convert.to_artist(artist_info, image)]}


def convert_playlists(resolution: Resolution) -> dict[str, list]:
    playlists: Playlists = resolution.info_result
    return {PLAYLISTS: [convert.to_playlist(info) for info in playlists.playlists]}


def convert_playlist_entries(resolution: Resolution) -> dict[str, list]:
    entries: PlaylistEntries = resolution.info_result
    if entries.playlist is None:
        return {}
    playlist = convert.to_playlist(entries.playlist)
    return {PLAYLISTS: [convert.fill_playlist(playlist, entries)]}


def convert_loved_items(resolution: Resolution) -> dict[str, list]:
    """
    Convert loved items into the single loved-items pseudo-playlist.

    Whatever id the API gave the playlist, the converted one carries
    LOVED_ITEMS_PLAYLIST_ID.
    """
    entries_map = resolution.joined(ENTRIES)
    if not entries_map:
        return {}

    key, entries = next(iter(entries_map.items()))
    playlist_info = resolution.entities.get(key)
    if playlist_info is not None:
        playlist = convert.to_playlist(replace(playlist_info, id=LOVED_ITEMS_PLAYLIST_ID))
    else:
        playlist = Playlist(id=LOVED_ITEMS_PLAYLIST_ID, name=LOVED_ITEMS_TITLE)
    return {PLAYLISTS: [convert.fill_playlist(playlist, entries)]}


def convert_search(resolution: Resolution) -> dict[str, list]:
    """
    Convert ranked search results into albums, artists and users.

    Every side table is indexed once, then the ranked list is scanned
    once. Items scoring <= SEARCH_MIN_SCORE and items whose reference
    does not resolve produce nothing. Per-type order follows the ranking.
    """
    search: Search = resolution.info_result
    user_map = index_by_id(search.users)
    album_map = index_by_id(search.albums)
    artist_map = index_by_id(search.artists)
    image_map = index_by_id(search.images)
    track_map = index_by_id(search.tracks)

    albums: list[Album] = []
    artists: list[Artist] = []
    users: list[User] = []
    for item in search.search_results:
        if item.score <= SEARCH_MIN_SCORE:
            continue

        if item.type == SEARCH_TYPE_ALBUM:
            album_info = album_map.get(item.album) if item.album else None
            if album_info is not None:
                image = first_ref(album_info.images, image_map)
                artist_info = artist_map.get(album_info.artist) if album_info.artist else None
                artist_name = artist_info.name if artist_info is not None else ""
                albums.append(convert.to_album(album_info, artist_name, None, image))
        elif item.type == SEARCH_TYPE_ARTIST:
            artist_info = artist_map.get(item.artist) if item.artist else None
            if artist_info is not None:
                image = first_ref(artist_info.images, image_map)
                artists.append(convert.to_artist(artist_info, image))
        elif item.type == SEARCH_TYPE_USER:
            user_info = user_map.get(item.user) if item.user else None
            if user_info is not None:
                users.append(convert.to_user(user_info, track_map, artist_map, image_map))

    return {ALBUMS: albums, ARTISTS: artists, USERS: users}


def convert_self(resolution: Resolution) -> dict[str, list]:
    """Convert the caller's own profile into a fully populated User."""
    users: Users | None = resolution.info_result
    if users is None or not users.users:
        return {}
    return {USERS: [convert.to_user(
        users.users[0],
        index_by_id(users.tracks),
        index_by_id(users.artists),
        index_by_id(users.images),
    )]}


# =========================================================================
# Fill
# =========================================================================


def fill_artist(target: Artist, resolution: Resolution) -> None:
    """Basic artist info and picture from an artists response."""
    artists: Artists | None = resolution.info_result
    if artists is None or not artists.artists:
        return
    artist_info = artists.artists[0]
    image = first_ref(artist_info.images, index_by_id(artists.images))
    convert.fill_artist(target, artist_info, image)


def fill_artist_albums(target: Artist, resolution: Resolution) -> None:
    albums = [
        entity for entity in resolution.entities.values()
        if isinstance(entity, AlbumInfo)
    ]
    convert.fill_artist_albums(
        target,
        albums,
        resolution.joined(TRACKS),
        resolution.joined(IMAGES),
    )


def fill_artist_top_hits(target: Artist, resolution: Resolution) -> None:
    if resolution.info_result is None:
        return
    convert.fill_artist_top_hits(target, resolution.joined(TRACKS).values())


def fill_album(target: Album, resolution: Resolution) -> None:
    """Album info, cover and (when fetched) tracks onto an existing Album."""
    album_info: AlbumInfo | None = resolution.info_result
    if album_info is None:
        return
    convert.fill_album(target, album_info, resolution.joined(IMAGES).get(album_info.id))
    tracks = resolution.joined(TRACKS).get(album_info.id)
    if tracks is not None:
        convert.fill_album_tracks(target, tracks)


def fill_user(target: User, resolution: Resolution) -> None:
    users: Users | None = resolution.info_result
    if users is None or not users.users:
        return
    convert.fill_user(
        target,
        users.users[0],
        index_by_id(users.tracks),
        index_by_id(users.artists),
        index_by_id(users.images),
    )


def fill_social_actions(target: User, resolution: Resolution) -> None:
    response: SocialActionResponse | None = resolution.info_result
    if response is None or not response.social_actions:
        return
    target.set_social_actions(convert.to_social_actions(response))


def fill_friends_feed(target: User, resolution: Resolution) -> None:
    response: SocialActionResponse | None = resolution.info_result
    if response is None or not response.social_actions:
        return
    target.set_friends_feed(convert.to_social_actions(response))
