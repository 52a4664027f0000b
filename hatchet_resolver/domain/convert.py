"""
Conversion from raw response shapes to domain objects.

Two families of functions live here:

    to_*()   build a new domain object from raw records
    fill_*() enrich an existing, caller-owned domain object in place

Both take already-indexed side tables (id -> record maps, see
hatchet_resolver.api.models.index_by_id). A reference that does not
resolve is skipped: the corresponding field is simply left untouched.
"""

from typing import Iterable, Mapping

from hatchet_resolver.api import models as raw
from hatchet_resolver.api.models import index_by_id
from hatchet_resolver.domain.models import (
    Album,
    Artist,
    Image,
    Playlist,
    SocialAction,
    Track,
    User,
)


def first_ref(ids: tuple[str, ...], index: Mapping) -> object | None:
    """Resolve the first id of a reference list, or None if empty/unresolved."""
    if not ids:
        return None
    return index.get(ids[0])


def to_image(info: raw.Image | None) -> Image | None:
    if info is None:
        return None
    return Image(
        url=info.url,
        square_url=info.square_url,
        width=info.width,
        height=info.height,
    )


def _name_of(index: Mapping, ref: str | None) -> str:
    if ref is None:
        return ""
    entity = index.get(ref)
    return entity.name if entity is not None else ""


def to_track(
    info: raw.TrackInfo,
    artist_map: Mapping[str, raw.ArtistInfo],
    album_map: Mapping[str, raw.AlbumInfo] | None = None,
    artist_name: str = "",
    album_name: str = ""
) -> Track:
    """
    Convert a track record.

    Artist and album names come from the side tables; the explicit
    artist_name/album_name are fallbacks used when a reference does not
    resolve (e.g. the album's own name when filling album tracks).
    """
    return Track(
        name=info.name,
        artist_name=_name_of(artist_map, info.artist) or artist_name,
        album_name=_name_of(album_map or {}, info.album) or album_name,
        id=info.id,
        duration=info.duration,
    )


def to_tracks(
    infos: Iterable[raw.TrackInfo],
    artist_map: Mapping[str, raw.ArtistInfo],
    album_map: Mapping[str, raw.AlbumInfo] | None = None,
    artist_name: str = "",
    album_name: str = ""
) -> list[Track]:
    return [
        to_track(info, artist_map, album_map, artist_name, album_name)
        for info in infos
    ]


def to_album(
    info: raw.AlbumInfo,
    artist_name: str,
    tracks: list[Track] | None = None,
    image: raw.Image | None = None
) -> Album:
    return Album(
        name=info.name,
        artist_name=artist_name,
        id=info.id,
        release_date=info.release_date,
        image=to_image(image),
        tracks=list(tracks or []),
    )


def to_artist(info: raw.ArtistInfo, image: raw.Image | None = None) -> Artist:
    return Artist(
        name=info.name,
        id=info.id,
        wiki_abstract=info.wiki_abstract,
        image=to_image(image),
    )


def to_user(
    info: raw.UserInfo,
    track_map: Mapping[str, raw.TrackInfo],
    artist_map: Mapping[str, raw.ArtistInfo],
    image_map: Mapping[str, raw.Image]
) -> User:
    """Convert a user record into a new, fully populated User."""
    user = User(id=info.id)
    fill_user(user, info, track_map, artist_map, image_map)
    return user


def fill_user(
    user: User,
    info: raw.UserInfo,
    track_map: Mapping[str, raw.TrackInfo],
    artist_map: Mapping[str, raw.ArtistInfo],
    image_map: Mapping[str, raw.Image]
) -> None:
    """
    Copy a user record onto an existing User.

    The avatar resolves through image_map; the now-playing track through
    track_map and its artist through artist_map.
    """
    user.id = info.id
    user.name = info.name
    user.about = info.about
    user.followers_count = info.followers_count
    user.follows_count = info.follows_count
    user.total_plays = info.total_plays
    user.playlists_count = info.playlists_count

    avatar = first_ref(info.avatar, image_map)
    if avatar is not None:
        user.image = to_image(avatar)

    if info.nowplaying is not None:
        track_info = track_map.get(info.nowplaying)
        if track_info is not None:
            user.now_playing = to_track(track_info, artist_map)
            user.now_playing_timestamp = info.nowplaying_timestamp


def to_playlist(info: raw.PlaylistInfo) -> Playlist:
    return Playlist(
        id=info.id,
        name=info.title,
        current_revision=info.current_revision,
    )


def fill_playlist(playlist: Playlist, entries: raw.PlaylistEntries) -> Playlist:
    """
    Attach the tracks of a playlist-entries response, in entry order.

    Entries whose track does not resolve are dropped.
    """
    track_map = index_by_id(entries.tracks)
    artist_map = index_by_id(entries.artists)
    album_map = index_by_id(entries.albums)

    tracks = []
    for entry in entries.entries:
        track_info = track_map.get(entry.track) if entry.track else None
        if track_info is not None:
            tracks.append(to_track(track_info, artist_map, album_map))
    playlist.set_tracks(tracks)
    return playlist


def to_social_action(
    action: raw.SocialActionInfo,
    track_map: Mapping[str, raw.TrackInfo],
    artist_map: Mapping[str, raw.ArtistInfo],
    album_map: Mapping[str, raw.AlbumInfo],
    user_map: Mapping[str, raw.UserInfo]
) -> SocialAction:
    """
    Convert a social action, resolving every reference it carries.

    Users referenced by the action are converted without their own
    now-playing track (the feed response rarely carries it).
    """
    converted = SocialAction(
        id=action.id,
        type=action.type,
        action=action.action,
        date=action.date,
        playlist_id=action.playlist,
    )

    if action.user is not None and action.user in user_map:
        converted.user = to_user(user_map[action.user], track_map, artist_map, {})
    if action.target is not None and action.target in user_map:
        converted.target = to_user(user_map[action.target], track_map, artist_map, {})
    if action.track is not None and action.track in track_map:
        converted.track = to_track(track_map[action.track], artist_map, album_map)
    if action.artist is not None and action.artist in artist_map:
        converted.artist = to_artist(artist_map[action.artist])
    if action.album is not None and action.album in album_map:
        album_info = album_map[action.album]
        converted.album = to_album(album_info, _name_of(artist_map, album_info.artist))
    return converted


def to_social_actions(response: raw.SocialActionResponse) -> list[SocialAction]:
    """Index the response side tables once and convert every action."""
    track_map = index_by_id(response.tracks)
    artist_map = index_by_id(response.artists)
    album_map = index_by_id(response.albums)
    user_map = index_by_id(response.users)
    return [
        to_social_action(action, track_map, artist_map, album_map, user_map)
        for action in response.social_actions
    ]


# =========================================================================
# Fill routines for caller-owned targets
# =========================================================================


def fill_artist(artist: Artist, info: raw.ArtistInfo, image: raw.Image | None) -> None:
    """Copy basic artist info onto an existing Artist; the image only if resolved."""
    artist.id = info.id
    if info.name:
        artist.name = info.name
    if info.wiki_abstract:
        artist.wiki_abstract = info.wiki_abstract
    if image is not None:
        artist.set_image(to_image(image))


def fill_artist_albums(
    artist: Artist,
    albums: Iterable[raw.AlbumInfo],
    tracks_by_album: Mapping[str, raw.Tracks],
    images_by_album: Mapping[str, raw.Image]
) -> None:
    """
    Attach albums (with their tracks and cover) to an existing Artist.

    Both maps are keyed by album id. Albums without fetched tracks are
    attached with an empty track list.
    """
    for album_info in albums:
        tracks: list[Track] = []
        fetched = tracks_by_album.get(album_info.id)
        if fetched is not None:
            tracks = to_tracks(
                fetched.tracks,
                index_by_id(fetched.artists),
                artist_name=artist.name,
                album_name=album_info.name,
            )
        artist.add_album(
            to_album(album_info, artist.name, tracks, images_by_album.get(album_info.id))
        )


def fill_artist_top_hits(
    artist: Artist,
    chart: Iterable[raw.TrackInfo | None],
    artist_map: Mapping[str, raw.ArtistInfo] | None = None
) -> None:
    """
    Replace an Artist's top hits with the given chart, keeping its order.

    Chart positions whose track did not resolve are skipped.
    """
    artist.set_top_hits([
        to_track(info, artist_map or {}, artist_name=artist.name)
        for info in chart
        if info is not None
    ])


def fill_album(album: Album, info: raw.AlbumInfo, image: raw.Image | None) -> None:
    album.id = info.id
    if info.name:
        album.name = info.name
    if info.release_date:
        album.release_date = info.release_date
    if image is not None:
        album.set_image(to_image(image))


def fill_album_tracks(album: Album, tracks: raw.Tracks) -> None:
    album.set_tracks(to_tracks(
        tracks.tracks,
        index_by_id(tracks.artists),
        index_by_id(tracks.albums),
        artist_name=album.artist_name,
        album_name=album.name,
    ))
