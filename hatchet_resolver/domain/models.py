"""
Caller-facing domain objects.

Unlike the raw response shapes these are mutable: a caller creates an
Artist or Album it already knows by name, registers it as the fill
target of a request, and the resolver enriches it in place once the
data arrives. Objects compare by identity so the same instance can be
registered, looked up and mutated safely.

Usage:
    artist = Artist(name="Boards of Canada")
    dispatcher.resolve(InfoRequest.create(RequestKind.ARTISTS_TOPHITS,
                                          {"name": artist.name}), artist)
    ...
    for track in artist.top_hits:
        print(track.name)
"""

from dataclasses import dataclass, field


# Playlist id given to the converted "loved items" pseudo-playlist
LOVED_ITEMS_PLAYLIST_ID = "loved_items_playlist_id"


@dataclass(eq=False)
class Image:
    url: str | None = None
    square_url: str | None = None
    width: int = 0
    height: int = 0


@dataclass(eq=False)
class Track:
    name: str
    artist_name: str = ""
    album_name: str = ""
    id: str | None = None
    duration: int = 0

    @property
    def duration_str(self) -> str:
        """Duration formatted as M:SS."""
        minutes, seconds = divmod(max(self.duration, 0), 60)
        return f"{minutes}:{seconds:02d}"


@dataclass(eq=False)
class Album:
    name: str
    artist_name: str = ""
    id: str | None = None
    release_date: str | None = None
    image: Image | None = None
    tracks: list[Track] = field(default_factory=list)

    def set_image(self, image: Image) -> None:
        self.image = image

    def set_tracks(self, tracks: list[Track]) -> None:
        self.tracks = list(tracks)


@dataclass(eq=False)
class Artist:
    """
    An artist, possibly enriched with albums and top hits.

    Attributes:
        name: Artist name. The only field a caller needs to provide.
        id: Hatchet artist id, set once resolved.
        wiki_abstract: Short biography.
        image: Artist picture.
        albums: Albums keyed by album name, in arrival order.
        top_hits: Tracks in chart order (rank 1 first).
    """
    name: str
    id: str | None = None
    wiki_abstract: str | None = None
    image: Image | None = None
    albums: dict[str, Album] = field(default_factory=dict)
    top_hits: list[Track] = field(default_factory=list)

    def set_image(self, image: Image) -> None:
        self.image = image

    def add_album(self, album: Album) -> None:
        # Re-resolving replaces the previous copy of an album
        self.albums[album.name] = album

    def set_top_hits(self, tracks: list[Track]) -> None:
        self.top_hits = list(tracks)


@dataclass(eq=False)
class User:
    """
    A Hatchet user profile.

    Attributes:
        id: Hatchet user id.
        name: Display name.
        now_playing: Track the user is currently listening to.
        social_actions: The user's own social actions, newest first.
        friends_feed: Social actions of the users this user follows.
    """
    id: str | None = None
    name: str = ""
    about: str | None = None
    image: Image | None = None
    followers_count: int = 0
    follows_count: int = 0
    total_plays: int = 0
    playlists_count: int = 0
    now_playing: Track | None = None
    now_playing_timestamp: str | None = None
    social_actions: list["SocialAction"] = field(default_factory=list)
    friends_feed: list["SocialAction"] = field(default_factory=list)

    def set_social_actions(self, actions: list["SocialAction"]) -> None:
        self.social_actions = list(actions)

    def set_friends_feed(self, actions: list["SocialAction"]) -> None:
        self.friends_feed = list(actions)


@dataclass(eq=False)
class Playlist:
    id: str
    name: str = ""
    current_revision: str | None = None
    tracks: list[Track] = field(default_factory=list)

    def set_tracks(self, tracks: list[Track]) -> None:
        self.tracks = list(tracks)

    @property
    def is_loved_items(self) -> bool:
        return self.id == LOVED_ITEMS_PLAYLIST_ID


@dataclass(eq=False)
class SocialAction:
    """
    One entry of a social feed.

    The referenced objects are resolved from the response side tables;
    any reference that did not resolve stays None.
    """
    id: str
    type: str | None = None
    action: str | None = None
    date: str | None = None
    user: User | None = None
    target: User | None = None
    track: Track | None = None
    artist: Artist | None = None
    album: Album | None = None
    playlist_id: str | None = None
