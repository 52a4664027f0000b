"""Test domain objects and converters"""

from hatchet_resolver.api.models import (
    AlbumInfo,
    ArtistInfo,
    Image as ImageInfo,
    PlaylistEntries,
    PlaylistInfo,
    SocialActionResponse,
    TrackInfo,
    UserInfo,
    parse,
)
from hatchet_resolver.domain import convert
from hatchet_resolver.domain.models import Album, Artist, Playlist, Track, User

from conftest import body


class TestDomainModels:
    """Test domain object helpers"""

    def test_duration_str(self):
        """Test the m:ss duration string"""
        assert Track(name="Roygbiv", duration=151).duration_str == "2:31"
        assert Track(name="Short", duration=5).duration_str == "0:05"

    def test_add_album_replaces_same_name(self):
        """Test that adding an album replaces one with the same name"""
        artist = Artist(name="X")
        artist.add_album(Album(name="Same", id="AL1"))
        artist.add_album(Album(name="Same", id="AL2"))
        assert list(artist.albums) == ["Same"]
        assert artist.albums["Same"].id == "AL2"

    def test_identity_equality(self):
        """Two targets with the same fields are still different targets"""
        assert Artist(name="X") != Artist(name="X")

    def test_loved_items_flag(self):
        """Test the loved items flag of a playlist"""
        assert Playlist(id="loved_items_playlist_id").is_loved_items
        assert not Playlist(id="P1").is_loved_items


class TestConverters:
    """Test to_*() converters"""

    def test_to_track_resolves_names(self):
        """Test that a track resolves its artist and album names"""
        track = convert.to_track(
            TrackInfo(id="T1", name="One", artist="A1", album="AL1", duration=60),
            {"A1": ArtistInfo(id="A1", name="X")},
            {"AL1": AlbumInfo(id="AL1", name="Album")},
        )
        assert (track.name, track.artist_name, track.album_name, track.id) == ("One", "X", "Album", "T1")

    def test_to_track_falls_back_to_given_names(self):
        """Test track names when references do not resolve"""
        track = convert.to_track(
            TrackInfo(id="T1", name="One", artist="A404"),
            {},
            artist_name="Known Artist",
        )
        assert track.artist_name == "Known Artist"

    def test_first_ref_empty_list(self):
        """Test first_ref on an empty list"""
        assert convert.first_ref((), {"I1": object()}) is None

    def test_fill_user_resolves_now_playing(self):
        """Test that a user's now playing track is resolved"""
        user = User(name="placeholder")
        convert.fill_user(
            user,
            UserInfo(id="U1", name="mrmaffen", avatar=("I1",), nowplaying="T1",
                     nowplaying_timestamp="2026-10-18T12:00:00Z"),
            {"T1": TrackInfo(id="T1", name="Dayvan Cowboy", artist="A1")},
            {"A1": ArtistInfo(id="A1", name="Boards of Canada")},
            {"I1": ImageInfo(id="I1", url="https://img/avatar")},
        )

        assert user.id == "U1"
        assert user.name == "mrmaffen"
        assert user.image.url == "https://img/avatar"
        assert user.now_playing.name == "Dayvan Cowboy"
        assert user.now_playing.artist_name == "Boards of Canada"
        assert user.now_playing_timestamp == "2026-10-18T12:00:00Z"

    def test_fill_user_unresolved_references_skipped(self):
        """Test that unresolved user references are skipped"""
        user = User()
        convert.fill_user(user, UserInfo(id="U1", avatar=("I404",), nowplaying="T404"), {}, {}, {})
        assert user.image is None
        assert user.now_playing is None

    def test_fill_playlist_drops_unresolved_entries(self):
        """Test that playlist entries without a track are dropped"""
        entries = parse(
            body(
                playlistEntries=[
                    {"id": "E1", "track": "T1"},
                    {"id": "E2", "track": "T404"},
                    {"id": "E3", "track": "T2"},
                ],
                tracks=[{"id": "T1", "name": "One"}, {"id": "T2", "name": "Two"}],
            ),
            PlaylistEntries
        )
        playlist = convert.fill_playlist(convert.to_playlist(PlaylistInfo(id="P1", title="Mix")), entries)
        assert playlist.name == "Mix"
        assert [track.name for track in playlist.tracks] == ["One", "Two"]

    def test_social_actions_resolve_references(self):
        """Test reference resolution in social actions"""
        response = parse(
            body(
                socialActions=[
                    {"id": "S1", "type": "love", "action": "true", "user": "U1", "track": "T1"},
                    {"id": "S2", "type": "follow", "user": "U1", "target": "U404"},
                ],
                users=[{"id": "U1", "name": "mrmaffen"}],
                tracks=[{"id": "T1", "name": "One", "artist": "A1"}],
                artists=[{"id": "A1", "name": "X"}],
            ),
            SocialActionResponse
        )
        actions = convert.to_social_actions(response)

        assert [action.id for action in actions] == ["S1", "S2"]
        assert actions[0].user.name == "mrmaffen"
        assert actions[0].track.artist_name == "X"
        assert actions[1].target is None


class TestFillRoutines:
    """Test fill_*() routines on caller-owned targets"""

    def test_fill_artist_keeps_image_when_unresolved(self):
        """Test filling an artist whose image does not resolve"""
        artist = Artist(name="X")
        convert.fill_artist(artist, ArtistInfo(id="A1", name="X", wiki_abstract="Bio"), None)
        assert artist.id == "A1"
        assert artist.wiki_abstract == "Bio"
        assert artist.image is None

    def test_fill_artist_top_hits_skips_missing(self):
        """Test that top hits without a track are skipped"""
        artist = Artist(name="X")
        convert.fill_artist_top_hits(artist, [
            TrackInfo(id="T2", name="Two"),
            None,
            TrackInfo(id="T1", name="One"),
        ])
        assert [track.name for track in artist.top_hits] == ["Two", "One"]
        assert all(track.artist_name == "X" for track in artist.top_hits)

    def test_fill_album(self):
        """Test filling an album from its record"""
        album = Album(name="Geogaddi", artist_name="Boards of Canada")
        convert.fill_album(
            album,
            AlbumInfo(id="AL1", name="Geogaddi", release_date="2002-02-18"),
            ImageInfo(id="I1", url="https://img/cover")
        )
        assert album.id == "AL1"
        assert album.release_date == "2002-02-18"
        assert album.image.url == "https://img/cover"
