"""Test the fetch-parse-join pipeline"""

import pytest

from hatchet_resolver.api.models import AlbumInfo, Artists, Users
from hatchet_resolver.api.query import RequestKind
from hatchet_resolver.core.exceptions import (
    IdentityUnavailableError,
    ParseError,
    TransportError,
)
from hatchet_resolver.domain.models import LOVED_ITEMS_PLAYLIST_ID
from hatchet_resolver.infosystem import pipeline
from hatchet_resolver.infosystem.pipeline import ENTRIES, IMAGES, TRACKS
from hatchet_resolver.infosystem.request import InfoRequest

from conftest import api_url, body


class TestSimpleKinds:
    """Test one-GET kinds"""

    def test_artists_by_name(self, context, transport):
        """One GET, the envelope is the result"""
        url = api_url("artists/?name=Boards+of+Canada")
        transport.responses[url] = body(artists=[
            {"id": "A1", "name": "Boards of Canada"},
            {"id": "A2", "name": "Boards of Canada Tribute"},
        ])
        request = InfoRequest.create(RequestKind.ARTISTS, {"name": "Boards of Canada"})

        resolution = pipeline.fetch_simple(context, request, shape=Artists)

        assert transport.get_urls == [url]
        assert resolution.info_result.artists[0].id == "A1"

    def test_transport_error_propagates(self, context, transport):
        """Test that a transport error leaves the fetch"""
        request = InfoRequest.create(RequestKind.USERS, {"name": "nobody"})
        with pytest.raises(TransportError):
            pipeline.fetch_simple(context, request, shape=Users)

    def test_parse_error_propagates(self, context, transport):
        """Test that a parse error leaves the fetch"""
        transport.responses[api_url("users/?name=nobody")] = "not json"
        request = InfoRequest.create(RequestKind.USERS, {"name": "nobody"})
        with pytest.raises(ParseError):
            pipeline.fetch_simple(context, request, shape=Users)


class TestIdentityScoped:
    """Test kinds scoped to the caller's user id"""

    def test_unknown_identity_fails_without_io(self, context, transport):
        """Test identity-scoped fetches without a user id"""
        request = InfoRequest.create(RequestKind.USERS_LOVEDITEMS)
        with pytest.raises(IdentityUnavailableError):
            pipeline.fetch_loved_items(context, request)
        assert transport.get_urls == []

    def test_self_profile(self, context, transport, identity):
        """Test fetching the caller's own profile"""
        identity.set("U1")
        transport.responses[api_url("users/?ids[]=U1")] = body(users=[{"id": "U1", "name": "me"}])

        resolution = pipeline.fetch_self(context, InfoRequest.create(RequestKind.USERS_SELF))

        assert resolution.info_result.users[0].name == "me"

    def test_playlists_use_own_id(self, context, transport, identity):
        """A caller-supplied id never overrides the caller's own"""
        identity.set("U1")
        transport.responses[api_url("users/U1/playlists")] = body(playlists=[{"id": "P1", "title": "Mix"}])
        request = InfoRequest.create(RequestKind.USERS_PLAYLISTS, {"id": "U999"})

        resolution = pipeline.fetch_user_playlists(context, request)

        assert transport.get_urls == [api_url("users/U1/playlists")]
        assert resolution.info_result.playlists[0].title == "Mix"

    def test_loved_items_keyed_by_playlist(self, context, transport, identity):
        """Test that loved items are keyed by their playlist id"""
        identity.set("U1")
        transport.responses[api_url("users/U1/lovedItems")] = body(
            playlist={"id": "P-LOVED", "title": "Loved"},
            playlistEntries=[{"id": "E1", "track": "T1"}],
            tracks=[{"id": "T1", "name": "One"}],
        )

        resolution = pipeline.fetch_loved_items(context, InfoRequest.create(RequestKind.USERS_LOVEDITEMS))

        entries = resolution.joined(ENTRIES)
        assert list(entries) == ["P-LOVED"]
        assert resolution.entities["P-LOVED"].title == "Loved"

    def test_loved_items_without_playlist_record(self, context, transport, identity):
        """Test loved items keyed by the sentinel id"""
        identity.set("U1")
        transport.responses[api_url("users/U1/lovedItems")] = body(playlistEntries=[])

        resolution = pipeline.fetch_loved_items(context, InfoRequest.create(RequestKind.USERS_LOVEDITEMS))

        assert list(resolution.joined(ENTRIES)) == [LOVED_ITEMS_PLAYLIST_ID]


class TestArtistAlbums:
    """Test the artist -> albums two-hop join"""

    def test_one_batched_tracks_request(self, context, transport, artist_albums_responses):
        """Test that album tracks are fetched in one batched request"""
        transport.responses.update(artist_albums_responses)
        request = InfoRequest.create(RequestKind.ARTISTS_ALBUMS, {"name": "X"})

        resolution = pipeline.fetch_artist_albums(context, request)

        track_urls = [url for url in transport.get_urls if "/tracks/" in url]
        assert track_urls == [api_url("tracks/?ids[]=T1&ids[]=T2")]
        assert len(transport.get_urls) == 3

        assert resolution.info_result.id == "A1"
        assert isinstance(resolution.entities["AL1"], AlbumInfo)
        assert [t.id for t in resolution.joined(TRACKS)["AL1"].tracks] == ["T1", "T2"]
        assert resolution.joined(IMAGES)["AL1"].url == "https://img.example/I1.jpg"

    def test_no_artist_is_empty_success(self, context, transport):
        """Test that an unknown artist ends the join after one request"""
        transport.responses[api_url("artists/?name=Nobody")] = body(artists=[])

        resolution = pipeline.fetch_artist_albums(
            context, InfoRequest.create(RequestKind.ARTISTS_ALBUMS, {"name": "Nobody"})
        )

        assert resolution.info_result is None
        assert resolution.result_map == {}
        assert len(transport.get_urls) == 1

    def test_album_without_images_or_tracks(self, context, transport):
        """An empty images list skips the lookup; no track ids skips the GET"""
        transport.responses[api_url("artists/?name=X")] = body(artists=[{"id": "A1", "name": "X"}])
        transport.responses[api_url("artists/A1/albums/")] = body(
            albums=[{"id": "AL1", "name": "Bare", "images": [], "tracks": []}]
        )

        resolution = pipeline.fetch_artist_albums(
            context, InfoRequest.create(RequestKind.ARTISTS_ALBUMS, {"name": "X"})
        )

        assert resolution.joined(IMAGES) == {}
        assert resolution.joined(TRACKS) == {}
        assert len(transport.get_urls) == 2

    def test_tracks_failure_aborts_chain(self, context, transport, artist_albums_responses):
        """Test that a failing tracks request aborts the join"""
        artist_albums_responses.pop(api_url("tracks/?ids[]=T1&ids[]=T2"))
        transport.responses.update(artist_albums_responses)

        with pytest.raises(TransportError):
            pipeline.fetch_artist_albums(
                context, InfoRequest.create(RequestKind.ARTISTS_ALBUMS, {"name": "X"})
            )


class TestArtistTopHits:
    """Test the artist -> top hits two-hop join"""

    def test_chart_order_preserved(self, context, transport, top_hits_responses):
        """Test that the join keeps chart order"""
        transport.responses.update(top_hits_responses)

        resolution = pipeline.fetch_artist_top_hits(
            context, InfoRequest.create(RequestKind.ARTISTS_TOPHITS, {"name": "X"})
        )

        tracks = resolution.joined(TRACKS)
        assert list(tracks) == ["C1", "rank:2", "C3"]
        assert [info.name for info in tracks.values()] == ["Three", "One", "Two"]

    def test_missing_track_maps_to_none(self, context, transport):
        """Test that a chart item with an unknown track maps to None"""
        transport.responses[api_url("artists/?name=X")] = body(artists=[{"id": "A1", "name": "X"}])
        transport.responses[api_url("artists/A1/topHits/")] = body(
            chartItems=[{"id": "C1", "track": "T404"}]
        )

        resolution = pipeline.fetch_artist_top_hits(
            context, InfoRequest.create(RequestKind.ARTISTS_TOPHITS, {"name": "X"})
        )

        assert resolution.joined(TRACKS) == {"C1": None}


class TestAlbumDetail:
    """Test album -> cover + tracks"""

    def test_album_with_cover_and_tracks(self, context, transport):
        """Test the album detail join"""
        transport.responses[api_url("albums/?name=Geogaddi&artist_name=Boards+of+Canada")] = body(
            albums=[{"id": "AL1", "name": "Geogaddi", "images": ["I1", "I2"], "tracks": ["T1"]}],
            images=[{"id": "I1", "url": "https://img/1"}, {"id": "I2", "url": "https://img/2"}],
        )
        transport.responses[api_url("tracks/?ids[]=T1")] = body(tracks=[{"id": "T1", "name": "Ready Lets Go"}])
        request = InfoRequest.create(
            RequestKind.ALBUMS, {"name": "Geogaddi", "artist_name": "Boards of Canada"}
        )

        resolution = pipeline.fetch_album(context, request)

        assert resolution.info_result.id == "AL1"
        assert resolution.joined(IMAGES)["AL1"].url == "https://img/1"
        assert resolution.joined(TRACKS)["AL1"].tracks[0].name == "Ready Lets Go"

    def test_no_album_found(self, context, transport):
        """Test album detail when no album matches"""
        transport.responses[api_url("albums/?name=Nothing")] = body(albums=[])

        resolution = pipeline.fetch_album(context, InfoRequest.create(RequestKind.ALBUMS, {"name": "Nothing"}))

        assert resolution.info_result is None
        assert len(transport.get_urls) == 1
