"""Test raw response parsing"""

import pytest

from hatchet_resolver.api.models import (
    Artists,
    Charts,
    PlaylistEntries,
    Search,
    Users,
    index_by_id,
    parse,
)
from hatchet_resolver.core.exceptions import ParseError

from conftest import body


class TestParse:
    """Test parse() into envelopes"""

    def test_artists_with_side_table(self):
        """Test parsing artists with an images side table"""
        artists = parse(
            body(
                artists=[{"id": "A1", "name": "Boards of Canada", "wikiabstract": "Duo", "images": ["I1"]}],
                images=[{"id": "I1", "url": "https://img/1", "squareurl": "https://img/1s", "width": 64}],
            ),
            Artists
        )

        assert artists.artists[0].name == "Boards of Canada"
        assert artists.artists[0].wiki_abstract == "Duo"
        assert artists.artists[0].images == ("I1",)
        assert artists.images[0].square_url == "https://img/1s"
        assert artists.images[0].width == 64
        assert artists.tracks == ()

    def test_artist_track_ids(self):
        """Test that an artist record keeps its track ids in order"""
        artists = parse(body(artists=[{"id": "A1", "tracks": ["T2", "T1"]}]), Artists)
        assert artists.artists[0].tracks == ("T2", "T1")
        assert artists.artists[0].name == ""

    def test_missing_arrays_become_empty(self):
        """Test that missing arrays parse as empty tuples"""
        users = parse("{}", Users)
        assert users.users == ()
        assert users.images == ()

    def test_user_counts(self):
        """Test parsing user counters"""
        users = parse(
            body(users=[{
                "id": "U1",
                "name": "mrmaffen",
                "followersCount": 3,
                "totalPlays": 1200,
                "nowplaying": "T9",
                "nowplayingtimestamp": "2026-10-18T12:00:00Z",
            }]),
            Users
        )
        info = users.users[0]
        assert info.followers_count == 3
        assert info.follows_count == 0
        assert info.total_plays == 1200
        assert info.nowplaying == "T9"

    def test_chart_items_without_id(self):
        """Test chart items that carry no id"""
        charts = parse(body(chartItems=[{"track": "T1", "rank": 1}]), Charts)
        assert charts.chart_items[0].id is None
        assert charts.chart_items[0].track == "T1"

    def test_playlist_entries_key_variants(self):
        """Test both spellings of the playlist entries key"""
        primary = parse(body(playlistEntries=[{"id": "E1", "track": "T1"}]), PlaylistEntries)
        fallback = parse(body(entries=[{"id": "E1", "track": "T1"}]), PlaylistEntries)
        assert primary.entries == fallback.entries
        assert primary.playlist is None

    def test_search_scores(self):
        """Test parsing search result scores"""
        search = parse(body(searchResults=[{"type": "album", "album": "AL1", "score": 7}]), Search)
        assert search.search_results[0].score == 7.0

    def test_invalid_json(self):
        """Test that invalid JSON raises ParseError"""
        with pytest.raises(ParseError):
            parse("<html>503</html>", Artists)

    def test_non_object_body(self):
        """Test that a non-object body raises ParseError"""
        with pytest.raises(ParseError):
            parse("[]", Artists)

    def test_entity_without_id(self):
        """Test that a record without id raises ParseError"""
        with pytest.raises(ParseError) as exc_info:
            parse(body(artists=[{"name": "Nameless"}]), Artists)
        assert exc_info.value.details["shape"] == "Artists"

    def test_non_numeric_count(self):
        """Test that a non-numeric counter raises ParseError"""
        with pytest.raises(ParseError):
            parse(body(users=[{"id": "U1", "followersCount": "many"}]), Users)


class TestIndexById:

    def test_later_duplicates_win(self):
        """Test that the last record with an id wins"""
        artists = parse(body(artists=[{"id": "A1", "name": "old"}, {"id": "A1", "name": "new"}]), Artists)
        assert index_by_id(artists.artists)["A1"].name == "new"
