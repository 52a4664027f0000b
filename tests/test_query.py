"""Test URL construction"""

import pytest

from hatchet_resolver.api.query import (
    ENDPOINTS,
    RequestKind,
    build_query,
    params_to_string,
    to_params,
)
from hatchet_resolver.core.exceptions import QueryError


class TestBuildQuery:
    """Test build_query()"""

    def test_artists_by_name(self):
        """Spaces in values are form-encoded"""
        url = build_query(RequestKind.ARTISTS, [("name", "Boards of Canada")])
        assert url == "https://api.hatchet.is/v1/artists/?name=Boards+of+Canada"

    def test_no_params_no_question_mark(self):
        """Test a URL without parameters"""
        assert build_query(RequestKind.ARTISTS) == "https://api.hatchet.is/v1/artists/"

    def test_path_parameter_spliced(self):
        """Test that the path id is spliced into the path"""
        url = build_query(RequestKind.ARTISTS_ALBUMS, [("id", "A1")])
        assert url == "https://api.hatchet.is/v1/artists/A1/albums/"

    def test_path_parameter_first_value_used_and_removed(self):
        """Every occurrence of the path key leaves the query string"""
        params = [("id", "U1"), ("limit", "10"), ("id", "U2")]
        url = build_query(RequestKind.USERS_PLAYLISTS, params)
        assert url == "https://api.hatchet.is/v1/users/U1/playlists?limit=10"
        assert "id=" not in url

    def test_path_parameter_is_quoted(self):
        """Test that the path id is percent-encoded"""
        url = build_query(RequestKind.PLAYLISTS_ENTRIES, [("id", "a/b c")])
        assert url == "https://api.hatchet.is/v1/playlists/a%2Fb%20c/entries"

    def test_missing_path_parameter_raises(self):
        """Test that a missing path id raises QueryError"""
        with pytest.raises(QueryError) as exc_info:
            build_query(RequestKind.USERS_LOVEDITEMS, [("name", "someone")])
        assert exc_info.value.details["param"] == "id"

    def test_repeated_id_array(self):
        """Batch fetches repeat ids[] and keep the brackets literal"""
        url = build_query(RequestKind.TRACKS, [("ids[]", "T1"), ("ids[]", "T2")])
        assert url == "https://api.hatchet.is/v1/tracks/?ids[]=T1&ids[]=T2"

    def test_leftover_order_is_stable(self):
        """Test that leftover parameters keep their order"""
        params = [("term", "geogaddi"), ("limit", "5"), ("offset", "0")]
        first = build_query(RequestKind.SEARCHES, params)
        second = build_query(RequestKind.SEARCHES, params)
        assert first == second
        assert first.endswith("?term=geogaddi&limit=5&offset=0")

    def test_custom_location(self):
        """Test a custom base URL and version"""
        url = build_query(
            RequestKind.ALBUMS,
            [("name", "Geogaddi")],
            base_url="http://localhost:8080",
            version="v2"
        )
        assert url == "http://localhost:8080/v2/albums/?name=Geogaddi"

    def test_post_endpoints(self):
        """Test the URLs of the POST kinds"""
        assert build_query(RequestKind.PLAYBACKLOGENTRIES_NOWPLAYING) == (
            "https://api.hatchet.is/v1/playbackLogEntries/nowplaying/"
        )
        assert build_query(RequestKind.SOCIALACTIONS) == "https://api.hatchet.is/v1/socialActions/"


class TestEndpoints:
    """Test the endpoint table"""

    def test_every_kind_has_an_endpoint(self):
        """Test that every request kind has an endpoint"""
        assert set(ENDPOINTS) == set(RequestKind)

    def test_post_kinds(self):
        """Test which kinds are POST kinds"""
        post_kinds = {kind for kind, endpoint in ENDPOINTS.items() if endpoint.method == "POST"}
        assert post_kinds == {
            RequestKind.PLAYBACKLOGENTRIES,
            RequestKind.PLAYBACKLOGENTRIES_NOWPLAYING,
            RequestKind.SOCIALACTIONS,
        }


class TestParams:
    """Test parameter helpers"""

    def test_mapping_lists_expand(self):
        """Test that list values expand into repeated pairs"""
        params = to_params({"ids[]": ["T1", "T2"], "name": "X"})
        assert params == (("ids[]", "T1"), ("ids[]", "T2"), ("name", "X"))

    def test_any_iterable_expands(self):
        """Test that sets and generators expand like lists"""
        assert to_params({"ids[]": {"T1"}}) == (("ids[]", "T1"),)
        assert to_params({"ids[]": (f"T{n}" for n in (1, 2))}) == (("ids[]", "T1"), ("ids[]", "T2"))
        assert build_query(RequestKind.TRACKS, to_params({"ids[]": {"T1"}})).endswith("tracks/?ids[]=T1")

    def test_pairs_pass_through(self):
        """Test that pairs are kept as given"""
        assert to_params([("a", "1"), ("a", "2")]) == (("a", "1"), ("a", "2"))

    def test_none_is_empty(self):
        """Test that None gives no parameters"""
        assert to_params(None) == ()

    def test_params_to_string_escapes_values(self):
        """Test escaping of parameter values"""
        assert params_to_string([("term", "a&b=c")]) == "term=a%26b%3Dc"
