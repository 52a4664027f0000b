"""Test access token providers"""

import json
import os
import time

from hatchet_resolver.api.auth import StaticTokenProvider, TokenFileProvider


def write_token(path, **data) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


class TestStaticTokenProvider:

    def test_token(self):
        """Test that a static token is returned as given"""
        assert StaticTokenProvider("abc").ensure_access_token() == "abc"

    def test_empty_is_none(self):
        """Test that an empty or missing static token means no token"""
        assert StaticTokenProvider("").ensure_access_token() is None
        assert StaticTokenProvider(None).ensure_access_token() is None


class TestTokenFileProvider:
    """Test reading tokens written by the login flow"""

    def test_missing_file(self, temp_dir):
        """Test that a missing token file means no token"""
        assert TokenFileProvider(temp_dir / "token.json").ensure_access_token() is None

    def test_valid_token(self, temp_dir):
        """Test reading an unexpired token"""
        path = temp_dir / "token.json"
        write_token(path, access_token="abc", expires_at=time.time() + 3600)
        assert TokenFileProvider(path).ensure_access_token() == "abc"

    def test_token_without_expiry(self, temp_dir):
        """Test that a token without expires_at never expires"""
        path = temp_dir / "token.json"
        write_token(path, access_token="forever")
        assert TokenFileProvider(path).ensure_access_token() == "forever"

    def test_expired_token(self, temp_dir):
        """Test that an expired token is ignored"""
        path = temp_dir / "token.json"
        write_token(path, access_token="abc", expires_at=time.time() - 10)
        assert TokenFileProvider(path).ensure_access_token() is None

    def test_token_inside_safety_buffer(self, temp_dir):
        """Test that a token about to expire is ignored"""
        path = temp_dir / "token.json"
        write_token(path, access_token="abc", expires_at=time.time() + 30)
        assert TokenFileProvider(path).ensure_access_token() is None

    def test_invalid_json(self, temp_dir):
        """Test that a corrupt token file means no token"""
        path = temp_dir / "token.json"
        path.write_text("{not json", encoding="utf-8")
        assert TokenFileProvider(path).ensure_access_token() is None

    def test_missing_access_token_field(self, temp_dir):
        """Test that a token file without access_token means no token"""
        path = temp_dir / "token.json"
        write_token(path, token_type="bearer")
        assert TokenFileProvider(path).ensure_access_token() is None

    def test_rewritten_file_reloaded(self, temp_dir):
        """Test that a rewritten token file is read again"""
        path = temp_dir / "token.json"
        write_token(path, access_token="old")
        provider = TokenFileProvider(path)
        assert provider.ensure_access_token() == "old"

        write_token(path, access_token="new")
        stat = path.stat()
        os.utime(path, (stat.st_atime, stat.st_mtime + 5))

        assert provider.ensure_access_token() == "new"
