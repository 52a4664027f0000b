"""
Domain model for hatchet-resolver.

    - models: Mutable caller-facing objects (Artist, Album, Track, User, ...)
    - convert: Raw response shape -> domain object conversion and fill routines
"""

from hatchet_resolver.domain.models import (
    LOVED_ITEMS_PLAYLIST_ID,
    Album,
    Artist,
    Image,
    Playlist,
    SocialAction,
    Track,
    User,
)

__all__ = [
    "LOVED_ITEMS_PLAYLIST_ID",
    "Album",
    "Artist",
    "Image",
    "Playlist",
    "SocialAction",
    "Track",
    "User",
]
