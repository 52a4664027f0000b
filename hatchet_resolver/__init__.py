"""
hatchet-resolver: Resolve music metadata from the Hatchet API.

This package turns typed metadata requests (artist info, albums, top
hits, album detail, user profiles, search, social feeds) into joined
results, or merges them into caller-owned domain objects, and sends
playback and social mutations back to the API.

Architecture:
    A request travels through these layers:

    infosystem/dispatcher: resolve() / send() submit one work unit per
        request to a priority executor and return a Future
    infosystem/pipeline: the work unit fetches every endpoint the kind
        needs (up to three dependent GETs), parses each body and joins
        records that only reference each other by id
    infosystem/conversion: the joined result becomes new domain objects
        and/or fills the caller's registered target
    infosystem/results: the request id is reported to the results sink
        only if everything succeeded

Modules:
    core/        - Configuration, account store, logging, exceptions
    api/         - Query builder, HTTP transport, response shapes, tokens
    domain/      - Caller-facing Artist/Album/Track/User/Playlist objects
    infosystem/  - Dispatcher, pipeline, conversion, identity
    engine.py    - Builds a dispatcher from a Config
    cli.py       - Command-line interface

Usage:
    Command Line:
        hatchet top-hits "Boards of Canada"
        hatchet album "Geogaddi" --artist "Boards of Canada"

    Python API:
        from hatchet_resolver.core import load_config
        from hatchet_resolver.engine import build_engine
        from hatchet_resolver.domain import Artist
        from hatchet_resolver.infosystem import InfoRequest
        from hatchet_resolver.api import RequestKind

        engine = build_engine(load_config())
        artist = Artist(name="Boards of Canada")
        request = InfoRequest.create(RequestKind.ARTISTS_TOPHITS, {"name": artist.name})
        outcome = engine.dispatcher.resolve(request, fill_target=artist).result()
        engine.close()
"""

__version__ = "0.1.0"
__author__ = "hatchet-resolver contributors"
