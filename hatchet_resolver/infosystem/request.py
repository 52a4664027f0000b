"""
Request and result types of the resolver.

InfoRequest is what a caller submits; Resolution is what the pipeline
produces for it; RequestOutcome is what the dispatcher's Future yields
once the work unit has finished, whatever happened.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping

from hatchet_resolver.api.query import Params, RequestKind, to_params


@dataclass(frozen=True)
class InfoRequest:
    """
    An immutable metadata request.

    Attributes:
        id: Caller-generated correlation key, unique among outstanding requests.
        kind: Operation to perform.
        params: Ordered (key, value) pairs; keys may repeat.
        payload: Pre-serialized JSON body, for send kinds only.

    Example:
        request = InfoRequest.create(RequestKind.ARTISTS, {"name": "Boards of Canada"})
    """
    id: str
    kind: RequestKind
    params: tuple[tuple[str, str], ...] = ()
    payload: str | None = None

    @classmethod
    def create(
        cls,
        kind: RequestKind,
        params: Mapping[str, str | Iterable[str]] | Params | None = None,
        payload: str | None = None,
        request_id: str | None = None
    ) -> "InfoRequest":
        """Build a request, generating a random id when none is given."""
        return cls(
            id=request_id or uuid.uuid4().hex,
            kind=kind,
            params=to_params(params),
            payload=payload,
        )


@dataclass
class Resolution:
    """
    Normalized result of one request.

    Joins are keyed by the stable id of the owning entity (album id,
    chart item id or "rank:<n>", playlist id) rather than by the entity
    itself; `entities` maps those keys back to the owning records.

    Attributes:
        info_result: The parsed primary object: an envelope for simple
                     kinds, a single record (e.g. the AlbumInfo) for
                     detail kinds, None when nothing was found.
        result_map: {category: {owner key: joined value}}, e.g.
                    {"tracks": {"AL1": Tracks(...)}, "images": {"AL1": Image(...)}}.
        entities: {owner key: owning record}.
        converted: {category: [domain objects]} from the conversion step.
    """
    info_result: Any = None
    result_map: dict[str, dict[str, Any]] = field(default_factory=dict)
    entities: dict[str, Any] = field(default_factory=dict)
    converted: dict[str, list] = field(default_factory=dict)

    def joined(self, category: str) -> dict[str, Any]:
        """Return one category of the result map (empty if absent)."""
        return self.result_map.get(category, {})


class OutcomeStatus(Enum):
    DONE = "done"
    NOT_DONE = "not_done"
    IDENTITY_UNAVAILABLE = "identity_unavailable"
    AUTH_UNAVAILABLE = "auth_unavailable"
    TRANSPORT_ERROR = "transport_error"
    PARSE_ERROR = "parse_error"


@dataclass(frozen=True)
class RequestOutcome:
    """
    Structured per-request result returned through the dispatcher's Future.

    The results sink still only hears about DONE requests.
    """
    request_id: str
    kind: RequestKind
    status: OutcomeStatus
    resolution: Resolution | None = None
    error: str | None = None

    @property
    def done(self) -> bool:
        return self.status is OutcomeStatus.DONE
