"""
Information resolution engine.

Turns typed metadata requests into joined results and filled domain
objects:
    - request: InfoRequest, Resolution and RequestOutcome
    - identity: The caller's lazily resolved Hatchet user id
    - pipeline: Fetch-parse-join chains per request family
    - conversion: Conversion and fill steps per request kind
    - kinds: The request kind table
    - correlation: Fill targets of in-flight requests
    - executor: Priority-aware worker pool
    - results: Completed-ids sink
    - dispatcher: resolve() and send()

Usage:
    from hatchet_resolver.infosystem import InfoDispatcher, InfoRequest, CompletedRequests
"""

from hatchet_resolver.infosystem.correlation import CorrelationStore
from hatchet_resolver.infosystem.dispatcher import InfoDispatcher
from hatchet_resolver.infosystem.executor import Priority, PriorityExecutor
from hatchet_resolver.infosystem.identity import ACCOUNT_USER_ID_KEY, IdentityService
from hatchet_resolver.infosystem.kinds import KIND_TABLE, KindHandler, handler_for
from hatchet_resolver.infosystem.pipeline import FetchContext
from hatchet_resolver.infosystem.request import (
    InfoRequest,
    OutcomeStatus,
    RequestOutcome,
    Resolution,
)
from hatchet_resolver.infosystem.results import CompletedRequests, ResultsSink

__all__ = [
    "InfoRequest",
    "Resolution",
    "OutcomeStatus",
    "RequestOutcome",
    "IdentityService",
    "ACCOUNT_USER_ID_KEY",
    "FetchContext",
    "KindHandler",
    "KIND_TABLE",
    "handler_for",
    "CorrelationStore",
    "Priority",
    "PriorityExecutor",
    "ResultsSink",
    "CompletedRequests",
    "InfoDispatcher",
]
