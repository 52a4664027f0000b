"""
Asynchronous dispatcher for resolve and send requests.

Every resolve() or send() call becomes one work unit on the
PriorityExecutor; the calling thread returns a Future immediately.
Inside the work unit:

    resolve:  identity -> fetch/parse/join -> convert -> fill
    send:     identity -> access token -> POST payload

Whatever happens, the unit ends by reporting to the results sink
exactly once: [request.id] when the request fully succeeded, [] when it
did not. Transport, parse, identity, account store and auth failures
are logged (and written to the failed-requests report) and end the
unit with a RequestOutcome describing them; they never reach the caller
as exceptions. A QueryError means the request itself is malformed: it is
logged with its traceback and re-raised, so the Future carries it.

Fill targets are registered in the CorrelationStore before submission
and removed when the unit ends, successful or not, or when the
executor rejects the submission. A target is filled at most once, and
only on success.
"""

import logging
import time
from concurrent.futures import Future
from functools import partial
from typing import Any

from hatchet_resolver.api.auth import AccessTokenProvider
from hatchet_resolver.api.query import PARAM_AUTHORIZATION, RequestKind, build_query
from hatchet_resolver.core.exceptions import (
    AccountStoreError,
    AuthUnavailableError,
    IdentityUnavailableError,
    ParseError,
    QueryError,
    TransportError,
)
from hatchet_resolver.core.logger import get_logger, log_request_failure
from hatchet_resolver.infosystem.correlation import CorrelationStore
from hatchet_resolver.infosystem.executor import Priority, PriorityExecutor
from hatchet_resolver.infosystem.kinds import KIND_TABLE, handler_for
from hatchet_resolver.infosystem.pipeline import FetchContext
from hatchet_resolver.infosystem.request import (
    InfoRequest,
    OutcomeStatus,
    RequestOutcome,
)
from hatchet_resolver.infosystem.results import ResultsSink

logger = get_logger(__name__)


class InfoDispatcher:
    """
    Entry point of the resolver.

    Attributes:
        context: Transport, identity and API location for the pipeline.
        executor: Where work units run.
        sink: Receives the completed-ids report of every unit.
        token_provider: Access tokens for send(); None disables sending.
        correlation: Fill targets of in-flight requests.

    Example:
        sink = CompletedRequests()
        dispatcher = InfoDispatcher(context, PriorityExecutor(4), sink)
        artist = Artist(name="Boards of Canada")
        request = InfoRequest.create(RequestKind.ARTISTS_TOPHITS, {"name": artist.name})
        outcome = dispatcher.resolve(request, fill_target=artist).result()
        if outcome.done:
            print([track.name for track in artist.top_hits])
    """

    def __init__(
        self,
        context: FetchContext,
        executor: PriorityExecutor,
        sink: ResultsSink,
        token_provider: AccessTokenProvider | None = None,
        correlation: CorrelationStore | None = None
    ) -> None:
        self.context = context
        self.executor = executor
        self.sink = sink
        self.token_provider = token_provider
        self.correlation = correlation if correlation is not None else CorrelationStore()

    # =========================================================================
    # Public API
    # =========================================================================

    def resolve(self, request: InfoRequest, fill_target: Any = None) -> Future:
        """
        Submit a metadata request.

        Args:
            request: The request to resolve.
            fill_target: Optional domain object (Artist, Album, User) to
                         enrich in place once the request succeeds.

        Returns:
            Future resolving to a RequestOutcome.

        Raises:
            RuntimeError: If the executor has been shut down.
        """
        if fill_target is not None:
            self.correlation.register(request.id, fill_target)
        try:
            return self.executor.submit(
                partial(self._run, request, self._resolve_unit),
                self._priority_of(request.kind)
            )
        except RuntimeError:
            self.correlation.pop(request.id)
            raise

    def send(self, request: InfoRequest) -> Future:
        """
        Submit a POST mutation (now playing, playback log, social action).

        Returns:
            Future resolving to a RequestOutcome. Without an access token
            the outcome is AUTH_UNAVAILABLE and nothing is sent.
        """
        return self.executor.submit(
            partial(self._run, request, self._send_unit),
            self._priority_of(request.kind)
        )

    # =========================================================================
    # Work units
    # =========================================================================

    @staticmethod
    def _priority_of(kind: RequestKind) -> Priority:
        handler = KIND_TABLE.get(kind)
        return handler.priority if handler is not None else Priority.LOW

    def _run(self, request: InfoRequest, unit) -> RequestOutcome:
        """Run one unit, then clean up and report, whatever happened."""
        started = time.monotonic()
        completed: list[str] = []
        try:
            outcome = unit(request)
            if outcome.done:
                completed.append(request.id)
            return outcome
        except QueryError as e:
            logger.exception(f"Malformed {request.kind.name} request {request.id}: {e.message}")
            raise
        finally:
            self.correlation.pop(request.id)
            self.sink.report_completed(completed)
            logger.debug(
                f"{request.kind.name} request {request.id} finished in "
                f"{time.monotonic() - started:.2f}s (done={bool(completed)})"
            )

    def _resolve_unit(self, request: InfoRequest) -> RequestOutcome:
        handler = handler_for(request.kind)
        if handler.fetch is None:
            raise QueryError(
                f"{request.kind.name} is a send kind and cannot be resolved",
                details={"request_id": request.id, "kind": request.kind.name}
            )

        try:
            self.context.identity.ensure()
            if handler.identity_scoped:
                self.context.require_user_id(request)
            resolution = handler.fetch(self.context, request)
        except IdentityUnavailableError as e:
            return self._failed(request, OutcomeStatus.IDENTITY_UNAVAILABLE, e.message, logging.WARNING)
        except AccountStoreError as e:
            return self._failed(request, OutcomeStatus.IDENTITY_UNAVAILABLE, e.message)
        except TransportError as e:
            return self._failed(request, OutcomeStatus.TRANSPORT_ERROR, e.message)
        except ParseError as e:
            return self._failed(request, OutcomeStatus.PARSE_ERROR, e.message)

        try:
            if handler.convert is not None:
                resolution.converted = handler.convert(resolution)

            target = self.correlation.pop(request.id)
            if target is not None and handler.fill is not None:
                handler.fill(target, resolution)
        except Exception as e:
            logger.exception(f"Converting {request.kind.name} request {request.id} failed")
            return self._failed(request, OutcomeStatus.NOT_DONE, str(e))

        return RequestOutcome(request.id, request.kind, OutcomeStatus.DONE, resolution)

    def _send_unit(self, request: InfoRequest) -> RequestOutcome:
        handler = handler_for(request.kind)
        if not handler.sendable:
            raise QueryError(
                f"{request.kind.name} is not a sendable kind",
                details={"request_id": request.id, "kind": request.kind.name}
            )
        url = build_query(request.kind, request.params, self.context.base_url, self.context.version)

        try:
            self.context.identity.ensure()
            token = self._access_token()
            self.context.transport.post(url, ((PARAM_AUTHORIZATION, token),), request.payload or "")
        except AuthUnavailableError as e:
            return self._failed(request, OutcomeStatus.AUTH_UNAVAILABLE, e.message, logging.WARNING)
        except AccountStoreError as e:
            return self._failed(request, OutcomeStatus.IDENTITY_UNAVAILABLE, e.message)
        except TransportError as e:
            return self._failed(request, OutcomeStatus.TRANSPORT_ERROR, e.message)
        except ParseError as e:
            return self._failed(request, OutcomeStatus.PARSE_ERROR, e.message)

        logger.info(f"Sent {request.kind.name} request {request.id}")
        return RequestOutcome(request.id, request.kind, OutcomeStatus.DONE)

    def _access_token(self) -> str:
        token = self.token_provider.ensure_access_token() if self.token_provider else None
        if not token:
            raise AuthUnavailableError("No access token available")
        return token

    @staticmethod
    def _failed(
        request: InfoRequest,
        status: OutcomeStatus,
        reason: str,
        level: int = logging.ERROR
    ) -> RequestOutcome:
        log_request_failure(logger, request.id, request.kind.name, reason, level)
        return RequestOutcome(request.id, request.kind, status, error=reason)
