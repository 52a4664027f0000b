"""
Wiring of a ready-to-use resolver from a Config.

build_engine() creates every collaborator the dispatcher needs:

    HttpTransport     (api.timeout, api.user_agent)
    AccountStore      (account.database)
    IdentityService   (account.user_name)
    token provider    HATCHET_ACCESS_TOKEN if set, else account.token_file
    PriorityExecutor  (executor.workers)
    CompletedRequests

Engine.close() shuts the executor down first, so no work unit is still
using the transport or the account store when they are closed.
"""

from dataclasses import dataclass

from hatchet_resolver.api.auth import AccessTokenProvider, StaticTokenProvider, TokenFileProvider
from hatchet_resolver.api.transport import HttpTransport
from hatchet_resolver.core.account_store import AccountStore
from hatchet_resolver.core.config import Config
from hatchet_resolver.core.logger import get_logger
from hatchet_resolver.infosystem.dispatcher import InfoDispatcher
from hatchet_resolver.infosystem.executor import PriorityExecutor
from hatchet_resolver.infosystem.identity import IdentityService
from hatchet_resolver.infosystem.pipeline import FetchContext
from hatchet_resolver.infosystem.results import CompletedRequests

logger = get_logger(__name__)


@dataclass
class Engine:
    dispatcher: InfoDispatcher
    sink: CompletedRequests
    transport: HttpTransport
    account_store: AccountStore
    executor: PriorityExecutor

    def close(self) -> None:
        self.executor.shutdown(wait=True)
        self.transport.close()
        self.account_store.close()


def build_token_provider(config: Config) -> AccessTokenProvider:
    if config.account.access_token:
        return StaticTokenProvider(config.account.access_token)
    return TokenFileProvider(config.account.token_file)


def build_engine(config: Config) -> Engine:
    """
    Create a resolver from configuration.

    Raises:
        AccountStoreError: If the account database cannot be opened.
    """
    transport = HttpTransport(timeout=config.api.timeout, user_agent=config.api.user_agent)
    account_store = AccountStore(config.account.database)
    identity = IdentityService(
        account_store,
        transport,
        user_name=config.account.user_name,
        base_url=config.api.base_url,
        version=config.api.version,
    )
    context = FetchContext(
        transport=transport,
        identity=identity,
        base_url=config.api.base_url,
        version=config.api.version,
    )
    executor = PriorityExecutor(max_workers=config.executor.workers)
    sink = CompletedRequests()
    dispatcher = InfoDispatcher(
        context,
        executor,
        sink,
        token_provider=build_token_provider(config),
    )

    logger.debug(
        f"Engine ready: {config.api.base_url}/{config.api.version}, "
        f"{config.executor.workers} workers"
    )
    return Engine(
        dispatcher=dispatcher,
        sink=sink,
        transport=transport,
        account_store=account_store,
        executor=executor,
    )
