"""
Identity of the authenticated Hatchet user.

Identity-scoped requests (the caller's own profile, playlists, loved
items) need the caller's Hatchet user id. IdentityService resolves it
once per process:

    1. Return the cached id if there is one
    2. Read it from the account store
    3. If still unknown but a user name is configured, look the user up
       by name (one GET users/?name=...) and write the id back

The cached id is never invalidated. Two workers that find the cache
empty at the same time may both run the lookup; both write the same
value, so the race is tolerated rather than locked away.
"""

from typing import Protocol

from hatchet_resolver.api.models import Users, parse
from hatchet_resolver.api.query import API_VERSION, BASE_URL, PARAM_NAME, RequestKind, build_query
from hatchet_resolver.core.logger import get_logger

logger = get_logger(__name__)


ACCOUNT_USER_ID_KEY = "hatchet_preference_user_id"


class AccountFields(Protocol):
    def get_account_field(self, key: str) -> str | None: ...

    def set_account_field(self, key: str, value: str) -> None: ...


class Transport(Protocol):
    def get(self, url: str) -> str: ...


class IdentityService:
    """
    Lazily resolved, process-lifetime user id.

    Attributes:
        user_name: Display name used for the lookup, or None.
    """

    def __init__(
        self,
        account_store: AccountFields,
        transport: Transport,
        user_name: str | None = None,
        base_url: str = BASE_URL,
        version: str = API_VERSION
    ) -> None:
        self._account_store = account_store
        self._transport = transport
        self.user_name = user_name
        self._base_url = base_url
        self._version = version
        self._user_id: str | None = None

    def get(self) -> str | None:
        """Return the cached user id without any I/O."""
        return self._user_id

    def set(self, user_id: str) -> None:
        """Cache user_id and persist it to the account store."""
        self._user_id = user_id
        self._account_store.set_account_field(ACCOUNT_USER_ID_KEY, user_id)

    def ensure(self) -> str | None:
        """
        Resolve the user id if it is not cached yet.

        Returns:
            The user id, or None when neither the account store nor a
            name lookup produced one.

        Raises:
            TransportError, ParseError: If the lookup by name fails. The
                caller's work unit treats this like any other fetch failure.
            AccountStoreError: If the stored id cannot be read or written.
        """
        if self._user_id:
            return self._user_id

        stored = self._account_store.get_account_field(ACCOUNT_USER_ID_KEY)
        if stored:
            self._user_id = stored
            return stored

        if not self.user_name:
            return None

        url = build_query(
            RequestKind.USERS,
            ((PARAM_NAME, self.user_name),),
            self._base_url,
            self._version
        )
        users = parse(self._transport.get(url), Users)
        if not users.users:
            logger.warning(f"No Hatchet user named '{self.user_name}'")
            return None

        user_id = users.users[0].id
        logger.info(f"Resolved Hatchet user '{self.user_name}' to id {user_id}")
        self.set(user_id)
        return user_id
