"""
Exception classes for hatchet-resolver.

This module defines all custom exceptions used throughout the resolver.
Each exception carries a human-readable message plus an optional details
dictionary, so failures can be logged with context and then dropped from
the completed-ids report without ever reaching the caller.

Exception Hierarchy:
    HatchetResolverError (base)
        ConfigError - Configuration file issues
        QueryError - Malformed request kind/parameter combination (defect)
        TransportError - Network, TLS or HTTP status failures
        ParseError - Malformed or unexpected JSON
        IdentityUnavailableError - No user id for an identity-scoped request
        AuthUnavailableError - No access token for a send
        AccountStoreError - Account database issues
"""


class HatchetResolverError(Exception):
    """
    Base exception for all hatchet-resolver errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., url, request id).

    Example:
        try:
            transport.get(url)
        except HatchetResolverError as e:
            logger.error(f"Operation failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'url': URL that caused the error
                     - 'request_id': Correlation id of the failed request
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(HatchetResolverError):
    """
    Raised when there's an issue with the configuration file.

    This is a CRITICAL error that should stop program execution.

    Common causes:
        - config.yaml has invalid YAML syntax
        - A section is not a dictionary
        - Invalid field values (e.g., zero executor workers)
    """
    pass


class QueryError(HatchetResolverError):
    """
    Raised when a request kind and its parameters cannot form an endpoint.

    Well-formed callers never trigger this: it signals a programming
    defect (for example a playlist-entries request without an 'id'
    parameter, or sending a kind that has no POST endpoint). It is
    never converted into a silent omission.

    Example:
        raise QueryError(
            "Missing path parameter 'id' for USERS_PLAYLISTS",
            details={'kind': 'USERS_PLAYLISTS', 'param': 'id'}
        )
    """
    pass


class TransportError(HatchetResolverError):
    """
    Raised when an HTTP round-trip fails.

    NON-CRITICAL: aborts only the request that issued the call.

    Attributes:
        status_code: HTTP status of the response, or None when the request
                     never produced one (DNS, TLS, connection reset, timeout).
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        status_code: int | None = None
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class ParseError(HatchetResolverError):
    """
    Raised when a response body cannot be decoded into the expected shape.

    NON-CRITICAL: aborts only the request whose response was malformed.
    """
    pass


class IdentityUnavailableError(HatchetResolverError):
    """
    Raised when an identity-scoped request runs without a known user id.

    The request is reported as not done; nothing is retried.
    """
    pass


class AuthUnavailableError(HatchetResolverError):
    """
    Raised when a send is attempted without an access token.
    """
    pass


class AccountStoreError(HatchetResolverError):
    """
    Raised when the account database cannot be opened, read or written.
    """
    pass
