"""Provider exception classes.

Contains all exception classes raised by generation backends:
- ProviderError: Base exception for provider errors
- ProviderUnreachableError: The backend could not be reached
- ProviderUnauthorizedError: The backend rejected the credentials (401/403)
- MissingAPIKeyError: No API key is configured for a hosted backend
- RateLimitedError: The backend asked the caller to slow down (429)
- ProviderTimeoutError: The backend did not answer within the timeout
- BadResponseError: Non-2xx status or an unusable response body
"""


class ProviderError(Exception):
    """Base exception for provider errors."""

    pass


class ProviderUnreachableError(ProviderError):
    """Raised when the backend cannot be reached (e.g. connection refused)."""

    pass


class ProviderUnauthorizedError(ProviderError):
    """Raised when the backend rejects the API key."""

    pass


class MissingAPIKeyError(ProviderUnauthorizedError):
    """Raised when the required API key is not set."""

    pass


class RateLimitedError(ProviderError):
    """Raised on HTTP 429. The caller may retry after a delay."""

    pass


class ProviderTimeoutError(ProviderError):
    """Raised when generation does not finish within the configured timeout."""

    pass


class BadResponseError(ProviderError):
    """Raised on a non-2xx status or a response that cannot be used."""

    pass
