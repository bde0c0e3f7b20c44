"""Custom exception classes for the stackfabric library.

All failures (transport, decode, link and validation) derive from
``StackfabricError`` so callers need a single ``except`` clause whatever the
origin of the failure.
"""

import httpx


class StackfabricError(Exception):
    """Base exception class for all stackfabric errors."""

    def __init__(
        self,
        message: str,
        *,
        response: httpx.Response | None = None,
        request: httpx.Request | None = None,
    ):
        """Initializes the base exception.

        Args:
            message: The error message.
            response: Optional httpx.Response object associated with the error.
            request: Optional httpx.Request object associated with the error.
        """
        super().__init__(message)
        self.message = message
        self.response = response
        self.request = request

    @property
    def status_code(self) -> int | None:
        """HTTP status of the associated response, if any."""
        if self.response is None:
            return None
        return self.response.status_code

    def __str__(self) -> str:
        if self.response is not None:
            url_info = getattr(getattr(self.response, "request", None), "url", "N/A")
            return (
                f"{self.message} (Status: {self.response.status_code}, URL: {url_info})"
            )
        if isinstance(self.request, httpx.Request):
            return f"{self.message} (URL: {self.request.url})"
        return self.message


class APIError(StackfabricError):
    """Represents an unexpected HTTP status returned by a service."""


class NotFoundError(APIError):
    """Represents a resource not found error (404 Not Found)."""


class ConflictError(APIError):
    """Represents a conflicting request (409 Conflict).

    Raised for example when a pool is already associated with another VIP.
    """


class RateLimitError(APIError):
    """Represents hitting the API rate limit (429 Too Many Requests)."""

    def __init__(
        self,
        message: str,
        *,
        response: httpx.Response | None = None,
        request: httpx.Request | None = None,
        retry_after: float | None = None,
    ):
        super().__init__(message, response=response, request=request)
        self.retry_after = retry_after


class ValidationError(StackfabricError):
    """Represents a client-side validation failure.

    Raised before any request is sent, e.g. when a required option is empty.
    """


class DecodeError(StackfabricError):
    """Represents a response body that cannot be decoded into a page or records."""


class LinkError(StackfabricError):
    """Represents malformed next-page metadata in a paginated response."""


class TimeoutError(StackfabricError):
    """Represents a request timeout error.

    This error is raised when an HTTP request does not complete within the configured timeout.
    """

    def __init__(self, message: str, *, request: httpx.Request | None = None):
        super().__init__(message, request=request, response=None)


class NetworkError(StackfabricError):
    """Represents a network connection error (e.g., DNS resolution failure, connection refused)."""

    def __init__(self, message: str, *, request: httpx.Request | None = None):
        super().__init__(message, request=request, response=None)


class ConfigurationError(StackfabricError):
    """Represents an error in the library's configuration."""

    def __init__(self, message: str):
        super().__init__(message, response=None)


class AuthError(StackfabricError):
    """Raised when an authentication error occurs, e.g., fetching a token fails."""


class StackfabricRequestError(StackfabricError):
    """Represents an error during the HTTP request process itself.

    Covers httpx request failures that are neither timeouts nor plain
    network errors.
    """
