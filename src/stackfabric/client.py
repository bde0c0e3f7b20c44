"""Service client implementation for the stackfabric framework.

This module provides the ServiceClient class: the synchronous HTTP transport
every resource client and every Pager talks to. It applies authentication,
maps HTTP statuses onto the stackfabric exception hierarchy, and retries
transient failures with exponential backoff. Retrying is a transport concern
only; the pagination engine above it never retries.
"""

import ssl
from collections.abc import Collection, Mapping
from datetime import UTC, datetime as dt
from email.utils import parsedate_to_datetime
from http import HTTPStatus
from typing import Any, Self
from urllib.parse import quote

import certifi
import httpx
import tenacity
from tenacity import Retrying, stop_after_attempt, wait_exponential

from .auth import AuthStrategy, NoAuth
from .config import BaseApiSettings, get_base_settings
from .exceptions import (
    APIError,
    ConflictError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    StackfabricError,
    StackfabricRequestError,
    TimeoutError,
)
from .log_config import logger
from .types import RequestData


class ServiceClient:
    """Synchronous HTTP client bound to a single service endpoint.

    Key features:
    - Automatic retries with exponential backoff for transient errors
    - ``Retry-After`` aware waiting on 429 responses
    - Pluggable authentication strategies
    - Per-call accepted status codes (``ok_codes``)
    - Pre/post request hooks for customization

    Attributes:
        _settings: Configuration settings for the client.
        _endpoint: Base URL of the service, without a trailing slash.
        _retryable_status_codes: HTTP status codes that trigger a retry.
        _auth_strategy: Authentication strategy instance.
        _http_client: The underlying httpx.Client used to send requests.
        _should_close_client: Whether this instance owns ``_http_client``.
    """

    DEFAULT_RETRYABLE_STATUS_CODES: frozenset[int] = frozenset(
        [429, 500, 502, 503, 504]
    )
    """Default set of HTTP status codes considered retryable."""

    def __init__(
        self,
        settings: BaseApiSettings | None = None,
        auth_strategy: AuthStrategy | None = None,
        *,
        endpoint: str,
        http_client: httpx.Client | None = None,
        retryable_status_codes: frozenset[int] = DEFAULT_RETRYABLE_STATUS_CODES,
    ):
        """Initialize the ServiceClient.

        Args:
            settings: Configuration settings for the client behavior. If None,
                the cached base settings are used.
            auth_strategy: Optional authentication strategy. If None, uses NoAuth.
            endpoint: The service endpoint, e.g. ``https://neutron:9696/v2.0``.
            http_client: Optional pre-configured httpx.Client instance.
            retryable_status_codes: Set of HTTP status codes to retry on.
        """
        self._settings = settings or get_base_settings()
        self._endpoint: str = endpoint.rstrip("/")
        self._retryable_status_codes: frozenset[int] = retryable_status_codes

        self._auth_strategy: AuthStrategy = auth_strategy or NoAuth()
        logger.info(
            f"Using authentication strategy: {type(self._auth_strategy).__name__}"
        )

        self._should_close_client = http_client is None
        self._http_client = http_client or self._create_default_http_client()

        logger.debug(f"ServiceClient initialized for endpoint {self._endpoint}.")

    @property
    def endpoint(self) -> str:
        """The service endpoint this client is bound to."""
        return self._endpoint

    def _create_default_http_client(self) -> httpx.Client:
        """Create a default httpx.Client with configured settings."""
        if not self._settings.verify_ssl:
            logger.warning(
                f"TLS certificate verification is disabled for {self._endpoint}."
            )
            verify_ssl: ssl.SSLContext | bool = False
        else:
            verify_ssl = self._certifi_context()

        return httpx.Client(
            timeout=self._settings.request_timeout,
            verify=verify_ssl,
            headers={
                "User-Agent": self._settings.user_agent,
                "Accept": "application/json",
            },
        )

    def _certifi_context(self) -> ssl.SSLContext | bool:
        try:
            context = ssl.create_default_context(cafile=certifi.where())
            logger.debug("Using certifi SSL context.")
            return context
        except (OSError, ssl.SSLError):
            logger.warning(
                "certifi bundle failed to load. Using default SSL verification."
            )
            return True

    def service_url(self, *parts: Any) -> str:
        """Join path segments onto the service endpoint.

        Args:
            *parts: Path segments; each one is percent-encoded, slashes included.

        Returns:
            str: The absolute URL.
        """
        path = "/".join(quote(str(part), safe="") for part in parts)
        return f"{self._endpoint}/{path}"

    def _parse_retry_after(self, response: httpx.Response) -> float | None:
        """Parse a ``Retry-After`` header given either in seconds or as an HTTP date."""
        retry_after_header = response.headers.get("Retry-After")
        if not retry_after_header:
            return None
        if retry_after_header.isdigit():
            logger.debug(f"Parsed Retry-After (seconds): {retry_after_header}")
            return float(retry_after_header)
        try:
            retry_dt_obj = parsedate_to_datetime(retry_after_header)
        except (TypeError, ValueError) as e:
            logger.warning(
                f"Could not parse Retry-After HTTP date '{retry_after_header}': {e}"
            )
            return None
        if retry_dt_obj.tzinfo is None:
            logger.warning(
                f"Retry-After date '{retry_after_header}' is naive, assuming UTC."
            )
            retry_dt_obj = retry_dt_obj.replace(tzinfo=UTC)
        delta = retry_dt_obj - dt.now(UTC)
        return max(0.0, delta.total_seconds())

    def _raise_for_status(
        self, response: httpx.Response, ok_codes: Collection[int] | None
    ) -> None:
        """Map a response status onto the stackfabric exception hierarchy."""
        status = response.status_code
        if ok_codes is None:
            if HTTPStatus.OK <= status < HTTPStatus.MULTIPLE_CHOICES:
                return
        elif status in ok_codes:
            return

        message = f"{response.request.method} request failed with status {status}"
        if status == HTTPStatus.NOT_FOUND:
            raise NotFoundError(message, response=response)
        if status == HTTPStatus.CONFLICT:
            raise ConflictError(message, response=response)
        if status == HTTPStatus.TOO_MANY_REQUESTS:
            raise RateLimitError(
                "API rate limit exceeded.",
                response=response,
                retry_after=self._parse_retry_after(response),
            )
        if status < HTTPStatus.BAD_REQUEST:
            message = (
                f"Unexpected status {status} for {response.request.method}; "
                f"expected one of {sorted(ok_codes or [])}"
            )
        raise APIError(message, response=response)

    def _execute_single_request(
        self, request_data: RequestData, ok_codes: Collection[int] | None
    ) -> httpx.Response:
        """Execute a single HTTP request attempt.

        Raises:
            NotFoundError, ConflictError, RateLimitError, APIError: For
                responses whose status is not accepted.
            TimeoutError: If the request times out.
            NetworkError: For network-related errors.
            StackfabricRequestError: For other httpx request errors.
        """
        hook_params: dict[str, Any] | None = (
            dict(request_data.params) if request_data.params is not None else None
        )
        hook_headers = httpx.Headers(request_data.headers)

        if self._settings.pre_request_hooks:
            logger.debug(
                f"Executing {len(self._settings.pre_request_hooks)} pre-request hooks "
                f"for {request_data.method} {request_data.url}"
            )
            for hook in self._settings.pre_request_hooks:
                try:
                    hook(request_data.method, request_data.url, hook_params, hook_headers)
                except Exception as e:
                    logger.error(
                        f"Error executing pre-request hook {getattr(hook, '__name__', str(hook))}: {e}",
                        exc_info=True,
                    )
            request_data.params = hook_params
            request_data.headers = {k: v for k, v in hook_headers.items()}

        request = request_data.build_request(self._http_client)
        self._auth_strategy.authenticate(request)
        if not request.headers.get("User-Agent"):
            request.headers["User-Agent"] = self._settings.user_agent

        logger.debug(f"Sending request: {request.method} {request.url}")
        logger.trace(f"Request Headers: {request.headers}")
        if request.content:
            logger.trace(f"Request Body: {request.content.decode()}")

        try:
            response = self._http_client.send(request)
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {request.url}")
            raise TimeoutError("Request timed out", request=request) from e
        except httpx.NetworkError as e:
            logger.error(f"Network error occurred for {request.url}: {e}")
            raise NetworkError(
                f"Network error for {request.url}: {e}", request=request
            ) from e
        except httpx.RequestError as e:
            logger.error(f"HTTP request error for {request.url}: {e}")
            raise StackfabricRequestError(
                f"HTTP request error for {request.url}: {e}", request=request
            ) from e

        logger.debug(f"Received response: {response.status_code} for {request.url}")
        logger.trace(f"Response Headers: {response.headers}")
        self._raise_for_status(response, ok_codes)
        return response

    def _should_retry_request(self, retry_state: tenacity.RetryCallState) -> bool:
        """Predicate for tenacity: should we retry this request?"""
        outcome = retry_state.outcome
        if not outcome or not outcome.failed:
            return False

        exc = outcome.exception()
        request = getattr(exc, "request", None)
        url = str(getattr(request, "url", "N/A"))

        if isinstance(exc, TimeoutError | NetworkError):
            logger.warning(f"Retrying due to {type(exc).__name__} for {url}")
            return True

        if isinstance(exc, APIError) and exc.response is not None:
            status_code = exc.response.status_code
            if status_code in self._retryable_status_codes:
                logger.warning(f"Retrying due to status code {status_code} for {url}")
                return True

        return False

    def _wait_before_retry(self, retry_state: tenacity.RetryCallState) -> float:
        """Wait strategy: honour Retry-After on 429, otherwise back off exponentially."""
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(exc, RateLimitError) and self._settings.enable_rate_limiting:
            if exc.retry_after is not None:
                return exc.retry_after
            return float(self._settings.rate_limit_retry_after_default)
        return wait_exponential(multiplier=self._settings.backoff_factor)(retry_state)

    def _before_retry_sleep(self, retry_state: tenacity.RetryCallState) -> None:
        """Log details before tenacity sleeps between retries."""
        if not retry_state.outcome:
            return

        exc = retry_state.outcome.exception()
        sleep_time = (
            getattr(retry_state.next_action, "sleep", 0)
            if retry_state.next_action
            else 0
        )
        logger.info(
            f"Retrying request in {sleep_time:.2f} seconds after "
            f"{retry_state.attempt_number} attempt(s) due to: {type(exc).__name__} - {exc}"
        )

    def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_data: Any | None = None,
        ok_codes: Collection[int] | None = None,
    ) -> httpx.Response:
        """Perform an HTTP request against the service.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, etc.).
            url: Absolute URL, or a path relative to the service endpoint.
            params: Query parameters as a mapping.
            json_data: JSON-serialisable request body.
            ok_codes: Accepted status codes. ``None`` accepts any 2xx status.

        Returns:
            httpx.Response: The accepted response.

        Raises:
            StackfabricError: Any transport failure, after retries are exhausted.
        """
        if not httpx.URL(url).is_absolute_url:
            url = f"{self._endpoint}/{url.lstrip('/')}"

        request_data = RequestData(
            method=method.upper(), url=url, params=params, json_data=json_data
        )
        retry_strategy = Retrying(
            stop=stop_after_attempt(self._settings.max_retries + 1),
            wait=self._wait_before_retry,
            retry=self._should_retry_request,
            reraise=True,
            before_sleep=self._before_retry_sleep,
        )

        try:
            response = retry_strategy(self._execute_single_request, request_data, ok_codes)
        except StackfabricError as e:
            logger.error(f"{request_data.method} {url} failed: {e}")
            raise

        attempts = retry_strategy.statistics.get("attempt_number", 1)
        for hook in self._settings.post_request_hooks:
            try:
                hook(response, attempts)
            except Exception as e:
                logger.error(
                    f"Error executing post-request hook {getattr(hook, '__name__', str(hook))}: {e}",
                    exc_info=True,
                )
        return response

    def get(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        ok_codes: Collection[int] | None = (200,),
    ) -> httpx.Response:
        """Issue a GET request. This is the transport contract used by Pager."""
        return self.request("GET", url, params=params, ok_codes=ok_codes)

    def post(
        self,
        url: str,
        *,
        json_data: Any | None = None,
        ok_codes: Collection[int] | None = (201, 202),
    ) -> httpx.Response:
        return self.request("POST", url, json_data=json_data, ok_codes=ok_codes)

    def put(
        self,
        url: str,
        *,
        json_data: Any | None = None,
        ok_codes: Collection[int] | None = (200, 202),
    ) -> httpx.Response:
        return self.request("PUT", url, json_data=json_data, ok_codes=ok_codes)

    def delete(
        self, url: str, *, ok_codes: Collection[int] | None = (202, 204)
    ) -> httpx.Response:
        return self.request("DELETE", url, ok_codes=ok_codes)

    def close(self) -> None:
        """Close the underlying HTTP client and any auth-specific clients."""
        if self._should_close_client and not self._http_client.is_closed:
            self._http_client.close()
            logger.debug(f"ServiceClient HTTP client closed for {self._endpoint}.")
        self._auth_strategy.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        self.close()
