import threading
from typing import Any, Protocol

import httpx

from .exceptions import AuthError, ConfigurationError
from .log_config import logger


class AuthStrategy(Protocol):
    """Protocol defining the interface for various authentication strategies.

    Concrete implementations of this protocol add authentication information
    (the ``X-Auth-Token`` header for Keystone-backed services) to an outgoing
    HTTP request.
    """

    def authenticate(self, request: httpx.Request) -> None:
        """
        Modifies the request to add authentication information.

        Args:
            request: The httpx.Request object to modify.

        Raises:
            AuthError: If authentication fails (e.g., token fetching).
            ConfigurationError: If required configuration for the strategy is missing.
        """
        ...

    def close(self) -> None:
        """
        Closes any underlying resources used by the auth strategy, if
        applicable (e.g., an HTTP client for token fetching).
        This method should be idempotent.
        """
        ...


class NoAuth:
    """Implements the AuthStrategy protocol for requests requiring no authentication."""

    def authenticate(self, request: httpx.Request) -> None:
        """Does nothing as no authentication is needed."""
        logger.trace("Using NoAuth strategy, no authentication applied.")

    def close(self) -> None:
        """No resources to close for NoAuth, this method is a no-op."""


class TokenAuth:
    """Implements AuthStrategy using a pre-issued Keystone token.

    The token is sent verbatim in the ``X-Auth-Token`` header.

    Attributes:
        _token: The static Keystone token.
    """

    def __init__(self, token: str | None):
        if not token:
            raise ConfigurationError("TokenAuth requires a non-empty 'token'.")
        self._token: str = token
        logger.debug("TokenAuth initialized.")

    def authenticate(self, request: httpx.Request) -> None:
        """Adds the 'X-Auth-Token: <token>' header to the request."""
        logger.trace("Authenticating request using TokenAuth.")
        request.headers["X-Auth-Token"] = self._token

    def close(self) -> None:
        """No resources to close for TokenAuth, this method is a no-op."""


class KeystonePasswordAuth:
    """Implements AuthStrategy using the Keystone v3 password method.

    The strategy issues ``POST {auth_url}/auth/tokens`` with the user's
    credentials and an optional project scope, reads the issued token from the
    ``X-Subject-Token`` response header and reuses it for every request.

    Attributes:
        _auth_url: The Keystone v3 endpoint, e.g. ``https://keystone:5000/v3``.
        _username: The user name.
        _password: The user's password.
        _user_domain_name: Domain the user belongs to.
        _project_id: Optional project to scope the token to.
        _token: The currently active token.
        _token_client: An internal httpx.Client for fetching the token.
        _fetch_lock: Lock preventing concurrent token requests.
    """

    def __init__(
        self,
        auth_url: str | None,
        username: str | None,
        password: str | None,
        *,
        user_domain_name: str = "Default",
        project_id: str | None = None,
    ):
        if not all([auth_url, username, password]):
            raise ConfigurationError(
                "KeystonePasswordAuth requires 'auth_url', 'username', and 'password'."
            )
        assert auth_url is not None
        assert username is not None
        assert password is not None
        self._auth_url: str = auth_url.rstrip("/")
        self._username: str = username
        self._password: str = password
        self._user_domain_name: str = user_domain_name
        self._project_id: str | None = project_id
        self._token: str | None = None
        self._token_client: httpx.Client | None = None
        self._fetch_lock = threading.Lock()
        logger.debug("KeystonePasswordAuth initialized.")

    def _get_token_client(self) -> httpx.Client:
        """Lazily creates the internal client used for token requests."""
        if self._token_client is None:
            self._token_client = httpx.Client(timeout=15.0)
        return self._token_client

    def _build_auth_request(self) -> dict[str, Any]:
        """Builds the Keystone v3 password authentication payload."""
        auth: dict[str, Any] = {
            "identity": {
                "methods": ["password"],
                "password": {
                    "user": {
                        "name": self._username,
                        "domain": {"name": self._user_domain_name},
                        "password": self._password,
                    }
                },
            }
        }
        if self._project_id:
            auth["scope"] = {"project": {"id": self._project_id}}
        return {"auth": auth}

    def _fetch_token(self) -> str:
        """Fetches a new token from Keystone.

        Returns:
            The issued token.

        Raises:
            AuthError: If the token request fails or the response carries no token.
        """
        with self._fetch_lock:
            # Another caller may have fetched the token while we waited
            if self._token:
                return self._token

            token_url = f"{self._auth_url}/auth/tokens"
            logger.info(f"Requesting Keystone token from {token_url}")
            client = self._get_token_client()
            try:
                response = client.post(url=token_url, json=self._build_auth_request())
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                logger.error(
                    f"HTTP error fetching token: {e.response.status_code} - {e.response.text}"
                )
                raise AuthError(
                    f"Failed to fetch Keystone token: {e.response.status_code} - {e.response.text}",
                    response=e.response,
                ) from e
            except httpx.RequestError as e:
                logger.error(f"Error fetching token: {e}")
                raise AuthError(f"Failed to fetch Keystone token: {e}") from e

            token = response.headers.get("X-Subject-Token")
            if not token:
                raise AuthError(
                    "Keystone response did not include an X-Subject-Token header.",
                    response=response,
                )
            logger.info("Successfully fetched Keystone token.")
            self._token = token
            return token

    def authenticate(self, request: httpx.Request) -> None:
        """Ensures a token is available and adds the X-Auth-Token header."""
        logger.trace("Authenticating request using KeystonePasswordAuth.")
        token = self._token or self._fetch_token()
        request.headers["X-Auth-Token"] = token

    def close(self) -> None:
        """Closes the internal HTTP client used for token fetching."""
        if self._token_client:
            self._token_client.close()
            self._token_client = None
            logger.debug("KeystonePasswordAuth internal client closed.")
