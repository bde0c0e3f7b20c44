from typing import Self

import httpx
from stackfabric.auth import AuthStrategy, KeystonePasswordAuth, NoAuth, TokenAuth
from stackfabric.client import ServiceClient
from stackfabric.exceptions import ConfigurationError
from stackfabric.log_config import logger

from .config import ApiSettings, get_settings
from .resources import DatabasesClient, VipsClient


class StackloomClient:
    """Client for the database (Trove) and load balancer (Neutron LBaaS) APIs.

    One ``ServiceClient`` is created per configured service endpoint; both
    share the settings and the authentication strategy, so a Keystone token
    is fetched once. Resource clients are available as properties.

    Typical usage:
    ```python
    with StackloomClient() as client:
        vips = client.vips.list(VipListOpts(protocol="HTTP")).all_records(extract_vips)
    ```

    Attributes:
        databases (DatabasesClient): Client for the databases of an instance.
        vips (VipsClient): Client for load balancer virtual IPs.
        _settings (ApiSettings): The resolved settings for this client instance.
        _auth_strategy (AuthStrategy): Strategy shared by every service client.
    """

    def __init__(
        self,
        settings: ApiSettings | None = None,
        auth_strategy: AuthStrategy | None = None,
        *,
        auth_token: str | None = None,
        database_endpoint: str | None = None,
        network_endpoint: str | None = None,
        http_client: httpx.Client | None = None,
    ):
        """Initializes the StackloomClient.

        Authentication Strategy Resolution:
        - If `auth_strategy` is explicitly provided, it is used.
        - Otherwise, Keystone password authentication is used when
          `auth_url`, `username` and `password` are configured.
        - Otherwise, a pre-issued token (`auth_token` argument, then settings)
          is sent as-is.
        - Otherwise, requests are made without authentication.

        Args:
            settings: An optional `ApiSettings` instance. If `None`, settings
                are loaded via `stackloom.config.get_settings()`.
            auth_strategy: An optional explicit `AuthStrategy` instance.
            auth_token: An optional pre-issued Keystone token; takes precedence
                over `settings.auth_token`.
            database_endpoint: Overrides `settings.database_endpoint`.
            network_endpoint: Overrides `settings.network_endpoint`.
            http_client: Optional shared httpx.Client for every service.
        """
        self._settings: ApiSettings = settings or get_settings()
        self._auth_strategy: AuthStrategy = auth_strategy or self._resolve_auth(
            auth_token
        )

        _database_endpoint = database_endpoint or self._settings.database_endpoint
        _network_endpoint = network_endpoint or self._settings.network_endpoint

        self._database_service: ServiceClient | None = None
        self._network_service: ServiceClient | None = None
        self._databases: DatabasesClient | None = None
        self._vips: VipsClient | None = None

        if _database_endpoint:
            self._database_service = ServiceClient(
                self._settings,
                self._auth_strategy,
                endpoint=_database_endpoint,
                http_client=http_client,
            )
            self._databases = DatabasesClient(self._database_service)
        if _network_endpoint:
            self._network_service = ServiceClient(
                self._settings,
                self._auth_strategy,
                endpoint=_network_endpoint,
                http_client=http_client,
            )
            self._vips = VipsClient(self._network_service)

        logger.debug("StackloomClient initialized successfully.")

    def _resolve_auth(self, auth_token: str | None) -> AuthStrategy:
        settings = self._settings
        if settings.auth_url and settings.username and settings.password:
            logger.info("Using Keystone password authentication.")
            return KeystonePasswordAuth(
                settings.auth_url,
                settings.username,
                settings.password,
                user_domain_name=settings.user_domain_name,
                project_id=settings.project_id,
            )
        _auth_token = auth_token or settings.auth_token
        if _auth_token:
            logger.info("Using static token authentication.")
            return TokenAuth(token=_auth_token)
        logger.info("No authentication credentials found, using NoAuth.")
        return NoAuth()

    @property
    def databases(self) -> DatabasesClient:
        """Provides access to the DatabasesClient."""
        if self._databases is None:
            raise ConfigurationError(
                "No database endpoint configured; set STACKLOOM_DATABASE_ENDPOINT."
            )
        return self._databases

    @property
    def vips(self) -> VipsClient:
        """Provides access to the VipsClient."""
        if self._vips is None:
            raise ConfigurationError(
                "No network endpoint configured; set STACKLOOM_NETWORK_ENDPOINT."
            )
        return self._vips

    def close(self) -> None:
        """Close every service client."""
        for service in (self._database_service, self._network_service):
            if service is not None:
                service.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
