# stackloom/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import SettingsConfigDict
from stackfabric.config import BaseApiSettings

from .constants import DEFAULT_USER_AGENT


class ApiSettings(BaseApiSettings):
    """
    Cloud-specific settings for the stackloom client.

    Inherits all generic client settings from BaseApiSettings and adds the
    Keystone credentials and the per-service endpoints.

    Settings are loaded from environment variables (prefixed with 'STACKLOOM_')
    or .env/secrets.env files.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "secrets.env"),
        env_file_encoding="utf-8",
        # e.g. STACKLOOM_AUTH_URL, STACKLOOM_NETWORK_ENDPOINT
        env_prefix="STACKLOOM_",
        extra="ignore",
        case_sensitive=False,
        arbitrary_types_allowed=True,
    )

    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header for requests",
    )

    # --- Keystone Authentication Settings ---
    # Option 1: pre-issued token
    auth_token: str | None = Field(
        default=None, description="Pre-issued Keystone token (optional)"
    )

    # Option 2: Keystone v3 password authentication
    auth_url: str | None = Field(
        default=None, description="Keystone v3 endpoint, e.g. https://keystone:5000/v3"
    )
    username: str | None = Field(default=None, description="Keystone user name")
    password: str | None = Field(default=None, description="Keystone password")
    user_domain_name: str = Field(
        default="Default", description="Domain of the Keystone user"
    )
    project_id: str | None = Field(
        default=None, description="Project to scope the Keystone token to"
    )

    # --- Service Endpoints ---
    database_endpoint: str | None = Field(
        default=None,
        description="Trove endpoint including the project, e.g. https://trove:8779/v1.0/<project>",
    )
    network_endpoint: str | None = Field(
        default=None, description="Neutron endpoint, e.g. https://neutron:9696/v2.0"
    )


@lru_cache
def get_settings() -> ApiSettings:
    """
    Provides access to the application settings.

    Settings are loaded from environment variables (prefixed with 'STACKLOOM_')
    or .env/secrets.env files. The instance is cached for performance.

    Returns:
        ApiSettings: The application settings instance.
    """
    return ApiSettings()
