# stackfabric/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .types import PostRequestHook, PreRequestHook


class BaseApiSettings(BaseSettings):
    """
    Transport settings shared by every service client built on stackfabric.

    Values come from keyword arguments, then environment variables, then
    ``.env``/``secrets.env``. Concrete clients subclass this, set their own
    ``env_prefix`` and add credentials and service endpoints.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "secrets.env"),
        env_file_encoding="utf-8",
        env_prefix="",  # Subclasses set their own prefix
        extra="ignore",
        case_sensitive=False,
        arbitrary_types_allowed=True,  # Hooks are plain callables
    )

    # --- Transport ---
    request_timeout: float = Field(
        default=30.0, description="Timeout of a single request attempt, in seconds"
    )
    verify_ssl: bool = Field(
        default=True,
        description="Verify service certificates against the certifi CA bundle",
    )
    user_agent: str = Field(
        default="stackfabric/0.1.0",
        description="User-Agent header for requests",
    )

    # --- Retries ---
    max_retries: int = Field(
        default=3,
        description="Retries after the first attempt for timeouts, network errors and retryable statuses",
    )
    backoff_factor: float = Field(
        default=0.5, description="Multiplier of the exponential backoff, in seconds"
    )
    enable_rate_limiting: bool = Field(
        default=True, description="Wait for Retry-After before retrying a 429"
    )
    rate_limit_retry_after_default: int = Field(
        default=60,
        description="Seconds to wait after a 429 that carries no Retry-After header",
    )

    # --- Hooks ---
    pre_request_hooks: list[PreRequestHook] = Field(
        default_factory=list,
        description="Called before every request attempt.",
    )
    post_request_hooks: list[PostRequestHook] = Field(
        default_factory=list,
        description="Called once per accepted response.",
    )


@lru_cache
def get_base_settings() -> BaseApiSettings:
    """Return the process-wide BaseApiSettings, loaded once from the environment."""
    return BaseApiSettings()
