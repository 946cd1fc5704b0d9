"""Configuration for the Tumblr client using pydantic-settings."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.paths import ENV_FILE
from src.tumblr.constants import API_BASE_URL


class TumblrConfig(BaseSettings):
    """Configuration for the Tumblr client.

    All settings are loaded from environment variables with the TUMBLR_ prefix.

    :param consumer_key: OAuth consumer key of the registered application.
    :param consumer_secret: OAuth consumer secret of the registered application.
    :param token: OAuth access token for user-specific calls (optional).
    :param token_secret: OAuth access token secret (optional).
    :param api_base_url: API origin requests are sent to.
    :param request_timeout: Request timeout in seconds, unset for no timeout.
    """

    model_config = SettingsConfigDict(
        env_prefix="TUMBLR_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    consumer_key: str = Field(..., description="OAuth consumer key")
    consumer_secret: str = Field(..., description="OAuth consumer secret")
    token: str | None = Field(default=None, description="OAuth access token")
    token_secret: str | None = Field(default=None, description="OAuth access token secret")
    api_base_url: str = Field(default=API_BASE_URL, description="API origin")
    request_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Request timeout in seconds",
    )

    @model_validator(mode="after")
    def validate_token_pair(self) -> "TumblrConfig":
        """Validate that the token and token secret are set together.

        :returns: The validated settings.
        :raises ValueError: If only one half of the token pair is set.
        """
        if (self.token is None) != (self.token_secret is None):
            raise ValueError(
                "TUMBLR_TOKEN and TUMBLR_TOKEN_SECRET must be set together "
                "or not at all."
            )
        return self


@lru_cache
def get_tumblr_settings() -> TumblrConfig:
    """Get cached Tumblr settings.

    Settings are loaded once and cached for the lifetime of the process.

    :returns: Configured TumblrConfig instance.
    """
    return TumblrConfig()  # type: ignore[call-arg]
