"""Flight search configuration via environment variables."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:145.0) "
    "Gecko/20100101 Firefox/145.0"
)

# Consent cookies that let the results page render without the consent wall
DEFAULT_COOKIES: dict[str, str] = {
    "SOCS": "CAISNQgjEitib3FfaWRlbnRpdHlmcm9udGVuZHVpc2VydmVyXzIwMjUwNDIzLjA0X3AwGgJ1ayACGgYIgP6lwAY",
    "OTZ": "8053484_44_48_123900_44_436380",
    "NID": "8053484_44_48_123900_44_436380",
}


class FlightSettings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SKY_FLIGHTS_", env_file=".env", extra="ignore"
    )

    # Query defaults
    default_currency: str = "GBP"
    language: str = "en-GB"

    # Request identity
    user_agent: str = DEFAULT_USER_AGENT
    cookies: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_COOKIES))

    # Transport
    transport: Literal["httpx", "primp"] = "httpx"
    timeout: int = 30
    proxy_url: str = ""
    max_retries: int = 2

    # Resolver
    max_concurrency: int = Field(default=1, ge=1)

    # Cache
    cache_backend: Literal["none", "memory", "redis"] = "memory"
    cache_ttl: int = 3600
    cache_prefix: str = "sky_flights."
    redis_url: str = "redis://localhost:6379/0"


settings = FlightSettings()
