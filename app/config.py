"""Runtime configuration for the article importer.

Values come from environment variables prefixed with ``IMPORTER_`` (or a
``.env`` file).  The network limits are handed to the pipeline as an explicit
:class:`FetchLimits` value rather than read from module globals, so tests can
run the pipeline with small synthetic limits.
"""

from functools import lru_cache
from typing import List, NamedTuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FetchLimits(NamedTuple):
    timeout_seconds: float = 5.0
    max_bytes: int = 5_000_000
    max_redirects: int = 5
    dns_timeout_seconds: float = 2.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="IMPORTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Fetch limits
    # -------------------------------------------------------------------------
    fetch_timeout_seconds: float = Field(
        default=5.0, gt=0, description="Wall-clock budget for one retrieval, redirects included."
    )
    max_content_bytes: int = Field(
        default=5_000_000, gt=0, description="Largest response body accepted, in bytes."
    )
    max_redirects: int = Field(default=5, ge=0, description="Redirect hops followed per import.")
    dns_timeout_seconds: float = Field(
        default=2.0, gt=0, description="Budget for resolving one hostname."
    )

    # -------------------------------------------------------------------------
    # HTTP surface
    # -------------------------------------------------------------------------
    import_rate_limit: str = "10/minute"
    cors_origins: List[str] = ["*"]
    host: str = "0.0.0.0"
    port: int = 3000

    def fetch_limits(self) -> FetchLimits:
        return FetchLimits(
            timeout_seconds=self.fetch_timeout_seconds,
            max_bytes=self.max_content_bytes,
            max_redirects=self.max_redirects,
            dns_timeout_seconds=self.dns_timeout_seconds,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
