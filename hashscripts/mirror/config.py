"""Environment configuration.

Settings are read from the environment and an optional ``.env`` file:

    MIRROR_NODE_BASEURL=https://testnet.mirrornode.hedera.com
    MAX_RETRY=5
    MIRROR_TIMEOUT=30
    MIRROR_BACKOFF=2
    MIRROR_MAX_CONCURRENCY=8
    MIRROR_REQUESTS_PER_SECOND=20
    LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.enums import Network
from .runtime import FetchPolicy, RequestLimiter


class MirrorSettings(BaseSettings):
    """Mirror-node client settings loaded from environment variables.

    ``MIRROR_NODE_BASEURL`` may carry a path prefix (``https://host/proxy``);
    endpoint paths and cursors are appended after it.
    """

    mirror_node_baseurl: str = Field(default=Network.MAINNET.mirror_url)
    max_retry: int = Field(default=10, ge=1)
    mirror_timeout: float = Field(default=5.0, gt=0)
    mirror_backoff: float = Field(default=0.5, ge=0)
    mirror_log_after: int = Field(default=5, ge=1)
    mirror_max_concurrency: int = Field(default=8, ge=1)
    mirror_requests_per_second: float | None = Field(default=20.0, gt=0)
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def fetch_policy(self, *, verbose: bool = False) -> FetchPolicy:
        return FetchPolicy(
            timeout=self.mirror_timeout,
            max_retries=self.max_retry,
            backoff_seconds=self.mirror_backoff,
            log_after_attempts=self.mirror_log_after,
            verbose=verbose,
        )

    def limiter(self) -> RequestLimiter:
        return RequestLimiter(
            max_concurrency=self.mirror_max_concurrency,
            requests_per_second=self.mirror_requests_per_second,
        )


@lru_cache
def get_settings() -> MirrorSettings:
    """Get cached settings instance."""
    return MirrorSettings()
