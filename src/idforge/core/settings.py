"""Application settings and configuration.

This module defines all configuration options for the idforge service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from idforge.core.layout import (
    DEFAULT_DATACENTER_BITS,
    DEFAULT_EPOCH,
    DEFAULT_SEQUENCE_BITS,
    DEFAULT_WORKER_BITS,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The layout fields (epoch and bit widths) must be identical on every node
    whose identifiers are compared; the node identity must be unique per node.
    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="idforge", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="info", alias="LOG_LEVEL")

    # Identifier layout shared by every cooperating node
    epoch_ms: int = Field(default=DEFAULT_EPOCH, alias="IDFORGE_EPOCH_MS")
    datacenter_bits: int = Field(default=DEFAULT_DATACENTER_BITS, alias="IDFORGE_DATACENTER_BITS")
    worker_bits: int = Field(default=DEFAULT_WORKER_BITS, alias="IDFORGE_WORKER_BITS")
    sequence_bits: int = Field(default=DEFAULT_SEQUENCE_BITS, alias="IDFORGE_SEQUENCE_BITS")

    # Node identity, assigned by the deployment
    datacenter_id: int = Field(default=0, alias="IDFORGE_DATACENTER_ID")
    worker_id: int = Field(default=0, alias="IDFORGE_WORKER_ID")

    # Sequence exhaustion wait (None waits without bound)
    sequence_wait_timeout_ms: float | None = Field(
        default=1000.0,
        alias="IDFORGE_SEQUENCE_WAIT_TIMEOUT_MS",
    )
    spin_sleep_seconds: float = Field(default=0.0, alias="IDFORGE_SPIN_SLEEP_SECONDS")

    # HTTP surface
    max_batch_size: int = Field(default=1000, alias="IDFORGE_MAX_BATCH_SIZE")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def node(self) -> dict[str, int]:
        """Return the node identity as a convenience dictionary.

        Returns:
            Dictionary with the configured datacenter and worker ids
        """
        return {"datacenter_id": self.datacenter_id, "worker_id": self.worker_id}


settings = Settings()
