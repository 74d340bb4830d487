"""Viewer configuration — env-driven via pydantic-settings.

Reads from a .env file and REPLICAVIEW_* environment variables.
"""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from replicaview.models.schema import SCHEMA_PROFILES, SchemaProfile, get_profile

# Automatic processing delays offered by the dashboard, in milliseconds.
PROCESS_DELAYS_MS: tuple[int, ...] = (0, 50, 500, 1500)
MANUAL = "manual"


class ViewerConfig(BaseSettings):
    """Runtime configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export REPLICAVIEW_STATUS_URL=http://10.0.0.5:10000
        export REPLICAVIEW_SCHEMA_PROFILE=v2
        export REPLICAVIEW_PROCESS_MODE=500

    Or via .env file::

        REPLICAVIEW_LOG_LEVEL=DEBUG
        REPLICAVIEW_POLL_INTERVAL_SECONDS=0.5
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="REPLICAVIEW_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Status server
    status_url: str = "http://localhost:10000"
    request_timeout_seconds: float = 5.0
    poll_interval_seconds: float = 1.0

    # Rendering
    schema_profile: str = "v1"

    # "manual" or an automatic delay in ms from PROCESS_DELAYS_MS
    process_mode: str = "0"

    # Streamlit dashboard
    host: str = "0.0.0.0"
    port: int = 8501

    @field_validator("schema_profile")
    @classmethod
    def _known_profile(cls, value: str) -> str:
        if value not in SCHEMA_PROFILES:
            raise ValueError(
                f"unknown schema profile {value!r}; expected one of {sorted(SCHEMA_PROFILES)}"
            )
        return value

    @field_validator("process_mode")
    @classmethod
    def _known_process_mode(cls, value: str) -> str:
        if value == MANUAL:
            return value
        if not value.isdigit() or int(value) not in PROCESS_DELAYS_MS:
            raise ValueError(
                f"process_mode must be {MANUAL!r} or one of {PROCESS_DELAYS_MS} (ms)"
            )
        return value

    @property
    def profile(self) -> SchemaProfile:
        """The configured ``SchemaProfile``."""
        return get_profile(self.schema_profile)

    @property
    def is_manual(self) -> bool:
        """Whether outstanding actions wait for an explicit Process command."""
        return self.process_mode == MANUAL

    @property
    def process_delay_seconds(self) -> float | None:
        """Delay before automatic processing, or ``None`` in manual mode."""
        if self.is_manual:
            return None
        return int(self.process_mode) / 1000.0


# Module-level singleton; import as `from replicaview.config import config`
config = ViewerConfig()
