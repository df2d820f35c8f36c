"""Environment and settings (Pydantic Settings)."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Default data directory: ~/.venom/data/
_data_dir = Path.home() / ".venom" / "data"


class Settings(BaseSettings):
    """Venom settings loaded from environment and .env.

    Every field can be overridden with a ``VENOM_``-prefixed variable,
    e.g. ``VENOM_STORE_BACKEND=http``.
    """

    model_config = SettingsConfigDict(
        env_prefix="VENOM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Document store
    store_backend: Literal["sqlite", "http"] = "sqlite"
    db_path: Path = _data_dir / "venom.db"
    store_url: str = "http://localhost:8091"
    store_token: Optional[str] = None
    bucket: str = "venom"
    scope: str = "mindsnap"
    collection: str = "projects"

    # Timeouts (seconds)
    connect_timeout: float = 5.0
    operation_timeout: float = 10.0

    # Export
    export_base_dir: Path = Field(default_factory=Path.cwd)

    # UI
    spinner_interval: float = 0.1
    mask_secrets: bool = True

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: Path = _data_dir / "venom.log"


def get_settings() -> Settings:
    """Return application settings (singleton-like)."""
    return Settings()
