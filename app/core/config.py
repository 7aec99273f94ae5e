"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Board layout (column names, initial column) is
validated at load time.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Every field has a default; validate_board_layout rejects an unusable
    column configuration.
    """

    # App
    app_name: str = "taskboard"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Request tracing: REST mutations echo this header as the event request_id
    request_id_header: str = "X-Request-ID"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Board: comma-separated, ordered. The set is fixed for the process lifetime.
    board_columns: str = "To Do,In Progress,Done"
    initial_column: str = "To Do"

    # Attachments
    storage_root: str = "./uploads"
    attachment_url_prefix: str = "/api/v1/attachments"
    max_upload_size: int = 10 * 1024 * 1024  # 10MB

    # WebSocket fan-out
    ws_outbound_queue_size: int = 256
    ws_send_timeout_seconds: float = 10.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def column_names(self) -> list[str]:
        """Ordered column names parsed from board_columns."""
        return [c.strip() for c in self.board_columns.split(",") if c.strip()]

    @model_validator(mode="after")
    def validate_board_layout(self) -> "Settings":
        """Validate column names and the initial column.

        - At least one column, no duplicates.
        - initial_column must be one of the columns.
        """
        columns = self.column_names
        if not columns:
            raise ValueError("BOARD_COLUMNS must name at least one column.")
        if len(set(columns)) != len(columns):
            raise ValueError(f"BOARD_COLUMNS contains duplicates: {self.board_columns!r}")
        if self.initial_column not in columns:
            raise ValueError(
                f"INITIAL_COLUMN {self.initial_column!r} is not one of {columns}."
            )
        if self.ws_outbound_queue_size < 1:
            raise ValueError("WS_OUTBOUND_QUEUE_SIZE must be at least 1.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
