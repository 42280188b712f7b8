"""
Configuration module for the Progress Chart Service.
Uses Pydantic BaseSettings for validation - app fails fast if config is inconsistent.
"""
import logging
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with validation.
    Every field has a default so the service starts with an empty environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database Configuration
    progress_svc_db_dir: str = Field(default="data", description="Database directory")
    progress_svc_db_file: str = Field(default="progress.db", description="Database filename")
    progress_svc_db_busy_timeout: int = Field(default=5000, description="SQLite busy timeout in milliseconds")

    # API Configuration
    progress_svc_host: str = Field(default="0.0.0.0", description="API host")
    progress_svc_port: int = Field(default=8000, description="API port")
    progress_svc_reload: bool = Field(default=False, description="Enable hot reload")

    # Chart Viewport Defaults (pixels)
    progress_svc_chart_width: float = Field(default=500, gt=0, description="Chart width")
    progress_svc_chart_height: float = Field(default=300, gt=0, description="Chart height")
    progress_svc_chart_margin_top: float = Field(default=20, ge=0, description="Top margin")
    progress_svc_chart_margin_right: float = Field(default=50, ge=0, description="Right margin")
    progress_svc_chart_margin_bottom: float = Field(default=40, ge=0, description="Bottom margin")
    progress_svc_chart_margin_left: float = Field(default=50, ge=0, description="Left margin")
    progress_svc_chart_cache_size: int = Field(default=32, ge=1, description="Memoized chart snapshots")

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: str = Field(default="json", description="'json' or 'text'")

    @model_validator(mode="after")
    def validate_viewport(self) -> "Settings":
        """Reject a default viewport whose margins leave no plot area."""
        plot_width = (
            self.progress_svc_chart_width
            - self.progress_svc_chart_margin_left
            - self.progress_svc_chart_margin_right
        )
        plot_height = (
            self.progress_svc_chart_height
            - self.progress_svc_chart_margin_top
            - self.progress_svc_chart_margin_bottom
        )
        if plot_width <= 0 or plot_height <= 0:
            raise ValueError(
                f"Chart margins leave no plot area (plot {plot_width}x{plot_height})"
            )
        return self

    @property
    def database_path(self) -> str:
        """Get the full database path."""
        return str(Path(self.progress_svc_db_dir) / self.progress_svc_db_file)

    def ensure_directories(self) -> None:
        """Ensure required directories exist."""
        Path(self.progress_svc_db_dir).mkdir(parents=True, exist_ok=True)


# Global settings instance - fails fast if config is inconsistent
settings = Settings()

DATABASE_PATH = settings.database_path
DATABASE_BUSY_TIMEOUT = settings.progress_svc_db_busy_timeout

API_HOST = settings.progress_svc_host
API_PORT = settings.progress_svc_port
API_RELOAD = settings.progress_svc_reload
