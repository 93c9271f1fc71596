"""Configuration module for Remembered Service.

This module provides configuration settings using Pydantic Settings.
Environment variables can be used to override default values.
"""

from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings for Remembered Service.

    All settings can be overridden via environment variables.
    Example: export NOTIFICATION_HOUR=8
    """

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./remembered.db"
    """Database connection URL. Default: SQLite file in current directory"""

    # API Server Configuration
    API_HOST: str = "0.0.0.0"
    """API server host address"""

    API_PORT: int = 8005
    """API server port"""

    # MCP Server Configuration
    MCP_HOST: str = "127.0.0.1"
    """MCP server host address"""

    MCP_PORT: int = 8006
    """MCP server port for SSE transport (separate from REST API)"""

    MCP_TRANSPORT: str = "sse"
    """MCP transport type: 'stdio' for local, 'sse' for network access"""

    # Temporal Configuration
    TIMEZONE: str = "UTC"
    """Local wall-clock zone used to decide what "today" and "now" are"""

    DEFAULT_NOTIFICATION_HOUR: int = 9
    """Hour of day alerts fire at, until a user picks their own"""

    DEFAULT_NOTIFICATION_MINUTE: int = 0
    """Minute of the hour alerts fire at, until a user picks their own"""

    NOTIFICATIONS_ENABLED_BY_DEFAULT: bool = True
    """Whether a newly captured reminder has alerts switched on"""

    # Parser Configuration
    DATE_DETECTOR_ENABLED: bool = True
    """Run the natural-language date detector before the numeric fallback"""

    DATE_DETECTOR_LANGUAGES: List[str] = ["en"]
    """Languages handed to dateparser when searching free text"""

    MAX_REMINDERS_PER_USER: int = 1000
    """Maximum number of reminders allowed per user"""

    # Background Worker Configuration
    WORKER_ENABLED: bool = True
    """Enable/disable background worker that fires registered alerts"""

    WORKER_CHECK_INTERVAL: int = 60
    """Interval in seconds between checks for due alerts (default: 60 seconds)"""

    ALERT_WEBHOOK_URL: str = "http://127.0.0.1:1801/api/notifications"
    """Endpoint that receives fired alerts for delivery to the device"""

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    """Level applied to every service logger"""

    LOG_DIR: str = "logs"
    """Directory for rotating log files, relative to the service directory"""

    class Config:
        """Pydantic config"""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


# Global settings instance
settings = Settings()
