"""
Battery Charging Log - System Configuration
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): Cycle tier thresholds and export placeholder moved to settings
v1.0.0 (2026-09-28): Initial configuration module
"""

from pydantic_settings import BaseSettings
from pathlib import Path
import os


class Settings(BaseSettings):
    """System-wide configuration"""

    # Application
    APP_NAME: str = "Battery Charging Log"
    APP_VERSION: str = "1.1.0"
    DEBUG: bool = False

    # API Server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_WORKERS: int = 1  # In-flight guards live in process memory

    # SQLite Configuration
    SQLITE_DB_PATH: str = str(Path(__file__).parent / "data" / "charging_log.db")

    # Authentication (tokens are issued elsewhere, only verified here)
    JWT_SECRET_KEY: str = ""  # Generate with: openssl rand -hex 32
    JWT_ALGORITHM: str = "HS256"
    ADMIN_ROLE: str = "admin"

    # File Paths
    DATA_DIR: str = str(Path(__file__).parent / "data")
    LOGS_DIR: str = str(Path(__file__).parent / "logs")

    # Charging log form
    CUSTOMER_OTHER_SENTINEL: str = "Others"

    # Cycle classification (inclusive upper bounds)
    CYCLE_NORMAL_MAX: int = 250
    CYCLE_WARNING_MAX: int = 450
    CYCLE_CRITICAL_MARKER: int = 500  # extra marker strictly above this

    # Admin retrieval
    SEARCH_LIMIT: int = 5000
    EXPORT_PLACEHOLDER: str = "-"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Singleton instance
settings = Settings()


# Create required directories
def init_directories():
    """Create necessary directories if they don't exist"""
    for directory in [settings.DATA_DIR, settings.LOGS_DIR]:
        os.makedirs(directory, exist_ok=True)


if __name__ == "__main__":
    print(f"{settings.APP_NAME} Configuration v{settings.APP_VERSION}")
    print(f"SQLite: {settings.SQLITE_DB_PATH}")
    print(f"Logs: {settings.LOGS_DIR}")
    print(f"Cycle tiers: normal <= {settings.CYCLE_NORMAL_MAX}, "
          f"warning <= {settings.CYCLE_WARNING_MAX}, "
          f"critical marker > {settings.CYCLE_CRITICAL_MARKER}")
