"""
Runtime settings (pydantic-settings).

Values come from environment variables, then PROJECT_ROOT/.env, then the
defaults below.
"""
import os
from pathlib import Path

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

# Get project root (one level up from the package)
PROJECT_ROOT = Path(__file__).parent.parent

# Global flag to indicate test mode (set via set_test_mode() or COUPLESFIN_TEST_MODE env var)
_test_mode = os.environ.get("COUPLESFIN_TEST_MODE", "").lower() in ("1", "true", "yes")


def set_test_mode(enabled: bool = True):
    """Switch test mode on or off for this process (and its children, via the env var)."""
    global _test_mode
    _test_mode = enabled
    os.environ["COUPLESFIN_TEST_MODE"] = "1" if enabled else "0"


def is_test_mode() -> bool:
    """Check if test mode is enabled."""
    return _test_mode


class Settings(BaseSettings):
    """Settings for the HTTP app and the money core defaults."""
    # API
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Couples Finance Core"
    VERSION: str = "0.1.0"

    # Server
    PORT: int = 8000

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False

    # Money
    BASE_CURRENCY: str = "BRL"  # Pivot for indirect rate paths, default balance currency
    DEFAULT_LOCALE: str = "pt_BR"  # Babel locale for currency formatting
    SUPPORTED_CURRENCIES: list[str] = ["BRL", "USD", "EUR", "GBP"]

    # FX
    FX_RATE_MAX_AGE_HOURS: int = 48  # Older rate tables are reported as stale

    # CORS (for frontend development)
    BACKEND_CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173", "http://localhost:8080"]

    model_config = ConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        case_sensitive=True,
        env_file_encoding='utf-8'
        )


def get_settings() -> Settings:
    """Fresh Settings; file logging is forced off in test mode."""
    settings = Settings()

    if is_test_mode():
        settings.LOG_TO_FILE = False

    return settings
