"""Configuration management"""
import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import load_dotenv

from finedu.exceptions import ConfigurationError

load_dotenv()

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Avatar persistence
# - 'memory' (default): process-local store, lost on restart
# - 'json': one JSON document per user under DATA_PATH/avatars
AVATAR_STORE: str = os.getenv("AVATAR_STORE", "memory")
DATA_PATH: Path = Path(os.getenv("DATA_PATH", "./data"))

# Streak day boundaries are computed in this timezone
DEFAULT_TIMEZONE: str = os.getenv("DEFAULT_TIMEZONE", "UTC")

# Metrics
ENABLE_METRICS: bool = os.getenv("ENABLE_METRICS", "true").lower() == "true"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_AVATAR_STORES = ("memory", "json")


# Validation
def validate_config() -> None:
    """Validate configuration values"""
    if LOG_LEVEL.upper() not in VALID_LOG_LEVELS:
        raise ConfigurationError(f"LOG_LEVEL must be one of {VALID_LOG_LEVELS}", config_key="LOG_LEVEL")
    if AVATAR_STORE not in VALID_AVATAR_STORES:
        raise ConfigurationError(
            f"AVATAR_STORE must be one of {VALID_AVATAR_STORES}", config_key="AVATAR_STORE"
        )
    try:
        ZoneInfo(DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(
            f"Unknown timezone '{DEFAULT_TIMEZONE}'", config_key="DEFAULT_TIMEZONE", cause=e
        )
