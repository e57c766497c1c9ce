"""
Environment helpers shared by the pipeline modules.
Values come from the process environment, after `.env` has been loaded.
"""
import os
from dotenv import load_dotenv

from .exceptions import ConfigurationError

# Load environment variables
load_dotenv()


def env_float(name: str, default: float) -> float:
    """Read a float setting, raising ConfigurationError for malformed values."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return float(default)
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
