"""Application settings resolved from the environment."""

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from world_explorer.utils import file_utils
from .itinerary_store import DEFAULT_STORAGE_KEY
from .lookup_client import DEFAULT_API_BASE

logger = logging.getLogger(__name__)

STORAGE_FILENAME = "local_storage.json"

_TRUTHY = ("1", "true", "yes")


@dataclass(frozen=True)
class AppConfig:
    api_base_url: str = DEFAULT_API_BASE
    storage_path: str = field(default_factory=lambda: os.path.join(file_utils.get_data_dir(), STORAGE_FILENAME))
    storage_key: str = DEFAULT_STORAGE_KEY
    request_timeout: Optional[float] = None
    start_maximized: bool = False
    log_level: str = "INFO"
    window_width: int = 1100
    window_height: int = 740


def _parse_timeout(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        timeout = float(value)
    except ValueError:
        logger.warning("Ignoring invalid WORLD_EXPLORER_TIMEOUT=%r", value)
        return None
    if timeout <= 0:
        logger.warning("Ignoring non-positive WORLD_EXPLORER_TIMEOUT=%r", value)
        return None
    return timeout


def load_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Build the configuration from environment variables, falling back to defaults."""
    env = os.environ if environ is None else environ
    defaults = AppConfig()
    return AppConfig(
        api_base_url=env.get("WORLD_EXPLORER_API_BASE") or defaults.api_base_url,
        storage_path=env.get("WORLD_EXPLORER_DATA_FILE") or defaults.storage_path,
        storage_key=env.get("WORLD_EXPLORER_STORAGE_KEY") or defaults.storage_key,
        request_timeout=_parse_timeout(env.get("WORLD_EXPLORER_TIMEOUT")),
        start_maximized=env.get("START_MAXIMIZED", "0").lower() in _TRUTHY,
        log_level=(env.get("WORLD_EXPLORER_LOG_LEVEL") or defaults.log_level).upper(),
    )
