
import logging
import os
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class DecorationStyle(str, Enum):
    NONE = "none"
    BACKGROUND = "background"
    TEXT = "text"
    BOTH = "both"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True, validate_default=True)

    enabled: bool = _env_flag("LENS_ENABLED", "true")
    decoration_style: DecorationStyle = os.getenv("LENS_DECORATION_STYLE", "background")
    show_counts: bool = _env_flag("LENS_SHOW_COUNTS", "true")
    scan_debounce_ms: int = int(os.getenv("LENS_SCAN_DEBOUNCE_MS", 500))
    strict_matching: bool = _env_flag("LENS_STRICT_MATCHING", "false")
    result_cache_ttl_s: int = int(os.getenv("LENS_RESULT_CACHE_TTL_S", 30))
    result_cache_size: int = int(os.getenv("LENS_RESULT_CACHE_SIZE", 256))
    debug: bool = _env_flag("LENS_DEBUG", "false")

    @field_validator("decoration_style", mode="before")
    @classmethod
    def _fallback_style(cls, value: object) -> object:
        if isinstance(value, DecorationStyle):
            return value
        normalized = str(value).strip().lower()
        if normalized in {style.value for style in DecorationStyle}:
            return normalized
        logger.warning("Unknown decoration style '%s'; falling back to 'background'", value)
        return DecorationStyle.BACKGROUND

    @property
    def log_level(self) -> int: return logging.DEBUG if self.debug else logging.INFO
    @property
    def debounce_seconds(self) -> float: return self.scan_debounce_ms / 1000.0

settings = Settings()
