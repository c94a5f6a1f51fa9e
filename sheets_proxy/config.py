import logging
import os
from dataclasses import dataclass, field

from sheets_proxy.sheets_client import API_BASE_URL

DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Config:
    """Process-wide settings, read once at startup and handed to the app."""

    api_key: str = field(default="", repr=False)
    frontend_origin: str = "*"
    log_level: str = DEFAULT_LOG_LEVEL
    sheets_api_base_url: str = API_BASE_URL

    def __post_init__(self) -> None:
        # Unknown names (getLevelName returns a string for them) fall back to INFO
        level = self.log_level.upper()
        if not isinstance(logging.getLevelName(level), int):
            level = DEFAULT_LOG_LEVEL
        object.__setattr__(self, "log_level", level)

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            api_key=os.getenv("GOOGLE_SHEETS_API_KEY", ""),
            frontend_origin=os.getenv("FRONTEND_ORIGIN", "*"),
            log_level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL),
            sheets_api_base_url=os.getenv("SHEETS_API_BASE_URL", API_BASE_URL),
        )
