"""Read-only proxy for the Google Sheets values API."""

from sheets_proxy.app import create_app
from sheets_proxy.config import Config

__all__ = ["Config", "create_app"]
