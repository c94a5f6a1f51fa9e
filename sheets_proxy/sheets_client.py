"""Google Sheets values API client.

One GET per call, no retries. Expected failures come back as a
``Result.err`` carrying one of the ``SheetsError`` types below instead of
being raised, so the request handler can map them onto status codes.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional, Union
from urllib.parse import quote

import requests

from sheets_proxy.result import Result

logger = logging.getLogger("sheets-proxy.client")

API_BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"
CONNECT_TIMEOUT = 10
READ_TIMEOUT = 30

# Decoded upstream payload, passed through without shape checks
JsonValue = Any


@dataclass(frozen=True)
class NetworkFailure:
    detail: str

    @property
    def message(self) -> str:
        return f"Network request failed: {self.detail}"


@dataclass(frozen=True)
class UpstreamError:
    status_code: int
    message: str


@dataclass(frozen=True)
class MalformedResponse:
    message: str = "Invalid JSON response from API"


SheetsError = Union[NetworkFailure, UpstreamError, MalformedResponse]


def _reject_constant(name: str) -> float:
    raise ValueError(f"{name} is not valid JSON")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"{text} overflows a finite number")
    return value


def _decode(response: requests.Response) -> JsonValue:
    """Strict JSON decode: NaN, Infinity and overflowing floats are rejected."""
    return response.json(parse_constant=_reject_constant, parse_float=_finite_float)


def _upstream_error_message(response: requests.Response) -> str:
    """Pull ``error.message`` out of a Google error body, if there is one."""
    fallback = f"API request failed with HTTP {response.status_code}"
    try:
        body = _decode(response)
    except ValueError:
        return fallback
    if not isinstance(body, dict):
        return fallback
    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return fallback


def build_target(sheet: str, cell_range: Optional[str] = None) -> str:
    """Compose ``Sheet`` or ``Sheet!A1:C10``."""
    if cell_range:
        return f"{sheet}!{cell_range}"
    return sheet


class SheetsClient:
    """Read-only client for ``spreadsheets.values.get`` keyed by an API key."""

    def __init__(self, api_key: str, base_url: str = API_BASE_URL):
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")

    def _redact(self, text: str) -> str:
        """Mask the API key in transport error text before it leaves the process."""
        if not self._api_key:
            return text
        for form in {self._api_key, quote(self._api_key, safe="")}:
            text = text.replace(form, "***")
        return text

    def build_url(self, spreadsheet_id: str, target: str) -> str:
        return "{}/{}/values/{}?key={}".format(
            self.base_url,
            quote(spreadsheet_id, safe=""),
            quote(target, safe=""),
            quote(self._api_key, safe=""),
        )

    def fetch_values(
        self, spreadsheet_id: str, sheet: str, cell_range: Optional[str] = None
    ) -> Result[JsonValue, SheetsError]:
        target = build_target(sheet, cell_range)
        url = self.build_url(spreadsheet_id, target)
        logger.info("Fetching values for spreadsheet=%s target=%s", spreadsheet_id, target)

        try:
            resp = requests.get(
                url,
                headers={"Accept": "application/json"},
                timeout=(CONNECT_TIMEOUT, READ_TIMEOUT),
                verify=True,
                allow_redirects=True,
            )
        except requests.RequestException as e:
            # str(e) may embed the request URL, key included
            detail = self._redact(str(e)) or "Unknown error"
            logger.warning("Sheets API request failed: %s", detail)
            return Result.err(NetworkFailure(detail))

        if resp.status_code != 200:
            message = _upstream_error_message(resp)
            logger.warning("Sheets API returned HTTP %s: %s", resp.status_code, message)
            return Result.err(UpstreamError(resp.status_code, message))

        try:
            data = _decode(resp)
        except ValueError:  # includes requests.JSONDecodeError
            logger.warning("Sheets API returned a body that is not valid JSON")
            return Result.err(MalformedResponse())

        return Result.ok(data)
