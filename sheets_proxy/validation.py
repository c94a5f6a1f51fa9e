"""Input checks for the query parameters forwarded to the Sheets API."""

import re
from dataclasses import dataclass
from typing import Optional

from sheets_proxy.result import Result

# Characters that could break the outbound URL or be reflected as markup
FORBIDDEN_CHARS = re.compile(r"[<>'\"&]")


@dataclass(frozen=True)
class InvalidInput:
    message: str


def _check_required(raw: str, field: str) -> Result[str, InvalidInput]:
    value = raw.strip()
    if not value:
        return Result.err(InvalidInput(f"{field} is required and cannot be empty"))
    if FORBIDDEN_CHARS.search(value):
        return Result.err(InvalidInput(f"{field} contains invalid characters"))
    return Result.ok(value)


def validate_spreadsheet_id(raw: str) -> Result[str, InvalidInput]:
    """Trim and check a spreadsheet ID."""
    return _check_required(raw, "spreadsheet_id")


def validate_sheet_name(raw: str) -> Result[str, InvalidInput]:
    """Trim and check a sheet name. Spaces are allowed."""
    return _check_required(raw, "sheet")


def validate_range(raw: Optional[str]) -> Result[Optional[str], InvalidInput]:
    """Trim and check an optional A1 range.

    Missing or empty input means "whole sheet" and yields ``None``. The A1
    grammar itself is left to the upstream API.
    """
    value = (raw or "").strip()
    if not value:
        return Result.ok(None)
    if FORBIDDEN_CHARS.search(value):
        return Result.err(InvalidInput("range contains invalid characters"))
    return Result.ok(value)
