import logging
from typing import Optional

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, MethodNotAllowed

from sheets_proxy.config import Config
from sheets_proxy.sheets_client import NetworkFailure, SheetsClient
from sheets_proxy.validation import validate_range, validate_sheet_name, validate_spreadsheet_id

logger = logging.getLogger("sheets-proxy")

ERROR_PREFIX = "Failed to fetch data from Google Sheets API: "
MISSING_KEY_MESSAGE = "GOOGLE_SHEETS_API_KEY environment variable is not set."
METHOD_NOT_ALLOWED_MESSAGE = "Method not allowed. Only GET requests are supported."
INTERNAL_ERROR_MESSAGE = "An internal server error occurred."


# ----------------------
# Helpers
# ----------------------
def error_response(message: str, status: int):
    return jsonify({"error": message}), status


def _config() -> Config:
    return current_app.config["SHEETS_PROXY"]


def _client() -> SheetsClient:
    return current_app.extensions["sheets_client"]


# ----------------------
# Endpoints
# ----------------------
def get_values():
    """Proxy ``GET /?spreadsheet_id=...&sheet=...&range=...`` to the Sheets API."""
    raw_id = request.args.get("spreadsheet_id")
    raw_sheet = request.args.get("sheet")
    if raw_id is None:
        return error_response("Missing required parameter: spreadsheet_id", 400)
    if raw_sheet is None:
        return error_response("Missing required parameter: sheet", 400)

    spreadsheet_id = validate_spreadsheet_id(raw_id)
    sheet = validate_sheet_name(raw_sheet)
    cell_range = validate_range(request.args.get("range"))
    for checked in (spreadsheet_id, sheet, cell_range):
        if checked.is_err:
            logger.info("Rejected request: %s", checked.error.message)
            return error_response(checked.error.message, 400)

    if not _config().api_key:
        logger.error("GOOGLE_SHEETS_API_KEY is not configured")
        return error_response(MISSING_KEY_MESSAGE, 500)

    result = _client().fetch_values(spreadsheet_id.value, sheet.value, cell_range.value)
    if result.is_err:
        error = result.error
        status = 500 if isinstance(error, NetworkFailure) else 502
        return error_response(ERROR_PREFIX + error.message, status)

    return jsonify(result.value), 200


def health_check():
    return jsonify({"status": "proxy-running"}), 200


# ----------------------
# Request hooks and error handlers
# ----------------------
def reject_non_get():
    if request.method != "GET":
        raise MethodNotAllowed(valid_methods=["GET"])


def handle_method_not_allowed(e: MethodNotAllowed):
    return error_response(METHOD_NOT_ALLOWED_MESSAGE, 405)


def handle_http_exception(e: HTTPException):
    return error_response(e.description or e.name, e.code or 500)


def handle_unexpected_error(e: Exception):
    logger.exception("Unexpected error while handling %s %s", request.method, request.path)
    return error_response(INTERNAL_ERROR_MESSAGE, 500)


# ----------------------
# App Setup
# ----------------------
def create_app(config: Optional[Config] = None) -> Flask:
    """Build the proxy app around an already-loaded ``Config``."""
    if config is None:
        config = Config.from_env()

    logging.basicConfig(level=config.log_level)

    app = Flask(__name__)
    app.config["SHEETS_PROXY"] = config
    app.extensions["sheets_client"] = SheetsClient(config.api_key, config.sheets_api_base_url)

    # Relay upstream payloads as-is: key order, unicode, no pretty-printing
    app.json.sort_keys = False
    app.json.ensure_ascii = False
    app.json.compact = True
    app.json.mimetype = "application/json; charset=utf-8"

    CORS(app, origins=[config.frontend_origin])

    # Only GET is served; HEAD and OPTIONS are not answered implicitly
    app.before_request(reject_non_get)
    app.add_url_rule(
        "/", "get_values", get_values, methods=["GET"], provide_automatic_options=False
    )
    app.add_url_rule(
        "/health", "health_check", health_check, methods=["GET"], provide_automatic_options=False
    )

    app.register_error_handler(MethodNotAllowed, handle_method_not_allowed)
    app.register_error_handler(HTTPException, handle_http_exception)
    app.register_error_handler(Exception, handle_unexpected_error)

    return app
