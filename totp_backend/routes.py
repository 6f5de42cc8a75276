"""
TOTP API ROUTES - FLASK BLUEPRINT

Endpoints that compute TOTP codes from a secret supplied by the caller.
Nothing is stored server-side: every request carries its own secret.

USAGE:
  curl "http://localhost:3000/totp?base32=GEZD%20GNBV%20GY3T%20QOJQ&period=30&digits=6&algorithm=SHA1"
  curl -X POST http://localhost:3000/totp -H "Content-Type: application/json" \\
       -d '{"base32": "GEZD GNBV GY3T QOJQ", "period": 30, "digits": 6, "algorithm": "SHA1"}'
"""
import logging
import math
import re
import time

from flask import Blueprint, current_app, jsonify, request

from totp_core.otp_core import (
    DEFAULT_ALGORITHM,
    DEFAULT_DIGITS,
    DEFAULT_TIME_STEP,
    InvalidDigits,
    InvalidPeriod,
    InvalidSecret,
    MissingSecret,
    generate,
)

logger = logging.getLogger(__name__)

totp_bp = Blueprint('totp', __name__)

ERROR_MESSAGES = {
    "missing_secret": (
        "Missing base32 parameter",
        "Please provide a base32 encoded secret key",
    ),
    "invalid_period": (
        "Invalid period parameter",
        "Period must be a number between 1 and 300 seconds (default: 30)",
    ),
    "invalid_digits": (
        "Invalid digits parameter",
        "Digits must be a number between 4 and 10 (default: 6)",
    ),
    "invalid_secret": (
        "Invalid secret key",
        "The provided secret key is not a valid Base32 encoded key or is improperly formatted",
    ),
    "invalid_json": (
        "Invalid JSON in request body",
        "Request body must be valid JSON",
    ),
}

_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")


def _error(kind: str, status: int = 400):
    error, message = ERROR_MESSAGES[kind]
    logger.info("Rejected %s %s: %s", request.method, request.path, error)
    return jsonify({"error": error, "message": message}), status


def _now() -> int:
    return int(time.time())


def _parse_int(value):
    """
    Parse an integer the lenient way query strings are usually read:
    "30" -> 30, " 60s" -> 60, 45.9 -> 45. Returns None when no integer can
    be read (bools, "", "abc", null).
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _INT_PREFIX_RE.match(value)
        if not match:
            return None
        try:
            return int(match.group(1))
        except ValueError:
            # past the interpreter's int string conversion limit
            return None
    return None


def _request_params():
    """
    Return the request parameters as a mapping, or None if a POST body is
    not a JSON object. An empty POST body is treated as no parameters.
    """
    if request.method != 'POST':
        return request.args
    if not request.get_data(cache=True).strip():
        return {}
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        return None
    return data


@totp_bp.route('/totp', methods=['GET', 'POST'])
def get_totp():
    """
    GENERATE THE CURRENT TOTP CODE

    Parameters (query string for GET, JSON body for POST):
      base32:    REQUIRED - Base32 secret, spaces allowed
      period:    time step in seconds (default 30, 1-300)
      digits:    code length (default 6, 4-10)
      algorithm: SHA1 | SHA256 | SHA512 (default SHA1, unknown -> SHA1)

    Output:
      {"success": true, "code": "123456", "remaining": 17, "algorithm": "SHA1",
       "period": 30, "digits": 6, "secret": "GEZDGNBVGY3TQOJQ", "timestamp": 1700000000}
    """
    params = _request_params()
    if params is None:
        return _error("invalid_json")

    secret = params.get('base32')
    if not secret:
        return _error("missing_secret")

    try:
        result = generate(
            secret,
            period=_parse_int(params.get('period', DEFAULT_TIME_STEP)),
            digits=_parse_int(params.get('digits', DEFAULT_DIGITS)),
            algorithm=params.get('algorithm', DEFAULT_ALGORITHM),
            now=_now(),
        )
    except InvalidPeriod:
        return _error("invalid_period")
    except InvalidDigits:
        return _error("invalid_digits")
    except MissingSecret:
        return _error("missing_secret")
    except InvalidSecret:
        return _error("invalid_secret")

    logger.debug("Generated %d-digit %s code, period=%ds, remaining=%ds",
                 result.digits, result.algorithm, result.period, result.remaining)
    return jsonify({"success": True, **result.as_dict()})


@totp_bp.route('/api', methods=['GET'])
def api_info():
    """Usage document for the API."""
    base_url = request.host_url.rstrip('/')
    example_secret = "H7TC EYBI A4I4 SXHU ZIYO P22U KXXY 7QVB"
    example = f"{base_url}/totp?base32=H7TC%20EYBI%20A4I4%20SXHU%20ZIYO%20P22U%20KXXY%207QVB&period=30&digits=6&algorithm=SHA1"
    return jsonify({
        "message": "TOTP API Server",
        "version": current_app.config.get("API_VERSION", "1.0.0"),
        "usage": {
            "endpoints": {
                "GET": example,
                "POST": {
                    "url": f"{base_url}/totp",
                    "body": {
                        "base32": example_secret,
                        "period": DEFAULT_TIME_STEP,
                        "digits": DEFAULT_DIGITS,
                        "algorithm": DEFAULT_ALGORITHM,
                    },
                },
            },
            "parameters": {
                "base32": "Required - Base32 encoded secret key (with or without spaces)",
                "period": "Optional - Time period in seconds (default: 30, range: 1-300)",
                "digits": "Optional - Code length (default: 6, range: 4-10)",
                "algorithm": "Optional - Hash algorithm (default: SHA1, options: SHA1, SHA256, SHA512)",
            },
            "example": example,
        },
    })


@totp_bp.route('/health', methods=['GET'])
def health():
    return jsonify({"status": "ok"})
