"""
otp_core.py: core library for TOTP / HOTP code generation.

Goals:
- Pure functions only, so the HTTP backend and the CLI call the same code.
- No file or database I/O: the engine is a deterministic function of
  (secret, time, period, digits, algorithm).
- The current time is always injectable (`now` / `timestamp`), the wall
  clock is only read when the caller passes None.

Supported hash algorithms: HMAC-SHA1 (RFC 4226 / RFC 6238 default, what
Google Authenticator uses), HMAC-SHA256 and HMAC-SHA512.
"""

from dataclasses import asdict, dataclass
from typing import Optional, Tuple
import base64
import binascii
import hashlib
import hmac
import logging
import re
import struct
import time

import pyotp

logger = logging.getLogger(__name__)

# --- Config / constants ----------------------------------------------------
DEFAULT_DIGITS = 6          # standard: 6 digits
DEFAULT_TIME_STEP = 30      # TOTP step (seconds)
DEFAULT_ALGORITHM = "SHA1"
MIN_PERIOD, MAX_PERIOD = 1, 300
MIN_DIGITS, MAX_DIGITS = 4, 10

SUPPORTED_ALGORITHMS = {
    "SHA1": hashlib.sha1,
    "SHA256": hashlib.sha256,
    "SHA512": hashlib.sha512,
}

_WHITESPACE_RE = re.compile(r"\s+")
_BASE32_RE = re.compile(r"^[A-Z2-7]+$")
# Base32 lengths (mod 8) that no byte string can encode to
_INVALID_TAIL_LENGTHS = (1, 3, 6)


# --- Errors ----------------------------------------------------------------
class OTPError(ValueError):
    """Base class for every expected (client-side) engine failure."""


class InvalidSecret(OTPError):
    """The secret cannot be used to generate a code."""


class InvalidSecretEncoding(InvalidSecret):
    """The secret is not valid Base32."""


# Name used by the Base32 decoder contract
DecodeError = InvalidSecretEncoding


class MissingSecret(InvalidSecret):
    """No secret given, or nothing left after stripping whitespace."""


class InvalidPeriod(OTPError):
    pass


class InvalidDigits(OTPError):
    pass


class InvalidTimestamp(OTPError):
    pass


@dataclass(frozen=True)
class GenerationResult:
    code: str
    remaining: int
    algorithm: str
    period: int
    digits: int
    secret: str
    timestamp: int

    def as_dict(self) -> dict:
        return asdict(self)


# --- Input helpers ---------------------------------------------------------
def generate_base32_secret(length: int = 32) -> str:
    """
    Generate a random Base32 secret (no padding) for local testing.

    `length` is the number of Base32 characters; pyotp requires at least
    32 (160 bits).
    The secret is returned to the caller only; nothing is stored.
    """
    return pyotp.random_base32(length)


def clean_secret(secret: str) -> str:
    """Remove every whitespace character (spaces, tabs, newlines) from the secret."""
    return _WHITESPACE_RE.sub("", secret)


def decode_base32(secret: str) -> bytes:
    """
    Decode a user-supplied Base32 secret (RFC 4648) to raw key bytes.

    - Whitespace anywhere is removed, then the string is upper-cased.
    - Trailing '=' padding is optional; it is stripped and rebuilt so
      secrets copied without padding ("JBSWY3DPEHPK3PXP...") still decode.

    Raises:
        MissingSecret: nothing left after cleaning
        InvalidSecretEncoding: a character outside A-Z / 2-7, or a length
            that cannot come from any byte string
    """
    cleaned = clean_secret(secret).upper().rstrip("=")
    if not cleaned:
        raise MissingSecret("Secret is empty")
    if not _BASE32_RE.match(cleaned):
        raise InvalidSecretEncoding("Secret contains characters outside the Base32 alphabet")
    if len(cleaned) % 8 in _INVALID_TAIL_LENGTHS:
        raise InvalidSecretEncoding("Secret has an invalid Base32 length")

    padded = cleaned + "=" * (-len(cleaned) % 8)
    try:
        return base64.b32decode(padded)
    except binascii.Error as e:
        raise InvalidSecretEncoding("Invalid Base32 secret") from e


def resolve_algorithm(name) -> str:
    """
    Map an algorithm name to one of SUPPORTED_ALGORITHMS (case-insensitive).

    Unknown names (e.g. "MD5") and non-string values fall back to SHA1
    without raising.
    """
    if isinstance(name, str) and name.upper() in SUPPORTED_ALGORITHMS:
        return name.upper()
    logger.debug("Unsupported algorithm %r, falling back to %s", name, DEFAULT_ALGORITHM)
    return DEFAULT_ALGORITHM


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_period(period) -> int:
    if not _is_int(period) or not MIN_PERIOD <= period <= MAX_PERIOD:
        raise InvalidPeriod(f"Period must be an integer between {MIN_PERIOD} and {MAX_PERIOD}")
    return period


def validate_digits(digits) -> int:
    if not _is_int(digits) or not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise InvalidDigits(f"Digits must be an integer between {MIN_DIGITS} and {MAX_DIGITS}")
    return digits


def validate_timestamp(now, period: int) -> int:
    if not _is_int(now) or now < 0 or now // period >= 2 ** 64:
        raise InvalidTimestamp("Timestamp must be a non-negative integer number of seconds")
    return now


# --- RFC helpers -----------------------------------------------------------
def int_to_bytes(i: int) -> bytes:
    """
    Convert the counter to the 8-byte big-endian message RFC 4226 requires.

    Example: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    return struct.pack(">Q", i)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    Apply RFC 4226 dynamic truncation.

    - offset = last_byte & 0x0F (0..15, always inside a 20/32/64 byte digest)
    - read 4 bytes big-endian from offset, clear the sign bit
    - returns an unsigned 31-bit integer
    """
    offset = hmac_digest[-1] & 0x0F
    return struct.unpack(">I", hmac_digest[offset:offset + 4])[0] & 0x7FFFFFFF


def hotp(
    key: bytes,
    counter: int,
    digits: int = DEFAULT_DIGITS,
    algorithm: str = DEFAULT_ALGORITHM,
) -> str:
    """
    Generate an HOTP code (RFC 4226).

    Steps:
    1. Message = 8-byte counter (big-endian)
    2. HMAC-<algorithm>(key, message)
    3. Dynamic truncate -> dbc
    4. otp = dbc % 10^digits
    5. Zero-pad to exactly `digits` characters

    Arguments:
        key: raw secret bytes (already Base32-decoded)
        counter: non-negative 64-bit counter
        digits: code length
        algorithm: one of SUPPORTED_ALGORITHMS

    Returns:
        str: zero-padded code, e.g. "000042"
    """
    if not 0 <= counter < 2 ** 64:
        raise ValueError("Counter must fit in an unsigned 64-bit integer")
    msg = int_to_bytes(counter)
    digest = hmac.new(key, msg, SUPPORTED_ALGORITHMS[algorithm]).digest()
    dbc = dynamic_truncate(digest)
    return str(dbc % (10 ** digits)).zfill(digits)


def totp(
    key: bytes,
    timestamp: Optional[int] = None,
    timestep: int = DEFAULT_TIME_STEP,
    digits: int = DEFAULT_DIGITS,
    algorithm: str = DEFAULT_ALGORITHM,
    t0: int = 0,
) -> Tuple[str, int]:
    """
    Generate a TOTP code (RFC 6238): HOTP with counter = floor((now - T0) / X).

    Arguments:
        key: raw secret bytes
        timestamp: epoch seconds (None -> time.time())
        timestep: X in seconds, default 30
        digits: code length
        algorithm: one of SUPPORTED_ALGORITHMS
        t0: start time offset, default 0

    Returns:
        (code, remaining_seconds)
        - remaining_seconds is in 1..timestep; it equals timestep exactly on
          a window boundary and never reaches 0.
    """
    if timestamp is None:
        timestamp = int(time.time())
    counter = (timestamp - t0) // timestep
    code = hotp(key, counter, digits, algorithm)
    remaining = timestep - ((timestamp - t0) % timestep)
    return code, remaining


# --- Public entry points ---------------------------------------------------
def generate(
    secret_base32: str,
    period: int = DEFAULT_TIME_STEP,
    digits: int = DEFAULT_DIGITS,
    algorithm: str = DEFAULT_ALGORITHM,
    now: Optional[int] = None,
) -> GenerationResult:
    """
    Validate the configuration, decode the secret and compute the current code.

    This is the single function the HTTP layer calls. It reads the clock at
    most once, so `code`, `remaining` and `timestamp` always agree.

    Raises:
        MissingSecret / InvalidSecretEncoding / InvalidSecret: bad secret
        InvalidPeriod, InvalidDigits: configuration out of range
        InvalidTimestamp: `now` is not a non-negative int
    """
    if not isinstance(secret_base32, str):
        raise InvalidSecret("Secret must be a string")
    period = validate_period(period)
    digits = validate_digits(digits)
    algorithm = resolve_algorithm(algorithm)

    key = decode_base32(secret_base32)
    if now is None:
        now = int(time.time())
    now = validate_timestamp(now, period)
    code, remaining = totp(key, timestamp=now, timestep=period, digits=digits, algorithm=algorithm)

    return GenerationResult(
        code=code,
        remaining=remaining,
        algorithm=algorithm,
        period=period,
        digits=digits,
        secret=clean_secret(secret_base32),
        timestamp=now,
    )


def verify(
    secret_base32: str,
    code: str,
    period: int = DEFAULT_TIME_STEP,
    digits: int = DEFAULT_DIGITS,
    algorithm: str = DEFAULT_ALGORITHM,
    window: int = 1,
    now: Optional[int] = None,
) -> bool:
    """
    Check a code a user typed against the secret, allowing +/- `window` steps
    of clock drift. Comparison is constant-time. Stateless: a code can be
    accepted more than once inside its window.
    """
    period = validate_period(period)
    digits = validate_digits(digits)
    algorithm = resolve_algorithm(algorithm)
    if not _is_int(window) or window < 0:
        raise OTPError("Window must be a non-negative integer")
    key = decode_base32(secret_base32)
    if now is None:
        now = int(time.time())
    now = validate_timestamp(now, period)

    code = clean_secret(str(code))
    counter = now // period
    for offset in range(-window, window + 1):
        test_counter = counter + offset
        if test_counter < 0:
            continue
        expected = hotp(key, test_counter, digits, algorithm)
        if hmac.compare_digest(expected.encode(), code.encode()):
            return True
    return False
