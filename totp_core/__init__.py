"""
totp_core package
=================

TOTP code generation per RFC 6238 (on top of HOTP, RFC 4226), with
HMAC-SHA1, HMAC-SHA256 or HMAC-SHA512.

──────────────────────────────────────────────
Core algorithm
──────────────────────────────────────────────
- HOTP (HMAC-based One-Time Password):
  code = Truncate(HMAC-<alg>(key=secret, msg=counter)) mod 10^digits

- TOTP (Time-based One-Time Password):
  HOTP with counter = floor(timestamp / period)
  → default period = 30 seconds, 6 digits, SHA1.

- Dynamic Truncation:
  Take 4 bytes of the HMAC at offset (last byte & 0x0F), clear the top bit.

──────────────────────────────────────────────
Quick example
──────────────────────────────────────────────
>>> from totp_core import generate
>>> result = generate("GEZDGNBVGY3TQOJQ", now=1111111109)
>>> result.code, result.remaining
('343526', 1)
"""
from .otp_core import (
    DEFAULT_ALGORITHM,
    DEFAULT_DIGITS,
    DEFAULT_TIME_STEP,
    SUPPORTED_ALGORITHMS,
    DecodeError,
    GenerationResult,
    InvalidDigits,
    InvalidPeriod,
    InvalidSecret,
    InvalidSecretEncoding,
    InvalidTimestamp,
    MissingSecret,
    OTPError,
    decode_base32,
    generate,
    generate_base32_secret,
    hotp,
    totp,
    verify,
)

__all__ = [
    'DEFAULT_ALGORITHM',
    'DEFAULT_DIGITS',
    'DEFAULT_TIME_STEP',
    'SUPPORTED_ALGORITHMS',
    'DecodeError',
    'GenerationResult',
    'InvalidDigits',
    'InvalidPeriod',
    'InvalidSecret',
    'InvalidSecretEncoding',
    'InvalidTimestamp',
    'MissingSecret',
    'OTPError',
    'decode_base32',
    'generate',
    'generate_base32_secret',
    'hotp',
    'totp',
    'verify',
]
