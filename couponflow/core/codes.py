"""Coupon code generation and input normalization."""

import re
import secrets

# Digits 2-9 and uppercase letters without I and O, so 0/O and 1/I never collide.
COUPON_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
COUPON_CODE_LENGTH = 8

_NON_ALNUM = re.compile(r"[^A-Z0-9]")
_NON_DIGIT = re.compile(r"\D")


def generate_coupon_code(length: int = COUPON_CODE_LENGTH) -> str:
    """Generate a random coupon code.

    Each character is drawn independently from ``COUPON_CODE_ALPHABET`` using
    the ``secrets`` module. Uniqueness is not guaranteed; callers must handle
    collisions on insert.
    """
    return "".join(secrets.choice(COUPON_CODE_ALPHABET) for _ in range(length))


def normalize_coupon_code(raw: str | None) -> str:
    """Uppercase the input and drop everything that is not A-Z or 0-9."""
    if not raw:
        return ""
    return _NON_ALNUM.sub("", raw.strip().upper())


def normalize_phone(raw: str | None) -> str:
    """Strip every non-digit character from a phone number."""
    if not raw:
        return ""
    return _NON_DIGIT.sub("", raw)


def to_domestic_phone(raw: str | None) -> str:
    """Convert a phone number to the domestic (leading zero) format.

    ``+82 10-1234-5678`` becomes ``01012345678``; numbers that already start
    with ``0`` are returned as digits only.
    """
    digits = normalize_phone(raw)
    if digits.startswith("82") and len(digits) >= 11:
        digits = digits[2:]
        return digits if digits.startswith("0") else "0" + digits
    if digits.startswith("0"):
        return digits
    if len(digits) >= 9:
        return "0" + digits
    return digits
