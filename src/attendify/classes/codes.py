"""Join codes for classes.

Codes are L characters of the RFC 4648 base-32 alphabet (A-Z, 2-7): easy to
type and free of 0/O and 1/I confusion. 32^6 is about 10^9 codes.
"""

from __future__ import annotations

import base64
import re
import secrets

from ..core.constants import CLASS_CODE_LENGTH

CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
CODE_PATTERN = re.compile(rf"^[A-Z2-7]{{{CLASS_CODE_LENGTH}}}$")


def generate_code(length: int = CLASS_CODE_LENGTH) -> str:
    """Draw `length` random bytes, base-32 encode, keep the first `length` chars.

    Each output character covers 5 fresh bits, so the prefix is uniform over
    the alphabet.
    """

    raw = secrets.token_bytes(length)
    return base64.b32encode(raw).decode("ascii").upper()[:length]


def normalize_code(value: str) -> str:
    return value.strip().upper()
