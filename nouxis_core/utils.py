"""
nouxis_core.utils
-----------------
Lightweight helpers for base64 payloads, millisecond clocks, and decimal
rendering of raw token quantities.
"""

from __future__ import annotations
import base64, binascii, time
from decimal import Decimal


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def b64d(s: str) -> bytes:
    # validate=True rejects junk instead of silently dropping it
    try:
        return base64.b64decode(s.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"invalid base64 payload: {e}") from e

def now_ms() -> int:
    return int(time.time() * 1000)

def units_to_decimal(amount: str | int, decimals: int) -> Decimal:
    """Scale an integer amount of smallest units down by ``decimals`` places."""
    return Decimal(int(amount)).scaleb(-decimals)
