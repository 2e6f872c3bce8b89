"""
nouxis_core.codec
-----------------
Byte-level codecs for Nouxis on-chain data:

- Base58 (Bitcoin alphabet) encode/decode for Solana addresses
- Sequential decoder for the Anchor/Borsh PaymentRequirement account

Every read is bounds-checked against the account length, so garbage input
ends in ``MalformedAccountError`` rather than an IndexError or a huge slice.
"""

from __future__ import annotations
import hashlib, struct
from typing import Optional

from nouxis_core.errors import MalformedAccountError
from nouxis_core.models import ResolvedAgent

BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_INDEX = {c: i for i, c in enumerate(BASE58_ALPHABET)}

PUBKEY_LEN = 32
DISCRIMINATOR_LEN = 8
# discriminator + nft_mint; anything shorter cannot be a PaymentRequirement
MIN_ACCOUNT_LEN = DISCRIMINATOR_LEN + PUBKEY_LEN

_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")


# --------- Base58 ----------
def b58encode(data: bytes) -> str:
    zeroes = len(data) - len(data.lstrip(b"\x00"))
    num = int.from_bytes(data, "big")

    chars = []
    while num > 0:
        num, rem = divmod(num, 58)
        chars.append(BASE58_ALPHABET[rem])
    chars.reverse()

    return BASE58_ALPHABET[0] * zeroes + "".join(chars)


def b58decode(text: str) -> bytes:
    num = 0
    for c in text:
        try:
            num = num * 58 + _BASE58_INDEX[c]
        except KeyError:
            raise ValueError(f"invalid base58 character {c!r}") from None

    zeroes = len(text) - len(text.lstrip(BASE58_ALPHABET[0]))
    body = num.to_bytes((num.bit_length() + 7) // 8, "big") if num else b""
    return b"\x00" * zeroes + body


def decode_pubkey(address: str) -> bytes:
    """Decode a base58 address, insisting on exactly 32 bytes."""
    raw = b58decode(address)
    if len(raw) != PUBKEY_LEN:
        raise ValueError(f"address decodes to {len(raw)} bytes, expected {PUBKEY_LEN}")
    return raw


def account_discriminator(account_name: str) -> bytes:
    """Anchor account discriminator: sha256("account:<Name>")[:8]."""
    return hashlib.sha256(f"account:{account_name}".encode("utf-8")).digest()[:DISCRIMINATOR_LEN]


# --------- PaymentRequirement ----------
class _Reader:
    """Forward-only cursor over account bytes."""

    def __init__(self, data: bytes, offset: int = 0):
        self.data = data
        self.offset = offset

    def take(self, n: int, field: str) -> bytes:
        end = self.offset + n
        if end > len(self.data):
            raise MalformedAccountError(
                f"{field}: need {n} bytes at offset {self.offset}, account has {len(self.data)}"
            )
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def skip(self, n: int, field: str) -> None:
        self.take(n, field)

    def u8(self, field: str) -> int:
        return self.take(1, field)[0]

    def u32(self, field: str) -> int:
        return _U32.unpack(self.take(4, field))[0]

    def u64(self, field: str) -> int:
        return _U64.unpack(self.take(8, field))[0]

    def skip_string(self, field: str) -> None:
        # length prefix first; the bounds check in take() guards the body
        self.skip(self.u32(f"{field} length"), field)


def decode_payment_requirement(
    data: bytes,
    expected_discriminator: Optional[bytes] = None,
) -> ResolvedAgent:
    """
    Deserialize a PaymentRequirement account (Anchor/Borsh, little-endian).

    Layout:
        discriminator  [8]     skipped (checked only if expected_discriminator given)
        nft_mint       [32]    skipped, the caller already knows it
        service_type   u8      skipped
        scheme         u8      skipped
        amount         u64     kept
        token_mint     [32]    kept
        pay_to         [32]    kept
        description    u32 len + bytes, skipped
        resource       u32 len + bytes, skipped
        active         u8      kept, zero = False
        created_at, updated_at, bump follow and are not read.
    """
    data = bytes(data)
    if len(data) < MIN_ACCOUNT_LEN:
        raise MalformedAccountError(
            f"account data too short ({len(data)} bytes, need at least {MIN_ACCOUNT_LEN})"
        )

    r = _Reader(data)
    discriminator = r.take(DISCRIMINATOR_LEN, "discriminator")
    if expected_discriminator is not None and discriminator != expected_discriminator:
        raise MalformedAccountError(f"unexpected discriminator {discriminator.hex()}")

    r.skip(PUBKEY_LEN, "nft_mint")
    r.skip(1, "service_type")
    r.skip(1, "scheme")

    amount = r.u64("amount")
    token_mint = r.take(PUBKEY_LEN, "token_mint")
    pay_to = r.take(PUBKEY_LEN, "pay_to")

    r.skip_string("description")
    r.skip_string("resource")

    active = r.u8("active") != 0

    return ResolvedAgent(
        pay_to=b58encode(pay_to),
        amount=str(amount),
        token_mint=b58encode(token_mint),
        active=active,
    )
