"""
nouxis_core.locator
-------------------
Derives the PaymentRequirement PDA for an (agent mint, service type) pair.

Seed order must match the on-chain program exactly:

    [b"payment_req", nft_mint (32 raw bytes), service_type seed]

Any other order still derives *an* address, just not the one holding the
record, so mistakes show up as "not found" rather than as errors.

The PDA search itself (sha256 + off-curve check) is supplied by the caller
as ``derive_address(program_id: bytes, seeds: list[bytes])``.
"""

from __future__ import annotations
from collections.abc import Sequence
from typing import Callable, List, Union

from nouxis_core.codec import b58encode, decode_pubkey
from nouxis_core.constants import NOUXIS_PROGRAM_ID, PAYMENT_REQ_SEED, SERVICE_TYPE_SEEDS
from nouxis_core.errors import DerivationError
from nouxis_core.logger import get_logger

log = get_logger("Nouxis.Locator")

Address = Union[str, bytes]
DeriveAddress = Callable[[bytes, List[bytes]], Address]


def service_type_seed(service_type: str) -> str:
    # unknown types pass through so new services need no release
    return SERVICE_TYPE_SEEDS.get(service_type, service_type)


class PaymentRequirementLocator:
    def __init__(self, derive_address: DeriveAddress, program_id: str = NOUXIS_PROGRAM_ID):
        try:
            self.program_id = decode_pubkey(program_id)
        except ValueError as e:
            raise ValueError(f"invalid program id {program_id!r}: {e}") from e
        self._derive = derive_address

    def seeds(self, agent_mint: str, service_type: str) -> List[bytes]:
        try:
            mint_bytes = decode_pubkey(agent_mint)
        except (ValueError, TypeError) as e:
            raise DerivationError(f"invalid agent mint {agent_mint!r}: {e}") from e
        try:
            service_seed = service_type_seed(service_type).encode("utf-8")
        except (UnicodeEncodeError, AttributeError, TypeError) as e:
            raise DerivationError(f"invalid service type {service_type!r}: {e}") from e
        return [PAYMENT_REQ_SEED, mint_bytes, service_seed]

    def locate(self, agent_mint: str, service_type: str) -> str:
        """Return the base58 PDA address; raises DerivationError on any failure."""
        seeds = self.seeds(agent_mint, service_type)
        try:
            derived = self._derive(self.program_id, seeds)
        except DerivationError:
            raise
        except Exception as e:
            log.exception(f"[Locator] derive_address raised unexpectedly for {agent_mint}/{service_type}")
            raise DerivationError(f"derivation failed for {agent_mint}/{service_type}: {e}") from e
        return _as_address(derived)


def _as_address(derived) -> str:
    # find_program_address style helpers return (address, bump)
    if isinstance(derived, Sequence) and not isinstance(derived, (str, bytes, bytearray)):
        if not derived:
            raise DerivationError("derivation returned no address")
        derived = derived[0]
    if isinstance(derived, (bytes, bytearray)):
        if len(derived) != 32:
            raise DerivationError(f"derived address has {len(derived)} bytes, expected 32")
        return b58encode(bytes(derived))
    if isinstance(derived, str) and derived:
        return derived
    raise DerivationError(f"derivation returned {type(derived).__name__}, expected an address")
