"""
nouxis_core.resolver
--------------------
AgentResolver: on-chain PaymentRequirement lookup for Nouxis agents.

Pipeline per call: cache probe → PDA derivation → getAccountInfo → Borsh
decode → cache store. Every failure (not found, malformed account, RPC
trouble, bad mint) is logged as a structured event and returned as an
absent result; resolve() never raises.

Concurrent misses on the same key are not deduplicated. Each caller
fetches and decodes on its own and the last put wins, which is safe
because decoding is a pure function of the account bytes.
"""

from __future__ import annotations
import logging, os
from typing import Callable, Optional, Union

from nouxis_core.cache import ResolverCache, cache_key
from nouxis_core.codec import account_discriminator, decode_payment_requirement
from nouxis_core.constants import DEFAULT_CACHE_TTL, DEFAULT_SERVICE_TYPE, NOUXIS_PROGRAM_ID
from nouxis_core.errors import FailureKind, MalformedAccountError, AccountNotFoundError, ResolverError
from nouxis_core.locator import DeriveAddress, PaymentRequirementLocator
from nouxis_core.logger import get_logger, log_event
from nouxis_core.models import Resolution, ResolvedAgent
from nouxis_core.transport import BaseTransport, HTTPAdapter, TransportError, transport_factory

log = get_logger("Nouxis.Resolver")

PAYMENT_REQUIREMENT_ACCOUNT = "PaymentRequirement"

_FAILURE_EVENTS = {
    FailureKind.NOT_FOUND: ("resolve_not_found", logging.WARNING),
    FailureKind.MALFORMED: ("resolve_malformed", logging.WARNING),
    FailureKind.TRANSPORT_FAILURE: ("resolve_transport_failure", logging.ERROR),
    FailureKind.DERIVATION_FAILURE: ("resolve_derivation_failure", logging.WARNING),
}


class AgentResolver:
    """
    Resolves and caches PaymentRequirement accounts.

    Args:
        rpc: RPC endpoint URL, or any BaseTransport (LocalAdapter in tests).
        derive_address: PDA derivation, ``(program_id, seeds) -> address``.
        cache_ttl: seconds a resolved record is served from cache.
        program_id: base58 id of the Nouxis program.
        clock: monotonic seconds source for the cache.
        strict_discriminator: reject accounts whose first 8 bytes are not the
            PaymentRequirement discriminator. Off by default; see DESIGN.md.
    """

    def __init__(
        self,
        rpc: Union[str, BaseTransport],
        derive_address: DeriveAddress,
        cache_ttl: float = DEFAULT_CACHE_TTL,
        program_id: str = NOUXIS_PROGRAM_ID,
        clock: Optional[Callable[[], float]] = None,
        strict_discriminator: bool = False,
    ):
        self.transport = HTTPAdapter(rpc) if isinstance(rpc, str) else rpc
        self.locator = PaymentRequirementLocator(derive_address, program_id=program_id)
        self.cache = ResolverCache(cache_ttl, clock=clock)
        self._discriminator = account_discriminator(PAYMENT_REQUIREMENT_ACCOUNT) if strict_discriminator else None

    @property
    def cache_ttl(self) -> float:
        return self.cache.ttl

    def resolve(self, agent_mint: str, service_type: str = DEFAULT_SERVICE_TYPE) -> Optional[ResolvedAgent]:
        """Return the agent's PaymentRequirement, or None if it cannot be resolved."""
        return self.resolve_detailed(agent_mint, service_type).record

    def resolve_detailed(self, agent_mint: str, service_type: str = DEFAULT_SERVICE_TYPE) -> Resolution:
        key = cache_key(agent_mint, service_type)

        cached = self.cache.get(key)
        if cached is not None:
            log_event(log, logging.DEBUG, "resolve_cache_hit", mint=agent_mint, service=service_type)
            return Resolution(record=cached, cached=True)

        address = None
        try:
            address = self.locator.locate(agent_mint, service_type)
            data = self._fetch(address)
            if not data:
                raise AccountNotFoundError(f"no account data for PDA {address}")
            record = self._decode(data)
        except ResolverError as e:
            event, level = _FAILURE_EVENTS[e.kind]
            log_event(
                log, level, event,
                mint=agent_mint, service=service_type, pda=address, error=str(e),
            )
            return Resolution(failure=e.kind, detail=str(e))

        self.cache.put(key, record)
        log_event(
            log, logging.INFO, "resolve_ok",
            mint=agent_mint, service=service_type, pda=address,
            pay_to=record.pay_to, amount=record.amount, active=record.active,
        )
        return Resolution(record=record)

    def clear_cache(self) -> None:
        self.cache.clear()

    def close(self) -> None:
        self.transport.close()

    # ---------------------------
    # Collaborator guards
    # ---------------------------
    def _fetch(self, address: str) -> Optional[bytes]:
        try:
            return self.transport.get_account_info(address)
        except TransportError:
            raise
        except Exception as e:
            log.exception(f"[Resolver] transport {self.transport.name} raised unexpectedly")
            raise TransportError(f"fetch {address} failed: {e}") from e

    def _decode(self, data: bytes) -> ResolvedAgent:
        try:
            return decode_payment_requirement(data, expected_discriminator=self._discriminator)
        except MalformedAccountError:
            raise
        except Exception as e:
            raise MalformedAccountError(f"failed to deserialize {len(data)} bytes: {e}") from e


def load_resolver(config: dict | None = None, derive_address: DeriveAddress | None = None) -> AgentResolver:
    """
    Build an AgentResolver from config with env fallbacks.

    Keys (env): transport (NOUXIS_TRANSPORT), rpc_url (NOUXIS_RPC_URL),
    rpc_timeout (NOUXIS_RPC_TIMEOUT), cache_ttl (NOUXIS_CACHE_TTL),
    program_id (NOUXIS_PROGRAM_ID), strict_discriminator.
    """
    config = config or {}
    derive_address = derive_address or config.get("derive_address")
    if derive_address is None:
        raise ValueError("derive_address is required to locate PaymentRequirement accounts")

    ttl = float(config["cache_ttl"] if "cache_ttl" in config else os.getenv("NOUXIS_CACHE_TTL", DEFAULT_CACHE_TTL))
    program_id = config.get("program_id") or os.getenv("NOUXIS_PROGRAM_ID", NOUXIS_PROGRAM_ID)

    return AgentResolver(
        transport_factory(config),
        derive_address,
        cache_ttl=ttl,
        program_id=program_id,
        strict_discriminator=bool(config.get("strict_discriminator", False)),
    )
