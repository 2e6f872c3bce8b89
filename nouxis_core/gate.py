"""
nouxis_core.gate
----------------
Helpers for the payment gate that turns a resolved PaymentRequirement into
a 402 payment challenge.

Two modes, as the gate is configured:
- static:  ``pay_to`` and route prices come from config
- dynamic: ``agent_mint`` is resolved on-chain per request; pay_to and
           (unless a route fixes it) price come from the PaymentRequirement
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Union

from nouxis_core.constants import (
    DEFAULT_SERVICE_TYPE,
    NOUXIS_TREASURY,
    PROTOCOL_FEE_BPS,
    USDC_DECIMALS,
    get_network_id,
)
from nouxis_core.errors import GateError
from nouxis_core.logger import get_logger
from nouxis_core.models import ResolvedAgent
from nouxis_core.utils import units_to_decimal

log = get_logger("Nouxis.Gate")

DEFAULT_DESCRIPTION = "Nouxis agent service"
DEFAULT_MIME_TYPE = "application/json"


@dataclass
class RoutePayment:
    price: Optional[str] = None        # e.g. "$0.001"; None = on-chain amount
    description: Optional[str] = None
    mime_type: Optional[str] = None


@dataclass
class GateConfig:
    routes: Dict[str, RoutePayment]
    pay_to: Optional[str] = None
    agent_mint: Optional[str] = None
    service_type: str = DEFAULT_SERVICE_TYPE
    network: str = "devnet"
    treasury: str = NOUXIS_TREASURY
    protocol_fee_bps: int = PROTOCOL_FEE_BPS
    extra: Dict[str, Any] = field(default_factory=dict)


def price_from_amount(amount: Union[str, int], decimals: int = USDC_DECIMALS) -> str:
    """Render raw token units as a dollar price: "1000" -> "$0.001"."""
    value = units_to_decimal(amount, decimals)
    if value < 0:
        raise GateError(f"negative amount {amount!r}")
    text = format(value.normalize(), "f")
    return f"${text}"


def require_active(resolved: Optional[ResolvedAgent], agent_mint: str) -> str:
    if resolved is None or not resolved.active:
        raise GateError(f"Agent {agent_mint} not found or inactive on-chain")
    return resolved.pay_to


def require_price(resolved: Optional[ResolvedAgent], agent_mint: str) -> str:
    if resolved is None:
        raise GateError(f"Agent {agent_mint} not found on-chain")
    return price_from_amount(resolved.amount)


def precheck(resolver, agent_mint: str, service_type: str = DEFAULT_SERVICE_TYPE) -> Optional[ResolvedAgent]:
    """Eager startup resolution; only logs, the gate keeps starting either way."""
    resolved = resolver.resolve(agent_mint, service_type)
    if resolved is None:
        log.warning(f"[Gate] Agent {agent_mint} PaymentRequirement PDA not found on-chain (service={service_type})")
    elif not resolved.active:
        log.warning(f"[Gate] Agent {agent_mint} PaymentRequirement is inactive (service={service_type})")
    else:
        log.info(
            f"[Gate] Agent resolved: pay_to={resolved.pay_to}, "
            f"price={price_from_amount(resolved.amount)}, mint={resolved.token_mint}"
        )
    return resolved


def build_route_accepts(config: GateConfig, resolver=None) -> Dict[str, Dict[str, Any]]:
    """
    Build the per-route payment table handed to the 402 middleware.

    In dynamic mode ``pay_to`` (and ``price`` when the route leaves it unset)
    are zero-argument callables evaluated per request against the resolver,
    so a cached record is reused until its TTL lapses.
    """
    if not config.pay_to and not config.agent_mint:
        raise GateError("either pay_to or agent_mint must be provided")
    if config.agent_mint and resolver is None:
        raise GateError("agent_mint requires a resolver")

    network_id = get_network_id(config.network)
    routes: Dict[str, Dict[str, Any]] = {}

    for route, payment in config.routes.items():
        extra: Dict[str, Any] = {
            "treasury": config.treasury,
            "protocol_fee_bps": config.protocol_fee_bps,
        }
        extra.update(config.extra)

        if config.agent_mint:
            extra["agent_mint"] = config.agent_mint
            pay_to: Union[str, Callable[[], str]] = _dynamic_pay_to(resolver, config.agent_mint, config.service_type)
            price: Union[Optional[str], Callable[[], str]] = payment.price or _dynamic_price(
                resolver, config.agent_mint, config.service_type
            )
        else:
            pay_to = config.pay_to
            price = payment.price

        routes[route] = {
            "accepts": {
                "scheme": "exact",
                "network": network_id,
                "pay_to": pay_to,
                "price": price,
                "extra": extra,
            },
            "description": payment.description or DEFAULT_DESCRIPTION,
            "mime_type": payment.mime_type or DEFAULT_MIME_TYPE,
        }

    return routes


def _dynamic_pay_to(resolver, agent_mint: str, service_type: str) -> Callable[[], str]:
    def pay_to() -> str:
        return require_active(resolver.resolve(agent_mint, service_type), agent_mint)
    return pay_to


def _dynamic_price(resolver, agent_mint: str, service_type: str) -> Callable[[], str]:
    def price() -> str:
        return require_price(resolver.resolve(agent_mint, service_type), agent_mint)
    return price
