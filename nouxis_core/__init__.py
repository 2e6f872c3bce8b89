"""
Nouxis Core Package
===================
On-chain PaymentRequirement resolution for Nouxis payment gates.

Provides:
- AgentResolver: cached PDA lookup + Borsh decoding of PaymentRequirement accounts
- Base58 and account codecs
- Solana JSON-RPC and in-memory account transports
- Protocol constants and payment-gate helpers
"""

from nouxis_core.constants import (
    NOUXIS_FACILITATOR_URL,
    NOUXIS_PROGRAM_ID,
    NOUXIS_TREASURY,
    PROTOCOL_FEE_BPS,
    SOLANA_DEVNET,
    SOLANA_MAINNET,
    USDC_MINT_DEVNET,
    USDC_MINT_MAINNET,
    get_network_id,
    get_usdc_mint,
)
from nouxis_core.errors import FailureKind, ResolverError
from nouxis_core.models import ResolvedAgent, Resolution
from nouxis_core.resolver import AgentResolver, load_resolver

__all__ = [
    "AgentResolver",
    "load_resolver",
    "ResolvedAgent",
    "Resolution",
    "FailureKind",
    "ResolverError",
    "NOUXIS_FACILITATOR_URL",
    "NOUXIS_PROGRAM_ID",
    "NOUXIS_TREASURY",
    "PROTOCOL_FEE_BPS",
    "SOLANA_DEVNET",
    "SOLANA_MAINNET",
    "USDC_MINT_DEVNET",
    "USDC_MINT_MAINNET",
    "get_network_id",
    "get_usdc_mint",
]
