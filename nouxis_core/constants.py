"""
nouxis_core.constants
---------------------
Nouxis protocol defaults: program identity, PDA seeds, token mints,
CAIP-2 network identifiers, and the protocol fee.
"""

from __future__ import annotations

# ─── Nouxis Protocol ───────────────────────────────────────

NOUXIS_FACILITATOR_URL = "https://facilitator.nouxis.ai"
NOUXIS_PROGRAM_ID = "NouXXXZsWXpanM5UzshMKZH4wUbeFNcxPWnFyTBgRP1"

# Protocol fee in basis points (300 = 3%)
PROTOCOL_FEE_BPS = 300
NOUXIS_TREASURY = "8VF2ZAp9C1RKeV2XmKBnCQdbhGuNZaLZ1x7mTCSGsMH9"

# ─── PaymentRequirement PDA seeds ──────────────────────────

PAYMENT_REQ_SEED = b"payment_req"

# Must match the on-chain ServiceType enum's seed() impl
SERVICE_TYPE_SEEDS = {
    "mcp": "mcp",
    "a2a": "a2a",
    "api": "api",
    "web": "web",
}
DEFAULT_SERVICE_TYPE = "a2a"

# ─── Resolver ──────────────────────────────────────────────

DEFAULT_CACHE_TTL = 30.0  # seconds
DEFAULT_RPC_TIMEOUT = 5.0  # seconds

# ─── USDC Token Mints ──────────────────────────────────────

USDC_MINT_DEVNET = "Gh9ZwEmdLJ8DscKNTkTqPbNwLNNBjuSzaG9Vp2KGtKJr"
USDC_MINT_MAINNET = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
USDC_DECIMALS = 6

# ─── Networks ──────────────────────────────────────────────

SOLANA_DEVNET = "solana:EtWTRABZaYq6iMfeYKouRu166VU2xqa1"
SOLANA_MAINNET = "solana:5eykt4UsFv8P8NJdTREpY1vzqKqZKvdp"

DEVNET_RPC_URL = "https://api.devnet.solana.com"
MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"

_MAINNET_NAMES = ("mainnet", "mainnet-beta")


def get_network_id(network: str) -> str:
    """Map a friendly network name (or a CAIP-2 id) to its CAIP-2 id."""
    if network == "devnet":
        return SOLANA_DEVNET
    if network in _MAINNET_NAMES:
        return SOLANA_MAINNET
    if network.startswith("solana:"):
        return network
    return SOLANA_DEVNET


def get_usdc_mint(network_id: str) -> str:
    if network_id == SOLANA_MAINNET:
        return USDC_MINT_MAINNET
    return USDC_MINT_DEVNET


def get_default_rpc_url(network: str | None = None) -> str:
    if network in _MAINNET_NAMES:
        return MAINNET_RPC_URL
    return DEVNET_RPC_URL


def get_cluster(rpc_url: str) -> str:
    """Brand an RPC endpoint as "mainnet", "devnet" or "custom"."""
    if "mainnet" in rpc_url:
        return "mainnet"
    if "devnet" in rpc_url:
        return "devnet"
    return "custom"
