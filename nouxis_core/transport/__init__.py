# nouxis_core/transport/__init__.py
import os
from nouxis_core.constants import DEFAULT_RPC_TIMEOUT, DEVNET_RPC_URL
from nouxis_core.transport.transport_base import (
    BaseTransport,
    TransportError,
    TransportPermanentError,
    TransportTransientError,
)
from nouxis_core.transport.transport_local import LocalAdapter
from nouxis_core.transport.transport_http import HTTPAdapter


def transport_factory(config: dict | None = None) -> BaseTransport:
    """
    Select the account-fetch transport.

    mode (config "transport" or NOUXIS_TRANSPORT):
      - "http"  → Solana JSON-RPC at config "rpc_url" / NOUXIS_RPC_URL
      - "local" → in-memory LocalAdapter
    """
    config = config or {}
    mode = (config.get("transport") or os.getenv("NOUXIS_TRANSPORT", "http")).lower()

    if mode == "local":
        return LocalAdapter()

    if mode == "http":
        rpc_url = config.get("rpc_url") or os.getenv("NOUXIS_RPC_URL", DEVNET_RPC_URL)
        timeout = float(config["rpc_timeout"] if "rpc_timeout" in config else os.getenv("NOUXIS_RPC_TIMEOUT", DEFAULT_RPC_TIMEOUT))
        return HTTPAdapter(rpc_url, timeout=timeout)

    raise ValueError(f"Unknown transport mode: {mode}")


__all__ = [
    "BaseTransport",
    "TransportError",
    "TransportTransientError",
    "TransportPermanentError",
    "LocalAdapter",
    "HTTPAdapter",
    "transport_factory",
]
