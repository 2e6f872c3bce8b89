# nouxis_core/transport/transport_http.py
import itertools
from typing import Any, Optional

import requests

from nouxis_core.constants import DEFAULT_RPC_TIMEOUT, get_cluster
from nouxis_core.logger import get_logger
from nouxis_core.transport.transport_base import (
    BaseTransport,
    TransportPermanentError,
    TransportTransientError,
)

log = get_logger("Nouxis.Transport.HTTP")


class HTTPAdapter(BaseTransport):
    """
    Solana JSON-RPC adapter for account reads.

    Features:
    - getAccountInfo with base64 encoding over a pooled requests.Session
    - Maps timeouts, connection failures, 429 and 5xx to TransportTransientError
    - Maps RPC error objects and unreadable envelopes to TransportPermanentError
    """
    name = "http"

    def __init__(self, rpc_url: str, timeout: float = DEFAULT_RPC_TIMEOUT, session: Optional[requests.Session] = None):
        if not rpc_url:
            raise ValueError("rpc_url is required for the HTTP transport")
        if timeout <= 0:
            raise ValueError(f"rpc timeout must be positive, got {timeout!r}")
        self.rpc_url = rpc_url.rstrip("/")
        self.cluster = get_cluster(self.rpc_url)
        self.timeout = timeout
        self._session = session or requests.Session()
        self._ids = itertools.count(1)

    # ------------------------------------------------------------------
    # JSON-RPC
    # ------------------------------------------------------------------
    def call(self, method: str, params: Optional[list] = None) -> Any:
        """POST one JSON-RPC request and return its ``result`` member."""
        body = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params or []}
        log.debug(f"[RPC] → {self.rpc_url} | method={method} cluster={self.cluster}")

        try:
            res = self._session.post(self.rpc_url, json=body, timeout=self.timeout)
        except requests.Timeout as e:
            raise TransportTransientError(f"{method} timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise TransportTransientError(f"{method} request failed: {e}") from e

        if res.status_code == 429 or res.status_code >= 500:
            raise TransportTransientError(f"{method} HTTP {res.status_code}: {res.text[:200]}")
        if not res.ok:
            raise TransportPermanentError(f"{method} HTTP {res.status_code}: {res.text[:200]}")

        try:
            payload = res.json()
        except ValueError as e:
            raise TransportPermanentError(f"{method} returned non-JSON body") from e

        if not isinstance(payload, dict):
            raise TransportPermanentError(f"{method} returned {type(payload).__name__}, expected object")
        if payload.get("error"):
            err = payload["error"]
            if isinstance(err, dict):
                raise TransportPermanentError(f"{method} RPC error {err.get('code')}: {err.get('message')}")
            raise TransportPermanentError(f"{method} RPC error: {err}")
        if "result" not in payload:
            raise TransportPermanentError(f"{method} response has no result")

        log.debug(f"[RPC] ← {method} {res.status_code}")
        return payload["result"]

    def get_account_info(self, address: str) -> Optional[bytes]:
        result = self.call("getAccountInfo", [address, {"encoding": "base64"}])
        value = result.get("value") if isinstance(result, dict) else None
        if not value:
            return None
        if not isinstance(value, dict) or "data" not in value:
            raise TransportPermanentError(f"getAccountInfo value for {address} has no data")
        return self.decode_account_data(value["data"])

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------
    def healthz(self) -> dict:
        try:
            result = self.call("getHealth")
        except (TransportTransientError, TransportPermanentError) as e:
            log.warning(f"[RPC] health check failed: {e}")
            return {"status": "error", "transport": self.name, "cluster": self.cluster, "error": str(e)}
        return {"status": "ok" if result == "ok" else str(result), "transport": self.name, "cluster": self.cluster}

    def close(self) -> None:
        self._session.close()
