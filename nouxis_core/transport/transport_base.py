from __future__ import annotations
from typing import Any, Optional

from nouxis_core.errors import ResolverError, FailureKind
from nouxis_core.utils import b64d


class TransportError(ResolverError):
    kind = FailureKind.TRANSPORT_FAILURE


class TransportTransientError(TransportError):
    """Network trouble, timeouts, rate limits, 5xx. Worth retrying later."""


class TransportPermanentError(TransportError):
    """RPC-level errors and envelopes we cannot interpret."""


class BaseTransport:
    """
    Account fetch contract consumed by the resolver.

    get_account_info(address) returns the raw account bytes, or None when
    nothing is stored at the address. Transport trouble raises
    TransportError; timeouts and retries are the adapter's business.
    """
    name: str = "base"

    def get_account_info(self, address: str) -> Optional[bytes]:
        raise NotImplementedError

    def healthz(self) -> dict:
        return {"status": "ok", "transport": self.name}

    def readyz(self) -> dict:
        return {"status": "ok", "transport": self.name}

    def close(self) -> None:
        return

    # ---------------------------
    # Helpers for adapters
    # ---------------------------
    @staticmethod
    def decode_account_data(raw: Any) -> bytes:
        """
        Decode the ``data`` field of an RPC account value.

        With encoding=base64 the RPC answers ["<base64>", "base64"]; a bare
        string is accepted too.
        """
        if isinstance(raw, (list, tuple)):
            if not raw:
                raise TransportPermanentError("empty account data tuple")
            if len(raw) > 1 and raw[1] != "base64":
                raise TransportPermanentError(f"unexpected account encoding {raw[1]!r}")
            raw = raw[0]
        if not isinstance(raw, str):
            raise TransportPermanentError(f"unexpected account data format: {type(raw).__name__}")
        try:
            return b64d(raw)
        except ValueError as e:
            raise TransportPermanentError(str(e)) from e
