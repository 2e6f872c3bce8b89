# nouxis_core/transport/transport_local.py
from __future__ import annotations
import threading
from typing import Dict, List, Optional

from nouxis_core.logger import get_logger
from nouxis_core.transport.transport_base import BaseTransport, TransportError

log = get_logger("Nouxis.Transport.Local")


class LocalAdapter(BaseTransport):
    """
    In-process account store for tests, demos and offline development.

    Accounts are keyed by base58 address. ``fail_with`` makes every read
    raise the given error until it is reset to None.
    """
    name = "local"

    def __init__(self, accounts: Optional[Dict[str, bytes]] = None):
        self.accounts: Dict[str, bytes] = dict(accounts or {})
        self.calls: List[str] = []
        self.fail_with: Optional[TransportError] = None
        self._lock = threading.Lock()

    def set_account(self, address: str, data: bytes) -> None:
        self.accounts[address] = bytes(data)

    def remove_account(self, address: str) -> None:
        self.accounts.pop(address, None)

    def get_account_info(self, address: str) -> Optional[bytes]:
        with self._lock:
            self.calls.append(address)
        log.info(f"[LOCAL GET] address={address}")
        if self.fail_with is not None:
            raise self.fail_with
        return self.accounts.get(address)
