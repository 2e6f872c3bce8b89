import json

import pytest
import requests

from nouxis_core.transport.transport_base import (
    BaseTransport,
    TransportPermanentError,
    TransportTransientError,
)
from nouxis_core.transport.transport_http import HTTPAdapter
from nouxis_core.utils import b64e


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("not json")
        return self._payload


class FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []
        self.closed = False

    def post(self, url, json=None, timeout=None):
        self.requests.append({"url": url, "json": json, "timeout": timeout})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.closed = True


def _account(data):
    return FakeResponse(payload={
        "jsonrpc": "2.0", "id": 1,
        "result": {"context": {"slot": 1}, "value": {"data": [b64e(data), "base64"], "owner": "x", "lamports": 1}},
    })


def test_get_account_info_decodes_base64():
    session = FakeSession(_account(b"\x00\x01\x02"))
    adapter = HTTPAdapter("https://api.devnet.solana.com", session=session)

    assert adapter.get_account_info("PDA111") == b"\x00\x01\x02"

    body = session.requests[0]["json"]
    assert body["method"] == "getAccountInfo"
    assert body["params"] == ["PDA111", {"encoding": "base64"}]
    assert session.requests[0]["timeout"] == 5.0


def test_request_ids_increase():
    session = FakeSession(_account(b"\x01"), _account(b"\x02"))
    adapter = HTTPAdapter("https://api.devnet.solana.com", session=session)
    adapter.get_account_info("a")
    adapter.get_account_info("b")

    assert [r["json"]["id"] for r in session.requests] == [1, 2]


def test_missing_account_is_none():
    session = FakeSession(FakeResponse(payload={"jsonrpc": "2.0", "id": 1, "result": {"context": {}, "value": None}}))
    adapter = HTTPAdapter("https://api.devnet.solana.com", session=session)
    assert adapter.get_account_info("PDA111") is None


def test_rpc_error_is_permanent():
    session = FakeSession(FakeResponse(payload={"jsonrpc": "2.0", "id": 1, "error": {"code": -32602, "message": "Invalid param"}}))
    adapter = HTTPAdapter("https://api.devnet.solana.com", session=session)
    with pytest.raises(TransportPermanentError) as exc:
        adapter.get_account_info("bad")
    assert "-32602" in str(exc.value)


@pytest.mark.parametrize("status", [429, 500, 503])
def test_overload_is_transient(status):
    session = FakeSession(FakeResponse(status_code=status, text="busy"))
    adapter = HTTPAdapter("https://api.devnet.solana.com", session=session)
    with pytest.raises(TransportTransientError):
        adapter.get_account_info("PDA111")


def test_client_error_is_permanent():
    session = FakeSession(FakeResponse(status_code=403, text="forbidden"))
    adapter = HTTPAdapter("https://api.devnet.solana.com", session=session)
    with pytest.raises(TransportPermanentError):
        adapter.get_account_info("PDA111")


@pytest.mark.parametrize("exc", [requests.Timeout("slow"), requests.ConnectionError("refused")])
def test_network_failures_are_transient(exc):
    adapter = HTTPAdapter("https://api.devnet.solana.com", session=FakeSession(exc))
    with pytest.raises(TransportTransientError):
        adapter.get_account_info("PDA111")


def test_non_json_body_is_permanent():
    adapter = HTTPAdapter("https://api.devnet.solana.com", session=FakeSession(FakeResponse(text="<html>")))
    with pytest.raises(TransportPermanentError):
        adapter.get_account_info("PDA111")


def test_unexpected_data_encoding_is_permanent():
    session = FakeSession(FakeResponse(payload={
        "jsonrpc": "2.0", "id": 1,
        "result": {"context": {}, "value": {"data": {"parsed": {}}}},
    }))
    adapter = HTTPAdapter("https://api.devnet.solana.com", session=session)
    with pytest.raises(TransportPermanentError):
        adapter.get_account_info("PDA111")


def test_decode_account_data_variants():
    assert BaseTransport.decode_account_data([b64e(b"\x09"), "base64"]) == b"\x09"
    assert BaseTransport.decode_account_data(b64e(b"\x09")) == b"\x09"
    with pytest.raises(TransportPermanentError):
        BaseTransport.decode_account_data(["abc", "base58"])
    with pytest.raises(TransportPermanentError):
        BaseTransport.decode_account_data(["***not base64***", "base64"])


def test_healthz():
    ok = HTTPAdapter("https://api.devnet.solana.com",
                     session=FakeSession(FakeResponse(payload={"jsonrpc": "2.0", "id": 1, "result": "ok"})))
    assert ok.healthz() == {"status": "ok", "transport": "http", "cluster": "devnet"}

    down = HTTPAdapter("https://api.devnet.solana.com", session=FakeSession(requests.ConnectionError("refused")))
    health = down.healthz()
    assert health["status"] == "error"
    assert "refused" in health["error"]


def test_close_closes_session():
    session = FakeSession()
    HTTPAdapter("https://api.devnet.solana.com", session=session).close()
    assert session.closed


def test_rpc_url_required():
    with pytest.raises(ValueError):
        HTTPAdapter("")
