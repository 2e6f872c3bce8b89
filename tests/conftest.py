import hashlib
import struct

import pytest

from nouxis_core.codec import b58encode
from nouxis_core.resolver import AgentResolver
from nouxis_core.transport import LocalAdapter


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class RecordingDerive:
    """Stand-in PDA derivation: sha256 over program id + seeds, recording each call."""

    def __init__(self):
        self.calls = []

    def __call__(self, program_id, seeds):
        self.calls.append((program_id, list(seeds)))
        return hashlib.sha256(program_id + b"".join(seeds)).digest()

    def address_for(self, program_id, seeds):
        return b58encode(hashlib.sha256(program_id + b"".join(seeds)).digest())


def build_account(
    amount=1_000_000,
    token_mint=b"\x01" * 32,
    pay_to=b"\x02" * 32,
    description=b"",
    resource=b"",
    active=True,
    discriminator=bytes(8),
    nft_mint=bytes(32),
    service_type=0,
    scheme=0,
    with_trailer=False,
):
    data = (
        discriminator
        + nft_mint
        + bytes([service_type, scheme])
        + struct.pack("<Q", amount)
        + token_mint
        + pay_to
        + struct.pack("<I", len(description)) + description
        + struct.pack("<I", len(resource)) + resource
        + bytes([1 if active else 0])
    )
    if with_trailer:
        data += struct.pack("<qq", 1_700_000_000, 1_700_000_500) + bytes([254])
    return data


def mint(n):
    """Deterministic 32-byte base58 mint for tests."""
    return b58encode(bytes([n]) * 32)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def derive():
    return RecordingDerive()


@pytest.fixture
def local():
    return LocalAdapter()


@pytest.fixture
def resolver(local, derive, clock):
    return AgentResolver(local, derive, cache_ttl=30.0, clock=clock)


@pytest.fixture
def publish(resolver, local):
    """Store an account at the PDA the resolver will derive for (mint, service)."""

    def _publish(agent_mint, service_type="a2a", data=None):
        address = resolver.locator.locate(agent_mint, service_type)
        local.set_account(address, build_account() if data is None else data)
        return address

    return _publish
