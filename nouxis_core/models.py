# nouxis_core/models.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from nouxis_core.errors import FailureKind


@dataclass(frozen=True)
class ResolvedAgent:
    """
    Caller-facing view of an on-chain PaymentRequirement.

    ``amount`` stays a decimal string of smallest token units so u64 values
    survive JSON and JavaScript consumers without precision loss.
    """
    pay_to: str       # recipient wallet (base58)
    amount: str       # u64, decimal text
    token_mint: str   # SPL token mint (base58)
    active: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResolvedAgent":
        return cls(
            pay_to=data["pay_to"],
            amount=str(data["amount"]),
            token_mint=data["token_mint"],
            active=bool(data.get("active", False)),
        )


@dataclass(frozen=True)
class CacheEntry:
    record: ResolvedAgent
    expires_at: float


@dataclass(frozen=True)
class Resolution:
    """Outcome of one resolve call; exactly one of record/failure is set."""
    record: Optional[ResolvedAgent] = None
    failure: Optional[FailureKind] = None
    detail: str = ""
    cached: bool = False

    @property
    def ok(self) -> bool:
        return self.record is not None
