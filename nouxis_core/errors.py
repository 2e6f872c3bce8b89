"""
nouxis_core.errors
------------------
Failure taxonomy for PaymentRequirement resolution.

Components raise these; ``AgentResolver`` is the only place that turns them
into a fail-soft (absent) result.
"""

from __future__ import annotations
from enum import Enum


class FailureKind(str, Enum):
    NOT_FOUND = "not_found"
    MALFORMED = "malformed"
    TRANSPORT_FAILURE = "transport_failure"
    DERIVATION_FAILURE = "derivation_failure"


class ResolverError(Exception):
    kind: FailureKind = FailureKind.TRANSPORT_FAILURE


class AccountNotFoundError(ResolverError):
    """The derived address holds no account data."""
    kind = FailureKind.NOT_FOUND


class MalformedAccountError(ResolverError):
    """Account data is too short or a length prefix runs past the end."""
    kind = FailureKind.MALFORMED


class DerivationError(ResolverError):
    """Subject address is not valid base58/32 bytes, or no PDA exists for the seeds."""
    kind = FailureKind.DERIVATION_FAILURE


class GateError(Exception):
    """Raised by payment-gate helpers when a route cannot be priced or paid."""
