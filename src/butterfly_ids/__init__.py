"""Butterfly IDs: strictly increasing 64-bit identifiers for a single process."""

from butterfly_ids.core.layout import IdFields, decompose, pack
from butterfly_ids.services.issuer import (
    ExhaustedError,
    InvariantViolationError,
    Issuer,
    IssuerError,
    OutOfRangeError,
    get_issuer,
)

__all__ = [
    "ExhaustedError",
    "IdFields",
    "InvariantViolationError",
    "Issuer",
    "IssuerError",
    "OutOfRangeError",
    "decompose",
    "get_issuer",
    "pack",
]
