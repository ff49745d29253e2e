"""Issuing services for Butterfly IDs."""

from .issuer import Issuer, build_issuer, get_issuer

__all__ = [
    "Issuer",
    "build_issuer",
    "get_issuer",
]
