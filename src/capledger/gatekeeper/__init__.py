"""Gatekeeper — авторизация административных операций ledger."""

from .access_guard import AccessGuard, GuardResult

__all__ = [
    "AccessGuard",
    "GuardResult",
]
