"""
Error taxonomy ledger engine.

Каждая ошибка терминальна для операции, которая её подняла:
- состояние ledger не меняется (all-or-nothing)
- внутренних retry нет: политика повторов принадлежит хосту

`code`: стабильный машинный идентификатор (для хоста и журналов).
"""


class LedgerError(Exception):
    """Базовая ошибка ledger; все отклонённые операции поднимают её потомков."""

    code: str = "ledger_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class NotAuthorized(LedgerError):
    """Caller не является текущим администратором."""

    code = "not_authorized"


class InvalidIdentity(LedgerError):
    """Null identity там, где она запрещена."""

    code = "invalid_identity"


class AlreadyBlocked(LedgerError):
    code = "already_blocked"


class NotBlocked(LedgerError):
    code = "not_blocked"


class SenderBlocked(LedgerError):
    code = "sender_blocked"


class RecipientBlocked(LedgerError):
    code = "recipient_blocked"


class InsufficientBalance(LedgerError):
    code = "insufficient_balance"


class InsufficientAllowance(LedgerError):
    code = "insufficient_allowance"


class Overflow(LedgerError):
    """Сумма превысила максимум uint256."""

    code = "overflow"


class SupplyCeilingExceeded(LedgerError):
    code = "supply_ceiling_exceeded"


class RateTooHigh(LedgerError):
    code = "rate_too_high"


class InvalidAmount(LedgerError, ValueError):
    """Сумма не является неотрицательным целым."""

    code = "invalid_amount"


__all__ = [
    "LedgerError",
    "NotAuthorized",
    "InvalidIdentity",
    "AlreadyBlocked",
    "NotBlocked",
    "SenderBlocked",
    "RecipientBlocked",
    "InsufficientBalance",
    "InsufficientAllowance",
    "Overflow",
    "SupplyCeilingExceeded",
    "RateTooHigh",
    "InvalidAmount",
]
