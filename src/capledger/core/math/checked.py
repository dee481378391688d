"""
Checked Arithmetic — Fixed-width unsigned integer primitives

Все суммы в ledger: беззнаковые целые фиксированной ширины (uint256).
Python int не переполняется сам по себе, поэтому границы проверяются явно.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Переполнение и уход в минус никогда не "заворачиваются" (wrap): только ошибка
2. Basis-point математика: только целочисленная, floor (усечение к нулю)
3. Никаких float в денежных расчётах
"""

from typing import Final

from capledger.core.errors import InsufficientBalance, InvalidAmount, Overflow

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Ширина суммы в битах
AMOUNT_BITS: Final[int] = 256

# Максимальная представимая сумма
UINT256_MAX: Final[int] = (1 << AMOUNT_BITS) - 1

# 10000 bps = 100%
BPS_DENOMINATOR: Final[int] = 10_000


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def require_amount(amount: int, *, field: str = "amount") -> int:
    """
    Проверка, что значение: допустимая сумма uint256.

    bool отклоняется явно (bool: подкласс int в Python).

    Raises:
        InvalidAmount: не int или отрицательное значение
        Overflow: значение больше UINT256_MAX
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"{field} must be an integer, got {type(amount).__name__}")
    if amount < 0:
        raise InvalidAmount(f"{field} cannot be negative: {amount}")
    if amount > UINT256_MAX:
        raise Overflow(f"{field} {amount} exceeds maximum representable amount")
    return amount


# =============================================================================
# CHECKED ОПЕРАЦИИ
# =============================================================================


def checked_add(a: int, b: int) -> int:
    """
    Сложение с проверкой переполнения.

    Raises:
        Overflow: a + b > UINT256_MAX
    """
    result = a + b
    if result > UINT256_MAX:
        raise Overflow(f"{a} + {b} exceeds maximum representable amount")
    return result


def checked_sub(a: int, b: int) -> int:
    """
    Вычитание без ухода в минус.

    Raises:
        InsufficientBalance: b > a
    """
    if b > a:
        raise InsufficientBalance(f"cannot subtract {b} from {a}")
    return a - b


def bps_of(amount: int, rate_bps: int) -> int:
    """
    floor(amount * rate_bps / 10000).

    Промежуточное произведение может превышать uint256: это допустимо,
    результат всегда <= amount при rate_bps <= 10000.

    Examples:
        >>> bps_of(200, 500)
        10
        >>> bps_of(199, 500)
        9
        >>> bps_of(19, 500)
        0
    """
    if rate_bps < 0 or rate_bps > BPS_DENOMINATOR:
        raise ValueError(f"rate_bps must be in [0, {BPS_DENOMINATOR}], got {rate_bps}")
    return (amount * rate_bps) // BPS_DENOMINATOR


def split_bps(amount: int, rate_bps: int) -> tuple[int, int]:
    """
    Разбиение суммы на (principal, fee) по ставке в bps.

    Инвариант: principal + fee == amount (точно).

    Returns:
        (principal, fee)
    """
    fee = bps_of(amount, rate_bps)
    return amount - fee, fee
