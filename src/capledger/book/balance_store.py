"""
Balance Store — отображение holder → баланс (uint256)

Листовой компонент ledger. Отсутствие записи и нулевой баланс эквивалентны:
запись создаётся при первом credit и удаляется, когда баланс возвращается в 0.

Атомарность: `apply()` сначала считает все новые балансы на staged-копии
и только затем фиксирует их. Ошибка на любом шаге оставляет store
без изменений.
"""

from typing import Dict, Iterable, Mapping, Tuple

from capledger.core.math import checked_add, require_amount
from capledger.core.errors import InsufficientBalance

Leg = Tuple[str, int]


class BalanceStore:
    """Балансы держателей."""

    def __init__(self, balances: Mapping[str, int] | None = None):
        self._balances: Dict[str, int] = {}
        for identity, amount in (balances or {}).items():
            require_amount(amount, field=f"balance of {identity}")
            if amount:
                self._balances[identity] = amount

    def balance_of(self, identity: str) -> int:
        """Баланс; 0 для неизвестной identity."""
        return self._balances.get(identity, 0)

    def credit(self, identity: str, amount: int) -> None:
        """
        Raises:
            Overflow: баланс превысит UINT256_MAX
        """
        self.apply(debits=(), credits=((identity, amount),))

    def debit(self, identity: str, amount: int) -> None:
        """
        Raises:
            InsufficientBalance: amount > текущего баланса
        """
        self.apply(debits=((identity, amount),), credits=())

    def apply(self, debits: Iterable[Leg], credits: Iterable[Leg]) -> None:
        """
        Атомарное применение набора движений.

        Все debit-ноги проверяются раньше credit-ног: нехватка баланса
        прерывает операцию до любого зачисления.

        Raises:
            InsufficientBalance: debit больше баланса (с учётом предыдущих ног)
            Overflow: credit переполняет баланс
        """
        staged: Dict[str, int] = {}

        for identity, amount in debits:
            require_amount(amount)
            current = staged.get(identity, self.balance_of(identity))
            if amount > current:
                raise InsufficientBalance(
                    f"{identity} holds {current}, cannot debit {amount}"
                )
            staged[identity] = current - amount

        for identity, amount in credits:
            require_amount(amount)
            current = staged.get(identity, self.balance_of(identity))
            staged[identity] = checked_add(current, amount)

        # commit
        for identity, amount in staged.items():
            if amount:
                self._balances[identity] = amount
            else:
                self._balances.pop(identity, None)

    def total(self) -> int:
        return sum(self._balances.values())

    def holders(self) -> Dict[str, int]:
        """Копия ненулевых балансов."""
        return dict(self._balances)

    def __len__(self) -> int:
        return len(self._balances)

    def __contains__(self, identity: str) -> bool:
        return identity in self._balances
