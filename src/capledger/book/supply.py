"""
Supply Controller — учёт эмиссии относительно неизменяемого потолка

Инвариант: total_issued <= ceiling; ceiling задаётся при создании и
больше не меняется. Сжигание уменьшает total_issued и освобождает место
под будущую эмиссию.

Supply Controller владеет связкой "баланс + счётчик": issue() зачисляет
Balance Store и увеличивает total_issued, retire() списывает и уменьшает.
Порядок: все проверки → мутация баланса → мутация счётчика.
"""

from capledger.book.balance_store import BalanceStore
from capledger.core.errors import SupplyCeilingExceeded
from capledger.core.math import checked_sub, require_amount


class SupplyController:
    def __init__(self, balances: BalanceStore, ceiling: int, total_issued: int = 0):
        require_amount(ceiling, field="ceiling")
        require_amount(total_issued, field="total_issued")
        if total_issued > ceiling:
            raise SupplyCeilingExceeded(
                f"total issued {total_issued} exceeds ceiling {ceiling}"
            )
        self._balances = balances
        self._ceiling = ceiling
        self._total_issued = total_issued

    @property
    def ceiling(self) -> int:
        return self._ceiling

    @property
    def total_issued(self) -> int:
        return self._total_issued

    def remaining(self) -> int:
        """ceiling - total_issued."""
        return self._ceiling - self._total_issued

    def check_issue(self, amount: int) -> None:
        """
        Raises:
            SupplyCeilingExceeded: total_issued + amount > ceiling
        """
        require_amount(amount)
        if amount > self.remaining():
            raise SupplyCeilingExceeded(
                f"issuing {amount} exceeds ceiling {self._ceiling} "
                f"(issued {self._total_issued}, remaining {self.remaining()})"
            )

    def issue(self, to: str, amount: int) -> None:
        """Эмиссия amount на баланс `to`."""
        self.check_issue(amount)
        self._balances.credit(to, amount)
        self._total_issued += amount

    def retire(self, holder: str, amount: int) -> None:
        """
        Сжигание amount с баланса `holder`.

        Raises:
            InsufficientBalance: amount > баланса holder
        """
        require_amount(amount)
        new_total = checked_sub(self._total_issued, amount)
        self._balances.debit(holder, amount)
        self._total_issued = new_total
