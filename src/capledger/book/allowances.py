"""
Allowance Book — разрешения owner → spender (ERC-20 approve/transferFrom)

Allowance равный UINT256_MAX считается неограниченным и не уменьшается
при списании.
"""

from typing import Dict, Tuple

from capledger.core.domain.events import Approval
from capledger.core.domain.identity import require_identity
from capledger.core.errors import InsufficientAllowance
from capledger.core.math import UINT256_MAX, require_amount


class AllowanceBook:
    def __init__(self, allowances: Dict[str, Dict[str, int]] | None = None):
        self._allowances: Dict[Tuple[str, str], int] = {}
        for owner, per_owner in (allowances or {}).items():
            for spender, amount in per_owner.items():
                require_amount(amount, field="allowance")
                if amount:
                    self._allowances[(owner, spender)] = amount

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def approve(self, owner: str, spender: str, amount: int) -> Approval:
        """
        Установка allowance (перезапись, не прибавление).

        Raises:
            InvalidIdentity: null owner или spender
        """
        require_identity(owner, role="owner")
        require_identity(spender, role="spender")
        require_amount(amount)
        self._set(owner, spender, amount)
        return Approval(owner=owner, spender=spender, amount=amount)

    def check_spend(self, owner: str, spender: str, amount: int) -> None:
        """
        Raises:
            InsufficientAllowance: allowance < amount
        """
        current = self.allowance(owner, spender)
        if current < amount:
            raise InsufficientAllowance(
                f"{spender} may spend {current} of {owner}, requested {amount}"
            )

    def spend(self, owner: str, spender: str, amount: int) -> None:
        self.check_spend(owner, spender, amount)
        current = self.allowance(owner, spender)
        if current != UINT256_MAX:
            self._set(owner, spender, current - amount)

    def _set(self, owner: str, spender: str, amount: int) -> None:
        if amount:
            self._allowances[(owner, spender)] = amount
        else:
            self._allowances.pop((owner, spender), None)

    def as_nested(self) -> Dict[str, Dict[str, int]]:
        nested: Dict[str, Dict[str, int]] = {}
        for (owner, spender), amount in self._allowances.items():
            nested.setdefault(owner, {})[spender] = amount
        return nested
