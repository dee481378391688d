"""
Book — листовые компоненты состояния ledger.

- BalanceStore: holder → баланс
- DenyList: заблокированные identity
- FeePolicy: ставка, получатель, флаг
- SupplyController: эмиссия против потолка
- AllowanceBook: разрешения owner → spender
"""

from .allowances import AllowanceBook
from .balance_store import BalanceStore
from .deny_list import DenyList
from .fee_policy import FeePolicy, FeeQuote
from .supply import SupplyController

__all__ = [
    "BalanceStore",
    "DenyList",
    "FeePolicy",
    "FeeQuote",
    "SupplyController",
    "AllowanceBook",
]
