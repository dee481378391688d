"""Access Guard — единственный gate для всех административных операций

Проверка capability в начале каждой admin-операции:
- caller == текущий администратор → PASS
- иначе → BLOCK (NotAuthorized поднимает require_admin)

Администратор задаётся при создании ledger и может быть передан
(transfer_admin). Отказ от владения не поддерживается: после создания
администратор никогда не бывает пустым.
"""

from dataclasses import dataclass
from typing import Optional

from capledger.core.domain.events import OwnershipTransferred
from capledger.core.domain.identity import is_null_identity, require_identity
from capledger.core.errors import NotAuthorized


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class GuardResult:
    """Результат проверки Access Guard."""

    allowed: bool
    block_reason: str

    # Входные параметры для диагностики
    caller: Optional[str]
    admin: str

    # Детали
    details: str


# =============================================================================
# ACCESS GUARD
# =============================================================================


class AccessGuard:
    """Access Guard: single-identity авторизация.

    Порядок проверок:
    1. Null caller → блокировка
    2. caller != admin → блокировка
    3. PASS
    """

    def __init__(self, admin: str):
        self._admin = require_identity(admin, role="administrator")

    @property
    def admin(self) -> str:
        return self._admin

    def evaluate(self, caller: Optional[str]) -> GuardResult:
        """Оценка права caller на admin-операцию (без исключений)."""
        if is_null_identity(caller):
            return GuardResult(
                allowed=False,
                block_reason="null_caller",
                caller=caller,
                admin=self._admin,
                details="Caller identity is missing",
            )

        if caller != self._admin:
            return GuardResult(
                allowed=False,
                block_reason="not_admin",
                caller=caller,
                admin=self._admin,
                details=f"Caller {caller} is not the administrator",
            )

        return GuardResult(
            allowed=True,
            block_reason="",
            caller=caller,
            admin=self._admin,
            details=f"PASS: caller={caller}",
        )

    def require_admin(self, caller: Optional[str]) -> GuardResult:
        """
        Raises:
            NotAuthorized: caller не администратор
        """
        result = self.evaluate(caller)
        if not result.allowed:
            raise NotAuthorized(result.details)
        return result

    def transfer_admin(self, caller: Optional[str], new_admin: str) -> OwnershipTransferred:
        """
        Передача прав администратора.

        Raises:
            NotAuthorized: caller не администратор
            InvalidIdentity: null new_admin
        """
        self.require_admin(caller)
        require_identity(new_admin, role="new administrator")
        previous = self._admin
        self._admin = new_admin
        return OwnershipTransferred(previous_owner=previous, new_owner=new_admin)
