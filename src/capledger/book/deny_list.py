"""
Deny-List Registry — множество заблокированных identity

Identity либо присутствует (blocked), либо нет. add/remove не идемпотентны:
повторное добавление/удаление: ошибка (AlreadyBlocked / NotBlocked).

Мутаторы вызываются только через Ledger после проверки Access Guard.
"""

from typing import FrozenSet, Iterable, Set

from capledger.core.domain.events import AddedToBlacklist, RemovedFromBlacklist
from capledger.core.domain.identity import require_identity
from capledger.core.errors import AlreadyBlocked, NotBlocked


class DenyList:
    def __init__(self, blocked: Iterable[str] = ()):
        self._blocked: Set[str] = set()
        for identity in blocked:
            self._blocked.add(require_identity(identity, role="blocked identity"))

    def add(self, identity: str) -> AddedToBlacklist:
        """
        Raises:
            InvalidIdentity: null identity
            AlreadyBlocked: identity уже в списке
        """
        require_identity(identity, role="blacklist entry")
        if identity in self._blocked:
            raise AlreadyBlocked(f"{identity} is already blacklisted")
        self._blocked.add(identity)
        return AddedToBlacklist(identity=identity)

    def remove(self, identity: str) -> RemovedFromBlacklist:
        """
        Raises:
            NotBlocked: identity отсутствует в списке
        """
        if identity not in self._blocked:
            raise NotBlocked(f"{identity} is not blacklisted")
        self._blocked.discard(identity)
        return RemovedFromBlacklist(identity=identity)

    def is_blocked(self, identity: str | None) -> bool:
        return identity in self._blocked

    def members(self) -> FrozenSet[str]:
        return frozenset(self._blocked)

    def __len__(self) -> int:
        return len(self._blocked)
