"""
Identity — участники ledger и концы settlement

Identity: непрозрачная строка, уже верифицированная хостом (подписи и
аутентификация вне ядра). Null identity (None, "" или нулевой адрес) означает
"никто" и допустима только как маркер эмиссии/сжигания на границе API.

Внутри ядра null никогда не используется как sentinel: конец перевода это
явный sum type `Endpoint = Holder | Sentinel` (Holder, MINT, BURN).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Final, Optional, Union

from capledger.core.errors import InvalidIdentity

# =============================================================================
# NULL IDENTITY
# =============================================================================

NULL_IDENTITY: Final[str] = "0x" + "0" * 40


def is_null_identity(identity: Optional[str]) -> bool:
    """True для None, пустой строки и нулевого адреса (регистр не важен)."""
    if identity is None:
        return True
    if not isinstance(identity, str):
        return False
    stripped = identity.strip()
    if not stripped:
        return True
    return stripped.lower() == NULL_IDENTITY


def require_identity(identity: Optional[str], *, role: str = "identity") -> str:
    """
    Проверка, что identity задана и не null.

    Raises:
        InvalidIdentity: null identity или не строка
    """
    if identity is not None and not isinstance(identity, str):
        raise InvalidIdentity(f"{role} must be a string, got {type(identity).__name__}")
    if is_null_identity(identity):
        raise InvalidIdentity(f"{role} cannot be the null identity")
    return identity


# =============================================================================
# ENDPOINTS
# =============================================================================


class Sentinel(str, Enum):
    """Не-holder конец settlement."""

    MINT = "mint"
    BURN = "burn"


MINT: Final[Sentinel] = Sentinel.MINT
BURN: Final[Sentinel] = Sentinel.BURN


@dataclass(frozen=True)
class Holder:
    """Реальный держатель баланса (never null)."""

    identity: str

    def __post_init__(self) -> None:
        require_identity(self.identity, role="holder")

    def __str__(self) -> str:
        return self.identity


Endpoint = Union[Holder, Sentinel]


def is_holder(endpoint: Endpoint) -> bool:
    return isinstance(endpoint, Holder)


def endpoint_identity(endpoint: Endpoint) -> Optional[str]:
    """Identity для событий: None для MINT/BURN."""
    if isinstance(endpoint, Holder):
        return endpoint.identity
    return None
