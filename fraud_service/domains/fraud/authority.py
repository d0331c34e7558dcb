"""Contract for the external transaction authority."""

from abc import ABC, abstractmethod

from .models import AuthoritativeTransaction


class TransactionAuthority(ABC):
    """Source of ground-truth transaction records.

    ``get_transaction`` raises ``TransactionNotFound`` for unknown references
    and ``AuthorityUnavailable`` for any other failure.
    """

    @abstractmethod
    async def get_transaction(self, reference: str) -> AuthoritativeTransaction:
        ...

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        return None
