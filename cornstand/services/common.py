"""Key derivation and store plumbing shared by the gate and the ledger."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from ..errors import InvalidClientId, StoreUnavailable
from ..store import KeyValueStore

T = TypeVar("T")
StoreErrorHook = Callable[[str, Exception], None]


@dataclass(frozen=True)
class KeySpace:
    prefix: str = "corn"

    def claim(self, client_id: str) -> str:
        return f"{self.prefix}:rate:{client_id}"

    def counter(self, client_id: str) -> str:
        return f"{self.prefix}:count:{client_id}"


def require_client_id(client_id: Optional[str], message: str = "clientId is required") -> str:
    if not isinstance(client_id, str) or not client_id:
        raise InvalidClientId(message)
    return client_id


class StoreBacked:
    def __init__(
        self,
        store: KeyValueStore,
        *,
        keys: Optional[KeySpace] = None,
        on_store_error: Optional[StoreErrorHook] = None,
    ) -> None:
        self.store = store
        self.keys = keys or KeySpace()
        self._on_store_error = on_store_error

    async def _call(self, operation: str, pending: Awaitable[T]) -> T:
        try:
            return await pending
        except StoreUnavailable as exc:
            if self._on_store_error is not None:
                self._on_store_error(operation, exc)
            raise
