"""
Capability ports consumed by the notification reconciler and state store.

Concrete adapters live alongside this module; tests substitute in-memory
fakes.
"""
from typing import Optional, Protocol, runtime_checkable

from plantanim.domain.models import NotificationRequest


@runtime_checkable
class KeyValueStore(Protocol):
    """String key-value persistence with get/set/remove semantics."""

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...

    async def remove(self, key: str) -> None:
        ...


@runtime_checkable
class NotificationScheduler(Protocol):
    """Local notification delivery capability."""

    async def schedule(self, request: NotificationRequest) -> str:
        """Schedule a notification and return the channel's handle for it."""
        ...

    async def cancel(self, delivery_id: str) -> None:
        ...

    async def cancel_all(self) -> None:
        ...


class StorageError(Exception):
    """Raised by key-value adapters when the backing store cannot be used."""
    pass


class NotificationChannelError(Exception):
    """Raised by notification adapters when scheduling is rejected."""
    pass
