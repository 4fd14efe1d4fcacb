"""
Document store contract for sealed user payloads.

The store is an opaque username -> string map; values are already sealed
and base64-armored by the SessionManager before they get here.
"""
from abc import ABC, abstractmethod
from typing import Optional


class AbstractStore(ABC):
    """Async key/value store keyed by username."""

    @abstractmethod
    async def get(self, username: str) -> Optional[str]:
        pass

    @abstractmethod
    async def set(self, username: str, value: str) -> None:
        pass

    async def setdefault(self, username: str, value: str) -> str:
        """Insert ``value`` only when ``username`` has nothing stored yet."""
        current = await self.get(username)
        if current is None:
            await self.set(username, value)
            return value
        return current


class MemoryStore(AbstractStore):
    """In-process store, used for development and tests."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def __repr__(self) -> str:
        return f'<MemoryStore users={len(self._data)}>'

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, username: object) -> bool:
        return username in self._data

    async def get(self, username: str) -> Optional[str]:
        return self._data.get(username)

    async def set(self, username: str, value: str) -> None:
        self._data[username] = value

    async def setdefault(self, username: str, value: str) -> str:
        return self._data.setdefault(username, value)
