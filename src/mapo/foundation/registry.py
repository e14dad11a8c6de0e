"""
Generic registry pattern for managing named components (algorithms, evaluators, etc.).

Registries are plain instances: build one at startup and pass it to whoever
needs to resolve names. Nothing here is module-global.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Iterator, TypeVar

T = TypeVar("T")


class Registry(Generic[T]):
    """
    A simple registry for managing named items.

    Keys are case-insensitive. Supports aliases and usage as a decorator.
    """

    def __init__(self, name: str = "Registry") -> None:
        self._name = name
        self._items: dict[str, T] = {}
        self._aliases: dict[str, str] = {}

    @property
    def name(self) -> str:
        return self._name

    @staticmethod
    def _normalize(key: str) -> str:
        return str(key).strip().lower()

    def register(
        self,
        key: str,
        item: T | None = None,
        *,
        aliases: tuple[str, ...] = (),
        override: bool = False,
    ) -> Callable[[T], T] | T:
        """
        Register an item with the given key.

        Can be used as a function call or a decorator.

        Args:
            key: The unique name for the item.
            item: The item to register. If None, returns a decorator.
            aliases: Additional names resolving to the same item.
            override: If True, overwrite existing key. If False, raise ValueError on duplicate.

        Returns:
            The registered item (if passed) or a decorator (if item is None).
        """
        norm = self._normalize(key)

        def _do_register(obj: T) -> T:
            if (norm in self._items or norm in self._aliases) and not override:
                raise ValueError(f"Key '{key}' already exists in registry '{self._name}'")
            self._items[norm] = obj
            for alias in aliases:
                self._aliases[self._normalize(alias)] = norm
            return obj

        if item is None:
            return _do_register
        return _do_register(item)

    def resolve_key(self, key: str) -> str | None:
        norm = self._normalize(key)
        if norm in self._items:
            return norm
        return self._aliases.get(norm)

    def get(self, key: str, default: Any = ...) -> T:
        """
        Retrieve an item by key or alias.

        Args:
            key: Name of the item to retrieve.
            default: Value to return if key missing. If not provided, raises KeyError.
        """
        resolved = self.resolve_key(key)
        if resolved is None:
            if default is not ...:
                return default
            raise KeyError(f"Key '{key}' not found in registry '{self._name}'")
        return self._items[resolved]

    def unregister(self, key: str) -> None:
        resolved = self.resolve_key(key)
        if resolved is None:
            raise KeyError(f"Key '{key}' not found in registry '{self._name}'")
        del self._items[resolved]
        self._aliases = {a: k for a, k in self._aliases.items() if k != resolved}

    def list(self) -> list[str]:
        """Return a sorted list of registered keys (aliases excluded)."""
        return sorted(self._items.keys())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.resolve_key(key) is not None

    def __getitem__(self, key: str) -> T:
        return self.get(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Registry({self._name!r}, keys={self.list()})"


__all__ = ["Registry"]
