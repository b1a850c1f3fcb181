"""Keyed collections for staged templates and template groups."""

from __future__ import annotations

import logging
from collections.abc import Hashable
from typing import TYPE_CHECKING, Generic, TypeVar

from .template import Template

if TYPE_CHECKING:
    from collections.abc import ItemsView, Iterator

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class KeyedCollection(Generic[K, V]):
    """Mapping-like store where the last write for a key wins."""

    def __init__(self) -> None:
        self._items: dict[K, V] = {}

    def add(self, key: K, value: V) -> None:
        if key in self._items:
            logger.debug("Replacing %s entry %r", type(self).__name__, key)
        self._items[key] = value

    def get(self, key: K) -> V | None:
        return self._items.get(key)

    def remove(self, key: K) -> V | None:
        """Remove ``key`` and return its value, or ``None`` if it was absent."""
        return self._items.pop(key, None)

    def items(self) -> ItemsView[K, V]:
        return self._items.items()

    def keys(self) -> list[K]:
        return list(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[K]:
        return iter(self._items)

    def drain(self) -> dict[K, V]:
        """Hand over every entry and leave the collection empty."""
        items, self._items = self._items, {}
        return items


class TemplateRegistry(KeyedCollection[K, Template]):
    """Template key -> ``Template``."""


class GroupDirectory(KeyedCollection[K, dict[K, K]]):
    """Group key -> member key -> template key."""

    def add(self, key: K, value: dict[K, K]) -> None:
        # a private copy so later edits to the caller's dict don't leak in
        super().add(key, dict(value))


class TemplateGroupBuilder(Generic[K]):
    """
    Fluent helper for group definitions.

    Example::

        group = (
            TemplateGroupBuilder()
            .add_member("subject", "greet_subject")
            .add_member("text", "greet_text")
            .build()
        )
    """

    def __init__(self) -> None:
        self._members: dict[K, K] = {}

    def add_member(self, member_key: K, template_key: K) -> TemplateGroupBuilder[K]:
        self._members[member_key] = template_key
        return self

    def remove_member(self, member_key: K) -> TemplateGroupBuilder[K]:
        self._members.pop(member_key, None)
        return self

    def build(self) -> dict[K, K]:
        return dict(self._members)
