"""
Handle-addressed storage of content bodies.

Bodies live in a dense list. Callers never see list positions: every
content is addressed by a handle issued from a counter that only grows,
and the ``handle -> index`` map is rewritten whenever a removal compacts
the list.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import (
    ContentNotFoundError,
    DuplicatedContentLocalesError,
    StoreConsumedError,
)

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterable, Iterator

logger = logging.getLogger(__name__)


class ContentStore:
    """Content bodies of one template, each linked to zero or more locales.

    Invariants kept after every public call:

    * every handle in ``_handle_to_index`` points at a distinct valid index
      of ``_bodies``;
    * every locale in ``_locale_to_handle`` points at a live handle;
    * ``_bodies`` has no gaps.
    """

    def __init__(self) -> None:
        self._bodies: list[str] = []
        self._handle_to_index: dict[int, int] = {}
        self._locale_to_handle: dict[Hashable, int] = {}
        self._next_handle = 0
        self._closed = False

    # -- mutation ------------------------------------------------------------

    def add_content(self, body: str, locales: Iterable[Hashable] = ()) -> int:
        """Append ``body`` linked to ``locales`` and return its handle."""
        self._ensure_open()
        wanted = frozenset(locales)
        for locale in wanted:
            if locale in self._locale_to_handle:
                raise DuplicatedContentLocalesError(locale)

        handle = self._next_handle
        self._next_handle += 1
        self._handle_to_index[handle] = len(self._bodies)
        self._bodies.append(body)
        for locale in wanted:
            self._locale_to_handle[locale] = handle
        logger.debug("Added content handle=%d locales=%s", handle, wanted)
        return handle

    def remove_content(self, handle: int) -> str:
        """Remove the content and all of its locale links; return its body."""
        self._ensure_open()
        index = self._index_of(handle)

        del self._handle_to_index[handle]
        for other, other_index in self._handle_to_index.items():
            if other_index > index:
                self._handle_to_index[other] = other_index - 1
        self._unlink(handle)
        body = self._bodies.pop(index)
        logger.debug("Removed content handle=%d", handle)
        return body

    def replace_content(self, handle: int, body: str) -> str:
        """Swap the body of ``handle``; locale links are left as they are."""
        self._ensure_open()
        index = self._index_of(handle)
        old = self._bodies[index]
        self._bodies[index] = body
        return old

    def reassign_locales(
        self, handle: int, locales: Iterable[Hashable]
    ) -> frozenset[Hashable]:
        """Replace every locale link of ``handle`` with ``locales``.

        Returns the previous locale set. An empty ``locales`` leaves the
        content inert until new locales are assigned.
        """
        self._ensure_open()
        self._index_of(handle)
        wanted = frozenset(locales)
        for locale in wanted:
            owner = self._locale_to_handle.get(locale)
            if owner is not None and owner != handle:
                raise DuplicatedContentLocalesError(locale)

        old = self._unlink(handle)
        for locale in wanted:
            self._locale_to_handle[locale] = handle
        return old

    # -- lookup --------------------------------------------------------------

    def get_content(
        self, locale: Hashable, fallback_locale: Hashable | None = None
    ) -> str | None:
        """Return the body for ``locale``, else for ``fallback_locale``."""
        self._ensure_open()
        handle = self._locale_to_handle.get(locale)
        if handle is None and fallback_locale is not None:
            handle = self._locale_to_handle.get(fallback_locale)
        if handle is None:
            return None
        return self._bodies[self._handle_to_index[handle]]

    def get_body(self, handle: int) -> str:
        self._ensure_open()
        return self._bodies[self._index_of(handle)]

    def get_locales(self, handle: int) -> frozenset[Hashable]:
        self._ensure_open()
        self._index_of(handle)
        return frozenset(
            locale for locale, owner in self._locale_to_handle.items() if owner == handle
        )

    def handle_for_locale(self, locale: Hashable) -> int | None:
        self._ensure_open()
        return self._locale_to_handle.get(locale)

    def handles(self) -> list[int]:
        """Live handles in storage order."""
        self._ensure_open()
        return sorted(self._handle_to_index, key=self._handle_to_index.__getitem__)

    @property
    def locales(self) -> frozenset[Hashable]:
        self._ensure_open()
        return frozenset(self._locale_to_handle)

    def __len__(self) -> int:
        self._ensure_open()
        return len(self._bodies)

    def __contains__(self, handle: object) -> bool:
        self._ensure_open()
        return handle in self._handle_to_index

    def __iter__(self) -> Iterator[tuple[int, str, frozenset[Hashable]]]:
        """Yield ``(handle, body, locales)`` in storage order."""
        self._ensure_open()
        by_handle = self._locales_by_handle()
        for handle in self.handles():
            yield (
                handle,
                self._bodies[self._handle_to_index[handle]],
                frozenset(by_handle.get(handle, ())),
            )

    # -- finalization --------------------------------------------------------

    def collect_contents(self) -> list[tuple[str, frozenset[Hashable]]]:
        """Return ``(body, locales)`` pairs and close the store.

        Contents without any locale are dropped.
        """
        self._ensure_open()
        collected = [(body, locales) for _, body, locales in self if locales]
        dropped = len(self._bodies) - len(collected)
        if dropped:
            logger.debug("Dropped %d content(s) without locales", dropped)
        self._closed = True
        self._bodies = []
        self._handle_to_index = {}
        self._locale_to_handle = {}
        return collected

    @property
    def closed(self) -> bool:
        return self._closed

    # -- internals -----------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreConsumedError("Content store was already collected")

    def _index_of(self, handle: int) -> int:
        try:
            return self._handle_to_index[handle]
        except KeyError:
            raise ContentNotFoundError(handle) from None

    def _unlink(self, handle: int) -> frozenset[Hashable]:
        linked = frozenset(
            locale for locale, owner in self._locale_to_handle.items() if owner == handle
        )
        for locale in linked:
            del self._locale_to_handle[locale]
        return linked

    def _locales_by_handle(self) -> dict[int, set[Hashable]]:
        result: dict[int, set[Hashable]] = {}
        for locale, handle in self._locale_to_handle.items():
            result.setdefault(handle, set()).add(locale)
        return result
