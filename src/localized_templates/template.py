"""
Templates: all localized variants of one logical piece of text.

Example::

    template = (
        Template.content_builder()
        .add_content("Hello {{ name }}", ["en"])
        .add_content("Ahoj {{ name }}", ["cs"])
        .build()
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .content import Content
from .exceptions import (
    ContentNotFoundError,
    DuplicatedContentLocalesError,
    DuplicatedContentNameError,
)
from .store import ContentStore

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterable, Iterator


class Template:
    """
    A set of contents in which each locale and each name is claimed once.

    Every mutation checks all locales and the name of the incoming content
    first and only then commits, so a rejected call leaves the template
    exactly as it was.
    """

    def __init__(self, contents: Iterable[Content] = ()) -> None:
        self._store = ContentStore()
        self._names: dict[str, int] = {}
        for content in contents:
            self.add_content(content)

    @classmethod
    def content_builder(cls) -> ContentBuilder:
        """Return a fluent builder for a new, empty template."""
        return ContentBuilder(cls())

    # -- mutation ------------------------------------------------------------

    def add_content(self, content: Content) -> int:
        """Add ``content`` and return its handle."""
        if content.name is not None and content.name in self._names:
            raise DuplicatedContentNameError(content.name)
        self._check_locales(content.locales)

        handle = self._store.add_content(content.body, content.locales)
        if content.name is not None:
            self._names[content.name] = handle
        return handle

    def remove_content(self, handle: int) -> Content:
        """Remove the content behind ``handle`` and release its claims."""
        locales = self._store.get_locales(handle)
        name = self._name_of(handle)
        body = self._store.remove_content(handle)
        if name is not None:
            del self._names[name]
        return Content(body, locales, name)

    def replace_content(self, handle: int, body: str) -> str:
        """Replace the body of ``handle`` and return the previous one."""
        return self._store.replace_content(handle, body)

    def reassign_locales(
        self, handle: int, locales: Iterable[Hashable]
    ) -> frozenset[Hashable]:
        """Bind ``handle`` to ``locales`` instead of its current ones."""
        self._require(handle)
        wanted = frozenset(locales)
        self._check_locales(wanted, owner=handle)
        return self._store.reassign_locales(handle, wanted)

    def rename_content(self, handle: int, name: str | None) -> str | None:
        """Give ``handle`` a new name (``None`` clears it); return the old one."""
        self._require(handle)
        name = name or None
        if name is not None and self._names.get(name, handle) != handle:
            raise DuplicatedContentNameError(name)

        old = self._name_of(handle)
        if old is not None:
            del self._names[old]
        if name is not None:
            self._names[name] = handle
        return old

    # -- lookup --------------------------------------------------------------

    def get_content(
        self, locale: Hashable, fallback_locale: Hashable | None = None
    ) -> str | None:
        """Return the body for ``locale``, falling back to ``fallback_locale``."""
        return self._store.get_content(locale, fallback_locale)

    def get(self, handle: int) -> Content:
        return Content(
            self._store.get_body(handle),
            self._store.get_locales(handle),
            self._name_of(handle),
        )

    def handle_for_name(self, name: str) -> int | None:
        return self._names.get(name)

    def handle_for_locale(self, locale: Hashable) -> int | None:
        return self._store.handle_for_locale(locale)

    @property
    def locales(self) -> frozenset[Hashable]:
        return self._store.locales

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self._names)

    @property
    def closed(self) -> bool:
        return self._store.closed

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, handle: object) -> bool:
        return handle in self._store

    def __iter__(self) -> Iterator[tuple[int, Content]]:
        for handle, body, locales in self._store:
            yield handle, Content(body, locales, self._name_of(handle))

    def __repr__(self) -> str:
        if self.closed:
            return "Template(collected)"
        return f"Template(contents={len(self)}, locales={sorted(map(repr, self.locales))})"

    # -- finalization --------------------------------------------------------

    def collect_contents(self) -> list[Content]:
        """Return every content that has a locale and consume the template."""
        named = {handle: name for name, handle in self._names.items()}
        reachable = [
            Content(body, locales, named.get(handle))
            for handle, body, locales in self._store
            if locales
        ]
        self._store.collect_contents()
        self._names = {}
        return reachable

    # -- internals -----------------------------------------------------------

    def _check_locales(
        self, locales: Iterable[Hashable], owner: int | None = None
    ) -> None:
        for locale in locales:
            claimed_by = self._store.handle_for_locale(locale)
            if claimed_by is not None and claimed_by != owner:
                raise DuplicatedContentLocalesError(locale)

    def _require(self, handle: int) -> None:
        if handle not in self._store:
            raise ContentNotFoundError(handle)

    def _name_of(self, handle: int) -> str | None:
        for name, owner in self._names.items():
            if owner == handle:
                return name
        return None


class ContentBuilder:
    """Fluent helper that stages contents into a template."""

    def __init__(self, template: Template | None = None) -> None:
        self._template = template if template is not None else Template()

    def add_content(
        self,
        body: str,
        locales: Iterable[Hashable] = (),
        name: str | None = None,
    ) -> ContentBuilder:
        """Add a content and return ``self`` for chaining."""
        self._template.add_content(Content(body, locales, name))
        return self

    def build(self) -> Template:
        return self._template
