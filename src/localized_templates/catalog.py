"""
Read-only runtime produced by ``LocalizedTemplatesBuilder.build``.

A catalog never changes after construction, so one instance can serve
concurrent render calls without locking.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .exceptions import (
    GroupNotFoundError,
    LocaleNotFoundError,
    RenderError,
    RenderingFailedError,
    TemplateNotFoundError,
)

if TYPE_CHECKING:
    from .ports.engine import CompiledTemplate, ITemplateEngine

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


class LocalizedTemplates(Generic[K]):
    """Render single templates or template groups for a requested locale."""

    def __init__(
        self,
        engine: ITemplateEngine,
        templates: Mapping[K, Mapping[K, CompiledTemplate]],
        groups: Mapping[K, Mapping[K, K]],
    ) -> None:
        self._engine = engine
        self._templates: Mapping[K, Mapping[K, CompiledTemplate]] = MappingProxyType(
            {key: MappingProxyType(dict(locales)) for key, locales in templates.items()}
        )
        self._groups: Mapping[K, Mapping[K, K]] = MappingProxyType(
            {key: MappingProxyType(dict(members)) for key, members in groups.items()}
        )

    # -- rendering -----------------------------------------------------------

    def render_template(
        self,
        context: Mapping[str, Any],
        template_key: K,
        locale: K,
        fallback_locale: K | None = None,
    ) -> str:
        """
        Render the template ``template_key`` in ``locale``.

        ``fallback_locale`` is consulted only when the template has no
        content for ``locale``.

        Raises:
            TemplateNotFoundError: Unknown ``template_key``.
            LocaleNotFoundError: Neither locale has a content.
            RenderingFailedError: The engine failed to render.
        """
        compiled = self._resolve(template_key, locale, fallback_locale)
        try:
            return self._engine.render(compiled, context)
        except RenderError as e:
            raise RenderingFailedError(template_key, locale, e.reason) from e

    def render_group(
        self,
        context: Mapping[str, Any],
        group_key: K,
        locale: K,
        fallback_locale: K | None = None,
    ) -> dict[K, str]:
        """
        Render every member of ``group_key`` and return ``{member: text}``.

        All members share ``context`` and locales. The first failing
        member aborts the call; no partial result is returned.
        """
        group = self._groups.get(group_key)
        if group is None:
            raise GroupNotFoundError(group_key)

        rendered: dict[K, str] = {}
        for member_key, template_key in group.items():
            rendered[member_key] = self.render_template(
                context, template_key, locale, fallback_locale
            )
        return rendered

    # -- introspection -------------------------------------------------------

    def template_keys(self) -> list[K]:
        return list(self._templates)

    def group_keys(self) -> list[K]:
        return list(self._groups)

    def has_template(self, template_key: K) -> bool:
        return template_key in self._templates

    def has_group(self, group_key: K) -> bool:
        return group_key in self._groups

    def locales(self, template_key: K) -> frozenset[K]:
        """Locales ``template_key`` can be rendered in."""
        try:
            return frozenset(self._templates[template_key])
        except KeyError:
            raise TemplateNotFoundError(template_key) from None

    def group_members(self, group_key: K) -> Mapping[K, K]:
        try:
            return self._groups[group_key]
        except KeyError:
            raise GroupNotFoundError(group_key) from None

    def __repr__(self) -> str:
        return (
            f"LocalizedTemplates(templates={len(self._templates)}, "
            f"groups={len(self._groups)})"
        )

    # -- internals -----------------------------------------------------------

    def _resolve(
        self, template_key: K, locale: K, fallback_locale: K | None
    ) -> CompiledTemplate:
        compiled_by_locale = self._templates.get(template_key)
        if compiled_by_locale is None:
            raise TemplateNotFoundError(template_key)

        compiled = compiled_by_locale.get(locale)
        if compiled is None and fallback_locale is not None:
            compiled = compiled_by_locale.get(fallback_locale)
            if compiled is not None:
                logger.debug(
                    "Template %r has no %r content, using fallback %r",
                    template_key,
                    locale,
                    fallback_locale,
                )
        if compiled is None:
            raise LocaleNotFoundError(template_key, locale, fallback_locale)
        return compiled
