"""
Exception hierarchy for localized-templates.

All exceptions inherit from ``LocalizedTemplatesError`` and provide
``to_dict()`` for API-friendly error responses.

Staging errors reject a single mutation and leave prior state untouched,
build errors reject the whole build, and catalog errors reject a single
render call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Hashable, Sequence


class GroupViolation(NamedTuple):
    """A group member that references a template which is not staged."""

    group_key: Any
    member_key: Any
    template_key: Any


class NameClash(NamedTuple):
    """An explicit content name claimed by more than one template."""

    name: str
    template_keys: tuple[Any, ...]


class LocalizedTemplatesError(Exception):
    """Root exception for the localized-templates library."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


# ── Staging ──────────────────────────────────────────────────────────


class StagingError(LocalizedTemplatesError):
    """Base class for errors raised while templates are being staged."""


class DuplicatedContentNameError(StagingError):
    """Raised when a content name is already claimed inside a template."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Content name {name!r} is already used in this template")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "DUPLICATED_CONTENT_NAME",
            "name": self.name,
        }


class DuplicatedContentLocalesError(StagingError):
    """Raised when a locale is already linked to another content."""

    def __init__(self, locale: Hashable) -> None:
        self.locale = locale
        super().__init__(
            f"Locale {locale!r} is already assigned to another content"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "DUPLICATED_CONTENT_LOCALES",
            "locale": self.locale,
        }


class ContentNotFoundError(StagingError, KeyError):
    """Raised when a content handle is unknown to its store."""

    def __init__(self, handle: int) -> None:
        self.handle = handle
        super().__init__(f"No content with handle={handle!r}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "CONTENT_NOT_FOUND",
            "handle": self.handle,
        }


class StoreConsumedError(StagingError):
    """Raised when a finalized content store or template is used again."""


class TemplateAlreadyStagedError(StagingError):
    """Raised when one ``Template`` object is staged under a second key."""

    def __init__(self, template_key: Hashable, staged_key: Hashable) -> None:
        self.template_key = template_key
        self.staged_key = staged_key
        super().__init__(
            f"Cannot stage template under {template_key!r}: "
            f"the same template is already staged under {staged_key!r}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "TEMPLATE_ALREADY_STAGED",
            "template": self.template_key,
            "staged_as": self.staged_key,
        }


class BuilderConsumedError(StagingError):
    """Raised when a builder is used after ``build()`` succeeded."""


# ── Build ────────────────────────────────────────────────────────────


class BuildError(LocalizedTemplatesError):
    """Base class for errors that reject a whole build."""


class GroupIntegrityError(BuildError):
    """Raised when groups reference templates that are not staged.

    Carries every violation found, not only the first one. The message
    previews at most five of them; read ``violations`` or ``to_dict()`` for
    the complete list instead of parsing ``str(e)``.
    """

    def __init__(self, violations: Sequence[GroupViolation]) -> None:
        self.violations = list(violations)
        preview = ", ".join(
            f"{v.group_key!r}.{v.member_key!r} -> {v.template_key!r}"
            for v in self.violations[:5]
        )
        if len(self.violations) > 5:
            preview += ", ..."
        super().__init__(
            f"Cannot build template groups - {len(self.violations)} "
            f"missing template reference(s): {preview}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "GROUP_INTEGRITY_PROBLEM",
            "violations": [
                {
                    "group": v.group_key,
                    "member": v.member_key,
                    "template": v.template_key,
                }
                for v in self.violations
            ],
        }


class ContentNameClashError(BuildError):
    """Raised when one explicit content name is used by several templates."""

    def __init__(self, clashes: Sequence[NameClash]) -> None:
        self.clashes = list(clashes)
        names = ", ".join(repr(c.name) for c in self.clashes)
        super().__init__(f"Content names used by more than one template: {names}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "CONTENT_NAME_CLASH",
            "clashes": [
                {"name": c.name, "templates": list(c.template_keys)}
                for c in self.clashes
            ],
        }


class TemplateBuildingError(BuildError):
    """Raised when the engine fails to compile a content body."""

    def __init__(self, template_key: Hashable, name: str, reason: str) -> None:
        self.template_key = template_key
        self.name = name
        self.reason = reason
        super().__init__(
            f"Unable to build template {template_key!r} (content {name!r}): {reason}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "TEMPLATE_BUILDING_ERROR",
            "template": self.template_key,
            "name": self.name,
            "reason": self.reason,
        }


# ── Catalog (render time) ────────────────────────────────────────────


class CatalogError(LocalizedTemplatesError):
    """Base class for errors that reject a single render call."""


class TemplateNotFoundError(CatalogError):
    """Raised when no template is registered under the requested key."""

    def __init__(self, template_key: Hashable) -> None:
        self.template_key = template_key
        super().__init__(f"There is no template {template_key!r}")

    def to_dict(self) -> dict[str, Any]:
        return {"error": "TEMPLATE_NOT_FOUND", "template": self.template_key}


class LocaleNotFoundError(CatalogError):
    """Raised when neither the locale nor the fallback locale has a content."""

    def __init__(
        self,
        template_key: Hashable,
        locale: Hashable,
        fallback_locale: Hashable | None = None,
    ) -> None:
        self.template_key = template_key
        self.locale = locale
        self.fallback_locale = fallback_locale
        msg = f"Locale {locale!r} not found for template {template_key!r}"
        if fallback_locale is not None:
            msg += f" (fallback {fallback_locale!r} not found either)"
        super().__init__(msg)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "LOCALE_NOT_FOUND",
            "template": self.template_key,
            "locale": self.locale,
            "fallback_locale": self.fallback_locale,
        }


class GroupNotFoundError(CatalogError):
    """Raised when no group is registered under the requested key."""

    def __init__(self, group_key: Hashable) -> None:
        self.group_key = group_key
        super().__init__(f"There is no group {group_key!r}")

    def to_dict(self) -> dict[str, Any]:
        return {"error": "GROUP_NOT_FOUND", "group": self.group_key}


class RenderingFailedError(CatalogError):
    """Raised when the engine fails to render a compiled template."""

    def __init__(self, template_key: Hashable, locale: Hashable, reason: str) -> None:
        self.template_key = template_key
        self.locale = locale
        self.reason = reason
        super().__init__(
            f"Error when rendering template {template_key!r} "
            f"for locale {locale!r}: {reason}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "RENDERING_FAILED",
            "template": self.template_key,
            "locale": self.locale,
            "reason": self.reason,
        }


# ── Engine boundary ──────────────────────────────────────────────────


class EngineError(LocalizedTemplatesError):
    """Base class for failures reported by a template engine."""

    def __init__(self, name: str, message: str, original: Exception | None = None) -> None:
        self.name = name
        self.original = original
        super().__init__(message)


class CompileError(EngineError):
    """Raised by an engine when a body cannot be compiled."""

    def __init__(self, name: str, reason: str, original: Exception | None = None) -> None:
        self.reason = reason
        super().__init__(name, f"Cannot compile {name!r}: {reason}", original)


class RenderError(EngineError):
    """Raised by an engine when a compiled template cannot be rendered."""

    def __init__(self, name: str, reason: str, original: Exception | None = None) -> None:
        self.reason = reason
        super().__init__(name, f"Cannot render {name!r}: {reason}", original)
