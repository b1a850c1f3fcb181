"""Immutable ``Content`` value object."""

from __future__ import annotations

from collections.abc import Hashable, Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class Content(BaseModel):
    """One localized body of text plus the locales (and name) it is bound to.

    A content without locales is inert: it cannot be reached by any render
    request and is dropped when its template is finalized.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    body: str
    locales: frozenset[Hashable] = frozenset()
    name: str | None = None

    def __init__(
        self,
        body: str,
        locales: Iterable[Hashable] = (),
        name: str | None = None,
        **data: Any,
    ) -> None:
        super().__init__(body=body, locales=locales, name=name, **data)

    @field_validator("locales", mode="before")
    @classmethod
    def _coerce_locales(cls, value: Any) -> frozenset[Hashable]:
        if isinstance(value, (str, bytes)):
            # a bare "en" would otherwise become {"e", "n"}
            return frozenset([value])
        return frozenset(value)

    @field_validator("name")
    @classmethod
    def _empty_name_is_none(cls, value: str | None) -> str | None:
        return value or None

    def with_body(self, body: str) -> Content:
        """Return a copy with ``body`` replaced."""
        return Content(body, self.locales, self.name)

    def with_locales(self, locales: Iterable[Hashable]) -> Content:
        """Return a copy bound to ``locales`` instead."""
        return Content(self.body, locales, self.name)

    def __hash__(self) -> int:
        return hash((self.body, self.locales, self.name))
