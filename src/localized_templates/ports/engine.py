"""Template engine port."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

CompiledTemplate = Any
"""Opaque artifact returned by ``ITemplateEngine.compile``."""


@runtime_checkable
class ITemplateEngine(Protocol):
    """
    Protocol for the expression engine that compiles and renders bodies.

    Names are unique per engine: ``compile`` refuses a name it already
    holds until that name is discarded. Implementations raise
    ``CompileError`` from ``compile`` and ``RenderError`` from ``render``;
    any other exception is a bug in the engine and propagates untouched.
    """

    def compile(self, name: str, body: str) -> CompiledTemplate:
        """Compile ``body`` and register it under ``name``."""
        ...

    def has_compiled(self, name: str) -> bool:
        """Whether ``name`` is registered with this engine."""
        ...

    def discard(self, name: str) -> None:
        """Forget ``name``; unknown names are ignored."""
        ...

    def render(self, compiled: CompiledTemplate, context: Mapping[str, Any]) -> str:
        """Render a compiled template with ``context``."""
        ...
