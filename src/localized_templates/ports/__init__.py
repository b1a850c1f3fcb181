"""Port definitions for the rendering collaborator."""

from __future__ import annotations

from .engine import CompiledTemplate, ITemplateEngine

__all__ = [
    "CompiledTemplate",
    "ITemplateEngine",
]
