"""Zero-dependency string format engine."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from string import Formatter
from typing import Any

from ..exceptions import CompileError, RenderError
from ..ports.engine import ITemplateEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormatTemplate:
    """A body checked for ``str.format`` syntax."""

    name: str
    body: str


class StringFormatEngine(ITemplateEngine):
    """
    Simple engine using Python's native string formatting.
    No external dependencies.
    """

    def __init__(self) -> None:
        self._compiled: dict[str, FormatTemplate] = {}

    def compile(self, name: str, body: str) -> FormatTemplate:
        """Validate the replacement fields of ``body``."""
        if name in self._compiled:
            raise CompileError(name, "a template with this name is already compiled")
        try:
            list(Formatter().parse(body))
        except ValueError as e:
            logger.error(f"Format string {name!r} is malformed: {e}")
            raise CompileError(name, str(e), e) from e
        compiled = FormatTemplate(name=name, body=body)
        self._compiled[name] = compiled
        return compiled

    def has_compiled(self, name: str) -> bool:
        return name in self._compiled

    def discard(self, name: str) -> None:
        self._compiled.pop(name, None)

    def render(self, compiled: FormatTemplate, context: Mapping[str, Any]) -> str:
        """Render using ``str.format()``."""
        try:
            return compiled.body.format(**context)
        except KeyError as e:
            logger.error(f"Missing template variable: {e}")
            raise RenderError(compiled.name, f"missing variable {e}", e) from e
        except (IndexError, AttributeError, ValueError) as e:
            logger.error(f"Template rendering failed: {e}")
            raise RenderError(compiled.name, str(e), e) from e
