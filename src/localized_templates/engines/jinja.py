"""Jinja2 template engine."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from jinja2 import (
    DictLoader,
    Environment,
    StrictUndefined,
    Template,
    TemplateError,
    TemplateSyntaxError,
    Undefined,
)

from ..config import JinjaEngineConfig
from ..exceptions import CompileError, RenderError
from ..ports.engine import ITemplateEngine

logger = logging.getLogger(__name__)


class JinjaTemplateEngine(ITemplateEngine):
    """
    Compiles and renders bodies with Jinja2.

    Every compiled body is registered in the environment's loader under
    its name, so bodies can ``{% include %}`` or ``{% extends %}`` each
    other by name. Such references are resolved at render time.
    """

    def __init__(self, config: JinjaEngineConfig | None = None) -> None:
        self.config = config or JinjaEngineConfig()
        self._sources: dict[str, str] = {}
        self._env = Environment(
            loader=DictLoader(self._sources),
            autoescape=self.config.autoescape,
            undefined=StrictUndefined if self.config.strict_undefined else Undefined,
            trim_blocks=self.config.trim_blocks,
            lstrip_blocks=self.config.lstrip_blocks,
            keep_trailing_newline=self.config.keep_trailing_newline,
        )

    @property
    def environment(self) -> Environment:
        return self._env

    def compile(self, name: str, body: str) -> Template:
        """Parse ``body`` and register it under ``name``."""
        if name in self._sources:
            raise CompileError(name, "a template with this name is already compiled")
        self._sources[name] = body
        try:
            return self._env.get_template(name)
        except TemplateSyntaxError as e:
            del self._sources[name]
            logger.error(f"Jinja2 compilation of {name!r} failed: {e}")
            raise CompileError(name, f"line {e.lineno}: {e.message}", e) from e

    def has_compiled(self, name: str) -> bool:
        return name in self._sources

    def discard(self, name: str) -> None:
        # cached entries go stale with their loader source
        self._sources.pop(name, None)

    def render(self, compiled: Template, context: Mapping[str, Any]) -> str:
        """Render a compiled template with ``context``."""
        try:
            return compiled.render(dict(context))
        except TemplateError as e:
            logger.error(f"Jinja2 rendering of {compiled.name!r} failed: {e}")
            raise RenderError(compiled.name or "<string>", str(e), e) from e
