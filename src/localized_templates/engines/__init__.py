"""Template engine adapters."""

from __future__ import annotations

from .jinja import JinjaTemplateEngine
from .string import FormatTemplate, StringFormatEngine

__all__ = ["FormatTemplate", "JinjaTemplateEngine", "StringFormatEngine"]
