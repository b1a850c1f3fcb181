"""Multi-locale template registry — localized variants, fallback locale, template groups."""

from __future__ import annotations

from .builder import LocalizedTemplatesBuilder
from .catalog import LocalizedTemplates
from .config import BuildConfig, JinjaEngineConfig
from .content import Content
from .engines.jinja import JinjaTemplateEngine
from .engines.string import StringFormatEngine
from .exceptions import (
    BuildError,
    BuilderConsumedError,
    CatalogError,
    CompileError,
    ContentNameClashError,
    ContentNotFoundError,
    DuplicatedContentLocalesError,
    DuplicatedContentNameError,
    EngineError,
    GroupIntegrityError,
    GroupNotFoundError,
    GroupViolation,
    LocaleNotFoundError,
    LocalizedTemplatesError,
    NameClash,
    RenderError,
    RenderingFailedError,
    StagingError,
    StoreConsumedError,
    TemplateAlreadyStagedError,
    TemplateBuildingError,
    TemplateNotFoundError,
)
from .ports.engine import CompiledTemplate, ITemplateEngine
from .registry import GroupDirectory, TemplateGroupBuilder, TemplateRegistry
from .store import ContentStore
from .template import ContentBuilder, Template

__all__ = [
    # Staging
    "Content",
    "ContentStore",
    "Template",
    "ContentBuilder",
    "TemplateRegistry",
    "GroupDirectory",
    "TemplateGroupBuilder",
    # Build
    "LocalizedTemplatesBuilder",
    "GroupViolation",
    "NameClash",
    "BuildConfig",
    # Runtime
    "LocalizedTemplates",
    # Engines
    "ITemplateEngine",
    "CompiledTemplate",
    "JinjaTemplateEngine",
    "JinjaEngineConfig",
    "StringFormatEngine",
    # Exceptions
    "LocalizedTemplatesError",
    "StagingError",
    "DuplicatedContentNameError",
    "DuplicatedContentLocalesError",
    "ContentNotFoundError",
    "StoreConsumedError",
    "TemplateAlreadyStagedError",
    "BuilderConsumedError",
    "BuildError",
    "GroupIntegrityError",
    "ContentNameClashError",
    "TemplateBuildingError",
    "CatalogError",
    "TemplateNotFoundError",
    "LocaleNotFoundError",
    "GroupNotFoundError",
    "RenderingFailedError",
    "EngineError",
    "CompileError",
    "RenderError",
]
