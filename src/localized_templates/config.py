"""Configuration objects."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class JinjaEngineConfig:
    """Jinja2 environment options.

    Attributes:
        autoescape: HTML-escape every substituted value.
        strict_undefined: Fail rendering on undefined variables instead of
            rendering them as empty strings.
        trim_blocks: Remove the first newline after a block tag.
        lstrip_blocks: Strip leading whitespace before a block tag.
        keep_trailing_newline: Keep the trailing newline of a body.
    """

    autoescape: bool = False
    strict_undefined: bool = True
    trim_blocks: bool = False
    lstrip_blocks: bool = False
    keep_trailing_newline: bool = False


@dataclass(frozen=True)
class BuildConfig:
    """Options for ``LocalizedTemplatesBuilder.build``.

    Attributes:
        name_prefix: Prefix of engine names generated for contents that
            carry no explicit name. A build-scoped counter is appended.
    """

    name_prefix: str = "template#"
