"""Shared fixtures for localized-templates tests."""

from __future__ import annotations

from typing import Any

import pytest

from localized_templates import (
    CompileError,
    LocalizedTemplates,
    LocalizedTemplatesBuilder,
    Template,
    TemplateGroupBuilder,
)
from localized_templates.exceptions import RenderError


class RecordingEngine:
    """Fake engine that remembers every compiled name in order."""

    def __init__(self) -> None:
        self.compiled: dict[str, str] = {}

    @property
    def names(self) -> list[str]:
        return list(self.compiled)

    def compile(self, name: str, body: str) -> str:
        if name in self.compiled:
            raise CompileError(name, "duplicate name")
        if "{%" in body:
            raise CompileError(name, "unsupported block")
        self.compiled[name] = body
        return name

    def has_compiled(self, name: str) -> bool:
        return name in self.compiled

    def discard(self, name: str) -> None:
        self.compiled.pop(name, None)

    def render(self, compiled: str, context: dict[str, Any]) -> str:
        try:
            return self.compiled[compiled].format(**context)
        except KeyError as e:
            raise RenderError(compiled, f"missing variable {e}", e) from e


@pytest.fixture
def recording_engine() -> RecordingEngine:
    return RecordingEngine()


@pytest.fixture
def greet_template() -> Template:
    return (
        Template.content_builder()
        .add_content("Hello {{ name }}", ["en"])
        .add_content("Ahoj {{ name }}", ["cs"])
        .build()
    )


@pytest.fixture
def builder() -> LocalizedTemplatesBuilder[str]:
    return LocalizedTemplatesBuilder()


@pytest.fixture
def catalog() -> LocalizedTemplates[str]:
    """Two templates and a group, rendered with Jinja2."""
    return (
        LocalizedTemplatesBuilder()
        .add_template(
            "template_a",
            Template.content_builder()
            .add_content("template_a cs {{ name }}", ["cs"])
            .add_content("template_a en {{ name }}", ["en"])
            .build(),
        )
        .add_template(
            "template_b",
            Template.content_builder()
            .add_content("template_b en {{ surname }}", ["en"])
            .build(),
        )
        .add_group(
            "group_a",
            TemplateGroupBuilder()
            .add_member("A", "template_a")
            .add_member("B", "template_b")
            .build(),
        )
        .build()
    )


@pytest.fixture
def context() -> dict[str, str]:
    return {"name": "john", "surname": "doe"}
