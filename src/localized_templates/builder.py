"""
Staging and validation of templates and groups.

Example::

    catalog = (
        LocalizedTemplatesBuilder()
        .add_template("greet_subject", subject_template)
        .add_template("greet_text", text_template)
        .add_group(
            "greet_email",
            TemplateGroupBuilder()
            .add_member("subject", "greet_subject")
            .add_member("text", "greet_text")
            .build(),
        )
        .build()
    )
    catalog.render_group({"name": "John"}, "greet_email", "cs", "en")
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Hashable, Iterable
from typing import TYPE_CHECKING, Generic, TypeVar

from .catalog import LocalizedTemplates
from .config import BuildConfig
from .engines.jinja import JinjaTemplateEngine
from .exceptions import (
    BuilderConsumedError,
    CompileError,
    ContentNameClashError,
    GroupIntegrityError,
    GroupViolation,
    NameClash,
    StoreConsumedError,
    TemplateAlreadyStagedError,
    TemplateBuildingError,
)
from .registry import GroupDirectory, TemplateRegistry

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

    from .content import Content
    from .ports.engine import CompiledTemplate, ITemplateEngine
    from .template import Template

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


class LocalizedTemplatesBuilder(Generic[K]):
    """
    Stages templates and groups, then builds an immutable catalog.

    Staging is last-write-wins per key. ``build()`` validates group
    references and content names before anything is compiled; a
    validation failure leaves the builder untouched so it can be fixed
    and built again. Once compilation starts the staged templates are
    consumed and the builder cannot be used any more. A failed compilation
    discards every name it registered with the engine, so the engine can be
    handed to another builder.
    """

    def __init__(
        self,
        engine: ITemplateEngine | None = None,
        config: BuildConfig | None = None,
    ) -> None:
        self._engine = engine if engine is not None else JinjaTemplateEngine()
        self.config = config or BuildConfig()
        self._templates: TemplateRegistry[K] = TemplateRegistry()
        self._groups: GroupDirectory[K] = GroupDirectory()
        self._consumed = False

    # -- templates -----------------------------------------------------------

    def add_template(self, key: K, template: Template) -> LocalizedTemplatesBuilder[K]:
        """
        Stage ``template`` under ``key``, replacing any previous one.

        One ``Template`` object may be staged under a single key only.
        """
        self._ensure_open()
        if template.closed:
            raise StoreConsumedError(f"Template for {key!r} was already collected")
        for staged_key, staged in self._templates.items():
            if staged is template and staged_key != key:
                raise TemplateAlreadyStagedError(key, staged_key)
        self._templates.add(key, template)
        logger.debug("Staged template %r", key)
        return self

    def get_template(self, key: K) -> Template | None:
        self._ensure_open()
        return self._templates.get(key)

    def remove_template(self, key: K) -> Template | None:
        self._ensure_open()
        return self._templates.remove(key)

    def template_keys(self) -> list[K]:
        return self._templates.keys()

    # -- groups --------------------------------------------------------------

    def add_group(self, key: K, group: Mapping[K, K]) -> LocalizedTemplatesBuilder[K]:
        """Stage ``group`` (member key -> template key) under ``key``."""
        self._ensure_open()
        self._groups.add(key, dict(group))
        logger.debug("Staged group %r with %d member(s)", key, len(group))
        return self

    def get_group(self, key: K) -> dict[K, K] | None:
        self._ensure_open()
        return self._groups.get(key)

    def remove_group(self, key: K) -> dict[K, K] | None:
        self._ensure_open()
        return self._groups.remove(key)

    def group_keys(self) -> list[K]:
        return self._groups.keys()

    # -- validation ----------------------------------------------------------

    def check_group_config_validity(self) -> list[GroupViolation]:
        """
        Return every group member whose template is not staged.

        An empty list means the group configuration is valid.
        """
        return [
            GroupViolation(group_key, member_key, template_key)
            for group_key, members in self._groups.items()
            for member_key, template_key in members.items()
            if template_key not in self._templates
        ]

    def check_content_name_uniqueness(self) -> list[NameClash]:
        """
        Return every explicit content name used by more than one template.

        Only contents with at least one locale count; the others are dropped
        at build time and never reach the engine.
        """
        owners: defaultdict[str, list[K]] = defaultdict(list)
        templates = dict(self._templates.items())
        for key in _ordered(templates):
            live = {c.name for _, c in templates[key] if c.name and c.locales}
            for name in sorted(live):
                owners[name].append(key)
        return [
            NameClash(name, tuple(keys))
            for name, keys in owners.items()
            if len(keys) > 1
        ]

    # -- build ---------------------------------------------------------------

    def build(self) -> LocalizedTemplates[K]:
        """
        Compile every staged template and return the runtime catalog.

        Raises:
            GroupIntegrityError: Groups reference missing templates.
            ContentNameClashError: An explicit name is used by several templates.
            TemplateBuildingError: The engine rejected a content body.
        """
        self._ensure_open()
        violations = self.check_group_config_validity()
        if violations:
            raise GroupIntegrityError(violations)
        clashes = self.check_content_name_uniqueness()
        if clashes:
            raise ContentNameClashError(clashes)

        self._consumed = True
        staged = self._templates.drain()
        groups = self._groups.drain()

        collected = {key: staged[key].collect_contents() for key in _ordered(staged)}
        explicit = {c.name for contents in collected.values() for c in contents if c.name}
        names = _NameAllocator(
            self.config.name_prefix, reserved=explicit, taken=self._engine.has_compiled
        )

        compiled_templates: dict[K, dict[K, CompiledTemplate]] = {}
        try:
            for template_key, contents in collected.items():
                compiled_templates[template_key] = self._compile_contents(
                    template_key, contents, names
                )
        except TemplateBuildingError:
            for name in names.compiled:
                self._engine.discard(name)
            raise

        logger.info(
            "Built %d template(s) with %d compiled content(s) and %d group(s)",
            len(compiled_templates),
            names.issued,
            len(groups),
        )
        return LocalizedTemplates(self._engine, compiled_templates, groups)

    # -- internals -----------------------------------------------------------

    def _compile_contents(
        self,
        template_key: K,
        contents: Iterable[Content],
        names: _NameAllocator,
    ) -> dict[K, CompiledTemplate]:
        by_locale: dict[K, CompiledTemplate] = {}
        for content in contents:
            name = names.allocate(content.name)
            try:
                compiled = self._engine.compile(name, content.body)
            except CompileError as e:
                raise TemplateBuildingError(template_key, name, e.reason) from e
            names.compiled.append(name)
            for locale in content.locales:
                by_locale[locale] = compiled  # type: ignore[index]
        return by_locale

    def _ensure_open(self) -> None:
        if self._consumed:
            raise BuilderConsumedError("Builder was already used to build a catalog")


class _NameAllocator:
    """Build-scoped source of engine names.

    Generated names skip explicit names of the build and names the engine
    already holds from earlier builds.
    """

    def __init__(
        self, prefix: str, reserved: set[str], taken: Callable[[str], bool]
    ) -> None:
        self._prefix = prefix
        self._reserved = reserved
        self._taken = taken
        self._counter = 0
        self.issued = 0
        self.compiled: list[str] = []

    def allocate(self, explicit: str | None) -> str:
        self.issued += 1
        if explicit:
            return explicit
        while True:
            self._counter += 1
            name = f"{self._prefix}{self._counter}"
            if name not in self._reserved and not self._taken(name):
                return name


def _ordered(keys: Iterable[K]) -> Iterator[K]:
    """Sorted keys when they are comparable, insertion order otherwise."""
    keys = list(keys)
    try:
        return iter(sorted(keys))  # type: ignore[type-var]
    except TypeError:
        return iter(keys)
