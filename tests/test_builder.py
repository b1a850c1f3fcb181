"""Tests for LocalizedTemplatesBuilder staging, validation and build."""

from __future__ import annotations

import pytest

from localized_templates import (
    BuildConfig,
    BuilderConsumedError,
    Content,
    ContentNameClashError,
    GroupIntegrityError,
    GroupViolation,
    JinjaTemplateEngine,
    LocaleNotFoundError,
    LocalizedTemplates,
    LocalizedTemplatesBuilder,
    NameClash,
    StoreConsumedError,
    Template,
    TemplateAlreadyStagedError,
    TemplateBuildingError,
    TemplateGroupBuilder,
)

# -- staging -----------------------------------------------------------------


def test_add_template(builder: LocalizedTemplatesBuilder[str]):
    builder.add_template(
        "greet", Template.content_builder().add_content("foo", ["1", "2"]).build()
    )

    template = builder.get_template("greet")
    assert template is not None
    assert template.collect_contents() == [Content("foo", ["1", "2"])]


def test_get_and_remove_template():
    builder: LocalizedTemplatesBuilder[int] = LocalizedTemplatesBuilder()
    builder.add_template(1, Template())

    assert builder.get_template(1) is not None
    assert builder.get_template(2) is None
    assert builder.remove_template(2) is None
    assert builder.remove_template(1) is not None
    assert builder.template_keys() == []


def test_group_manipulation():
    builder: LocalizedTemplatesBuilder[int] = LocalizedTemplatesBuilder()
    builder.add_group(1, TemplateGroupBuilder().add_member(1, 1).build())

    assert builder.get_group(1) == {1: 1}
    assert builder.group_keys() == [1]

    builder.remove_group(1)
    assert builder.get_group(1) is None


def test_collected_template_cannot_be_staged(
    builder: LocalizedTemplatesBuilder[str], greet_template: Template
):
    greet_template.collect_contents()
    with pytest.raises(StoreConsumedError):
        builder.add_template("greet", greet_template)


def test_template_object_is_staged_under_one_key(
    builder: LocalizedTemplatesBuilder[str], greet_template: Template
):
    builder.add_template("a", greet_template)

    with pytest.raises(TemplateAlreadyStagedError) as exc_info:
        builder.add_template("b", greet_template)

    assert exc_info.value.staged_key == "a"
    assert builder.template_keys() == ["a"]
    # restaging under the same key is a plain replacement
    builder.add_template("a", greet_template)
    catalog = builder.build()
    assert catalog.render_template({"name": "Jan"}, "a", "cs") == "Ahoj Jan"


def test_template_can_move_to_another_key(
    builder: LocalizedTemplatesBuilder[str], greet_template: Template
):
    builder.add_template("a", greet_template)
    builder.remove_template("a")
    builder.add_template("b", greet_template)

    assert builder.build().template_keys() == ["b"]


# -- validation --------------------------------------------------------------


def test_check_group_configuration():
    builder: LocalizedTemplatesBuilder[int] = LocalizedTemplatesBuilder()
    builder.add_template(1, Template()).add_template(2, Template())
    builder.add_group(
        100,
        TemplateGroupBuilder()
        .add_member(10, 1)
        .add_member(20, 2)
        .add_member(30, 3)
        .build(),
    )

    assert builder.check_group_config_validity() == [GroupViolation(100, 30, 3)]


def test_check_group_configuration_reports_every_violation():
    builder: LocalizedTemplatesBuilder[str] = LocalizedTemplatesBuilder()
    builder.add_template("a", Template())
    builder.add_group("g1", {"x": "missing_1", "y": "a", "z": "missing_2"})
    builder.add_group("g2", {"w": "missing_1"})

    violations = builder.check_group_config_validity()

    assert set(violations) == {
        ("g1", "x", "missing_1"),
        ("g1", "z", "missing_2"),
        ("g2", "w", "missing_1"),
    }


def test_valid_configuration_has_no_violations(
    builder: LocalizedTemplatesBuilder[str], greet_template: Template
):
    builder.add_template("greet", greet_template).add_group("g", {"m": "greet"})
    assert builder.check_group_config_validity() == []


def test_build_rejects_missing_group_member(greet_template: Template):
    builder: LocalizedTemplatesBuilder[str] = LocalizedTemplatesBuilder()
    builder.add_template("tplA", greet_template)
    builder.add_group("group", {"A": "tplA", "B": "tplB"})

    with pytest.raises(GroupIntegrityError) as exc_info:
        builder.build()

    assert exc_info.value.violations == [("group", "B", "tplB")]
    # nothing was compiled, the builder is still usable
    assert not greet_template.closed
    builder.add_template("tplB", Template([Content("b", ["en"])]))
    assert isinstance(builder.build(), LocalizedTemplates)


def test_content_name_clash_across_templates():
    builder: LocalizedTemplatesBuilder[str] = LocalizedTemplatesBuilder()
    builder.add_template("a", Template([Content("A", ["en"], name="shared")]))
    builder.add_template("b", Template([Content("B", ["en"], name="shared")]))
    builder.add_template("c", Template([Content("C", ["en"], name="own")]))

    assert builder.check_content_name_uniqueness() == [NameClash("shared", ("a", "b"))]
    with pytest.raises(ContentNameClashError) as exc_info:
        builder.build()
    assert exc_info.value.clashes[0].name == "shared"


def test_names_of_contents_without_locales_do_not_clash(recording_engine):
    builder: LocalizedTemplatesBuilder[str] = LocalizedTemplatesBuilder(
        engine=recording_engine
    )
    builder.add_template("a", Template([Content("draft", [], name="x")]))
    builder.add_template("b", Template([Content("live", ["en"], name="x")]))

    assert builder.check_content_name_uniqueness() == []
    builder.build()
    assert recording_engine.compiled == {"x": "live"}


# -- build -------------------------------------------------------------------


def test_build_compiles_every_reachable_content(recording_engine):
    builder: LocalizedTemplatesBuilder[str] = LocalizedTemplatesBuilder(
        engine=recording_engine
    )
    builder.add_template(
        "b",
        Template.content_builder()
        .add_content("b en", ["en", "en-GB"])
        .add_content("b draft")
        .build(),
    )
    builder.add_template("a", Template([Content("a cs", ["cs"])]))

    catalog = builder.build()

    # sorted key order, one name per compiled content
    assert recording_engine.names == ["template#1", "template#2"]
    assert recording_engine.compiled["template#1"] == "a cs"
    assert catalog.locales("b") == frozenset({"en", "en-GB"})


def test_explicit_names_are_used_verbatim(recording_engine):
    builder: LocalizedTemplatesBuilder[str] = LocalizedTemplatesBuilder(
        engine=recording_engine, config=BuildConfig(name_prefix="tpl-")
    )
    builder.add_template("a", Template([Content("unnamed", ["en"])]))
    builder.add_template("b", Template([Content("named", ["en"], name="tpl-1")]))

    builder.build()

    # the generated name skips the explicit one
    assert recording_engine.compiled == {"tpl-2": "unnamed", "tpl-1": "named"}


def test_build_with_unsortable_keys(recording_engine):
    builder: LocalizedTemplatesBuilder[object] = LocalizedTemplatesBuilder(
        engine=recording_engine
    )
    builder.add_template(1, Template([Content("one", ["en"])]))
    builder.add_template("two", Template([Content("two", ["en"])]))

    catalog = builder.build()

    assert catalog.render_template({}, 1, "en") == "one"
    assert catalog.render_template({}, "two", "en") == "two"


def test_template_without_locales_is_known_but_unrenderable(recording_engine):
    builder: LocalizedTemplatesBuilder[str] = LocalizedTemplatesBuilder(
        engine=recording_engine
    )
    builder.add_template("empty", Template([Content("draft")]))

    catalog = builder.build()

    assert catalog.has_template("empty")
    with pytest.raises(LocaleNotFoundError):
        catalog.render_template({}, "empty", "en")


def test_compile_failure_aborts_build():
    builder: LocalizedTemplatesBuilder[str] = LocalizedTemplatesBuilder()
    builder.add_template("broken", Template([Content("{% if %}", ["en"])]))

    with pytest.raises(TemplateBuildingError) as exc_info:
        builder.build()

    assert exc_info.value.template_key == "broken"
    assert exc_info.value.__cause__ is not None


def test_builder_is_consumed_by_build(
    builder: LocalizedTemplatesBuilder[str], greet_template: Template
):
    builder.add_template("greet", greet_template)
    builder.build()

    assert greet_template.closed
    with pytest.raises(BuilderConsumedError):
        builder.add_template("other", Template())
    with pytest.raises(BuilderConsumedError):
        builder.get_template("greet")
    with pytest.raises(BuilderConsumedError):
        builder.build()


def test_groups_move_into_catalog(
    builder: LocalizedTemplatesBuilder[str], greet_template: Template
):
    catalog = (
        builder.add_template("greet", greet_template)
        .add_group("email", {"subject": "greet"})
        .build()
    )

    assert catalog.group_keys() == ["email"]
    assert dict(catalog.group_members("email")) == {"subject": "greet"}


# -- engine reuse ------------------------------------------------------------


def test_failed_build_releases_engine_names(recording_engine):
    first: LocalizedTemplatesBuilder[str] = LocalizedTemplatesBuilder(
        engine=recording_engine
    )
    first.add_template("a", Template([Content("fine", ["en"])]))
    first.add_template("b", Template([Content("{% if %}", ["en"])]))
    with pytest.raises(TemplateBuildingError):
        first.build()

    assert recording_engine.names == []

    second: LocalizedTemplatesBuilder[str] = LocalizedTemplatesBuilder(
        engine=recording_engine
    )
    second.add_template("a", Template([Content("Hi {name}", ["en"])]))
    catalog = second.build()

    assert catalog.render_template({"name": "Eva"}, "a", "en") == "Hi Eva"


def test_shared_engine_across_builders(recording_engine):
    catalogs = []
    for greeting in ("Hello {name}", "Ahoj {name}"):
        builder: LocalizedTemplatesBuilder[str] = LocalizedTemplatesBuilder(
            engine=recording_engine
        )
        builder.add_template("greet", Template([Content(greeting, ["en"])]))
        catalogs.append(builder.build())

    assert recording_engine.names == ["template#1", "template#2"]
    assert catalogs[0].render_template({"name": "Eva"}, "greet", "en") == "Hello Eva"
    assert catalogs[1].render_template({"name": "Eva"}, "greet", "en") == "Ahoj Eva"


def test_shared_jinja_engine_after_failed_build():
    engine = JinjaTemplateEngine()
    first: LocalizedTemplatesBuilder[str] = LocalizedTemplatesBuilder(engine=engine)
    first.add_template("a", Template([Content("Hello {{ name }}", ["en"])]))
    first.add_template("b", Template([Content("{% if %}", ["en"])]))
    with pytest.raises(TemplateBuildingError):
        first.build()
    assert not engine.has_compiled("template#1")

    second: LocalizedTemplatesBuilder[str] = LocalizedTemplatesBuilder(engine=engine)
    second.add_template("a", Template([Content("Hi {{ name }}", ["en"])]))

    assert second.build().render_template({"name": "Eva"}, "a", "en") == "Hi Eva"
