import pytest

from sdef_explorer.includes import ResolutionContext
from sdef_explorer.merge import (
    MergeResolver,
    class_from_extension,
    extend_class,
    merge_model,
    merge_with_standard,
    union_elements,
    union_properties,
)
from sdef_explorer.model import (
    ClassExtension,
    Element,
    Enumeration,
    Enumerator,
    Model,
    Property,
    PropertyType,
    SdefClass,
    Suite,
)


def _prop(name: str, description: str | None = None, access: str | None = None) -> Property:
    return Property(
        name=name,
        code=name[:4].ljust(4),
        type=PropertyType(base_type="text"),
        description=description,
        access=access,
    )


def _class_names(model: Model) -> list[str]:
    return [cls.name for cls in model.all_classes]


def test_union_properties_appends_only_new_names() -> None:
    merged = union_properties([_prop("a"), _prop("b")], [_prop("b", "other"), _prop("c")])

    assert [prop.name for prop in merged] == ["a", "b", "c"]
    assert merged[1].description is None


def test_union_elements_keys_on_type() -> None:
    merged = union_elements([Element("tab")], [Element("tab", "tabs"), Element("window")])

    assert [element.type for element in merged] == ["tab", "window"]
    assert merged[0].cocoa_key is None


def test_disjoint_union_counts() -> None:
    merged = union_properties([_prop("a"), _prop("b")], [_prop("c"), _prop("d"), _prop("e")])

    assert len(merged) == 5


def test_merge_with_standard_standard_properties_win() -> None:
    standard = SdefClass(
        name="window",
        code="cwin",
        description="A window.",
        properties=[_prop("name", "standard"), _prop("bounds")],
        responds_to=["close"],
    )
    cls = SdefClass(
        name="window",
        properties=[_prop("name", "custom"), _prop("zoomed")],
        responds_to=["close", "print"],
    )

    merged = merge_with_standard(cls, standard)

    assert merged.property_names() == ["name", "bounds", "zoomed"]
    assert merged.properties[0].description == "standard"
    assert merged.code == "cwin"
    assert merged.description == "A window."
    assert merged.responds_to == ["close", "print"]


def test_extend_class_existing_properties_win() -> None:
    cls = SdefClass(name="document", properties=[_prop("name", "original")])
    extension = ClassExtension(
        extends="document",
        properties=[_prop("name", "extension"), _prop("path", "The path.")],
    )

    merged = extend_class(cls, extension)

    assert merged.property_names() == ["name", "path"]
    assert merged.properties[0].description == "original"
    assert merged.description == "extension"


def test_class_from_extension_describes_target() -> None:
    cls = class_from_extension(ClassExtension(extends="tab", properties=[_prop("URL")]))

    assert cls.name == "tab"
    assert cls.description == "Extended tab"
    assert cls.code == ""
    assert cls.property_names() == ["URL"]


def test_standard_enumerations_added_to_every_suite(fallback_context: ResolutionContext) -> None:
    model = Model(
        suites=[
            Suite(name="One"),
            Suite(
                name="Two",
                enumerations=[Enumeration(name="save options", code="cust", enumerators=[])],
            ),
        ]
    )

    merged = merge_model(model, fallback_context)

    one, two = merged.suites
    assert {enum.name for enum in one.enumerations} == {"save options", "printing error handling"}
    assert [enum.code for enum in two.enumerations if enum.name == "save options"] == ["cust"]
    assert len(two.enumerations) == 2


def test_extension_of_suite_class() -> None:
    model = Model(
        suites=[
            Suite(
                name="Custom",
                classes=[SdefClass(name="note", properties=[_prop("body")])],
                class_extensions=[
                    ClassExtension(extends="Note", properties=[_prop("color")])
                ],
            )
        ]
    )

    merged = merge_model(model, ResolutionContext())

    assert _class_names(merged) == ["note"]
    assert merged.all_classes[0].property_names() == ["body", "color"]
    assert not merged.has_class_extensions()


def test_extension_of_standard_class(fallback_context: ResolutionContext) -> None:
    model = Model(
        suites=[
            Suite(
                name="Custom",
                class_extensions=[
                    ClassExtension(extends="document", properties=[_prop("path", "The path.")])
                ],
            )
        ]
    )

    merged = merge_model(model, fallback_context)

    documents = [cls for cls in merged.all_classes if cls.name == "document"]
    assert len(documents) == 1
    document = documents[0]
    assert document.property_names() == ["name", "modified", "file", "path"]
    assert document.code == "docu"
    assert fallback_context.standard_classes["document"].property_names() == [
        "name",
        "modified",
        "file",
    ]


def test_extension_of_unknown_class_synthesizes_it() -> None:
    model = Model(
        suites=[
            Suite(
                name="Custom",
                class_extensions=[ClassExtension(extends="tab", elements=[Element("frame")])],
            )
        ]
    )

    merged = merge_model(model, ResolutionContext())

    assert _class_names(merged) == ["tab"]
    assert merged.all_classes[0].description == "Extended tab"


def test_residual_standard_classes_added(fallback_context: ResolutionContext) -> None:
    model = Model(
        suites=[
            Suite(
                name="Custom",
                classes=[SdefClass(name="window", properties=[_prop("tabs")])],
                class_extensions=[ClassExtension(extends="application")],
            )
        ]
    )

    merged = merge_model(model, fallback_context)

    assert sorted(_class_names(merged)) == ["application", "document", "window"]
    window = merged.all_classes[0]
    assert window.property_names()[-1] == "tabs"
    assert "bounds" in window.property_names()


def test_residual_classes_skip_names_defined_in_other_suites(
    fallback_context: ResolutionContext,
) -> None:
    model = Model(
        suites=[
            Suite(name="First"),
            Suite(name="Second", classes=[SdefClass(name="document")]),
        ]
    )

    merged = merge_model(model, fallback_context)

    first, second = merged.suites
    assert sorted(cls.name for cls in first.classes) == ["application", "window"]
    assert sorted(cls.name for cls in second.classes) == ["application", "document", "window"]


def test_standard_suite_application_dropped_when_defined_elsewhere() -> None:
    model = Model(
        suites=[
            Suite(
                name="Standard Suite",
                classes=[SdefClass(name="application", code="capp"), SdefClass(name="window")],
            ),
            Suite(name="Browser Suite", classes=[SdefClass(name="application", code="capp")]),
        ]
    )

    merged = merge_model(model, ResolutionContext())

    standard, browser = merged.suites
    assert [cls.name for cls in standard.classes] == ["window"]
    assert [cls.name for cls in browser.classes] == ["application"]


def test_standard_suite_application_kept_when_alone() -> None:
    model = Model(
        suites=[Suite(name="Standard Suite", classes=[SdefClass(name="application")])]
    )

    merged = merge_model(model, ResolutionContext())

    assert _class_names(merged) == ["application"]


def test_merge_does_not_mutate_input(fallback_context: ResolutionContext) -> None:
    suite = Suite(
        name="Custom",
        classes=[SdefClass(name="window", properties=[_prop("tabs")])],
        class_extensions=[ClassExtension(extends="window", properties=[_prop("extra")])],
    )
    model = Model(suites=[suite])

    merge_model(model, fallback_context)

    assert suite.classes[0].property_names() == ["tabs"]
    assert len(suite.class_extensions) == 1


@pytest.mark.parametrize("use_fallback", [False, True])
def test_merge_is_idempotent(fallback_context: ResolutionContext, use_fallback: bool) -> None:
    context = fallback_context if use_fallback else ResolutionContext()
    model = Model(
        suites=[
            Suite(
                name="Custom",
                classes=[
                    SdefClass(
                        name="window",
                        properties=[_prop("tabs")],
                        responds_to=["close", "close"],
                    )
                ],
                enumerations=[
                    Enumeration(
                        name="modes", code="mods", enumerators=[Enumerator("fast", "fast")]
                    )
                ],
                class_extensions=[
                    ClassExtension(extends="document", properties=[_prop("path")]),
                    ClassExtension(extends="tab", properties=[_prop("URL")]),
                ],
            ),
            Suite(name="Other", classes=[SdefClass(name="note")]),
        ]
    )

    once = merge_model(model, context)
    twice = merge_model(once, context)

    assert twice.suites == once.suites


def test_residual_standard_class_commands_deduplicated() -> None:
    context = ResolutionContext(
        standard_classes={"window": SdefClass(name="window", responds_to=["close", "close", "print"])}
    )
    model = Model(suites=[Suite(name="Custom")])

    once = merge_model(model, context)
    twice = merge_model(once, context)

    assert once.all_classes[0].responds_to == ["close", "print"]
    assert twice.suites == once.suites
    assert context.standard_classes["window"].responds_to == ["close", "close", "print"]


def test_extension_of_standard_class_keeps_standard_description() -> None:
    context = ResolutionContext(standard_classes={"document": SdefClass(name="document")})
    model = Model(
        suites=[
            Suite(
                name="Custom",
                class_extensions=[
                    ClassExtension(extends="document", properties=[_prop("path", "The path.")])
                ],
            )
        ]
    )

    merged = merge_model(model, context)

    assert merged.all_classes[0].description is None
    assert merged.all_classes[0].property_names() == ["path"]


def test_merge_resolver_records_fallback_flag(fallback_context: ResolutionContext) -> None:
    merged = merge_model(Model(suites=[Suite(name="S")]), fallback_context)

    assert merged.uses_fallback_definitions is True
    assert set(merged.standard_classes) == {"window", "document", "application"}
    assert MergeResolver(fallback_context).context is fallback_context
