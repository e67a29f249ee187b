from collections.abc import Callable

import pytest
from lxml import etree

from sdef_explorer.errors import SDEFParsingError
from sdef_explorer.parser import SDEFParser, parse_sdef
from sdef_explorer.utils import parse_sdef_bytes

DocumentFactory = Callable[[str], etree._ElementTree]


def test_parse_suite_attributes(make_document: DocumentFactory) -> None:
    model = parse_sdef(
        make_document('<suite name="Text Suite" code="TEXT" description="Text things"/>')
    )

    assert len(model.suites) == 1
    suite = model.suites[0]
    assert suite.name == "Text Suite"
    assert suite.code == "TEXT"
    assert suite.description == "Text things"


def test_missing_attributes_resolve_to_empty_values(make_document: DocumentFactory) -> None:
    model = parse_sdef(make_document("<suite><class><property/></class></suite>"))

    cls = model.suites[0].classes[0]
    assert cls.name == ""
    assert cls.code == ""
    assert cls.plural_name is None
    assert cls.description is None

    prop = cls.properties[0]
    assert prop.name == ""
    assert prop.code == ""
    assert prop.access is None
    assert prop.type.base_type == "Any"
    assert prop.type.is_optional is True


def test_parse_class_members(make_document: DocumentFactory) -> None:
    model = parse_sdef(
        make_document(
            """
            <suite name="Browser Suite" code="brws">
              <class name="tab" plural="tabs" code="bTab" inherits="item" description="A tab.">
                <cocoa class="BrowserTab"/>
                <property name="URL" code="pURL" type="text">
                  <cocoa key="urlString"/>
                </property>
                <property name="index" code="pidx" type="integer" access="r"/>
                <element type="attachment">
                  <cocoa key="attachments"/>
                </element>
                <responds-to command="reload"/>
              </class>
            </suite>
            """
        )
    )

    cls = model.suites[0].classes[0]
    assert cls.name == "tab"
    assert cls.plural_name == "tabs"
    assert cls.inherits == "item"
    assert [prop.name for prop in cls.properties] == ["URL", "index"]
    assert cls.properties[0].cocoa_key == "urlString"
    assert not cls.properties[0].is_read_only
    assert cls.properties[1].is_read_only
    assert [element.type for element in cls.elements] == ["attachment"]
    assert cls.responds_to == ["reload"]


def test_responds_to_without_command_is_skipped(make_document: DocumentFactory) -> None:
    model = parse_sdef(
        make_document(
            """
            <suite name="S">
              <class name="note">
                <responds-to/>
                <responds-to command=""/>
                <responds-to command="show"/>
              </class>
            </suite>
            """
        )
    )

    assert model.suites[0].classes[0].responds_to == ["show"]


def test_nested_type_element_wins_over_attribute(make_document: DocumentFactory) -> None:
    model = parse_sdef(
        make_document(
            """
            <suite name="S">
              <class name="library">
                <property name="tracks" code="trks" type="text">
                  <type type="track" list="yes"/>
                </property>
                <property name="title" code="titl" type="text"/>
              </class>
            </suite>
            """
        )
    )

    tracks, title = model.suites[0].classes[0].properties
    assert tracks.type.base_type == "track"
    assert tracks.type.is_list is True
    assert tracks.type.is_optional is True
    assert title.type.base_type == "text"
    assert title.type.is_list is False


@pytest.mark.parametrize("include_hidden", [False, True])
def test_hidden_definitions_filtered_at_every_level(
    make_document: DocumentFactory, include_hidden: bool
) -> None:
    document = make_document(
        """
        <suite name="S">
          <class name="visible thing">
            <property name="shown" code="shwn" type="text"/>
            <property name="secret" code="scrt" type="text" hidden="yes"/>
          </class>
          <class name="hidden thing" hidden="yes"/>
          <enumeration name="modes" code="mods" hidden="yes">
            <enumerator name="fast" code="fast"/>
          </enumeration>
          <command name="reset" code="abcdrest" hidden="yes"/>
          <command name="reload" code="abcdrlod"/>
        </suite>
        """
    )

    model = SDEFParser(document, include_hidden=include_hidden).parse()
    suite = model.suites[0]

    if include_hidden:
        assert [cls.name for cls in suite.classes] == ["visible thing", "hidden thing"]
        assert suite.classes[0].property_names() == ["shown", "secret"]
        assert [enum.name for enum in suite.enumerations] == ["modes"]
        assert [cmd.name for cmd in suite.commands] == ["reset", "reload"]
        assert suite.classes[1].is_hidden
    else:
        assert [cls.name for cls in suite.classes] == ["visible thing"]
        assert suite.classes[0].property_names() == ["shown"]
        assert suite.enumerations == []
        assert [cmd.name for cmd in suite.commands] == ["reload"]


def test_hidden_requires_literal_yes(make_document: DocumentFactory) -> None:
    model = parse_sdef(
        make_document('<suite name="S"><class name="a" hidden="true"/><class name="b" hidden="YES"/></suite>')
    )

    assert [cls.name for cls in model.suites[0].classes] == ["a", "b"]


def test_record_type_becomes_class(make_document: DocumentFactory) -> None:
    model = parse_sdef(
        make_document(
            """
            <suite name="S">
              <class name="window" code="cwin"/>
              <record-type name="print settings" code="pset">
                <property name="copies" code="lwcp" type="integer"/>
              </record-type>
            </suite>
            """
        )
    )

    classes = model.suites[0].classes
    assert [cls.name for cls in classes] == ["window", "print settings"]
    record = classes[1]
    assert record.plural_name is None
    assert record.elements == []
    assert record.responds_to == []
    assert record.property_names() == ["copies"]


def test_class_extension_is_kept_separate(make_document: DocumentFactory) -> None:
    model = parse_sdef(
        make_document(
            """
            <suite name="S">
              <class-extension extends="application">
                <property name="sidebar" code="sdbr" type="boolean"/>
                <element type="tab"/>
                <responds-to command="open location"/>
              </class-extension>
            </suite>
            """
        )
    )

    suite = model.suites[0]
    assert suite.classes == []
    extension = suite.class_extensions[0]
    assert extension.extends == "application"
    assert [prop.name for prop in extension.properties] == ["sidebar"]
    assert [element.type for element in extension.elements] == ["tab"]
    assert extension.responds_to == ["open location"]
    assert model.has_class_extensions()


def test_parse_enumeration(make_document: DocumentFactory) -> None:
    model = parse_sdef(
        make_document(
            """
            <suite name="S">
              <enumeration name="save options" code="savo" description="Save choices">
                <enumerator name="yes" code="yes " description="Save the file.">
                  <cocoa string-value="YES"/>
                </enumerator>
                <enumerator name="no" code="no  "/>
              </enumeration>
            </suite>
            """
        )
    )

    enumeration = model.suites[0].enumerations[0]
    assert enumeration.name == "save options"
    assert enumeration.code == "savo"
    assert enumeration.description == "Save choices"
    assert [(e.name, e.code) for e in enumeration.enumerators] == [("yes", "yes "), ("no", "no  ")]
    assert enumeration.enumerators[0].string_value == "YES"
    assert enumeration.enumerators[1].description is None


def test_parse_command(make_document: DocumentFactory) -> None:
    model = parse_sdef(
        make_document(
            """
            <suite name="S">
              <command name="open location" code="GURLGURL" description="Open a URL.">
                <direct-parameter type="text" description="The URL."/>
                <parameter name="in window" code="inWn" type="window" optional="yes"/>
                <parameter name="activate" code="actv" type="boolean"/>
                <result type="tab"/>
              </command>
            </suite>
            """
        )
    )

    command = model.suites[0].commands[0]
    assert command.name == "open location"
    assert command.direct_parameter is not None
    assert command.direct_parameter.name is None
    assert command.direct_parameter.type.base_type == "text"
    assert [param.name for param in command.parameters] == ["in window", "activate"]
    assert command.parameters[0].is_optional is True
    assert command.parameters[1].is_optional is False
    assert command.result is not None
    assert command.result.base_type == "tab"
    assert command.method_name == "openLocation"
    assert command.objc_selector == "openLocation:inWindow:activate:"


def test_only_direct_commands_of_a_suite_are_parsed(make_document: DocumentFactory) -> None:
    model = parse_sdef(
        make_document(
            """
            <suite name="S">
              <command name="quit" code="aevtquit"/>
              <class name="app"><command name="nested" code="xxxxnest"/></class>
            </suite>
            """
        )
    )

    assert [cmd.name for cmd in model.suites[0].commands] == ["quit"]


def test_missing_root_raises() -> None:
    with pytest.raises(SDEFParsingError) as exc_info:
        SDEFParser(None).parse()

    assert str(exc_info.value) == "Invalid SDEF structure: no root element"


def test_malformed_xml_raises_parsing_error() -> None:
    with pytest.raises(SDEFParsingError):
        parse_sdef_bytes(b"<dictionary><suite></dictionary>")


def test_comments_are_ignored(make_document: DocumentFactory) -> None:
    model = parse_sdef(
        make_document('<suite name="S"><!-- a comment --><class name="thing"/></suite>')
    )

    assert [cls.name for cls in model.suites[0].classes] == ["thing"]
