from collections.abc import Callable
from pathlib import Path

import pytest
from lxml import etree

from sdef_explorer.includes import ResolutionContext, add_fallback_definitions
from sdef_explorer.utils import parse_sdef_bytes

STANDARD_INCLUDE = (
    '<xi:include xmlns:xi="http://www.w3.org/2003/XInclude" '
    'href="file://localhost/System/Library/ScriptingDefinitions/CocoaStandard.sdef" '
    'xpointer="xpointer(/dictionary/suite)"/>'
)

STANDARD_SDEF = """<?xml version="1.0" encoding="UTF-8"?>
<dictionary title="Standard Terminology">
  <suite name="Standard Suite" code="????" description="Common classes and commands for all applications.">
    <enumeration name="save options" code="savo">
      <enumerator name="yes" code="yes " description="Save the file."/>
      <enumerator name="no" code="no  " description="Do not save the file."/>
      <enumerator name="ask" code="ask " description="Ask the user whether or not to save the file."/>
    </enumeration>
    <class name="application" code="capp" description="The application's top-level scripting object.">
      <property name="name" code="pnam" type="text" access="r" description="The name of the application."/>
      <property name="frontmost" code="pisf" type="boolean" access="r"/>
      <element type="document"/>
      <element type="window"/>
      <responds-to command="quit"/>
    </class>
    <class name="document" code="docu" description="A document.">
      <property name="name" code="pnam" type="text" access="r"/>
      <property name="modified" code="imod" type="boolean" access="r"/>
      <responds-to command="close"/>
    </class>
    <class name="window" code="cwin" description="A window.">
      <property name="name" code="pnam" type="text" access="r"/>
      <property name="id" code="ID  " type="integer" access="r"/>
      <property name="bounds" code="pbnd" type="rectangle"/>
      <responds-to command="close"/>
    </class>
  </suite>
</dictionary>
"""


@pytest.fixture
def make_document() -> Callable[[str], etree._ElementTree]:
    """Wrap suite XML in a ``dictionary`` root and parse it."""

    def _make_document(inner_xml: str) -> etree._ElementTree:
        xml = f'<?xml version="1.0" encoding="UTF-8"?><dictionary title="Test">{inner_xml}</dictionary>'
        return parse_sdef_bytes(xml.encode("utf-8"))

    return _make_document


@pytest.fixture
def fallback_context() -> ResolutionContext:
    context = ResolutionContext()
    add_fallback_definitions(context)
    return context


@pytest.fixture
def missing_standard_path(tmp_path: Path) -> Path:
    return tmp_path / "missing" / "CocoaStandard.sdef"


@pytest.fixture
def standard_sdef_path(tmp_path: Path) -> Path:
    path = tmp_path / "CocoaStandard.sdef"
    path.write_text(STANDARD_SDEF, encoding="utf-8")
    return path


@pytest.fixture
def write_sdef(tmp_path: Path) -> Callable[..., Path]:
    def _write_sdef(inner_xml: str, name: str = "Test.sdef") -> Path:
        path = tmp_path / name
        path.write_text(
            f'<?xml version="1.0" encoding="UTF-8"?><dictionary title="Test">{inner_xml}</dictionary>',
            encoding="utf-8",
        )
        return path

    return _write_sdef


@pytest.fixture
def standard_include() -> str:
    return STANDARD_INCLUDE
