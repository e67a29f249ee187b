from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests
from lxml import etree

from sdef_explorer.errors import SDEFLoaderError, SDEFParsingError
from sdef_explorer.pipeline import load_model
from sdef_explorer.utils import load_sdef, load_sdef_from_file, load_sdef_from_url

SIMPLE_SDEF = b'<dictionary><suite name="S"><class name="note"/></suite></dictionary>'


def _response(content: bytes = SIMPLE_SDEF, content_type: str = "application/xml") -> MagicMock:
    response = MagicMock()
    response.content = content
    response.headers = {"content-type": content_type}
    response.raise_for_status.return_value = None
    return response


def test_load_from_file(write_sdef: Callable[..., Path]) -> None:
    path = write_sdef('<suite name="S"/>')

    source, tree = load_sdef_from_file(path)

    assert source == str(path)
    assert tree.getroot().tag == "dictionary"


def test_load_from_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_sdef_from_file(tmp_path / "Missing.sdef")


def test_load_from_file_with_bad_xml(tmp_path: Path) -> None:
    path = tmp_path / "Broken.sdef"
    path.write_text("<dictionary>", encoding="utf-8")

    with pytest.raises(SDEFParsingError):
        load_sdef_from_file(path)


def test_entities_are_not_expanded(tmp_path: Path) -> None:
    secret = tmp_path / "secret.txt"
    secret.write_text("top secret", encoding="utf-8")
    path = tmp_path / "Entity.sdef"
    path.write_text(
        f'<?xml version="1.0"?><!DOCTYPE d [<!ENTITY x SYSTEM "file://{secret}">]>'
        '<dictionary><suite name="S"><documentation>&x;</documentation></suite></dictionary>',
        encoding="utf-8",
    )

    _, tree = load_sdef_from_file(path)

    assert b"top secret" not in etree.tostring(tree)


@patch("sdef_explorer.utils.requests.get")
def test_load_from_url(mock_get: MagicMock) -> None:
    mock_get.return_value = _response()

    source, tree = load_sdef_from_url("https://example.com/Notes.sdef", timeout=5)

    assert source == "https://example.com/Notes.sdef"
    assert tree.getroot().find("suite").get("name") == "S"
    mock_get.assert_called_once_with("https://example.com/Notes.sdef", timeout=5)


@pytest.mark.parametrize(
    ("error", "message"),
    [
        (requests.exceptions.Timeout(), "timeout"),
        (requests.exceptions.ConnectionError(), "Connection error"),
        (requests.exceptions.RequestException("boom"), "Request error"),
    ],
)
@patch("sdef_explorer.utils.requests.get")
def test_url_request_failures(mock_get: MagicMock, error: Exception, message: str) -> None:
    mock_get.side_effect = error

    with pytest.raises(SDEFLoaderError, match=message):
        load_sdef_from_url("https://example.com/Notes.sdef")


@patch("sdef_explorer.utils.requests.get")
def test_url_http_error(mock_get: MagicMock) -> None:
    response = _response()
    error_response = MagicMock(status_code=404)
    response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=error_response)
    mock_get.return_value = response

    with pytest.raises(SDEFLoaderError, match="HTTP error 404"):
        load_sdef_from_url("https://example.com/Notes.sdef")


def test_invalid_url_rejected() -> None:
    with pytest.raises(SDEFLoaderError, match="Invalid URL"):
        load_sdef_from_url("not a url")


def test_load_sdef_requires_exactly_one_source(tmp_path: Path) -> None:
    with pytest.raises(SDEFLoaderError):
        load_sdef()
    with pytest.raises(SDEFLoaderError):
        load_sdef(file_path=tmp_path / "a.sdef", url="https://example.com/a.sdef")


@patch("sdef_explorer.utils.requests.get")
def test_load_model_from_url(mock_get: MagicMock, missing_standard_path: Path) -> None:
    mock_get.return_value = _response()

    model = load_model(
        url="https://example.com/Notes.sdef", standard_definitions_path=missing_standard_path
    )

    assert [cls.name for cls in model.all_classes] == ["note"]
