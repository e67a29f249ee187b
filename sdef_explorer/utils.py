"""Utility functions for loading sdef documents.

This module provides functions for loading sdef XML from files and URLs with
proper error handling and validation.
"""

from pathlib import Path
from urllib.parse import urlparse

import requests
from lxml import etree

from .errors import SDEFLoaderError, SDEFParsingError
from .logging_config import get_logger

logger = get_logger(__name__)


def create_xml_parser() -> etree.XMLParser:
    """XML parser that never touches the network or expands external entities."""
    return etree.XMLParser(
        resolve_entities=False,
        load_dtd=False,
        no_network=True,
        remove_comments=True,
    )


def parse_sdef_bytes(data: bytes, source: str = "<memory>") -> etree._ElementTree:
    """Parse raw sdef XML.

    Raises:
        SDEFParsingError: If the data is not well-formed XML.
    """
    try:
        root = etree.fromstring(data, parser=create_xml_parser())
    except etree.XMLSyntaxError as e:
        logger.error(f"Invalid XML in {source}: {e}")
        raise SDEFParsingError(f"invalid XML in {source}: {e}") from e
    return root.getroottree()


def load_sdef_from_file(file_path: str | Path) -> tuple[str, etree._ElementTree]:
    """Load an sdef document from a local file.

    Args:
        file_path: Path to the sdef file.

    Returns:
        Tuple of (source description, parsed XML tree).

    Raises:
        FileNotFoundError: If file doesn't exist.
        SDEFLoaderError: If file cannot be read.
        SDEFParsingError: If the file is not well-formed XML.
    """
    file_path = Path(file_path)
    logger.debug(f"Attempting to load sdef from file: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".sdef":
        logger.warning(f"File does not have .sdef extension: {file_path}")

    try:
        data = file_path.read_bytes()
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}", exc_info=True)
        raise SDEFLoaderError(f"Cannot read SDEF file {file_path}: {e}") from e

    tree = parse_sdef_bytes(data, str(file_path))
    logger.info(f"Successfully loaded sdef from {file_path}")
    return str(file_path), tree


def load_sdef_from_url(url: str, timeout: int = 30) -> tuple[str, etree._ElementTree]:
    """Load an sdef document from a URL.

    Args:
        url: URL to fetch the document from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, parsed XML tree).

    Raises:
        SDEFLoaderError: If URL is invalid or the request fails.
        SDEFParsingError: If the response is not well-formed XML.
    """
    logger.debug(f"Attempting to load sdef from URL: {url}")

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error(f"Invalid URL format: {url}")
        raise SDEFLoaderError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        logger.error(f"Request timeout for URL: {url}")
        raise SDEFLoaderError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error(f"Connection error for URL {url}: {e}")
        raise SDEFLoaderError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error(f"HTTP error {e.response.status_code} for URL: {url}")
        raise SDEFLoaderError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error for URL {url}: {e}", exc_info=True)
        raise SDEFLoaderError(f"Request error for URL {url}: {e}") from e

    content_type = response.headers.get("content-type", "").lower()
    if "xml" not in content_type and not url.endswith(".sdef"):
        logger.warning(f"URL {url} does not have an XML content type: {content_type}")

    tree = parse_sdef_bytes(response.content, url)
    logger.info(f"Successfully loaded sdef from {url}")
    return url, tree


def load_sdef(
    file_path: str | Path | None = None,
    url: str | None = None,
    timeout: int = 30,
) -> tuple[str, etree._ElementTree]:
    """Load an sdef document from either a file or URL.

    Args:
        file_path: Path to local sdef file (mutually exclusive with url).
        url: URL to fetch the document from (mutually exclusive with file_path).
        timeout: Request timeout in seconds (only used for URLs).

    Returns:
        Tuple of (source description, parsed XML tree).

    Raises:
        SDEFLoaderError: If neither or both parameters are provided, or loading fails.
        FileNotFoundError: If file doesn't exist.
    """
    if not file_path and not url:
        logger.error("Neither file_path nor url provided")
        raise SDEFLoaderError("Either file_path or url must be provided")

    if file_path and url:
        logger.error("Both file_path and url provided")
        raise SDEFLoaderError("Cannot specify both file_path and url")

    if file_path:
        return load_sdef_from_file(file_path)
    return load_sdef_from_url(url, timeout)
