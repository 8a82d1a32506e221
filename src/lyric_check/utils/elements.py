#!/usr/bin/env python3

from lxml import etree

import logging
from typing import Iterator, Optional, Union

from ..errors import ScoreFormatError

logger = logging.getLogger(__name__)


def parse_document(xml: Union[str, bytes]) -> etree._Element:
    """
    Parses a MusicXML document without resolving entities or fetching DTDs.

    Args:
        xml (Union[str, bytes]): The document text.

    Returns:
        etree._Element: The root element.
    """
    if isinstance(xml, str):
        xml = xml.encode("utf-8")
    parser = etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
        remove_comments=True,
        remove_pis=True,
        huge_tree=True,
    )
    try:
        return etree.fromstring(xml, parser)
    except etree.XMLSyntaxError as error:
        raise ScoreFormatError(f"Reading MusicXML: {error}") from error


def iter_children(node: etree._Element) -> Iterator[etree._Element]:
    """Yields element children only, skipping comments and entities."""
    for child in node:
        if isinstance(child.tag, str):
            yield child


def child(node: etree._Element, name: str) -> etree._Element:
    element: Optional[etree._Element] = node.find(name)
    if element is None:
        raise ScoreFormatError(f"Expecting child <{name}> in <{node.tag}>")
    return element


def child_text(node: etree._Element, name: str) -> str:
    return (child(node, name).text or "").strip()


def attribute(node: etree._Element, name: str) -> str:
    value: Optional[str] = node.get(name)
    if value is None:
        raise ScoreFormatError(f"Expecting attribute `{name}` in <{node.tag}>")
    return value.strip()


def parse_int(value: str, what: str) -> int:
    """
    Parses a non-negative integer from element or attribute text.

    Args:
        value (str): The literal text.
        what (str): Where the text came from, e.g. "<note><duration>".

    Returns:
        int: The parsed value.
    """
    try:
        number: int = int(value)
    except ValueError:
        raise ScoreFormatError(f"Unexpected {what} `{value}`") from None
    if number < 0:
        raise ScoreFormatError(f"Unexpected {what} `{value}`")
    return number
