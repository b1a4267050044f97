"""
XML helpers shared by the backup descriptor readers
"""

import xml.etree.ElementTree as ET
from typing import Optional

from ..errors import MalformedDescriptorError
from ..models.archive_tree import ArchiveFile

# Moodle writes NULL columns as this marker
NULL_MARKER = '$@NULL@$'


def parse_xml(archive_file: ArchiveFile) -> ET.Element:
    """Parse an archive file and return its root element"""
    try:
        return ET.fromstring(archive_file.content)
    except ET.ParseError as e:
        raise MalformedDescriptorError(f"Invalid XML: {e}", archive_file.path) from e


def find_element(elem: ET.Element, tag: str) -> Optional[ET.Element]:
    """First element named `tag` in document order, `elem` included"""
    return next(elem.iter(tag), None)


def get_text(elem: ET.Element, tag: str, default: str = '') -> str:
    """Safely get text of the first `tag` element"""
    child = find_element(elem, tag)
    if child is None or not child.text or child.text == NULL_MARKER:
        return default
    return child.text


def require_text(elem: ET.Element, tag: str, path: str) -> str:
    """Text of the first `tag` element, which must exist"""
    if find_element(elem, tag) is None:
        raise MalformedDescriptorError(f"Missing <{tag}> element", path)
    return get_text(elem, tag)


def require_int(text: Optional[str], what: str, path: str) -> int:
    try:
        return int(text.strip())
    except (AttributeError, ValueError):
        raise MalformedDescriptorError(f"Invalid {what}: {text!r}", path) from None
