"""
xml_utils.py - Element-tree helpers shared by the XML generators

All user text reaches the XML through these helpers. The tree serializer
escapes &, <, > and quotes; xml_text() additionally removes characters
that XML 1.0 cannot represent at all.
"""

import re
from typing import Dict, Optional

from lxml import etree

# Common Cartridge 1.1 manifest namespaces
NS = {
    "imscc": "http://www.imsglobal.org/xsd/imsccv1p1/imscp_v1p1",
    "lom": "http://ltsc.ieee.org/xsd/LOM",
    "lomimscc": "http://ltsc.ieee.org/xsd/imsccv1p1/LOM",
    "xsi": "http://www.w3.org/2001/XMLSchema-instance",
}

MANIFEST_SCHEMA_LOCATION = (
    "http://www.imsglobal.org/xsd/imsccv1p1/imscp_v1p1 "
    "http://www.imsglobal.org/xsd/imscc_v1p1.xsd"
)

# Canvas course export namespace
CANVAS_NS = "http://canvas.instructure.com/xsd/cccv1p0"
CANVAS_SCHEMA_LOCATION = f"{CANVAS_NS} http://canvas.instructure.com/xsd/cccv1p0.xsd"

XSI_SCHEMA_LOCATION = f"{{{NS['xsi']}}}schemaLocation"

_XML_ILLEGAL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def xml_text(value: Optional[object]) -> str:
    """Coerce a value to text that XML can carry."""
    if value is None:
        return ""
    return _XML_ILLEGAL_RE.sub("", str(value))


def qname(namespace: str, tag: str) -> str:
    return f"{{{namespace}}}{tag}"


def make_root(namespace: str, tag: str, nsmap: Dict[Optional[str], str], schema_location: str, **attribs) -> etree._Element:
    """Create a root element declaring nsmap and xsi:schemaLocation."""
    root = etree.Element(qname(namespace, tag), nsmap=nsmap)
    for key, value in attribs.items():
        root.set(key, xml_text(value))
    root.set(XSI_SCHEMA_LOCATION, schema_location)
    return root


def add_element(parent: etree._Element, tag: str, **attribs) -> etree._Element:
    """Add a child in the parent's namespace."""
    namespace = etree.QName(parent).namespace
    elem = etree.SubElement(parent, qname(namespace, tag) if namespace else tag)
    for key, value in attribs.items():
        elem.set(key, xml_text(value))
    return elem


def add_text_element(parent: etree._Element, tag: str, text: object, **attribs) -> etree._Element:
    """Add a text element to parent."""
    elem = add_element(parent, tag, **attribs)
    elem.text = xml_text(text)
    return elem


def xml_bool(value: bool) -> str:
    return "true" if value else "false"


def serialize_xml(root: etree._Element) -> str:
    """Return a pretty-printed XML document with declaration."""
    data = etree.tostring(root, pretty_print=True, xml_declaration=True, encoding="UTF-8")
    return data.decode("utf-8")
