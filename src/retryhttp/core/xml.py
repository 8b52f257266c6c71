r"""Safe XML parsing into plain Python data.

The document is mapped so it can be validated against a model the same
way a JSON object would be:

- the root element stands for the decoded value itself;
- attributes and child elements become keys;
- repeated child tags become lists;
- elements without attributes or children become their text;
- the non-blank text of any other element is kept under the ``#text``
  key.
"""

from __future__ import annotations

__all__ = ["TEXT_KEY", "element_to_data", "parse_xml"]

from typing import TYPE_CHECKING, Any

import defusedxml.ElementTree as DefusedET

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element

TEXT_KEY = "#text"


def _local_name(tag: str) -> str:
    # "{namespace}name" -> "name"
    return tag.rsplit("}", 1)[-1]


def element_to_data(element: Element) -> Any:
    """Convert an element to plain Python data.

    Args:
        element: The element to convert.

    Returns:
        The element text for a leaf element, otherwise a dict.

    Example:
        ```pycon
        >>> import defusedxml.ElementTree as DefusedET
        >>> from retryhttp.core.xml import element_to_data
        >>> element_to_data(DefusedET.fromstring('<user id="7"><name>Ada</name></user>'))
        {'id': '7', 'name': 'Ada'}
        >>> element_to_data(DefusedET.fromstring("<ids><id>1</id><id>2</id></ids>"))
        {'id': ['1', '2']}
        >>> element_to_data(DefusedET.fromstring('<price currency="EUR">3</price>'))
        {'currency': 'EUR', '#text': '3'}

        ```
    """
    children = list(element)
    if not children and not element.attrib:
        return (element.text or "").strip()

    data: dict[str, Any] = {_local_name(key): value for key, value in element.attrib.items()}
    text = (element.text or "").strip()
    if text:
        data[TEXT_KEY] = text
    for child in children:
        key = _local_name(child.tag)
        value = element_to_data(child)
        if key not in data:
            data[key] = value
        elif isinstance(data[key], list):
            data[key].append(value)
        else:
            data[key] = [data[key], value]
    return data


def parse_xml(text: str) -> Any:
    """Parse an XML document into plain Python data.

    Entity expansion and external references are refused.

    Args:
        text: The XML document.

    Returns:
        The data of the root element, see ``element_to_data``.

    Raises:
        xml.etree.ElementTree.ParseError: If the document is malformed.
        defusedxml.DefusedXmlException: If the document uses a forbidden
            construct.
    """
    return element_to_data(DefusedET.fromstring(text))
