from __future__ import annotations

from xml.etree.ElementTree import ParseError

import defusedxml
import defusedxml.ElementTree as DefusedET
import pytest
from pydantic import BaseModel, Field

from retryhttp.core.xml import TEXT_KEY, element_to_data, parse_xml


class Price(BaseModel):
    currency: str
    amount: float = Field(alias=TEXT_KEY)


#####################################
#     Tests for element_to_data     #
#####################################


def test_element_to_data_leaf() -> None:
    assert element_to_data(DefusedET.fromstring("<name>  Ada </name>")) == "Ada"


def test_element_to_data_empty_leaf() -> None:
    assert element_to_data(DefusedET.fromstring("<name/>")) == ""


def test_element_to_data_children() -> None:
    element = DefusedET.fromstring("<user><name>Ada</name><age>36</age></user>")
    assert element_to_data(element) == {"name": "Ada", "age": "36"}


def test_element_to_data_attributes() -> None:
    element = DefusedET.fromstring('<user id="7" active="true"/>')
    assert element_to_data(element) == {"id": "7", "active": "true"}


def test_element_to_data_repeated_tags() -> None:
    element = DefusedET.fromstring("<r><id>1</id><id>2</id><id>3</id></r>")
    assert element_to_data(element) == {"id": ["1", "2", "3"]}


def test_element_to_data_nested() -> None:
    element = DefusedET.fromstring("<r><user><name>Ada</name></user><total>1</total></r>")
    assert element_to_data(element) == {"user": {"name": "Ada"}, "total": "1"}


def test_element_to_data_strips_namespaces() -> None:
    element = DefusedET.fromstring('<r xmlns="urn:example"><value>1</value></r>')
    assert element_to_data(element) == {"value": "1"}


def test_element_to_data_attributes_keep_text() -> None:
    element = DefusedET.fromstring('<price currency="EUR"> 3.5 </price>')
    assert element_to_data(element) == {"currency": "EUR", TEXT_KEY: "3.5"}


def test_element_to_data_mixed_content_keeps_text() -> None:
    element = DefusedET.fromstring("<note>hello<b>world</b></note>")
    assert element_to_data(element) == {TEXT_KEY: "hello", "b": "world"}


def test_element_to_data_blank_text_between_children() -> None:
    element = DefusedET.fromstring('<user id="7">\n  <name>Ada</name>\n</user>')
    assert element_to_data(element) == {"id": "7", "name": "Ada"}


def test_element_to_data_text_validates_into_model() -> None:
    """Test the text of an element with attributes reaches a model field
    aliased to ``#text``."""
    element = DefusedET.fromstring('<price currency="EUR">3.5</price>')
    price = Price.model_validate(element_to_data(element))
    assert price.currency == "EUR"
    assert price.amount == 3.5


###############################
#     Tests for parse_xml     #
###############################


def test_parse_xml() -> None:
    assert parse_xml("<Item><a>1</a><b>x</b></Item>") == {"a": "1", "b": "x"}


def test_parse_xml_malformed() -> None:
    with pytest.raises(ParseError):
        parse_xml("<Item><a>1</Item>")


def test_parse_xml_rejects_entity_declarations() -> None:
    document = '<!DOCTYPE r [<!ENTITY e "boom">]><r>&e;</r>'
    with pytest.raises(defusedxml.DefusedXmlException):
        parse_xml(document)
