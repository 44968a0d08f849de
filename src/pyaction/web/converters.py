# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Data format conversion for response output and request bodies.

JSON uses the stdlib ``json`` module with compact separators. XML uses
``xml.etree.ElementTree``; dicts, lists, Pydantic models, and elements are
supported.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from typing import Any

from pydantic import BaseModel

from pyaction.kernel.exceptions import UnserializableOutputError


def _to_json_data(data: Any) -> Any:
    """Normalize Pydantic models into JSON-serializable values."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, list | tuple):
        return [_to_json_data(item) for item in data]
    if isinstance(data, dict):
        return {key: _to_json_data(value) for key, value in data.items()}
    return data


def to_json(data: Any) -> str:
    """Serialize *data* as compact JSON."""
    try:
        return json.dumps(_to_json_data(data), separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise UnserializableOutputError(
            f"Cannot encode {type(data).__name__} as json: {exc}",
            code="UNSERIALIZABLE_OUTPUT",
            context={"type": type(data).__name__, "format": "json"},
        ) from exc


# ---------------------------------------------------------------------------
# XML data conversion utilities
# ---------------------------------------------------------------------------


def _build_element(parent: ET.Element, key: str, value: Any) -> None:
    """Recursively attach *value* to *parent* as a child element named *key*."""
    if isinstance(value, BaseModel):
        _build_element(parent, key, value.model_dump(mode="json"))
    elif isinstance(value, dict):
        child = ET.SubElement(parent, key)
        for k, v in value.items():
            _build_element(child, k, v)
    elif isinstance(value, list):
        for item in value:
            _build_element(parent, key, item)
    elif value is None:
        ET.SubElement(parent, key)
    else:
        child = ET.SubElement(parent, key)
        child.text = str(value)


def dict_to_xml(data: Any, root_tag: str = "response") -> str:
    """Convert a dict, list, BaseModel, element, or primitive to an XML string.

    - ``Element`` instances are serialized as they are.
    - ``BaseModel`` instances are converted via ``model_dump(mode="json")``.
    - ``list`` values produce repeated sibling elements named ``<item>``.
    - Primitives are rendered as text content of the root element.
    """
    if isinstance(data, ET.Element):
        return ET.tostring(data, encoding="unicode", xml_declaration=True)

    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")

    root = ET.Element(root_tag)

    if isinstance(data, dict):
        for key, value in data.items():
            _build_element(root, str(key), value)
    elif isinstance(data, list):
        for item in data:
            _build_element(root, "item", item)
    else:
        root.text = str(data)

    return ET.tostring(root, encoding="unicode", xml_declaration=True)


def _element_to_dict(element: ET.Element) -> dict[str, Any] | str | None:
    """Recursively convert an XML element to a dict, string, or None."""
    children = list(element)
    if not children:
        return element.text

    result: dict[str, Any] = {}
    for child in children:
        child_value = _element_to_dict(child)
        tag = child.tag
        if tag in result:
            existing = result[tag]
            if isinstance(existing, list):
                existing.append(child_value)
            else:
                result[tag] = [existing, child_value]
        else:
            result[tag] = child_value
    return result


def xml_to_dict(xml_string: str) -> dict[str, Any]:
    """Parse an XML string and return a dict representation.

    The root element becomes the single top-level key.  Repeated sibling
    elements with the same tag name are collected into a list.
    """
    root = ET.fromstring(xml_string)
    return {root.tag: _element_to_dict(root)}


# ---------------------------------------------------------------------------
# Output encoding
# ---------------------------------------------------------------------------

_JSON_TYPES = ("application/json", "text/json")
_XML_TYPES = ("application/xml", "text/xml")


def encode_data(data: Any, mime: str, root_tag: str = "response") -> str:
    """Encode non-string *data* for the *mime* type.

    JSON (``application/json``, ``*+json``) and XML (``application/xml``,
    ``text/xml``, ``*+xml``) are supported. Anything else raises
    :class:`UnserializableOutputError`.
    """
    base = mime.split(";", 1)[0].strip().lower()

    if base in _JSON_TYPES or base.endswith("+json"):
        return to_json(data)
    if base in _XML_TYPES or base.endswith("+xml"):
        return dict_to_xml(data, root_tag)

    raise UnserializableOutputError(
        f"Cannot encode {type(data).__name__} as {base}",
        code="UNSERIALIZABLE_OUTPUT",
        context={"type": type(data).__name__, "format": base},
    )
