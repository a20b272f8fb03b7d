import dataclasses
import datetime
import decimal
import enum
import json
import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping

import marshmallow
import pydantic

from .contenttype import ContentType, request_type
from .errors import UnableToParseContentType
from .models import QueryDict
from .statics import DEFAULT_ENCODING

logger = logging.getLogger(__name__)

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
}

XML_ROOT = "response"
XML_ITEM = "item"

# Letters or "_" first, then letters, digits, "_", "-" or ".".
_XML_NAME_RE = re.compile(r"[^\W\d][\w.\-]*")


def to_primitive(value):
    """Reduces models and dataclasses to plain mappings."""
    if isinstance(value, pydantic.BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


def _json_default(value):
    value = to_primitive(value)
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, decimal.Decimal):
        return str(value)
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_json(value):
    """JSON with ``<``, ``>`` and ``&`` escaped, newline terminated.

    ``NaN`` and the infinities have no JSON form and raise ``ValueError``.
    """
    content = json.dumps(value, default=_json_default, allow_nan=False)
    for char, escaped in _HTML_ESCAPES.items():
        content = content.replace(char, escaped)
    return (content + "\n").encode(DEFAULT_ENCODING)


def _xml_text(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, enum.Enum):
        return str(value.value)
    return str(value)


def _xml_name(name):
    if not _XML_NAME_RE.fullmatch(name):
        raise ValueError(f"Invalid XML name: {name!r}")
    return name


def _to_element(tag, value):
    element = ET.Element(_xml_name(tag))
    value = to_primitive(value)

    if isinstance(value, Mapping):
        for key, item in value.items():
            key = str(key)
            if key.startswith("@"):
                element.set(_xml_name(key[1:]), _xml_text(item))
            elif isinstance(item, (list, tuple)):
                for child in item:
                    element.append(_to_element(key, child))
            else:
                element.append(_to_element(key, item))
    elif isinstance(value, (list, tuple, set, frozenset)):
        for child in value:
            element.append(_to_element(XML_ITEM, child))
    elif value is not None:
        element.text = _xml_text(value)

    return element


def encode_xml(value):
    """XML document without declaration.

    The root element is named after the value's class for models and
    dataclasses, ``response`` otherwise.
    """
    tag = XML_ROOT
    if isinstance(value, pydantic.BaseModel) or (
        dataclasses.is_dataclass(value) and not isinstance(value, type)
    ):
        tag = type(value).__name__
    return ET.tostring(_to_element(tag, value), encoding="unicode").encode(
        DEFAULT_ENCODING
    )


def get_encoders():
    return {
        ContentType.JSON: encode_json,
        ContentType.XML: encode_xml,
    }


def _from_element(element):
    children = list(element)
    if not children and not element.attrib:
        return element.text or ""

    result = {f"@{key}": value for key, value in element.attrib.items()}
    for child in children:
        value = _from_element(child)
        if child.tag not in result:
            result[child.tag] = value
        elif isinstance(result[child.tag], list):
            result[child.tag].append(value)
        else:
            result[child.tag] = [result[child.tag], value]

    text = (element.text or "").strip()
    if text:
        result["#text"] = text
    return result


async def format_json(r):
    return json.loads(await r.content)


async def format_xml(r):
    """Nested dictionaries for the children of the root element.

    Attributes are prefixed with ``@``; repeated children become lists.
    """
    return _from_element(ET.fromstring(await r.content))


async def format_form(r):
    return QueryDict(await r.text)


async def format_none(r):
    # Reserved; the body is still read so the connection stays reusable.
    await r.content
    return None


def get_decoders():
    return {
        ContentType.JSON: format_json,
        ContentType.XML: format_xml,
        ContentType.FORM: format_form,
        ContentType.PLAIN_TEXT: format_none,
        ContentType.HTML: format_none,
        ContentType.EVENT_STREAM: format_none,
    }


def bind(data, target):
    """Builds ``target`` from decoded ``data``.

    ``target`` may be a pydantic model, a marshmallow schema (class or
    instance) or any callable accepting the fields as keyword arguments.
    """
    if target is None or data is None:
        return data

    if isinstance(data, QueryDict):
        data = data.to_dict()

    if isinstance(target, type) and issubclass(target, pydantic.BaseModel):
        return target.model_validate(data)

    if isinstance(target, type) and issubclass(target, marshmallow.Schema):
        target = target()
    if isinstance(target, marshmallow.Schema):
        return target.load(data)

    if callable(target):
        if isinstance(data, Mapping):
            return target(**data)
        return target(data)

    raise TypeError(f"Invalid decode target: {target!r}")


async def decode(req, target=None, decoders=None):
    """Decodes the body of ``req`` according to its ``Content-Type``.

    Must be awaited. Codec errors (``json.JSONDecodeError``,
    ``xml.etree.ElementTree.ParseError``) propagate unchanged; a content type
    without decoder raises :class:`~httprender.errors.UnableToParseContentType`.

    :param target: Optional pydantic model, marshmallow schema or callable the
                   decoded data is bound to.
    """
    if decoders is None:
        decoders = get_decoders()

    content_type = request_type(req)
    try:
        formatter = decoders[content_type]
    except KeyError:
        # Drain the body anyway.
        await req.content
        raise UnableToParseContentType(
            f"unable to automatically decode the request content type {req.mimetype!r}"
        ) from None

    logger.debug("Decoding %s request body", content_type.value)
    return bind(await formatter(req), target)
