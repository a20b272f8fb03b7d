import dataclasses
import json
import xml.etree.ElementTree as ET

import marshmallow
import pydantic
import pytest

from httprender import QueryDict, UnableToParseContentType, decode


class User(pydantic.BaseModel):
    name: str
    age: int = 0


class UserSchema(marshmallow.Schema):
    name = marshmallow.fields.Str(required=True)


@dataclasses.dataclass
class Pet:
    name: str


def test_decode_json(req, run):
    r = req(headers={"Content-Type": "application/json"}, body=b'{"hello": "sam"}')

    assert run(decode(r)) == {"hello": "sam"}


def test_decode_json_with_charset(req, run):
    r = req(
        headers={"Content-Type": "application/json; charset=utf-8"},
        body=b"[1, 2, 3]",
    )

    assert run(decode(r)) == [1, 2, 3]


def test_decode_malformed_json(req, run):
    r = req(headers={"Content-Type": "application/json"}, body=b'{"hello": ')

    with pytest.raises(json.JSONDecodeError):
        run(decode(r))


def test_decode_xml(req, run):
    body = b"""<?xml version="1.0" encoding="UTF-8"?>
    <user id="7"><name>Ada</name><tag>a</tag><tag>b</tag></user>"""
    r = req(headers={"Content-Type": "application/xml"}, body=body)

    assert run(decode(r)) == {"@id": "7", "name": "Ada", "tag": ["a", "b"]}


def test_decode_malformed_xml(req, run):
    r = req(headers={"Content-Type": "text/xml"}, body=b"<user><name>")

    with pytest.raises(ET.ParseError):
        run(decode(r))


def test_decode_form(req, run):
    r = req(
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        body=b"name=Ada&tag=a&tag=b",
    )

    data = run(decode(r))

    assert isinstance(data, QueryDict)
    assert data["name"] == "Ada"
    assert data.get_list("tag") == ["a", "b"]


@pytest.mark.parametrize(
    "mimetype",
    ["text/plain", "text/html", "text/event-stream"],
)
def test_decode_reserved_types(req, run, mimetype):
    r = req(headers={"Content-Type": mimetype}, body=b"ignored")

    assert run(decode(r)) is None


@pytest.mark.parametrize(
    "headers",
    [
        pytest.param({}, id="missing"),
        pytest.param({"Content-Type": "application/x-yaml"}, id="unknown"),
    ],
)
def test_decode_unknown_content_type(req, run, headers):
    r = req(headers=headers, body=b"hello: sam")

    with pytest.raises(UnableToParseContentType):
        run(decode(r))


def test_decode_drains_body(req, run):
    r = req(headers={"Content-Type": "application/x-yaml"}, body=b"hello: sam")

    async def go():
        with pytest.raises(UnableToParseContentType):
            await decode(r)
        return r._content

    assert run(go()) == b"hello: sam"


def test_decode_into_pydantic_model(req, run):
    r = req(headers={"Content-Type": "application/json"}, body=b'{"name": "Ada", "age": 36}')

    assert run(decode(r, User)) == User(name="Ada", age=36)


def test_decode_into_pydantic_model_invalid(req, run):
    r = req(headers={"Content-Type": "application/json"}, body=b'{"age": 36}')

    with pytest.raises(pydantic.ValidationError):
        run(decode(r, User))


@pytest.mark.parametrize(
    "schema",
    [
        pytest.param(UserSchema, id="schema class"),
        pytest.param(UserSchema(), id="schema instance"),
    ],
)
def test_decode_form_into_marshmallow_schema(req, run, schema):
    r = req(
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        body=b"name=Ada",
    )

    assert run(decode(r, schema)) == {"name": "Ada"}


def test_decode_into_dataclass(req, run):
    r = req(headers={"Content-Type": "application/json"}, body=b'{"name": "Rex"}')

    assert run(decode(r, Pet)) == Pet(name="Rex")


def test_decode_form_with_charset(req, run):
    r = req(
        headers={"Content-Type": "application/x-www-form-urlencoded; charset=latin-1"},
        body="name=José".encode("latin-1"),
    )

    assert run(decode(r))["name"] == "José"


def test_decode_form_utf8(req, run):
    r = req(
        headers={"Content-Type": "application/x-www-form-urlencoded; charset=utf-8"},
        body="city=Zürich".encode("utf-8"),
    )

    assert run(decode(r))["city"] == "Zürich"
