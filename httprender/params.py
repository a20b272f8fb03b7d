"""
Response parameters accepted by every writer of :class:`~httprender.Renderer`.

Parameters may be given in any order and combination::

    renderer.blob(resp, data, Status(201), Header("X-Foo", "bar"))
    renderer.blob(resp, data, Headers({"X-Foo": "bar"}), Status(201))

The loose form is accepted as well: an ``int`` is a status code, two
consecutive ``str`` values are a header name and its value, and a mapping is
merged into the headers::

    renderer.blob(resp, data, 201, "X-Foo", "bar")

The first non-zero status wins; headers are applied in the order given.
"""

import typing as t
from collections.abc import Mapping


class Status(t.NamedTuple):
    code: int


class Header(t.NamedTuple):
    name: str
    value: str


class Headers(t.NamedTuple):
    headers: t.Mapping[str, str]


class Template(t.NamedTuple):
    """Template source for the text and HTML writers.

    A source starting with ``tmpl://`` names a registered template instead.
    """

    source: str


def normalize(params):
    """Turns the loose parameter form into tagged parameters."""
    normalized = []
    name = None

    for param in params:
        if isinstance(param, (Status, Header, Headers, Template)):
            normalized.append(param)
        elif isinstance(param, bool):
            raise TypeError(f"Invalid response parameter: {param!r}")
        elif isinstance(param, int):
            normalized.append(Status(param))
        elif isinstance(param, str):
            if name is None:
                name = param
            else:
                normalized.append(Header(name, param))
                name = None
        elif isinstance(param, Mapping):
            normalized.append(Headers(param))
        else:
            raise TypeError(f"Invalid response parameter: {param!r}")

    return normalized


def apply(headers, params):
    """Applies ``params`` to ``headers`` and returns the chosen status code.

    Header values are converted with ``str()``.

    Returns ``0`` when no parameter carried a status.
    """
    status = 0

    for param in normalize(params):
        if isinstance(param, Status):
            if status == 0 and param.code != 0:
                status = param.code
        elif isinstance(param, Header):
            headers[param.name] = str(param.value)
        elif isinstance(param, Headers):
            for key, value in param.headers.items():
                headers[key] = str(value)

    return status


def pop_template(params):
    """Splits the first :class:`Template` off ``params``.

    Returns ``(source, remaining)``; ``source`` is ``None`` when absent.
    """
    source = None
    remaining = []

    for param in normalize(params):
        if isinstance(param, Template):
            if source is None:
                source = param.source
        else:
            remaining.append(param)

    return source, remaining
