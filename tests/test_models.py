import inspect

import pytest
from starlette.testclient import TestClient

from httprender import models


_default_query = "q=%7b%20hello%20%7d&name=myname&user_name=test_user"


@pytest.mark.parametrize(
    "query, expected",
    [
        pytest.param(
            _default_query,
            {"q": ["{ hello }"], "name": ["myname"], "user_name": ["test_user"]},
            id="parse query with unique keys",
        ),
        pytest.param(
            "q=1&q=2&q=3", {"q": ["1", "2", "3"]}, id="parse query with the same key"
        ),
        pytest.param("page=&q=1", {"page": [""], "q": ["1"]}, id="keep blank values"),
    ],
)
def test_query_dict(query, expected):
    d = models.QueryDict(query)
    assert d == expected


def test_query_dict_get():
    d = models.QueryDict(_default_query)

    assert d["user_name"] == "test_user"
    assert d.get("key_none_exist") is None


def test_query_dict_get_list():
    d = models.QueryDict(_default_query)

    assert d.get_list("user_name") == ["test_user"]
    assert d.get_list("key_none_exist") == []
    assert d.get_list("key_none_exist", ["foo"]) == ["foo"]


def test_query_dict_items_list():
    d = models.QueryDict(_default_query)

    items_list = d.items_list()
    assert inspect.isgenerator(items_list)
    assert dict(items_list) == {
        "q": ["{ hello }"],
        "name": ["myname"],
        "user_name": ["test_user"],
    }


def test_query_dict_items():
    d = models.QueryDict(_default_query)

    items = d.items()
    assert inspect.isgenerator(items)
    assert dict(items) == {"q": "{ hello }", "name": "myname", "user_name": "test_user"}


def test_query_dict_to_dict():
    d = models.QueryDict("q=1&q=2&name=myname")
    assert d.to_dict() == {"q": "2", "name": "myname"}


def test_query_dict_get_wrong_key():
    with pytest.raises(KeyError):
        models.QueryDict(_default_query)["a"]


def test_query_dict_get_empty_key():
    d = models.QueryDict(_default_query)
    d["empty_key"] = []
    assert d["empty_key"] == []


def test_request_headers_are_case_insensitive(req):
    r = req(headers={"Content-Type": "application/json"})

    assert r.headers["content-type"] == "application/json"
    assert r.mimetype == "application/json"


def test_request_url_and_params(req):
    r = req(path="/users", query="page=2&q=a&q=b")

    assert r.full_url == "http://localhost/users?page=2&q=a&q=b"
    assert r.url.path == "/users"
    assert r.params["q"] == "b"
    assert r.params.get("page") == "2"


def test_request_method_and_version(req):
    r = req(method="POST", http_version="2")

    assert r.method == "post"
    assert r.http_version == "2"


def test_request_content(req, run):
    r = req(body=b"hi lenny!")

    async def read():
        return await r.content, await r.text

    assert run(read()) == (b"hi lenny!", "hi lenny!")


def test_request_custom_encoding(req, run):
    r = req(body="hi alex!".encode("ascii"))
    r.encoding = "ascii"

    async def read():
        return await r.encoding, await r.text

    assert run(read()) == ("ascii", "hi alex!")


def test_request_declared_encoding(req, run):
    r = req(headers={"Encoding": "latin-1"}, body="café".encode("latin-1"))

    async def read():
        return await r.text

    assert run(read()) == "café"


def test_request_cancel(req):
    r = req()
    assert not r.cancelled.is_set()

    r.cancel()
    assert r.cancelled.is_set()


def test_response_text_setter():
    resp = models.Response()
    resp.text = "hello"

    assert resp.content == b"hello"
    assert resp.text == "hello"
    assert resp.headers["Content-Type"] == "text/plain; charset=utf-8"


def test_response_redirect():
    resp = models.Response()
    resp.redirect("/users?page=1")

    assert resp.status_code == 301
    assert resp.headers["Location"] == "/users?page=1"
    assert resp.text == "Redirecting to: /users?page=1"


def test_response_status_code_required():
    resp = models.Response()

    with pytest.raises(RuntimeError):
        resp.status_code_safe

    resp.status_code = 201
    assert resp.ok


def test_response_keeps_repeated_headers():
    resp = models.Response()
    resp.status_code = 200
    resp.content = b"ok"
    resp.headers.append("Link", '<http://a>; rel="next"')
    resp.headers.append("Link", '<http://b>; rel="last"')

    r = TestClient(resp).get("/")

    assert r.text == "ok"
    assert r.headers.get_list("link") == [
        '<http://a>; rel="next"',
        '<http://b>; rel="last"',
    ]


def test_response_stream_requires_async_generator():
    resp = models.Response()

    def not_async():
        yield 1

    with pytest.raises(AssertionError):
        resp.stream(not_async)
    assert resp.body_iterator is None


@pytest.mark.parametrize(
    "headers, expected",
    [
        pytest.param({"Content-Type": "text/plain; charset=latin-1"}, "latin-1", id="charset"),
        pytest.param({"Content-Type": 'text/plain; charset="utf-8"'}, "utf-8", id="quoted"),
        pytest.param(
            {"Content-Type": "text/plain; charset=utf-8", "Encoding": "ascii"},
            "ascii",
            id="encoding header first",
        ),
        pytest.param({"Content-Type": "text/plain"}, None, id="none"),
    ],
)
def test_request_declared_encoding_from_content_type(req, run, headers, expected):
    r = req(headers=headers)

    async def read():
        return await r.declared_encoding

    assert run(read()) == expected
