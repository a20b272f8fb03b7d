import asyncio

import pytest
from starlette.testclient import TestClient

import httprender
from httprender.models import Request, Response


def build_request(
    path="/",
    query="",
    headers=None,
    body=b"",
    method="GET",
    http_version="1.1",
):
    raw_headers = [
        (key.lower().encode("latin-1"), value.encode("latin-1"))
        for key, value in (headers or {}).items()
    ]
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "root_path": "",
        "query_string": query.encode("latin-1"),
        "headers": raw_headers,
        "http_version": http_version,
        "scheme": "http",
        "server": ("localhost", 80),
    }
    sent = False

    async def receive():
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


async def _collect(iterator):
    return [chunk async for chunk in iterator]


@pytest.fixture
def run():
    return asyncio.run


@pytest.fixture
def collect():
    return _collect


@pytest.fixture
def renderer():
    return httprender.Renderer()


@pytest.fixture
def req():
    return build_request


@pytest.fixture
def resp():
    return Response()


@pytest.fixture
def client():
    def client_for(view, **options):
        return TestClient(httprender.Endpoint(view, **options))

    return client_for


@pytest.fixture
def template_path(tmpdir):
    # create a Jinja template file on the filesystem
    template_name = "test.html"
    template_file = tmpdir.mkdir("templates").join(template_name)
    template_file.write("<p>{{ name }}</p>")
    return template_file
