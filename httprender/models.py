import asyncio
import functools
import inspect
import typing as t
from urllib.parse import parse_qs

import chardet
import rfc3986
from requests.structures import CaseInsensitiveDict
from starlette.datastructures import MutableHeaders
from starlette.requests import Request as StarletteRequest
from starlette.responses import FileResponse as StarletteFileResponse
from starlette.responses import Response as StarletteResponse
from starlette.responses import StreamingResponse as StarletteStreamingResponse

from .statics import CONTENT_TYPE_HEADER, DEFAULT_ENCODING
from .status_codes import HTTP_301, is_200


class QueryDict(dict):
    def __init__(self, query_string):
        self.update(parse_qs(query_string, keep_blank_values=True))

    def __getitem__(self, key):
        """
        Return the last data value for this key, or [] if it's an empty list;
        raise KeyError if not found.
        """
        list_ = super().__getitem__(key)
        try:
            return list_[-1]
        except IndexError:
            return []

    def get(self, key, default=None):
        """
        Return the last data value for the passed key. If key doesn't exist
        or value is an empty list, return `default`.
        """
        try:
            val = self[key]
        except KeyError:
            return default
        if val == []:
            return default
        return val

    def get_list(self, key, default=None):
        """
        Return the list of values for the key. If key doesn't exist, return a
        default value.
        """
        try:
            values = super().__getitem__(key)
        except KeyError:
            return [] if default is None else default
        return list(values)

    def items(self):
        """
        Yield (key, value) pairs, where value is the last item in the list
        associated with the key.
        """
        for key in self:
            yield key, self[key]

    def items_list(self):
        """
        Yield (key, value) pairs, where value is the the list.
        """
        yield from super().items()

    def to_dict(self):
        """A plain ``{key: last value}`` dictionary."""
        return dict(self.items())


class Request:
    __slots__ = [
        "_starlette",
        "_headers",
        "_encoding",
        "_content",
        "cancelled",
    ]

    def __init__(self, scope, receive=None):
        if receive is None:
            self._starlette = StarletteRequest(scope)
        else:
            self._starlette = StarletteRequest(scope, receive)
        self._encoding = None
        self._content = None

        headers: CaseInsensitiveDict = CaseInsensitiveDict()
        for key, value in self._starlette.headers.items():
            headers[key] = value

        self._headers = headers

        #: Set when the client went away or the host gave up on the request.
        #: Streaming writers stop as soon as it fires.
        self.cancelled = asyncio.Event()

    @property
    def headers(self):
        """A case-insensitive dictionary, containing all headers sent in the Request."""
        return self._headers

    @property
    def mimetype(self):
        return self.headers.get(CONTENT_TYPE_HEADER, "")

    @property
    def method(self):
        """The incoming HTTP method used for the request, lower-cased."""
        return self._starlette.method.lower()

    @property
    def http_version(self):
        return self._starlette.scope.get("http_version", "1.1")

    @property
    def full_url(self):
        """The full URL of the Request, query parameters and all."""
        return str(self._starlette.url)

    @property
    def url(self):
        """The parsed URL of the Request."""
        return rfc3986.urlparse(self.full_url)

    @property
    def params(self):
        """A dictionary of the parsed query parameters used for the Request."""
        return QueryDict(self.url.query or "")

    @property
    async def encoding(self):
        """The encoding of the Request's body. Can be set, manually. Must be awaited."""
        # Use the user-set encoding first.
        if self._encoding:
            return self._encoding

        return await self.apparent_encoding

    @encoding.setter
    def encoding(self, value):
        self._encoding = value

    @property
    async def content(self):
        """The Request body, as bytes. Must be awaited.

        The whole body is read, so the connection is left drained.
        """
        if self._content is None:
            self._content = await self._starlette.body()
        return self._content

    @property
    async def text(self):
        """The Request body, as unicode. Must be awaited."""
        return (await self.content).decode(await self.encoding)

    @property
    async def declared_encoding(self):
        """The ``Encoding`` header, or the ``charset`` of ``Content-Type``."""
        if "Encoding" in self.headers:
            return self.headers["Encoding"]

        for field in self.mimetype.split(";")[1:]:
            key, _, value = field.partition("=")
            if key.strip().lower() == "charset" and value.strip():
                return value.strip().strip('"')
        return None

    @property
    async def apparent_encoding(self):
        """The apparent encoding, provided by the chardet library. Must be awaited."""
        declared_encoding = await self.declared_encoding

        if declared_encoding:
            return declared_encoding

        return chardet.detect(await self.content)["encoding"] or DEFAULT_ENCODING

    def cancel(self):
        """Signals every writer still serving this request to give up."""
        self.cancelled.set()


def content_setter(mimetype):
    def getter(instance):
        if instance.content is None:
            return None
        return instance.content.decode(DEFAULT_ENCODING)

    def setter(instance, value):
        instance.content = value.encode(DEFAULT_ENCODING)
        instance.headers[CONTENT_TYPE_HEADER] = mimetype

    return property(fget=getter, fset=setter)


class Response:
    __slots__ = [
        "req",
        "status_code",
        "content",
        "headers",
        "_stream",
        "_file",
    ]

    text = content_setter("text/plain; charset=utf-8")
    html = content_setter("text/html; charset=utf-8")

    def __init__(self, req=None):
        self.req = req
        #: The HTTP Status Code to use for the Response.
        self.status_code: t.Union[int, None] = None
        self.content: t.Union[bytes, None] = None  #: The response body.
        #: The response headers. Multi-valued, so several ``Link`` lines may coexist.
        self.headers = MutableHeaders()
        self._stream = None
        self._file = None

    def stream(self, func, *args, **kwargs):
        assert inspect.isasyncgenfunction(func)

        self._stream = functools.partial(func, *args, **kwargs)

        return func

    def file(self, path):
        """Serves the file at ``path`` as the body of the Response."""
        self._file = path

    @property
    def body_iterator(self):
        """A fresh iterator over the streamed body, or ``None``."""
        if self._stream is None:
            return None
        return self._stream()

    @property
    def is_streaming(self):
        return self._stream is not None

    def redirect(self, location, *, set_text=True, status_code=HTTP_301):
        self.status_code = status_code
        if set_text:
            self.text = f"Redirecting to: {location}"
        self.headers["Location"] = location

    async def __call__(self, scope, receive, send):
        status_code = self.status_code_safe

        response: StarletteResponse
        if self._file is not None:
            response = StarletteFileResponse(
                self._file,
                status_code=status_code,
                headers=dict(self.headers),
                media_type=self.headers.get(CONTENT_TYPE_HEADER),
            )
        else:
            if self._stream is not None:
                response = StarletteStreamingResponse(
                    self._stream(), status_code=status_code
                )
            else:
                response = StarletteResponse(
                    self.content or b"", status_code=status_code
                )
            response.raw_headers.extend(self.headers.raw)

        await response(scope, receive, send)

    @property
    def ok(self):
        return is_200(self.status_code_safe)

    @property
    def status_code_safe(self) -> int:
        if self.status_code is None:
            raise RuntimeError("HTTP status code has not been defined")
        return self.status_code
