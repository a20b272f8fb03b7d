import json
import logging
import os

from . import status_codes
from .config import Config, default_config
from .contenttype import ContentType, accepted_type
from .errors import resolve_status
from .formats import decode
from .params import Header, Status, apply, pop_template
from .statics import (
    APPLICATION_JSON,
    APPLICATION_XML,
    CONTENT_TYPE_HEADER,
    DEFAULT_ENCODING,
    EVENT_STREAM,
    OCTET_STREAM,
    SERVER_TIMEOUT,
    TEXT_HTML,
    TEXT_PLAIN,
    XML_HEADER,
    XML_HEADER_WINDOW,
)
from .streams import CANCELLED, CLOSED, is_source, receive

logger = logging.getLogger(__name__)

_TIMEOUT_FRAME = b'event: error\ndata: {"error":"Server Timeout"}\n\n'
_EOF_FRAME = b"event: EOF\n\n"


def http_error(resp, message, status_code):
    """Replaces the response with a plain text error ``message``."""
    resp.status_code = status_code
    resp.headers[CONTENT_TYPE_HEADER] = TEXT_PLAIN
    resp.headers["X-Content-Type-Options"] = "nosniff"
    resp.content = f"{message}\n".encode(DEFAULT_ENCODING)


def _quote(value):
    value = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{value}"'


class Renderer:
    """Content-negotiated request decoding and response rendering.

    Usage::

        renderer = Renderer()

        async def create_user(req, resp):
            user = await renderer.decode(req, User)
            await renderer.respond(resp, req, user, Status(201))

    :param config: A :class:`~httprender.config.Config`; a default one is built when omitted.
    :param settings: Overrides applied on top of ``config``.
    """

    def __init__(self, config: Config = None, **settings):
        if config is None:
            config = default_config(**settings)
        elif settings:
            config = config.replace(**settings)
        self.config = config

    @property
    def templates(self):
        return self.config.templates

    def negotiate(self, req):
        """The :class:`ContentType` to render for ``req``."""
        return accepted_type(req, self.config.default_content_type)

    async def decode(self, req, target=None):
        """Decodes the request body. Must be awaited.

        See :func:`httprender.formats.decode`.
        """
        return await decode(req, target, decoders=self.config.decoders)

    async def bind(self, req, target):
        """Decodes the request body into ``target``. Must be awaited."""
        return await self.decode(req, target)

    async def respond(self, resp, req, value, *params):
        """Renders ``value`` in the format requested by ``req``. Must be awaited.

        Encoding failures are written to ``resp`` as ``500`` responses.

        :param params: Status codes and headers, see :mod:`httprender.params`.
        """
        content_type = self.negotiate(req)
        logger.debug("Rendering %s response", content_type.value)

        if content_type is ContentType.EVENT_STREAM:
            self.stream(resp, req, value)
            return

        if is_source(value):
            value = await self.channel_into_list(resp, req, value)
            if value is None:
                return

        if content_type in (ContentType.PLAIN_TEXT, ContentType.UNKNOWN):
            self.text(resp, value, *params)
        elif content_type is ContentType.HTML:
            self.html(resp, value, *params)
        elif content_type is ContentType.XML:
            self.xml(resp, value, *params)
        else:
            self.json(resp, value, *params)

    async def render(self, resp, req, value, *params):
        """Alias of :meth:`respond`."""
        await self.respond(resp, req, value, *params)

    async def error(self, resp, req, err, *params):
        """Renders ``err`` with the status code it maps to. Must be awaited.

        The status is ``500`` unless the error (or one it wraps) is in
        ``config.error_map`` or is an :class:`~httprender.errors.HTTPError`.
        A status passed in ``params`` wins over both.
        """
        status, err = resolve_status(err, self.config.error_map)
        logger.debug("Rendering error %r with status %s", err, status)

        value = self.config.treat_error(req, err)
        await self.respond(resp, req, value, *params, Status(status))

        if status_codes.is_500(resp.status_code):
            logger.error("Server error %s for %s: %r", resp.status_code, req.full_url, err)

    def blob(self, resp, data, *params):
        """Writes raw bytes, as ``application/octet-stream`` unless a
        ``Content-Type`` header is passed in ``params``.
        """
        resp.headers[CONTENT_TYPE_HEADER] = OCTET_STREAM
        status = apply(resp.headers, params)
        resp.status_code = status or status_codes.HTTP_200
        resp.content = data

    def json(self, resp, value, *params):
        try:
            data = self.config.encoders[ContentType.JSON](value)
        except (TypeError, ValueError) as exc:
            logger.exception("Unable to encode JSON response")
            http_error(resp, str(exc), status_codes.HTTP_500)
            return

        self.blob(resp, data, *params, Header(CONTENT_TYPE_HEADER, APPLICATION_JSON))

    def xml(self, resp, value, *params):
        """Writes ``value`` as XML, prepending the XML declaration if it isn't
        found in the first 100 bytes.
        """
        try:
            data = self.config.encoders[ContentType.XML](value)
        except (TypeError, ValueError) as exc:
            logger.exception("Unable to encode XML response")
            http_error(resp, str(exc), status_codes.HTTP_500)
            return

        if b"<?xml" not in data[:XML_HEADER_WINDOW]:
            data = XML_HEADER.encode(DEFAULT_ENCODING) + data

        self.blob(resp, data, *params, Header(CONTENT_TYPE_HEADER, APPLICATION_XML))

    def text(self, resp, value, *params):
        """Writes ``value`` as plain text.

        Strings are written verbatim. Other values are rendered with the
        :class:`~httprender.params.Template` in ``params``, or formatted with
        ``str()`` when there is none.
        """
        self._template(resp, value, params, TEXT_PLAIN, html=False)

    def html(self, resp, value, *params):
        """Same as :meth:`text`, with an autoescaping template environment."""
        self._template(resp, value, params, TEXT_HTML, html=True)

    def _template(self, resp, value, params, mimetype, html):
        template, params = pop_template(params)

        if isinstance(value, str):
            content = value
        elif template is not None:
            try:
                content = self.templates.render(template, value, html=html)
            except Exception as exc:
                logger.exception("Unable to render template %r", template)
                http_error(resp, str(exc), status_codes.HTTP_500)
                return
        else:
            content = str(value)

        self.blob(
            resp,
            content.encode(DEFAULT_ENCODING),
            *params,
            Header(CONTENT_TYPE_HEADER, mimetype),
        )

    def stream(self, resp, req, source):
        """Streams the items of ``source`` as server-sent events.

        Every item is sent as an ``event: data`` frame holding its JSON. The
        stream ends with ``event: EOF`` when the source is exhausted, or with
        an ``event: error`` frame once ``req`` is cancelled.
        """
        if not is_source(source):
            raise TypeError(
                "event stream expects an asynchronous iterable, "
                f"not {type(source).__name__}"
            )

        resp.headers[CONTENT_TYPE_HEADER] = EVENT_STREAM
        resp.headers["Cache-Control"] = "no-cache"
        if req.http_version.startswith("1"):
            # Connection-specific headers are forbidden in HTTP/2.
            resp.headers["Connection"] = "keep-alive"

        resp.status_code = status_codes.HTTP_200
        resp.stream(self._events, req, source)

    async def _events(self, req, source):
        encode = self.config.encoders[ContentType.JSON]
        iterator = source.__aiter__()

        while True:
            item = await receive(iterator, req.cancelled)

            if item is CANCELLED:
                logger.warning("Event stream cancelled: %s", req.full_url)
                yield _TIMEOUT_FRAME
                return

            if item is CLOSED:
                yield _EOF_FRAME
                return

            try:
                data = encode(item).rstrip(b"\n")
            except (TypeError, ValueError) as exc:
                logger.warning("Unable to encode event: %s", exc)
                error = json.dumps({"error": str(exc)}, separators=(",", ":"))
                yield f"event: error\ndata: {error}\n\n".encode(DEFAULT_ENCODING)
                continue

            yield b"event: data\ndata: " + data + b"\n\n"

    async def channel_into_list(self, resp, req, source):
        """Collects every item of ``source`` into a list. Must be awaited.

        Returns ``None``, with a ``504`` written to ``resp``, if ``req`` is
        cancelled first.
        """
        items = []
        iterator = source.__aiter__()

        while True:
            item = await receive(iterator, req.cancelled)

            if item is CANCELLED:
                logger.warning("Buffering cancelled: %s", req.full_url)
                http_error(resp, SERVER_TIMEOUT, status_codes.HTTP_504)
                return None

            if item is CLOSED:
                return items

            items.append(item)

    def file(self, resp, path):
        """Sends the file at ``path`` as a download named after it."""
        self._file(resp, path, f"attachment; filename={_quote(str(path))}")

    def attachment(self, resp, path):
        """Sends the file at ``path``, prompting the client to save it."""
        self._file(resp, path, "attachment")

    def inline(self, resp, path):
        """Sends the file at ``path`` for display in the browser."""
        self._file(resp, path, "inline")

    def _file(self, resp, path, disposition):
        if not os.path.isfile(path):
            http_error(resp, "404 page not found", status_codes.HTTP_404)
            return

        resp.headers["Content-Disposition"] = disposition
        resp.headers[CONTENT_TYPE_HEADER] = OCTET_STREAM
        resp.status_code = status_codes.HTTP_200
        resp.file(path)

    def no_content(self, resp):
        resp.status_code = status_codes.HTTP_204
        resp.content = b""


def default_renderer(**settings):
    """A :class:`Renderer` with the default configuration."""
    return Renderer(**settings)
