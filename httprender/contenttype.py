import enum
import logging

from .statics import ACCEPT_HEADER, CONTENT_TYPE_HEADER

logger = logging.getLogger(__name__)


class ContentType(enum.Enum):
    """Content types understood by the decoder and the renderer."""

    UNKNOWN = "unknown"
    PLAIN_TEXT = "text"
    HTML = "html"
    JSON = "json"
    XML = "xml"
    FORM = "form"
    EVENT_STREAM = "event-stream"


_MIMETYPES = {
    "text/plain": ContentType.PLAIN_TEXT,
    "text/html": ContentType.HTML,
    "application/xhtml+xml": ContentType.HTML,
    "application/json": ContentType.JSON,
    "text/javascript": ContentType.JSON,
    "text/xml": ContentType.XML,
    "application/xml": ContentType.XML,
    "application/x-www-form-urlencoded": ContentType.FORM,
    "text/event-stream": ContentType.EVENT_STREAM,
}


def classify(mimetype):
    """Returns the :class:`ContentType` of a raw MIME string.

    Parameters after the first ``;`` are ignored, so
    ``application/json; charset=utf-8`` is ``ContentType.JSON``.
    """
    if not mimetype:
        return ContentType.UNKNOWN
    mimetype = mimetype.split(";", 1)[0].strip()
    return _MIMETYPES.get(mimetype, ContentType.UNKNOWN)


def request_type(req):
    """The content type declared by the request's ``Content-Type`` header."""
    return classify(req.headers.get(CONTENT_TYPE_HEADER, ""))


def accepted_type(req, default=ContentType.JSON):
    """The content type the client asked for in its ``Accept`` header.

    Only the first field is considered; anything unrecognised becomes ``default``.
    """
    field = req.headers.get(ACCEPT_HEADER, "").split(",")[0]
    content_type = classify(field.strip())

    if content_type is ContentType.UNKNOWN:
        logger.debug("Unrecognised Accept header %r, using %s", field, default)
        content_type = default
    return content_type
