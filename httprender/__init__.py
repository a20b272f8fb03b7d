"""
httprender - HTTP request / response payload helpers.

This module exports content negotiation, request decoding, response
rendering, pagination and error mapping for Starlette / ASGI handlers.
"""

from .__version__ import __version__
from .config import Config, default_config
from .contenttype import ContentType, accepted_type, classify, request_type
from .endpoints import Endpoint, endpoint
from .errors import (
    ErrorResponse,
    Forbidden,
    HTTPError,
    InvalidToken,
    NotFound,
    RenderError,
    UnableToParseContentType,
    Unauthorized,
)
from .formats import decode
from .models import QueryDict, Request, Response
from .pagination import Pagination, with_per_page
from .params import Header, Headers, Status, Template
from .render import Renderer, default_renderer
from .streams import Channel
from .templates import Templates

__all__ = [
    "__version__",
    "Channel",
    "Config",
    "ContentType",
    "Endpoint",
    "ErrorResponse",
    "Forbidden",
    "HTTPError",
    "Header",
    "Headers",
    "InvalidToken",
    "NotFound",
    "Pagination",
    "QueryDict",
    "RenderError",
    "Renderer",
    "Request",
    "Response",
    "Status",
    "Template",
    "Templates",
    "UnableToParseContentType",
    "Unauthorized",
    "accepted_type",
    "classify",
    "decode",
    "default_config",
    "default_renderer",
    "endpoint",
    "request_type",
    "with_per_page",
]
