import dataclasses
import typing as t

from .contenttype import ContentType
from .errors import default_error_map, treat_error
from .formats import get_decoders, get_encoders
from .statics import (
    DEFAULT_LINK_FORMAT,
    DEFAULT_PAGE_PARAM,
    DEFAULT_PER_PAGE,
    DEFAULT_PER_PAGE_PARAM,
)
from .templates import Templates


@dataclasses.dataclass
class Config:
    """Settings shared by :class:`~httprender.Renderer` and
    :class:`~httprender.Pagination`.

    Build one at startup and treat it as read-only afterwards.

    :param default_content_type: Format used when ``Accept`` is missing or unknown.
    :param page_param: Query parameter holding the page number.
    :param per_page_param: Query parameter holding the page size.
    :param per_page_default: Page size used when the query doesn't give one.
    :param link_format: Format of each ``Link`` header value, with ``url`` and ``rel`` fields.
    :param pagination_in_header: If ``True``, pagination metadata goes to the
                                 response headers, otherwise into the body envelope.
    :param pagination_header: ``f(resp, pagination)`` writing the metadata headers.
    :param pagination_body: ``f(pagination, items)`` returning the body envelope.
    :param error_map: ``{exception class: status code}`` used by ``Renderer.error``.
    :param treat_error: ``f(req, err)`` returning the payload rendered for an error.
    """

    default_content_type: ContentType = ContentType.JSON
    page_param: str = DEFAULT_PAGE_PARAM
    per_page_param: str = DEFAULT_PER_PAGE_PARAM
    per_page_default: int = DEFAULT_PER_PAGE
    link_format: str = DEFAULT_LINK_FORMAT
    pagination_in_header: bool = True
    pagination_header: t.Optional[t.Callable] = None
    pagination_body: t.Optional[t.Callable] = None
    error_map: t.Dict[t.Type[BaseException], int] = dataclasses.field(
        default_factory=default_error_map
    )
    treat_error: t.Callable = treat_error
    encoders: t.Dict[ContentType, t.Callable] = dataclasses.field(
        default_factory=get_encoders
    )
    decoders: t.Dict[ContentType, t.Callable] = dataclasses.field(
        default_factory=get_decoders
    )
    templates: Templates = dataclasses.field(default_factory=Templates)

    def replace(self, **changes):
        return dataclasses.replace(self, **changes)


def default_config(**overrides):
    """A fresh :class:`Config`, with ``overrides`` applied."""
    return Config(**overrides)
