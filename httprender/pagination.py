"""
Pagination of list responses.

Usage::

    async def list_users(req, resp):
        pagination = Pagination.from_request(req, total=db.count_users())
        users = db.users(offset=pagination.offset, limit=pagination.per_page)
        await pagination.render(resp, req, users, renderer=renderer)

The page and page size are read from the ``page`` and ``per_page`` query
parameters. A request for a page that doesn't exist is redirected to the
closest one that does.
"""

import logging

from . import status_codes
from .config import default_config
from .models import QueryDict
from .render import Renderer
from .statics import LINK_HEADER
from .util.urls import parse, with_query

logger = logging.getLogger(__name__)


def _parse_int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def with_per_page(per_page):
    """Option overriding the page size read from the query."""

    def option(pagination):
        pagination.per_page = per_page

    return option


def total_pages(per_page, total):
    """``ceil(total / per_page)``, never less than ``1``."""
    if per_page <= 0:
        return 1
    return max(1, -(-total // per_page))


class Pagination:
    def __init__(self, url=None, page=1, per_page=None, total=0, config=None):
        self.config = default_config() if config is None else config
        #: The URL the navigation links are built from, or ``None``.
        self.url = None if url is None else parse(url).unsplit()
        self.page = page
        self.per_page = self.config.per_page_default if per_page is None else per_page
        self.total = total

    @classmethod
    def from_url(cls, url, total=0, *options, config=None):
        """Builds the pagination of ``url``, a string or parsed URL."""
        config = default_config() if config is None else config
        uri = parse(url)
        params = QueryDict(uri.query or "")

        pagination = cls(
            url=uri,
            page=_parse_int(params.get(config.page_param), 1),
            per_page=_parse_int(
                params.get(config.per_page_param), config.per_page_default
            ),
            total=total,
            config=config,
        )
        for option in options:
            option(pagination)
        return pagination

    @classmethod
    def from_request(cls, req, total=0, *options, config=None):
        """Builds the pagination of an incoming :class:`~httprender.models.Request`."""
        return cls.from_url(req.full_url, total, *options, config=config)

    def __repr__(self):
        return (
            f"<Pagination page={self.page} per_page={self.per_page} "
            f"total={self.total} last={self.last}>"
        )

    @property
    def last(self):
        return total_pages(self.per_page, self.total)

    @property
    def next(self):
        return min(self.page + 1, self.last)

    @property
    def prev(self):
        return max(self.page - 1, 1)

    @property
    def offset(self):
        return max(self.page - 1, 0) * max(self.per_page, 0)

    def page_url(self, page):
        """The source URL pointing at ``page``; empty without source URL."""
        if self.url is None:
            return ""
        return with_query(
            self.url,
            {self.config.page_param: page, self.config.per_page_param: self.per_page},
        )

    @property
    def next_url(self):
        if self.page == self.last:
            return ""
        return self.page_url(self.next)

    @property
    def prev_url(self):
        if self.page <= 1:
            return ""
        return self.page_url(self.prev)

    @property
    def last_url(self):
        return self.page_url(self.last)

    @property
    def needs_redirect(self):
        return self.page < 1 or self.per_page < 1 or self.page > self.last

    def corrected(self):
        """``(page, per_page)`` moved into the valid range."""
        per_page = self.per_page if self.per_page >= 1 else self.config.per_page_default
        last = total_pages(per_page, self.total)
        page = min(max(self.page, 1), last)
        return page, per_page

    async def render(self, resp, req, value, *params, renderer=None):
        """Renders one page of items. Must be awaited.

        Out of range requests get a ``301`` to the corrected URL instead.
        Otherwise the pagination metadata is written to the headers (or
        wrapped around ``value``) and ``value`` is handed to the renderer.
        """
        if self.needs_redirect:
            page, per_page = self.corrected()
            location = with_query(
                req.full_url,
                {self.config.page_param: page, self.config.per_page_param: per_page},
            )
            logger.debug("Redirecting out of range page to %s", location)
            resp.redirect(location, status_code=status_codes.HTTP_301)
            return

        if renderer is None:
            renderer = Renderer(self.config)

        if self.config.pagination_in_header:
            write_headers = self.config.pagination_header or pagination_header
            write_headers(resp, self)
        else:
            wrap = self.config.pagination_body or pagination_body
            value = wrap(self, value)

        await renderer.respond(resp, req, value, *params)


def _link(pagination, url, rel):
    return pagination.config.link_format.format(url=url, rel=rel)


def pagination_header(resp, pagination):
    """Writes the ``x-*`` pagination headers and the ``Link`` header values."""
    page = pagination.page
    last = pagination.last

    resp.headers["x-page"] = str(page)
    resp.headers["x-per-page"] = str(pagination.per_page)

    if page != last:
        resp.headers["x-next-page"] = str(pagination.next)
        if pagination.url is not None:
            resp.headers.append(LINK_HEADER, _link(pagination, pagination.next_url, "next"))

    if page > 1:
        resp.headers["x-prev-page"] = str(pagination.prev)
        if pagination.url is not None:
            resp.headers.append(LINK_HEADER, _link(pagination, pagination.prev_url, "prev"))

    resp.headers["x-total"] = str(pagination.total)
    resp.headers["x-total-pages"] = str(last)
    if pagination.url is not None:
        resp.headers.append(LINK_HEADER, _link(pagination, pagination.last_url, "last"))


def pagination_body(pagination, items):
    """The body envelope: page metadata, navigation URLs and ``items``.

    Empty navigation URLs are left out.
    """
    envelope = {
        "page": pagination.page,
        "per_page": pagination.per_page,
        "total": pagination.total,
    }
    for key, url in (
        ("next", pagination.next_url),
        ("prev", pagination.prev_url),
        ("last", pagination.last_url),
    ):
        if url:
            envelope[key] = url
    envelope["items"] = items
    return envelope
