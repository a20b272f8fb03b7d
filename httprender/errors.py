"""
Errors understood by :meth:`httprender.Renderer.error`.

Raise (or chain) one of the predeclared errors and the renderer picks the
matching status code::

    try:
        user = users[user_id]
    except KeyError as exc:
        raise NotFound(f"user {user_id}") from exc

Errors are matched through ``__cause__`` / ``__context__`` as well, so a
sentinel wrapped in another exception still resolves to its status. Use
:class:`HTTPError` to force a status for any error.
"""

import dataclasses

from . import status_codes


class RenderError(Exception):
    """Base class of the predeclared errors."""

    message = "render error"

    def __init__(self, message=None):
        super().__init__(message or self.message)


class InvalidToken(RenderError):
    message = "invalid or missing token"


class Unauthorized(RenderError):
    message = "Unauthorized"


class Forbidden(RenderError):
    message = "Forbidden"


class NotFound(RenderError):
    message = "not found"


class UnableToParseContentType(RenderError):
    message = "unable to automatically decode the request content type"


class HTTPError(Exception):
    """An error carrying the status code it should be rendered with."""

    def __init__(self, err, status):
        super().__init__(str(err))
        self.err = err
        self.status = status
        if isinstance(err, BaseException):
            self.__cause__ = err

    def __repr__(self):
        return f"<HTTPError {self.status} {self.err!r}>"


@dataclasses.dataclass
class ErrorResponse:
    message: str


def default_error_map():
    return {
        InvalidToken: status_codes.HTTP_400,
        Unauthorized: status_codes.HTTP_401,
        Forbidden: status_codes.HTTP_403,
        NotFound: status_codes.HTTP_404,
    }


def treat_error(req, err):
    """Default presentation of an error: ``{"message": str(err)}``."""
    return ErrorResponse(message=str(err))


def iter_chain(err):
    """Yields ``err`` and every error it wraps, outermost first."""
    seen = set()
    pending = [err]

    while pending:
        current = pending.pop(0)
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        yield current

        if isinstance(current, HTTPError):
            pending.append(current.err)
        if isinstance(current, BaseException):
            pending.append(current.__cause__)
            pending.append(current.__context__)


def matches(err, error_class):
    return any(isinstance(e, error_class) for e in iter_chain(err))


def resolve_status(err, error_map, default=status_codes.HTTP_500):
    """Returns ``(status, err)`` for an error about to be rendered.

    An :class:`HTTPError` anywhere in the chain overrides ``error_map`` and
    is replaced by the error it wraps.
    """
    status = default
    for error_class, code in error_map.items():
        if matches(err, error_class):
            status = code

    for current in iter_chain(err):
        if isinstance(current, HTTPError):
            return current.status, current.err

    return status, err
