"""Filters registered on the text and HTML template environments."""

import datetime
import re

from .util.urls import with_query

_DURATIONS = [
    ("year", 365 * 24 * 60 * 60),
    ("day", 24 * 60 * 60),
    ("hour", 60 * 60),
    ("minute", 60),
    ("second", 1),
]

_SLUG_RE = re.compile(r"[^a-z0-9_\-]")


def to_int(value):
    """Converts ints and numeric strings; raises ``ValueError`` otherwise."""
    if isinstance(value, bool):
        raise ValueError(f"unable to convert {value!r} to int")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value)
    raise ValueError(f"unable to convert {value!r} to int")


def incr(value):
    return to_int(value) + 1


def decr(value):
    return to_int(value) - 1


def format_int(value):
    return f"{to_int(value):,}"


def format_float(value, places=2):
    return f"{value:,.{places}f}"


def format_time(value, fmt="%b %d, %Y"):
    return value.strftime(fmt)


def approx_duration(value):
    """Human friendly, single unit rendering of a duration.

    Accepts a :class:`datetime.timedelta` or a number of seconds.
    """
    if isinstance(value, datetime.timedelta):
        seconds = value.total_seconds()
    else:
        seconds = float(value)

    if seconds < 1:
        return "less than 1 second"

    for unit, size in _DURATIONS:
        if seconds >= size:
            count = int(seconds // size)
            return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def pluralize(count, singular, plural):
    return singular if to_int(count) == 1 else plural


def slugify(value):
    value = value.strip().lower().replace(" ", "-")
    return _SLUG_RE.sub("", value)


def yesno(value):
    return "Yes" if value else "No"


def url_set_param(url, key, value):
    return with_query(url, {key: value})


def url_del_param(url, key):
    return with_query(url, {key: None})


def get_filters():
    return {
        "approx_duration": approx_duration,
        "decr": decr,
        "format_float": format_float,
        "format_int": format_int,
        "format_time": format_time,
        "incr": incr,
        "pluralize": pluralize,
        "slugify": slugify,
        "to_int": to_int,
        "url_del_param": url_del_param,
        "url_set_param": url_set_param,
        "yesno": yesno,
    }
