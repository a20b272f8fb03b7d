from urllib.parse import urlencode

import rfc3986

from ..models import QueryDict


def parse(url):
    if isinstance(url, str):
        return rfc3986.urlparse(url)
    return url


def with_query(url, changes):
    """Returns ``url`` with its query parameters updated.

    A value of ``None`` removes the parameter. Parameters are serialised
    with their keys sorted.
    """
    uri = parse(url)
    params = dict(QueryDict(uri.query or "").items_list())

    for key, value in changes.items():
        if value is None:
            params.pop(key, None)
        else:
            params[key] = [str(value)]

    query = urlencode(sorted(params.items()), doseq=True)
    return uri.copy_with(query=query or None).unsplit()
