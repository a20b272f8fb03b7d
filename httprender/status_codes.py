HTTP_200 = 200
HTTP_204 = 204

HTTP_301 = 301

HTTP_400 = 400
HTTP_401 = 401
HTTP_403 = 403
HTTP_404 = 404

HTTP_500 = 500
HTTP_504 = 504


def _is_category(category, status_code):
    return category <= status_code < category + 100


def is_200(status_code):
    """``True`` for the 2xx (success) range."""
    return _is_category(200, status_code)


def is_500(status_code):
    """``True`` for the 5xx (server error) range."""
    return _is_category(500, status_code)
