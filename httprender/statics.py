DEFAULT_ENCODING = "utf-8"

CONTENT_TYPE_HEADER = "Content-Type"
ACCEPT_HEADER = "Accept"
LINK_HEADER = "Link"

OCTET_STREAM = "application/octet-stream"
TEXT_PLAIN = "text/plain; charset=utf-8"
TEXT_HTML = "text/html; charset=utf-8"
APPLICATION_JSON = "application/json; charset=utf-8"
APPLICATION_XML = "application/xml; charset=utf-8"
EVENT_STREAM = "text/event-stream; charset=utf-8"

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
XML_HEADER_WINDOW = 100

DEFAULT_PAGE_PARAM = "page"
DEFAULT_PER_PAGE_PARAM = "per_page"
DEFAULT_PER_PAGE = 25
DEFAULT_LINK_FORMAT = '<{url}>; rel="{rel}"'

NAMED_TEMPLATE_PREFIX = "tmpl://"
SERVER_TIMEOUT = "Server Timeout"
