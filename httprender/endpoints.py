import asyncio
import inspect

from starlette.concurrency import run_in_threadpool

from . import status_codes
from .models import Request, Response


class Endpoint:
    """Turns a ``view(req, resp)`` function into an ASGI application.

    Usage::

        @Endpoint
        async def hello(req, resp):
            await renderer.respond(resp, req, {"hello": "world"})

        app = Starlette(routes=[Route("/hello", hello)])

    :param view: The view; synchronous views run in the threadpool.
    :param timeout: Seconds after which the request is cancelled, which ends
                    event streams still being served.
    """

    def __init__(self, view, *, timeout=None):
        self.view = view
        self.timeout = timeout

    def __repr__(self):
        return f"<Endpoint {self.view!r}>"

    @property
    def endpoint_name(self):
        return self.view.__name__

    @property
    def description(self):
        return self.view.__doc__

    async def __call__(self, scope, receive, send):
        request = Request(scope, receive)
        response = Response(req=request)
        path_params = scope.get("path_params", {})

        handle = None
        if self.timeout is not None:
            handle = asyncio.get_running_loop().call_later(self.timeout, request.cancel)

        try:
            if inspect.iscoroutinefunction(self.view):
                await self.view(request, response, **path_params)
            else:
                await run_in_threadpool(self.view, request, response, **path_params)

            if response.status_code is None:
                response.status_code = status_codes.HTTP_200

            await response(scope, receive, send)
        finally:
            if handle is not None:
                handle.cancel()


def endpoint(view=None, *, timeout=None):
    """Decorator form of :class:`Endpoint`, usable with or without arguments."""
    if view is None:
        return lambda view: Endpoint(view, timeout=timeout)
    return Endpoint(view, timeout=timeout)
