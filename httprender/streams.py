"""
Sources of values for streamed and buffered responses.

Any asynchronous iterable is a source: an async generator, an
``anyio`` receive stream or a :class:`Channel`. A source is closed when its
iteration stops.
"""

import asyncio

CLOSED = object()
CANCELLED = object()


def is_source(value):
    return hasattr(value, "__aiter__")


class Channel:
    """An unbounded queue of values, closed by the producer.

    Usage::

        channel = Channel()
        await channel.send({"progress": 10})
        channel.close()

        async for item in channel:
            ...
    """

    _closed_marker = object()

    def __init__(self):
        self._queue = asyncio.Queue()
        self.closed = False

    async def send(self, value):
        self.send_nowait(value)

    def send_nowait(self, value):
        if self.closed:
            raise RuntimeError("send on closed channel")
        self._queue.put_nowait(value)

    def close(self):
        if not self.closed:
            self.closed = True
            self._queue.put_nowait(self._closed_marker)

    def __aiter__(self):
        return self

    async def __anext__(self):
        item = await self._queue.get()
        if item is self._closed_marker:
            # Keep the marker for later readers.
            self._queue.put_nowait(item)
            raise StopAsyncIteration
        return item


async def _next(iterator):
    try:
        return await iterator.__anext__()
    except StopAsyncIteration:
        return CLOSED


async def receive(iterator, cancelled):
    """Waits for the next item of ``iterator`` or for ``cancelled`` to be set.

    Returns the item, :data:`CLOSED` once the source is exhausted, or
    :data:`CANCELLED`.
    """
    if cancelled.is_set():
        return CANCELLED

    next_item = asyncio.ensure_future(_next(iterator))
    cancel_wait = asyncio.ensure_future(cancelled.wait())
    try:
        done, pending = await asyncio.wait(
            {next_item, cancel_wait}, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        for task in (next_item, cancel_wait):
            if not task.done():
                task.cancel()
        await asyncio.gather(next_item, cancel_wait, return_exceptions=True)

    if next_item in done:
        return next_item.result()
    return CANCELLED
