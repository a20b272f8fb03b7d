import asyncio

from starlette.testclient import TestClient

from httprender import Channel, Renderer, endpoint

renderer = Renderer()


@endpoint(timeout=5)
async def progress(req, resp):
    channel = Channel()

    async def work():
        for percent in range(0, 101, 25):
            await channel.send({"progress": percent})
            await asyncio.sleep(0.1)
        channel.close()

    asyncio.ensure_future(work())

    # Streamed as server-sent events, or buffered into one list otherwise.
    await renderer.respond(resp, req, channel)


if __name__ == "__main__":
    client = TestClient(progress)

    print(client.get("/", headers={"Accept": "text/event-stream"}).text)
