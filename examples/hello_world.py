from starlette.applications import Starlette
from starlette.routing import Route
from starlette.testclient import TestClient

from httprender import Renderer, Template, endpoint

renderer = Renderer()


@endpoint
async def greet_world(req, resp, *, greeting):
    await renderer.respond(
        resp, req, {"greeting": greeting}, Template("{{ greeting }}, world!")
    )


app = Starlette(routes=[Route("/{greeting}", greet_world)])


if __name__ == "__main__":
    client = TestClient(app)

    print(client.get("/hello").text)
    print(client.get("/hello", headers={"Accept": "text/plain"}).text)
    print(client.get("/hello", headers={"Accept": "application/xml"}).text)
