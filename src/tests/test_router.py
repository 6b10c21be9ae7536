"""Tests for path validation and dispatch."""

import pytest
import pytest_asyncio
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from httpx import ASGITransport, AsyncClient

from flatwiki.core.router import Router
from flatwiki.handlers import HANDLERS


def recording_router(calls):
    def make(action):
        async def handler(request: Request, title: str):
            calls.append((action, title))
            return PlainTextResponse(f"{action}:{title}")

        return handler

    return Router({action: make(action) for action in ("edit", "save", "view")})


@pytest.fixture
def calls():
    return []


@pytest_asyncio.fixture()
async def client(calls):
    router = recording_router(calls)
    app = FastAPI()

    @app.api_route("/{path:path}", methods=["GET", "POST"])
    async def dispatch(request: Request):
        return await router.dispatch(request)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ============================================================
# Matching
# ============================================================


class TestMatch:
    @pytest.fixture
    def router(self):
        return Router(HANDLERS)

    def test_actions_from_table(self, router):
        assert router.actions == ["edit", "save", "view"]

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/view/Home", ("view", "Home")),
            ("/edit/Page2", ("edit", "Page2")),
            ("/save/ABC", ("save", "ABC")),
        ],
    )
    def test_valid_paths(self, router, path, expected):
        assert router.match(path) == expected

    @pytest.mark.parametrize(
        "path",
        [
            "/",
            "/view",
            "/view/",
            "/view/a b",
            "/view/../../etc",
            "/view/..",
            "/view/a/b",
            "/view/Home.txt",
            "/view/Home\n",
            "/VIEW/Home",
            "/delete/Home",
            "view/Home",
            "/view/Home/",
            "//view/Home",
        ],
    )
    def test_invalid_paths(self, router, path):
        assert router.match(path) is None

    def test_empty_table_rejected(self):
        with pytest.raises(ValueError):
            Router({})

    def test_pattern_follows_registered_actions(self):
        async def handler(request, title):
            return PlainTextResponse(title)

        router = Router({"history": handler})
        assert router.match("/history/Home") == ("history", "Home")
        assert router.match("/view/Home") is None


# ============================================================
# Dispatch
# ============================================================


class TestDispatch:
    @pytest.mark.asyncio
    async def test_dispatches_to_action(self, client, calls):
        resp = await client.get("/edit/Home")
        assert resp.status_code == 200
        assert resp.text == "edit:Home"
        assert calls == [("edit", "Home")]

    @pytest.mark.asyncio
    async def test_post_dispatches_too(self, client, calls):
        resp = await client.post("/save/Home", data={"body": "x"})
        assert resp.text == "save:Home"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path",
        ["/", "/view/", "/view/a%20b", "/view/..%2F..%2Fetc", "/view/a%2Fb", "/other/Home"],
    )
    async def test_invalid_path_is_404(self, client, calls, path):
        resp = await client.get(path)
        assert resp.status_code == 404
        assert resp.text == "404 page not found"
        assert calls == []
