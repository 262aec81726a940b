"""
Integration tests for the HTTP surface.

Upstream providers are replaced by the fake upstream from conftest.
"""

import httpx
import pytest
import yaml
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request
from starlette.routing import Route

from chatrelay.router import RouterConfig
from chatrelay.server.app import create_app
from chatrelay.server.config import ServerSettings, Settings
from chatrelay.server.routes.homepage import load_homepage

GEMINI_OK = {"candidates": [{"content": {"parts": [{"text": "hello"}]}}]}
OPENROUTER_OK = '{"id":"gen-1","choices":[{"message":{"content":"x"}}]}'


@pytest.fixture
def app(full_config, registry):
    """Create test application with every key configured."""
    return create_app(settings=Settings(), config=full_config, registry=registry)


@pytest.fixture
async def client(app):
    """Create async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


class TestHomepage:
    """Tests for the static homepage."""

    async def test_root(self, client: AsyncClient):
        """Root serves the bundled HTML."""
        response = await client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"] == "text/html; charset=UTF-8"
        assert response.content == load_homepage()

    @pytest.mark.parametrize("path", ["/index.html", "/docs", "/api", "/api/chat/extra"])
    async def test_other_paths(self, client: AsyncClient, path: str):
        """Any non-API path serves the same document."""
        response = await client.get(path)

        assert response.status_code == 200
        assert response.content == load_homepage()

    async def test_post_to_other_path(self, client: AsyncClient):
        """Method does not matter outside /api/chat."""
        response = await client.post("/somewhere", json={})

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]

    @pytest.mark.parametrize("method", ["PROPFIND", "TRACE", "HEAD", "MKCOL"])
    async def test_any_method(self, client: AsyncClient, method: str):
        """Methods outside the usual set still get the homepage."""
        response = await client.request(method, "/anything")

        assert response.status_code == 200
        assert response.headers["content-type"] == "text/html; charset=UTF-8"

    async def test_homepage_from_yaml(self, full_config, registry, tmp_path):
        """A homepage path read from the YAML file is usable by the app."""
        page = tmp_path / "home.html"
        page.write_bytes(b"<h1>from yaml</h1>")
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.safe_dump({"server": {"homepage_path": str(page)}}))
        settings = Settings()
        settings.load_from_yaml(config_file)
        app = create_app(settings=settings, config=full_config, registry=registry)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            response = await c.get("/")

        assert response.content == b"<h1>from yaml</h1>"

    async def test_custom_homepage(self, full_config, registry, tmp_path):
        """A configured homepage file replaces the bundled one."""
        page = tmp_path / "home.html"
        page.write_bytes(b"<h1>custom</h1>")
        settings = Settings()
        settings.server.homepage_path = page
        app = create_app(settings=settings, config=full_config, registry=registry)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            response = await c.get("/")

        assert response.content == b"<h1>custom</h1>"


class TestChatEndpoint:
    """Tests for /api/chat."""

    @pytest.mark.parametrize(
        "method", ["GET", "PUT", "DELETE", "PATCH", "OPTIONS", "TRACE", "PROPFIND"]
    )
    async def test_method_not_allowed(self, client: AsyncClient, method: str):
        response = await client.request(method, "/api/chat")

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}
        assert response.headers["x-request-id"].startswith("req_")

    async def test_malformed_json(self, client: AsyncClient, upstream):
        """A body that is not JSON gives 500 with an error message."""
        response = await client.post(
            "/api/chat", content=b"not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 500
        assert response.json()["error"]
        assert upstream.calls == []

    async def test_non_object_body(self, client: AsyncClient, upstream):
        """A JSON value that is not an object carries no fields, so defaults apply."""
        upstream.reply("grok", 200, text=OPENROUTER_OK)

        response = await client.post("/api/chat", json=["hi"])

        assert response.status_code == 200
        assert response.content == OPENROUTER_OK.encode()
        assert upstream.called_providers() == ["grok"]

    async def test_null_body(self, client: AsyncClient, upstream):
        """JSON null has no fields to read and gives 500."""
        response = await client.post(
            "/api/chat", content=b"null", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 500
        assert response.json()["error"]
        assert upstream.calls == []

    async def test_non_string_chatbot(self, client: AsyncClient, upstream):
        """A non-string chatbot is used as a provider name and has no key."""
        response = await client.post("/api/chat", json={"chatbot": 7, "messages": []})

        assert response.status_code == 502
        assert response.json() == {"error": "API key missing for 7"}
        assert upstream.calls == []

    async def test_gemini_success(self, client: AsyncClient, upstream):
        upstream.reply("gemini", 200, json=GEMINI_OK)

        response = await client.post(
            "/api/chat", json={"chatbot": "gemini", "messages": [{"content": "hi"}]}
        )

        assert response.status_code == 200
        assert response.json() == {"choices": [{"message": {"content": "hello"}}]}
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["content-type"] == "application/json"
        assert response.headers["x-request-id"].startswith("req_")

    async def test_openrouter_passthrough(self, client: AsyncClient, upstream):
        """OpenRouter replies are forwarded byte for byte."""
        upstream.reply("grok", 200, text=OPENROUTER_OK)

        response = await client.post("/api/chat", json={"messages": [{"content": "hi"}]})

        assert response.status_code == 200
        assert response.content == OPENROUTER_OK.encode()
        assert response.headers["access-control-allow-origin"] == "*"

    async def test_pinned_missing_key(self, registry, upstream):
        """Missing key for a pinned provider gives 502 and no upstream call."""
        config = RouterConfig.from_keys({"grok": "grok-key"})
        app = create_app(settings=Settings(), config=config, registry=registry)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            response = await c.post(
                "/api/chat", json={"chatbot": "gpt5", "messages": [{"content": "hi"}]}
            )

        assert response.status_code == 502
        assert response.json() == {"error": "API key missing for gpt5"}
        assert "access-control-allow-origin" not in response.headers
        assert upstream.calls == []

    async def test_pinned_upstream_error(self, client: AsyncClient, upstream):
        upstream.reply("gpt5", 403, text="forbidden")

        response = await client.post(
            "/api/chat", json={"chatbot": "gpt5", "messages": [{"content": "hi"}]}
        )

        assert response.status_code == 403
        assert response.json() == {
            "error": "Model error",
            "detail": {"status": 403, "body": "forbidden"},
        }
        assert "access-control-allow-origin" not in response.headers

    async def test_auto_fallback(self, client: AsyncClient, upstream):
        """Auto mode reaches the third provider after two failures."""
        upstream.reply("gemini", 500, text="boom")
        upstream.fail("grok")
        upstream.reply("gpt5", 200, text=OPENROUTER_OK)

        response = await client.post(
            "/api/chat",
            json={"chatbot": "auto", "clientChosen": "gemini", "messages": [{"content": "hi"}]},
        )

        assert response.status_code == 200
        assert response.content == OPENROUTER_OK.encode()
        assert upstream.called_providers() == ["gemini", "grok", "gpt5"]

    async def test_auto_all_fail(self, client: AsyncClient, upstream):
        upstream.reply("grok", 500, text="a")
        upstream.reply("gpt5", 500, text="b")
        upstream.reply("gemini", 500, text="c")

        response = await client.post(
            "/api/chat", json={"chatbot": "auto", "messages": [{"content": "hi"}]}
        )

        assert response.status_code == 502
        assert response.json() == {"error": "No response received or limit request."}


class TestAppWiring:
    """Tests for settings flowing into the app and its error handling."""

    async def test_upstream_timeout(self, full_config):
        """The configured timeout reaches every adapter's HTTP client."""
        settings = Settings(server=ServerSettings(upstream_timeout=5.0))
        app = create_app(settings=settings, config=full_config)
        registry = app.state.chat_router.registry

        try:
            for protocol in ("gemini", "openrouter"):
                client = await registry.get_or_raise(protocol)._get_client()
                assert client.timeout == httpx.Timeout(5.0)
        finally:
            await registry.close()

    async def test_no_upstream_timeout_by_default(self, full_config):
        settings = Settings(server=ServerSettings(upstream_timeout=None))
        app = create_app(settings=settings, config=full_config)
        registry = app.state.chat_router.registry

        try:
            client = await registry.get_or_raise("gemini")._get_client()
            assert client.timeout == httpx.Timeout(None)
        finally:
            await registry.close()

    async def test_uncaught_error_becomes_500(self, app):
        """Errors escaping a route are rendered as the JSON error envelope."""

        async def broken(request: Request):
            raise RuntimeError("boom")

        app.router.routes.insert(0, Route("/broken", broken))

        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        ) as c:
            response = await c.get("/broken")

        assert response.status_code == 500
        assert response.json() == {"error": "boom"}
        assert response.headers["content-type"] == "application/json"
