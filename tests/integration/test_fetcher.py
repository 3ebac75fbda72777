import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from conftest import rss_feed, rss_item
from feedintel.exceptions import ParseError, TransportError
from feedintel.transport import AiohttpTransport

FEED_URL = "https://alpha.example.com/feed"


def test_fetch_parses_transport_body(transport, fetcher):
    transport.responses[FEED_URL] = rss_feed([rss_item(title="One", link="https://a/1")])

    result = asyncio.run(fetcher.fetch(FEED_URL))

    assert result.ok
    assert result.feed.url == FEED_URL
    assert [a.link for a in result.items] == ["https://a/1"]
    assert transport.calls == [FEED_URL]


def test_fetch_surfaces_transport_status(transport, fetcher):
    transport.responses[FEED_URL] = TransportError(FEED_URL, 503, "Service Unavailable")

    with pytest.raises(TransportError) as exc_info:
        asyncio.run(fetcher.fetch(FEED_URL))

    message = str(exc_info.value)
    assert FEED_URL in message
    assert "503" in message
    assert "Service Unavailable" in message


def test_fetch_surfaces_parse_error(transport, fetcher):
    transport.responses[FEED_URL] = b"<not-closed>"

    with pytest.raises(ParseError) as exc_info:
        asyncio.run(fetcher.fetch(FEED_URL))

    assert FEED_URL in str(exc_info.value)


def test_fetch_does_not_retry(transport, fetcher):
    with pytest.raises(TransportError):
        asyncio.run(fetcher.fetch(FEED_URL))

    assert transport.calls == [FEED_URL]


def _feed_app() -> web.Application:
    async def feed(request):
        assert request.headers["User-Agent"] == "FeedIntelTest/1.0"
        return web.Response(body=rss_feed([rss_item(title="Served", link="https://a/served")]),
                            content_type="application/rss+xml")

    async def unavailable(request):
        return web.Response(status=503, text="down")

    app = web.Application()
    app.router.add_get("/feed", feed)
    app.router.add_get("/unavailable", unavailable)
    return app


def test_aiohttp_transport_reads_body_and_maps_status():
    async def scenario():
        async with TestServer(_feed_app()) as server:
            async with AiohttpTransport(timeout=5, user_agent="FeedIntelTest/1.0") as transport:
                body = await transport.fetch_text(str(server.make_url("/feed")))
                with pytest.raises(TransportError) as exc_info:
                    await transport.fetch_text(str(server.make_url("/unavailable")))
        return body, exc_info.value

    body, error = asyncio.run(scenario())

    assert b"Served" in body
    assert error.status == 503
    assert "Service Unavailable" in str(error)


def test_aiohttp_transport_requires_context_manager():
    with pytest.raises(RuntimeError):
        asyncio.run(AiohttpTransport().fetch_text(FEED_URL))
