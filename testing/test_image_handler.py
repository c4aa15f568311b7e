"""
Tests for card image downloads.

Tests cover:
- Successful downloads
- The size cap, from the declared length and while streaming
- HTTP errors, timeouts and connection failures
"""

import asyncio

import pytest
from aiohttp import test_utils, web

from card_reader.bot import ImageDownloadError, ImageHandler

MAX_BYTES = 1024
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 100


async def serve_card(request):
    return web.Response(body=PNG_BYTES, content_type="image/png")


async def serve_missing(request):
    return web.Response(status=404)


async def serve_large(request):
    return web.Response(body=b"\x00" * (MAX_BYTES * 4), content_type="image/png")


async def serve_chunked(request):
    response = web.StreamResponse()
    response.enable_chunked_encoding()
    await response.prepare(request)
    for _ in range(4):
        await response.write(b"\x00" * 512)
    await response.write_eof()
    return response


async def serve_slow(request):
    await asyncio.sleep(1)
    return web.Response(body=PNG_BYTES)


def make_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/card.png", serve_card)
    app.router.add_get("/missing.png", serve_missing)
    app.router.add_get("/large.png", serve_large)
    app.router.add_get("/chunked.png", serve_chunked)
    app.router.add_get("/slow.png", serve_slow)
    return app


async def fetch(path: str, timeout: float = 5):
    async with test_utils.TestServer(make_app()) as server:
        handler = ImageHandler(timeout=timeout)
        handler.max_file_size = MAX_BYTES
        try:
            return await handler.download(str(server.make_url(path)))
        finally:
            await handler.close()


class TestDownload:
    """ImageHandler.download against a local server."""

    def test_downloads_image(self):
        assert asyncio.run(fetch("/card.png")) == PNG_BYTES

    def test_http_error(self):
        with pytest.raises(ImageDownloadError, match="HTTP 404"):
            asyncio.run(fetch("/missing.png"))

    def test_declared_length_over_cap(self):
        with pytest.raises(ImageDownloadError, match="too large"):
            asyncio.run(fetch("/large.png"))

    def test_streamed_body_over_cap(self):
        """Chunked responses carry no length, so the cap applies while reading."""
        with pytest.raises(ImageDownloadError, match="larger than"):
            asyncio.run(fetch("/chunked.png"))

    def test_timeout(self):
        with pytest.raises(ImageDownloadError):
            asyncio.run(fetch("/slow.png", timeout=0.1))

    def test_connection_refused(self):
        async def refused():
            handler = ImageHandler()
            try:
                # port of a server that has already shut down
                async with test_utils.TestServer(make_app()) as server:
                    url = str(server.make_url("/card.png"))
                return await handler.download(url)
            finally:
                await handler.close()

        with pytest.raises(ImageDownloadError, match="network error"):
            asyncio.run(refused())

    def test_size_limit_from_megabytes(self):
        assert ImageHandler(max_file_size_mb=2).max_file_size == 2 * 1024 * 1024
