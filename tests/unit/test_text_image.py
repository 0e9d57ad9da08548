"""Unit tests for text-as-image rendering."""

import asyncio
import io
import threading
from datetime import datetime, timezone

import pytest
from PIL import Image

import lens_publish.text_image as text_image_module
from lens_publish.errors import TextImageError
from lens_publish.text_image import (
    CARD_HEIGHT,
    CARD_WIDTH,
    TEXT_IMAGE_MIME_TYPE,
    TextImageRenderer,
    render_text_image,
)


def open_png(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


class TestRenderTextImage:
    def test_renders_png_of_card_size(self):
        image = open_png(render_text_image("gm frens", "alice.lens", "2024-01-01 00:00"))
        assert image.format == "PNG"
        assert image.size == (CARD_WIDTH, CARD_HEIGHT)

    def test_custom_dimensions(self):
        image = open_png(render_text_image("hi", "bob", "now", width=400, height=300))
        assert image.size == (400, 300)

    def test_long_text_truncated_without_error(self):
        data = render_text_image("word " * 2000, "bob", "now")
        assert open_png(data).size == (CARD_WIDTH, CARD_HEIGHT)

    def test_empty_text(self):
        assert open_png(render_text_image("", "bob", "now")).size == (CARD_WIDTH, CARD_HEIGHT)

    def test_deterministic(self):
        assert render_text_image("same", "bob", "now") == render_text_image("same", "bob", "now")

    def test_invalid_dimensions_raise(self):
        with pytest.raises(TextImageError):
            render_text_image("hi", "bob", "now", width=0, height=-1)


class TestTextImageRenderer:
    def test_stores_png_and_returns_url(self, store):
        renderer = TextImageRenderer(store, "https://arweave.net/")
        url, mime_type = asyncio.run(renderer("hello", "alice.lens", datetime(2024, 1, 1, tzinfo=timezone.utc)))
        assert url == "https://arweave.net/blob-1"
        assert mime_type == TEXT_IMAGE_MIME_TYPE
        data, stored_mime = store.blobs[0]
        assert stored_mime == "image/png"
        assert open_png(data).format == "PNG"

    def test_renders_off_event_loop_thread(self, store, monkeypatch):
        render_threads = []

        def recording_render(text, handle, timestamp):
            render_threads.append(threading.get_ident())
            return b"png"

        monkeypatch.setattr(text_image_module, "render_text_image", recording_render)
        renderer = TextImageRenderer(store, "ar://")

        url, _ = asyncio.run(renderer("hello", "alice.lens", datetime(2024, 1, 1, tzinfo=timezone.utc)))

        assert url == "ar://blob-1"
        assert store.blobs == [(b"png", "image/png")]
        assert render_threads and render_threads[0] != threading.get_ident()
