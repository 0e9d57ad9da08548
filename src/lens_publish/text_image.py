"""Text-as-image rendering for publications without attachments.

Renders publication text, author handle and timestamp to a PNG card that
serves as the metadata cover image.
"""

import asyncio
import io
import logging
import textwrap
from datetime import datetime

from .errors import TextImageError
from .storage import ContentStore

logger = logging.getLogger(__name__)

CARD_WIDTH = 1200
CARD_HEIGHT = 630
MARGIN = 60
FONT_SIZE = 36
MAX_LINES = 10
TEXT_IMAGE_MIME_TYPE = "image/png"


def render_text_image(
    text: str, handle: str, timestamp: str, width: int = CARD_WIDTH, height: int = CARD_HEIGHT
) -> bytes:
    """Render text content to a PNG card.

    CONTRACT:
      Inputs:
        - text: string, publication content (may be empty)
        - handle: string, author handle shown in the footer
        - timestamp: string, human-readable creation time shown in the footer
        - width, height: positive integers, card dimensions in pixels

      Outputs:
        - png_bytes: PNG-encoded image of exactly width x height pixels

      Invariants:
        - Text is word-wrapped to the card width
        - At most MAX_LINES lines are drawn; overflow ends with an ellipsis line
        - Footer "@handle - timestamp" is drawn at the bottom margin

      Properties:
        - Deterministic: same inputs yield identical bytes (Pillow-dependent)

      Raises:
        - TextImageError: Any rendering failure
    """
    from PIL import Image, ImageDraw, ImageFont

    try:
        font = ImageFont.load_default(size=FONT_SIZE)
        footer_font = ImageFont.load_default(size=FONT_SIZE * 2 // 3)

        image = Image.new("RGB", (width, height), "white")
        draw = ImageDraw.Draw(image)

        char_width = max(draw.textlength("x", font=font), 1)
        wrap_at = max(int((width - 2 * MARGIN) / char_width), 1)
        lines = []
        for paragraph in text.splitlines() or [""]:
            lines.extend(textwrap.wrap(paragraph, width=wrap_at) or [""])
        if len(lines) > MAX_LINES:
            lines = lines[: MAX_LINES - 1] + ["..."]

        draw.multiline_text((MARGIN, MARGIN), "\n".join(lines), fill="black", font=font, spacing=12)
        draw.text(
            (MARGIN, height - MARGIN - FONT_SIZE), f"@{handle} - {timestamp}", fill="#6b7280", font=footer_font
        )

        buffer = io.BytesIO()
        image.save(buffer, format="PNG", optimize=True)
        return buffer.getvalue()
    except Exception as e:
        raise TextImageError(f"failed to render text image: {str(e)}") from e


class TextImageRenderer:
    """Renders a text card and stores it, returning (image_url, mime_type)."""

    def __init__(self, store: ContentStore, uri_prefix: str):
        self.store = store
        self.uri_prefix = uri_prefix

    async def __call__(self, text: str, handle: str, now: datetime) -> tuple[str, str]:
        png = await asyncio.to_thread(render_text_image, text, handle, now.strftime("%Y-%m-%d %H:%M"))
        locator = await self.store.upload_bytes(png, TEXT_IMAGE_MIME_TYPE)
        logger.debug("Rendered text image for @%s as %s", handle, locator)
        return f"{self.uri_prefix}{locator}", TEXT_IMAGE_MIME_TYPE
