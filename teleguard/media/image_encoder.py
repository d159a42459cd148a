from __future__ import annotations

import asyncio
import base64
import io
import logging
import struct
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from teleguard.checklist.errors import ImageDecodeError

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, bytearray, str, Path]


def _read_source(source: ImageSource) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    try:
        return Path(source).read_bytes()
    except OSError as exc:
        raise ImageDecodeError(f"Could not read image file {source}: {exc}") from exc


def to_data_uri(source: ImageSource) -> str:
    """
    Validate an image with Pillow and return it inline as a base64 data URI.

    The original bytes are embedded unchanged; Pillow is only used to check
    that they decode and to pick the MIME type.
    """
    data = _read_source(source)
    if not data:
        raise ImageDecodeError("Image is empty")

    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError, struct.error) as exc:
        raise ImageDecodeError(f"Not a readable image: {exc}") from exc

    mime = Image.MIME.get(fmt or "", f"image/{(fmt or 'octet-stream').lower()}")
    encoded = base64.b64encode(data).decode("ascii")
    logger.debug("Encoded %s image (%d bytes)", mime, len(data))
    return f"data:{mime};base64,{encoded}"


async def encode_data_uri(source: ImageSource) -> str:
    return await asyncio.to_thread(to_data_uri, source)
