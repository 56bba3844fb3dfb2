"""
Image Codec

Turns inference output into in-memory image blobs.
"""
import base64
import re
from dataclasses import dataclass
from typing import AsyncIterable

PNG_CONTENT_TYPE = "image/png"

_DATA_URI_PREFIX = re.compile(r"^data:image/\w+;base64,")
_WHITESPACE = re.compile(r"[\t\n\f\r ]")


@dataclass
class ImageBlob:
    data: bytes
    content_type: str = PNG_CONTENT_TYPE


def base64_to_image(payload: str) -> ImageBlob:
    """
    Decode a base64 image, with or without a data URI prefix.

    Raises:
        binascii.Error: if the payload is not valid base64.
    """
    base64_data = _DATA_URI_PREFIX.sub("", payload, count=1)
    # Whitespace and missing padding are tolerated, anything else outside the alphabet is not
    base64_data = _WHITESPACE.sub("", base64_data)
    base64_data += "=" * (-len(base64_data) % 4)
    return ImageBlob(data=base64.b64decode(base64_data, validate=True))


async def read_stream(stream: AsyncIterable[bytes]) -> ImageBlob:
    """Collect a streamed image body into a single blob."""
    chunks = []
    async for chunk in stream:
        chunks.append(chunk)
    return ImageBlob(data=b"".join(chunks))
