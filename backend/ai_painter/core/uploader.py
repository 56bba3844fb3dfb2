"""
Image Host Uploader

Forwards generated images to the image host as multipart uploads.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from ai_painter.core.codec import ImageBlob

logger = logging.getLogger(__name__)


class ImageHostUploader:
    """
    Upload capability for the image host.

    The host answers with a JSON array whose first element holds the `src`
    path of the stored image.
    """

    def __init__(
        self,
        upload_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.upload_url = upload_url
        self.timeout = timeout
        self._transport = transport

    async def upload(self, image: ImageBlob) -> Optional[Dict[str, Any]]:
        """
        Upload an image.

        Returns:
            The host's record (with `src`) on success, None on any failure.
            Failures are logged here and never raised.
        """
        files = {"file": ("image.png", image.data, image.content_type)}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.upload_url, files=files)

                if response.is_error:
                    raise RuntimeError(
                        f"HTTP error! status: {response.status_code}, message: {response.text}"
                    )

                records = response.json()
                record = records[0]
                if not isinstance(record, dict):
                    raise ValueError(f"Unexpected upload response: {records!r}")
                return record
        except (httpx.HTTPError, RuntimeError, ValueError, LookupError, TypeError) as e:
            logger.error(f"[Upload] Failed to upload image to {self.upload_url}: {e}")
            return None
