"""
Attachment Store - Writes clock event photos/videos to local disk
"""
import base64
import binascii
import os
import uuid
from typing import Optional

from atams.logging import get_logger
from punchclock.models.attachment import AttachmentKind

logger = get_logger(__name__)

_EXTENSIONS = {
    AttachmentKind.PHOTO.value: "jpg",
    AttachmentKind.VIDEO.value: "webm",
}


class AttachmentStoreError(Exception):
    """Raised when a media item cannot be decoded or written"""


class LocalAttachmentStore:
    def __init__(self, upload_dir: str, url_prefix: str = "/uploads", max_bytes: Optional[int] = None) -> None:
        self.upload_dir = upload_dir
        self.url_prefix = url_prefix.rstrip("/")
        self.max_bytes = max_bytes

    def _decode(self, data: str) -> bytes:
        # Accept both data URLs ("data:image/jpeg;base64,....") and bare base64
        if "," in data:
            data = data.split(",", 1)[1]

        try:
            payload = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise AttachmentStoreError(f"Invalid base64 media payload: {e}") from e

        if not payload:
            raise AttachmentStoreError("Empty media payload")
        if self.max_bytes is not None and len(payload) > self.max_bytes:
            raise AttachmentStoreError(
                f"Media payload too large ({len(payload)} bytes, limit {self.max_bytes})"
            )
        return payload

    def store(self, event_id: int, data: str, kind: str, original_name: Optional[str] = None) -> str:
        """
        Decode and write one media item.

        Args:
            event_id: Clock event the media belongs to
            data: Base64 or data URL encoded content
            kind: PHOTO or VIDEO
            original_name: File name reported by the device

        Returns:
            str: Public URI of the stored file

        Raises:
            AttachmentStoreError: Unknown kind, bad payload or write failure
        """
        extension = _EXTENSIONS.get(kind)
        if extension is None:
            raise AttachmentStoreError(f"Unsupported media kind: {kind}")

        payload = self._decode(data)
        file_name = f"{uuid.uuid4().hex}.{extension}"

        try:
            os.makedirs(self.upload_dir, exist_ok=True)
            with open(os.path.join(self.upload_dir, file_name), "wb") as fh:
                fh.write(payload)
        except OSError as e:
            raise AttachmentStoreError(f"Could not write media file: {e}") from e

        logger.debug(
            f"Stored {kind} for event {event_id} as {file_name} ({len(payload)} bytes)",
            extra={'extra_data': {'event_id': event_id, 'original_name': original_name}}
        )
        return f"{self.url_prefix}/{file_name}"
