"""Workshop attachment uploads to a Supabase storage bucket."""
from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Optional

from supabase import Client

from lib.config import ATTACHMENTS_BUCKET
from utils.errors import BucketNotFoundError, StorageError, StoragePolicyError

logger = logging.getLogger(__name__)

POLICY_MARKERS = ("row-level security", "row level security", "policy", "unauthorized", "403")


def bucket_remediation(bucket: str) -> str:
    return (
        f"Create a public storage bucket named '{bucket}' in the Supabase dashboard "
        "(Storage > New bucket), then retry the upload."
    )


def policy_remediation(bucket: str) -> str:
    return (
        "Allow uploads and reads on the bucket from the Supabase SQL editor:\n"
        f"CREATE POLICY \"Public Upload\" ON storage.objects FOR INSERT WITH CHECK (bucket_id = '{bucket}');\n"
        f"CREATE POLICY \"Public View\" ON storage.objects FOR SELECT USING (bucket_id = '{bucket}');"
    )


@dataclass(frozen=True)
class Attachment:
    url: str
    name: str
    path: str


def _safe_file_name(file_name: str) -> str:
    cleaned = re.sub(r"[^0-9A-Za-z._-]+", "_", file_name.strip())
    return cleaned.strip("_") or "attachment"


class AttachmentStorage:
    """Upload files and resolve their public URLs."""

    def __init__(self, client: Optional[Client] = None, bucket: str = ATTACHMENTS_BUCKET):
        self._client = client
        self.bucket = bucket

    @property
    def client(self) -> Client:
        if self._client is None:
            from supabase_store.supabase_client import get_supabase_client

            self._client = get_supabase_client()
        return self._client

    def build_path(self, file_name: str) -> str:
        return f"{time.time_ns() // 1_000_000}_{_safe_file_name(file_name)}"

    def upload(self, file_name: str, content: bytes, content_type: str = "application/octet-stream") -> Attachment:
        """
        Upload a file and return its public reference.

        Args:
            file_name: Original file name, used for the stored name.
            content: File bytes.
            content_type: MIME type sent with the upload.

        Returns:
            Attachment with public URL, display name and bucket path.

        Raises:
            BucketNotFoundError: The bucket does not exist.
            StoragePolicyError: Bucket policies reject the upload.
            StorageError: Any other storage failure.
        """
        path = self.build_path(file_name)
        bucket = self.client.storage.from_(self.bucket)
        try:
            bucket.upload(path, content, {"content-type": content_type})
        except Exception as exc:
            raise self._classify(exc) from exc
        url = bucket.get_public_url(path)
        logger.info("Uploaded attachment %s to bucket %s", path, self.bucket)
        return Attachment(url=url, name=file_name, path=path)

    def _classify(self, exc: Exception) -> StorageError:
        message = str(exc)
        lowered = message.lower()
        logger.error("Upload to bucket %s failed: %s", self.bucket, message)
        if "bucket not found" in lowered or ("bucket" in lowered and "not found" in lowered):
            return BucketNotFoundError(
                f"Storage bucket '{self.bucket}' was not found.", bucket_remediation(self.bucket)
            )
        if any(marker in lowered for marker in POLICY_MARKERS):
            return StoragePolicyError(
                f"Upload to '{self.bucket}' was rejected by a storage policy.", policy_remediation(self.bucket)
            )
        return StorageError(f"Upload to '{self.bucket}' failed: {message}")
