"""
Media host for uploaded PDFs and generated cover images.

Files are stored as objects in an S3-compatible bucket and addressed by a
durable public URL. The bucket, region, optional endpoint (for S3-compatible
hosts) and public base URL come from the ``media`` settings section.
"""

from __future__ import annotations

import logging
import mimetypes
from typing import BinaryIO, Optional
from urllib.parse import quote
from uuid import uuid4

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .configuration import MediaSettings
from .utils import parse_data_url, sanitize_filename

logger = logging.getLogger(__name__)


class MediaHostError(Exception):
    """Raised when an object could not be stored on the media host."""


class MediaHost:
    def __init__(self, settings: MediaSettings, client=None):
        self.settings = settings
        self._client = client

    @property
    def cover_folder(self) -> str:
        return self.settings.cover_folder

    def _get_client(self):
        """
        Get or create the S3 client.

        Credentials are resolved by boto3 itself; credential errors surface
        during the actual upload.
        """
        if self._client is None:
            self._client = boto3.client(
                "s3",
                region_name=self.settings.region or None,
                endpoint_url=self.settings.endpoint_url or None,
            )
        return self._client

    def _require_bucket(self) -> str:
        if not self.settings.bucket:
            logger.warning("MEDIA_BUCKET not configured, refusing upload")
            raise MediaHostError("Media bucket is not configured")
        return self.settings.bucket

    def public_url(self, key: str) -> str:
        """Durable URL under which an uploaded object is served."""
        bucket = self.settings.bucket
        quoted = quote(key)
        if self.settings.public_base_url:
            return f"{self.settings.public_base_url.rstrip('/')}/{quoted}"
        if self.settings.endpoint_url:
            return f"{self.settings.endpoint_url.rstrip('/')}/{bucket}/{quoted}"
        if self.settings.region:
            return f"https://{bucket}.s3.{self.settings.region}.amazonaws.com/{quoted}"
        return f"https://{bucket}.s3.amazonaws.com/{quoted}"

    def upload_pdf(self, fileobj: BinaryIO, filename: Optional[str]) -> str:
        """
        Stream a PDF to the bucket.

        Args:
            fileobj: Readable binary file object, read in chunks by boto3
            filename: Client-supplied filename, used only to name the object

        Returns:
            Public URL of the stored PDF

        Raises:
            MediaHostError: If the bucket is unset or the upload fails
        """
        bucket = self._require_bucket()
        key = f"{self.settings.pdf_prefix}/{uuid4().hex}-{sanitize_filename(filename or 'document.pdf')}"

        try:
            logger.info(f"Uploading PDF to s3://{bucket}/{key}")
            self._get_client().upload_fileobj(
                fileobj, bucket, key, ExtraArgs={"ContentType": "application/pdf"}
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"PDF upload failed: {e}")
            raise MediaHostError(str(e)) from e

        logger.info(f"Upload successful: s3://{bucket}/{key}")
        return self.public_url(key)

    def upload_data_url(self, data_url: str, folder: str) -> str:
        """
        Store a base64 data URL as an object under ``folder``.

        Returns:
            Public URL of the stored object

        Raises:
            MediaHostError: If the data URL is malformed, the bucket is unset or the upload fails
        """
        bucket = self._require_bucket()
        try:
            content_type, payload = parse_data_url(data_url)
        except ValueError as e:
            raise MediaHostError(f"Invalid data URL: {e}") from e

        extension = mimetypes.guess_extension(content_type) or ""
        key = f"{folder}/{uuid4().hex}{extension}"

        try:
            logger.info(f"Uploading {content_type} ({len(payload)} bytes) to s3://{bucket}/{key}")
            self._get_client().put_object(
                Bucket=bucket, Key=key, Body=payload, ContentType=content_type
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Image upload failed: {e}")
            raise MediaHostError(str(e)) from e

        return self.public_url(key)
