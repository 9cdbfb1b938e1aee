"""Image host backed by S3.

Objects are written under {folder}/{public_id}.{format}; the public URL is
built from IMAGE_PUBLIC_BASE_URL (a CDN in front of the bucket) or the
plain bucket URL.
"""

import logging
import os
import uuid
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urlencode

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from PIL import Image, UnidentifiedImageError

from easytrip.core.config import settings

logger = logging.getLogger(__name__)


class ImageUploadError(Exception):
    """Upload could not be completed; the caller decides how to degrade."""


@dataclass(frozen=True)
class UploadedImage:
    url: str
    width: int
    height: int
    format: str
    public_id: str


class S3ImageHost:
    def __init__(
        self,
        bucket_name: str,
        region: str,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        public_base_url: str = "",
    ) -> None:
        self.bucket_name = bucket_name
        self.region = region
        self.public_base_url = public_base_url.rstrip("/")
        self.s3_client = boto3.client(
            "s3",
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
            region_name=region,
        )

    def is_configured(self) -> bool:
        return bool(self.bucket_name)

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"

    def upload(
        self,
        local_path: str,
        folder: str = "",
        public_id: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> UploadedImage:
        """
        Upload a local image file and remove it afterwards, whatever happens.

        Raises:
            ImageUploadError: unreadable image, missing bucket or S3 failure
        """
        try:
            if not self.is_configured():
                raise ImageUploadError("Image host is not configured (S3_BUCKET is empty)")

            try:
                with Image.open(local_path) as img:
                    width, height = img.size
                    image_format = (img.format or "").lower()
                    content_type = Image.MIME.get(img.format or "", "application/octet-stream")
            except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
                raise ImageUploadError(f"Not a readable image: {e}") from e

            public_id = public_id or uuid.uuid4().hex
            key = f"{public_id}.{image_format}" if image_format else public_id
            if folder:
                key = f"{folder.strip('/')}/{key}"

            extra = {}
            if tags:
                extra["Tagging"] = urlencode({tag: "true" for tag in tags})

            try:
                with open(local_path, "rb") as body:
                    self.s3_client.put_object(
                        Bucket=self.bucket_name,
                        Key=key,
                        Body=body,
                        ContentType=content_type,
                        **extra,
                    )
            except (BotoCoreError, ClientError) as e:
                raise ImageUploadError(f"S3 upload failed: {e}") from e

            logger.info(f"Uploaded image s3://{self.bucket_name}/{key} ({width}x{height})")
            return UploadedImage(
                url=self.public_url(key),
                width=width,
                height=height,
                format=image_format,
                public_id=public_id,
            )
        finally:
            try:
                os.remove(local_path)
            except FileNotFoundError:
                pass


_image_host: Optional[S3ImageHost] = None


def get_image_host() -> S3ImageHost:
    """FastAPI dependency; one client per process"""
    global _image_host
    if _image_host is None:
        _image_host = S3ImageHost(
            bucket_name=settings.s3_bucket,
            region=settings.s3_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            public_base_url=settings.image_public_base_url,
        )
    return _image_host
