"""Object storage service for heritage image files."""

import base64
import binascii
from io import BytesIO
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from heritage_content.config import get_settings
from heritage_content.errors import ValidationError

settings = get_settings()


class StorageService:
    """Service for managing object storage (MinIO/S3)."""

    def __init__(self, bucket: Optional[str] = None):
        self._client = None
        self._bucket = bucket or settings.storage_bucket

    @property
    def client(self):
        """Lazy initialization of S3 client."""
        if self._client is None:
            endpoint_url = f"{'https' if settings.storage_use_ssl else 'http'}://{settings.storage_endpoint}"
            self._client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=settings.storage_access_key,
                aws_secret_access_key=settings.storage_secret_key,
                config=Config(signature_version="s3v4"),
            )
            self._ensure_bucket()
        return self._client

    def _ensure_bucket(self):
        """Create bucket if it doesn't exist."""
        try:
            self.client.head_bucket(Bucket=self._bucket)
        except ClientError:
            self.client.create_bucket(Bucket=self._bucket)

    def _generate_path(self, heritage_id: str, image_id: str, filename: str) -> str:
        """Generate storage path for a file."""
        return f"heritage/{heritage_id}/images/{image_id}/{filename}"

    def upload_image_from_base64(
        self, image_b64: str, heritage_id: str, image_id: str, content_type: str = "image/jpeg"
    ) -> str:
        """
        Decode a base64 image and upload it to storage.
        Returns the storage path.
        """
        try:
            content = base64.b64decode(image_b64, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError("image_b64 is not valid base64", field="image_b64")
        if not content:
            raise ValidationError("image_b64 is empty", field="image_b64")

        ext = self._get_extension(content_type)
        path = self._generate_path(heritage_id, image_id, f"original{ext}")

        self.client.upload_fileobj(
            BytesIO(content),
            self._bucket,
            path,
            ExtraArgs={"ContentType": content_type},
        )

        return path

    def delete_image_files(self, heritage_id: str, image_id: str):
        """Delete all stored files of an image."""
        prefix = f"heritage/{heritage_id}/images/{image_id}/"
        response = self.client.list_objects_v2(Bucket=self._bucket, Prefix=prefix)

        if "Contents" in response:
            objects = [{"Key": obj["Key"]} for obj in response["Contents"]]
            self.client.delete_objects(
                Bucket=self._bucket, Delete={"Objects": objects}
            )

    def _get_extension(self, content_type: str) -> str:
        """Get file extension from content type."""
        mapping = {
            "image/jpeg": ".jpg",
            "image/jpg": ".jpg",
            "image/png": ".png",
            "image/webp": ".webp",
            "image/gif": ".gif",
            "image/avif": ".avif",
        }
        return mapping.get(content_type, ".jpg")

    def health_check(self) -> bool:
        """Check if storage is accessible."""
        try:
            self.client.head_bucket(Bucket=self._bucket)
            return True
        except Exception:
            return False


# Singleton instance
storage_service = StorageService()
