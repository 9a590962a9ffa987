import boto3
from botocore.exceptions import ClientError
from supabase import Client
from slf_backend.config import settings
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class S3Storage:
    def __init__(self):
        if not settings.s3_enabled:
            raise ValueError("AWS S3 credentials and bucket name must be configured")

        self.s3_client = boto3.client(
            's3',
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region
        )
        self.bucket_name = settings.s3_bucket_name

    def upload_file(self, file_content: bytes, key: str, content_type: str) -> str:
        """Upload file to S3 and return its public HTTPS URL"""
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=file_content,
                ContentType=content_type
            )
            return f"https://{self.bucket_name}.s3.{settings.aws_region}.amazonaws.com/{key}"
        except ClientError as e:
            logger.error(f"Failed to upload file to S3: {str(e)}")
            raise

    def delete_file(self, key: str) -> bool:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
            return True
        except ClientError as e:
            logger.error(f"Failed to delete file from S3: {str(e)}")
            return False


class DocumentStorage:
    """Stores uploaded documents and payment proofs; S3 when configured, otherwise the Supabase Storage bucket."""

    def __init__(self, supabase: Client, bucket: Optional[str] = None):
        self.supabase = supabase
        self.bucket = bucket or settings.storage_bucket
        self.s3_storage = None
        if settings.s3_enabled:
            try:
                self.s3_storage = S3Storage()
            except Exception as e:
                logger.warning(f"S3 storage initialization failed ({str(e)}), will use Supabase Storage")
                self.s3_storage = None

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Upload and return the public URL of the stored object"""
        if self.s3_storage:
            logger.info(f"Uploading to S3: {path}")
            return self.s3_storage.upload_file(content, path, content_type)

        bucket = self.supabase.storage.from_(self.bucket)
        bucket.upload(
            path,
            content,
            file_options={"content-type": content_type, "cache-control": "3600", "upsert": "false"}
        )
        logger.info(f"Uploaded to Supabase Storage: {self.bucket}/{path}")
        return bucket.get_public_url(path)

    def delete(self, path: str) -> bool:
        try:
            if self.s3_storage:
                return self.s3_storage.delete_file(path)
            self.supabase.storage.from_(self.bucket).remove([path])
            return True
        except Exception as e:
            logger.warning(f"Failed to delete stored file ({path}): {e}")
            return False
