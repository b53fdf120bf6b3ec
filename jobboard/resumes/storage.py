"""
Resume blob storage on S3.
Handles upload, retrieval, presigned URLs and best-effort deletion of resume files.
"""

import uuid
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from jobboard.config import resolve_bucket_name
from jobboard.exceptions import BlobNotFound, BlobStoreError
from jobboard.simple_logger import get_logger

logger = get_logger("resume_storage")

_MISSING_KEY_CODES = {'NoSuchKey', '404', 'NotFound'}


@dataclass(frozen=True)
class CleanupResult:
    """Outcome of a best-effort blob deletion"""
    blob_id: str
    deleted: bool
    error: Optional[str] = None


def build_s3_client(config):
    """Create the S3 client from app config; credentials fall back to the boto3 chain"""
    return boto3.client(
        's3',
        aws_access_key_id=config.get('AWS_ACCESS_KEY_ID'),
        aws_secret_access_key=config.get('AWS_SECRET_ACCESS_KEY'),
        region_name=config.get('AWS_REGION'),
        endpoint_url=config.get('S3_ENDPOINT_URL'),
    )


class ResumeBlobStore:
    """Resume bytes keyed by blob id (the S3 object key)"""

    def __init__(self, s3_client, bucket: str, prefix: str = 'resumes/'):
        self.s3_client = s3_client
        self.bucket = bucket
        self.prefix = prefix if not prefix or prefix.endswith('/') else prefix + '/'

    @classmethod
    def from_config(cls, config) -> "ResumeBlobStore":
        bucket = resolve_bucket_name(config.get('RESUME_BUCKET'), logger)
        return cls(build_s3_client(config), bucket, config.get('RESUME_PREFIX', 'resumes/'))

    def new_blob_id(self, username: str) -> str:
        safe_username = username.replace('/', '_').replace('\\', '_').replace(' ', '_')
        return f"{self.prefix}{safe_username}/{uuid.uuid4().hex}.pdf"

    def put(self, username: str, data: bytes, content_type: str, filename: Optional[str] = None) -> str:
        blob_id = self.new_blob_id(username)
        metadata = {'username': username}
        if filename:
            # S3 user metadata must be ASCII
            metadata['original_filename'] = filename.encode('ascii', errors='replace').decode('ascii')
        try:
            self.s3_client.upload_fileobj(
                BytesIO(data),
                self.bucket,
                blob_id,
                ExtraArgs={
                    'ContentType': content_type,
                    'Metadata': metadata,
                }
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"[S3] Failed to upload resume for {username} to s3://{self.bucket}/{blob_id}: {e}", exc_info=True)
            raise BlobStoreError("Failed to upload resume.", details={'blob_id': blob_id})

        logger.info(f"[S3] Uploaded resume to s3://{self.bucket}/{blob_id} ({len(data)} bytes)")
        return blob_id

    def get(self, blob_id: str) -> bytes:
        try:
            response = self.s3_client.get_object(Bucket=self.bucket, Key=blob_id)
            return response['Body'].read()
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in _MISSING_KEY_CODES:
                raise BlobNotFound("Resume file not found.", details={'blob_id': blob_id})
            logger.error(f"[S3] Error retrieving resume {blob_id}: {e}")
            raise BlobStoreError("Failed to retrieve resume.", details={'blob_id': blob_id})
        except BotoCoreError as e:
            logger.error(f"[S3] Error retrieving resume {blob_id}: {e}")
            raise BlobStoreError("Failed to retrieve resume.", details={'blob_id': blob_id})

    def presigned_url(self, blob_id: str, expires_in: int = 3600) -> Optional[str]:
        try:
            return self.s3_client.generate_presigned_url(
                'get_object',
                Params={'Bucket': self.bucket, 'Key': blob_id},
                ExpiresIn=expires_in
            )
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"[S3] Could not generate presigned URL for {blob_id}: {e}")
            return None

    def delete(self, blob_id: str) -> CleanupResult:
        """Delete a blob; failures are reported in the result, never raised"""
        try:
            self.s3_client.delete_object(Bucket=self.bucket, Key=blob_id)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"[S3] Error deleting resume {blob_id}: {e}")
            return CleanupResult(blob_id=blob_id, deleted=False, error=str(e))
        logger.info(f"[S3] Deleted resume {blob_id}")
        return CleanupResult(blob_id=blob_id, deleted=True)
