import asyncio
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from clausewise.exceptions import StorageError
from clausewise.services.storage.base import FileStorage

logger = logging.getLogger(__name__)

_MISSING_CODES = {"NoSuchKey", "404", "NotFound"}
_FORBIDDEN_CODES = {"403", "Forbidden", "AccessDenied"}


class S3FileStorage(FileStorage):
    """S3-compatible storage (AWS S3, MinIO, Supabase Storage S3 endpoint).

    boto3 is synchronous, so every call runs in a worker thread to keep the
    event loop free.
    """

    def __init__(
        self,
        bucket: str,
        access_key: str,
        secret_key: str,
        endpoint_url: str | None = None,
        region: str = "us-east-1",
    ):
        self.client = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
        )
        self.bucket = bucket
        logger.info(f"S3 storage ready: bucket={bucket} endpoint={endpoint_url or 'AWS S3'}")

    async def save(self, path: str, content: bytes, content_type: str) -> None:
        try:
            await self._call(
                self.client.put_object,
                Bucket=self.bucket,
                Key=path,
                Body=content,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to store {path}: {e}") from e
        logger.info(f"Stored object: key={path} bytes={len(content)}")

    async def read(self, path: str) -> bytes:
        try:
            response = await self._call(self.client.get_object, Bucket=self.bucket, Key=path)
        except ClientError as e:
            if _error_code(e) in _MISSING_CODES:
                raise FileNotFoundError(path) from e
            raise StorageError(f"Failed to read {path}: {e}") from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e
        return await asyncio.to_thread(response["Body"].read)

    async def delete(self, path: str) -> bool:
        try:
            await self._call(self.client.head_object, Bucket=self.bucket, Key=path)
        except ClientError as e:
            code = _error_code(e)
            if code in _MISSING_CODES:
                logger.info(f"Object already absent: key={path}")
                return False
            # Without s3:ListBucket a missing key answers HEAD with 403
            if code not in _FORBIDDEN_CODES:
                raise StorageError(f"Failed to delete {path}: {code}") from e
            logger.debug(f"HEAD forbidden for key={path}, deleting without existence check")
        except BotoCoreError as e:
            raise StorageError(f"Failed to delete {path}: {e}") from e

        # delete_object itself succeeds on missing keys, so a racing delete is harmless
        try:
            await self._call(self.client.delete_object, Bucket=self.bucket, Key=path)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to delete {path}: {e}") from e
        logger.info(f"Deleted object: key={path}")
        return True

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(EndpointConnectionError),
        reraise=True,
    )
    async def _call(self, fn, **kwargs):
        return await asyncio.to_thread(fn, **kwargs)


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", "Unknown"))
