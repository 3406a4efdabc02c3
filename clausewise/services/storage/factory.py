from clausewise.config import Settings
from clausewise.services.storage.base import FileStorage


def create_storage(settings: Settings) -> FileStorage:
    """Create and return the configured file storage backend."""
    if settings.STORAGE_BACKEND == "local":
        from clausewise.services.storage.local_storage import LocalFileStorage
        return LocalFileStorage(settings.STORAGE_DIR)

    if settings.STORAGE_BACKEND == "s3":
        from clausewise.services.storage.s3_storage import S3FileStorage
        return S3FileStorage(
            bucket=settings.S3_BUCKET,
            access_key=settings.S3_ACCESS_KEY,
            secret_key=settings.S3_SECRET_KEY,
            endpoint_url=settings.S3_ENDPOINT_URL,
            region=settings.S3_REGION,
        )

    raise ValueError(f"Unsupported storage backend: {settings.STORAGE_BACKEND!r}")
