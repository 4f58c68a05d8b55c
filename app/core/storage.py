import logging
from minio import Minio
from minio.error import S3Error
from .config import settings

logger = logging.getLogger(__name__)

minio_client = Minio(
    endpoint=settings.MINIO_ENDPOINT,
    access_key=settings.MINIO_ACCESS_KEY,
    secret_key=settings.MINIO_SECRET_KEY,
    secure=settings.MINIO_USE_HTTPS,
)


def media_url(object_name: str) -> str:
    return f"{settings.minio_public_base}/{settings.MINIO_BUCKET_NAME}/{object_name}"


def create_minio_bucket_if_not_exists():
    bucket_name = settings.MINIO_BUCKET_NAME
    try:
        if not minio_client.bucket_exists(bucket_name):
            minio_client.make_bucket(bucket_name)
            logger.info(f"Bucket '{bucket_name}' created.")
        else:
            logger.info(f"Bucket '{bucket_name}' already exists.")
    except (S3Error, OSError) as e:
        logger.error(f"Error connecting to MinIO for bucket '{bucket_name}': {e}")
