from datetime import datetime, timedelta
from sqlalchemy.orm import Session
from minio.error import S3Error
from app.database import SessionLocal
from app import crud, models
from app.core.storage import minio_client
from app.core.config import settings
import logging

logger = logging.getLogger(__name__)


def cleanup_orphaned_media(db: Session, grace_days: int = settings.MEDIA_ORPHAN_GRACE_DAYS):
    """
    remove uploaded media that no casino, banner or logo references anymore

    uploads younger than grace_days are kept so editors can still attach them
    """
    cutoff = datetime.utcnow() - timedelta(days=grace_days)
    referenced_urls = crud.get_referenced_media_urls(db)
    logger.info(f"Found {len(referenced_urls)} media URLs referenced by site content")

    deleted_count = 0
    error_count = 0

    for media in db.query(models.MediaFile).filter(models.MediaFile.upload_date < cutoff).all():
        if media.file_url in referenced_urls:
            continue
        try:
            minio_client.remove_object(settings.MINIO_BUCKET_NAME, media.object_name)
        except (S3Error, OSError) as e:
            logger.error(f"Failed to delete orphaned media {media.object_name}: {e}")
            error_count += 1
            continue

        db.delete(media)
        deleted_count += 1
        logger.info(f"Deleted orphaned media: {media.object_name}")

    db.commit()
    logger.info(f"Media cleanup complete: deleted {deleted_count}, errors: {error_count}")
    return {"deleted": deleted_count, "errors": error_count}


def run_media_cleanup():
    db = SessionLocal()
    try:
        return cleanup_orphaned_media(db)
    except Exception as e:
        logger.error(f"Error running media cleanup: {e}")
        db.rollback()
        return {"deleted": 0, "errors": 1, "error_message": str(e)}
    finally:
        db.close()


if __name__ == "__main__":
    run_media_cleanup()
