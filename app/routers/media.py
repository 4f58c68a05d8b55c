import uuid
import io
import logging
from fastapi import APIRouter, Depends, HTTPException, File, UploadFile, Query
from minio.error import S3Error
from sqlalchemy.orm import Session
from typing import List
from pathlib import Path

from app import models, crud, schemas
from app.database import get_db
from app.dependencies import get_current_admin
from app.core.config import settings
from app.core.security import audit_log
from app.core.storage import minio_client, media_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/media", tags=["admin-media"])


@router.post("", response_model=schemas.MediaFile, status_code=201)
async def upload_media(
    file: UploadFile = File(...),
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if file.content_type not in settings.MEDIA_ALLOWED_CONTENT_TYPES:
        allowed_types_str = ", ".join([t.split("/")[1].upper() for t in settings.MEDIA_ALLOWED_CONTENT_TYPES])
        raise HTTPException(status_code=400, detail=f"Unsupported image format. Allowed formats: {allowed_types_str}")

    contents = await file.read()
    file_size = len(contents)

    if file_size == 0:
        raise HTTPException(status_code=400, detail="File is empty")

    if file_size > settings.MEDIA_MAX_UPLOAD_BYTES:
        max_size_mb = settings.MEDIA_MAX_UPLOAD_BYTES / (1024 * 1024)
        raise HTTPException(status_code=400, detail=f"File too large. Maximum size is {max_size_mb}MB")

    file_extension = Path(file.filename).suffix if file.filename else ""
    object_name = f"{uuid.uuid4()}{file_extension}"

    try:
        minio_client.put_object(
            bucket_name=settings.MINIO_BUCKET_NAME,
            object_name=object_name,
            data=io.BytesIO(contents),
            length=file_size,
            content_type=file.content_type,
        )
    except (S3Error, OSError) as e:
        logger.error(f"Error uploading media to MinIO: {e}")
        raise HTTPException(status_code=500, detail="Could not store file")

    media = crud.create_media_file(
        db,
        object_name=object_name,
        original_filename=file.filename or "untitled",
        content_type=file.content_type,
        file_size=file_size,
        file_url=media_url(object_name),
        uploaded_by_id=current_user.id,
    )
    audit_log(f"Admin {current_user.id} uploaded media {media.id} ({object_name})")
    return media


@router.get("", response_model=List[schemas.MediaFile])
def list_media(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    return crud.get_media_files(db, skip=skip, limit=limit)


@router.delete("/{media_id}")
def delete_media(
    media_id: int,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    media = crud.get_media_file(db, media_id)
    if not media:
        raise HTTPException(status_code=404, detail="Media file not found")

    try:
        minio_client.remove_object(settings.MINIO_BUCKET_NAME, media.object_name)
    except (S3Error, OSError) as e:
        logger.warning(f"Failed to delete media from MinIO: {e}")

    crud.delete_media_file(db, media_id)
    audit_log(f"Admin {current_user.id} deleted media {media_id}")
    return {"message": "Media file deleted successfully", "id": media_id}
