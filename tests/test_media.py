"""tests for media uploads and orphan cleanup"""
from datetime import datetime, timedelta
from unittest import mock

import pytest

from app import crud, models
from app.core.config import settings
from app.tasks.media_cleanup import cleanup_orphaned_media


@pytest.fixture
def mock_minio():
    """patch the MinIO client used by the media router"""
    with mock.patch("app.routers.media.minio_client") as client:
        yield client


def upload(client, headers, content=b"\x89PNG fake image", content_type="image/png", filename="logo.png"):
    return client.post(
        f"{settings.API_V1_STR}/admin/media",
        headers=headers,
        files={"file": (filename, content, content_type)},
    )


def test_upload_media(client, admin_auth_headers, mock_minio):
    """test uploading an image stores it and records it"""
    response = upload(client, admin_auth_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["original_filename"] == "logo.png"
    assert data["content_type"] == "image/png"
    assert data["object_name"].endswith(".png")
    assert data["file_url"].endswith(f"/{settings.MINIO_BUCKET_NAME}/{data['object_name']}")

    mock_minio.put_object.assert_called_once()
    assert mock_minio.put_object.call_args.kwargs["object_name"] == data["object_name"]

    listed = client.get(f"{settings.API_V1_STR}/admin/media", headers=admin_auth_headers).json()
    assert [media["id"] for media in listed] == [data["id"]]


def test_upload_rejects_unsupported_type(client, admin_auth_headers, mock_minio):
    response = upload(client, admin_auth_headers, content_type="application/pdf", filename="doc.pdf")
    assert response.status_code == 400
    assert "Unsupported" in response.json()["detail"]
    mock_minio.put_object.assert_not_called()


def test_upload_rejects_empty_file(client, admin_auth_headers, mock_minio):
    response = upload(client, admin_auth_headers, content=b"")
    assert response.status_code == 400


def test_upload_rejects_large_file(client, admin_auth_headers, mock_minio):
    response = upload(client, admin_auth_headers, content=b"x" * (settings.MEDIA_MAX_UPLOAD_BYTES + 1))
    assert response.status_code == 400
    assert "too large" in response.json()["detail"]


def test_upload_storage_failure(client, admin_auth_headers, mock_minio):
    """test a storage outage leaves no database record behind"""
    mock_minio.put_object.side_effect = OSError("connection refused")
    response = upload(client, admin_auth_headers)
    assert response.status_code == 500

    listed = client.get(f"{settings.API_V1_STR}/admin/media", headers=admin_auth_headers).json()
    assert listed == []


def test_upload_requires_admin(client, auth_headers, mock_minio):
    response = upload(client, auth_headers)
    assert response.status_code == 403


def test_delete_media(client, admin_auth_headers, mock_minio):
    """test deleting removes the object and the record"""
    media_id = upload(client, admin_auth_headers).json()["id"]

    response = client.delete(f"{settings.API_V1_STR}/admin/media/{media_id}", headers=admin_auth_headers)
    assert response.status_code == 200
    mock_minio.remove_object.assert_called_once()

    missing = client.delete(f"{settings.API_V1_STR}/admin/media/{media_id}", headers=admin_auth_headers)
    assert missing.status_code == 404


def add_media(db_session, object_name, age_days):
    return crud.create_media_file(
        db_session,
        object_name=object_name,
        original_filename=object_name,
        content_type="image/png",
        file_size=10,
        file_url=f"http://media.test/{object_name}",
        upload_date=datetime.utcnow() - timedelta(days=age_days),
    )


def test_cleanup_removes_old_unreferenced_media(db_session):
    """test only old media nobody references is removed"""
    used = add_media(db_session, "used.png", age_days=30)
    add_media(db_session, "orphan.png", age_days=30)
    add_media(db_session, "fresh.png", age_days=1)
    db_session.add(models.Casino(name="Lucky Star", slug="lucky-star", logo_url=used.file_url))
    db_session.commit()

    with mock.patch("app.tasks.media_cleanup.minio_client") as minio:
        result = cleanup_orphaned_media(db_session, grace_days=7)

    assert result == {"deleted": 1, "errors": 0}
    minio.remove_object.assert_called_once_with(settings.MINIO_BUCKET_NAME, "orphan.png")
    remaining = sorted(media.object_name for media in db_session.query(models.MediaFile).all())
    assert remaining == ["fresh.png", "used.png"]


def test_cleanup_keeps_record_when_storage_fails(db_session):
    """test media stays recorded if the object cannot be removed"""
    add_media(db_session, "stuck.png", age_days=30)

    with mock.patch("app.tasks.media_cleanup.minio_client") as minio:
        minio.remove_object.side_effect = OSError("connection reset")
        result = cleanup_orphaned_media(db_session, grace_days=7)

    assert result == {"deleted": 0, "errors": 1}
    assert db_session.query(models.MediaFile).count() == 1
