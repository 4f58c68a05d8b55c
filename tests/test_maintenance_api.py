"""tests for page maintenance endpoints"""
from unittest import mock

from sqlalchemy.exc import OperationalError

from app import crud
from app.core.config import settings


def test_status_defaults_when_page_unknown(client):
    """test unknown pages are never in maintenance"""
    response = client.get(f"{settings.API_V1_STR}/maintenance/does-not-exist")
    assert response.status_code == 200
    assert response.json() == {"is_maintenance": False, "maintenance_message": None}


def test_status_for_home(client, db_session, maintenance_pages):
    """test the home key reads the home record"""
    crud.toggle_page_maintenance(db_session, "home", True, "Back soon")

    response = client.get(f"{settings.API_V1_STR}/maintenance/home")
    assert response.status_code == 200
    assert response.json() == {"is_maintenance": True, "maintenance_message": "Back soon"}


def test_status_maintenance_off(client, maintenance_pages):
    """test a seeded page reports it is available"""
    response = client.get(f"{settings.API_V1_STR}/maintenance/news")
    assert response.status_code == 200
    assert response.json()["is_maintenance"] is False


def test_status_nested_key_percent_encoded(client, db_session):
    """test nested keys work both raw and percent-encoded"""
    from app import schemas

    crud.create_page_maintenance(db_session, schemas.PageMaintenanceCreate(
        page_path="/reviews/lucky-casino",
        page_name="Lucky Casino Review",
        is_maintenance=True,
        maintenance_message="Review is being updated",
    ))

    encoded = client.get(f"{settings.API_V1_STR}/maintenance/reviews%2Flucky-casino")
    raw = client.get(f"{settings.API_V1_STR}/maintenance/reviews/lucky-casino")

    assert encoded.status_code == 200
    assert encoded.json()["is_maintenance"] is True
    assert raw.json() == encoded.json()


def test_status_fails_open_on_database_error(client):
    """test a store failure still answers 'not in maintenance'"""
    with mock.patch("app.crud.get_page_maintenance", side_effect=OperationalError("SELECT", {}, Exception("down"))):
        response = client.get(f"{settings.API_V1_STR}/maintenance/home")

    assert response.status_code == 200
    data = response.json()
    assert data["is_maintenance"] is False
    assert data["maintenance_message"] is None
    assert data["fallback"] is True


def test_list_pages_requires_admin(client, auth_headers, maintenance_pages):
    """test regular users cannot list maintenance pages"""
    response = client.get(f"{settings.API_V1_STR}/admin/page-maintenance", headers=auth_headers)
    assert response.status_code == 403


def test_list_pages_requires_auth(client, maintenance_pages):
    """test anonymous callers cannot list maintenance pages"""
    response = client.get(f"{settings.API_V1_STR}/admin/page-maintenance")
    assert response.status_code == 401


def test_list_pages(client, admin_auth_headers, maintenance_pages):
    """test admin sees every page ordered by key"""
    response = client.get(f"{settings.API_V1_STR}/admin/page-maintenance", headers=admin_auth_headers)
    assert response.status_code == 200
    paths = [page["page_path"] for page in response.json()["pages"]]
    assert paths == sorted(paths)
    assert "home" in paths
    assert len(paths) == 8


def test_toggle_maintenance(client, admin_auth_headers, maintenance_pages):
    """test admin toggles a page and the public read endpoint follows"""
    response = client.post(
        f"{settings.API_V1_STR}/admin/page-maintenance",
        headers=admin_auth_headers,
        json={"page_path": "/forum", "is_maintenance": True, "maintenance_message": "Forum upgrade"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["page"]["page_path"] == "forum"
    assert data["page"]["is_maintenance"] is True
    assert data["message"] == "Maintenance mode enabled for forum"

    status = client.get(f"{settings.API_V1_STR}/maintenance/forum").json()
    assert status == {"is_maintenance": True, "maintenance_message": "Forum upgrade"}


def test_toggle_keeps_message_when_omitted(client, admin_auth_headers, maintenance_pages):
    """test disabling without a message keeps the stored one"""
    before = next(page for page in maintenance_pages if page.page_path == "guide").maintenance_message

    response = client.post(
        f"{settings.API_V1_STR}/admin/page-maintenance",
        headers=admin_auth_headers,
        json={"page_path": "guide", "is_maintenance": False},
    )
    assert response.status_code == 200
    assert response.json()["page"]["maintenance_message"] == before


def test_toggle_unknown_page(client, admin_auth_headers, maintenance_pages):
    """test toggling a missing page returns 404"""
    response = client.post(
        f"{settings.API_V1_STR}/admin/page-maintenance",
        headers=admin_auth_headers,
        json={"page_path": "/nowhere", "is_maintenance": True},
    )
    assert response.status_code == 404


def test_toggle_requires_fields(client, admin_auth_headers, maintenance_pages):
    """test empty page_path and non-boolean flags are rejected"""
    empty = client.post(
        f"{settings.API_V1_STR}/admin/page-maintenance",
        headers=admin_auth_headers,
        json={"page_path": "  ", "is_maintenance": True},
    )
    missing = client.post(
        f"{settings.API_V1_STR}/admin/page-maintenance",
        headers=admin_auth_headers,
        json={"page_path": "home"},
    )
    assert empty.status_code == 400
    assert missing.status_code == 422


def test_update_message(client, admin_auth_headers, maintenance_pages):
    """test admin updates the maintenance message"""
    response = client.put(
        f"{settings.API_V1_STR}/admin/page-maintenance",
        headers=admin_auth_headers,
        json={"page_path": "casinos", "maintenance_message": "New casino data incoming"},
    )
    assert response.status_code == 200
    assert response.json()["page"]["maintenance_message"] == "New casino data incoming"


def test_update_message_requires_text(client, admin_auth_headers, maintenance_pages):
    """test a blank message is rejected"""
    response = client.put(
        f"{settings.API_V1_STR}/admin/page-maintenance",
        headers=admin_auth_headers,
        json={"page_path": "casinos", "maintenance_message": ""},
    )
    assert response.status_code == 400


def test_create_and_delete_page(client, admin_auth_headers, maintenance_pages):
    """test registering and removing a page record"""
    created = client.post(
        f"{settings.API_V1_STR}/admin/page-maintenance/pages",
        headers=admin_auth_headers,
        json={"page_path": "/bonuses", "page_name": "Bonuses"},
    )
    assert created.status_code == 201
    assert created.json()["page_path"] == "bonuses"

    duplicate = client.post(
        f"{settings.API_V1_STR}/admin/page-maintenance/pages",
        headers=admin_auth_headers,
        json={"page_path": "bonuses", "page_name": "Bonuses"},
    )
    assert duplicate.status_code == 409

    deleted = client.delete(
        f"{settings.API_V1_STR}/admin/page-maintenance/pages/bonuses",
        headers=admin_auth_headers,
    )
    assert deleted.status_code == 200

    missing = client.delete(
        f"{settings.API_V1_STR}/admin/page-maintenance/pages/bonuses",
        headers=admin_auth_headers,
    )
    assert missing.status_code == 404
