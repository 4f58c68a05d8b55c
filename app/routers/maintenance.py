from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging
from app import models, crud, schemas
from app.database import get_db
from app.dependencies import get_current_admin
from app.core.pages import page_key
from app.core.security import audit_log

logger = logging.getLogger(__name__)

router = APIRouter(tags=["maintenance"])

# ============= PUBLIC ENDPOINTS =============

@router.get("/maintenance/{path_key:path}")
def get_maintenance_status(path_key: str, db: Session = Depends(get_db)):
    """Maintenance status for one page, never fails closed"""
    key = page_key(path_key)

    try:
        page = crud.get_page_maintenance(db, key)
    except SQLAlchemyError as e:
        logger.error(f"Database error checking maintenance for '{key}': {e}")
        db.rollback()
        return {
            "is_maintenance": False,
            "maintenance_message": None,
            "fallback": True,
            "error": "Database connection failed",
        }

    if not page:
        return {"is_maintenance": False, "maintenance_message": None}

    return {
        "is_maintenance": page.is_maintenance,
        "maintenance_message": page.maintenance_message,
    }

# ============= ADMIN ENDPOINTS =============

@router.get("/admin/page-maintenance", response_model=schemas.PageMaintenanceList)
def list_page_maintenance(
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    return schemas.PageMaintenanceList(pages=crud.get_page_maintenance_list(db))

@router.post("/admin/page-maintenance", response_model=schemas.PageMaintenanceResult)
def toggle_page_maintenance(
    toggle: schemas.MaintenanceToggle,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if not toggle.page_path.strip():
        raise HTTPException(status_code=400, detail="page_path and is_maintenance are required")

    page = crud.toggle_page_maintenance(
        db,
        page_path=toggle.page_path,
        is_maintenance=toggle.is_maintenance,
        maintenance_message=toggle.maintenance_message,
    )
    if not page:
        raise HTTPException(status_code=404, detail="Page not found")

    state = "enabled" if toggle.is_maintenance else "disabled"
    audit_log(f"Admin {current_user.id} {state} maintenance for '{page.page_path}'")

    return schemas.PageMaintenanceResult(
        success=True,
        page=page,
        message=f"Maintenance mode {state} for {page.page_path}",
    )

@router.put("/admin/page-maintenance", response_model=schemas.PageMaintenanceResult)
def update_maintenance_message(
    update: schemas.MaintenanceMessageUpdate,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if not update.page_path.strip() or not update.maintenance_message.strip():
        raise HTTPException(status_code=400, detail="page_path and maintenance_message are required")

    page = crud.update_maintenance_message(db, update.page_path, update.maintenance_message)
    if not page:
        raise HTTPException(status_code=404, detail="Page not found")

    audit_log(f"Admin {current_user.id} updated maintenance message for '{page.page_path}'")

    return schemas.PageMaintenanceResult(
        success=True,
        page=page,
        message=f"Maintenance message updated for {page.page_path}",
    )

@router.post("/admin/page-maintenance/pages", response_model=schemas.PageMaintenance, status_code=201)
def create_page(
    page: schemas.PageMaintenanceCreate,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if crud.get_page_maintenance(db, page.page_path):
        raise HTTPException(status_code=409, detail="Page already exists")

    db_page = crud.create_page_maintenance(db, page)
    audit_log(f"Admin {current_user.id} registered page '{db_page.page_path}'")
    return db_page

@router.delete("/admin/page-maintenance/pages/{path_key:path}")
def delete_page(
    path_key: str,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    key = page_key(path_key)
    if not crud.delete_page_maintenance(db, key):
        raise HTTPException(status_code=404, detail="Page not found")

    audit_log(f"Admin {current_user.id} removed page '{key}'")
    return {"message": f"Page '{key}' has been deleted", "page_path": key}
