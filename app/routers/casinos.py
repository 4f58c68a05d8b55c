from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional
from app import models, crud, schemas
from app.database import get_db
from app.dependencies import get_current_admin
from app.core.security import audit_log

router = APIRouter(tags=["casinos"])

# ============= PUBLIC ENDPOINTS =============

@router.get("/casinos", response_model=schemas.CasinoListResponse)
def get_public_casinos(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    db: Session = Depends(get_db)
):
    casinos, total = crud.get_casinos(db, skip=skip, limit=limit, active_only=True, search=search)
    return schemas.CasinoListResponse(casinos=casinos, total=total, has_more=(skip + limit) < total)

@router.get("/casinos/{slug}", response_model=schemas.Casino)
def get_public_casino(slug: str, db: Session = Depends(get_db)):
    casino = crud.get_casino_by_slug(db, slug)

    if not casino or not casino.is_active:
        raise HTTPException(status_code=404, detail="Casino not found")

    return casino

# ============= ADMIN ENDPOINTS =============

@router.get("/admin/casinos", response_model=schemas.CasinoListResponse)
def get_all_casinos(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    search: Optional[str] = Query(None, max_length=100),
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    casinos, total = crud.get_casinos(db, skip=skip, limit=limit, search=search)
    return schemas.CasinoListResponse(casinos=casinos, total=total, has_more=(skip + limit) < total)

@router.post("/admin/casinos", response_model=schemas.Casino, status_code=201)
def create_casino(
    casino_data: schemas.CasinoCreate,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if crud.get_casino_by_slug(db, casino_data.slug):
        raise HTTPException(status_code=409, detail="A casino with this slug already exists")

    casino = crud.create_casino(db, casino_data)
    audit_log(f"Admin {current_user.id} created casino {casino.id} '{casino.name}'")
    return casino

@router.post("/admin/casinos/bulk-delete")
def bulk_delete_casinos(
    payload: schemas.CasinoBulkDelete,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    deleted = crud.delete_casinos(db, payload.ids)
    audit_log(f"Admin {current_user.id} bulk deleted {deleted} casinos")
    return {"message": f"Deleted {deleted} casinos", "deleted": deleted, "requested": len(payload.ids)}

@router.get("/admin/casinos/{casino_id}", response_model=schemas.Casino)
def get_casino_admin(
    casino_id: int,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    casino = crud.get_casino(db, casino_id)
    if not casino:
        raise HTTPException(status_code=404, detail="Casino not found")
    return casino

@router.put("/admin/casinos/{casino_id}", response_model=schemas.Casino)
def update_casino(
    casino_id: int,
    casino_update: schemas.CasinoUpdate,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    casino = crud.get_casino(db, casino_id)
    if not casino:
        raise HTTPException(status_code=404, detail="Casino not found")

    if casino_update.slug and casino_update.slug != casino.slug:
        if crud.get_casino_by_slug(db, casino_update.slug):
            raise HTTPException(status_code=409, detail="A casino with this slug already exists")

    updated = crud.update_casino(db, casino_id, casino_update)
    audit_log(f"Admin {current_user.id} updated casino {casino_id}")
    return updated

@router.patch("/admin/casinos/{casino_id}/status", response_model=schemas.Casino)
def set_casino_status(
    casino_id: int,
    status_update: schemas.CasinoStatusUpdate,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    casino = crud.update_casino(db, casino_id, schemas.CasinoUpdate(is_active=status_update.is_active))
    if not casino:
        raise HTTPException(status_code=404, detail="Casino not found")

    audit_log(f"Admin {current_user.id} set casino {casino_id} active={status_update.is_active}")
    return casino

@router.delete("/admin/casinos/{casino_id}")
def delete_casino(
    casino_id: int,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    casino = crud.get_casino(db, casino_id)
    if not casino:
        raise HTTPException(status_code=404, detail="Casino not found")

    casino_name = casino.name
    crud.delete_casino(db, casino_id)
    audit_log(f"Admin {current_user.id} deleted casino {casino_id}")

    return {"message": f"Casino '{casino_name}' has been deleted", "id": casino_id}
