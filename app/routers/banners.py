from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from app import models, crud, schemas
from app.database import get_db
from app.dependencies import get_current_admin
from app.core.security import audit_log

router = APIRouter(tags=["hero-banners"])


@router.get("/hero-banners", response_model=List[schemas.HeroBanner])
def get_public_banners(db: Session = Depends(get_db)):
    return crud.get_hero_banners(db, active_only=True)


@router.get("/admin/hero-banners", response_model=List[schemas.HeroBanner])
def get_all_banners(
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    return crud.get_hero_banners(db)


@router.post("/admin/hero-banners", response_model=schemas.HeroBanner, status_code=201)
def create_banner(
    banner_data: schemas.HeroBannerCreate,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    banner = crud.create_hero_banner(db, banner_data)
    audit_log(f"Admin {current_user.id} created hero banner {banner.id}")
    return banner


@router.put("/admin/hero-banners/{banner_id}", response_model=schemas.HeroBanner)
def update_banner(
    banner_id: int,
    banner_update: schemas.HeroBannerUpdate,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    banner = crud.update_hero_banner(db, banner_id, banner_update)
    if not banner:
        raise HTTPException(status_code=404, detail="Hero banner not found")

    audit_log(f"Admin {current_user.id} updated hero banner {banner_id}")
    return banner


@router.delete("/admin/hero-banners/{banner_id}")
def delete_banner(
    banner_id: int,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if not crud.delete_hero_banner(db, banner_id):
        raise HTTPException(status_code=404, detail="Hero banner not found")

    audit_log(f"Admin {current_user.id} deleted hero banner {banner_id}")
    return {"message": "Hero banner has been deleted", "id": banner_id}
