from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session
from typing import List, Optional
from app import models, crud, schemas
from app.database import get_db
from app.dependencies import get_current_admin
from app.core.security import audit_log

router = APIRouter(tags=["content"])

# ============= PUBLIC ENDPOINTS =============

@router.get("/content", response_model=List[schemas.PageContent])
def get_public_content(
    page_name: Optional[str] = Query(None, max_length=100),
    section_name: Optional[str] = Query(None, max_length=100),
    db: Session = Depends(get_db)
):
    return crud.get_page_contents(db, page_name=page_name, section_name=section_name)

# ============= ADMIN ENDPOINTS =============

@router.get("/admin/content", response_model=List[schemas.PageContent])
def get_all_content(
    page_name: Optional[str] = Query(None, max_length=100),
    section_name: Optional[str] = Query(None, max_length=100),
    include_inactive: bool = False,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    return crud.get_page_contents(
        db, page_name=page_name, section_name=section_name, active_only=not include_inactive
    )

@router.post("/admin/content", response_model=schemas.PageContentResult)
def upsert_content(
    content_data: schemas.PageContentUpsert,
    response: Response,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    content, created = crud.upsert_page_content(db, content_data)
    action = "created" if created else "updated"
    if created:
        response.status_code = 201

    audit_log(
        f"Admin {current_user.id} {action} content "
        f"{content.page_name}/{content.section_name}/{content.content_key}"
    )
    return schemas.PageContentResult(content=content, action=action)

@router.put("/admin/content/{content_id}", response_model=schemas.PageContent)
def update_content(
    content_id: int,
    content_update: schemas.PageContentUpdate,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    content = crud.update_page_content(db, content_id, content_update)
    if not content:
        raise HTTPException(status_code=404, detail="Content not found")

    audit_log(f"Admin {current_user.id} updated content {content_id}")
    return content

@router.delete("/admin/content/{content_id}")
def delete_content(
    content_id: int,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if not crud.delete_page_content(db, content_id):
        raise HTTPException(status_code=404, detail="Content not found")

    audit_log(f"Admin {current_user.id} deleted content {content_id}")
    return {"message": "Content deleted", "id": content_id}
