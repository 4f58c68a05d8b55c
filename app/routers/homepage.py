from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session
from app import models, crud, schemas
from app.database import get_db
from app.dependencies import get_current_admin
from app.core.security import audit_log

router = APIRouter(tags=["homepage"])


def _serialize(component: schemas.HomepageComponent, item) -> dict:
    response_schema = crud.HOMEPAGE_COMPONENTS[component][3]
    return response_schema.model_validate(item).model_dump()


def _validate(component: schemas.HomepageComponent, payload: dict, partial: bool) -> dict:
    _, create_schema, update_schema, _ = crud.HOMEPAGE_COMPONENTS[component]
    schema = update_schema if partial else create_schema
    try:
        return schema.model_validate(payload).model_dump(exclude_unset=partial)
    except ValidationError as e:
        error_msg = e.errors()[0].get("msg", "Invalid input") if e.errors() else "Invalid input"
        raise HTTPException(status_code=422, detail=error_msg)


@router.get("/homepage", response_model=schemas.HomepageContent)
def get_homepage_content(db: Session = Depends(get_db)):
    return schemas.HomepageContent(**{
        component.value: crud.get_homepage_items(db, component, active_only=True)
        for component in schemas.HomepageComponent
    })


@router.get("/admin/homepage/{component}")
def list_component_items(
    component: schemas.HomepageComponent,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    items = crud.get_homepage_items(db, component)
    return {"component": component.value, "items": [_serialize(component, item) for item in items]}


@router.post("/admin/homepage/{component}", status_code=201)
def create_component_item(
    component: schemas.HomepageComponent,
    payload: dict = Body(...),
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    item = crud.create_homepage_item(db, component, _validate(component, payload, partial=False))
    audit_log(f"Admin {current_user.id} created {component.value} item {item.id}")
    return {"success": True, "data": _serialize(component, item)}


@router.get("/admin/homepage/{component}/{item_id}")
def get_component_item(
    component: schemas.HomepageComponent,
    item_id: int,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    item = crud.get_homepage_item(db, component, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    return {"success": True, "data": _serialize(component, item)}


@router.put("/admin/homepage/{component}/{item_id}")
def update_component_item(
    component: schemas.HomepageComponent,
    item_id: int,
    payload: dict = Body(...),
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    item = crud.update_homepage_item(db, component, item_id, _validate(component, payload, partial=True))
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")

    audit_log(f"Admin {current_user.id} updated {component.value} item {item_id}")
    return {"success": True, "data": _serialize(component, item)}


@router.delete("/admin/homepage/{component}/{item_id}")
def delete_component_item(
    component: schemas.HomepageComponent,
    item_id: int,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if not crud.delete_homepage_item(db, component, item_id):
        raise HTTPException(status_code=404, detail="Item not found")

    audit_log(f"Admin {current_user.id} deleted {component.value} item {item_id}")
    return {"success": True, "id": item_id}
