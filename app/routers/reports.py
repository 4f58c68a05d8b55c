from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app import models, crud, schemas
from app.database import get_db
from app.dependencies import get_current_admin
from app.core.security import audit_log

router = APIRouter(tags=["casino reports"])

# ============= PUBLIC ENDPOINTS =============

@router.get("/casino-reports", response_model=schemas.CasinoReportListResponse)
def get_public_reports(db: Session = Depends(get_db)):
    reports = crud.get_casino_reports(db)
    return schemas.CasinoReportListResponse(reports=reports, count=len(reports))

# ============= ADMIN ENDPOINTS =============

@router.get("/admin/casino-reports", response_model=schemas.CasinoReportListResponse)
def get_all_reports(
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    reports = crud.get_casino_reports(db)
    return schemas.CasinoReportListResponse(reports=reports, count=len(reports))

@router.post("/admin/casino-reports", response_model=schemas.CasinoReport, status_code=201)
def create_report(
    report_data: schemas.CasinoReportCreate,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    report = crud.create_casino_report(db, report_data)
    audit_log(f"Admin {current_user.id} created casino report {report.id} for '{report.casino_name}'")
    return report

@router.get("/admin/casino-reports/{report_id}", response_model=schemas.CasinoReport)
def get_report(
    report_id: int,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    report = crud.get_casino_report(db, report_id)
    if not report:
        raise HTTPException(status_code=404, detail="Casino report not found")
    return report

@router.put("/admin/casino-reports/{report_id}", response_model=schemas.CasinoReport)
def update_report(
    report_id: int,
    report_update: schemas.CasinoReportUpdate,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    report = crud.update_casino_report(db, report_id, report_update)
    if not report:
        raise HTTPException(status_code=404, detail="Casino report not found")

    audit_log(f"Admin {current_user.id} updated casino report {report_id}")
    return report

@router.delete("/admin/casino-reports/{report_id}")
def delete_report(
    report_id: int,
    current_user: models.User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if not crud.delete_casino_report(db, report_id):
        raise HTTPException(status_code=404, detail="Casino report not found")

    audit_log(f"Admin {current_user.id} deleted casino report {report_id}")
    return {"message": "Casino report deleted", "id": report_id}
