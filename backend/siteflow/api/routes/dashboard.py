from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from siteflow.api.deps import get_db
from siteflow.schemas.dashboard import CompanyDashboardOut, ProjectDashboardOut
from siteflow.services.company_settings import load_company_config
from siteflow.services.dashboard import company_dashboard, project_dashboard


router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/project/{project_id}", response_model=ProjectDashboardOut)
def get_project_dashboard(
    project_id: int,
    as_of: date | None = None,
    db: Session = Depends(get_db),
) -> ProjectDashboardOut:
    return ProjectDashboardOut(**asdict(project_dashboard(db, project_id, as_of=as_of)))


@router.get("/company", response_model=CompanyDashboardOut)
def get_company_dashboard(
    as_of: date | None = None,
    db: Session = Depends(get_db),
) -> CompanyDashboardOut:
    return CompanyDashboardOut(**asdict(company_dashboard(db, load_company_config(db), as_of=as_of)))
