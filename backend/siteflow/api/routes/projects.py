from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from siteflow.api.deps import get_db
from siteflow.models.enums import ProjectStatus
from siteflow.models.project import Project
from siteflow.schemas.projects import ProjectSummary
from siteflow.services.cashflow import project_or_404


router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=list[ProjectSummary])
def list_projects(
    status: ProjectStatus | None = None,
    db: Session = Depends(get_db),
) -> list[ProjectSummary]:
    stmt = select(Project).order_by(Project.code)
    if status is not None:
        stmt = stmt.where(Project.status == status)
    return [ProjectSummary.model_validate(project) for project in db.scalars(stmt).all()]


@router.get("/{project_id}", response_model=ProjectSummary)
def get_project(project_id: int, db: Session = Depends(get_db)) -> ProjectSummary:
    return ProjectSummary.model_validate(project_or_404(db, project_id))
