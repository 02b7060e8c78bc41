from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from siteflow.api.deps import get_db
from siteflow.schemas.settings import CompanySettingsOut, CompanySettingsUpdateRequest
from siteflow.services.company_settings import get_or_create_settings, update_company_settings


router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/company", response_model=CompanySettingsOut)
def get_company_settings(db: Session = Depends(get_db)) -> CompanySettingsOut:
    row = get_or_create_settings(db)
    db.commit()
    return CompanySettingsOut.model_validate(row)


@router.put("/company", response_model=CompanySettingsOut)
def put_company_settings(
    payload: CompanySettingsUpdateRequest,
    db: Session = Depends(get_db),
) -> CompanySettingsOut:
    row = update_company_settings(db, payload.model_dump(exclude_none=True))
    db.commit()
    db.refresh(row)
    return CompanySettingsOut.model_validate(row)
