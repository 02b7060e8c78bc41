from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from siteflow.api.deps import get_db
from siteflow.schemas.mappings import MappingValidationOut
from siteflow.services.mapping_validation import validate_mappings


router = APIRouter(prefix="/mappings", tags=["mappings"])


@router.get("/validation/project/{project_id}", response_model=MappingValidationOut)
def get_mapping_validation(project_id: int, db: Session = Depends(get_db)) -> MappingValidationOut:
    return MappingValidationOut(**asdict(validate_mappings(db, project_id)))
