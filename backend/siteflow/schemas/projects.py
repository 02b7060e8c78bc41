from datetime import date
from decimal import Decimal

from siteflow.models.enums import ProjectStatus
from siteflow.schemas.common import ORMModel


class ProjectSummary(ORMModel):
    id: int
    code: str
    name: str
    client: str | None
    status: ProjectStatus
    start_date: date | None
    end_date: date | None
    retention_percent: Decimal
    payment_terms_days: int
