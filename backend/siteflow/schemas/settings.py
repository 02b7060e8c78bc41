from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from siteflow.schemas.common import ORMModel


class CompanySettingsOut(ORMModel):
    company_name: str
    default_retention_percent: Decimal
    head_office_monthly_cost: Decimal
    bank_facility_limit: Decimal
    gst_rate: Decimal
    updated_at: datetime | None = None


class CompanySettingsUpdateRequest(BaseModel):
    company_name: str | None = Field(default=None, min_length=2, max_length=255)
    default_retention_percent: Decimal | None = Field(default=None, ge=0, le=100)
    head_office_monthly_cost: Decimal | None = Field(default=None, ge=0)
    bank_facility_limit: Decimal | None = Field(default=None, ge=0)
    gst_rate: Decimal | None = Field(default=None, ge=0, le=1)
