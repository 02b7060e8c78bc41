from datetime import date
from decimal import Decimal

from pydantic import BaseModel


class DashboardProjectOut(BaseModel):
    id: int
    code: str
    name: str
    status: str


class ProgrammeStatusOut(BaseModel):
    percent_complete: Decimal
    start_date: date | None
    end_date: date | None
    items_completed: int
    items_in_progress: int
    items_total: int


class CostStatusOut(BaseModel):
    budget: Decimal
    actuals: Decimal
    forecast: Decimal
    variance: Decimal
    variance_percent: Decimal


class ProgressStatusOut(BaseModel):
    percent_complete: Decimal
    earned_value: Decimal
    cpi: Decimal
    spi: Decimal


class RevenueStatusOut(BaseModel):
    contract_value: Decimal
    variations: Decimal
    revised_contract: Decimal
    claimed: Decimal
    received: Decimal
    outstanding: Decimal


class MarginStatusOut(BaseModel):
    budget: Decimal
    budget_percent: Decimal
    forecast: Decimal
    forecast_percent: Decimal


class AlertOut(BaseModel):
    type: str
    severity: str
    message: str


class ProjectDashboardOut(BaseModel):
    project: DashboardProjectOut
    programme: ProgrammeStatusOut
    cost: CostStatusOut
    progress: ProgressStatusOut
    revenue: RevenueStatusOut
    margin: MarginStatusOut
    alerts: list[AlertOut]


class CompanyDashboardSummaryOut(BaseModel):
    active_projects: int
    active_contract_value: Decimal
    active_budget: Decimal
    tenders_in_progress: int
    tender_pipeline_value: Decimal
    completed_projects: int
    outstanding_claims: Decimal
    bank_facility: Decimal


class ActiveProjectOut(BaseModel):
    id: int
    code: str
    name: str
    contract_value: Decimal
    budget: Decimal
    margin_percent: Decimal


class TenderOut(BaseModel):
    id: int
    code: str
    name: str
    client: str | None
    tender_value: Decimal


class OutstandingClaimOut(BaseModel):
    project_code: str
    project_name: str
    claim_number: int
    amount: Decimal
    status: str
    submitted_date: date | None
    days_outstanding: int


class AttentionItemOut(BaseModel):
    project_id: int
    project_code: str
    project_name: str
    issue: str
    severity: str


class CompanyDashboardOut(BaseModel):
    summary: CompanyDashboardSummaryOut
    active_projects: list[ActiveProjectOut]
    tender_pipeline: list[TenderOut]
    outstanding_claims: list[OutstandingClaimOut]
    attention_required: list[AttentionItemOut]
