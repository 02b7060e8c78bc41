from decimal import Decimal

from pydantic import BaseModel, Field


class MonthInflowsOut(BaseModel):
    claims: Decimal
    retention_release: Decimal
    total: Decimal


class MonthOutflowsOut(BaseModel):
    labour: Decimal
    plant: Decimal
    materials: Decimal
    subcontractors: Decimal
    other: Decimal
    total: Decimal


class ForecastMonthOut(BaseModel):
    month: str
    inflows: MonthInflowsOut
    outflows: MonthOutflowsOut
    net: Decimal
    cumulative: Decimal


class CompanyForecastMonthOut(ForecastMonthOut):
    projects: dict[int, Decimal]


class ForecastSummaryOut(BaseModel):
    total_inflows: Decimal
    total_outflows: Decimal
    net_cashflow: Decimal
    peak_negative: Decimal
    peak_positive: Decimal


class CompanySummaryOut(ForecastSummaryOut):
    bank_facility: Decimal
    facility_headroom: Decimal


class ProjectForecastOut(BaseModel):
    project_id: int
    project_name: str
    uses_mappings: bool
    forecast: list[ForecastMonthOut]
    summary: ForecastSummaryOut


class CompanyForecastOut(BaseModel):
    forecast: list[CompanyForecastMonthOut]
    projects: dict[int, str]
    summary: CompanySummaryOut


class ScenarioAdjustmentsIn(BaseModel):
    delay_weeks: int = Field(default=0, ge=0, le=520)
    cost_increase_percent: Decimal = Field(default=Decimal("0"), ge=0, le=1000)
    payment_delay_days: int = Field(default=0, ge=0, le=3650)


class ScenarioRequest(BaseModel):
    base_project_id: int
    months: int | None = Field(default=None, ge=1)
    adjustments: ScenarioAdjustmentsIn = Field(default_factory=ScenarioAdjustmentsIn)


class ScenarioImpactOut(BaseModel):
    total_cost_increase: Decimal
    peak_negative: Decimal


class ScenarioOut(BaseModel):
    project_id: int
    adjustments: ScenarioAdjustmentsIn
    forecast: list[ForecastMonthOut]
    summary: ForecastSummaryOut
    impact: ScenarioImpactOut
