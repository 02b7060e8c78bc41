from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from siteflow.api.deps import get_db, horizon_policy
from siteflow.core.config import get_settings
from siteflow.schemas.cashflow import (
    CompanyForecastOut,
    ProjectForecastOut,
    ScenarioOut,
    ScenarioRequest,
)
from siteflow.services.cashflow import project_forecast
from siteflow.services.company import company_forecast
from siteflow.services.company_settings import load_company_config
from siteflow.services.scenario import ScenarioAdjustments, run_scenario


settings = get_settings()
router = APIRouter(prefix="/cashflow", tags=["cashflow"])


@router.get("/project/{project_id}", response_model=ProjectForecastOut)
def get_project_forecast(
    project_id: int,
    months: int = Query(default=settings.forecast_default_months, ge=1, le=settings.forecast_max_months),
    db: Session = Depends(get_db),
) -> ProjectForecastOut:
    result = project_forecast(
        db,
        project_id,
        months=months,
        policy=horizon_policy(settings),
        max_span_days=settings.max_distribution_days,
    )
    return ProjectForecastOut(**asdict(result))


@router.get("/company", response_model=CompanyForecastOut)
def get_company_forecast(
    months: int = Query(default=settings.forecast_default_months, ge=1, le=settings.forecast_max_months),
    db: Session = Depends(get_db),
) -> CompanyForecastOut:
    result = company_forecast(
        db,
        load_company_config(db),
        months=months,
        policy=horizon_policy(settings),
        max_span_days=settings.max_distribution_days,
    )
    return CompanyForecastOut(**asdict(result))


@router.post("/scenario", response_model=ScenarioOut)
def post_scenario(payload: ScenarioRequest, db: Session = Depends(get_db)) -> ScenarioOut:
    months = payload.months or settings.forecast_default_months
    if months > settings.forecast_max_months:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"months must be at most {settings.forecast_max_months}.",
        )
    result = run_scenario(
        db,
        payload.base_project_id,
        ScenarioAdjustments(**payload.adjustments.model_dump()),
        months=months,
        policy=horizon_policy(settings),
        max_span_days=settings.max_distribution_days,
    )
    return ScenarioOut(**asdict(result))
