from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from siteflow.models.enums import ProjectStatus
from siteflow.models.project import Project
from siteflow.services.cashflow import ForecastMonth, aggregate
from siteflow.services.company_settings import CompanyConfig
from siteflow.services.distribution import (
    DEFAULT_MAX_SPAN_DAYS,
    HorizonPolicy,
    MonthLedger,
    distribute_items,
)
from siteflow.services.schedule_source import resolve_schedule_source
from siteflow.utils.decimal_math import dec, money


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompanySummary:
    total_inflows: Decimal
    total_outflows: Decimal
    net_cashflow: Decimal
    peak_negative: Decimal
    peak_positive: Decimal
    bank_facility: Decimal
    facility_headroom: Decimal


@dataclass(frozen=True)
class CompanyForecast:
    forecast: list[ForecastMonth]
    projects: dict[int, str]
    summary: CompanySummary


def company_forecast(
    db: Session,
    config: CompanyConfig,
    *,
    months: int = 12,
    policy: HorizonPolicy = HorizonPolicy.truncate,
    max_span_days: int = DEFAULT_MAX_SPAN_DAYS,
    today: date | None = None,
) -> CompanyForecast:
    """Sum every active project into one forecast starting this month, plus head office costs.

    Each month also carries the net contribution of every project, collected in the
    same pass that fills the shared ledger.
    """
    anchor = (today or date.today()).replace(day=1)
    ledger = MonthLedger(anchor, months, policy=policy, max_span_days=max_span_days)

    projects = list(
        db.scalars(
            select(Project).where(Project.status == ProjectStatus.active).order_by(Project.id)
        ).all()
    )
    for project in projects:
        ledger.track_project(project.id)
        source = resolve_schedule_source(db, project)
        distribute_items(ledger, source.items, dec(project.retention_percent))

    ledger.add_overhead(config.head_office_monthly_cost)
    result = aggregate(ledger)
    logger.info("Company forecast over %s active projects for %s months.", len(projects), months)

    bank_facility = money(config.bank_facility_limit)
    return CompanyForecast(
        forecast=result.months,
        projects={project.id: project.name for project in projects},
        summary=CompanySummary(
            total_inflows=result.summary.total_inflows,
            total_outflows=result.summary.total_outflows,
            net_cashflow=result.summary.net_cashflow,
            peak_negative=result.summary.peak_negative,
            peak_positive=result.summary.peak_positive,
            bank_facility=bank_facility,
            facility_headroom=money(bank_facility + min(result.summary.peak_negative, money(0))),
        ),
    )
