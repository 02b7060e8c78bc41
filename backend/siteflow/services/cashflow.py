from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from siteflow.models.project import Project
from siteflow.services.distribution import (
    DEFAULT_MAX_SPAN_DAYS,
    HorizonPolicy,
    MonthLedger,
    distribute_items,
)
from siteflow.services.schedule_source import forecast_anchor, resolve_schedule_source
from siteflow.utils.decimal_math import dec, money


@dataclass(frozen=True)
class MonthInflows:
    claims: Decimal
    retention_release: Decimal
    total: Decimal


@dataclass(frozen=True)
class MonthOutflows:
    labour: Decimal
    plant: Decimal
    materials: Decimal
    subcontractors: Decimal
    other: Decimal
    total: Decimal


@dataclass(frozen=True)
class ForecastMonth:
    month: str
    inflows: MonthInflows
    outflows: MonthOutflows
    net: Decimal
    cumulative: Decimal
    projects: dict[int, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class ForecastSummary:
    total_inflows: Decimal
    total_outflows: Decimal
    net_cashflow: Decimal
    peak_negative: Decimal
    peak_positive: Decimal


@dataclass(frozen=True)
class Forecast:
    months: list[ForecastMonth]
    summary: ForecastSummary


@dataclass(frozen=True)
class ProjectForecast:
    project_id: int
    project_name: str
    uses_mappings: bool
    forecast: list[ForecastMonth]
    summary: ForecastSummary


def project_or_404(db: Session, project_id: int) -> Project:
    project = db.get(Project, project_id)
    if project is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found.")
    return project


def aggregate(ledger: MonthLedger) -> Forecast:
    """Roll a filled ledger up into ordered months with totals and a running balance.

    Components are rounded first and every total is built from the rounded values,
    so each month's cumulative equals the previous cumulative plus its net exactly.
    """
    rows: list[ForecastMonth] = []
    cumulative = money(0)
    total_inflows = money(0)
    total_outflows = money(0)

    for month in ledger.months():
        claims = money(month.claims)
        retention_release = money(month.retention_release)
        inflows_total = money(claims + retention_release)

        labour = money(month.labour)
        plant = money(month.plant)
        materials = money(month.materials)
        subcontractors = money(month.subcontractors)
        other = money(month.other)
        outflows_total = money(labour + plant + materials + subcontractors + other)

        net = money(inflows_total - outflows_total)
        cumulative = money(cumulative + net)
        total_inflows = money(total_inflows + inflows_total)
        total_outflows = money(total_outflows + outflows_total)

        rows.append(
            ForecastMonth(
                month=month.key,
                inflows=MonthInflows(
                    claims=claims,
                    retention_release=retention_release,
                    total=inflows_total,
                ),
                outflows=MonthOutflows(
                    labour=labour,
                    plant=plant,
                    materials=materials,
                    subcontractors=subcontractors,
                    other=other,
                    total=outflows_total,
                ),
                net=net,
                cumulative=cumulative,
                projects={
                    project_id: money(amount)
                    for project_id, amount in sorted(month.projects.items())
                },
            )
        )

    cumulative_values = [row.cumulative for row in rows]
    return Forecast(
        months=rows,
        summary=ForecastSummary(
            total_inflows=total_inflows,
            total_outflows=total_outflows,
            net_cashflow=cumulative,
            peak_negative=min(cumulative_values, default=money(0)),
            peak_positive=max(cumulative_values, default=money(0)),
        ),
    )


def project_forecast(
    db: Session,
    project_id: int,
    *,
    months: int = 12,
    policy: HorizonPolicy = HorizonPolicy.truncate,
    max_span_days: int = DEFAULT_MAX_SPAN_DAYS,
    today: date | None = None,
) -> ProjectForecast:
    project = project_or_404(db, project_id)
    source = resolve_schedule_source(db, project)
    anchor = forecast_anchor(project, source, today or date.today())

    ledger = MonthLedger(anchor, months, policy=policy, max_span_days=max_span_days)
    distribute_items(ledger, source.items, dec(project.retention_percent))
    result = aggregate(ledger)

    return ProjectForecast(
        project_id=project.id,
        project_name=project.name,
        uses_mappings=source.uses_mappings,
        forecast=result.months,
        summary=result.summary,
    )
