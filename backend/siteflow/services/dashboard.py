from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from siteflow.models.actuals import (
    ActualLabourHours,
    ActualMaterial,
    ActualPlantHours,
    ActualQuantity,
    CostEntry,
    DailyLog,
)
from siteflow.models.commercial import ProgressClaim, Variation
from siteflow.models.enums import ClaimStatus, ProjectStatus, VariationStatus
from siteflow.models.project import Project
from siteflow.models.resources import LabourType, PlantType
from siteflow.models.wbs import WbsItem
from siteflow.services.cashflow import project_or_404
from siteflow.services.company_settings import CompanyConfig
from siteflow.services.cost_resolver import project_budget_total, resolve_costs_bulk
from siteflow.services.earned_value import (
    ProjectAlert,
    compute_earned_value,
    evaluate_alerts,
    programme_percent_complete,
)
from siteflow.utils.decimal_math import dec, money, pct


ZERO = Decimal("0")
HUNDRED = Decimal("100")
COST_ATTENTION_RATIO = Decimal("0.9")


@dataclass(frozen=True)
class ProjectDashboard:
    project: dict[str, Any]
    programme: dict[str, Any]
    cost: dict[str, Any]
    progress: dict[str, Any]
    revenue: dict[str, Any]
    margin: dict[str, Any]
    alerts: list[ProjectAlert]


def _programme_status(db: Session, project_id: int, as_of: date) -> dict[str, Any]:
    dated = (
        WbsItem.project_id == project_id,
        WbsItem.start_date.is_not(None),
        WbsItem.end_date.is_not(None),
    )
    total, completed, in_progress, earliest, latest = db.execute(
        select(
            func.count(WbsItem.id),
            func.coalesce(func.sum(case((WbsItem.end_date < as_of, 1), else_=0)), 0),
            func.coalesce(
                func.sum(
                    case(
                        ((WbsItem.start_date <= as_of) & (WbsItem.end_date >= as_of), 1),
                        else_=0,
                    )
                ),
                0,
            ),
            func.min(WbsItem.start_date),
            func.max(WbsItem.end_date),
        ).where(*dated)
    ).one()
    return {
        "percent_complete": programme_percent_complete(earliest, latest, as_of),
        "start_date": earliest,
        "end_date": latest,
        "items_completed": int(completed or 0),
        "items_in_progress": int(in_progress or 0),
        "items_total": int(total or 0),
    }


def actual_cost_total(db: Session, project_id: int) -> Decimal:
    plant = db.scalar(
        select(func.coalesce(func.sum(ActualPlantHours.hours * PlantType.hourly_rate), 0))
        .join(DailyLog, DailyLog.id == ActualPlantHours.daily_log_id)
        .join(PlantType, PlantType.id == ActualPlantHours.plant_type_id)
        .where(DailyLog.project_id == project_id)
    )
    labour = db.scalar(
        select(
            func.coalesce(
                func.sum(ActualLabourHours.hours * ActualLabourHours.workers * LabourType.hourly_rate),
                0,
            )
        )
        .join(DailyLog, DailyLog.id == ActualLabourHours.daily_log_id)
        .join(LabourType, LabourType.id == ActualLabourHours.labour_type_id)
        .where(DailyLog.project_id == project_id)
    )
    materials = db.scalar(
        select(func.coalesce(func.sum(ActualMaterial.quantity * ActualMaterial.unit_cost), 0))
        .join(DailyLog, DailyLog.id == ActualMaterial.daily_log_id)
        .where(DailyLog.project_id == project_id)
    )
    entries = db.scalar(
        select(func.coalesce(func.sum(CostEntry.amount), 0)).where(CostEntry.project_id == project_id)
    )
    return dec(plant) + dec(labour) + dec(materials) + dec(entries)


def progress_percent(db: Session, project_id: int) -> Decimal:
    """Quantity-weighted physical completion across measured WBS items."""
    completed_by_item = (
        select(
            ActualQuantity.wbs_item_id.label("wbs_item_id"),
            func.sum(ActualQuantity.quantity_completed).label("completed"),
        )
        .group_by(ActualQuantity.wbs_item_id)
        .subquery()
    )
    total_qty, completed_qty = db.execute(
        select(
            func.coalesce(func.sum(WbsItem.quantity), 0),
            func.coalesce(func.sum(func.coalesce(completed_by_item.c.completed, 0)), 0),
        )
        .select_from(WbsItem)
        .outerjoin(completed_by_item, completed_by_item.c.wbs_item_id == WbsItem.id)
        .where(WbsItem.project_id == project_id, WbsItem.quantity > 0)
    ).one()
    total_qty = dec(total_qty)
    if total_qty <= ZERO:
        return ZERO
    return dec(completed_qty) / total_qty * HUNDRED


def _revenue_status(db: Session, project_id: int) -> dict[str, Decimal]:
    contract_value = dec(
        db.scalar(
            select(
                func.coalesce(func.sum(WbsItem.quantity * WbsItem.schedule_of_rates_rate), 0)
            ).where(WbsItem.project_id == project_id, WbsItem.is_payment_milestone.is_(True))
        )
    )
    approved_variations = dec(
        db.scalar(
            select(func.coalesce(func.sum(Variation.approved_value), 0)).where(
                Variation.project_id == project_id,
                Variation.status == VariationStatus.approved,
            )
        )
    )
    claimed, received, outstanding = db.execute(
        select(
            func.coalesce(func.sum(ProgressClaim.this_claim), 0),
            func.coalesce(
                func.sum(
                    case(
                        (ProgressClaim.status == ClaimStatus.paid, ProgressClaim.certified_amount),
                        else_=0,
                    )
                ),
                0,
            ),
            func.coalesce(
                func.sum(
                    case(
                        (
                            ProgressClaim.status.in_([ClaimStatus.submitted, ClaimStatus.certified]),
                            ProgressClaim.this_claim,
                        ),
                        else_=0,
                    )
                ),
                0,
            ),
        ).where(ProgressClaim.project_id == project_id, ProgressClaim.status != ClaimStatus.draft)
    ).one()
    return {
        "contract_value": money(contract_value),
        "variations": money(approved_variations),
        "revised_contract": money(contract_value + approved_variations),
        "claimed": money(dec(claimed)),
        "received": money(dec(received)),
        "outstanding": money(dec(outstanding)),
    }


def project_dashboard(db: Session, project_id: int, *, as_of: date | None = None) -> ProjectDashboard:
    """Earned value, margin and health alerts for one project as of a given day."""
    as_of = as_of or date.today()
    project = project_or_404(db, project_id)

    programme = _programme_status(db, project.id, as_of)
    budget = project_budget_total(db, project.id)
    actuals = actual_cost_total(db, project.id)
    progress = progress_percent(db, project.id)
    snapshot = compute_earned_value(budget, progress, actuals, programme["percent_complete"])
    revenue = _revenue_status(db, project.id)

    contract_value = revenue["revised_contract"]
    margin_budget = money(contract_value - budget)
    margin_forecast = money(contract_value - snapshot.forecast_at_completion)
    forecast_variance = money(budget - snapshot.forecast_at_completion)

    alerts = evaluate_alerts(
        cpi=snapshot.cpi,
        progress_percent=snapshot.percent_complete,
        programme_percent=snapshot.programme_percent_complete,
        contract_value=contract_value,
        margin_forecast=margin_forecast,
        outstanding_claims=revenue["outstanding"],
    )

    return ProjectDashboard(
        project={
            "id": project.id,
            "code": project.code,
            "name": project.name,
            "status": project.status.value,
        },
        programme=programme,
        cost={
            "budget": money(budget),
            "actuals": money(actuals),
            "forecast": snapshot.forecast_at_completion,
            "variance": forecast_variance,
            "variance_percent": pct(forecast_variance / budget * HUNDRED) if budget > ZERO else pct(0),
        },
        progress={
            "percent_complete": snapshot.percent_complete,
            "earned_value": snapshot.earned_value,
            "cpi": snapshot.cpi,
            "spi": snapshot.spi,
        },
        revenue=revenue,
        margin={
            "budget": margin_budget,
            "budget_percent": pct(margin_budget / contract_value * HUNDRED) if contract_value > ZERO else pct(0),
            "forecast": margin_forecast,
            "forecast_percent": (
                pct(margin_forecast / contract_value * HUNDRED) if contract_value > ZERO else pct(0)
            ),
        },
        alerts=alerts,
    )


@dataclass(frozen=True)
class CompanyDashboard:
    summary: dict[str, Any]
    active_projects: list[dict[str, Any]]
    tender_pipeline: list[dict[str, Any]]
    outstanding_claims: list[dict[str, Any]]
    attention_required: list[dict[str, Any]]


def _contract_values(db: Session, project_ids: list[int]) -> dict[int, Decimal]:
    if not project_ids:
        return {}
    rows = db.execute(
        select(
            WbsItem.project_id,
            func.coalesce(func.sum(WbsItem.quantity * WbsItem.schedule_of_rates_rate), 0),
        )
        .where(WbsItem.project_id.in_(project_ids), WbsItem.is_payment_milestone.is_(True))
        .group_by(WbsItem.project_id)
    ).all()
    return {project_id: dec(total) for project_id, total in rows}


def _budgets(db: Session, project_ids: list[int]) -> dict[int, Decimal]:
    if not project_ids:
        return {}
    owners = dict(
        db.execute(select(WbsItem.id, WbsItem.project_id).where(WbsItem.project_id.in_(project_ids))).all()
    )
    budgets = {project_id: ZERO for project_id in project_ids}
    for item_id, costs in resolve_costs_bulk(db, list(owners)).items():
        budgets[owners[item_id]] += costs.total
    return budgets


def _cost_attention(actuals: Decimal, budget: Decimal) -> str | None:
    """Severity once actual cost passes 90% of budget, or None while it is comfortably under."""
    if budget <= ZERO or actuals <= budget * COST_ATTENTION_RATIO:
        return None
    return "high" if actuals > budget else "medium"


def company_dashboard(db: Session, config: CompanyConfig, *, as_of: date | None = None) -> CompanyDashboard:
    """Portfolio view: active work, tender pipeline, unpaid claims and cost warnings."""
    as_of = as_of or date.today()

    counts = dict(db.execute(select(Project.status, func.count(Project.id)).group_by(Project.status)).all())

    active = list(
        db.scalars(select(Project).where(Project.status == ProjectStatus.active).order_by(Project.code)).all()
    )
    tenders = list(
        db.scalars(
            select(Project)
            .where(Project.status == ProjectStatus.tender)
            .order_by(Project.created_at.desc(), Project.id.desc())
        ).all()
    )
    contract_values = _contract_values(db, [project.id for project in active + tenders])
    budgets = _budgets(db, [project.id for project in active])

    active_rows = []
    attention = []
    for project in active:
        contract_value = contract_values.get(project.id, ZERO)
        budget = budgets[project.id]
        active_rows.append(
            {
                "id": project.id,
                "code": project.code,
                "name": project.name,
                "contract_value": money(contract_value),
                "budget": money(budget),
                "margin_percent": (
                    pct((contract_value - budget) / contract_value * HUNDRED)
                    if contract_value > ZERO
                    else pct(0)
                ),
            }
        )
        severity = _cost_attention(actual_cost_total(db, project.id), budget)
        if severity is not None:
            attention.append(
                {
                    "project_id": project.id,
                    "project_code": project.code,
                    "project_name": project.name,
                    "issue": "Cost approaching budget",
                    "severity": severity,
                }
            )

    tender_rows = [
        {
            "id": project.id,
            "code": project.code,
            "name": project.name,
            "client": project.client,
            "tender_value": money(contract_values.get(project.id, ZERO)),
        }
        for project in tenders
    ]

    claim_rows = []
    for claim, project_code, project_name in db.execute(
        select(ProgressClaim, Project.code, Project.name)
        .join(Project, Project.id == ProgressClaim.project_id)
        .where(ProgressClaim.status.in_([ClaimStatus.submitted, ClaimStatus.certified]))
        .order_by(ProgressClaim.submitted_date.is_(None), ProgressClaim.submitted_date, ProgressClaim.id)
    ).all():
        claim_rows.append(
            {
                "project_code": project_code,
                "project_name": project_name,
                "claim_number": claim.claim_number,
                "amount": money(dec(claim.this_claim)),
                "status": claim.status.value,
                "submitted_date": claim.submitted_date,
                "days_outstanding": (
                    max((as_of - claim.submitted_date).days, 0) if claim.submitted_date is not None else 0
                ),
            }
        )

    return CompanyDashboard(
        summary={
            "active_projects": counts.get(ProjectStatus.active, 0),
            "active_contract_value": money(sum((row["contract_value"] for row in active_rows), ZERO)),
            "active_budget": money(sum((row["budget"] for row in active_rows), ZERO)),
            "tenders_in_progress": counts.get(ProjectStatus.tender, 0),
            "tender_pipeline_value": money(sum((row["tender_value"] for row in tender_rows), ZERO)),
            "completed_projects": counts.get(ProjectStatus.completed, 0),
            "outstanding_claims": money(sum((row["amount"] for row in claim_rows), ZERO)),
            "bank_facility": money(config.bank_facility_limit),
        },
        active_projects=active_rows,
        tender_pipeline=tender_rows,
        outstanding_claims=claim_rows,
        attention_required=attention,
    )
