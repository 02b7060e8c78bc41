from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import ClassVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from siteflow.models.enums import AllocationType
from siteflow.models.programme import ProgrammeTask, ProgrammeWbsMapping
from siteflow.models.project import Project
from siteflow.models.wbs import WbsItem
from siteflow.services.cost_resolver import resolve_costs_bulk
from siteflow.services.distribution import ONE, ZERO, CostBearingItem
from siteflow.utils.decimal_math import dec


@dataclass(frozen=True)
class ProgrammeTasks:
    """Costs follow programme task dates through task/WBS allocations."""

    items: tuple[CostBearingItem, ...]
    earliest_start: date | None
    uses_mappings: ClassVar[bool] = True


@dataclass(frozen=True)
class LegacyWbs:
    """Costs follow the dates stored directly on WBS items."""

    items: tuple[CostBearingItem, ...]
    uses_mappings: ClassVar[bool] = False


ScheduleSource = ProgrammeTasks | LegacyWbs


def allocation_factor(
    mapping: ProgrammeWbsMapping,
    wbs_budget_total: Decimal,
    wbs_contract_value: Decimal = ZERO,
) -> Decimal:
    """Share of the WBS item carried by one task mapping.

    Value allocations are taken against the cost budget, or against the
    contract value for revenue-only items. A value against an item with
    neither allocates nothing.
    """
    if mapping.allocation_type == AllocationType.value and mapping.allocation_value is not None:
        if wbs_budget_total > ZERO:
            return dec(mapping.allocation_value) / wbs_budget_total
        if wbs_contract_value > ZERO:
            return dec(mapping.allocation_value) / wbs_contract_value
        return ZERO
    if mapping.allocation_percent is None:
        return ONE
    return dec(mapping.allocation_percent) / Decimal("100")


def _programme_source(db: Session, project: Project, tasks: list[ProgrammeTask]) -> ProgrammeTasks:
    tasks_by_id = {task.id: task for task in tasks}
    rows = db.execute(
        select(ProgrammeWbsMapping, WbsItem)
        .join(WbsItem, WbsItem.id == ProgrammeWbsMapping.wbs_item_id)
        .where(ProgrammeWbsMapping.programme_task_id.in_(list(tasks_by_id)))
        .order_by(ProgrammeWbsMapping.programme_task_id, ProgrammeWbsMapping.id)
    ).all()
    costs = resolve_costs_bulk(db, [wbs.id for _, wbs in rows])

    items: list[CostBearingItem] = []
    for mapping, wbs in rows:
        task = tasks_by_id[mapping.programme_task_id]
        wbs_costs = costs[wbs.id]
        items.append(
            CostBearingItem(
                item_id=task.id,
                start_date=task.start_date,
                end_date=task.end_date,
                costs=wbs_costs,
                allocation_factor=allocation_factor(
                    mapping,
                    wbs_costs.total,
                    dec(wbs.quantity) * dec(wbs.schedule_of_rates_rate),
                ),
                is_payment_milestone=bool(wbs.is_payment_milestone),
                quantity=dec(wbs.quantity),
                schedule_of_rates_rate=dec(wbs.schedule_of_rates_rate),
                project_id=project.id,
                source="task",
            )
        )

    earliest = min((task.start_date for task in tasks if task.start_date is not None), default=None)
    return ProgrammeTasks(items=tuple(items), earliest_start=earliest)


def _legacy_source(db: Session, project: Project) -> LegacyWbs:
    wbs_items = list(
        db.scalars(
            select(WbsItem)
            .where(WbsItem.project_id == project.id, WbsItem.start_date.is_not(None))
            .order_by(WbsItem.start_date, WbsItem.id)
        ).all()
    )
    costs = resolve_costs_bulk(db, [item.id for item in wbs_items])
    return LegacyWbs(
        items=tuple(
            CostBearingItem(
                item_id=item.id,
                start_date=item.start_date,
                end_date=item.end_date,
                costs=costs[item.id],
                is_payment_milestone=bool(item.is_payment_milestone),
                quantity=dec(item.quantity),
                schedule_of_rates_rate=dec(item.schedule_of_rates_rate),
                project_id=project.id,
                source="wbs",
            )
            for item in wbs_items
        )
    )


def resolve_schedule_source(db: Session, project: Project) -> ScheduleSource:
    """Programme tasks win as soon as any task of the project has a start date."""
    tasks = list(
        db.scalars(
            select(ProgrammeTask)
            .where(ProgrammeTask.project_id == project.id, ProgrammeTask.start_date.is_not(None))
            .order_by(ProgrammeTask.start_date, ProgrammeTask.id)
        ).all()
    )
    if tasks:
        return _programme_source(db, project, tasks)
    return _legacy_source(db, project)


def forecast_anchor(project: Project, source: ScheduleSource, today: date) -> date:
    if isinstance(source, ProgrammeTasks) and source.earliest_start is not None:
        return source.earliest_start
    return project.start_date or today
