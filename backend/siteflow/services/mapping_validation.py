from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from siteflow.models.enums import AllocationType
from siteflow.models.programme import ProgrammeTask, ProgrammeWbsMapping
from siteflow.models.wbs import WbsItem
from siteflow.services.cashflow import project_or_404
from siteflow.utils.decimal_math import dec, pct


ALLOCATION_TOLERANCE = Decimal("0.1")


@dataclass(frozen=True)
class MappingValidation:
    summary: dict[str, Any]
    unmapped_tasks: list[dict[str, Any]]
    unmapped_wbs: list[dict[str, Any]]
    incomplete_allocations: list[dict[str, Any]]


def validate_mappings(db: Session, project_id: int) -> MappingValidation:
    """Report how completely programme tasks and WBS items are linked to each other.

    Nothing here blocks a forecast; the forecast simply uses whatever allocations exist.
    """
    project_or_404(db, project_id)

    unmapped_tasks = db.execute(
        select(ProgrammeTask.id, ProgrammeTask.code, ProgrammeTask.name)
        .where(
            ProgrammeTask.project_id == project_id,
            ~select(ProgrammeWbsMapping.id)
            .where(ProgrammeWbsMapping.programme_task_id == ProgrammeTask.id)
            .exists(),
        )
        .order_by(ProgrammeTask.sort_order, ProgrammeTask.code)
    ).all()
    unmapped_wbs = db.execute(
        select(WbsItem.id, WbsItem.code, WbsItem.name)
        .where(
            WbsItem.project_id == project_id,
            ~select(ProgrammeWbsMapping.id).where(ProgrammeWbsMapping.wbs_item_id == WbsItem.id).exists(),
        )
        .order_by(WbsItem.code)
    ).all()

    percent_total = func.sum(func.coalesce(ProgrammeWbsMapping.allocation_percent, 100))
    allocation_rows = db.execute(
        select(ProgrammeTask.id, ProgrammeTask.code, ProgrammeTask.name, percent_total)
        .join(ProgrammeWbsMapping, ProgrammeWbsMapping.programme_task_id == ProgrammeTask.id)
        .where(
            ProgrammeTask.project_id == project_id,
            ProgrammeWbsMapping.allocation_type == AllocationType.percent,
        )
        .group_by(ProgrammeTask.id, ProgrammeTask.code, ProgrammeTask.name)
        .order_by(ProgrammeTask.code)
    ).all()
    incomplete = [
        {"id": task_id, "code": code, "name": name, "total_percent": pct(dec(total))}
        for task_id, code, name, total in allocation_rows
        if abs(dec(total) - Decimal("100")) > ALLOCATION_TOLERANCE
    ]

    total_tasks = db.scalar(
        select(func.count(ProgrammeTask.id)).where(ProgrammeTask.project_id == project_id)
    ) or 0
    total_wbs = db.scalar(select(func.count(WbsItem.id)).where(WbsItem.project_id == project_id)) or 0
    total_mappings = db.scalar(
        select(func.count(ProgrammeWbsMapping.id)).where(ProgrammeWbsMapping.project_id == project_id)
    ) or 0
    mapped_tasks = total_tasks - len(unmapped_tasks)

    return MappingValidation(
        summary={
            "total_tasks": total_tasks,
            "mapped_tasks": mapped_tasks,
            "unmapped_tasks": len(unmapped_tasks),
            "total_wbs": total_wbs,
            "mapped_wbs": total_wbs - len(unmapped_wbs),
            "unmapped_wbs": len(unmapped_wbs),
            "total_mappings": total_mappings,
            "incomplete_allocations": len(incomplete),
            "coverage_percent": round(mapped_tasks / total_tasks * 100) if total_tasks > 0 else 0,
            "is_complete": not unmapped_tasks and not unmapped_wbs and not incomplete,
        },
        unmapped_tasks=[{"id": row.id, "code": row.code, "name": row.name} for row in unmapped_tasks],
        unmapped_wbs=[{"id": row.id, "code": row.code, "name": row.name} for row in unmapped_wbs],
        incomplete_allocations=incomplete,
    )
