from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from siteflow.models.enums import AllocationType, ProjectStatus
from siteflow.models.programme import ProgrammeTask, ProgrammeWbsMapping
from siteflow.models.project import Project
from siteflow.models.resources import LabourType, MaterialType, PlantType, SubcontractorType
from siteflow.models.wbs import (
    WbsItem,
    WbsLabourAssignment,
    WbsMaterialAssignment,
    WbsPlantAssignment,
    WbsSubcontractorAssignment,
)
from siteflow.services.company_settings import get_or_create_settings

DEMO_PROJECT_CODE = "DEMO-001"


def _get_or_create_plant(db: Session, *, code: str, description: str, hourly_rate: str) -> PlantType:
    row = db.scalar(select(PlantType).where(PlantType.code == code))
    if row is not None:
        return row
    row = PlantType(code=code, description=description, hourly_rate=Decimal(hourly_rate))
    db.add(row)
    db.flush()
    return row


def _get_or_create_labour(db: Session, *, code: str, role: str, hourly_rate: str) -> LabourType:
    row = db.scalar(select(LabourType).where(LabourType.code == code))
    if row is not None:
        return row
    row = LabourType(code=code, role=role, hourly_rate=Decimal(hourly_rate))
    db.add(row)
    db.flush()
    return row


def _get_or_create_material(
    db: Session,
    *,
    code: str,
    description: str,
    unit: str,
    base_rate: str,
) -> MaterialType:
    row = db.scalar(select(MaterialType).where(MaterialType.code == code))
    if row is not None:
        return row
    row = MaterialType(code=code, description=description, unit=unit, base_rate=Decimal(base_rate))
    db.add(row)
    db.flush()
    return row


def _get_or_create_subcontractor(db: Session, *, code: str, trade: str) -> SubcontractorType:
    row = db.scalar(select(SubcontractorType).where(SubcontractorType.code == code))
    if row is not None:
        return row
    row = SubcontractorType(code=code, trade=trade)
    db.add(row)
    db.flush()
    return row


def _add_wbs_item(
    db: Session,
    *,
    project: Project,
    code: str,
    name: str,
    start: date,
    days: int,
    quantity: str,
    unit: str,
    rate: str,
) -> WbsItem:
    item = WbsItem(
        project_id=project.id,
        code=code,
        name=name,
        quantity=Decimal(quantity),
        unit=unit,
        start_date=start,
        end_date=start + timedelta(days=days - 1),
        duration_days=days,
        is_payment_milestone=True,
        schedule_of_rates_rate=Decimal(rate),
    )
    db.add(item)
    db.flush()
    return item


def seed_demo_data(db: Session, *, today: date | None = None) -> None:
    """Insert company settings and one mapped demo project; safe to run repeatedly."""
    get_or_create_settings(db)
    if db.scalar(select(Project.id).where(Project.code == DEMO_PROJECT_CODE)) is not None:
        db.commit()
        return

    start = (today or date.today()).replace(day=1)

    excavator = _get_or_create_plant(db, code="EX20", description="20t excavator", hourly_rate="165")
    roller = _get_or_create_plant(db, code="RL10", description="10t smooth drum roller", hourly_rate="120")
    labourer = _get_or_create_labour(db, code="LAB", role="General labourer", hourly_rate="38")
    operator = _get_or_create_labour(db, code="OPR", role="Plant operator", hourly_rate="46")
    aggregate = _get_or_create_material(
        db, code="AP40", description="AP40 basecourse", unit="t", base_rate="42"
    )
    pipe = _get_or_create_material(db, code="PVC300", description="300mm PVC pipe", unit="m", base_rate="95")
    surfacing = _get_or_create_subcontractor(db, code="SURF", trade="Asphalt surfacing")

    project = Project(
        code=DEMO_PROJECT_CODE,
        name="Riverside Subdivision Stage 2",
        client="Riverside Developments Ltd",
        status=ProjectStatus.active,
        start_date=start,
        end_date=start + timedelta(days=150),
        retention_percent=Decimal("5"),
        payment_terms_days=20,
    )
    db.add(project)
    db.flush()

    earthworks = _add_wbs_item(
        db, project=project, code="1.1", name="Bulk earthworks",
        start=start, days=45, quantity="12000", unit="m3", rate="18.50",
    )
    drainage = _add_wbs_item(
        db, project=project, code="2.1", name="Stormwater drainage",
        start=start + timedelta(days=30), days=60, quantity="850", unit="m", rate="310",
    )
    pavement = _add_wbs_item(
        db, project=project, code="3.1", name="Road pavement and surfacing",
        start=start + timedelta(days=80), days=60, quantity="6400", unit="m2", rate="68",
    )

    db.add_all(
        [
            WbsPlantAssignment(
                wbs_item_id=earthworks.id, plant_type_id=excavator.id,
                budgeted_hours=Decimal("360"), hourly_rate=excavator.hourly_rate,
            ),
            WbsLabourAssignment(
                wbs_item_id=earthworks.id, labour_type_id=operator.id,
                budgeted_hours=Decimal("360"), hourly_rate=operator.hourly_rate, quantity=1,
            ),
            WbsLabourAssignment(
                wbs_item_id=drainage.id, labour_type_id=labourer.id,
                budgeted_hours=Decimal("480"), hourly_rate=labourer.hourly_rate, quantity=3,
            ),
            WbsMaterialAssignment(
                wbs_item_id=drainage.id, material_type_id=pipe.id,
                budgeted_quantity=Decimal("850"), unit_rate=pipe.base_rate,
            ),
            WbsPlantAssignment(
                wbs_item_id=pavement.id, plant_type_id=roller.id,
                budgeted_hours=Decimal("200"), hourly_rate=roller.hourly_rate,
            ),
            WbsMaterialAssignment(
                wbs_item_id=pavement.id, material_type_id=aggregate.id,
                budgeted_quantity=Decimal("2600"), unit_rate=aggregate.base_rate,
            ),
            WbsSubcontractorAssignment(
                wbs_item_id=pavement.id, subcontractor_type_id=surfacing.id,
                description="Chipseal and AC surfacing", budgeted_value=Decimal("145000"),
            ),
        ]
    )

    tasks = []
    for index, (code, name, offset, days) in enumerate(
        [
            ("P1", "Site establishment and earthworks", 0, 50),
            ("P2", "Drainage installation", 35, 55),
            ("P3", "Basecourse", 85, 30),
            ("P4", "Surfacing", 110, 25),
        ]
    ):
        task_start = start + timedelta(days=offset)
        task = ProgrammeTask(
            project_id=project.id,
            code=code,
            name=name,
            sort_order=index,
            start_date=task_start,
            end_date=task_start + timedelta(days=days - 1),
            duration_days=days,
        )
        db.add(task)
        tasks.append(task)
    db.flush()

    db.add_all(
        [
            ProgrammeWbsMapping(
                project_id=project.id, programme_task_id=tasks[0].id, wbs_item_id=earthworks.id,
                allocation_type=AllocationType.percent, allocation_percent=Decimal("100"),
            ),
            ProgrammeWbsMapping(
                project_id=project.id, programme_task_id=tasks[1].id, wbs_item_id=drainage.id,
                allocation_type=AllocationType.percent, allocation_percent=Decimal("100"),
            ),
            ProgrammeWbsMapping(
                project_id=project.id, programme_task_id=tasks[2].id, wbs_item_id=pavement.id,
                allocation_type=AllocationType.percent, allocation_percent=Decimal("60"),
            ),
            ProgrammeWbsMapping(
                project_id=project.id, programme_task_id=tasks[3].id, wbs_item_id=pavement.id,
                allocation_type=AllocationType.percent, allocation_percent=Decimal("40"),
            ),
        ]
    )
    db.commit()
