from datetime import date
from decimal import Decimal

from builders import add_costs, add_project, add_wbs_item, make_session
from siteflow.models.resources import LabourType
from siteflow.models.wbs import WbsLabourAssignment
from siteflow.services.cost_resolver import (
    CategoryCosts,
    project_budget_total,
    resolve_costs,
    resolve_costs_bulk,
)


def test_resolve_costs_bulk_sums_each_category() -> None:
    db = make_session()
    project = add_project(db)
    earthworks = add_wbs_item(db, project, code="1.1", start=date(2025, 1, 1), end=date(2025, 1, 31))
    drainage = add_wbs_item(db, project, code="2.1")
    empty = add_wbs_item(db, project, code="3.1")
    add_costs(db, earthworks, plant="1200", labour="800")
    add_costs(db, earthworks, labour="200", subcontractor="5000")
    add_costs(db, drainage, material="950.50")

    costs = resolve_costs_bulk(db, [earthworks.id, drainage.id, empty.id])

    assert costs[earthworks.id] == CategoryCosts(
        plant=Decimal("1200"), labour=Decimal("1000"), material=Decimal("0"), subcontractor=Decimal("5000")
    )
    assert costs[drainage.id].material == Decimal("950.50")
    assert costs[empty.id].total == 0
    assert resolve_costs(db, drainage.id).total == Decimal("950.50")


def test_labour_budget_multiplies_headcount() -> None:
    db = make_session()
    project = add_project(db)
    item = add_wbs_item(db, project, code="1.1")
    crew = LabourType(code="CRW", role="Crew", hourly_rate=Decimal("40"))
    db.add(crew)
    db.flush()
    db.add(
        WbsLabourAssignment(
            wbs_item_id=item.id,
            labour_type_id=crew.id,
            budgeted_hours=Decimal("100"),
            hourly_rate=Decimal("40"),
            quantity=3,
        )
    )
    db.flush()

    assert resolve_costs(db, item.id).labour == Decimal("12000")


def test_empty_request_and_project_budget_total() -> None:
    db = make_session()
    project = add_project(db)
    first = add_wbs_item(db, project, code="1.1")
    second = add_wbs_item(db, project, code="1.2")
    add_costs(db, first, plant="100", material="50")
    add_costs(db, second, subcontractor="250")

    assert resolve_costs_bulk(db, []) == {}
    assert project_budget_total(db, project.id) == Decimal("400")
