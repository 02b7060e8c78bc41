from datetime import date
from decimal import Decimal

import pytest
from fastapi import HTTPException

from builders import add_project, add_task, add_wbs_item, make_session, map_task
from siteflow.services.mapping_validation import validate_mappings


def test_validation_reports_gaps_and_partial_allocations() -> None:
    db = make_session()
    project = add_project(db)
    w1 = add_wbs_item(db, project, code="1.1")
    w2 = add_wbs_item(db, project, code="1.2")
    w3 = add_wbs_item(db, project, code="1.3")
    t1 = add_task(db, project, code="T1", start=date(2025, 1, 1), end=date(2025, 1, 31), sort_order=0)
    t2 = add_task(db, project, code="T2", start=date(2025, 2, 1), end=date(2025, 2, 28), sort_order=1)
    t3 = add_task(db, project, code="T3", start=date(2025, 3, 1), end=date(2025, 3, 31), sort_order=2)
    map_task(db, t1, w1, percent="100")
    map_task(db, t2, w2, percent="60")

    result = validate_mappings(db, project.id)

    assert result.summary["total_tasks"] == 3
    assert result.summary["mapped_tasks"] == 2
    assert result.summary["unmapped_tasks"] == 1
    assert result.summary["total_wbs"] == 3
    assert result.summary["mapped_wbs"] == 2
    assert result.summary["total_mappings"] == 2
    assert result.summary["coverage_percent"] == 67
    assert result.summary["is_complete"] is False
    assert result.unmapped_tasks == [{"id": t3.id, "code": "T3", "name": "Task T3"}]
    assert result.unmapped_wbs == [{"id": w3.id, "code": "1.3", "name": "Item 1.3"}]
    assert len(result.incomplete_allocations) == 1
    assert result.incomplete_allocations[0]["id"] == t2.id
    assert result.incomplete_allocations[0]["total_percent"] == Decimal("60")


def test_split_allocations_summing_to_hundred_are_complete() -> None:
    db = make_session()
    project = add_project(db)
    w1 = add_wbs_item(db, project, code="1.1")
    w2 = add_wbs_item(db, project, code="1.2")
    task = add_task(db, project, code="T1", start=date(2025, 1, 1), end=date(2025, 1, 31))
    map_task(db, task, w1, percent="33.35")
    map_task(db, task, w2, percent="66.7")

    result = validate_mappings(db, project.id)

    assert result.incomplete_allocations == []
    assert result.summary["coverage_percent"] == 100
    assert result.summary["is_complete"] is True


def test_value_allocations_are_not_checked_against_hundred() -> None:
    db = make_session()
    project = add_project(db)
    item = add_wbs_item(db, project, code="1.1")
    task = add_task(db, project, code="T1", start=date(2025, 1, 1), end=date(2025, 1, 31))
    map_task(db, task, item, percent=None, value="1500")

    assert validate_mappings(db, project.id).incomplete_allocations == []


def test_project_without_tasks_has_zero_coverage() -> None:
    db = make_session()
    project = add_project(db)
    add_wbs_item(db, project, code="1.1")

    result = validate_mappings(db, project.id)

    assert result.summary["coverage_percent"] == 0
    assert result.summary["unmapped_wbs"] == 1


def test_validation_for_unknown_project_is_not_found() -> None:
    db = make_session()
    with pytest.raises(HTTPException) as exc:
        validate_mappings(db, 5)
    assert exc.value.status_code == 404
