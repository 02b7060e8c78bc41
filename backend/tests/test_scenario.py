from datetime import date
from decimal import Decimal

import pytest
from fastapi import HTTPException

from builders import add_costs, add_project, add_wbs_item, make_session
from siteflow.services.cashflow import project_forecast
from siteflow.services.scenario import ScenarioAdjustments, run_scenario
from siteflow.utils.decimal_math import money


def _row(result, key: str):
    return next(row for row in result.forecast if row.month == key)


def _project(db):
    project = add_project(db, start_date=date(2025, 1, 1))
    item = add_wbs_item(
        db,
        project,
        code="1.1",
        start=date(2025, 1, 1),
        end=date(2025, 1, 30),
        quantity="100",
        rate="1000",
        milestone=True,
    )
    add_costs(db, item, labour="3000")
    return project


def test_adjustment_derived_values() -> None:
    assert ScenarioAdjustments(delay_weeks=3).delay_days == 21
    assert ScenarioAdjustments(cost_increase_percent=Decimal("12.5")).cost_multiplier == Decimal("1.125")
    assert ScenarioAdjustments(payment_delay_days=0).payment_delay_months == 0
    assert ScenarioAdjustments(payment_delay_days=30).payment_delay_months == 1
    assert ScenarioAdjustments(payment_delay_days=31).payment_delay_months == 2


def test_no_adjustments_matches_plain_forecast() -> None:
    db = make_session()
    project = _project(db)
    baseline = project_forecast(db, project.id, months=3)
    scenario = run_scenario(db, project.id, ScenarioAdjustments(), months=3)
    assert scenario.forecast == baseline.forecast
    assert scenario.impact.total_cost_increase == money(0)


def test_delay_shifts_items_and_horizon() -> None:
    db = make_session()
    project = _project(db)

    result = run_scenario(db, project.id, ScenarioAdjustments(delay_weeks=4), months=3)

    # Jan 29 - Feb 27: 3 days in January, 27 in February
    assert result.forecast[0].month == "2025-01"
    assert _row(result, "2025-01").outflows.labour == money(300)
    assert _row(result, "2025-02").outflows.labour == money(2700)
    assert _row(result, "2025-02").inflows.claims == money(9500)
    assert _row(result, "2025-03").inflows.claims == money(85500)


def test_cost_increase_inflates_outflows_only() -> None:
    db = make_session()
    project = _project(db)

    result = run_scenario(
        db, project.id, ScenarioAdjustments(cost_increase_percent=Decimal("10")), months=3
    )

    assert _row(result, "2025-01").outflows.labour == money(3300)
    assert _row(result, "2025-02").inflows.claims == money(95000)
    assert result.impact.total_cost_increase == money(300)
    assert result.impact.peak_negative == money(-3300)


def test_payment_delay_defers_receipts_by_whole_months() -> None:
    db = make_session()
    project = _project(db)

    result = run_scenario(db, project.id, ScenarioAdjustments(payment_delay_days=30), months=4)

    assert _row(result, "2025-02").inflows.claims == money(0)
    assert _row(result, "2025-03").inflows.claims == money(95000)


def test_scenario_does_not_change_later_forecasts() -> None:
    db = make_session()
    project = _project(db)
    before = project_forecast(db, project.id, months=3)

    run_scenario(
        db,
        project.id,
        ScenarioAdjustments(delay_weeks=6, cost_increase_percent=Decimal("25"), payment_delay_days=60),
        months=3,
    )

    assert project_forecast(db, project.id, months=3) == before
    assert not db.dirty
    assert not db.new


def test_scenario_for_unknown_project_is_not_found() -> None:
    db = make_session()
    with pytest.raises(HTTPException) as exc:
        run_scenario(db, 42, ScenarioAdjustments())
    assert exc.value.status_code == 404


def test_items_shifted_past_the_calendar_are_skipped() -> None:
    db = make_session()
    project = _project(db)
    far = add_wbs_item(db, project, code="9.9", start=date(9999, 12, 1), end=date(9999, 12, 31))
    add_costs(db, far, labour="500")

    result = run_scenario(db, project.id, ScenarioAdjustments(delay_weeks=4), months=3)

    assert _row(result, "2025-01").outflows.labour == money(300)
    assert result.summary.total_outflows == money(3000)
    assert result.impact.total_cost_increase == money(0)


def test_delay_past_the_calendar_is_rejected() -> None:
    db = make_session()
    project = _project(db)

    with pytest.raises(HTTPException) as exc:
        run_scenario(db, project.id, ScenarioAdjustments(delay_weeks=500000), months=3)
    assert exc.value.status_code == 422
