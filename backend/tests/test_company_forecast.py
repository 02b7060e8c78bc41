from datetime import date
from decimal import Decimal

from sqlalchemy import func, select

from builders import add_costs, add_project, add_wbs_item, make_session
from siteflow.models.enums import ProjectStatus
from siteflow.models.settings import CompanySettings
from siteflow.services.company import company_forecast
from siteflow.services.company_settings import CompanyConfig, load_company_config, update_company_settings
from siteflow.utils.decimal_math import money


CONFIG = CompanyConfig(
    company_name="Test Civil Ltd",
    default_retention_percent=Decimal("5"),
    head_office_monthly_cost=Decimal("50000"),
    bank_facility_limit=Decimal("500000"),
    gst_rate=Decimal("0.15"),
)


def _seed(db):
    north = add_project(db, code="N-01", name="North", start_date=date(2025, 1, 1), retention_percent="0")
    south = add_project(db, code="S-01", name="South", start_date=date(2025, 1, 1), retention_percent="0")
    idle = add_project(db, code="I-01", name="Idle", start_date=date(2025, 1, 1))
    tender = add_project(db, code="T-01", name="Tender", status=ProjectStatus.tender)

    north_item = add_wbs_item(
        db, north, code="1.1", start=date(2025, 1, 1), end=date(2025, 1, 31),
        quantity="10", rate="3100", milestone=True,
    )
    add_costs(db, north_item, labour="6200")
    south_item = add_wbs_item(db, south, code="1.1", start=date(2025, 2, 1), end=date(2025, 2, 28))
    add_costs(db, south_item, labour="2800", material="1400")
    tender_item = add_wbs_item(db, tender, code="1.1", start=date(2025, 1, 1), end=date(2025, 1, 31))
    add_costs(db, tender_item, labour="99999")
    return north, south, idle, tender


def test_company_forecast_combines_active_projects_with_overhead() -> None:
    db = make_session()
    north, south, idle, tender = _seed(db)

    result = company_forecast(db, CONFIG, months=3, today=date(2025, 1, 20))

    assert [row.month for row in result.forecast] == ["2025-01", "2025-02", "2025-03"]
    assert result.projects == {north.id: "North", south.id: "South", idle.id: "Idle"}
    january, february, march = result.forecast
    assert january.outflows.labour == money(6200)
    assert january.outflows.other == money(50000)
    assert february.inflows.claims == money(31000)
    assert february.outflows.labour == money(2800)
    assert march.outflows.materials == money(1400)
    assert all(row.outflows.other == money(50000) for row in result.forecast)


def test_project_breakdown_is_net_contribution_per_month() -> None:
    db = make_session()
    north, south, idle, _ = _seed(db)

    result = company_forecast(db, CONFIG, months=3, today=date(2025, 1, 20))

    january, february, march = result.forecast
    assert january.projects == {north.id: money(-6200), south.id: money(0), idle.id: money(0)}
    assert february.projects == {north.id: money(31000), south.id: money(-2800), idle.id: money(0)}
    assert march.projects == {north.id: money(0), south.id: money(-1400), idle.id: money(0)}
    for row in result.forecast:
        assert sum(row.projects.values()) - row.outflows.other == row.net


def test_company_summary_reports_facility_headroom() -> None:
    db = make_session()
    _seed(db)

    result = company_forecast(db, CONFIG, months=3, today=date(2025, 1, 20))

    # -56200, -78000, -129400
    assert result.summary.peak_negative == money(-129400)
    assert result.summary.bank_facility == money(500000)
    assert result.summary.facility_headroom == money(370600)
    assert result.summary.net_cashflow == result.forecast[-1].cumulative


def test_company_forecast_without_projects_is_overhead_only() -> None:
    db = make_session()

    result = company_forecast(db, CONFIG, months=2, today=date(2025, 7, 1))

    assert result.projects == {}
    assert [row.net for row in result.forecast] == [money(-50000), money(-50000)]
    assert result.summary.peak_negative == money(-100000)


def test_loading_config_without_saved_settings_writes_nothing() -> None:
    db = make_session()

    config = load_company_config(db)

    assert config.head_office_monthly_cost == Decimal("50000")
    assert config.bank_facility_limit == Decimal("500000")
    assert not db.new
    assert db.scalar(select(func.count()).select_from(CompanySettings)) == 0


def test_loading_config_reads_saved_settings() -> None:
    db = make_session()
    update_company_settings(db, {"head_office_monthly_cost": Decimal("72000")})
    db.commit()

    assert load_company_config(db).head_office_monthly_cost == Decimal("72000")
