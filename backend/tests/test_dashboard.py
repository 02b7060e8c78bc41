from datetime import date
from decimal import Decimal

from builders import add_costs, add_project, add_wbs_item, make_session
from siteflow.models.actuals import ActualLabourHours, ActualQuantity, CostEntry, DailyLog
from siteflow.models.commercial import ProgressClaim, Variation
from siteflow.models.enums import ClaimStatus, CostType, ProjectStatus, VariationStatus
from siteflow.models.resources import LabourType
from siteflow.services.company_settings import CompanyConfig
from siteflow.services.dashboard import company_dashboard, project_dashboard


def _project_with_actuals(db):
    project = add_project(db, start_date=date(2025, 1, 1))
    item = add_wbs_item(
        db,
        project,
        code="1.1",
        start=date(2025, 1, 1),
        end=date(2025, 1, 11),
        quantity="100",
        rate="1000",
        milestone=True,
    )
    add_costs(db, item, labour="60000")

    crew = LabourType(code="CRW", role="Crew", hourly_rate=Decimal("50"))
    log = DailyLog(project_id=project.id, log_date=date(2025, 1, 3))
    db.add_all([crew, log])
    db.flush()
    db.add_all(
        [
            ActualLabourHours(
                daily_log_id=log.id,
                wbs_item_id=item.id,
                labour_type_id=crew.id,
                hours=Decimal("100"),
                workers=2,
            ),
            ActualQuantity(daily_log_id=log.id, wbs_item_id=item.id, quantity_completed=Decimal("25")),
            CostEntry(project_id=project.id, wbs_item_id=item.id, cost_type=CostType.other, amount=Decimal("2000")),
            Variation(
                project_id=project.id,
                variation_number=1,
                description="Extra culvert",
                status=VariationStatus.approved,
                claimed_value=Decimal("12000"),
                approved_value=Decimal("10000"),
            ),
            Variation(
                project_id=project.id,
                variation_number=2,
                description="Rejected kerb change",
                status=VariationStatus.rejected,
                claimed_value=Decimal("5000"),
                approved_value=Decimal("0"),
            ),
            ProgressClaim(
                project_id=project.id,
                claim_number=1,
                claim_period_start=date(2024, 12, 1),
                claim_period_end=date(2024, 12, 31),
                this_claim=Decimal("5000"),
                certified_amount=Decimal("5000"),
                status=ClaimStatus.paid,
            ),
            ProgressClaim(
                project_id=project.id,
                claim_number=2,
                claim_period_start=date(2025, 1, 1),
                claim_period_end=date(2025, 1, 31),
                this_claim=Decimal("20000"),
                status=ClaimStatus.submitted,
            ),
            ProgressClaim(
                project_id=project.id,
                claim_number=3,
                claim_period_start=date(2025, 2, 1),
                claim_period_end=date(2025, 2, 28),
                this_claim=Decimal("7000"),
                status=ClaimStatus.draft,
            ),
        ]
    )
    db.flush()
    return project


def test_dashboard_earned_value_figures() -> None:
    db = make_session()
    project = _project_with_actuals(db)

    result = project_dashboard(db, project.id, as_of=date(2025, 1, 6))

    assert result.project["code"] == "P-001"
    assert result.programme["percent_complete"] == Decimal("50")
    assert result.programme["items_in_progress"] == 1
    assert result.programme["items_completed"] == 0
    assert result.cost["budget"] == Decimal("60000.00")
    assert result.cost["actuals"] == Decimal("12000.00")
    assert result.cost["forecast"] == Decimal("48000.00")
    assert result.cost["variance"] == Decimal("12000.00")
    assert result.cost["variance_percent"] == Decimal("20")
    assert result.progress["percent_complete"] == Decimal("25")
    assert result.progress["earned_value"] == Decimal("15000.00")
    assert result.progress["cpi"] == Decimal("1.25")
    assert result.progress["spi"] == Decimal("0.5")


def test_dashboard_revenue_and_margin() -> None:
    db = make_session()
    project = _project_with_actuals(db)

    result = project_dashboard(db, project.id, as_of=date(2025, 1, 6))

    assert result.revenue["contract_value"] == Decimal("100000.00")
    assert result.revenue["variations"] == Decimal("10000.00")
    assert result.revenue["revised_contract"] == Decimal("110000.00")
    assert result.revenue["claimed"] == Decimal("25000.00")
    assert result.revenue["received"] == Decimal("5000.00")
    assert result.revenue["outstanding"] == Decimal("20000.00")
    assert result.margin["budget"] == Decimal("50000.00")
    assert result.margin["forecast"] == Decimal("62000.00")


def test_dashboard_alerts_for_slip_and_outstanding_claims() -> None:
    db = make_session()
    project = _project_with_actuals(db)

    result = project_dashboard(db, project.id, as_of=date(2025, 1, 6))

    assert sorted(alert.type for alert in result.alerts) == ["cashflow", "programme"]


def test_dashboard_for_project_without_data() -> None:
    db = make_session()
    project = add_project(db)

    result = project_dashboard(db, project.id, as_of=date(2025, 1, 6))

    assert result.progress["cpi"] == Decimal("1")
    assert result.cost["budget"] == Decimal("0")
    assert result.programme["items_total"] == 0
    assert result.programme["percent_complete"] == 0


def _config() -> CompanyConfig:
    return CompanyConfig(
        company_name="Test Co",
        default_retention_percent=Decimal("5"),
        head_office_monthly_cost=Decimal("0"),
        bank_facility_limit=Decimal("750000"),
        gst_rate=Decimal("0.15"),
    )


def _active_with_spend(db, code: str, spent: str):
    project = add_project(db, code=code, name=f"Project {code}")
    item = add_wbs_item(db, project, code="1.1")
    add_costs(db, item, labour="1000")
    db.add(CostEntry(project_id=project.id, cost_type=CostType.other, amount=Decimal(spent)))
    db.flush()
    return project


def _portfolio(db):
    _project_with_actuals(db)
    nearly = _active_with_spend(db, "P-002", "950")
    _active_with_spend(db, "P-003", "1200")
    tender = add_project(db, code="T-001", name="Harbour Bridge", status=ProjectStatus.tender)
    add_wbs_item(db, tender, code="1.1", quantity="10", rate="500", milestone=True)
    add_project(db, code="C-001", status=ProjectStatus.completed)
    db.add(
        ProgressClaim(
            project_id=nearly.id,
            claim_number=1,
            claim_period_start=date(2024, 12, 1),
            claim_period_end=date(2024, 12, 31),
            submitted_date=date(2025, 1, 1),
            this_claim=Decimal("3000"),
            certified_amount=Decimal("3000"),
            status=ClaimStatus.certified,
        )
    )
    db.flush()


def test_company_dashboard_summary() -> None:
    db = make_session()
    _portfolio(db)

    result = company_dashboard(db, _config(), as_of=date(2025, 1, 31))

    assert result.summary == {
        "active_projects": 3,
        "active_contract_value": Decimal("100000.00"),
        "active_budget": Decimal("62000.00"),
        "tenders_in_progress": 1,
        "tender_pipeline_value": Decimal("5000.00"),
        "completed_projects": 1,
        "outstanding_claims": Decimal("23000.00"),
        "bank_facility": Decimal("750000.00"),
    }
    assert [row["code"] for row in result.active_projects] == ["P-001", "P-002", "P-003"]
    assert result.active_projects[0]["margin_percent"] == Decimal("40")
    assert result.active_projects[1]["margin_percent"] == Decimal("0")
    assert [(row["code"], row["client"], row["tender_value"]) for row in result.tender_pipeline] == [
        ("T-001", None, Decimal("5000.00")),
    ]


def test_company_dashboard_ages_outstanding_claims() -> None:
    db = make_session()
    _portfolio(db)

    claims = company_dashboard(db, _config(), as_of=date(2025, 1, 31)).outstanding_claims

    assert [(row["project_code"], row["amount"], row["days_outstanding"]) for row in claims] == [
        ("P-002", Decimal("3000.00"), 30),
        ("P-001", Decimal("20000.00"), 0),
    ]
    assert claims[0]["status"] == "certified"


def test_company_dashboard_flags_cost_near_budget() -> None:
    db = make_session()
    _portfolio(db)

    attention = company_dashboard(db, _config(), as_of=date(2025, 1, 31)).attention_required

    assert [(row["project_code"], row["severity"]) for row in attention] == [
        ("P-002", "medium"),
        ("P-003", "high"),
    ]
    assert {row["issue"] for row in attention} == {"Cost approaching budget"}


def test_company_dashboard_without_projects() -> None:
    db = make_session()

    result = company_dashboard(db, _config(), as_of=date(2025, 1, 31))

    assert result.summary["active_projects"] == 0
    assert result.summary["outstanding_claims"] == Decimal("0")
    assert result.active_projects == []
    assert result.attention_required == []
