from datetime import date
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from builders import add_costs, add_project, add_task, add_wbs_item, map_task
from siteflow.api.deps import get_db
from siteflow.db.base import Base
from siteflow.main import REQUEST_BUCKET_SWEEP_SIZE, _request_buckets, app


def _client() -> tuple[TestClient, int]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

    with factory() as db:
        project = add_project(db, code="API-1", name="Api Project", start_date=date(2024, 1, 1))
        item = add_wbs_item(
            db,
            project,
            code="1.1",
            start=date(2024, 1, 1),
            end=date(2024, 1, 30),
            quantity="100",
            rate="1000",
            milestone=True,
        )
        add_costs(db, item, labour="3000")
        task = add_task(db, project, code="T1", start=date(2024, 1, 1), end=date(2024, 1, 30))
        map_task(db, task, item)
        db.commit()
        project_id = project.id

    def override_get_db():
        db = factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app), project_id


def test_health_endpoints() -> None:
    client, _ = _client()
    assert client.get("/healthz").json()["ok"] is True
    assert client.get("/api/v1/health").json()["database"] == "ok"


def test_idle_rate_limit_buckets_are_swept() -> None:
    client, _ = _client()
    for index in range(REQUEST_BUCKET_SWEEP_SIZE):
        _request_buckets[f"10.0.0.1:/api/v1/projects/{index}"].append(0.0)

    assert client.get("/healthz").status_code == 200

    assert not any(key.startswith("10.0.0.1:") for key in _request_buckets)
    assert len(_request_buckets) < REQUEST_BUCKET_SWEEP_SIZE


def test_list_and_get_projects() -> None:
    client, project_id = _client()

    listed = client.get("/api/v1/projects")
    assert listed.status_code == 200
    assert [row["code"] for row in listed.json()] == ["API-1"]
    assert listed.json()[0]["status"] == "active"
    assert client.get("/api/v1/projects", params={"status": "tender"}).json() == []

    assert client.get(f"/api/v1/projects/{project_id}").json()["name"] == "Api Project"
    missing = client.get("/api/v1/projects/9999")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Project not found."


def test_project_forecast_endpoint() -> None:
    client, project_id = _client()

    response = client.get(f"/api/v1/cashflow/project/{project_id}", params={"months": 3})

    assert response.status_code == 200
    body = response.json()
    assert body["uses_mappings"] is True
    assert [row["month"] for row in body["forecast"]] == ["2024-01", "2024-02", "2024-03"]
    assert body["forecast"][0]["outflows"]["labour"] == "3000.00"
    assert body["forecast"][1]["inflows"]["claims"] == "95000.00"
    assert body["summary"]["peak_negative"] == "-3000.00"


def test_forecast_months_are_validated() -> None:
    client, project_id = _client()
    assert client.get(f"/api/v1/cashflow/project/{project_id}", params={"months": 0}).status_code == 422
    assert client.get(f"/api/v1/cashflow/project/{project_id}", params={"months": 61}).status_code == 422
    assert client.get("/api/v1/cashflow/project/9999").status_code == 404


def test_company_forecast_endpoint() -> None:
    client, project_id = _client()

    response = client.get("/api/v1/cashflow/company", params={"months": 2})

    assert response.status_code == 200
    body = response.json()
    assert len(body["forecast"]) == 2
    assert body["projects"] == {str(project_id): "Api Project"}
    assert body["forecast"][0]["outflows"]["other"] == "50000.00"
    assert body["summary"]["bank_facility"] == "500000.00"


def test_scenario_endpoint() -> None:
    client, project_id = _client()

    response = client.post(
        "/api/v1/cashflow/scenario",
        json={
            "base_project_id": project_id,
            "months": 3,
            "adjustments": {"cost_increase_percent": "10", "payment_delay_days": 30},
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["impact"]["total_cost_increase"] == "300.00"
    assert body["forecast"][1]["inflows"]["claims"] == "0.00"
    assert body["forecast"][2]["inflows"]["claims"] == "95000.00"

    rejected = client.post(
        "/api/v1/cashflow/scenario",
        json={"base_project_id": project_id, "adjustments": {"delay_weeks": -1}},
    )
    assert rejected.status_code == 422

    too_late = client.post(
        "/api/v1/cashflow/scenario",
        json={"base_project_id": project_id, "adjustments": {"delay_weeks": 500000}},
    )
    assert too_late.status_code == 422

    too_slow = client.post(
        "/api/v1/cashflow/scenario",
        json={"base_project_id": project_id, "adjustments": {"payment_delay_days": 3651}},
    )
    assert too_slow.status_code == 422


def test_forecast_exports() -> None:
    client, project_id = _client()

    csv_response = client.get(f"/api/v1/cashflow/project/{project_id}/exports/csv", params={"months": 2})
    assert csv_response.status_code == 200
    assert csv_response.headers["content-type"].startswith("text/csv")
    lines = csv_response.text.strip().splitlines()
    assert lines[0].startswith("month,claims,retention_release")
    assert lines[1].startswith("2024-01,")
    assert len(lines) == 3

    excel_response = client.get(f"/api/v1/cashflow/project/{project_id}/exports/excel")
    assert excel_response.status_code == 200
    assert excel_response.content[:2] == b"PK"


def test_dashboard_and_mapping_validation_endpoints() -> None:
    client, project_id = _client()

    dashboard = client.get(f"/api/v1/dashboard/project/{project_id}", params={"as_of": "2024-01-15"})
    assert dashboard.status_code == 200
    assert dashboard.json()["revenue"]["contract_value"] == "100000.00"

    validation = client.get(f"/api/v1/mappings/validation/project/{project_id}")
    assert validation.status_code == 200
    assert validation.json()["summary"]["is_complete"] is True


def test_company_dashboard_endpoint() -> None:
    client, project_id = _client()

    response = client.get("/api/v1/dashboard/company", params={"as_of": "2024-02-01"})

    assert response.status_code == 200
    body = response.json()
    assert body["summary"]["active_projects"] == 1
    assert body["summary"]["active_contract_value"] == "100000.00"
    assert body["summary"]["bank_facility"] == "500000.00"
    assert body["active_projects"][0]["id"] == project_id
    assert Decimal(body["active_projects"][0]["margin_percent"]) == Decimal("97")
    assert body["attention_required"] == []


def test_company_settings_round_trip() -> None:
    client, _ = _client()

    current = client.get("/api/v1/settings/company")
    assert current.status_code == 200
    assert Decimal(current.json()["head_office_monthly_cost"]) == Decimal("50000")

    updated = client.put("/api/v1/settings/company", json={"head_office_monthly_cost": "75000"})
    assert updated.status_code == 200
    assert Decimal(updated.json()["head_office_monthly_cost"]) == Decimal("75000")
    assert Decimal(client.get("/api/v1/settings/company").json()["head_office_monthly_cost"]) == Decimal("75000")

    company = client.get("/api/v1/cashflow/company", params={"months": 1}).json()
    assert company["forecast"][0]["outflows"]["other"] == "75000.00"

    assert client.put("/api/v1/settings/company", json={"gst_rate": "2"}).status_code == 422
