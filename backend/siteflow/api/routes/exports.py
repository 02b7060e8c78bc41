import csv
import io
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from openpyxl import Workbook
from sqlalchemy.orm import Session

from siteflow.api.deps import get_db, horizon_policy
from siteflow.core.config import get_settings
from siteflow.services.cashflow import project_forecast


settings = get_settings()
router = APIRouter(tags=["exports"])

EXPORT_HEADERS = [
    "month",
    "claims",
    "retention_release",
    "inflows_total",
    "labour",
    "plant",
    "materials",
    "subcontractors",
    "other",
    "outflows_total",
    "net",
    "cumulative",
]


def _build_rows(db: Session, project_id: int, months: int) -> list[dict]:
    result = project_forecast(
        db,
        project_id,
        months=months,
        policy=horizon_policy(settings),
        max_span_days=settings.max_distribution_days,
    )
    return [
        {
            "month": row.month,
            "claims": row.inflows.claims,
            "retention_release": row.inflows.retention_release,
            "inflows_total": row.inflows.total,
            "labour": row.outflows.labour,
            "plant": row.outflows.plant,
            "materials": row.outflows.materials,
            "subcontractors": row.outflows.subcontractors,
            "other": row.outflows.other,
            "outflows_total": row.outflows.total,
            "net": row.net,
            "cumulative": row.cumulative,
        }
        for row in result.forecast
    ]


def _filename(project_id: int, extension: str) -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"cashflow-project-{project_id}-{stamp}.{extension}"


@router.get("/cashflow/project/{project_id}/exports/csv")
def export_csv(
    project_id: int,
    months: int = Query(default=settings.forecast_default_months, ge=1, le=settings.forecast_max_months),
    db: Session = Depends(get_db),
):
    rows = _build_rows(db, project_id, months)
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=EXPORT_HEADERS)
    writer.writeheader()
    writer.writerows(rows)
    output.seek(0)
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{_filename(project_id, "csv")}"'},
    )


@router.get("/cashflow/project/{project_id}/exports/excel")
def export_excel(
    project_id: int,
    months: int = Query(default=settings.forecast_default_months, ge=1, le=settings.forecast_max_months),
    db: Session = Depends(get_db),
):
    rows = _build_rows(db, project_id, months)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Cashflow"
    sheet.append(EXPORT_HEADERS)
    for row in rows:
        sheet.append([row["month"]] + [float(row[key]) for key in EXPORT_HEADERS[1:]])

    stream = io.BytesIO()
    workbook.save(stream)
    stream.seek(0)
    return StreamingResponse(
        stream,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{_filename(project_id, "xlsx")}"'},
    )
