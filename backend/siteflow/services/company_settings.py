from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from siteflow.models.settings import DEFAULT_SETTINGS_ID, CompanySettings
from siteflow.utils.decimal_math import dec


@dataclass(frozen=True)
class CompanyConfig:
    company_name: str
    default_retention_percent: Decimal
    head_office_monthly_cost: Decimal
    bank_facility_limit: Decimal
    gst_rate: Decimal


DEFAULT_COMPANY_SETTINGS: dict[str, Any] = {
    "company_name": "My Construction Company",
    "default_retention_percent": Decimal("5"),
    "head_office_monthly_cost": Decimal("50000"),
    "bank_facility_limit": Decimal("500000"),
    "gst_rate": Decimal("0.15"),
}


def get_or_create_settings(db: Session) -> CompanySettings:
    row = db.get(CompanySettings, DEFAULT_SETTINGS_ID)
    if row is not None:
        return row
    row = CompanySettings(id=DEFAULT_SETTINGS_ID, **DEFAULT_COMPANY_SETTINGS)
    db.add(row)
    db.flush()
    return row


def to_config(row: CompanySettings) -> CompanyConfig:
    return CompanyConfig(
        company_name=row.company_name,
        default_retention_percent=dec(row.default_retention_percent),
        head_office_monthly_cost=dec(row.head_office_monthly_cost),
        bank_facility_limit=dec(row.bank_facility_limit),
        gst_rate=dec(row.gst_rate),
    )


def load_company_config(db: Session) -> CompanyConfig:
    """Snapshot of the settings row, read once per request.

    Falls back to the defaults without inserting, so read-only requests leave
    the table untouched until settings are first saved.
    """
    row = db.get(CompanySettings, DEFAULT_SETTINGS_ID)
    if row is None:
        return CompanyConfig(**DEFAULT_COMPANY_SETTINGS)
    return to_config(row)


def update_company_settings(db: Session, changes: dict[str, Any]) -> CompanySettings:
    row = get_or_create_settings(db)
    for name, value in changes.items():
        if value is None:
            continue
        if not hasattr(row, name) or name == "id":
            raise ValueError(f"Unknown company setting: {name}.")
        setattr(row, name, value)
    db.flush()
    return row
