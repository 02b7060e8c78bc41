from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from siteflow.utils.decimal_math import money, pct, ratio


ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")

CPI_MEDIUM_THRESHOLD = Decimal("0.95")
CPI_HIGH_THRESHOLD = Decimal("0.90")
PROGRAMME_SLIP_POINTS = Decimal("10")
OUTSTANDING_CLAIMS_SHARE = Decimal("0.10")
MIN_MARGIN_SHARE = Decimal("0.03")


@dataclass(frozen=True)
class EarnedValueSnapshot:
    percent_complete: Decimal
    programme_percent_complete: Decimal
    earned_value: Decimal
    cpi: Decimal
    spi: Decimal
    forecast_at_completion: Decimal


@dataclass(frozen=True)
class ProjectAlert:
    type: str
    severity: str
    message: str


def programme_percent_complete(
    earliest_start: date | None,
    latest_end: date | None,
    as_of: date,
) -> Decimal:
    """Elapsed share of the scheduled window, clamped to 0..100."""
    if earliest_start is None or latest_end is None:
        return pct(0)
    total_days = (latest_end - earliest_start).days
    if total_days <= 0:
        return pct(0)
    elapsed_days = (as_of - earliest_start).days
    value = Decimal(elapsed_days) / Decimal(total_days) * HUNDRED
    return pct(min(HUNDRED, max(ZERO, value)))


def compute_earned_value(
    budget_total: Decimal,
    percent_complete: Decimal,
    actual_cost_total: Decimal,
    programme_percent: Decimal,
) -> EarnedValueSnapshot:
    earned_value = budget_total * (percent_complete / HUNDRED)
    cpi = earned_value / actual_cost_total if actual_cost_total > ZERO else ONE
    forecast_at_completion = budget_total / cpi if cpi > ZERO else budget_total
    if percent_complete > ZERO and programme_percent > ZERO:
        spi = percent_complete / programme_percent
    else:
        spi = ONE

    return EarnedValueSnapshot(
        percent_complete=pct(percent_complete),
        programme_percent_complete=pct(programme_percent),
        earned_value=money(earned_value),
        cpi=ratio(cpi),
        spi=ratio(spi),
        forecast_at_completion=money(forecast_at_completion),
    )


def evaluate_alerts(
    *,
    cpi: Decimal,
    progress_percent: Decimal,
    programme_percent: Decimal,
    contract_value: Decimal,
    margin_forecast: Decimal,
    outstanding_claims: Decimal,
) -> list[ProjectAlert]:
    alerts: list[ProjectAlert] = []

    if cpi < CPI_MEDIUM_THRESHOLD:
        overrun_pct = (ONE - cpi) * HUNDRED
        alerts.append(
            ProjectAlert(
                type="cost",
                severity="high" if cpi < CPI_HIGH_THRESHOLD else "medium",
                message=(
                    f"Cost Performance Index is {cpi:.2f} - costs are trending "
                    f"{overrun_pct:.0f}% over budget"
                ),
            )
        )

    if progress_percent < programme_percent - PROGRAMME_SLIP_POINTS:
        alerts.append(
            ProjectAlert(
                type="programme",
                severity="medium",
                message=(
                    f"Progress ({progress_percent:.0f}%) is behind programme "
                    f"({programme_percent:.0f}%)"
                ),
            )
        )

    if outstanding_claims > contract_value * OUTSTANDING_CLAIMS_SHARE:
        alerts.append(
            ProjectAlert(
                type="cashflow",
                severity="medium",
                message=f"Outstanding claims of ${outstanding_claims:,.2f} exceed 10% of contract value",
            )
        )

    if margin_forecast < contract_value * MIN_MARGIN_SHARE:
        if contract_value > ZERO:
            detail = f"{margin_forecast / contract_value * HUNDRED:.1f}%"
        else:
            detail = f"${margin_forecast:,.2f}"
        alerts.append(
            ProjectAlert(
                type="margin",
                severity="high",
                message=f"Forecast margin of {detail} is below 3% threshold",
            )
        )

    return alerts
