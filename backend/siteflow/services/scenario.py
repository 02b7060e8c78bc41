from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from siteflow.services.cashflow import ForecastMonth, ForecastSummary, aggregate, project_or_404
from siteflow.services.distribution import (
    DEFAULT_MAX_SPAN_DAYS,
    ONE,
    REVENUE_LAG_MONTHS,
    ZERO,
    CostBearingItem,
    HorizonPolicy,
    MonthLedger,
    distribute_items,
)
from siteflow.services.schedule_source import forecast_anchor, resolve_schedule_source
from siteflow.utils.decimal_math import dec, money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScenarioAdjustments:
    delay_weeks: int = 0
    cost_increase_percent: Decimal = ZERO
    payment_delay_days: int = 0

    @property
    def delay_days(self) -> int:
        return self.delay_weeks * 7

    @property
    def cost_multiplier(self) -> Decimal:
        return ONE + Decimal(str(self.cost_increase_percent)) / Decimal("100")

    @property
    def payment_delay_months(self) -> int:
        if self.payment_delay_days <= 0:
            return 0
        return math.ceil(self.payment_delay_days / 30)


@dataclass(frozen=True)
class ScenarioImpact:
    total_cost_increase: Decimal
    peak_negative: Decimal


@dataclass(frozen=True)
class ScenarioForecast:
    project_id: int
    adjustments: ScenarioAdjustments
    forecast: list[ForecastMonth]
    summary: ForecastSummary
    impact: ScenarioImpact


def _shift_items(items: tuple[CostBearingItem, ...], days: int) -> tuple[CostBearingItem, ...]:
    shifted = []
    for item in items:
        try:
            shifted.append(item.shifted(days))
        except OverflowError:
            logger.warning(
                "Skipping %s %s: shifting by %s days leaves the calendar.", item.source, item.item_id, days
            )
    return tuple(shifted)


def run_scenario(
    db: Session,
    project_id: int,
    adjustments: ScenarioAdjustments,
    *,
    months: int = 12,
    policy: HorizonPolicy = HorizonPolicy.truncate,
    max_span_days: int = DEFAULT_MAX_SPAN_DAYS,
    today: date | None = None,
) -> ScenarioForecast:
    """What-if forecast over shifted, inflated copies of the project's items.

    Nothing is written back: items are read into immutable values and adjusted
    in memory, and the horizon is anchored at the delayed start.
    """
    project = project_or_404(db, project_id)
    source = resolve_schedule_source(db, project)
    items = _shift_items(source.items, adjustments.delay_days)
    try:
        anchor = forecast_anchor(project, source, today or date.today()) + timedelta(
            days=adjustments.delay_days
        )
    except OverflowError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"A delay of {adjustments.delay_weeks} weeks moves the forecast past the calendar.",
        ) from None

    ledger = MonthLedger(anchor, months, policy=policy, max_span_days=max_span_days)
    distribute_items(
        ledger,
        items,
        dec(project.retention_percent),
        cost_multiplier=adjustments.cost_multiplier,
        revenue_lag_months=REVENUE_LAG_MONTHS + adjustments.payment_delay_months,
    )
    result = aggregate(ledger)

    increase_rate = adjustments.cost_multiplier - ONE
    total_cost_increase = sum(
        (item.allocated_costs.total * increase_rate for item in items),
        ZERO,
    )
    return ScenarioForecast(
        project_id=project.id,
        adjustments=adjustments,
        forecast=result.months,
        summary=result.summary,
        impact=ScenarioImpact(
            total_cost_increase=money(total_cost_increase),
            peak_negative=result.summary.peak_negative,
        ),
    )
