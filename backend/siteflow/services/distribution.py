from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from decimal import Decimal

from siteflow.services.cost_resolver import CategoryCosts
from siteflow.utils.months import inclusive_days, iter_month_segments, month_index, month_key


logger = logging.getLogger(__name__)

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
HALF = Decimal("0.5")

DEFAULT_MAX_SPAN_DAYS = 7320

OUTFLOW_CATEGORIES = ("labour", "plant", "materials", "subcontractors", "other")

# (month lag, share) pairs per outflow category.
PAYMENT_PROFILE: dict[str, tuple[tuple[int, Decimal], ...]] = {
    "labour": ((0, ONE),),
    "plant": ((0, HALF), (1, HALF)),
    "materials": ((1, ONE),),
    "subcontractors": ((1, ONE),),
}

REVENUE_LAG_MONTHS = 1


class HorizonPolicy(str, enum.Enum):
    truncate = "truncate"
    clamp = "clamp"


@dataclass
class CashflowMonth:
    index: int
    claims: Decimal = ZERO
    retention_release: Decimal = ZERO
    labour: Decimal = ZERO
    plant: Decimal = ZERO
    materials: Decimal = ZERO
    subcontractors: Decimal = ZERO
    other: Decimal = ZERO
    projects: dict[int, Decimal] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return month_key(self.index)


@dataclass(frozen=True)
class CostBearingItem:
    """A WBS item, or one programme-task/WBS mapping, with its budget and dates."""

    item_id: int
    start_date: date | None
    end_date: date | None
    costs: CategoryCosts = CategoryCosts()
    allocation_factor: Decimal = ONE
    is_payment_milestone: bool = False
    quantity: Decimal = ZERO
    schedule_of_rates_rate: Decimal = ZERO
    project_id: int | None = None
    source: str = "wbs"

    @property
    def has_span(self) -> bool:
        return (
            self.start_date is not None
            and self.end_date is not None
            and self.end_date >= self.start_date
        )

    @property
    def duration_days(self) -> int:
        if not self.has_span:
            return 0
        return max(1, inclusive_days(self.start_date, self.end_date))

    @property
    def allocated_costs(self) -> CategoryCosts:
        return self.costs.scaled(self.allocation_factor)

    @property
    def allocated_revenue(self) -> Decimal:
        if not self.is_payment_milestone:
            return ZERO
        return self.quantity * self.schedule_of_rates_rate * self.allocation_factor

    def shifted(self, days: int) -> CostBearingItem:
        if days == 0:
            return self
        delta = timedelta(days=days)
        return replace(
            self,
            start_date=self.start_date + delta if self.start_date is not None else None,
            end_date=self.end_date + delta if self.end_date is not None else None,
        )


class MonthLedger:
    """Month-indexed accumulator for one forecast request.

    Months are held by integer index and always read back in ascending order.
    """

    def __init__(
        self,
        anchor: date,
        months: int,
        *,
        policy: HorizonPolicy = HorizonPolicy.truncate,
        max_span_days: int = DEFAULT_MAX_SPAN_DAYS,
    ) -> None:
        if months < 1:
            raise ValueError("Forecast horizon must be at least one month.")
        if max_span_days < 1:
            raise ValueError("max_span_days must be >= 1.")
        self.first_index = month_index(anchor)
        self.last_index = self.first_index + months - 1
        self.policy = HorizonPolicy(policy)
        self.max_span_days = max_span_days
        self._months = {
            index: CashflowMonth(index=index)
            for index in range(self.first_index, self.last_index + 1)
        }

    def __len__(self) -> int:
        return len(self._months)

    def __contains__(self, index: int) -> bool:
        return self.first_index <= index <= self.last_index

    def months(self) -> list[CashflowMonth]:
        return [self._months[index] for index in sorted(self._months)]

    def accepts(self, accrual_index: int) -> bool:
        if self.policy == HorizonPolicy.clamp:
            return True
        return accrual_index in self

    def _target(self, index: int) -> CashflowMonth | None:
        if index in self:
            return self._months[index]
        if self.policy == HorizonPolicy.clamp:
            return self._months[min(max(index, self.first_index), self.last_index)]
        return None

    def track_project(self, project_id: int) -> None:
        for month in self._months.values():
            month.projects.setdefault(project_id, ZERO)

    def post_outflow(
        self,
        index: int,
        category: str,
        amount: Decimal,
        *,
        project_id: int | None = None,
    ) -> None:
        if category not in OUTFLOW_CATEGORIES:
            raise ValueError(f"Unknown outflow category: {category}.")
        month = self._target(index)
        if month is None:
            return
        setattr(month, category, getattr(month, category) + amount)
        if project_id is not None:
            month.projects[project_id] = month.projects.get(project_id, ZERO) - amount

    def post_inflow(
        self,
        index: int,
        amount: Decimal,
        *,
        project_id: int | None = None,
    ) -> None:
        month = self._target(index)
        if month is None:
            return
        month.claims += amount
        if project_id is not None:
            month.projects[project_id] = month.projects.get(project_id, ZERO) + amount

    def add_overhead(self, monthly_amount: Decimal) -> None:
        for month in self._months.values():
            month.other += monthly_amount


def _distributable(ledger: MonthLedger, item: CostBearingItem) -> bool:
    if not item.has_span:
        logger.debug("Skipping %s %s without a usable date span.", item.source, item.item_id)
        return False
    if item.duration_days > ledger.max_span_days:
        logger.warning(
            "Skipping %s %s: span of %s days exceeds limit of %s.",
            item.source,
            item.item_id,
            item.duration_days,
            ledger.max_span_days,
        )
        return False
    return True


def distribute_costs(
    ledger: MonthLedger,
    item: CostBearingItem,
    *,
    cost_multiplier: Decimal = ONE,
) -> None:
    """Spread an item's budget evenly over its days and post it by payment timing.

    Labour is paid in the month it is incurred, plant half in that month and half
    in the next, materials and subcontractors entirely in the following month.
    """
    if not _distributable(ledger, item):
        return

    duration = Decimal(item.duration_days)
    costs = item.allocated_costs.scaled(Decimal(cost_multiplier))
    daily = {
        "labour": costs.labour / duration,
        "plant": costs.plant / duration,
        "materials": costs.material / duration,
        "subcontractors": costs.subcontractor / duration,
    }

    for accrual_index, days in iter_month_segments(item.start_date, item.end_date):
        if not ledger.accepts(accrual_index):
            continue
        for category, schedule in PAYMENT_PROFILE.items():
            incurred = daily[category] * days
            if incurred == ZERO:
                continue
            for lag, share in schedule:
                ledger.post_outflow(
                    accrual_index + lag,
                    category,
                    incurred * share,
                    project_id=item.project_id,
                )


def distribute_revenue(
    ledger: MonthLedger,
    item: CostBearingItem,
    retention_percent: Decimal,
    *,
    lag_months: int = REVENUE_LAG_MONTHS,
) -> None:
    """Accrue milestone revenue daily and receive it ``lag_months`` later, net of retention."""
    if not item.is_payment_milestone:
        return
    if not _distributable(ledger, item):
        return

    retention = Decimal(str(retention_percent))
    if retention < ZERO or retention > HUNDRED:
        raise ValueError("retention_percent must be between 0 and 100.")
    net_share = ONE - retention / HUNDRED
    daily = item.allocated_revenue / Decimal(item.duration_days)
    if daily == ZERO:
        return

    for accrual_index, days in iter_month_segments(item.start_date, item.end_date):
        if not ledger.accepts(accrual_index):
            continue
        ledger.post_inflow(
            accrual_index + lag_months,
            daily * days * net_share,
            project_id=item.project_id,
        )
    # TODO: post retention release into retention_release once practical-completion
    # and defects-liability dates are modelled on the project.


def distribute_items(
    ledger: MonthLedger,
    items: list[CostBearingItem] | tuple[CostBearingItem, ...],
    retention_percent: Decimal,
    *,
    cost_multiplier: Decimal = ONE,
    revenue_lag_months: int = REVENUE_LAG_MONTHS,
) -> None:
    for item in items:
        distribute_costs(ledger, item, cost_multiplier=cost_multiplier)
        distribute_revenue(ledger, item, retention_percent, lag_months=revenue_lag_months)
