from decimal import Decimal, ROUND_HALF_UP


MONEY_QUANT = Decimal("0.01")
PCT_QUANT = Decimal("0.000001")
RATIO_QUANT = Decimal("0.0001")


def money(value: Decimal | int | float | str) -> Decimal:
    return Decimal(str(value)).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def pct(value: Decimal | int | float | str) -> Decimal:
    return Decimal(str(value)).quantize(PCT_QUANT, rounding=ROUND_HALF_UP)


def ratio(value: Decimal | int | float | str) -> Decimal:
    return Decimal(str(value)).quantize(RATIO_QUANT, rounding=ROUND_HALF_UP)


def dec(value: Decimal | int | float | str | None) -> Decimal:
    """Coerce a nullable numeric column value to Decimal, treating NULL as zero."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
