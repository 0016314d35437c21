"""Money helpers using Decimal with Rupiah display rules."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation


def parse_amount(value: object) -> Decimal:
    """Parse a loosely-typed ledger amount; unparseable values become zero."""

    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return Decimal("0")
    if not amount.is_finite():
        return Decimal("0")
    return amount


def _to_whole_rupiah(value: Decimal) -> Decimal:
    # to_integral_value is not bounded by the context precision, quantize is.
    return value.to_integral_value(rounding=ROUND_HALF_UP)


def format_rupiah(value: Decimal) -> str:
    """Render an amount as Indonesian Rupiah, e.g. ``Rp 150.000``."""

    rounded = _to_whole_rupiah(value)
    grouped = f"{abs(rounded):,.0f}".replace(",", ".")
    sign = "-" if rounded < 0 else ""
    return f"{sign}Rp {grouped}"


def amount_to_text(value: Decimal) -> str:
    """Plain textual amount for push data maps."""

    if value == value.to_integral_value():
        return format(value.to_integral_value(), "f")
    return format(value.normalize(), "f")


def amount_to_number(value: Decimal) -> int | float:
    """JSON number for audit payloads: int when whole, float otherwise."""

    if value == value.to_integral_value():
        return int(value)
    return float(value)
