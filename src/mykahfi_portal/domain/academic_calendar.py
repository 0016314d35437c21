"""Academic-year month calendar keyed by ledger sort order.

The ledger encodes calendar position as ``sortasi`` (1 = July ... 12 = June).
The portal shows the eleven-month window August..June; July is a valid ledger
value but never occupies a slot.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AcademicMonth:
    """One fixed slot of the academic-year view."""

    code: str
    label: str
    sort_order: int


ACADEMIC_MONTHS: tuple[AcademicMonth, ...] = (
    AcademicMonth(code="AGU", label="Agustus", sort_order=2),
    AcademicMonth(code="SEP", label="September", sort_order=3),
    AcademicMonth(code="OKT", label="Oktober", sort_order=4),
    AcademicMonth(code="NOV", label="November", sort_order=5),
    AcademicMonth(code="DES", label="Desember", sort_order=6),
    AcademicMonth(code="JAN", label="Januari", sort_order=7),
    AcademicMonth(code="FEB", label="Februari", sort_order=8),
    AcademicMonth(code="MAR", label="Maret", sort_order=9),
    AcademicMonth(code="APR", label="April", sort_order=10),
    AcademicMonth(code="MEI", label="Mei", sort_order=11),
    AcademicMonth(code="JUN", label="Juni", sort_order=12),
)

JULY_CODE = "JUL"
JULY_SORT_ORDER = 1

_CODE_BY_SORT_ORDER = {month.sort_order: month.code for month in ACADEMIC_MONTHS}
_SORT_ORDER_BY_CODE = {month.code: month.sort_order for month in ACADEMIC_MONTHS}

ACADEMIC_SORT_ORDERS: tuple[int, ...] = tuple(
    month.sort_order for month in ACADEMIC_MONTHS
)


def map_sort_order_to_month_code(sort_order: int | None) -> str | None:
    """Return the academic-month code for a ledger sort order.

    ``None`` is returned for July, for values outside 2..12 and for a
    missing sort order.
    """

    if sort_order is None or isinstance(sort_order, bool):
        return None
    return _CODE_BY_SORT_ORDER.get(sort_order)


def month_code_to_sort_order(code: str) -> int | None:
    return _SORT_ORDER_BY_CODE.get(code.strip().upper())


def parse_sort_order(value: object) -> int | None:
    """Coerce a loosely-typed ``sortasi`` value into an int, if possible."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return None
    if not parsed.is_integer():
        return None
    return int(parsed)


def resolve_month_code(sort_order: object, textual_month: object) -> str:
    """Resolve the month label used in payment notifications.

    Unlike the dashboard slots, July resolves to ``JUL`` here. When the
    sort order is unusable the ledger's textual month is used instead.
    """

    parsed = parse_sort_order(sort_order)
    if parsed == JULY_SORT_ORDER:
        return JULY_CODE
    code = map_sort_order_to_month_code(parsed)
    if code is not None:
        return code
    if textual_month is None:
        return ""
    return str(textual_month).strip().upper()
