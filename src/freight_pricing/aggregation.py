from __future__ import annotations

from typing import Iterable, Sequence

from .models.price_list import SubActivityPriceRecord
from .models.pricing import Role
from .models.vendor_cost import VendorCostRange

NOT_AVAILABLE = "N/A"


def range_of(values: Iterable[float], *, total_vendors: int | None = None) -> VendorCostRange:
    """Summarize amounts as min/max/average; an empty input yields the zero range."""
    amounts = [float(value) for value in values]
    if not amounts:
        return VendorCostRange()
    return VendorCostRange(
        min=min(amounts),
        max=max(amounts),
        average=sum(amounts) / len(amounts),
        count=len(amounts),
        total_vendors=len(amounts) if total_vendors is None else total_vendors,
    )


def format_amount(value: float) -> str:
    """Group thousands the way en-US locale formatting does ("1,234", "1,234.5")."""
    rounded = round(float(value), 3)
    if rounded.is_integer():
        return f"{int(rounded):,}"
    return f"{rounded:,.3f}".rstrip("0").rstrip(".")


def format_cost_range(single: float | None, row_values: Sequence[float]) -> str:
    if single:
        return format_amount(single)
    if row_values:
        return f"{format_amount(min(row_values))}-{format_amount(max(row_values))}"
    return NOT_AVAILABLE


def format_row_value(value: float | None) -> str:
    if value is None:
        return NOT_AVAILABLE
    return format_amount(value)


def line_cost_display(line: SubActivityPriceRecord, role: Role | str) -> str:
    return format_cost_range(line.single_value(role), line.row_values(role))


def line_cost_range(line: SubActivityPriceRecord, role: Role | str) -> VendorCostRange:
    single = line.single_value(role)
    if single is not None:
        return range_of([single])
    return range_of(line.row_values(role))


__all__ = [
    "NOT_AVAILABLE",
    "format_amount",
    "format_cost_range",
    "format_row_value",
    "line_cost_display",
    "line_cost_range",
    "range_of",
]
