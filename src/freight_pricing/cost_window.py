from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from .models.vendor_cost import VendorCostRange, VendorCostResponse

MAX_MARKERS = 4


class CostBand(str, Enum):
    low = "low"
    mid = "mid"
    high = "high"


@dataclass(frozen=True)
class VendorMarker:
    vendor: str
    vend_account: str | None
    cost: float
    position: float
    band: CostBand
    savings_percent: int


@dataclass
class CostWindow:
    """Vendor costs laid out on a 0-100 scale between the cheapest and dearest vendor."""

    cost_range: VendorCostRange
    markers: list[VendorMarker] = field(default_factory=list)
    customer_price: float | None = None
    average_position: float | None = None

    @property
    def is_empty(self) -> bool:
        return not self.markers


def vendor_position(cost: float, cost_range: VendorCostRange) -> float:
    span = cost_range.max - cost_range.min
    if span == 0:
        return 50.0
    return (cost - cost_range.min) / span * 100


def cost_band(position: float) -> CostBand:
    if position <= 33:
        return CostBand.low
    if position <= 66:
        return CostBand.mid
    return CostBand.high


def savings_percent(cost: float, customer_price: float | None) -> int:
    if not customer_price:
        return 0
    # rounds half up
    return math.floor((customer_price - cost) / customer_price * 100 + 0.5)


def build_cost_window(
    response: VendorCostResponse,
    *,
    customer_price: float | None = None,
    limit: int = MAX_MARKERS,
) -> CostWindow:
    cost_range = response.cost_range
    markers = []
    for entry in list(response.data)[:limit]:
        position = vendor_position(entry.cost, cost_range)
        markers.append(
            VendorMarker(
                vendor=entry.vendor,
                vend_account=entry.vend_account,
                cost=entry.cost,
                position=position,
                band=cost_band(position),
                savings_percent=savings_percent(entry.cost, customer_price),
            )
        )
    average_position = None
    if markers and cost_range.max > cost_range.min:
        average_position = vendor_position(cost_range.average, cost_range)
    return CostWindow(
        cost_range=cost_range,
        markers=markers,
        customer_price=customer_price,
        average_position=average_position,
    )


__all__ = [
    "CostBand",
    "CostWindow",
    "MAX_MARKERS",
    "VendorMarker",
    "build_cost_window",
    "cost_band",
    "savings_percent",
    "vendor_position",
]
