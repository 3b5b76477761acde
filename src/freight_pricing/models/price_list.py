from __future__ import annotations

from datetime import datetime
from typing import Sequence

from pydantic import Field

from .common import ApiModel, ref_id
from .location import LocationRef
from .pricing import PricingMethod, Role, field_names_for


class Activity(ApiModel):
    id: str | None = Field(default=None, alias="_id")
    activity_name_en: str | None = None
    activity_name_ar: str | None = None


class TransactionType(ApiModel):
    id: str | None = Field(default=None, alias="_id")
    name: str | None = None


class SubActivityRef(ApiModel):
    id: str | None = Field(default=None, alias="_id")
    portal_item_name_en: str | None = None
    portal_item_name_ar: str | None = None
    pricing_method: PricingMethod | None = None
    activity: Activity | str | None = None
    transaction_type: TransactionType | str | None = None
    finance_effect: str | None = None
    is_active: bool = True


class LocationPriceRecord(ApiModel):
    """One persisted row of a perLocation or perTrip line."""

    id: str | None = Field(default=None, alias="_id")
    location: LocationRef | None = None
    from_location: LocationRef | None = None
    to_location: LocationRef | None = None
    price: float | None = None
    cost: float | None = None
    pricing_method: PricingMethod | None = None

    def value_for(self, role: Role | str) -> float | None:
        if field_names_for(role).row_field == "cost":
            return self.cost
        return self.price


class SubActivityPriceRecord(ApiModel):
    """A priced line as returned by the API; the method decides which fields matter."""

    id: str | None = Field(default=None, alias="_id")
    sub_activity: SubActivityRef | str
    pricing_method: PricingMethod
    base_price: float | None = None
    cost: float | None = None
    location_prices: Sequence[LocationPriceRecord] = Field(default_factory=list)

    @property
    def sub_activity_id(self) -> str:
        return ref_id(self.sub_activity)

    @property
    def sub_activity_name(self) -> str:
        if isinstance(self.sub_activity, SubActivityRef):
            return self.sub_activity.portal_item_name_en or self.sub_activity_id
        return self.sub_activity

    def single_value(self, role: Role | str) -> float | None:
        if self.pricing_method.has_rows:
            return None
        if field_names_for(role).item_field == "cost":
            return self.cost
        return self.base_price

    def row_values(self, role: Role | str) -> list[float]:
        if not self.pricing_method.has_rows:
            return []
        values = (row.value_for(role) for row in self.location_prices)
        return [value for value in values if value is not None]


class Vendor(ApiModel):
    id: str | None = Field(default=None, alias="_id")
    vendor_name: str | None = None
    vend_account: str | None = None


class PriceList(ApiModel):
    id: str | None = Field(default=None, alias="_id")
    name: str | None = None
    name_ar: str | None = None
    description: str | None = None
    description_ar: str | None = None
    is_active: bool = True
    is_default: bool = False
    effective_from: datetime | None = None
    effective_to: datetime | None = None
    sub_activity_prices: Sequence[SubActivityPriceRecord] = Field(default_factory=list)

    def find_line(self, sub_activity_id: str) -> SubActivityPriceRecord | None:
        for line in self.sub_activity_prices:
            if line.sub_activity_id == sub_activity_id or line.id == sub_activity_id:
                return line
        return None


class VendorPriceList(PriceList):
    vendor: Vendor | str | None = None

    @property
    def vendor_id(self) -> str:
        return ref_id(self.vendor)


__all__ = [
    "Activity",
    "LocationPriceRecord",
    "PriceList",
    "SubActivityPriceRecord",
    "SubActivityRef",
    "TransactionType",
    "Vendor",
    "VendorPriceList",
]
