from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PricingMethod(str, Enum):
    per_item = "perItem"
    per_location = "perLocation"
    per_trip = "perTrip"

    @property
    def label(self) -> str:
        return PRICING_METHOD_LABELS[self]

    @property
    def has_rows(self) -> bool:
        return self is not PricingMethod.per_item


class Role(str, Enum):
    vendor = "vendor"
    customer = "customer"
    price_list = "priceList"


PRICING_METHOD_LABELS: dict[PricingMethod, str] = {
    PricingMethod.per_item: "Per Item",
    PricingMethod.per_location: "Per Location",
    PricingMethod.per_trip: "Per Trip",
}


@dataclass(frozen=True)
class RoleFieldNames:
    """Wire names and display labels of the role-dependent amount fields."""

    item_field: str
    item_label: str
    row_field: str
    row_label: str


ROLE_FIELD_NAMES: dict[Role, RoleFieldNames] = {
    Role.vendor: RoleFieldNames(
        item_field="cost",
        item_label="Base Cost",
        row_field="cost",
        row_label="Cost",
    ),
    Role.customer: RoleFieldNames(
        item_field="basePrice",
        item_label="Base Price",
        row_field="price",
        row_label="Price",
    ),
    Role.price_list: RoleFieldNames(
        item_field="basePrice",
        item_label="Base Price",
        row_field="price",
        row_label="Price",
    ),
}


def field_names_for(role: Role | str) -> RoleFieldNames:
    return ROLE_FIELD_NAMES[Role(role)]


__all__ = [
    "PRICING_METHOD_LABELS",
    "PricingMethod",
    "ROLE_FIELD_NAMES",
    "Role",
    "RoleFieldNames",
    "field_names_for",
]
