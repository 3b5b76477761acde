from __future__ import annotations

from typing import Sequence

from pydantic import Field, model_validator

from .common import ApiModel


class VendorCostData(ApiModel):
    vendor: str
    vendor_name: str | None = None
    vend_account: str | None = None
    price_list_id: str | None = None
    price_list_name: str | None = None
    cost: float


class VendorCostRange(ApiModel):
    min: float = 0
    max: float = 0
    average: float = 0
    count: int = 0
    total_vendors: int = 0


class VendorCostResponse(ApiModel):
    data: Sequence[VendorCostData] = Field(default_factory=list)
    cost_range: VendorCostRange = Field(default_factory=VendorCostRange)


class VendorCostQuery(ApiModel):
    """Lookup context for the vendor cost window of one sub-activity."""

    sub_activity_id: str = Field(min_length=1)
    location: str | None = None
    from_location: str | None = None
    to_location: str | None = None

    @model_validator(mode="after")
    def _single_location_context(self) -> "VendorCostQuery":
        if self.location and (self.from_location or self.to_location):
            raise ValueError("location cannot be combined with fromLocation/toLocation")
        return self

    def to_params(self) -> dict[str, str]:
        params = {"subActivityId": self.sub_activity_id}
        if self.location:
            params["location"] = self.location
        if self.from_location:
            params["fromLocation"] = self.from_location
        if self.to_location:
            params["toLocation"] = self.to_location
        return params

    @property
    def cache_key(self) -> str:
        parts = [self.sub_activity_id, self.location or "", self.from_location or "", self.to_location or ""]
        return ":".join(parts)


__all__ = ["VendorCostData", "VendorCostQuery", "VendorCostRange", "VendorCostResponse"]
