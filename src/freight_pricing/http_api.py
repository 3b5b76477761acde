from __future__ import annotations

import uuid
from typing import Any, Sequence

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .aggregation import format_row_value, line_cost_display, range_of
from .locations import format_location_price
from .logging_config import set_trace_id
from .models.price_list import SubActivityPriceRecord
from .models.pricing import Role
from .models.vendor_cost import VendorCostRange
from .validation import FieldError, build_price_schema

TRACE_HEADER = "X-Cloud-Trace-Context"


class ValidatePriceRequest(BaseModel):
    role: Role
    payload: Any = None


class ValidatePriceResponse(BaseModel):
    valid: bool
    errors: list[FieldError] = Field(default_factory=list)
    payload: dict[str, Any] | None = None


class CostRangeRequest(BaseModel):
    values: Sequence[float] = Field(default_factory=list)
    total_vendors: int | None = Field(default=None, alias="totalVendors")


class DisplayRequest(BaseModel):
    role: Role
    line: SubActivityPriceRecord


class DisplayRow(BaseModel):
    english: str
    arabic: str
    value: str


class DisplayResponse(BaseModel):
    pricing_method: str = Field(serialization_alias="pricingMethod")
    cost_range: str = Field(serialization_alias="costRange")
    rows: list[DisplayRow] = Field(default_factory=list)


def create_app() -> FastAPI:
    app = FastAPI(title="Freight Pricing API", version="0.1.0")

    @app.middleware("http")
    async def bind_trace_id(request: Request, call_next):
        header = request.headers.get(TRACE_HEADER, "")
        set_trace_id(header.split("/")[0] or uuid.uuid4().hex)
        try:
            return await call_next(request)
        finally:
            set_trace_id(None)

    @app.post("/v1/prices:validate", response_model=ValidatePriceResponse)
    async def validate_price(request: ValidatePriceRequest) -> ValidatePriceResponse:
        schema = build_price_schema(request.role)
        result = schema.validate(request.payload)
        if not result.ok:
            return ValidatePriceResponse(valid=False, errors=result.errors)
        return ValidatePriceResponse(valid=True, payload=schema.to_payload(result.value))

    @app.post("/v1/cost-range", response_model=VendorCostRange)
    async def cost_range(request: CostRangeRequest) -> VendorCostRange:
        return range_of(request.values, total_vendors=request.total_vendors)

    @app.post("/v1/prices:display", response_model=DisplayResponse, response_model_by_alias=True)
    async def display_price(request: DisplayRequest) -> DisplayResponse:
        line = request.line
        rows = []
        for location_price in line.location_prices:
            label = format_location_price(location_price)
            rows.append(
                DisplayRow(
                    english=label.english,
                    arabic=label.arabic,
                    value=format_row_value(location_price.value_for(request.role)),
                )
            )
        return DisplayResponse(
            pricing_method=line.pricing_method.label,
            cost_range=line_cost_display(line, request.role),
            rows=rows,
        )

    @app.get("/health")
    async def healthcheck() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    return app


__all__ = ["create_app"]
