from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Annotated, Any, Literal, Mapping, Sequence, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    TypeAdapter,
    ValidationError,
    create_model,
)
from pydantic.alias_generators import to_camel, to_snake

from .models.pricing import PricingMethod, Role, RoleFieldNames, field_names_for

RequiredText = Annotated[str, Field(min_length=1, strict=True)]


def _wire_number(value: float) -> int | float:
    return int(value) if value.is_integer() else value


# Whole amounts go back out as integers ("cost": 50, not 50.0).
Amount = Annotated[
    float,
    Field(ge=0, strict=True, allow_inf_nan=False),
    PlainSerializer(_wire_number, return_type=Union[int, float]),
]

CLOSED_SHAPE = ConfigDict(extra="forbid", alias_generator=to_camel)

TEXT_LABELS: dict[str, str] = {
    "subActivity": "Sub activity",
    "location": "Location",
    "fromLocation": "From location",
    "toLocation": "To location",
    "pricingMethod": "Pricing method",
}

EMPTY_ROWS_MESSAGES: dict[PricingMethod, str] = {
    PricingMethod.per_location: "At least one location price is required",
    PricingMethod.per_trip: "At least one trip price is required",
}

_METHOD_TAGS = {method.value for method in PricingMethod}


class FieldError(BaseModel):
    path: str
    message: str


@dataclass
class ValidationResult:
    value: BaseModel | None = None
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.errors

    def messages_for(self, path: str) -> list[str]:
        return [error.message for error in self.errors if error.path == path]


class PriceSchema:
    """Closed discriminated validator for sub-activity price payloads of one role.

    Accepts exactly one of the perItem / perLocation / perTrip shapes, with the
    amount fields named for the role (see ``RoleFieldNames``). Invalid input is
    reported as field-level errors on the result, never raised.
    """

    def __init__(self, role: Role) -> None:
        self.role = role
        self.names = field_names_for(role)
        self.variants: dict[PricingMethod, type[BaseModel]] = {
            method: _line_model(role, method, self.names) for method in PricingMethod
        }
        union = Annotated[
            Union[tuple(self.variants.values())],
            Field(discriminator="pricing_method"),
        ]
        self._adapter: TypeAdapter[Any] = TypeAdapter(union)

    def validate(self, payload: Any) -> ValidationResult:
        try:
            value = self._adapter.validate_python(payload)
        except ValidationError as exc:
            return ValidationResult(errors=[self._field_error(error) for error in exc.errors()])
        return ValidationResult(value=value)

    def to_payload(self, value: BaseModel) -> dict[str, Any]:
        return value.model_dump(by_alias=True)

    def _field_error(self, error: Mapping[str, Any]) -> FieldError:
        loc: Sequence[Any] = error.get("loc", ())
        method: PricingMethod | None = None
        if loc and loc[0] in _METHOD_TAGS:
            method = PricingMethod(loc[0])
            loc = loc[1:]
        path = ".".join(str(part) for part in loc)
        return FieldError(path=path, message=self._message(error, loc, method))

    def _message(
        self,
        error: Mapping[str, Any],
        loc: Sequence[Any],
        method: PricingMethod | None,
    ) -> str:
        kind = error.get("type", "")
        name = next((part for part in reversed(loc) if isinstance(part, str)), "")
        in_row = any(isinstance(part, int) for part in loc)

        if kind == "extra_forbidden":
            return "Unrecognized field"
        if kind == "union_tag_not_found":
            return "Pricing method is required"
        if kind == "union_tag_invalid":
            return "Invalid pricing method"
        if kind in {"model_type", "model_attributes_type", "dict_type"}:
            return "Expected an object"

        if name == "locationPrices" and method is not None:
            if kind in {"missing", "too_short"}:
                return EMPTY_ROWS_MESSAGES[method]
            return "Expected a list of prices"

        if name == "pricingMethod" and method is not None:
            if kind == "missing":
                return "Pricing method is required"
            return f"Pricing method must be {method.value}"

        amount_label = self._amount_label(name, in_row)
        if amount_label is not None:
            if kind == "greater_than_equal":
                # Zero passes; the wording is kept as-is for existing callers.
                return f"{amount_label} must be positive"
            if kind == "missing":
                return f"{amount_label} is required"
            return f"{amount_label} must be a number"

        if name in TEXT_LABELS:
            if kind in {"missing", "string_too_short"}:
                return f"{TEXT_LABELS[name]} is required"
            return f"{TEXT_LABELS[name]} must be a string"

        return str(error.get("msg", "Invalid value"))

    def _amount_label(self, name: str, in_row: bool) -> str | None:
        if in_row and name == self.names.row_field:
            return self.names.row_label
        if not in_row and name == self.names.item_field:
            return self.names.item_label
        return None


def _line_model(role: Role, method: PricingMethod, names: RoleFieldNames) -> type[BaseModel]:
    prefix = f"{role.name.title().replace('_', '')}{method.name.title().replace('_', '')}"
    fields: dict[str, Any] = {
        "sub_activity": (RequiredText, ...),
        "pricing_method": (Literal[method.value], ...),
    }
    if method is PricingMethod.per_item:
        fields[to_snake(names.item_field)] = (Amount, ...)
    else:
        row_model = _row_model(prefix, method, names)
        fields["location_prices"] = (list[row_model], Field(min_length=1))
    return create_model(f"{prefix}Line", __config__=CLOSED_SHAPE, **fields)


def _row_model(prefix: str, method: PricingMethod, names: RoleFieldNames) -> type[BaseModel]:
    if method is PricingMethod.per_location:
        places: dict[str, Any] = {"location": (RequiredText, ...)}
    else:
        places = {
            "from_location": (RequiredText, ...),
            "to_location": (RequiredText, ...),
        }
    return create_model(
        f"{prefix}Row",
        __config__=CLOSED_SHAPE,
        pricing_method=(Literal[method.value], ...),
        **places,
        **{to_snake(names.row_field): (Amount, ...)},
    )


def build_price_schema(role: Role | str) -> PriceSchema:
    return _schema_for(Role(role))


@lru_cache(maxsize=None)
def _schema_for(role: Role) -> PriceSchema:
    return PriceSchema(role)


__all__ = [
    "EMPTY_ROWS_MESSAGES",
    "FieldError",
    "PriceSchema",
    "ValidationResult",
    "build_price_schema",
]
