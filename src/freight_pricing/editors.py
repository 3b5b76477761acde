from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Mapping, Sequence

from .models.common import ref_id
from .models.price_list import SubActivityPriceRecord
from .models.pricing import PricingMethod, Role, field_names_for
from .validation import FieldError, ValidationResult, build_price_schema

if TYPE_CHECKING:
    from .service import OperationResult, PriceListService


def resolve_owner(role: Role, price_list_id: str, owner_id: str | None) -> str:
    """Return the id the edited price lists are reloaded by.

    Vendor price lists are fetched per vendor, so the vendor id is required;
    for the other roles the price list is its own owner.
    """
    if owner_id:
        return owner_id
    if role is Role.vendor:
        raise ValueError("owner_id (the vendor id) is required for vendor price lists")
    return price_list_id


class LineEditor:
    """Edit state for one priced line; the pricing method is fixed per editor class."""

    method: ClassVar[PricingMethod]

    def __init__(
        self,
        *,
        role: Role | str,
        price_list_id: str,
        sub_activity_id: str = "",
        owner_id: str | None = None,
    ) -> None:
        self.role = Role(role)
        self.names = field_names_for(self.role)
        self.price_list_id = price_list_id
        self.owner_id = resolve_owner(self.role, price_list_id, owner_id)
        self.sub_activity_id = sub_activity_id
        self.is_open = True
        self.is_submitting = False
        self.error_message: str | None = None

    @classmethod
    def from_record(
        cls,
        record: SubActivityPriceRecord,
        *,
        role: Role | str,
        price_list_id: str,
        owner_id: str | None = None,
    ) -> "LineEditor":
        raise NotImplementedError

    def payload(self) -> dict[str, Any]:
        raise NotImplementedError

    @property
    def has_changes(self) -> bool:
        raise NotImplementedError

    def validate(self) -> ValidationResult:
        return build_price_schema(self.role).validate(self.payload())

    @property
    def errors(self) -> list[FieldError]:
        return self.validate().errors

    @property
    def is_valid(self) -> bool:
        return self.validate().ok

    @property
    def can_submit(self) -> bool:
        return not self.is_submitting and self.has_changes and self.is_valid

    def submit(self, service: "PriceListService") -> "OperationResult | None":
        if not self.can_submit:
            return None
        self.is_submitting = True
        try:
            result = service.edit_line(
                self.owner_id,
                self.price_list_id,
                self.sub_activity_id,
                self.payload(),
            )
        finally:
            self.is_submitting = False
        self._after_submit(result)
        return result

    def close(self) -> None:
        self.is_open = False

    def _after_submit(self, result: "OperationResult") -> None:
        if result.ok:
            self.error_message = None
            self.close()
        else:
            self.error_message = result.message


class PerItemEditor(LineEditor):
    method = PricingMethod.per_item

    def __init__(self, *, value: float | None = 0, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.value = value
        self._initial_value = value

    @classmethod
    def from_record(
        cls,
        record: SubActivityPriceRecord,
        *,
        role: Role | str,
        price_list_id: str,
        owner_id: str | None = None,
    ) -> "PerItemEditor":
        return cls(
            role=role,
            price_list_id=price_list_id,
            owner_id=owner_id,
            sub_activity_id=record.sub_activity_id,
            value=record.single_value(role),
        )

    def set_value(self, value: float | None) -> None:
        self.value = value

    def payload(self) -> dict[str, Any]:
        return {
            "subActivity": self.sub_activity_id,
            "pricingMethod": self.method.value,
            self.names.item_field: self.value,
        }

    @property
    def has_changes(self) -> bool:
        return self.value != self._initial_value


class RowsEditor(LineEditor):
    """Editor for methods priced as a list of location rows."""

    place_fields: ClassVar[tuple[str, ...]]

    def __init__(self, *, rows: Sequence[Mapping[str, Any]] = (), **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.rows: list[dict[str, Any]] = [self._row(values) for values in rows]
        self._initial_rows = [dict(row) for row in self.rows]

    @classmethod
    def from_record(
        cls,
        record: SubActivityPriceRecord,
        *,
        role: Role | str,
        price_list_id: str,
        owner_id: str | None = None,
    ) -> "RowsEditor":
        row_field = field_names_for(role).row_field
        rows = []
        for location_price in record.location_prices:
            row = {name: ref_id(getattr(location_price, _ATTRS[name])) for name in cls.place_fields}
            row[row_field] = location_price.value_for(role)
            rows.append(row)
        return cls(
            role=role,
            price_list_id=price_list_id,
            owner_id=owner_id,
            sub_activity_id=record.sub_activity_id,
            rows=rows,
        )

    @property
    def field_names(self) -> tuple[str, ...]:
        return (*self.place_fields, self.names.row_field)

    def add_row(self, **values: Any) -> int:
        self.rows.append(self._row(values))
        return len(self.rows) - 1

    def remove_row(self, index: int) -> None:
        del self.rows[index]

    def update_row(self, index: int, **changes: Any) -> None:
        self._check_fields(changes)
        self.rows[index].update(changes)

    def payload(self) -> dict[str, Any]:
        return {
            "subActivity": self.sub_activity_id,
            "pricingMethod": self.method.value,
            "locationPrices": [{**row, "pricingMethod": self.method.value} for row in self.rows],
        }

    @property
    def has_changes(self) -> bool:
        if len(self.rows) != len(self._initial_rows):
            return True
        return any(row != initial for row, initial in zip(self.rows, self._initial_rows))

    def _row(self, values: Mapping[str, Any]) -> dict[str, Any]:
        self._check_fields(values)
        row: dict[str, Any] = {name: "" for name in self.place_fields}
        row[self.names.row_field] = 0
        row.update(values)
        return row

    def _check_fields(self, values: Mapping[str, Any]) -> None:
        unknown = set(values) - set(self.field_names)
        if unknown:
            raise ValueError(f"Unknown row fields for {self.method.value}: {sorted(unknown)}")


class PerLocationEditor(RowsEditor):
    method = PricingMethod.per_location
    place_fields = ("location",)


class PerTripEditor(RowsEditor):
    method = PricingMethod.per_trip
    place_fields = ("fromLocation", "toLocation")


_ATTRS = {
    "location": "location",
    "fromLocation": "from_location",
    "toLocation": "to_location",
}

EDITORS: dict[PricingMethod, type[LineEditor]] = {
    PricingMethod.per_item: PerItemEditor,
    PricingMethod.per_location: PerLocationEditor,
    PricingMethod.per_trip: PerTripEditor,
}

_unmapped = set(PricingMethod) - set(EDITORS)
if _unmapped:
    raise RuntimeError(f"No editor registered for {sorted(m.value for m in _unmapped)}")


def open_editor(
    record: SubActivityPriceRecord,
    *,
    role: Role | str,
    price_list_id: str,
    owner_id: str | None = None,
) -> LineEditor:
    """Return the editor matching the line's pricing method, pre-filled from the record."""
    editor_cls = EDITORS[record.pricing_method]
    return editor_cls.from_record(record, role=role, price_list_id=price_list_id, owner_id=owner_id)


class AddPriceEditor:
    """Create flow: choose a sub-activity and pricing method, then fill the variant."""

    def __init__(
        self,
        *,
        role: Role | str,
        price_list_id: str,
        owner_id: str | None = None,
        sub_activity_id: str = "",
        method: PricingMethod | str = PricingMethod.per_item,
    ) -> None:
        self.role = Role(role)
        self.price_list_id = price_list_id
        self.owner_id = resolve_owner(self.role, price_list_id, owner_id)
        self._sub_activity_id = sub_activity_id
        self.is_open = True
        self.error_message: str | None = None
        self.select_method(method)

    @property
    def sub_activity_id(self) -> str:
        return self._sub_activity_id

    @sub_activity_id.setter
    def sub_activity_id(self, value: str) -> None:
        self._sub_activity_id = value
        self.variant.sub_activity_id = value

    def select_method(self, method: PricingMethod | str) -> LineEditor:
        """Switch the pricing method; any values entered for the previous one are dropped."""
        self.method = PricingMethod(method)
        self.variant = EDITORS[self.method](
            role=self.role,
            price_list_id=self.price_list_id,
            owner_id=self.owner_id,
            sub_activity_id=self._sub_activity_id,
        )
        return self.variant

    def payload(self) -> dict[str, Any]:
        return self.variant.payload()

    @property
    def errors(self) -> list[FieldError]:
        return self.variant.errors

    @property
    def is_valid(self) -> bool:
        return self.variant.is_valid

    @property
    def can_submit(self) -> bool:
        return self.is_valid

    def submit(self, service: "PriceListService") -> "OperationResult | None":
        if not self.can_submit:
            return None
        result = service.add_line(self.owner_id, self.price_list_id, self.payload())
        if result.ok:
            self.error_message = None
            self.is_open = False
        else:
            self.error_message = result.message
        return result


__all__ = [
    "AddPriceEditor",
    "EDITORS",
    "LineEditor",
    "PerItemEditor",
    "PerLocationEditor",
    "PerTripEditor",
    "RowsEditor",
    "open_editor",
    "resolve_owner",
]
