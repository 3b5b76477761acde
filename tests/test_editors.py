import pytest

from freight_pricing.editors import (
    EDITORS,
    AddPriceEditor,
    PerItemEditor,
    PerLocationEditor,
    PerTripEditor,
    open_editor,
)
from freight_pricing.models.price_list import PriceList, SubActivityPriceRecord
from freight_pricing.models.pricing import PricingMethod
from freight_pricing.service import OperationResult


class StubService:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def edit_line(self, owner_id, price_list_id, sub_activity_id, payload):
        self.calls.append(("edit", owner_id, price_list_id, sub_activity_id, payload))
        return self.result

    def add_line(self, owner_id, price_list_id, payload):
        self.calls.append(("add", owner_id, price_list_id, payload))
        return self.result


@pytest.fixture
def lines(price_list_body):
    return PriceList.model_validate(price_list_body["data"]).sub_activity_prices


def test_every_pricing_method_has_an_editor():
    assert set(EDITORS) == set(PricingMethod)


def test_unknown_method_is_rejected_when_the_record_is_read():
    with pytest.raises(ValueError):
        SubActivityPriceRecord.model_validate({"subActivity": "S1", "pricingMethod": "perPallet"})


def test_dispatch_by_pricing_method(lines):
    editors = [open_editor(line, role="customer", price_list_id="PL-100") for line in lines]

    assert [type(editor) for editor in editors] == [PerItemEditor, PerLocationEditor, PerTripEditor]


def test_editors_are_prefilled_from_the_record(lines):
    per_item = open_editor(lines[0], role="customer", price_list_id="PL-100")
    per_location = open_editor(lines[1], role="customer", price_list_id="PL-100")

    assert per_item.value == 1234
    assert per_item.sub_activity_id == "SA-LOAD"
    assert per_location.rows == [
        {"location": "LOC-JED", "price": 100},
        {"location": "LOC-RUH", "price": 250},
    ]


def test_unchanged_trip_line_cannot_be_submitted(lines):
    editor = open_editor(lines[2], role="customer", price_list_id="PL-100")

    assert len(editor.rows) == 2
    assert editor.is_valid
    assert not editor.has_changes
    assert not editor.can_submit


def test_changing_one_row_value_enables_submit(lines):
    editor = open_editor(lines[2], role="customer", price_list_id="PL-100")

    editor.update_row(1, price=65)

    assert editor.has_changes
    assert editor.can_submit


def test_setting_a_row_back_to_its_original_value_disables_submit(lines):
    editor = open_editor(lines[2], role="customer", price_list_id="PL-100")

    editor.update_row(0, price=80)
    editor.update_row(0, price=75)

    assert not editor.can_submit


def test_adding_and_removing_rows_counts_as_change(lines):
    editor = open_editor(lines[1], role="customer", price_list_id="PL-100")

    index = editor.add_row(location="LOC-DMM", price=90)
    assert index == 2
    assert editor.can_submit

    editor.remove_row(2)
    assert not editor.has_changes


def test_removing_every_row_makes_the_line_invalid(lines):
    editor = open_editor(lines[1], role="customer", price_list_id="PL-100")

    editor.remove_row(0)
    editor.remove_row(0)

    assert editor.has_changes
    assert not editor.can_submit
    assert [e.message for e in editor.errors] == ["At least one location price is required"]


def test_new_rows_start_blank_and_invalid(lines):
    editor = open_editor(lines[2], role="customer", price_list_id="PL-100")

    editor.add_row()

    assert editor.rows[-1] == {"fromLocation": "", "toLocation": "", "price": 0}
    assert not editor.is_valid


def test_unknown_row_fields_are_refused(lines):
    editor = open_editor(lines[2], role="customer", price_list_id="PL-100")

    with pytest.raises(ValueError):
        editor.update_row(0, location="LOC-JED")
    with pytest.raises(ValueError):
        editor.add_row(cost=10)


def test_per_item_change_gating(lines):
    editor = open_editor(lines[0], role="customer", price_list_id="PL-100")

    assert not editor.can_submit
    editor.set_value(1500)
    assert editor.can_submit
    editor.set_value(-1)
    assert not editor.can_submit
    assert [(e.path, e.message) for e in editor.errors] == [("basePrice", "Base Price must be positive")]


def test_vendor_editor_uses_cost_fields(vendor_price_lists_body):
    vendor_list = PriceList.model_validate(vendor_price_lists_body["data"][0])
    editor = open_editor(vendor_list.sub_activity_prices[1], role="vendor", price_list_id="VPL-7", owner_id="V-7")

    editor.update_row(0, cost=1750)

    assert editor.payload() == {
        "subActivity": "SA-TRUCK",
        "pricingMethod": "perTrip",
        "locationPrices": [
            {"fromLocation": "LOC-JED", "toLocation": "LOC-RUH", "cost": 1750, "pricingMethod": "perTrip"},
            {"fromLocation": "LOC-RUH", "toLocation": "LOC-JED", "cost": 1650, "pricingMethod": "perTrip"},
        ],
    }
    assert editor.owner_id == "V-7"


def test_successful_submit_closes_the_editor(lines):
    editor = open_editor(lines[2], role="customer", price_list_id="PL-100")
    editor.update_row(0, price=80)
    service = StubService(OperationResult(ok=True, message="Price list updated successfully"))

    result = editor.submit(service)

    assert result.ok
    assert not editor.is_open
    assert service.calls[0][:4] == ("edit", "PL-100", "PL-100", "SA-TRUCK")


def test_failed_submit_keeps_the_editor_open_with_its_rows(lines):
    editor = open_editor(lines[2], role="customer", price_list_id="PL-100")
    editor.update_row(0, price=80)
    service = StubService(OperationResult(ok=False, message="Price list is locked"))

    editor.submit(service)

    assert editor.is_open
    assert editor.error_message == "Price list is locked"
    assert editor.rows[0]["price"] == 80
    assert editor.can_submit


def test_submit_without_changes_does_nothing(lines):
    editor = open_editor(lines[0], role="customer", price_list_id="PL-100")
    service = StubService(OperationResult(ok=True))

    assert editor.submit(service) is None
    assert service.calls == []


def test_add_editor_vendor_per_item():
    editor = AddPriceEditor(role="vendor", price_list_id="VPL-7", owner_id="V-7")
    editor.sub_activity_id = "S1"
    editor.variant.set_value(50)
    service = StubService(OperationResult(ok=True))

    editor.submit(service)

    assert service.calls == [
        ("add", "V-7", "VPL-7", {"subActivity": "S1", "pricingMethod": "perItem", "cost": 50})
    ]
    assert not editor.is_open


def test_add_editor_trip_requires_a_row():
    editor = AddPriceEditor(role="customer", price_list_id="PL-100", sub_activity_id="S1", method="perTrip")

    assert not editor.can_submit
    assert [e.message for e in editor.errors] == ["At least one trip price is required"]

    editor.variant.add_row(fromLocation="A", toLocation="B", price=75)
    assert editor.can_submit


def test_switching_method_drops_rows():
    editor = AddPriceEditor(role="customer", price_list_id="PL-100", sub_activity_id="S1", method="perLocation")
    editor.variant.add_row(location="L1", price=5)

    editor.select_method(PricingMethod.per_trip)

    assert isinstance(editor.variant, PerTripEditor)
    assert editor.variant.rows == []
    assert editor.variant.sub_activity_id == "S1"


def test_vendor_editors_need_the_vendor_as_owner(vendor_price_lists_body):
    vendor_list = PriceList.model_validate(vendor_price_lists_body["data"][0])

    with pytest.raises(ValueError, match="vendor id"):
        open_editor(vendor_list.sub_activity_prices[0], role="vendor", price_list_id="VPL-7")
    with pytest.raises(ValueError, match="vendor id"):
        AddPriceEditor(role="vendor", price_list_id="VPL-7")


def test_customer_price_list_owns_itself(lines):
    editor = open_editor(lines[0], role="customer", price_list_id="PL-100")
    adder = AddPriceEditor(role="priceList", price_list_id="PL-100")

    assert editor.owner_id == "PL-100"
    assert adder.owner_id == "PL-100"
