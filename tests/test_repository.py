import pytest

from freight_pricing.client import PricingApiError
from freight_pricing.repository import LoadingState, Operation, PriceListRepository


def test_reload_replaces_cached_price_lists(backend, client, price_list_body):
    backend.add("GET", "/api/v1/price-lists/PL-100", json_body=price_list_body)
    repository = PriceListRepository(client, role="customer")

    assert repository.get("PL-100") == ()
    assert repository.state(Operation.fetch) is LoadingState.idle

    repository.reload("PL-100")

    assert [pl.id for pl in repository.get("PL-100")] == ["PL-100"]
    assert repository.state(Operation.fetch) is LoadingState.fulfilled
    assert repository.find_line("PL-100", "PL-100", "SA-CUSTOMS").id == "SAP-2"
    assert repository.find_line("PL-100", "PL-100", "SA-MISSING") is None


def test_vendor_owner_is_the_vendor(backend, client, vendor_price_lists_body):
    backend.add("GET", "/api/v1/vendor-price-lists", json_body=vendor_price_lists_body)
    repository = PriceListRepository(client, role="vendor")

    repository.reload("V-7")

    assert repository.find_line("V-7", "VPL-7", "SA-TRUCK").pricing_method.value == "perTrip"


def test_failed_reload_is_rejected_and_keeps_previous_data(backend, client, price_list_body):
    backend.add("GET", "/api/v1/price-lists/PL-100", json_body=price_list_body)
    repository = PriceListRepository(client, role="priceList")
    repository.reload("PL-100")

    backend.add("GET", "/api/v1/price-lists/PL-100", status_code=500)
    with pytest.raises(PricingApiError):
        repository.reload("PL-100")

    assert repository.state(Operation.fetch) is LoadingState.rejected
    assert repository.error(Operation.fetch) == "Server error. Please try again later."
    assert len(repository.get("PL-100")) == 1


def test_track_marks_pending_inside_the_block(client):
    repository = PriceListRepository(client, role="vendor")

    with repository.track(Operation.delete):
        assert repository.is_pending(Operation.delete)

    assert repository.state(Operation.delete) is LoadingState.fulfilled
    assert repository.state(Operation.add) is LoadingState.idle
