from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Sequence

from .client import PricingApiClient, PricingApiError
from .cost_window import CostWindow, build_cost_window
from .models.price_list import PriceList
from .models.pricing import Role
from .models.vendor_cost import VendorCostQuery, VendorCostResponse
from .notifications import ERROR_TITLE, SUCCESS_TITLE, LoggingNotifier, Notifier
from .repository import Operation, PriceListRepository
from .validation import FieldError, build_price_schema

logger = logging.getLogger(__name__)

SUCCESS_MESSAGES: dict[Operation, str] = {
    Operation.add: "Sub-activity added to price list successfully",
    Operation.edit: "Price list updated successfully",
    Operation.delete: "Sub-activity deleted successfully",
}

FALLBACK_MESSAGES: dict[tuple[Role, Operation], str] = {
    (Role.vendor, Operation.add): "Failed to add sub activity cost",
    (Role.vendor, Operation.edit): "An unexpected error occurred",
    (Role.vendor, Operation.delete): "Failed to delete sub activity cost",
    (Role.customer, Operation.add): "Failed to add sub activity to price list",
    (Role.customer, Operation.edit): "An unexpected error occurred",
    (Role.customer, Operation.delete): "Unexpected error occurred",
    (Role.price_list, Operation.add): "Failed to add sub activity to price list",
    (Role.price_list, Operation.edit): "An unexpected error occurred",
    (Role.price_list, Operation.delete): "Unexpected error occurred",
}


@dataclass
class OperationResult:
    ok: bool
    message: str | None = None
    errors: list[FieldError] = field(default_factory=list)
    price_lists: Sequence[PriceList] = field(default_factory=tuple)


class PriceListService:
    """Adds, edits and deletes priced lines for one role.

    Payloads are validated against the role schema before anything is sent.
    Every request that reaches the API ends with exactly one notification, and
    a successful one reloads the owner's price lists from the API.
    """

    def __init__(
        self,
        *,
        client: PricingApiClient,
        repository: PriceListRepository,
        notifier: Notifier | None = None,
    ) -> None:
        self._client = client
        self.repository = repository
        self._notifier = notifier or LoggingNotifier()

    @property
    def role(self) -> Role:
        return self.repository.role

    def add_line(self, owner_id: str, price_list_id: str, payload: Mapping[str, Any]) -> OperationResult:
        checked = build_price_schema(self.role).validate(payload)
        if not checked.ok:
            return OperationResult(ok=False, errors=checked.errors)
        body = build_price_schema(self.role).to_payload(checked.value)
        return self._mutate(
            Operation.add,
            owner_id,
            lambda: self._client.add_sub_activity_price(self.role, price_list_id, body),
            price_list_id=price_list_id,
        )

    def edit_line(
        self,
        owner_id: str,
        price_list_id: str,
        sub_activity_id: str,
        payload: Mapping[str, Any],
    ) -> OperationResult:
        checked = build_price_schema(self.role).validate(payload)
        if not checked.ok:
            return OperationResult(ok=False, errors=checked.errors)
        body = build_price_schema(self.role).to_payload(checked.value)
        return self._mutate(
            Operation.edit,
            owner_id,
            lambda: self._client.edit_sub_activity_price(self.role, price_list_id, sub_activity_id, body),
            price_list_id=price_list_id,
        )

    def delete_line(self, owner_id: str, price_list_id: str, line_id: str) -> OperationResult:
        return self._mutate(
            Operation.delete,
            owner_id,
            lambda: self._client.delete_sub_activity_price(self.role, price_list_id, line_id),
            price_list_id=price_list_id,
        )

    def _mutate(
        self,
        operation: Operation,
        owner_id: str,
        call: Callable[[], Any],
        *,
        price_list_id: str,
    ) -> OperationResult:
        log_fields = {
            "operation": operation.value,
            "role": self.role.value,
            "owner_id": owner_id,
            "price_list_id": price_list_id,
        }
        try:
            with self.repository.track(operation):
                call()
        except PricingApiError as exc:
            message = exc.server_message or FALLBACK_MESSAGES[(self.role, operation)]
            logger.warning(
                "Price list mutation failed",
                extra={**log_fields, "status_code": exc.status_code, "error": str(exc)},
            )
            self._notifier.notify(ERROR_TITLE, message, variant="destructive")
            return OperationResult(ok=False, message=message)

        price_lists: Sequence[PriceList] = ()
        try:
            price_lists = self.repository.reload(owner_id)
        except PricingApiError as exc:
            logger.warning("Reload after mutation failed", extra={**log_fields, "error": str(exc)})

        logger.info("Price list mutation succeeded", extra=log_fields)
        self._notifier.notify(SUCCESS_TITLE, SUCCESS_MESSAGES[operation])
        return OperationResult(ok=True, message=SUCCESS_MESSAGES[operation], price_lists=price_lists)


class VendorCostLookup:
    """Cache of vendor cost windows keyed by sub-activity and location context."""

    def __init__(self, client: PricingApiClient) -> None:
        self._client = client
        self._results: Dict[str, VendorCostResponse] = {}
        self._loading: Dict[str, bool] = {}
        self._errors: Dict[str, str] = {}

    def fetch(self, query: VendorCostQuery, key: str | None = None) -> VendorCostResponse | None:
        key = key or query.cache_key
        self._loading[key] = True
        self._errors[key] = ""
        try:
            response = self._client.get_sub_activity_cost(query)
        except PricingApiError as exc:
            self._errors[key] = str(exc) or "Failed to fetch vendor cost data"
            logger.warning("Vendor cost lookup failed", extra={"key": key, "error": str(exc)})
            return None
        finally:
            self._loading[key] = False
        self._results[key] = response
        return response

    def result(self, key: str) -> VendorCostResponse | None:
        return self._results.get(key)

    def is_loading(self, key: str) -> bool:
        return self._loading.get(key, False)

    def error(self, key: str) -> str:
        return self._errors.get(key, "")

    def cost_window(self, key: str, *, customer_price: float | None = None) -> CostWindow | None:
        response = self.result(key)
        if response is None:
            return None
        return build_cost_window(response, customer_price=customer_price)


__all__ = [
    "FALLBACK_MESSAGES",
    "OperationResult",
    "PriceListService",
    "SUCCESS_MESSAGES",
    "VendorCostLookup",
]
