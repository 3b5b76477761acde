from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from enum import Enum
from typing import Dict, Iterator, Sequence

from .client import PricingApiClient
from .models.price_list import PriceList, SubActivityPriceRecord
from .models.pricing import Role

logger = logging.getLogger(__name__)


class LoadingState(str, Enum):
    idle = "idle"
    pending = "pending"
    fulfilled = "fulfilled"
    rejected = "rejected"


class Operation(str, Enum):
    fetch = "fetch"
    add = "add"
    edit = "edit"
    delete = "delete"


class PriceListRepository:
    """Holds the price lists fetched for each owner and the state of every operation.

    The owner is a vendor id for the vendor role (one vendor can have several
    price lists) and the price-list id itself for the other roles. Price lists
    are only ever replaced wholesale by ``reload``.
    """

    def __init__(self, client: PricingApiClient, *, role: Role | str) -> None:
        self._client = client
        self.role = Role(role)
        self._price_lists: Dict[str, list[PriceList]] = {}
        self._states: Dict[Operation, LoadingState] = {op: LoadingState.idle for op in Operation}
        self._errors: Dict[Operation, str | None] = {op: None for op in Operation}
        self._lock = threading.Lock()

    def reload(self, owner_id: str) -> list[PriceList]:
        with self.track(Operation.fetch):
            if self.role is Role.vendor:
                price_lists: list[PriceList] = list(self._client.list_vendor_price_lists(owner_id))
            else:
                price_lists = [self._client.get_price_list(owner_id)]
        with self._lock:
            self._price_lists[owner_id] = price_lists
        logger.debug(
            "Reloaded price lists",
            extra={"owner_id": owner_id, "role": self.role.value, "count": len(price_lists)},
        )
        return price_lists

    def get(self, owner_id: str) -> Sequence[PriceList]:
        with self._lock:
            return tuple(self._price_lists.get(owner_id, ()))

    def find_line(
        self,
        owner_id: str,
        price_list_id: str,
        sub_activity_id: str,
    ) -> SubActivityPriceRecord | None:
        for price_list in self.get(owner_id):
            if price_list.id == price_list_id:
                return price_list.find_line(sub_activity_id)
        return None

    def state(self, operation: Operation) -> LoadingState:
        with self._lock:
            return self._states[operation]

    def error(self, operation: Operation) -> str | None:
        with self._lock:
            return self._errors[operation]

    def is_pending(self, operation: Operation) -> bool:
        return self.state(operation) is LoadingState.pending

    @contextmanager
    def track(self, operation: Operation) -> Iterator[None]:
        """Mark ``operation`` pending for the duration of the block.

        Failures leave the operation rejected with the error message and are
        re-raised to the caller.
        """
        self._set_state(operation, LoadingState.pending)
        try:
            yield
        except Exception as exc:
            self._set_state(operation, LoadingState.rejected, str(exc))
            raise
        self._set_state(operation, LoadingState.fulfilled)

    def _set_state(self, operation: Operation, state: LoadingState, error: str | None = None) -> None:
        with self._lock:
            self._states[operation] = state
            self._errors[operation] = error


__all__ = ["LoadingState", "Operation", "PriceListRepository"]
