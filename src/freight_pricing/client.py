from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx
from google.cloud import secretmanager
from pydantic import TypeAdapter, ValidationError

from .config import Settings
from .models.price_list import PriceList, VendorPriceList
from .models.pricing import Role
from .models.vendor_cost import VendorCostQuery, VendorCostResponse

logger = logging.getLogger(__name__)

PRICE_LISTS_PATH = "/api/v1/price-lists"
VENDOR_PRICE_LISTS_PATH = "/api/v1/vendor-price-lists"
API_TOKEN_SECRET_ID = "pricing-api-token"

STATUS_MESSAGES: dict[int, str] = {
    400: "Bad request",
    401: "Unauthorized. Please log in again.",
    403: "Access denied",
    404: "Resource not found",
    409: "Conflict with existing data",
    422: "Validation error",
    429: "Too many requests. Please try again later.",
    500: "Server error. Please try again later.",
    502: "Bad gateway",
    503: "Service unavailable",
    504: "Gateway timeout",
}

_MESSAGE_KEYS = ("message", "error", "detail", "errorMessage")
INVALID_RESPONSE_MESSAGE = "Invalid response from server"


class PricingApiError(Exception):
    """Raised when the back-office API rejects a request or cannot be reached.

    ``server_message`` is only set when the response body carried its own
    message; ``str(error)`` always holds something presentable.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        server_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message


class PricingApiClient:
    """Thin client for the price-list and vendor-cost endpoints."""

    def __init__(
        self,
        *,
        base_url: str,
        token: str | None = None,
        timeout: float = 20.0,
        project_id: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Root URL of the back-office API
            token: Bearer token (or fetch from Secret Manager)
            timeout: Request timeout in seconds
            project_id: GCP project ID for Secret Manager
            transport: Optional httpx transport, used by tests
        """
        if not token and project_id:
            token = self._get_secret(project_id, API_TOKEN_SECRET_ID)

        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> "PricingApiClient":
        return cls(
            base_url=settings.api_base_url,
            token=settings.api_token,
            timeout=settings.api_timeout,
            project_id=settings.project_id,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "PricingApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get_price_list(self, price_list_id: str) -> PriceList:
        body = self._request("GET", f"{PRICE_LISTS_PATH}/{price_list_id}")
        return _parse(PriceList, body.get("data", body), path=f"{PRICE_LISTS_PATH}/{price_list_id}")

    def list_vendor_price_lists(self, vendor_id: str) -> list[VendorPriceList]:
        body = self._request("GET", VENDOR_PRICE_LISTS_PATH, params={"vendor": vendor_id})
        return _parse(list[VendorPriceList], body.get("data") or [], path=VENDOR_PRICE_LISTS_PATH)

    def add_sub_activity_price(
        self,
        role: Role | str,
        price_list_id: str,
        payload: Mapping[str, Any],
    ) -> dict[str, Any]:
        return self._request("POST", _line_path(role, price_list_id), json_body=dict(payload))

    def edit_sub_activity_price(
        self,
        role: Role | str,
        price_list_id: str,
        sub_activity_id: str,
        payload: Mapping[str, Any],
    ) -> dict[str, Any]:
        return self._request(
            "PUT",
            _line_path(role, price_list_id, sub_activity_id),
            json_body=dict(payload),
        )

    def delete_sub_activity_price(
        self,
        role: Role | str,
        price_list_id: str,
        line_id: str,
    ) -> dict[str, Any]:
        return self._request("DELETE", _line_path(role, price_list_id, line_id))

    def get_sub_activity_cost(self, query: VendorCostQuery) -> VendorCostResponse:
        path = f"{VENDOR_PRICE_LISTS_PATH}/sub-activity-cost"
        body = self._request("GET", path, params=query.to_params())
        return _parse(VendorCostResponse, body, path=path)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            response = self._client.request(method, path, params=params, json=json_body)
        except httpx.TimeoutException as exc:
            logger.warning("Pricing API timeout", extra={"method": method, "path": path})
            raise PricingApiError("Request timeout. Please try again.") from exc
        except httpx.RequestError as exc:
            logger.warning(
                "Pricing API unreachable",
                extra={"method": method, "path": path, "error": str(exc)},
            )
            raise PricingApiError("Network error. Please check your connection.") from exc

        body = _safe_json(response)
        if response.is_error:
            server_message = _extract_message(body)
            message = server_message or STATUS_MESSAGES.get(response.status_code, "An error occurred")
            logger.info(
                "Pricing API rejected request",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "server_message": server_message,
                },
            )
            raise PricingApiError(
                message,
                status_code=response.status_code,
                server_message=server_message,
            )
        return body or {}

    def _get_secret(self, project_id: str, secret_id: str) -> str:
        """Fetch secret from Secret Manager.

        Args:
            project_id: GCP project ID
            secret_id: Secret ID

        Returns:
            Secret value
        """
        client = secretmanager.SecretManagerServiceClient()
        name = f"projects/{project_id}/secrets/{secret_id}/versions/latest"
        response = client.access_secret_version(name=name)
        return response.payload.data.decode("UTF-8")


def _line_path(role: Role | str, price_list_id: str, line_id: str | None = None) -> str:
    if Role(role) is Role.vendor:
        path = f"{VENDOR_PRICE_LISTS_PATH}/{price_list_id}/sub-activity-prices"
    else:
        path = f"{PRICE_LISTS_PATH}/{price_list_id}/sub-activity"
    if line_id:
        path = f"{path}/{line_id}"
    return path


def _parse(shape: Any, data: Any, *, path: str) -> Any:
    try:
        return TypeAdapter(shape).validate_python(data)
    except ValidationError as exc:
        logger.warning(
            "Pricing API returned an unexpected body",
            extra={"path": path, "errors": exc.error_count()},
        )
        raise PricingApiError(INVALID_RESPONSE_MESSAGE) from exc


def _safe_json(response: httpx.Response) -> dict[str, Any] | None:
    if not response.content:
        return None
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else {"data": data}


def _extract_message(body: Mapping[str, Any] | None) -> str | None:
    if not body:
        return None
    for key in _MESSAGE_KEYS:
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return None


__all__ = ["PricingApiClient", "PricingApiError", "STATUS_MESSAGES"]
