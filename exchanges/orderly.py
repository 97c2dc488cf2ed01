import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import requests

from auth import CONTENT_TYPE_JSON, RequestConfig, build_authenticated_request, serialize_body
from config import Credential
from errors import ApiError, ConfigError
from models import ApiResponse

logger = logging.getLogger(__name__)


class OrderlyClient:
    """
    REST client for the Orderly Network API.
    Public endpoints go out unsigned; private ones are signed per request
    with the account's Orderly key.
    """

    def __init__(self, api_url: str, credential: Optional[Credential] = None, timeout: float = 10):
        self.api_url = api_url.rstrip("/")
        self.credential = credential
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings, authenticated: bool = True) -> "OrderlyClient":
        credential = settings.credential() if authenticated else None
        return cls(settings.api_url, credential, timeout=settings.request_timeout)

    # ===============================
    # Transport
    # ===============================
    def send(self, path: str, config: RequestConfig) -> ApiResponse:
        """
        One HTTP round trip. Raises ApiError on a non-2xx status or a
        ``success: false`` payload; network errors propagate as-is.
        """
        data = config.body.encode("utf-8") if config.body is not None else None
        r = requests.request(
            config.method,
            f"{self.api_url}{path}",
            headers=config.headers,
            data=data,
            timeout=self.timeout,
        )
        logger.debug(f"{config.method} {path} -> {r.status_code}")

        try:
            payload = r.json()
        except ValueError:
            payload = {"raw": r.text}

        if not r.ok:
            raise ApiError(f"{config.method} {path} failed with HTTP {r.status_code}",
                           status_code=r.status_code, payload=payload)

        resp = ApiResponse.model_validate(payload) if isinstance(payload, dict) else ApiResponse(data=payload)
        if not resp.success:
            raise ApiError(f"{config.method} {path} rejected", status_code=r.status_code, payload=payload)
        return resp

    def public(self, method: str, path: str, body: Any = None) -> ApiResponse:
        if body is None:
            return self.send(path, RequestConfig(method.upper()))
        headers = {"Content-Type": CONTENT_TYPE_JSON}
        return self.send(path, RequestConfig(method.upper(), headers, serialize_body(body)))

    def private(self, method: str, path: str, body: Any = None) -> ApiResponse:
        if self.credential is None:
            raise ConfigError(f"{method} {path} needs an Orderly key credential")
        config = build_authenticated_request(
            method,
            path,
            body,
            self.credential.account_id,
            self.credential.orderly_key,
            self.credential.private_key,
        )
        return self.send(path, config)

    # ===============================
    # Public endpoints
    # ===============================
    def registration_nonce(self) -> int:
        resp = self.public("GET", "/v1/registration_nonce")
        return int(resp.data_dict()["registration_nonce"])

    def get_account(self, address: str, broker_id: str, chain_type: str = "EVM") -> ApiResponse:
        query = urlencode({"address": address, "broker_id": broker_id, "chain_type": chain_type})
        return self.public("GET", f"/v1/get_account?{query}")

    def register_account(self, message: Dict[str, Any], signature: str, user_address: str) -> ApiResponse:
        body = {"message": message, "signature": signature, "userAddress": user_address}
        return self.public("POST", "/v1/register_account", body)

    def add_orderly_key(self, message: Dict[str, Any], signature: str, user_address: str) -> ApiResponse:
        body = {"message": message, "signature": signature, "userAddress": user_address}
        return self.public("POST", "/v1/orderly_key", body)

    # ===============================
    # Private endpoints
    # ===============================
    def create_order(self, body: Dict[str, Any]) -> ApiResponse:
        return self.private("POST", "/v1/order", body)

    def cancel_order(self, order_id: int, symbol: str) -> ApiResponse:
        query = urlencode({"order_id": str(order_id), "symbol": symbol})
        return self.private("DELETE", f"/v1/order?{query}")

    def get_orders(self, params: Dict[str, Any]) -> ApiResponse:
        query = urlencode(params)
        return self.private("GET", f"/v1/orders?{query}" if query else "/v1/orders")

    def remove_orderly_key(self, orderly_key: str) -> ApiResponse:
        return self.private("POST", "/v1/client/remove_orderly_key", {"orderly_key": orderly_key})

    def withdraw_nonce(self) -> ApiResponse:
        return self.private("GET", "/v1/withdraw_nonce")

    def withdraw_request(self, body: Dict[str, Any]) -> ApiResponse:
        return self.private("POST", "/v1/withdraw_request", body)

