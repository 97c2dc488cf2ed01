import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from errors import ApiError

logger = logging.getLogger(__name__)


class ApiResponse(BaseModel):
    """Orderly JSON envelope: ``{"success": bool, "data": ..., ...}``."""
    model_config = ConfigDict(extra="allow")

    success: bool = False
    code: Optional[int] = None
    message: Optional[str] = None
    data: Optional[Any] = None
    timestamp: Optional[int] = None

    def data_dict(self) -> Dict[str, Any]:
        return self.data if isinstance(self.data, dict) else {}


# Older API versions returned the nonce under other names.
DEPRECATED_NONCE_FIELDS = (("data", "nonce"), ("top", "withdrawNonce"), ("top", "nonce"))


def parse_withdraw_nonce(resp: ApiResponse) -> int:
    data = resp.data_dict()
    if data.get("withdraw_nonce") is not None:
        return int(data["withdraw_nonce"])

    extra = resp.model_extra or {}
    for where, name in DEPRECATED_NONCE_FIELDS:
        value = data.get(name) if where == "data" else extra.get(name)
        if value is not None:
            logger.warning(f"Withdrawal nonce read from deprecated field '{name}'")
            return int(value)

    raise ApiError("Withdrawal nonce missing from response", payload=resp.model_dump())


# ===============================
# Operation results
# ===============================
@dataclass
class OrderResult:
    order_id: Optional[int]
    client_order_id: Optional[str]
    data: Dict[str, Any]


@dataclass
class CancelResult:
    order_id: int
    symbol: str
    status: Optional[str]
    data: Dict[str, Any]


@dataclass
class OrdersPage:
    orders: List[Dict[str, Any]] = field(default_factory=list)
    meta: Optional[Dict[str, Any]] = None


@dataclass
class RegistrationResult:
    user_address: str
    created: bool                      # False when the account already existed
    account_id: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


@dataclass
class AddKeyResult:
    user_address: str
    orderly_key: str
    data: Dict[str, Any]


@dataclass
class RemoveKeyResult:
    removed_orderly_key: str
    data: Dict[str, Any]


@dataclass
class WithdrawResult:
    user_address: str
    amount: str
    token: str
    chain_id: int
    withdraw_nonce: int
    data: Dict[str, Any]


@dataclass
class DepositResult:
    transaction_hash: str
    block_number: int
    vault_address: str
    amount: str
    user_address: str
    token: str = "USDC"
