import json
from typing import Any, Optional


class OrderlyError(Exception):
    """Base class for failures raised by this project."""


class ConfigError(OrderlyError):
    """Missing or malformed configuration / credentials."""


class OrderValidationError(OrderlyError, ValueError):
    """Request parameters rejected before anything is sent."""


class ApiError(OrderlyError):
    """The API answered with a non-2xx status or ``success: false``."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        self.status_code = status_code
        self.payload = payload
        detail = json.dumps(payload) if payload is not None else ""
        super().__init__(f"{message}: {detail}" if detail else message)


class DepositError(OrderlyError):
    """On-chain deposit could not be completed."""
