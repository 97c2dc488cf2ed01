"""Orderly API request authentication.

Every private REST call is signed with the account's ed25519 Orderly key:

    message   = f"{timestamp}{METHOD}{path}{body}"
    signature = base64url(ed25519_sign(message))   # no "=" padding

and sent with the five headers below. The path must already carry the query
string in the order it will be sent; the body is the exact string that goes
over the wire.
"""
import base64
import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from nacl.signing import SigningKey

# ===============================
# Protocol constants
# ===============================
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_TIMESTAMP    = "orderly-timestamp"
HEADER_ACCOUNT_ID   = "orderly-account-id"
HEADER_KEY          = "orderly-key"
HEADER_SIGNATURE    = "orderly-signature"

CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"
CONTENT_TYPE_JSON = "application/json"

FORM_METHODS = {"GET", "DELETE"}
BODY_METHODS = {"POST", "PUT"}


def now_ms() -> int:
    return int(time.time() * 1000)


# ===============================
# Signing primitive
# ===============================
def sign_message(message: bytes, private_key: bytes) -> bytes:
    # Sign the message BYTES directly (ed25519 hashes internally).
    # SigningKey raises ValueError unless the seed is exactly 32 bytes.
    return SigningKey(private_key).sign(message).signature


def encode_signature(signature: bytes) -> str:
    return base64.urlsafe_b64encode(signature).decode("ascii").rstrip("=")


# ===============================
# Canonical message
# ===============================
def normalize_message(timestamp: int, method: str, path: str, body: str = "") -> str:
    return f"{timestamp}{method.upper()}{path}{body}"


def content_type_for(method: str) -> str:
    if method.upper() in FORM_METHODS:
        return CONTENT_TYPE_FORM
    return CONTENT_TYPE_JSON


def serialize_body(body: Any) -> str:
    """Render a request body as the exact string that is signed and sent."""
    if body is None:
        return ""
    if isinstance(body, str):
        return body
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False)


# ===============================
# Authenticated request
# ===============================
@dataclass
class RequestConfig:
    method: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None


def build_authenticated_request(
    method: str,
    path: str,
    body: Any,
    account_id: str,
    orderly_key: str,
    private_key: bytes,
) -> RequestConfig:
    """Sign one request and return the method, headers and body to send.

    Only POST and PUT carry a body. For any other method the signed body is
    the empty string and nothing is attached, so parameters must already be
    folded into ``path``.
    """
    method = method.upper()
    timestamp = now_ms()

    body_string = serialize_body(body) if method in BODY_METHODS else ""

    message = normalize_message(timestamp, method, path, body_string)
    signature = encode_signature(sign_message(message.encode("utf-8"), private_key))

    headers = {
        HEADER_CONTENT_TYPE: content_type_for(method),
        HEADER_TIMESTAMP: str(timestamp),
        HEADER_ACCOUNT_ID: account_id,
        HEADER_KEY: orderly_key,
        HEADER_SIGNATURE: signature,
    }
    return RequestConfig(method=method, headers=headers, body=body_string or None)


def hex_to_private_key(value: str) -> bytes:
    value = value.strip()
    if value[:2].lower() == "0x":
        value = value[2:]
    return bytes.fromhex(value)
