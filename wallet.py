"""Wallet (EIP-712 typed-data) signatures for account-level actions.

Registration, adding an Orderly key and withdrawals are authorised by the
EVM wallet that owns the account, not by the per-request ed25519 key. The
domain and the field order of each schema are fixed by the server.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from eth_abi import encode
from eth_account import Account
from eth_account.messages import encode_typed_data
from web3 import Web3

from auth import now_ms

logger = logging.getLogger(__name__)

DOMAIN_NAME = "Orderly"
DOMAIN_VERSION = "1"
VERIFYING_CONTRACT = "0xCcCCccccCCCCcCCCCCCcCcCccCcCCCcCcccccccC"
WITHDRAW_VERIFYING_CONTRACT = "0x6F7a338F2aA472838dEFD3283eB360d4Dff5D203"

DEFAULT_SCOPE = "read,trading"
DEFAULT_EXPIRATION_DAYS = 365
DAY_MS = 24 * 60 * 60 * 1000

MESSAGE_TYPES = {
    "Registration": [
        {"name": "brokerId", "type": "string"},
        {"name": "chainId", "type": "uint256"},
        {"name": "timestamp", "type": "uint64"},
        {"name": "registrationNonce", "type": "uint256"},
    ],
    "AddOrderlyKey": [
        {"name": "brokerId", "type": "string"},
        {"name": "chainId", "type": "uint256"},
        {"name": "orderlyKey", "type": "string"},
        {"name": "scope", "type": "string"},
        {"name": "timestamp", "type": "uint64"},
        {"name": "expiration", "type": "uint64"},
    ],
    "Withdraw": [
        {"name": "brokerId", "type": "string"},
        {"name": "chainId", "type": "uint256"},
        {"name": "receiver", "type": "address"},
        {"name": "token", "type": "string"},
        {"name": "amount", "type": "uint256"},
        {"name": "withdrawNonce", "type": "uint64"},
        {"name": "timestamp", "type": "uint64"},
    ],
}

# Most stablecoins use 6 decimals; anything unknown is treated as 18.
TOKEN_DECIMALS = {
    "USDC": 6,
    "USDT": 6,
    "DAI": 18,
    "WETH": 18,
    "ETH": 18,
}


def token_decimals(token: str) -> int:
    return TOKEN_DECIMALS.get(token.upper(), 18)


def build_domain(chain_id: int, verifying_contract: str = VERIFYING_CONTRACT) -> Dict[str, Any]:
    return {
        "name": DOMAIN_NAME,
        "version": DOMAIN_VERSION,
        "chainId": chain_id,
        "verifyingContract": verifying_contract,
    }


@dataclass
class SignedMessage:
    message: Dict[str, Any]
    signature: str


class WalletSigner:
    """Signs Orderly typed-data messages with an EVM private key."""

    def __init__(self, private_key: str):
        self.account = Account.from_key(private_key)
        self.address = self.account.address

    def sign_typed(self, primary_type: str, domain: Dict[str, Any], message: Dict[str, Any]) -> str:
        signable = encode_typed_data(domain, {primary_type: MESSAGE_TYPES[primary_type]}, message)
        signed = self.account.sign_message(signable)
        return "0x" + bytes(signed.signature).hex()

    def sign_registration(self, broker_id: str, chain_id: int, registration_nonce: int,
                          timestamp: Optional[int] = None) -> SignedMessage:
        message = {
            "brokerId": broker_id,
            "chainId": chain_id,
            "timestamp": timestamp if timestamp is not None else now_ms(),
            "registrationNonce": int(registration_nonce),
        }
        signature = self.sign_typed("Registration", build_domain(chain_id), message)
        return SignedMessage(message, signature)

    def sign_add_orderly_key(self, broker_id: str, chain_id: int, orderly_key: str,
                             scope: str = DEFAULT_SCOPE,
                             expiration_days: int = DEFAULT_EXPIRATION_DAYS,
                             timestamp: Optional[int] = None) -> SignedMessage:
        timestamp = timestamp if timestamp is not None else now_ms()
        message = {
            "brokerId": broker_id,
            "chainId": chain_id,
            "orderlyKey": orderly_key,
            "scope": scope,
            "timestamp": timestamp,
            "expiration": timestamp + expiration_days * DAY_MS,
        }
        signature = self.sign_typed("AddOrderlyKey", build_domain(chain_id), message)
        return SignedMessage(message, signature)

    def sign_withdraw(self, broker_id: str, chain_id: int, token: str, amount: int,
                      withdraw_nonce: int, receiver: Optional[str] = None,
                      timestamp: Optional[int] = None) -> SignedMessage:
        message = {
            "brokerId": broker_id,
            "chainId": chain_id,
            "receiver": receiver or self.address,
            "token": token,
            "amount": int(amount),
            "withdrawNonce": int(withdraw_nonce),
            "timestamp": timestamp if timestamp is not None else now_ms(),
        }
        domain = build_domain(chain_id, WITHDRAW_VERIFYING_CONTRACT)
        signature = self.sign_typed("Withdraw", domain, message)
        return SignedMessage(message, signature)


# ===============================
# Hashes / units
# ===============================
def _hex(value: bytes) -> str:
    return "0x" + bytes(value).hex()


def broker_hash(broker_id: str) -> str:
    return _hex(Web3.keccak(text=broker_id))


def token_hash(token: str) -> str:
    return _hex(Web3.keccak(text=token))


def get_account_id(address: str, broker_id: str) -> str:
    """keccak256(abi.encode(address, keccak256(brokerId)))"""
    encoded = encode(
        ["address", "bytes32"],
        [Web3.to_checksum_address(address), Web3.keccak(text=broker_id)],
    )
    return _hex(Web3.keccak(encoded))


def parse_units(amount: str, decimals: int) -> int:
    """Human-readable amount -> integer smallest units, without rounding."""
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount!r}")
    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")
    scaled = value.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Amount {amount} has more than {decimals} decimals")
    return int(scaled)
