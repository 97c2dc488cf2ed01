"""Orderly key generation and persistence."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

import base58
from dotenv import set_key
from nacl.signing import SigningKey

logger = logging.getLogger(__name__)

KEY_PREFIX = "ed25519:"


@dataclass
class OrderlyKeyPair:
    orderly_key: str       # "ed25519:<base58 public key>"
    private_key_hex: str   # "0x" + 32-byte seed


def _tagged(verify_key_bytes: bytes) -> str:
    return KEY_PREFIX + base58.b58encode(verify_key_bytes).decode()


def generate_orderly_key() -> OrderlyKeyPair:
    sk = SigningKey.generate()
    return OrderlyKeyPair(
        orderly_key=_tagged(sk.verify_key.encode()),
        private_key_hex="0x" + sk.encode().hex(),
    )


def orderly_key_from_private_key(private_key: bytes) -> str:
    return _tagged(SigningKey(private_key).verify_key.encode())


# ===============================
# Credential stores
# ===============================
class CredentialStore:
    """Where a freshly registered Orderly key pair is kept."""

    def save(self, orderly_key: str, private_key_hex: str) -> None:
        raise NotImplementedError


class EnvFileCredentialStore(CredentialStore):
    """Writes ORDERLY_KEY / ORDERLY_PRIVATE_KEY into a dotenv file.

    Existing entries are replaced in place, missing ones are appended and
    every other line is left untouched.
    """

    def __init__(self, path=".env"):
        self.path = Path(path)

    def save(self, orderly_key: str, private_key_hex: str) -> None:
        self.path.touch(exist_ok=True)
        set_key(str(self.path), "ORDERLY_KEY", orderly_key, quote_mode="never")
        set_key(str(self.path), "ORDERLY_PRIVATE_KEY", private_key_hex, quote_mode="never")
        logger.info(f"Saved ORDERLY_KEY={orderly_key} and ORDERLY_PRIVATE_KEY to {self.path}")


@dataclass
class MemoryCredentialStore(CredentialStore):
    saved: List[Tuple[str, str]] = field(default_factory=list)

    def save(self, orderly_key: str, private_key_hex: str) -> None:
        self.saved.append((orderly_key, private_key_hex))
