import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from auth import hex_to_private_key
from errors import ConfigError
from keys import orderly_key_from_private_key
from wallet import WalletSigner

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.orderly.org"   # testnet: https://testnet-api.orderly.org


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


@dataclass
class Credential:
    account_id: str
    orderly_key: str     # "ed25519:..."
    private_key: bytes   # 32-byte ed25519 seed


class Settings(BaseModel):
    api_url: str = Field(default_factory=lambda: _env("ORDERLY_API_URL", DEFAULT_API_URL))
    chain_id: int = Field(default_factory=lambda: int(_env("CHAIN_ID", "80001")))
    broker_id: str = Field(default_factory=lambda: _env("BROKER_ID", "woofi_pro"))
    request_timeout: float = Field(default_factory=lambda: float(_env("REQUEST_TIMEOUT", "10")))
    log_level: str = Field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))

    # Orderly key (per-request ed25519 signing)
    account_id: str = Field(default_factory=lambda: _env("ACCOUNT_ID") or _env("ORDERLY_ACCOUNT_ID"))
    orderly_key: str = Field(default_factory=lambda: _env("ORDERLY_KEY"))
    orderly_private_key: str = Field(default_factory=lambda: _env("ORDERLY_PRIVATE_KEY"))

    # EVM wallet (typed-data signatures, deposits)
    private_key: str = Field(default_factory=lambda: _env("PRIVATE_KEY"))
    rpc_url: str = Field(default_factory=lambda: _env("RPC_URL"))
    vault_address: str = Field(default_factory=lambda: _env("ORDERLY_VAULT"))

    env_file: str = Field(default_factory=lambda: _env("ENV_FILE", ".env"))

    def credential(self) -> Credential:
        if not self.account_id:
            raise ConfigError("ACCOUNT_ID or ORDERLY_ACCOUNT_ID environment variable is required")
        if not self.orderly_key:
            raise ConfigError("ORDERLY_KEY environment variable is required (format 'ed25519:...')")
        if not self.orderly_private_key:
            raise ConfigError("ORDERLY_PRIVATE_KEY environment variable is required (ed25519 key in hex)")
        try:
            private_key = hex_to_private_key(self.orderly_private_key)
        except ValueError as e:
            raise ConfigError(f"ORDERLY_PRIVATE_KEY is not valid hex: {e}") from e

        derived = orderly_key_from_private_key(private_key) if len(private_key) == 32 else None
        if derived != self.orderly_key:
            logger.warning(f"ORDERLY_KEY does not match ORDERLY_PRIVATE_KEY. "
                           f"Derived: {derived}, configured: {self.orderly_key}")
        return Credential(self.account_id, self.orderly_key, private_key)

    def wallet(self) -> WalletSigner:
        if not self.private_key:
            raise ConfigError("PRIVATE_KEY environment variable is required")
        try:
            return WalletSigner(self.private_key)
        except Exception as e:
            raise ConfigError(f"PRIVATE_KEY is not a valid EVM private key: {e}") from e


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Read ``.env`` (the real environment wins) and build a fresh Settings."""
    load_dotenv(env_file or os.getenv("ENV_FILE", ".env"), override=False)
    return Settings()
