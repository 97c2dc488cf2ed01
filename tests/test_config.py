import logging
import os
from unittest.mock import patch

import pytest

from config import Settings, load_settings
from conftest import WALLET_KEY
from errors import ConfigError
from keys import orderly_key_from_private_key


class TestSettings:

    def test_defaults(self):
        settings = Settings()
        assert settings.api_url == "https://api.orderly.org"
        assert settings.chain_id == 80001
        assert settings.broker_id == "woofi_pro"
        assert settings.request_timeout == 10
        assert settings.env_file == ".env"

    def test_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("ORDERLY_API_URL", "https://testnet-api.orderly.org")
        monkeypatch.setenv("CHAIN_ID", "421614")
        monkeypatch.setenv("BROKER_ID", " demo ")
        settings = Settings()
        assert settings.api_url == "https://testnet-api.orderly.org"
        assert settings.chain_id == 421614
        assert settings.broker_id == "demo"

    def test_account_id_fallback(self, monkeypatch):
        monkeypatch.setenv("ORDERLY_ACCOUNT_ID", "0xfallback")
        assert Settings().account_id == "0xfallback"
        monkeypatch.setenv("ACCOUNT_ID", "0xprimary")
        assert Settings().account_id == "0xprimary"


class TestCredential:

    def test_complete(self, monkeypatch, seed):
        monkeypatch.setenv("ACCOUNT_ID", "0xacc")
        monkeypatch.setenv("ORDERLY_KEY", "ed25519:KEY")
        monkeypatch.setenv("ORDERLY_PRIVATE_KEY", "0x" + seed.hex())

        cred = Settings().credential()
        assert (cred.account_id, cred.orderly_key, cred.private_key) == ("0xacc", "ed25519:KEY", seed)

    @pytest.mark.parametrize("missing", ["ACCOUNT_ID", "ORDERLY_KEY", "ORDERLY_PRIVATE_KEY"])
    def test_missing_value(self, monkeypatch, seed, missing):
        values = {"ACCOUNT_ID": "0xacc", "ORDERLY_KEY": "ed25519:KEY", "ORDERLY_PRIVATE_KEY": seed.hex()}
        for name, value in values.items():
            if name != missing:
                monkeypatch.setenv(name, value)
        with pytest.raises(ConfigError, match=missing):
            Settings().credential()

    def test_mismatched_key_warns(self, monkeypatch, seed, caplog):
        monkeypatch.setenv("ACCOUNT_ID", "0xacc")
        monkeypatch.setenv("ORDERLY_KEY", "ed25519:NotTheRightKey")
        monkeypatch.setenv("ORDERLY_PRIVATE_KEY", seed.hex())

        with caplog.at_level(logging.WARNING):
            cred = Settings().credential()

        assert cred.orderly_key == "ed25519:NotTheRightKey"
        assert "does not match" in caplog.text
        assert orderly_key_from_private_key(seed) in caplog.text
        assert seed.hex() not in caplog.text

    def test_matching_key_is_quiet(self, monkeypatch, seed, caplog):
        monkeypatch.setenv("ACCOUNT_ID", "0xacc")
        monkeypatch.setenv("ORDERLY_KEY", orderly_key_from_private_key(seed))
        monkeypatch.setenv("ORDERLY_PRIVATE_KEY", seed.hex())

        with caplog.at_level(logging.WARNING):
            Settings().credential()

        assert caplog.records == []

    def test_bad_hex(self, monkeypatch):
        monkeypatch.setenv("ACCOUNT_ID", "0xacc")
        monkeypatch.setenv("ORDERLY_KEY", "ed25519:KEY")
        monkeypatch.setenv("ORDERLY_PRIVATE_KEY", "zz")
        with pytest.raises(ConfigError):
            Settings().credential()


class TestWallet:

    def test_wallet(self, monkeypatch):
        monkeypatch.setenv("PRIVATE_KEY", WALLET_KEY)
        assert Settings().wallet().address.startswith("0x")

    def test_missing(self):
        with pytest.raises(ConfigError, match="PRIVATE_KEY"):
            Settings().wallet()

    @pytest.mark.parametrize("key", ["0x1234", "not-a-key"])
    def test_invalid(self, monkeypatch, key):
        monkeypatch.setenv("PRIVATE_KEY", key)
        with pytest.raises(ConfigError):
            Settings().wallet()


def test_load_settings_reads_env_file_without_overriding(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("BROKER_ID=from_file\nCHAIN_ID=421614\n")
    monkeypatch.setenv("BROKER_ID", "from_env")

    with patch.dict(os.environ):
        settings = load_settings(str(env_file))

    assert settings.broker_id == "from_env"
    assert settings.chain_id == 421614
