import pytest
from eth_account import Account
from eth_account.messages import encode_typed_data
from web3 import Web3

from conftest import WALLET_KEY
from wallet import (
    DAY_MS,
    MESSAGE_TYPES,
    VERIFYING_CONTRACT,
    WITHDRAW_VERIFYING_CONTRACT,
    WalletSigner,
    broker_hash,
    build_domain,
    get_account_id,
    parse_units,
    token_decimals,
    token_hash,
)


def recover(primary_type, domain, message, signature):
    signable = encode_typed_data(domain, {primary_type: MESSAGE_TYPES[primary_type]}, message)
    return Account.recover_message(signable, signature=signature)


@pytest.fixture
def signer():
    return WalletSigner(WALLET_KEY)


class TestWalletSigner:

    def test_address(self, signer):
        assert signer.address == Account.from_key(WALLET_KEY).address

    def test_registration(self, signer):
        signed = signer.sign_registration("woofi_pro", 421614, 123456, timestamp=1700000000000)

        assert signed.message == {
            "brokerId": "woofi_pro",
            "chainId": 421614,
            "timestamp": 1700000000000,
            "registrationNonce": 123456,
        }
        assert signed.signature.startswith("0x") and len(signed.signature) == 132
        domain = build_domain(421614)
        assert recover("Registration", domain, signed.message, signed.signature) == signer.address

    def test_add_orderly_key(self, signer):
        signed = signer.sign_add_orderly_key("woofi_pro", 80001, "ed25519:KEY", timestamp=1000)

        assert signed.message["scope"] == "read,trading"
        assert signed.message["expiration"] == 1000 + 365 * DAY_MS
        assert list(signed.message) == [f["name"] for f in MESSAGE_TYPES["AddOrderlyKey"]]
        assert recover("AddOrderlyKey", build_domain(80001), signed.message, signed.signature) == signer.address

    def test_withdraw_uses_withdraw_contract(self, signer):
        signed = signer.sign_withdraw("woofi_pro", 421614, "USDC", 5_000_000, 7, timestamp=1)

        assert signed.message["receiver"] == signer.address
        withdraw_domain = build_domain(421614, WITHDRAW_VERIFYING_CONTRACT)
        assert recover("Withdraw", withdraw_domain, signed.message, signed.signature) == signer.address

        other_domain = build_domain(421614, VERIFYING_CONTRACT)
        assert recover("Withdraw", other_domain, signed.message, signed.signature) != signer.address

    def test_chain_id_is_part_of_the_signature(self, signer):
        a = signer.sign_registration("woofi_pro", 1, 1, timestamp=1)
        b = signer.sign_registration("woofi_pro", 10, 1, timestamp=1)
        assert a.signature != b.signature


class TestHashes:

    def test_broker_and_token_hash(self):
        assert broker_hash("woofi_pro") == "0x" + bytes(Web3.keccak(text="woofi_pro")).hex()
        assert token_hash("USDC") == "0x" + bytes(Web3.keccak(text="USDC")).hex()

    def test_account_id_is_abi_encoded_keccak(self):
        address = Account.from_key(WALLET_KEY).address
        encoded = bytes(12) + bytes.fromhex(address[2:]) + bytes(Web3.keccak(text="woofi_pro"))
        assert get_account_id(address, "woofi_pro") == "0x" + bytes(Web3.keccak(encoded)).hex()

    def test_account_id_accepts_lowercase_address(self):
        address = Account.from_key(WALLET_KEY).address
        assert get_account_id(address.lower(), "b") == get_account_id(address, "b")
        assert get_account_id(address, "a") != get_account_id(address, "b")


class TestUnits:

    @pytest.mark.parametrize("amount,decimals,expected", [
        ("100", 6, 100_000_000),
        ("1.5", 6, 1_500_000),
        ("0.000001", 6, 1),
        ("2", 18, 2 * 10 ** 18),
        (" 10.25 ", 6, 10_250_000),
    ])
    def test_parse_units(self, amount, decimals, expected):
        assert parse_units(amount, decimals) == expected

    @pytest.mark.parametrize("amount", ["0.0000001", "abc", "", "NaN", "inf"])
    def test_parse_units_rejects(self, amount):
        with pytest.raises(ValueError):
            parse_units(amount, 6)

    def test_token_decimals(self):
        assert token_decimals("usdc") == 6
        assert token_decimals("USDT") == 6
        assert token_decimals("DAI") == 18
        assert token_decimals("UNKNOWN") == 18
