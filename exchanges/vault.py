"""On-chain side of deposits: USDC approve + Orderly Vault ``deposit``.

Addresses from https://orderly.network/docs/build-on-omnichain/addresses
"""
import logging
import time
from decimal import Decimal
from typing import Optional

from eth_account import Account
from web3 import Web3

from errors import ConfigError, DepositError
from models import DepositResult
from wallet import broker_hash, get_account_id, parse_units, token_hash

logger = logging.getLogger(__name__)

USDC_ADDRESSES = {
    1: "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",          # Ethereum
    11155111: "0x1c7D4B196Cb0C7B01d743Fbc6116a902379C7238",   # Ethereum Sepolia
    42161: "0xaf88d065e77c8cC2239327C5EDb3A432268e5831",      # Arbitrum One
    421614: "0x75faf114eafb1BDbe2F0316DF893fd58CE46AA4d",     # Arbitrum Sepolia
    10: "0x0b2c639c533813f4aa9d7837caf62653d097ff85",         # Optimism
    11155420: "0x5fd84259d66Cd46123540766Be93DFE6D43130D7",   # Optimism Sepolia
    8453: "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",       # Base
    84532: "0x036CbD53842c5426634e7929541eC2318f3dCF7e",      # Base Sepolia
    5000: "0x09bc4e0d864854c6afb6eb9a9cdf58ac190d0df9",       # Mantle (USDC.e)
    5003: "0xAcab8129E2cE587fD203FD770ec9ECAFA2C88080",       # Mantle Sepolia
    56: "0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d",         # BNB Smart Chain
    97: "0x31873b5804bABE258d6ea008f55e08DD00b7d51E",         # BNB Smart Chain testnet
}

ORDERLY_VAULT = {
    1: "0x816f722424b49cf1275cc86da9840fbd5a6167e9",
    11155111: "0x0EaC556c0C2321BA25b9DC01e4e3c95aD5CDCd2f",
    42161: "0x816f722424B49Cf1275cc86DA9840Fbd5a6167e9",
    421614: "0x0EaC556c0C2321BA25b9DC01e4e3c95aD5CDCd2f",
    10: "0x816f722424b49cf1275cc86da9840fbd5a6167e9",
    11155420: "0xEfF2896077B6ff95379EfA89Ff903598190805EC",
    8453: "0x816f722424b49cf1275cc86da9840fbd5a6167e9",
    84532: "0xdc7348975aE9334DbdcB944DDa9163Ba8406a0ec",
    5000: "0x816f722424b49cf1275cc86da9840fbd5a6167e9",
    5003: "0xfb0E5f3D16758984E668A3d76f0963710E775503",
    56: "0x816f722424B49Cf1275cc86DA9840Fbd5a6167e9",
    97: "0xaf2036D5143219fa00dDd90e7A2dbF3E36dba050",
}

RPC_URLS = {
    1: "https://rpc.ankr.com/eth",
    11155111: "https://rpc.ankr.com/eth_sepolia",
    42161: "https://arb1.arbitrum.io/rpc",
    421614: "https://sepolia-rollup.arbitrum.io/rpc",
    10: "https://mainnet.optimism.io",
    11155420: "https://sepolia.optimism.io",
    8453: "https://mainnet.base.org",
    84532: "https://sepolia.base.org",
    5000: "https://rpc.mantle.xyz",
    5003: "https://rpc.sepolia.mantle.xyz",
    56: "https://bsc-dataseed.binance.org/",
    97: "https://data-seed-prebsc-1-s1.binance.org:8545/",
}

ERC20_ABI = [
    {"name": "approve", "type": "function", "stateMutability": "nonpayable",
     "inputs": [{"name": "spender", "type": "address"}, {"name": "amount", "type": "uint256"}],
     "outputs": [{"name": "", "type": "bool"}]},
    {"name": "balanceOf", "type": "function", "stateMutability": "view",
     "inputs": [{"name": "account", "type": "address"}],
     "outputs": [{"name": "", "type": "uint256"}]},
    {"name": "decimals", "type": "function", "stateMutability": "view",
     "inputs": [], "outputs": [{"name": "", "type": "uint8"}]},
    {"name": "allowance", "type": "function", "stateMutability": "view",
     "inputs": [{"name": "owner", "type": "address"}, {"name": "spender", "type": "address"}],
     "outputs": [{"name": "", "type": "uint256"}]},
]

_DEPOSIT_DATA = {
    "name": "depositData", "type": "tuple",
    "components": [
        {"name": "accountId", "type": "bytes32"},
        {"name": "brokerHash", "type": "bytes32"},
        {"name": "tokenHash", "type": "bytes32"},
        {"name": "tokenAmount", "type": "uint128"},
    ],
}

VAULT_ABI = [
    {"name": "deposit", "type": "function", "stateMutability": "payable",
     "inputs": [_DEPOSIT_DATA], "outputs": []},
    {"name": "getDepositFee", "type": "function", "stateMutability": "view",
     "inputs": [{"name": "account", "type": "address"}, _DEPOSIT_DATA],
     "outputs": [{"name": "", "type": "uint256"}]},
]

UINT128_MASK = (1 << 128) - 1
ALLOWANCE_POLL_ATTEMPTS = 10
ALLOWANCE_POLL_DELAY = 1.0
RECEIPT_TIMEOUT = 120


def format_units(value: int, decimals: int) -> str:
    return str(Decimal(value).scaleb(-decimals))


class VaultClient:
    """USDC deposits into the Orderly Vault for one chain."""

    def __init__(self, w3: Web3, account, usdc_address: str, vault_address: str):
        self.w3 = w3
        self.account = account
        self.address = account.address
        self.usdc = w3.eth.contract(address=Web3.to_checksum_address(usdc_address), abi=ERC20_ABI)
        self.vault_address = Web3.to_checksum_address(vault_address)
        self.vault = w3.eth.contract(address=self.vault_address, abi=VAULT_ABI)

    @classmethod
    def for_chain(cls, chain_id: int, private_key: str,
                  rpc_url: Optional[str] = None,
                  vault_address: Optional[str] = None) -> "VaultClient":
        usdc_address = USDC_ADDRESSES.get(chain_id)
        if not usdc_address:
            raise ConfigError(f"USDC address not configured for chain ID {chain_id}")
        vault_address = vault_address or ORDERLY_VAULT.get(chain_id)
        if not vault_address:
            raise ConfigError(f"Orderly Vault address not configured for chain ID {chain_id}; set ORDERLY_VAULT")
        rpc_url = rpc_url or RPC_URLS.get(chain_id)
        if not rpc_url:
            raise ConfigError(f"No RPC URL for chain ID {chain_id}; set RPC_URL")

        w3 = Web3(Web3.HTTPProvider(rpc_url))
        return cls(w3, Account.from_key(private_key), usdc_address, vault_address)

    # ===============================
    # Transactions
    # ===============================
    def _send(self, fn, value: int = 0):
        tx = fn.build_transaction({
            "from": self.address,
            "nonce": self.w3.eth.get_transaction_count(self.address),
            "value": value,
        })
        signed = self.account.sign_transaction(tx)
        tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        logger.info(f"Transaction sent: {Web3.to_hex(tx_hash)}")
        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=RECEIPT_TIMEOUT)
        if receipt["status"] != 1:
            raise DepositError(f"Transaction reverted: {Web3.to_hex(tx_hash)}")
        return tx_hash, receipt

    def ensure_allowance(self, amount: int, decimals: int) -> None:
        current = self.usdc.functions.allowance(self.address, self.vault_address).call()
        logger.info(f"Current allowance: {format_units(current, decimals)}")
        if current >= amount:
            return

        logger.info("Approving USDC transfer to Orderly Vault...")
        self._send(self.usdc.functions.approve(self.vault_address, amount))

        # RPC nodes can lag behind the confirmed approval.
        for attempt in range(ALLOWANCE_POLL_ATTEMPTS):
            current = self.usdc.functions.allowance(self.address, self.vault_address).call()
            if current >= amount:
                return
            if attempt < ALLOWANCE_POLL_ATTEMPTS - 1:
                time.sleep(ALLOWANCE_POLL_DELAY)
        raise DepositError(
            f"Allowance verification failed. Expected: {format_units(amount, decimals)}, "
            f"Got: {format_units(current, decimals)}"
        )

    def deposit(self, amount: str, broker_id: str) -> DepositResult:
        decimals = self.usdc.functions.decimals().call()
        amount_units = parse_units(amount, decimals)
        if amount_units <= 0:
            raise DepositError(f"Deposit amount must be positive. Got: {amount}")

        balance = self.usdc.functions.balanceOf(self.address).call()
        logger.info(f"Current USDC balance: {format_units(balance, decimals)}")
        if balance < amount_units:
            raise DepositError(
                f"Insufficient balance. Required: {amount}, Available: {format_units(balance, decimals)}"
            )

        self.ensure_allowance(amount_units, decimals)

        deposit_data = (
            Web3.to_bytes(hexstr=get_account_id(self.address, broker_id)),
            Web3.to_bytes(hexstr=broker_hash(broker_id)),
            Web3.to_bytes(hexstr=token_hash("USDC")),
            amount_units & UINT128_MASK,
        )
        fee = self.vault.functions.getDepositFee(self.address, deposit_data).call()
        logger.info(f"Deposit fee: {Web3.from_wei(fee, 'ether')} ETH")

        logger.info(f"Depositing {amount} USDC to Orderly Vault {self.vault_address}...")
        tx_hash, receipt = self._send(self.vault.functions.deposit(deposit_data), value=fee)
        logger.info(f"Transaction confirmed in block: {receipt['blockNumber']}")

        return DepositResult(
            transaction_hash=Web3.to_hex(tx_hash),
            block_number=receipt["blockNumber"],
            vault_address=self.vault_address,
            amount=amount,
            user_address=self.address,
        )
