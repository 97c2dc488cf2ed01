#!/usr/bin/env python3
"""Deposit USDC from the wallet into its Orderly account.

Usage: deposit.py <amount> [broker_id] [chain_id]
"""
import argparse
import logging
import os

from cli import run
from errors import ConfigError
from exchanges.vault import VaultClient
from models import DepositResult

logger = logging.getLogger(__name__)


def deposit_usdc(vault: VaultClient, amount: str, broker_id: str) -> DepositResult:
    logger.info(f"Depositing {amount} USDC for address: {vault.address} with brokerId: {broker_id}")
    return vault.deposit(amount, broker_id)


def main(settings) -> int:
    parser = argparse.ArgumentParser(description="Deposit USDC to Orderly")
    parser.add_argument("amount", nargs="?", default=os.getenv("DEPOSIT_AMOUNT"))
    parser.add_argument("broker_id", nargs="?", default=settings.broker_id)
    parser.add_argument("chain_id", nargs="?", type=int, default=settings.chain_id)
    args = parser.parse_args()
    if not args.amount:
        parser.error("amount is required (argument or DEPOSIT_AMOUNT environment variable)")
    if not settings.private_key:
        raise ConfigError("PRIVATE_KEY environment variable is required")

    vault = VaultClient.for_chain(
        args.chain_id,
        settings.private_key,
        rpc_url=settings.rpc_url or None,
        vault_address=settings.vault_address or None,
    )
    result = deposit_usdc(vault, args.amount, args.broker_id)
    print(f"Transaction Hash: {result.transaction_hash}")
    print(f"Vault Address: {result.vault_address}")
    print(f"Amount: {result.amount} USDC")
    return 0


def entrypoint():
    run(main)


if __name__ == "__main__":
    entrypoint()
