#!/usr/bin/env python3
"""Check whether an Orderly account exists for (address, broker_id).

Usage: check_account.py <address> [broker_id] [chain_type]
Exit status 0 when the account exists, 1 otherwise.
"""
import argparse
import logging
import os

from cli import run
from errors import ApiError
from exchanges.orderly import OrderlyClient

logger = logging.getLogger(__name__)

# code 600004: wallet is not registered
NOT_REGISTERED_CODE = 600004
TOO_MANY_REQUESTS = 429


def check_account_exists(client: OrderlyClient, address: str, broker_id: str, chain_type: str = "EVM") -> bool:
    try:
        client.get_account(address, broker_id, chain_type)
    except ApiError as e:
        payload = e.payload if isinstance(e.payload, dict) else {}
        if payload.get("code") == NOT_REGISTERED_CODE:
            logger.info(f"Wallet {address} is not registered with broker {broker_id}")
            return False
        server_failure = e.status_code is not None and (e.status_code >= 500 or e.status_code == TOO_MANY_REQUESTS)
        if payload.get("success") is False and not server_failure:
            logger.warning(f"Account lookup rejected: {e}")
            return False
        raise
    return True


def main(settings) -> int:
    parser = argparse.ArgumentParser(description="Check Orderly account existence")
    parser.add_argument("address", nargs="?", default=os.getenv("ADDRESS"))
    parser.add_argument("broker_id", nargs="?", default=settings.broker_id)
    parser.add_argument("chain_type", nargs="?", default=os.getenv("CHAIN_TYPE", "EVM"))
    args = parser.parse_args()
    if not args.address:
        parser.error("address is required (argument or ADDRESS environment variable)")

    client = OrderlyClient.from_settings(settings, authenticated=False)
    if check_account_exists(client, args.address, args.broker_id, args.chain_type):
        print(f"✓ Account exists for address {args.address} with brokerId {args.broker_id}")
        return 0
    print(f"✗ Account does not exist for address {args.address} with brokerId {args.broker_id}")
    return 1


def entrypoint():
    run(main)


if __name__ == "__main__":
    entrypoint()
