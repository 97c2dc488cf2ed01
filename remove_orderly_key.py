#!/usr/bin/env python3
"""Revoke an Orderly key of the configured account.

Usage: remove_orderly_key.py <orderly_key_to_remove>
"""
import argparse
import logging
import os

from cli import run
from exchanges.orderly import OrderlyClient
from models import RemoveKeyResult

logger = logging.getLogger(__name__)


def remove_orderly_key(client: OrderlyClient, orderly_key: str) -> RemoveKeyResult:
    logger.info(f"Removing Orderly Key: {orderly_key}")
    resp = client.remove_orderly_key(orderly_key)
    logger.info("Orderly Key removed")
    return RemoveKeyResult(removed_orderly_key=orderly_key, data=resp.data_dict())


def main(settings) -> int:
    parser = argparse.ArgumentParser(description="Remove an Orderly key")
    parser.add_argument("orderly_key", nargs="?", default=os.getenv("ORDERLY_KEY_TO_REMOVE"),
                        help="Key to revoke, 'ed25519:...'")
    args = parser.parse_args()
    if not args.orderly_key:
        parser.error("orderly_key is required (argument or ORDERLY_KEY_TO_REMOVE environment variable)")

    result = remove_orderly_key(OrderlyClient.from_settings(settings), args.orderly_key)
    print(f"Removed Orderly Key: {result.removed_orderly_key}")
    return 0


def entrypoint():
    run(main)


if __name__ == "__main__":
    entrypoint()
