#!/usr/bin/env python3
"""Generate a new Orderly key, announce it with a wallet signature and save it.

Usage: add_orderly_key.py [broker_id] [chain_id]
The key pair is written to the .env file as ORDERLY_KEY / ORDERLY_PRIVATE_KEY.
"""
import argparse
import logging

from cli import run
from exchanges.orderly import OrderlyClient
from keys import CredentialStore, EnvFileCredentialStore, generate_orderly_key
from models import AddKeyResult
from wallet import DEFAULT_EXPIRATION_DAYS, DEFAULT_SCOPE, WalletSigner

logger = logging.getLogger(__name__)


def add_orderly_key(
    client: OrderlyClient,
    signer: WalletSigner,
    broker_id: str,
    chain_id: int,
    store: CredentialStore,
    scope: str = DEFAULT_SCOPE,
    expiration_days: int = DEFAULT_EXPIRATION_DAYS,
) -> AddKeyResult:
    logger.info(f"Adding Orderly Key for address: {signer.address} with brokerId: {broker_id}")

    pair = generate_orderly_key()
    logger.info(f"Generated Orderly Key: {pair.orderly_key}")

    signed = signer.sign_add_orderly_key(broker_id, chain_id, pair.orderly_key,
                                         scope=scope, expiration_days=expiration_days)
    resp = client.add_orderly_key(signed.message, signed.signature, signer.address)
    logger.info("Orderly Key added successfully")

    # Only persist keys the server accepted.
    store.save(pair.orderly_key, pair.private_key_hex)
    return AddKeyResult(user_address=signer.address, orderly_key=pair.orderly_key, data=resp.data_dict())


def main(settings) -> int:
    parser = argparse.ArgumentParser(description="Add a new Orderly key")
    parser.add_argument("broker_id", nargs="?", default=settings.broker_id)
    parser.add_argument("chain_id", nargs="?", type=int, default=settings.chain_id)
    parser.add_argument("--scope", default=DEFAULT_SCOPE)
    parser.add_argument("--expiration-days", type=int, default=DEFAULT_EXPIRATION_DAYS)
    args = parser.parse_args()

    client = OrderlyClient.from_settings(settings, authenticated=False)
    result = add_orderly_key(
        client,
        settings.wallet(),
        args.broker_id,
        args.chain_id,
        EnvFileCredentialStore(settings.env_file),
        scope=args.scope,
        expiration_days=args.expiration_days,
    )
    print(f"Generated Orderly Key: {result.orderly_key}")
    print(f"Account Address: {result.user_address}")
    return 0


def entrypoint():
    run(main)


if __name__ == "__main__":
    entrypoint()
