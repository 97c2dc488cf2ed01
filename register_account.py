#!/usr/bin/env python3
"""Register the wallet (PRIVATE_KEY) as an Orderly account for a broker.

Usage: register_account.py [broker_id] [chain_id]
"""
import argparse
import logging

from check_account import check_account_exists
from cli import run
from exchanges.orderly import OrderlyClient
from models import RegistrationResult
from wallet import WalletSigner

logger = logging.getLogger(__name__)


def register_account(client: OrderlyClient, signer: WalletSigner, broker_id: str, chain_id: int) -> RegistrationResult:
    address = signer.address
    logger.info(f"Registering account for address: {address} with brokerId: {broker_id}")

    if check_account_exists(client, address, broker_id):
        logger.info(f"Account already exists for address {address} and brokerId {broker_id}")
        return RegistrationResult(user_address=address, created=False)

    nonce = client.registration_nonce()
    logger.info(f"Registration nonce: {nonce}")

    signed = signer.sign_registration(broker_id, chain_id, nonce)
    resp = client.register_account(signed.message, signed.signature, address)
    data = resp.data_dict()
    logger.info(f"Registration successful: {data}")
    return RegistrationResult(
        user_address=address,
        created=True,
        account_id=data.get("account_id"),
        data=data,
    )


def main(settings) -> int:
    parser = argparse.ArgumentParser(description="Register an Orderly account")
    parser.add_argument("broker_id", nargs="?", default=settings.broker_id)
    parser.add_argument("chain_id", nargs="?", type=int, default=settings.chain_id)
    args = parser.parse_args()

    client = OrderlyClient.from_settings(settings, authenticated=False)
    result = register_account(client, settings.wallet(), args.broker_id, args.chain_id)
    if result.created:
        print(f"Registered {result.user_address}; account ID: {result.account_id}")
    else:
        print(f"Account already exists for {result.user_address}")
    return 0


def entrypoint():
    run(main)


if __name__ == "__main__":
    entrypoint()
