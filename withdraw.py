#!/usr/bin/env python3
"""Withdraw funds from the Orderly account to the wallet.

Usage: withdraw.py <amount> [token] [target_chain_id] [broker_id]

Needs both the wallet (PRIVATE_KEY, signs the withdrawal) and the Orderly key
(ACCOUNT_ID / ORDERLY_KEY / ORDERLY_PRIVATE_KEY, authenticates the requests).
"""
import argparse
import logging
import os
from decimal import Decimal, InvalidOperation

from cli import run
from errors import OrderValidationError
from exchanges.orderly import OrderlyClient
from models import WithdrawResult, parse_withdraw_nonce
from wallet import WITHDRAW_VERIFYING_CONTRACT, WalletSigner, parse_units, token_decimals

logger = logging.getLogger(__name__)

MIN_WITHDRAW_AMOUNT = Decimal("1.001")


def get_withdraw_nonce(client: OrderlyClient) -> int:
    nonce = parse_withdraw_nonce(client.withdraw_nonce())
    logger.info(f"Withdrawal nonce: {nonce}")
    return nonce


def check_amount(amount: str) -> None:
    try:
        value = Decimal(amount)
    except InvalidOperation:
        raise OrderValidationError(f"Invalid withdrawal amount: {amount}")
    if not value.is_finite() or value < MIN_WITHDRAW_AMOUNT:
        raise OrderValidationError(f"Withdrawal amount must be at least {MIN_WITHDRAW_AMOUNT}. Got: {amount}")


def withdraw_funds(
    client: OrderlyClient,
    signer: WalletSigner,
    amount: str,
    token: str = "USDC",
    chain_id: int = 80001,
    broker_id: str = "woofi_pro",
) -> WithdrawResult:
    logger.info(f"Withdrawing {amount} {token} for address: {signer.address} "
                f"with brokerId: {broker_id} to chain {chain_id}")

    nonce = get_withdraw_nonce(client)

    decimals = token_decimals(token)
    units = parse_units(amount, decimals)
    logger.info(f"Amount: {amount} {token} = {units} (smallest unit, {decimals} decimals)")

    signed = signer.sign_withdraw(broker_id, chain_id, token, units, nonce)
    message = signed.message
    body = {
        "message": {
            "brokerId": message["brokerId"],
            "chainId": message["chainId"],
            "receiver": message["receiver"],
            "token": message["token"],
            "amount": str(message["amount"]),
            "withdrawNonce": str(message["withdrawNonce"]),
            "timestamp": str(message["timestamp"]),
        },
        "signature": signed.signature,
        "userAddress": signer.address,
        "verifyingContract": WITHDRAW_VERIFYING_CONTRACT,
    }
    resp = client.withdraw_request(body)
    logger.info(f"Withdrawal request accepted: {resp.data_dict()}")

    return WithdrawResult(
        user_address=signer.address,
        amount=amount,
        token=token,
        chain_id=chain_id,
        withdraw_nonce=nonce,
        data=resp.data_dict(),
    )


def main(settings) -> int:
    parser = argparse.ArgumentParser(description="Withdraw funds from Orderly")
    parser.add_argument("amount", nargs="?", default=os.getenv("WITHDRAW_AMOUNT"))
    parser.add_argument("token", nargs="?", default=os.getenv("WITHDRAW_TOKEN", "USDC"))
    parser.add_argument("chain_id", nargs="?", type=int, default=settings.chain_id)
    parser.add_argument("broker_id", nargs="?", default=settings.broker_id)
    args = parser.parse_args()
    if not args.amount:
        parser.error("amount is required (argument or WITHDRAW_AMOUNT environment variable)")
    check_amount(args.amount)

    result = withdraw_funds(
        OrderlyClient.from_settings(settings),
        settings.wallet(),
        args.amount,
        token=args.token,
        chain_id=args.chain_id,
        broker_id=args.broker_id,
    )
    print(f"Amount: {result.amount} {result.token}")
    print(f"Target Chain ID: {result.chain_id}")
    print(f"Withdrawal Nonce: {result.withdraw_nonce}")
    return 0


def entrypoint():
    run(main)


if __name__ == "__main__":
    entrypoint()
