#!/usr/bin/env python3
"""Cancel an order on Orderly Network.

Usage: cancel_order.py <order_id> <symbol>
"""
import argparse
import logging

from cli import run
from errors import OrderValidationError
from exchanges.orderly import OrderlyClient
from models import CancelResult

logger = logging.getLogger(__name__)


def cancel_order(client: OrderlyClient, order_id: int, symbol: str) -> CancelResult:
    if not order_id or not symbol:
        raise OrderValidationError("order_id and symbol are required")

    logger.info(f"Cancelling order {order_id} for {symbol}...")
    data = client.cancel_order(order_id, symbol).data_dict()
    logger.info(f"Order cancelled: {data}")
    return CancelResult(order_id=order_id, symbol=symbol, status=data.get("status"), data=data)


def main(settings) -> int:
    parser = argparse.ArgumentParser(description="Cancel an order on Orderly Network")
    parser.add_argument("order_id", type=int)
    parser.add_argument("symbol", help="Trading symbol, e.g. PERP_ETH_USDC")
    args = parser.parse_args()

    result = cancel_order(OrderlyClient.from_settings(settings), args.order_id, args.symbol)
    print(f"Order {result.order_id} ({result.symbol}) status: {result.status}")
    return 0


def entrypoint():
    run(main)


if __name__ == "__main__":
    entrypoint()
