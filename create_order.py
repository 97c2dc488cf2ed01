#!/usr/bin/env python3
"""Create an order on Orderly Network.

Usage: create_order.py <symbol> <order_type> <side> [price] [quantity] [amount]

    create_order.py PERP_ETH_USDC LIMIT BUY 2000 0.1
    create_order.py PERP_ETH_USDC MARKET BUY undefined undefined 100
"""
import argparse
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from cli import optional_number, run
from errors import OrderValidationError
from exchanges.orderly import OrderlyClient
from models import OrderResult

logger = logging.getLogger(__name__)

ORDER_TYPES = ("LIMIT", "MARKET", "IOC", "FOK", "POST_ONLY", "ASK", "BID")
SIDES = ("BUY", "SELL")
PRICED_TYPES = ("LIMIT", "IOC", "FOK", "POST_ONLY")
SIZED_BY_SIDE_TYPES = ("MARKET", "BID", "ASK")


@dataclass
class OrderParams:
    symbol: str
    order_type: str
    side: str
    order_price: Optional[float] = None
    order_quantity: Optional[float] = None
    order_amount: Optional[float] = None
    visible_quantity: Optional[float] = None
    reduce_only: bool = False
    slippage: Optional[float] = None
    client_order_id: Optional[str] = None
    order_tag: Optional[str] = None
    level: Optional[int] = None
    post_only_adjust: Optional[bool] = None


def validate_order(params: OrderParams) -> None:
    if not params.symbol or not params.order_type or not params.side:
        raise OrderValidationError("Missing required fields: symbol, order_type and side are required")

    order_type = params.order_type.upper()
    side = params.side.upper()
    if order_type not in ORDER_TYPES:
        raise OrderValidationError(
            f"Invalid order type: {params.order_type}. Must be one of: {', '.join(ORDER_TYPES)}")
    if side not in SIDES:
        raise OrderValidationError(f"Invalid side: {params.side}. Must be BUY or SELL")
    if order_type in PRICED_TYPES and params.order_price is None:
        raise OrderValidationError(f"order_price is required for {order_type} orders")
    if params.order_quantity is None and params.order_amount is None:
        raise OrderValidationError("Either order_quantity or order_amount must be provided")

    if order_type in SIZED_BY_SIDE_TYPES:
        if side == "SELL" and params.order_amount is not None:
            raise OrderValidationError(
                "order_amount is not supported for SELL orders with MARKET/BID/ASK order types")
        if side == "BUY" and params.order_quantity is not None:
            raise OrderValidationError(
                "order_quantity is not supported for BUY orders with MARKET/BID/ASK order types")


def build_order_body(params: OrderParams) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "symbol": params.symbol,
        "order_type": params.order_type.upper(),
        "side": params.side.upper(),
    }
    optional = (
        ("order_price", params.order_price),
        ("order_quantity", params.order_quantity),
        ("order_amount", params.order_amount),
        ("visible_quantity", params.visible_quantity),
        ("reduce_only", params.reduce_only),
        ("slippage", params.slippage),
        ("client_order_id", params.client_order_id),
        ("order_tag", params.order_tag),
        ("level", params.level),
        ("post_only_adjust", params.post_only_adjust),
    )
    for key, value in optional:
        if value is not None:
            body[key] = value
    return body


def create_order(client: OrderlyClient, params: OrderParams) -> OrderResult:
    validate_order(params)
    logger.info(f"Creating {params.order_type.upper()} {params.side.upper()} order for {params.symbol}...")

    resp = client.create_order(build_order_body(params))
    data = resp.data_dict()
    logger.info(f"Order created: {data}")
    return OrderResult(
        order_id=data.get("order_id"),
        client_order_id=data.get("client_order_id"),
        data=data,
    )


def main(settings) -> int:
    parser = argparse.ArgumentParser(description="Create an order on Orderly Network")
    parser.add_argument("symbol", help="Trading symbol, e.g. PERP_ETH_USDC")
    parser.add_argument("order_type", help=f"One of {', '.join(ORDER_TYPES)}")
    parser.add_argument("side", help="BUY or SELL")
    parser.add_argument("price", nargs="?", type=optional_number,
                        help="Order price (required for LIMIT/IOC/FOK/POST_ONLY)")
    parser.add_argument("quantity", nargs="?", type=optional_number, help="Quantity in base currency")
    parser.add_argument("amount", nargs="?", type=optional_number,
                        help="Amount in quote currency (MARKET/BID/ASK BUY orders)")
    parser.add_argument("--client-order-id")
    parser.add_argument("--reduce-only", action="store_true")
    args = parser.parse_args()

    params = OrderParams(
        symbol=args.symbol,
        order_type=args.order_type,
        side=args.side,
        order_price=args.price,
        order_quantity=args.quantity,
        order_amount=args.amount,
        client_order_id=args.client_order_id,
        reduce_only=args.reduce_only,
    )
    result = create_order(OrderlyClient.from_settings(settings), params)
    print(f"Order ID: {result.order_id}")
    if result.client_order_id:
        print(f"Client Order ID: {result.client_order_id}")
    return 0


def entrypoint():
    run(main)


if __name__ == "__main__":
    entrypoint()
