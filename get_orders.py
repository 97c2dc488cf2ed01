#!/usr/bin/env python3
"""List orders on Orderly Network, optionally filtered.

Usage: get_orders.py [--symbol S] [--side BUY|SELL] [--status NEW] [--page N] [--size N] ...
"""
import argparse
import json
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from cli import run
from exchanges.orderly import OrderlyClient
from models import OrdersPage

logger = logging.getLogger(__name__)

STATUSES = ("NEW", "CANCELLED", "PARTIAL_FILLED", "FILLED", "REJECTED", "INCOMPLETE", "COMPLETED")
SORTS = ("CREATED_TIME_DESC", "CREATED_TIME_ASC", "UPDATED_TIME_DESC", "UPDATED_TIME_ASC")


@dataclass
class OrderFilters:
    symbol: Optional[str] = None
    side: Optional[str] = None
    order_type: Optional[str] = None
    status: Optional[str] = None
    order_tag: Optional[str] = None
    start_t: Optional[int] = None   # ms
    end_t: Optional[int] = None     # ms
    page: Optional[int] = None      # from 1
    size: Optional[int] = None      # max 500
    sort_by: Optional[str] = None


def build_query(filters: OrderFilters) -> Dict[str, str]:
    """Query parameters in the order they are sent (and signed)."""
    query: Dict[str, str] = {}
    if filters.symbol:
        query["symbol"] = filters.symbol
    if filters.side:
        query["side"] = filters.side.upper()
    if filters.order_type:
        query["order_type"] = filters.order_type.upper()
    if filters.status:
        query["status"] = filters.status.upper()
    if filters.order_tag:
        query["order_tag"] = filters.order_tag
    if filters.start_t is not None:
        query["start_t"] = str(filters.start_t)
    if filters.end_t is not None:
        query["end_t"] = str(filters.end_t)
    if filters.page is not None:
        query["page"] = str(filters.page)
    if filters.size is not None:
        query["size"] = str(filters.size)
    if filters.sort_by:
        query["sort_by"] = filters.sort_by.upper()
    return query


def get_orders(client: OrderlyClient, filters: OrderFilters) -> OrdersPage:
    data = client.get_orders(build_query(filters)).data_dict()
    page = OrdersPage(orders=data.get("rows") or [], meta=data.get("meta"))
    logger.info(f"Fetched {len(page.orders)} orders")
    return page


def main(settings) -> int:
    parser = argparse.ArgumentParser(description="List orders on Orderly Network")
    parser.add_argument("--symbol")
    parser.add_argument("--side", choices=("BUY", "SELL"), type=str.upper)
    parser.add_argument("--order-type", type=str.upper)
    parser.add_argument("--status", choices=STATUSES, type=str.upper)
    parser.add_argument("--order-tag")
    parser.add_argument("--start-t", type=int)
    parser.add_argument("--end-t", type=int)
    parser.add_argument("--page", type=int)
    parser.add_argument("--size", type=int)
    parser.add_argument("--sort-by", choices=SORTS, type=str.upper)
    args = parser.parse_args()

    filters = OrderFilters(
        symbol=args.symbol,
        side=args.side,
        order_type=args.order_type,
        status=args.status,
        order_tag=args.order_tag,
        start_t=args.start_t,
        end_t=args.end_t,
        page=args.page,
        size=args.size,
        sort_by=args.sort_by,
    )
    page = get_orders(OrderlyClient.from_settings(settings), filters)
    print(json.dumps(page.orders, indent=2))
    if page.meta:
        print(f"Page {page.meta.get('current_page')} - {page.meta.get('total')} orders in total")
    return 0


def entrypoint():
    run(main)


if __name__ == "__main__":
    entrypoint()
