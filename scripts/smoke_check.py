#!/usr/bin/env python3
"""
Call each read operation against a running backend and print what comes back.
Failures are printed as the caller-facing payload instead of a traceback.

Usage (from repo root):
  python scripts/smoke_check.py --farmer-id 1
  INTEGRATIONS_MODE=mock python scripts/smoke_check.py --token dev-token
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from mconnect.container import build_services, configure_logging
from mconnect.error_handler import ErrorHandler
from mconnect.integrations.errors import DataAccessError
from mconnect.utils.config_loader import load_client_config


def print_stage(title: str, data):
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    print(json.dumps(data, indent=2, default=str))


def _dump(value):
    if isinstance(value, list):
        return [item.model_dump() for item in value]
    if value is None:
        return None
    return value.model_dump()


async def main(args: argparse.Namespace) -> int:
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)
    config = load_client_config(Path(args.config) if args.config else None)
    if args.base_url:
        config.backend.base_url = args.base_url

    handler = ErrorHandler()
    async with build_services(config) as services:
        if args.token:
            await services.store.set_item("accessToken", args.token)

        print_stage("Current user", _dump(await services.auth.get_current_user()))
        print_stage(f"Farmer {args.farmer_id}", _dump(await services.farmers.get_farmer_by_id(args.farmer_id)))
        print_stage("Farmer products", _dump(await services.farmers.get_farmer_products(args.farmer_id)))
        print_stage("My orders", _dump(await services.orders.get_orders()))
        print_stage("Cart", _dump(await services.cart.get_cart()))
        print_stage("Categories", _dump(await services.images.get_categories()))

        try:
            print_stage("Incoming orders", _dump(await services.farmer_orders.get_farmer_orders()))
        except DataAccessError as exc:
            print_stage("Incoming orders (failed)", handler.handle_exception(exc, context={"op": "get_farmer_orders"}))
        print_stage("Farmer stats", _dump(await services.farmer_orders.get_farmer_stats()))
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Smoke-check the m-connect data-access layer against a backend")
    parser.add_argument("--base-url", default=None, help="Backend API base URL (overrides config)")
    parser.add_argument("--config", default=None, help="Path to client_config.yml")
    parser.add_argument("--farmer-id", type=int, default=1, help="Farmer to look up")
    parser.add_argument("--token", default=None, help="Bearer token to store before calling")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sys.exit(asyncio.run(main(parser.parse_args())))
