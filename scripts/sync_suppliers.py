"""Sync supplier catalogs into the database, once or on an interval."""
import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from distributor_search.database.db import init_db
from distributor_search.services.sync_service import sync_service
from distributor_search.utils.cache import cache_service
from distributor_search.utils.config import settings
from distributor_search.analytics.logger import logger


async def run_once(supplier_id=None) -> bool:
    """One sync pass. Returns False when any supplier ended in error."""
    if supplier_id is not None:
        results = [await sync_service.sync_supplier(supplier_id)]
    else:
        results = await sync_service.sync_all_suppliers()

    for result in results:
        logger.info(
            f"Supplier {result.get('supplier', result['supplier_id'])}: {result['status']} "
            f"({result.get('products_synced', 0)} products, {len(result.get('errors', []))} errors)"
        )
    return all(r["status"] != "error" for r in results)


async def run_forever(interval_hours: float, supplier_id=None):
    """Sync every ``interval_hours`` until interrupted."""
    logger.info(f"Supplier sync scheduled every {interval_hours}h")
    while True:
        try:
            await run_once(supplier_id)
        except Exception as e:
            logger.error(f"Scheduled sync failed: {e}", exc_info=True)
        await asyncio.sleep(interval_hours * 3600)


async def main(args) -> int:
    init_db()
    if settings.cache_enabled:
        await cache_service.connect()
    try:
        if args.loop:
            await run_forever(args.interval_hours, args.supplier)
            return 0
        return 0 if await run_once(args.supplier) else 1
    finally:
        await cache_service.disconnect()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Sync supplier catalogs into the database")
    parser.add_argument("--supplier", type=int, default=None, help="Sync only this supplier id")
    parser.add_argument("--loop", action="store_true", help="Keep running and sync on an interval")
    parser.add_argument(
        "--interval-hours",
        type=float,
        default=settings.sync_interval_hours,
        help="Hours between runs with --loop (default: %(default)s)",
    )
    return parser.parse_args(argv)


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main(parse_args())))
    except KeyboardInterrupt:
        logger.info("Sync stopped")
