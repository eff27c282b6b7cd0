"""Database initialization script."""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from distributor_search.database.db import init_db, engine
from distributor_search.analytics.logger import logger
from sqlalchemy import inspect

EXPECTED_TABLES = ["suppliers", "products", "price_history", "sync_logs"]


def initialize_database() -> bool:
    """Create all tables, seed the default suppliers and report what exists."""
    try:
        logger.info("Initializing database...")
        init_db()

        existing_tables = inspect(engine).get_table_names()
        logger.info("Database tables:")
        missing = 0
        for table in EXPECTED_TABLES:
            if table in existing_tables:
                logger.info(f"  [OK] {table}")
            else:
                missing += 1
                logger.warning(f"  [WARN] {table} (missing)")

        if missing:
            return False
        logger.info("[SUCCESS] Database initialization complete!")
        return True

    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)
        return False


if __name__ == "__main__":
    success = initialize_database()
    sys.exit(0 if success else 1)
