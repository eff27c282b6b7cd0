"""Default supplier rows."""

from typing import Any, Dict, List
from sqlalchemy.orm import Session
from distributor_search.database.models import Supplier
from distributor_search.utils.config import settings
from distributor_search.analytics.logger import logger


def default_suppliers() -> List[Dict[str, Any]]:
    """Known distributors. Credentials stay empty; connectors fall back to settings."""
    return [
        {
            "name": "Mustek",
            "slug": "mustek",
            "type": "csv_feed",
            "api_endpoint": settings.mustek_api_url,
            "auth_type": "token",
            "status": "active",
        },
        {
            "name": "Axiz",
            "slug": "axiz",
            "type": "rest_api",
            "api_endpoint": settings.axiz_api_base_url,
            "auth_type": "oauth2",
            "status": "inactive",
        },
        {
            "name": "Tarsus",
            "slug": "tarsus",
            "type": "json_feed",
            "api_endpoint": settings.tarsus_api_url,
            "auth_type": "bearer",
            "status": "inactive",
        },
    ]


def seed_suppliers(db: Session) -> int:
    """Insert any default supplier that does not exist yet. Returns rows added."""
    added = 0
    for row in default_suppliers():
        existing = db.query(Supplier).filter(Supplier.slug == row["slug"]).first()
        if existing:
            continue
        db.add(Supplier(**row))
        added += 1
        logger.info(f"Seeded supplier: {row['name']}")
    db.commit()
    return added
