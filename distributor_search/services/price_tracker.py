"""Price history tracking service."""
from typing import List, Dict, Any, Optional
from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session
from sqlalchemy import desc
from distributor_search.database.models import PriceHistory, Product
from distributor_search.analytics.logger import logger


class PriceTracker:
    """Appends a price history row whenever a stored product's price moves."""

    # Differences below half a cent are float noise, not price changes
    TOLERANCE = 0.005

    def has_changed(self, old_price: Optional[float], new_price: Optional[float]) -> bool:
        if new_price is None:
            return False
        if old_price is None:
            return True
        return abs(old_price - new_price) >= self.TOLERANCE

    def record_price_change(
        self,
        db: Session,
        product: Product,
        new_price: Optional[float],
        currency: str = "ZAR",
    ) -> bool:
        """Record ``new_price`` for an existing product if it differs.

        Does not commit; the caller owns the transaction. Returns True when
        a history row was added.
        """
        if not self.has_changed(product.price, new_price):
            return False

        db.add(PriceHistory(
            product_id=product.id,
            price=new_price,
            currency=currency,
            recorded_at=datetime.now(timezone.utc),
        ))
        logger.debug(f"Price change for {product.sku}: {product.price} -> {new_price}")
        return True

    def get_price_history(
        self,
        db: Session,
        product_id: int,
        days: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Price history for a product, newest first.

        Args:
            db: Database session
            product_id: Product row id
            days: Only include records from the last ``days`` days
            limit: Maximum number of records to return
        """
        query = db.query(PriceHistory).filter(PriceHistory.product_id == product_id)

        if days:
            cutoff_date = datetime.now(timezone.utc) - timedelta(days=days)
            query = query.filter(PriceHistory.recorded_at >= cutoff_date)

        query = query.order_by(desc(PriceHistory.recorded_at), desc(PriceHistory.id))
        if limit:
            query = query.limit(limit)

        return [
            {
                "price": record.price,
                "currency": record.currency,
                "recorded_at": record.recorded_at.isoformat() if record.recorded_at else None,
            }
            for record in query.all()
        ]


# Global price tracker instance
price_tracker = PriceTracker()
