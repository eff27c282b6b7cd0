"""Lookup from supplier slug to connector class."""
from typing import Dict, Optional, Type
import httpx
from distributor_search.database.schemas import SupplierConfig
from distributor_search.services.supplier_connector import SupplierConnector
from distributor_search.services.connectors import (
    MustekConnector,
    AxizConnector,
    TarsusConnector,
)
from distributor_search.analytics.logger import logger


class ConnectorRegistry:
    """Maps supplier slugs to connector classes.

    Unknown slugs get the base ``SupplierConnector``, whose fetch raises.
    """

    def __init__(self, connectors: Optional[Dict[str, Type[SupplierConnector]]] = None):
        self._connectors: Dict[str, Type[SupplierConnector]] = dict(connectors or {})

    def register(self, slug: str, connector_cls: Type[SupplierConnector]) -> None:
        if slug in self._connectors:
            logger.info(f"Replacing connector for supplier '{slug}' with {connector_cls.__name__}")
        self._connectors[slug] = connector_cls

    def resolve(self, slug: str) -> Type[SupplierConnector]:
        return self._connectors.get(slug, SupplierConnector)

    def get_connector(
        self,
        config: SupplierConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> SupplierConnector:
        connector_cls = self.resolve(config.slug)
        if connector_cls is SupplierConnector:
            logger.warning(f"No connector registered for supplier '{config.slug}'")
        return connector_cls(config, transport=transport)

    @property
    def slugs(self):
        return sorted(self._connectors)


# Global registry instance
connector_registry = ConnectorRegistry(
    {
        "mustek": MustekConnector,
        "axiz": AxizConnector,
        "tarsus": TarsusConnector,
    }
)
