"""Supplier connector implementations."""

from distributor_search.services.connectors.mustek_connector import MustekConnector
from distributor_search.services.connectors.axiz_connector import AxizConnector
from distributor_search.services.connectors.tarsus_connector import TarsusConnector

__all__ = [
    "MustekConnector",
    "AxizConnector",
    "TarsusConnector",
]
