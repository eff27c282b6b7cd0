"""FastAPI dependency providers for the shared service instances."""
from distributor_search.services.product_aggregator import ProductAggregator, product_aggregator
from distributor_search.services.sync_jobs import SyncJobRunner, sync_job_runner


def get_product_aggregator() -> ProductAggregator:
    return product_aggregator


def get_sync_job_runner() -> SyncJobRunner:
    return sync_job_runner
