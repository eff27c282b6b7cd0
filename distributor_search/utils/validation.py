"""Configuration and environment validation."""
from distributor_search.utils.config import settings
from distributor_search.analytics.logger import logger


def validate_config() -> dict:
    """Validate application configuration."""
    issues = []
    warnings = []

    if settings.search_source.lower() not in ("live", "database"):
        issues.append(f"Invalid SEARCH_SOURCE: {settings.search_source}. Use 'live' or 'database'")

    # Supplier credentials
    if not settings.mustek_api_token:
        warnings.append("MUSTEK_API_TOKEN not set - Mustek sync and search will fail")

    if not (settings.axiz_client_id and settings.axiz_client_secret):
        warnings.append("AXIZ_CLIENT_ID/AXIZ_CLIENT_SECRET not set - Axiz serves its demo catalog")

    if not settings.tarsus_api_token:
        warnings.append("TARSUS_API_TOKEN not set - Tarsus returns no products")

    # Database validation
    if "sqlite" in settings.database_url and settings.production_mode:
        warnings.append("Using SQLite - not recommended for production")

    if settings.sync_interval_hours <= 0:
        issues.append("SYNC_INTERVAL_HOURS must be positive")

    # Log results
    if issues:
        for issue in issues:
            logger.error(f"Configuration issue: {issue}")

    if warnings:
        for warning in warnings:
            logger.warning(f"Configuration warning: {warning}")

    return {
        "valid": len(issues) == 0,
        "issues": issues,
        "warnings": warnings
    }
