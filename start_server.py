"""Start the FastAPI server."""
import os
import uvicorn

if __name__ == "__main__":
    from distributor_search.utils.config import settings

    # Get configuration from settings
    host = os.getenv("API_HOST", settings.api_host)
    port = int(os.getenv("API_PORT", settings.api_port))
    reload = not settings.production_mode
    log_level = settings.log_level.lower()

    print("=" * 60)
    print("Starting Distributor Search Server")
    print("=" * 60)
    print(f"Server will be available at: http://{host}:{port}")
    print(f"Environment: {settings.environment}")
    print(f"Search source: {settings.search_source}")
    print(f"Reload enabled: {reload}")
    print("Press Ctrl+C to stop the server")
    print("=" * 60)

    uvicorn.run(
        "distributor_search.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level
    )
