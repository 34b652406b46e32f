import uvicorn

from registry_api.core.config import settings


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    uvicorn.run(
        "registry_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.ENVIRONMENT == "development",
    )


if __name__ == "__main__":
    run()
