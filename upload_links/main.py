"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations
- Explicit about initialization order

For local development:
    uvicorn upload_links.main:app --reload --port 3000

Or:
    python -m upload_links.main
"""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.routes import health, upload_urls
from .config.settings import Settings, get_settings
from .core.issuance import UploadUrlIssuer
from .core.models import StorageCredential
from .infrastructure.storage import SasTokenSigner, create_storage_client

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup parses the connection string once and builds the storage
    client, signer and issuer that every request shares. A missing or
    malformed connection string raises here, so the service never starts
    serving without a usable credential.
    """
    settings: Settings = app.state.settings

    connection_string = settings.require_connection_string()
    credential = StorageCredential.from_connection_string(connection_string)

    logger.info(
        "Upload Links API starting",
        extra={
            "version": __version__,
            "account": credential.account_name,
            "blob_endpoint": credential.blob_endpoint,
            "container": settings.container_name,
            "mock_mode": settings.storage_mock_mode,
        }
    )

    storage_client = create_storage_client(
        connection_string=connection_string,
        mock_mode=settings.storage_mock_mode,
    )

    app.state.credential = credential
    app.state.storage_client = storage_client
    app.state.issuer = UploadUrlIssuer(
        store=storage_client,
        signer=SasTokenSigner(credential),
        credential=credential,
        container_name=settings.container_name,
        expiry=timedelta(minutes=settings.sas_expiry_minutes),
    )

    try:
        yield
    finally:
        await storage_client.close()
        logger.info("Upload Links API shutting down")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application. Tests pass their own
    Settings; production reads them from the environment.
    """
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    app = FastAPI(
        title=settings.api_title,
        version=__version__,
        description="""
        Issues short-lived, write-only upload URLs for blob storage.

        ## Workflow

        1. **Request URLs**: `POST /upload-urls?count=N`
           - Returns N upload slots, each valid for a few minutes

        2. **Upload**: `PUT <uploadUrl>` directly to storage
           - Headers: `x-ms-blob-type: BlockBlob`, `Content-Type`
           - Body: raw file bytes

        3. **Use**: the file is then at `fileUrl`
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        upload_urls.router,
        prefix="/upload-urls",
        tags=["Upload URLs"],
    )

    # Root endpoint
    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": settings.api_title,
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
            "upload_urls": "/upload-urls",
        }

    logger.debug(
        "FastAPI application created",
        extra={"title": settings.api_title, "version": __version__}
    )

    return app


# Create the application instance
# This is what uvicorn imports
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "upload_links.main:app",
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
