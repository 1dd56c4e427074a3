"""
Main FastAPI application for the Bookshelf API
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import Settings, settings
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware
from ..store.base import DomainStore
from ..store.factory import create_store

# Configure logging before creating logger
configure_logging(debug=settings.debug, level=settings.log_level)
logger = get_logger(__name__)


def create_app(config: Settings | None = None, store: DomainStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Settings to use (defaults to the global settings)
        store: Pre-built domain store; created from ``config`` when omitted.
            The application opens it at startup and closes it at shutdown.
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("Starting Bookshelf API...")

        domain_store = store or create_store(config)
        await domain_store.open()
        app.state.store = domain_store

        ok, error = await domain_store.ping()
        if ok:
            logger.info("Domain store ready", backend=domain_store.name)
        else:
            logger.error("Domain store unavailable", backend=domain_store.name, error=error)
            if config.is_production:
                await domain_store.close()
                raise RuntimeError(f"Domain store unavailable: {error}")

        yield

        logger.info("Shutting down Bookshelf API...")
        await domain_store.close()

    app = FastAPI(
        title="Bookshelf API",
        description="Books, authors and categories over GraphQL",
        version=__version__,
        lifespan=lifespan,
        debug=config.debug,
    )

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        domain_store: DomainStore = app.state.store
        ok, error = await domain_store.ping()
        body = {
            "status": "healthy" if ok else "unhealthy",
            "version": __version__,
            "store": domain_store.name,
        }
        if error:
            body["error"] = error
        return body

    # GraphQL endpoint (allow disabling for tests)
    if not os.getenv("BOOKSHELF_DISABLE_GRAPHQL"):
        try:
            from ..graphql.schema import create_graphql_router, validate_schema

            logger.info("Validating GraphQL schema...")
            validate_schema()

            graphql_router = create_graphql_router(graphiql=config.graphiql)
            app.include_router(graphql_router, prefix="")
            logger.info("GraphQL endpoint initialized successfully", endpoint="/graphql")
        except Exception as e:  # pragma: no cover
            logger.error("Failed to initialize GraphQL endpoint", error=str(e))
            # Fail fast: the server should not start with a broken schema
            raise

    return app


# Create the main application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bookshelf.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
