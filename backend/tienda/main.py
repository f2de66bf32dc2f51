# backend/tienda/main.py
"""
Punto de entrada principal de la aplicación FastAPI.

Configura la aplicación: logging, rutas de la API, traducción de las
excepciones de dominio a respuestas HTTP y ciclo de vida (apertura de la base
de datos con validación de esquema y carga de productos de ejemplo).
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from tienda.api.v1.api_router import api_router_v1  # Router principal de la API v1
from tienda.core.config import Settings, settings as default_settings
from tienda.core.exceptions import (
    ConstraintViolationError,
    NotFoundError,
    SchemaMismatchError,
    StorageUnavailableError,
)
from tienda.core.logging_config import setup_logging
from tienda.db.database import Database, database as default_database
from tienda.db.init_data import seed_sample_products
from tienda.services.catalog_repository import CatalogRepository
from tienda.services.product_service import ProductService

logger = logging.getLogger(__name__)

# Código HTTP para cada excepción de dominio
ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConstraintViolationError: status.HTTP_409_CONFLICT,
    StorageUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    SchemaMismatchError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def create_app(database: Optional[Database] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Construye la aplicación sobre una base de datos concreta.

    Sin argumentos usa la base de datos y la configuración globales.
    """
    settings = settings or default_settings
    database = database or default_database

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Un SchemaMismatchError aquí detiene el arranque
        await database.init()
        if settings.SEED_SAMPLE_PRODUCTS:
            await seed_sample_products(ProductService(database))
        logger.info(f"🚀 {settings.PROJECT_NAME} v{settings.PROJECT_VERSION} iniciada")
        yield
        await app.state.catalog_repository.aclose()
        await database.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        version=settings.PROJECT_VERSION,
        description="API del catálogo de productos y el carrito de compras",
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.settings = settings
    app.state.catalog_repository = CatalogRepository(ProductService(database), settings)

    async def handle_domain_error(request: Request, exc: Exception) -> JSONResponse:
        status_code = ERROR_STATUS[type(exc)]
        if status_code >= 500:
            logger.error(f"❌ ERROR en {request.url.path}: {exc}")
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    for error_class in ERROR_STATUS:
        app.add_exception_handler(error_class, handle_domain_error)

    app.include_router(api_router_v1, prefix=settings.API_V1_STR)

    @app.get("/", tags=["Root"])
    async def read_root():
        """Health check básico con nombre y versión."""
        return {"message": f"Bienvenido a {settings.PROJECT_NAME} v{settings.PROJECT_VERSION}"}

    return app


setup_logging(default_settings)
app = create_app()
