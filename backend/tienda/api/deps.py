# backend/tienda/api/deps.py
"""
Módulo de dependencias para FastAPI.

Centraliza las dependencias inyectables en los endpoints. La base de datos y
el repositorio viven en app.state (los crea main.create_app), así los tests
pueden montar la aplicación sobre una base de datos propia.
"""

from fastapi import Depends, Request

from tienda.db.database import Database
from tienda.services.cart_service import CartService
from tienda.services.catalog_repository import CatalogRepository
from tienda.services.product_service import ProductService

def get_database(request: Request) -> Database:
    """Base de datos asociada a la aplicación."""
    return request.app.state.database

def get_product_service(database: Database = Depends(get_database)) -> ProductService:
    return ProductService(database)

def get_cart_service(database: Database = Depends(get_database)) -> CartService:
    return CartService(database)

def get_catalog_repository(request: Request) -> CatalogRepository:
    return request.app.state.catalog_repository
