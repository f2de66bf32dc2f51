# backend/tienda/api/v1/api_router.py
"""
Router principal para la API versión 1.
"""

from fastapi import APIRouter

from tienda.api.v1.endpoints import products, cart

api_router_v1 = APIRouter()

# ROUTER DE PRODUCTOS
# Operaciones del catálogo
api_router_v1.include_router(
    products.router,
    prefix="/products",
    tags=["Products"]
)

# ROUTER DEL CARRITO
# Operaciones del carrito y stream del total en vivo
api_router_v1.include_router(
    cart.router,
    prefix="/cart",
    tags=["Cart"]
)
