# backend/tienda/api/v1/endpoints/cart.py
"""
Endpoints del carrito de compras.

Incluye un stream Server-Sent Events con el total en vivo: cada escritura
confirmada sobre el carrito envía un evento con el total recalculado.
"""

import json
from typing import AsyncIterator, List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from tienda.api import deps
from tienda.schemas.cart_schema import (
    CartLineCreate,
    CartLineResponse,
    CartQuantityUpdate,
    CartTotalResponse,
)
from tienda.services.cart_service import CartService
from tienda.services.product_service import ProductService

router = APIRouter()

@router.get("", response_model=List[CartLineResponse])
async def get_cart(cart_service: CartService = Depends(deps.get_cart_service)):
    """
    Obtiene todas las líneas del carrito.
    """
    return await cart_service.list_all()

@router.delete("", status_code=204)
async def clear_cart(cart_service: CartService = Depends(deps.get_cart_service)):
    """
    Vacía completamente el carrito.
    """
    await cart_service.clear()

@router.get("/total", response_model=CartTotalResponse)
async def get_cart_total(cart_service: CartService = Depends(deps.get_cart_service)):
    """
    Total del carrito. total=null significa carrito vacío.
    """
    return CartTotalResponse(total=await cart_service.total())

async def cart_total_events(cart_service: CartService) -> AsyncIterator[str]:
    """Eventos SSE con el total del carrito; el primero es el valor actual."""
    async with cart_service.observe_total() as live:
        async for total in live:
            payload = CartTotalResponse(total=total).model_dump(mode="json")
            yield f"data: {json.dumps(payload)}\n\n"

@router.get("/total/stream")
async def stream_cart_total(cart_service: CartService = Depends(deps.get_cart_service)):
    """
    Stream Server-Sent Events del total del carrito.
    """
    return StreamingResponse(cart_total_events(cart_service), media_type="text/event-stream")

@router.post("/items", status_code=201, response_model=CartLineResponse)
async def insert_cart_line(
    line: CartLineCreate,
    cart_service: CartService = Depends(deps.get_cart_service),
):
    """
    Inserta una línea tal cual. Un id explícito repetido devuelve 409.
    """
    line_id = await cart_service.insert(line)
    return CartLineResponse(**line.model_dump(exclude={"id"}), id=line_id)

@router.post("/products/{product_id}", status_code=201, response_model=CartLineResponse)
async def add_product_to_cart(
    product_id: int,
    quantity: int = 1,
    product_service: ProductService = Depends(deps.get_product_service),
    cart_service: CartService = Depends(deps.get_cart_service),
):
    """
    Añade un producto del catálogo; si ya está en el carrito suma la cantidad.
    """
    product = await product_service.get_by_id(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Producto no encontrado")
    return await cart_service.add_product(product, quantity)

@router.get("/items/{product_id}", response_model=CartLineResponse)
async def get_cart_line(
    product_id: int,
    cart_service: CartService = Depends(deps.get_cart_service),
):
    line = await cart_service.get_by_product(product_id)
    if not line:
        raise HTTPException(status_code=404, detail="El producto no está en el carrito")
    return line

@router.put("/items/{product_id}")
async def set_cart_quantity(
    product_id: int,
    payload: CartQuantityUpdate,
    cart_service: CartService = Depends(deps.get_cart_service),
):
    """
    Cambia la cantidad; sin línea para el producto no hace nada (updated=0).
    """
    updated = await cart_service.set_quantity(product_id, payload.quantity)
    return {"updated": updated}

@router.delete("/items/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_cart_line(
    product_id: int,
    cart_service: CartService = Depends(deps.get_cart_service),
):
    """
    Elimina un producto del carrito.
    """
    await cart_service.remove_by_product(product_id)
