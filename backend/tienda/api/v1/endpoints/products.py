# backend/tienda/api/v1/endpoints/products.py

"""
Endpoints REST para el catálogo de productos.

Las lecturas y escrituras individuales pasan por CatalogRepository (API
remota con respaldo local); el lote y el vaciado solo afectan al catálogo local.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
import logging

from tienda.api import deps
from tienda.schemas import product_schema
from tienda.services.catalog_repository import CatalogRepository
from tienda.services.product_service import ProductService

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("", response_model=List[product_schema.ProductResponse])
async def list_products(
    repository: CatalogRepository = Depends(deps.get_catalog_repository),
) -> List[product_schema.ProductResponse]:
    """Lista el catálogo ordenado por nombre."""
    return await repository.get_products()


@router.get("/{product_id}", response_model=product_schema.ProductResponse)
async def get_product(
    product_id: int,
    repository: CatalogRepository = Depends(deps.get_catalog_repository),
) -> product_schema.ProductResponse:
    """Obtiene un producto por id."""
    product = await repository.get_product(product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Producto no encontrado")
    return product


@router.post("", response_model=product_schema.ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    *,
    product_in: product_schema.ProductCreate,
    repository: CatalogRepository = Depends(deps.get_catalog_repository),
    product_service: ProductService = Depends(deps.get_product_service),
) -> product_schema.ProductResponse:
    """Crea (o reemplaza, con id explícito existente) un producto."""
    logger.info(f"🆕 PRODUCTO: Creando producto '{product_in.name}'")
    product_id = await repository.create_product(product_in)
    return await product_service.get_by_id(product_id)


@router.post("/batch", response_model=product_schema.ProductIdsResponse, status_code=status.HTTP_201_CREATED)
async def create_products(
    *,
    products_in: List[product_schema.ProductCreate],
    repository: CatalogRepository = Depends(deps.get_catalog_repository),
) -> product_schema.ProductIdsResponse:
    """Inserta un lote de forma atómica: o entran todos o ninguno."""
    ids = await repository.insert_products(products_in)
    return product_schema.ProductIdsResponse(ids=ids)


@router.put("/{product_id}", response_model=product_schema.ProductResponse)
async def update_product(
    *,
    product_id: int,
    product_in: product_schema.ProductBase,
    repository: CatalogRepository = Depends(deps.get_catalog_repository),
) -> product_schema.ProductResponse:
    """Reemplaza un producto existente; 404 si no existe."""
    logger.info(f"🔄 PRODUCTO: Actualizando producto {product_id}")
    product = product_schema.ProductUpdate(id=product_id, **product_in.model_dump())
    return await repository.update_product(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: int,
    repository: CatalogRepository = Depends(deps.get_catalog_repository),
) -> None:
    """Elimina un producto. Borrar un id inexistente no es un error."""
    await repository.delete_product(product_id)


@router.delete("")
async def delete_all_products(
    repository: CatalogRepository = Depends(deps.get_catalog_repository),
) -> dict:
    """Vacía el catálogo local. Las líneas del carrito se conservan."""
    deleted = await repository.delete_all_products()
    return {"deleted": deleted}
