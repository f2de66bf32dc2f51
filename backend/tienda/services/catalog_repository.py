# backend/tienda/services/catalog_repository.py

"""
Repositorio de productos con API remota como fuente primaria y el catálogo
local como respaldo.

Estrategia:
1. Las lecturas intentan la API (GET /api/productos). Si la API falla (sin
   red, timeout, código de error, cuerpo vacío o inválido) se devuelven los
   datos locales.
2. La creación se envía a la API y siempre se guarda localmente.
3. La actualización y el borrado se envían a la API y siempre se aplican en
   local, aunque la API falle.
4. Sin PRODUCTS_API_URL configurada el repositorio trabaja solo en local.
"""

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from tienda.core.config import Settings
from tienda.schemas.product_schema import ProductCreate, ProductResponse, ProductUpdate
from tienda.schemas.remote_product_schema import RemoteProduct
from tienda.services.product_service import ProductService

logger = logging.getLogger(__name__)

PRODUCTS_PATH = "/api/productos"


class CatalogRepository:
    """Acceso a productos API-first con fallback al store local."""

    def __init__(self, product_service: ProductService, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.product_service = product_service
        self.base_url = settings.PRODUCTS_API_URL
        self.client = client
        if self.client is None and self.base_url:
            self.client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=settings.PRODUCTS_API_TIMEOUT,
            )

    @property
    def remote_enabled(self) -> bool:
        return self.client is not None

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()

    # ========================================
    # LECTURAS
    # ========================================

    async def get_products(self) -> List[ProductResponse]:
        if not self.remote_enabled:
            return await self.product_service.list_all()

        try:
            logger.info("Intentando obtener productos desde la API remota...")
            response = await self.client.get(PRODUCTS_PATH)
            response.raise_for_status()
            payload = response.json()
            if not payload:
                logger.warning("⚠ Respuesta HTTP correcta pero cuerpo vacío, usando datos locales")
                return await self._local_products()
            products = [self._to_response(RemoteProduct.model_validate(item)) for item in payload]
        except httpx.HTTPStatusError as exc:
            logger.warning(f"⚠ Error HTTP {exc.response.status_code}, usando datos locales")
            return await self._local_products()
        except httpx.HTTPError as exc:
            logger.error(f"✗ Error de red: {exc!r}, usando datos locales")
            return await self._local_products()
        except (ValueError, ValidationError) as exc:
            logger.error(f"✗ Respuesta inválida de la API: {exc}, usando datos locales")
            return await self._local_products()

        logger.info(f"✓ Productos obtenidos de la API: {len(products)} items")
        return products

    async def get_product(self, product_id: int) -> Optional[ProductResponse]:
        if not self.remote_enabled:
            return await self.product_service.get_by_id(product_id)

        try:
            response = await self.client.get(f"{PRODUCTS_PATH}/{product_id}")
            if response.is_success and response.content:
                product = self._to_response(RemoteProduct.model_validate(response.json()))
                logger.debug(f"✓ Producto encontrado en API: {product.name}")
                return product
            logger.warning(f"⚠ Producto {product_id} no encontrado en API (HTTP {response.status_code}), buscando localmente")
        except (httpx.HTTPError, ValueError, ValidationError) as exc:
            logger.error(f"✗ Error al buscar en API: {exc!r}, buscando localmente")
        return await self.product_service.get_by_id(product_id)

    async def _local_products(self) -> List[ProductResponse]:
        products = await self.product_service.list_all()
        if not products:
            logger.warning("Base de datos local vacía")
        else:
            logger.info(f"✓ Productos obtenidos del catálogo local: {len(products)} items")
        return products

    @staticmethod
    def _to_response(remote: RemoteProduct) -> ProductResponse:
        product = remote.to_product()
        return ProductResponse(**product.model_dump())

    # ========================================
    # ESCRITURAS
    # ========================================

    async def insert_products(self, products: List[ProductCreate]) -> List[int]:
        """Solo afecta al catálogo local."""
        return await self.product_service.insert_many(products)

    async def create_product(self, product: ProductCreate) -> int:
        """Crea el producto en la API y siempre lo guarda localmente; devuelve el id local."""
        if self.remote_enabled:
            try:
                response = await self.client.post(PRODUCTS_PATH, json=RemoteProduct.from_product(product, product.id).to_payload())
                response.raise_for_status()
                logger.info("✓ Producto creado en la API")
            except httpx.HTTPError as exc:
                logger.warning(f"⚠ No se pudo crear en la API ({exc!r}), guardando solo localmente")
        return await self.product_service.insert_one(product)

    async def update_product(self, product: ProductUpdate) -> ProductResponse:
        if self.remote_enabled:
            try:
                response = await self.client.put(
                    f"{PRODUCTS_PATH}/{product.id}",
                    json=RemoteProduct.from_product(product, product.id).to_payload(),
                )
                response.raise_for_status()
                logger.info(f"✓ Producto {product.id} actualizado en la API")
            except httpx.HTTPError as exc:
                logger.warning(f"⚠ Error al actualizar en la API: {exc!r}")
        return await self.product_service.update(product)

    async def delete_product(self, product_id: int) -> bool:
        if self.remote_enabled:
            try:
                response = await self.client.delete(f"{PRODUCTS_PATH}/{product_id}")
                response.raise_for_status()
                logger.info(f"✓ Producto {product_id} eliminado de la API")
            except httpx.HTTPError as exc:
                logger.warning(f"⚠ Error al eliminar de la API: {exc!r}")
        return await self.product_service.delete(product_id)

    async def delete_all_products(self) -> int:
        """Solo limpia el catálogo local."""
        return await self.product_service.delete_all()
