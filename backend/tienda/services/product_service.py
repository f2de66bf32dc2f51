# backend/tienda/services/product_service.py

"""
Capa de servicios del catálogo de productos (Catalog Store).

Orquesta las operaciones CRUD de product_crud dentro de transacciones,
traduce las filas a esquemas Pydantic y avisa a las consultas en vivo tras
cada escritura confirmada.

Responsabilidades principales:
- Una transacción por operación de escritura; el lote entero o nada
- Rechazo de lotes con ids explícitos repetidos
- Actualización estricta: NotFoundError si el id no existe
- Notificación de cambios sobre la tabla 'productos'
"""

import logging
from collections import Counter
from typing import List, Optional

from tienda.core.exceptions import ConstraintViolationError, NotFoundError
from tienda.crud import product_crud
from tienda.db.database import Database
from tienda.schemas.product_schema import ProductCreate, ProductResponse, ProductUpdate
from tienda.services.live_query import LiveQuery

logger = logging.getLogger(__name__)


class ProductService:
    """
    Store del catálogo.

    Todas las operaciones son corrutinas que devuelven un resultado o lanzan
    una excepción de dominio; el servicio nunca reintenta.
    """

    def __init__(self, database: Database):
        self.database = database

    # ========================================
    # OPERACIONES DE CONSULTA
    # ========================================

    async def get_by_id(self, product_id: int) -> Optional[ProductResponse]:
        """Producto con ese id, o None si no existe."""
        async with self.database.session() as db:
            product = await product_crud.get_product_by_id(db, product_id)
        logger.debug(f"Búsqueda de producto {product_id}: {'encontrado' if product else 'no encontrado'}")
        return ProductResponse.model_validate(product) if product else None

    async def list_all(self) -> List[ProductResponse]:
        """Todos los productos ordenados por nombre."""
        async with self.database.session() as db:
            products = await product_crud.get_products(db)
        return [ProductResponse.model_validate(p) for p in products]

    async def count(self) -> int:
        async with self.database.session() as db:
            return await product_crud.count_products(db)

    def observe_products(self) -> LiveQuery:
        """Vista en vivo de list_all(); se activa con `async with` o start()."""
        return self.database.invalidation_tracker.live_query(
            [product_crud.TABLE], self.list_all, name="productos.list_all"
        )

    # ========================================
    # OPERACIONES DE ESCRITURA
    # ========================================

    async def insert_many(self, products: List[ProductCreate]) -> List[int]:
        """
        Inserta un lote de forma atómica y devuelve los ids en orden de entrada.

        Un id explícito repetido dentro del lote invalida el lote completo.
        """
        explicit_ids = Counter(p.id for p in products if p.id)
        duplicated = sorted(pid for pid, n in explicit_ids.items() if n > 1)
        if duplicated:
            logger.error(f"Lote rechazado: ids explícitos repetidos {duplicated}")
            raise ConstraintViolationError(f"ids de producto repetidos en el lote: {duplicated}")
        if not products:
            return []

        async with self.database.transaction() as db:
            ids = await product_crud.insert_products(db, products)

        logger.info(f"{len(ids)} productos insertados")
        await self.database.invalidation_tracker.notify(product_crud.TABLE)
        return ids

    async def insert_one(self, product: ProductCreate) -> int:
        """Inserta (o reemplaza, con id explícito existente) un producto; devuelve su id."""
        async with self.database.transaction() as db:
            product_id = await product_crud.insert_product(db, product)

        logger.info(f"Producto {product_id} '{product.name}' guardado")
        await self.database.invalidation_tracker.notify(product_crud.TABLE)
        return product_id

    async def update(self, product: ProductUpdate) -> ProductResponse:
        """Reemplaza el producto con ese id. NotFoundError si no existe (nada se escribe)."""
        async with self.database.transaction() as db:
            db_product = await product_crud.update_product(db, product)
            if db_product is None:
                raise NotFoundError("Producto", product.id)
            updated = ProductResponse.model_validate(db_product)

        logger.info(f"Producto {product.id} actualizado")
        await self.database.invalidation_tracker.notify(product_crud.TABLE)
        return updated

    async def delete(self, product_id: int) -> bool:
        """Elimina el producto; devuelve False si no existía (sin error)."""
        async with self.database.transaction() as db:
            deleted = await product_crud.delete_product(db, product_id)

        if deleted:
            logger.info(f"Producto {product_id} eliminado")
            await self.database.invalidation_tracker.notify(product_crud.TABLE)
        return bool(deleted)

    async def delete_all(self) -> int:
        """Elimina todos los productos; los carritos no se tocan."""
        async with self.database.transaction() as db:
            deleted = await product_crud.delete_all_products(db)

        logger.info(f"Catálogo vaciado ({deleted} productos)")
        if deleted:
            await self.database.invalidation_tracker.notify(product_crud.TABLE)
        return deleted
