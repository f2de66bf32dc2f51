# backend/tienda/services/cart_service.py
"""
Servicio de Carrito de Compras para la aplicación (Cart Store).

Cada línea es una instantánea del producto más una cantidad. El listado y el
total se pueden observar en vivo: tras cada escritura confirmada que afecta
filas de 'carrito', los suscriptores reciben el resultado recalculado.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from tienda.core.exceptions import ConstraintViolationError
from tienda.crud import cart_crud
from tienda.db.database import Database
from tienda.schemas.cart_schema import CartLineCreate, CartLineResponse
from tienda.schemas.product_schema import ProductResponse
from tienda.services.live_query import LiveQuery

logger = logging.getLogger(__name__)

class CartService:
    """
    Store del carrito.

    No impone una línea por producto: quien llama comprueba con
    get_by_product() antes de insertar, o usa add_product().
    """
    def __init__(self, database: Database):
        self.database = database

    async def _notify(self) -> None:
        await self.database.invalidation_tracker.notify(cart_crud.TABLE)

    async def insert(self, line: CartLineCreate) -> int:
        """
        Inserta una línea nueva y devuelve su id.
        Un id explícito ya existente lanza ConstraintViolationError.
        """
        async with self.database.transaction() as db:
            line_id = await cart_crud.insert_cart_line(db, line)

        logger.info(f"Línea {line_id} añadida al carrito: producto {line.product_id} x{line.quantity}")
        await self._notify()
        return line_id

    async def clear(self) -> int:
        """
        Vacía completamente el carrito; devuelve las líneas borradas.
        """
        async with self.database.transaction() as db:
            deleted = await cart_crud.delete_all_cart_lines(db)

        logger.info(f"Carrito vaciado ({deleted} líneas)")
        if deleted:
            await self._notify()
        return deleted

    async def set_quantity(self, product_id: int, quantity: int) -> int:
        """
        Cambia la cantidad de la línea del producto.
        Sin línea para ese producto no hace nada y devuelve 0.
        """
        if quantity <= 0:
            raise ConstraintViolationError(f"La cantidad debe ser mayor que 0 (recibido {quantity})")

        async with self.database.transaction() as db:
            updated = await cart_crud.update_quantity(db, product_id, quantity)

        if updated:
            logger.info(f"Cantidad del producto {product_id} en el carrito: {quantity}")
            await self._notify()
        else:
            logger.debug(f"Producto {product_id} no está en el carrito, cantidad sin cambios")
        return updated

    async def remove_by_product(self, product_id: int) -> int:
        """
        Elimina la línea del producto; 0 si no estaba.
        """
        async with self.database.transaction() as db:
            deleted = await cart_crud.delete_by_product(db, product_id)

        if deleted:
            logger.info(f"Producto {product_id} eliminado del carrito")
            await self._notify()
        return deleted

    async def get_by_product(self, product_id: int) -> Optional[CartLineResponse]:
        async with self.database.session() as db:
            line = await cart_crud.get_cart_line_by_product(db, product_id)
        return CartLineResponse.model_validate(line) if line else None

    async def list_all(self) -> List[CartLineResponse]:
        """
        Obtiene todas las líneas del carrito (sin orden garantizado).
        """
        async with self.database.session() as db:
            lines = await cart_crud.get_cart_lines(db)
        return [CartLineResponse.model_validate(line) for line in lines]

    async def total(self) -> Optional[Decimal]:
        """
        Suma de price * quantity. None si el carrito está vacío, que no es lo
        mismo que un carrito de valor cero.
        """
        async with self.database.session() as db:
            return await cart_crud.get_cart_total(db)

    async def count(self) -> int:
        async with self.database.session() as db:
            return await cart_crud.count_cart_lines(db)

    def observe_lines(self) -> LiveQuery:
        """Vista en vivo de list_all()."""
        return self.database.invalidation_tracker.live_query(
            [cart_crud.TABLE], self.list_all, name="carrito.list_all"
        )

    def observe_total(self) -> LiveQuery:
        """Vista en vivo de total()."""
        return self.database.invalidation_tracker.live_query(
            [cart_crud.TABLE], self.total, name="carrito.total"
        )

    async def add_product(self, product: ProductResponse, quantity: int = 1) -> CartLineResponse:
        """
        Añade un producto al carrito.
        Si el producto ya existe, suma la cantidad; si no, inserta una instantánea.
        """
        if quantity <= 0:
            raise ConstraintViolationError(f"La cantidad debe ser mayor que 0 (recibido {quantity})")

        existing = await self.get_by_product(product.id)
        if existing:
            await self.set_quantity(product.id, existing.quantity + quantity)
        else:
            await self.insert(CartLineCreate.from_product(product, quantity))

        line = await self.get_by_product(product.id)
        logger.info(f"➕ Añadido al carrito: {product.name} (x{line.quantity})")
        return line
