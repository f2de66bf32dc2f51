# backend/tienda/crud/cart_crud.py

"""
Operaciones CRUD para el modelo CartLine (tabla 'carrito').

Como en product_crud, las funciones no confirman; CartService abre la
transacción. Semántica de inserción: "insert or abort". Un id explícito
duplicado hace fallar la inserción, nunca sobrescribe.
"""

from decimal import Decimal
from typing import List, Optional
from sqlalchemy import select, delete, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from tienda.db.models.cart_model import CartLine
from tienda.schemas import cart_schema

TABLE = CartLine.__tablename__

# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

async def get_cart_lines(db: AsyncSession) -> List[CartLine]:
    """Todas las líneas. El orden no forma parte del contrato."""
    result = await db.execute(select(CartLine))
    return list(result.scalars().all())


async def get_cart_line_by_product(db: AsyncSession, product_id: int) -> Optional[CartLine]:
    """Primera línea con ese product_id."""
    result = await db.execute(
        select(CartLine).filter(CartLine.product_id == product_id).limit(1)
    )
    return result.scalars().first()


async def get_cart_total(db: AsyncSession) -> Optional[Decimal]:
    """SUM(price * quantity); None con el carrito vacío."""
    result = await db.execute(select(func.sum(CartLine.price * CartLine.quantity)))
    return result.scalar_one()


async def count_cart_lines(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(CartLine))
    return result.scalar_one()


# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE, DELETE)
# ========================================

async def insert_cart_line(db: AsyncSession, line_data: cart_schema.CartLineCreate) -> int:
    """Inserta una línea nueva y devuelve su id."""
    db_line = CartLine(
        id=line_data.id or None,
        product_id=line_data.product_id,
        name=line_data.name,
        description=line_data.description,
        price=line_data.price,
        image_url=line_data.image_url,
        category=line_data.category,
        stock=line_data.stock,
        quantity=line_data.quantity,
    )
    db.add(db_line)
    await db.flush()
    return db_line.id


async def update_quantity(db: AsyncSession, product_id: int, quantity: int) -> int:
    """Cambia la cantidad de las líneas de ese producto; devuelve las filas afectadas."""
    result = await db.execute(
        update(CartLine)
        .where(CartLine.product_id == product_id)
        .values(quantity=quantity)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def delete_by_product(db: AsyncSession, product_id: int) -> int:
    result = await db.execute(
        delete(CartLine)
        .where(CartLine.product_id == product_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def delete_all_cart_lines(db: AsyncSession) -> int:
    result = await db.execute(delete(CartLine).execution_options(synchronize_session=False))
    return result.rowcount
