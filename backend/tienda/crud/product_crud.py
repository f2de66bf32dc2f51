# backend/tienda/crud/product_crud.py

"""
Operaciones CRUD para el modelo Product (tabla 'productos').

Las funciones reciben una AsyncSession y no confirman: la transacción la abre
y la cierra el store (ProductService), de modo que una inserción en lote es
atómica.

Semántica de inserción: "insert or replace". Un id 0 se asigna
automáticamente; un id explícito existente reemplaza la fila.
"""

from typing import List, Optional
from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from tienda.db.models.product_model import Product
from tienda.schemas import product_schema

import logging

logger = logging.getLogger(__name__)

TABLE = Product.__tablename__

# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

async def get_product_by_id(db: AsyncSession, product_id: int) -> Optional[Product]:
    """Obtiene un producto por su id."""
    result = await db.execute(select(Product).filter(Product.id == product_id))
    return result.scalars().first()


async def get_products(db: AsyncSession) -> List[Product]:
    """
    Todos los productos ordenados por nombre ascendente.

    El orden usa la colación binaria de la base de datos (SQLite: por punto de
    código, distingue mayúsculas: "Zeta" < "alfa"). El id desempata.
    """
    result = await db.execute(select(Product).order_by(Product.name.asc(), Product.id.asc()))
    return list(result.scalars().all())


async def count_products(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(Product))
    return result.scalar_one()


# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE, DELETE)
# ========================================

def _apply(db_product: Product, product_data: product_schema.ProductBase) -> Product:
    db_product.name = product_data.name
    db_product.description = product_data.description
    db_product.price = product_data.price
    db_product.image_url = product_data.image_url
    db_product.category = product_data.category
    db_product.stock = product_data.stock
    return db_product


async def insert_product(db: AsyncSession, product_data: product_schema.ProductCreate) -> int:
    """Inserta o reemplaza un producto y devuelve su id."""
    if product_data.id:
        db_product = await db.get(Product, product_data.id)
        if db_product is None:
            db_product = Product(id=product_data.id)
            db.add(db_product)
        _apply(db_product, product_data)
    else:
        db_product = _apply(Product(), product_data)
        db.add(db_product)

    # flush para obtener el id autoincremental y detectar violaciones ya
    await db.flush()
    return db_product.id


async def insert_products(db: AsyncSession, products: List[product_schema.ProductCreate]) -> List[int]:
    """
    Inserta o reemplaza varios productos en la sesión actual; ids en orden de entrada.

    Los ids explícitos se escriben antes que los automáticos: un id asignado
    dentro del lote nunca coincide con uno explícito del mismo lote.
    """
    ids = [0] * len(products)
    explicit_first = sorted(range(len(products)), key=lambda i: products[i].id == 0)
    for index in explicit_first:
        ids[index] = await insert_product(db, products[index])
    return ids


async def update_product(db: AsyncSession, product_data: product_schema.ProductUpdate) -> Optional[Product]:
    """Reemplaza los campos del producto con ese id. None si no existe."""
    db_product = await db.get(Product, product_data.id)
    if db_product is None:
        return None
    _apply(db_product, product_data)
    await db.flush()
    return db_product


async def delete_product(db: AsyncSession, product_id: int) -> int:
    """Elimina el producto con ese id; devuelve las filas borradas (0 o 1)."""
    result = await db.execute(delete(Product).where(Product.id == product_id))
    return result.rowcount


async def delete_all_products(db: AsyncSession) -> int:
    """Elimina todos los productos; devuelve las filas borradas."""
    result = await db.execute(delete(Product))
    return result.rowcount
