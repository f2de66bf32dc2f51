# backend/tienda/db/init_data.py
"""
Carga de productos de ejemplo.

Se ejecuta al arrancar la aplicación (SEED_SAMPLE_PRODUCTS) y solo inserta
si el producto 1 no existe, así que es seguro llamarla en cada arranque.
"""

import logging
from decimal import Decimal
from typing import List

from tienda.schemas.product_schema import ProductCreate
from tienda.services.product_service import ProductService

logger = logging.getLogger(__name__)

SAMPLE_PRODUCTS: List[ProductCreate] = [
    ProductCreate(
        id=1,
        name="Catan",
        description="Un clásico juego de estrategia donde los jugadores compiten por colonizar y "
                    "expandirse en la isla de Catan. Ideal para 3-4 jugadores.",
        price=Decimal("29990"),
        image_url="catan",
        category="Juegos de Mesa",
        stock=15,
    ),
    ProductCreate(
        id=2,
        name="Carcassonne",
        description="Un juego de colocación de fichas donde los jugadores construyen el paisaje "
                    "alrededor de la fortaleza medieval de Carcassonne. Ideal para 2-5 jugadores.",
        price=Decimal("24990"),
        image_url="carcassonne",
        category="Juegos de Mesa",
        stock=8,
    ),
    ProductCreate(
        id=3,
        name="Controlador Inalámbrico Xbox Series X",
        description="Experiencia de juego cómoda con botones mapeables y respuesta táctil mejorada. "
                    "Compatible con consolas Xbox y PC.",
        price=Decimal("59990"),
        image_url="xboxcontrol",
        category="Accesorios",
        stock=12,
    ),
    ProductCreate(
        id=4,
        name="Auriculares Gamer HyperX Cloud II",
        description="Sonido envolvente con micrófono desmontable y almohadillas de espuma viscoelástica.",
        price=Decimal("79990"),
        image_url="audifonos",
        category="Accesorios",
        stock=5,
    ),
    ProductCreate(
        id=5,
        name="PlayStation 5",
        description="La consola de última generación de Sony, con gráficos impresionantes y tiempos "
                    "de carga ultrarrápidos.",
        price=Decimal("549990"),
        image_url="play5",
        category="Consolas",
        stock=3,
    ),
    ProductCreate(
        id=6,
        name="PC Gamer ASUS ROG Strix",
        description="Disco sólido NVMe Gen4 de 1TB, lectura hasta 7000 MB/s, ideal para gaming y "
                    "creación de contenido.",
        price=Decimal("1299990"),
        image_url="pcgamer",
        category="Computadores Gamers",
        stock=20,
    ),
    ProductCreate(
        id=7,
        name="Silla Gamer Secretlab Titan",
        description="Soporte ergonómico y personalización ajustable para sesiones de juego prolongadas.",
        price=Decimal("349990"),
        image_url="sillagamer",
        category="Sillas Gamer",
        stock=6,
    ),
    ProductCreate(
        id=8,
        name="Mouse Gamer Logitech G502 HERO",
        description="Sensor de alta precisión y botones personalizables.",
        price=Decimal("49990"),
        image_url="mouse",
        category="Mouse",
        stock=25,
    ),
    ProductCreate(
        id=9,
        name="Mousepad Razer Goliathus Extended Chroma",
        description="Área de juego amplia con iluminación RGB personalizable.",
        price=Decimal("29990"),
        image_url="mousepad",
        category="Mousepad",
        stock=25,
    ),
    ProductCreate(
        id=10,
        name="Polera Gamer Personalizada 'Level-Up'",
        description="Camiseta cómoda y estilizada, personalizable con tu gamer tag.",
        price=Decimal("14990"),
        image_url="polera",
        category="Poleras Personalizadas",
        stock=25,
    ),
]


async def seed_sample_products(product_service: ProductService) -> int:
    """Inserta los productos de ejemplo si el producto 1 no existe; devuelve cuántos insertó."""
    if await product_service.get_by_id(1) is not None:
        logger.info("Catálogo ya inicializado, no se cargan productos de ejemplo")
        return 0

    ids = await product_service.insert_many(SAMPLE_PRODUCTS)
    logger.info(f"✓ {len(ids)} productos de ejemplo cargados")
    return len(ids)
