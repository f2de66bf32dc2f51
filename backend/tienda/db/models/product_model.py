# backend/tienda/db/models/product_model.py
from sqlalchemy import Column, Integer, String, Text, Numeric, CheckConstraint

from tienda.db.database import Base

class Product(Base):
    """
    Producto del catálogo.
    El id se asigna automáticamente cuando llega a 0 o vacío.
    """
    __tablename__ = "productos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)  # Precisión decimal para precios
    image_url = Column(Text, nullable=False, default="")
    category = Column(String(100), nullable=False, default="")
    stock = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("length(name) > 0", name="ck_productos_name_not_empty"),
        CheckConstraint("price >= 0", name="ck_productos_price_nonneg"),
        CheckConstraint("stock >= 0", name="ck_productos_stock_nonneg"),
    )

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r}>"
