# backend/tienda/db/models/schema_model.py
from sqlalchemy import Column, Integer, String

from tienda.db.database import Base

class SchemaMaster(Base):
    """Fila única con el fingerprint del esquema persistido."""
    __tablename__ = "schema_master"

    id = Column(Integer, primary_key=True, autoincrement=False)
    identity_hash = Column(String(64), nullable=False)
