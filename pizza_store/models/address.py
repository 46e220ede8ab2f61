from sqlalchemy import Column, Integer, String
from pizza_store.db.session import Base


class Address(Base):
    __tablename__ = "Address"

    # attributes are snake_case; the physical columns keep the PascalCase names
    id = Column("Id", Integer, primary_key=True, index=True)
    name = Column("Name", String(100), nullable=False)
    line1 = Column("Line1", String(100), nullable=False)
    line2 = Column("Line2", String(100), nullable=True)
    city = Column("City", String(50), nullable=False)
    region = Column("Region", String(20), nullable=False)
    postal_code = Column("PostalCode", String(20), nullable=False)
