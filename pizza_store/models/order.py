from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from pizza_store.db.session import Base


class Order(Base):
    __tablename__ = "Orders"

    order_id = Column("OrderId", Integer, primary_key=True, index=True)
    user_id = Column("UserId", String(255), nullable=True)
    # stamped by the order writer, never taken from the client payload
    created_time = Column("CreatedTime", DateTime(timezone=True), nullable=False)
    # NULL when the order has no delivery address (never a zero sentinel)
    delivery_address_id = Column("DeliveryAddressId", Integer, ForeignKey("Address.Id"), nullable=True)
